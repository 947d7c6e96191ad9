# main.py

import argparse
import os
import sys
from typing import List, Optional

# 直接以脚本运行时，确保项目根目录在 Python 路径上
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from loguru import logger
from rich.console import Console

from cli.cli_interface import CLIInterface
from spdb.storage.exceptions import DatabaseFatalError
from spdb.storage.table import db_open


def configure_logging(level: str = "WARNING") -> None:
    """日志只输出到 stderr，避免和查询结果混在一起"""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    logger.enable("spdb")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="spdb", description="基于分页文件的单表记录存储")
    parser.add_argument("filename", nargs="?", help="数据库文件路径")
    parser.add_argument("--log-level", default="WARNING", help="日志级别（默认 WARNING）")
    parser.add_argument("--pretty", action="store_true", help="以表格形式显示 select 结果")
    return parser


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """主函数，打开数据库并启动交互式命令行。返回进程退出码。"""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    console = console or Console()

    if not args.filename:
        console.print("Must supply a database filename.", markup=False, highlight=False)
        return 1

    try:
        table = db_open(args.filename)
        cli = CLIInterface(table, console=console, pretty=args.pretty)
        return cli.run()
    except DatabaseFatalError as e:
        # 致命错误：只在这里终止进程，不做清理
        logger.error(f"致命错误: {e}")
        console.print(str(e), markup=False, highlight=False)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
