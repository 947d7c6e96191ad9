# -*- coding: utf-8 -*-
"""
CLI接口模块
封装命令行交互逻辑：读取一行、处理元命令、准备语句、执行并输出结果
"""

from typing import Iterable, Iterator, List, Optional

from loguru import logger
from rich.console import Console
from rich.table import Table as RichTable

from spdb.engine.executor import ExecuteResult, execute_statement
from spdb.engine.statement import (
    MetaCommandResult,
    PrepareResult,
    do_meta_command,
    prepare_statement,
)
from spdb.storage.row import Row
from spdb.storage.table import Table


class CLIInterface:
    """命令行接口类"""

    PROMPT = "spdb > "

    def __init__(self, table: Table, console: Optional[Console] = None, pretty: bool = False):
        self.table = table
        self.console = console or Console()
        self.pretty = pretty

    def _echo(self, message: str = "", end: str = "\n") -> None:
        # 用户数据原样输出，不解析 rich 标记
        self.console.print(message, end=end, markup=False, highlight=False, emoji=False, soft_wrap=True)

    def print_prompt(self) -> None:
        self._echo(self.PROMPT, end="")

    def print_row(self, row: Row) -> None:
        self._echo(f"({row.sl_no}, {row.year}, {row.company}, {row.model}, {row.power:f})")

    def print_rows(self, rows: List[Row]) -> None:
        """打印 select 结果，pretty 模式下用 rich 表格"""
        if not self.pretty:
            for row in rows:
                self.print_row(row)
            return
        table = RichTable(show_header=True, header_style="bold cyan")
        for name in ("sl_no", "year", "company", "model", "power"):
            table.add_column(name)
        for row in rows:
            table.add_row(str(row.sl_no), str(row.year), row.company, row.model, f"{row.power:f}")
        self.console.print(table)
        self.console.print(f"[bold green]({len(rows)} rows)[/bold green]")

    def process_input(self, line: str) -> bool:
        """
        处理一行输入。
        :return: 是否继续主循环（.exit 时为 False）
        """
        if line.startswith('.'):
            result = do_meta_command(line, self.table)
            if result is MetaCommandResult.EXIT:
                return False
            if result is MetaCommandResult.UNRECOGNIZED:
                self._echo(f"Unrecognized command '{line}'")
            return True

        prepare_result, statement = prepare_statement(line)
        if prepare_result is PrepareResult.NEGATIVE_VALUE:
            self._echo("Serial number and year must be non-negative.")
            return True
        if prepare_result is PrepareResult.STRING_TOO_LONG:
            self._echo("String is too long.")
            return True
        if prepare_result is PrepareResult.SYNTAX_ERROR:
            self._echo("Syntax error. Could not parse statement.")
            return True
        if prepare_result is PrepareResult.UNRECOGNIZED_STATEMENT:
            self._echo(f"Unrecognized keyword at start of '{line}'.")
            return True

        execute_result, rows = execute_statement(self.table, statement)
        if execute_result is ExecuteResult.TABLE_FULL:
            self._echo("Error: Table full.")
            return True
        self.print_rows(rows)
        self._echo("Executed.")
        return True

    def _read_lines(self, lines: Optional[Iterable[str]]) -> Iterator[str]:
        if lines is not None:
            yield from lines
            return
        while True:
            try:
                yield input()
            except EOFError:
                return

    def run(self, lines: Optional[Iterable[str]] = None) -> int:
        """
        运行CLI主循环。
        :param lines: 输入行；为 None 时从标准输入读取
        :return: 进程退出码，.exit 为 0，输入意外结束为 1
        """
        source = self._read_lines(lines)
        while True:
            self.print_prompt()
            line = next(source, None)
            if line is None:
                # 输入结束但没有 .exit：仍然关闭表，避免丢失未写回的页
                self._echo("Error reading input")
                logger.warning("输入在 .exit 之前结束")
                self.table.close()
                return 1
            if not self.process_input(line.rstrip("\n")):
                return 0
