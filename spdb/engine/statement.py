# -*- coding: utf-8 -*-
"""
语句准备（前端）。

把一行输入文本转换为内部的 Statement：
- 以 '.' 开头的是元命令（目前只有 .exit）
- insert sl_no year company model power
- select
"""

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

from loguru import logger

from spdb.storage.row import Row, COLUMN_COMPANY_SIZE, COLUMN_MODEL_SIZE

if TYPE_CHECKING:
    from spdb.storage.table import Table

UINT32_MAX = 2 ** 32 - 1


class MetaCommandResult(Enum):
    """元命令执行结果"""
    SUCCESS = "SUCCESS"
    EXIT = "EXIT"
    UNRECOGNIZED = "UNRECOGNIZED"


class PrepareResult(Enum):
    """语句准备结果"""
    SUCCESS = "SUCCESS"
    NEGATIVE_VALUE = "NEGATIVE_VALUE"
    STRING_TOO_LONG = "STRING_TOO_LONG"
    SYNTAX_ERROR = "SYNTAX_ERROR"
    UNRECOGNIZED_STATEMENT = "UNRECOGNIZED_STATEMENT"


class StatementType(Enum):
    INSERT = "INSERT"
    SELECT = "SELECT"


@dataclass
class Statement:
    type: StatementType
    row_to_insert: Optional[Row] = None


def do_meta_command(line: str, table: 'Table') -> MetaCommandResult:
    """处理元命令。.exit 会先有序关闭表（写回并释放所有页）。"""
    if line == ".exit":
        table.close()
        return MetaCommandResult.EXIT
    return MetaCommandResult.UNRECOGNIZED


def _fits_float32(value: float) -> bool:
    try:
        struct.pack('=f', value)
    except OverflowError:
        return False
    return True


def prepare_insert(line: str) -> Tuple[PrepareResult, Optional[Statement]]:
    """解析 insert 语句的五个参数，多余的参数忽略"""
    tokens = line.split()
    if len(tokens) < 6:
        return PrepareResult.SYNTAX_ERROR, None
    _, sl_no, year, company, model, power = tokens[:6]

    try:
        sl_no = int(sl_no)
        year = int(year)
        power = float(power)
    except ValueError:
        return PrepareResult.SYNTAX_ERROR, None

    if sl_no < 0 or year < 0:
        return PrepareResult.NEGATIVE_VALUE, None
    if sl_no > UINT32_MAX or year > UINT32_MAX or not _fits_float32(power):
        return PrepareResult.SYNTAX_ERROR, None
    # 编解码器只做定长拷贝，长度检查在这里完成
    if len(company.encode('utf-8')) > COLUMN_COMPANY_SIZE or len(model.encode('utf-8')) > COLUMN_MODEL_SIZE:
        return PrepareResult.STRING_TOO_LONG, None

    row = Row(sl_no, year, company, model, power)
    return PrepareResult.SUCCESS, Statement(StatementType.INSERT, row)


def prepare_statement(line: str) -> Tuple[PrepareResult, Optional[Statement]]:
    """
    把一行输入转换为 Statement。
    :return: (准备结果, 语句)，失败时语句为 None
    """
    if line.startswith("insert"):
        result, statement = prepare_insert(line)
        if result is not PrepareResult.SUCCESS:
            logger.debug(f"insert 语句准备失败 {result.name}: {line!r}")
        return result, statement
    if line.startswith("select"):
        return PrepareResult.SUCCESS, Statement(StatementType.SELECT)
    return PrepareResult.UNRECOGNIZED_STATEMENT, None
