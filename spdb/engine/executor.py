# -*- coding: utf-8 -*-
"""
执行引擎：insert / select。

- insert 把记录写入第 num_rows 行的槽位，成功后 num_rows 加一；表满时返回 TABLE_FULL，不写入
- select 按行号 0..num_rows 顺序解码，每次调用都从第 0 行重新扫描，只读
"""
from enum import Enum
from typing import Iterator, List, Tuple

from loguru import logger

from spdb.engine.statement import Statement, StatementType
from spdb.storage.row import Row, serialize_row, deserialize_row
from spdb.storage.table import Table


class ExecuteResult(Enum):
    """语句执行结果"""
    SUCCESS = "SUCCESS"
    TABLE_FULL = "TABLE_FULL"


def execute_insert(table: Table, row: Row) -> ExecuteResult:
    if table.num_rows >= table.max_rows:
        logger.warning(f"表已满：{table.num_rows}/{table.max_rows} 行")
        return ExecuteResult.TABLE_FULL

    slot = table.row_slot(table.num_rows)
    serialize_row(row, slot.page, slot.byte_offset)
    table.num_rows += 1
    return ExecuteResult.SUCCESS


def execute_select(table: Table) -> Iterator[Row]:
    for row_num in range(table.num_rows):
        slot = table.row_slot(row_num)
        yield deserialize_row(slot.page, slot.byte_offset)


def execute_statement(table: Table, statement: Statement) -> Tuple[ExecuteResult, List[Row]]:
    """
    根据语句类型分派执行。
    :return: (执行结果, select 返回的行；insert 时为空列表)
    """
    if statement.type is StatementType.INSERT:
        return execute_insert(table, statement.row_to_insert), []
    if statement.type is StatementType.SELECT:
        return ExecuteResult.SUCCESS, list(execute_select(table))
    raise ValueError(f"Unsupported statement type: {statement.type}")
