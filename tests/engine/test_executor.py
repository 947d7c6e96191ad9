import os
import tempfile
import pytest
from unittest.mock import MagicMock
from spdb.engine.executor import ExecuteResult, execute_insert, execute_select, execute_statement
from spdb.engine.statement import Statement, StatementType
from spdb.storage.table import Table, db_open, db_close
from spdb.storage.pager import PAGE_SIZE
from spdb.storage.row import Row, ROW_SIZE

@pytest.fixture
def db_path():
    tmpfile = tempfile.NamedTemporaryFile(delete=False)
    tmpfile.close()
    yield tmpfile.name
    os.remove(tmpfile.name)

@pytest.fixture
def small_table(db_path):
    table = Table.open(db_path, page_size=400, max_pages=2)
    yield table
    db_close(table)

def make_row(i):
    return Row(i, 1990 + i, f'c{i}', f'm{i}', float(i))

def test_insert_and_select(db_path):
    table = db_open(db_path)
    assert execute_insert(table, make_row(1)) is ExecuteResult.SUCCESS
    assert execute_insert(table, make_row(2)) is ExecuteResult.SUCCESS
    assert table.num_rows == 2
    assert list(execute_select(table)) == [make_row(1), make_row(2)]
    db_close(table)

def test_select_empty_table(db_path):
    table = db_open(db_path)
    assert list(execute_select(table)) == []
    db_close(table)

def test_table_full(small_table):
    assert small_table.max_rows == 4
    for i in range(4):
        assert execute_insert(small_table, make_row(i)) is ExecuteResult.SUCCESS
    assert execute_insert(small_table, make_row(99)) is ExecuteResult.TABLE_FULL
    assert small_table.num_rows == 4
    assert [r.sl_no for r in execute_select(small_table)] == [0, 1, 2, 3]

def test_table_full_does_not_touch_pages():
    table = MagicMock()
    table.num_rows = 10
    table.max_rows = 10
    assert execute_insert(table, make_row(1)) is ExecuteResult.TABLE_FULL
    table.row_slot.assert_not_called()
    assert table.num_rows == 10

def test_select_is_restartable(db_path):
    table = db_open(db_path)
    for i in range(30):
        execute_insert(table, make_row(i))
    first = list(execute_select(table))
    second = list(execute_select(table))
    assert first == second
    assert len(first) == 30
    assert table.num_rows == 30
    db_close(table)

def test_select_is_lazy(db_path):
    table = db_open(db_path)
    execute_insert(table, make_row(1))
    rows = execute_select(table)
    assert next(rows) == make_row(1)
    with pytest.raises(StopIteration):
        next(rows)
    db_close(table)

def test_persistence(db_path):
    table = db_open(db_path)
    rows = [make_row(i) for i in range(25)]
    for row in rows:
        execute_insert(table, row)
    db_close(table)
    assert os.path.getsize(db_path) == PAGE_SIZE + 2 * ROW_SIZE
    table = db_open(db_path)
    assert list(execute_select(table)) == rows
    db_close(table)

def test_execute_statement(db_path):
    table = db_open(db_path)
    result, rows = execute_statement(table, Statement(StatementType.INSERT, make_row(5)))
    assert result is ExecuteResult.SUCCESS
    assert rows == []
    result, rows = execute_statement(table, Statement(StatementType.SELECT))
    assert result is ExecuteResult.SUCCESS
    assert rows == [make_row(5)]
    db_close(table)
