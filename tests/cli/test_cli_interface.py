import io
import os
import tempfile
import pytest
from unittest.mock import patch
from rich.console import Console
from cli.cli_interface import CLIInterface
from spdb.storage.table import Table, db_open
from spdb.storage.row import ROW_SIZE

@pytest.fixture
def db_path():
    tmpfile = tempfile.NamedTemporaryFile(delete=False)
    tmpfile.close()
    yield tmpfile.name
    os.remove(tmpfile.name)

def make_cli(table, pretty=False):
    out = io.StringIO()
    console = Console(file=out, width=200, color_system=None)
    return CLIInterface(table, console=console, pretty=pretty), out

def test_insert_select_exit(db_path):
    cli, out = make_cli(db_open(db_path))
    code = cli.run(['insert 1 2020 tesla model3 1.5', 'select', '.exit'])
    assert code == 0
    assert out.getvalue() == (
        'spdb > Executed.\n'
        'spdb > (1, 2020, tesla, model3, 1.500000)\n'
        'Executed.\n'
        'spdb > '
    )
    assert cli.table.closed
    assert os.path.getsize(db_path) == ROW_SIZE

def test_error_messages(db_path):
    cli, out = make_cli(db_open(db_path))
    cli.run([
        'insert 1 2020',
        'insert -1 2020 a b 1.0',
        f"insert 1 2020 {'a' * 33} b 1.0",
        'delete 1',
        '.tables',
        '.exit',
    ])
    lines = out.getvalue().split('spdb > ')
    assert lines[1:6] == [
        'Syntax error. Could not parse statement.\n',
        'Serial number and year must be non-negative.\n',
        'String is too long.\n',
        "Unrecognized keyword at start of 'delete 1'.\n",
        "Unrecognized command '.tables'\n",
    ]
    assert cli.table.num_rows == 0

def test_negative_values_rejected_zero_accepted(db_path):
    cli, out = make_cli(db_open(db_path))
    cli.run(['insert 1 -2020 a b 1.0', 'insert -1 2020 a b 1.0', 'insert 0 0 a b 1.0', '.exit'])
    assert out.getvalue().count('Serial number and year must be non-negative.') == 2
    assert out.getvalue().count('Executed.') == 1
    assert cli.table.num_rows == 1

def test_table_full_message(db_path):
    table = Table.open(db_path, page_size=400, max_pages=1)
    cli, out = make_cli(table)
    cli.run(['insert 1 1 a b 1', 'insert 2 2 a b 2', 'insert 3 3 a b 3', '.exit'])
    assert out.getvalue().count('Executed.') == 2
    assert 'Error: Table full.' in out.getvalue()
    assert table.num_rows == 2

def test_end_of_input_closes_table(db_path):
    cli, out = make_cli(db_open(db_path))
    code = cli.run(['insert 1 2020 tesla model3 1.5'])
    assert code == 1
    assert out.getvalue().endswith('spdb > Error reading input\n')
    assert cli.table.closed
    assert os.path.getsize(db_path) == ROW_SIZE

def test_persists_between_sessions(db_path):
    cli, _ = make_cli(db_open(db_path))
    cli.run([f'insert {i} 2000 c m 0.5' for i in range(25)] + ['.exit'])
    cli, out = make_cli(db_open(db_path))
    cli.run(['select', '.exit'])
    rows = [line for line in out.getvalue().splitlines() if line.startswith('spdb > (') or line.startswith('(')]
    assert len(rows) == 25
    assert rows[-1] == '(24, 2000, c, m, 0.500000)'

def test_text_with_brackets_is_printed_verbatim(db_path):
    cli, out = make_cli(db_open(db_path))
    cli.run(['insert 1 2020 [bold]x[/bold] m 1', 'select', '.exit'])
    assert '(1, 2020, [bold]x[/bold], m, 1.000000)' in out.getvalue()

def test_pretty_select(db_path):
    cli, out = make_cli(db_open(db_path), pretty=True)
    cli.run(['insert 7 1999 bmw e46 2.5', 'select', '.exit'])
    text = out.getvalue()
    assert 'company' in text
    assert 'bmw' in text
    assert '2.500000' in text
    assert '(1 rows)' in text

def test_reads_stdin_when_no_lines(db_path):
    cli, out = make_cli(db_open(db_path))
    with patch('builtins.input', side_effect=['select', '.exit']):
        assert cli.run() == 0
    assert out.getvalue() == 'spdb > Executed.\nspdb > '

def test_reads_stdin_until_eof(db_path):
    cli, out = make_cli(db_open(db_path))
    with patch('builtins.input', side_effect=EOFError):
        assert cli.run() == 1
    assert 'Error reading input' in out.getvalue()
