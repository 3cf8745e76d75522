import json
from datetime import date

import pytest

import main
from main import build_parser, run


@pytest.fixture
def cli_env(monkeypatch, api_url):
    monkeypatch.setenv('BUDGET_API_BASE_URL', api_url)
    monkeypatch.setenv('CONSOLE_COLORS', 'false')
    for name in ('CHART_PATH', 'LOG_LEVEL', 'DEBUG', 'CURRENCY_LABEL', 'BUDGET_API_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)
    return api_url


def seed_january(store):
    store.earnings.append({
        '_id': 'e1', 'weekNumber': 1, 'grossAmount': 1000, 'startDate': '2024-01-01T00:00:00.000Z',
        'endDate': '2024-01-07T00:00:00.000Z', 'description': 'Salary',
    })
    store.transactions.append({
        '_id': 't1', 'date': '2024-01-03T00:00:00.000Z', 'amount': -50,
        'description': 'Cinema', 'category': 'Lazer',
    })


async def run_cli(*argv):
    return await run(build_parser().parse_args(list(argv)))


def test_default_command_is_show():
    args = build_parser().parse_args(['--month', '2024-01'])

    assert args.command is None
    assert args.month == '2024-01'
    assert args.chart is None
    assert args.json is False


def test_month_accepted_after_subcommand():
    args = build_parser().parse_args(['show', '--month', '2024-01'])

    assert args.command == 'show'
    assert args.month == '2024-01'


def test_global_month_kept_when_subcommand_omits_it():
    args = build_parser().parse_args(['--month', '2023-12', 'export'])

    assert args.month == '2023-12'
    assert args.no_color is False


def test_add_expense_arguments():
    args = build_parser().parse_args([
        'add-expense', '--date', '2024-01-03', '--amount', '50', '--description', 'Cinema', '--category', 'Lazer',
    ])

    assert args.date == date(2024, 1, 3)
    assert args.amount == 50.0
    assert args.category == 'Lazer'


def test_add_expense_rejects_unknown_category():
    with pytest.raises(SystemExit):
        build_parser().parse_args([
            'add-expense', '--date', '2024-01-03', '--amount', '5', '--description', 'x', '--category', 'Pets',
        ])


def test_add_earning_rejects_week_six():
    with pytest.raises(SystemExit):
        build_parser().parse_args([
            'add-earning', '--week', '6', '--gross', '10', '--start', '2024-01-01',
            '--end', '2024-01-07', '--description', 'x',
        ])


def test_export_options_are_exclusive():
    with pytest.raises(SystemExit):
        build_parser().parse_args(['export', '--output', 'r.csv', '--open'])


async def test_show_prints_dashboard(cli_env, store, capsys):
    seed_january(store)

    assert await run_cli('show', '--month', '2024-01') == 0

    out = capsys.readouterr().out
    assert 'Month: 2024-01' in out
    assert 'R$ 950.00' in out
    assert 'Lazer' in out


async def test_show_json(cli_env, store, capsys):
    seed_january(store)

    assert await run_cli('--month', '2024-01', '--json') == 0

    data = json.loads(capsys.readouterr().out)
    assert data['monthly']['balance'] == 950
    assert [w['week'] for w in data['weekly']] == [1, 2, 3, 4, 5]


async def test_show_store_failure_exits_with_notice(cli_env, store, capsys):
    store.failures['/api/earnings'] = (503, json.dumps({'message': 'Store offline'}))

    assert await run_cli('show', '--month', '2024-01') == 1

    assert 'Failed to load data: Store offline' in capsys.readouterr().out


async def test_add_expense_stores_and_refreshes(cli_env, store, capsys):
    code = await run_cli('--month', '2024-01', 'add-expense', '--date', '2024-01-03',
                         '--amount', '50', '--description', 'Cinema', '--category', 'Lazer')

    assert code == 0
    assert store.transactions[0]['amount'] == -50.0
    gets = [r for r in store.requests if r[0] == 'GET']
    assert len(gets) == 4
    assert 'R$ 50.00' in capsys.readouterr().out


async def test_add_expense_validation_failure(cli_env, store, capsys):
    code = await run_cli('--month', '2024-01', 'add-expense', '--date', '2024-01-03',
                         '--amount', '0', '--description', 'Cinema')

    assert code == 1
    assert store.transactions == []
    assert 'Failed to save transaction' in capsys.readouterr().out


async def test_add_earning_stores_and_refreshes(cli_env, store, capsys):
    code = await run_cli('add-earning', '--month', '2024-01', '--week', '2', '--gross', '800',
                         '--start', '2024-01-08', '--end', '2024-01-14', '--description', 'Shift')

    assert code == 0
    assert store.earnings[0]['weekNumber'] == 2
    out = capsys.readouterr().out
    assert '08/01/2024 - 14/01/2024' in out
    assert 'R$ 800.00' in out


async def test_export_prints_url(cli_env, capsys):
    assert await run_cli('export', '--month', '2024-01') == 0

    assert capsys.readouterr().out.strip() == f"{cli_env}/export?month=2024-01"


async def test_export_open_uses_browser(cli_env, monkeypatch, capsys):
    opened = []
    monkeypatch.setattr(main.webbrowser, 'open', opened.append)

    assert await run_cli('export', '--month', '2024-01', '--open') == 0

    assert opened == [f"{cli_env}/export?month=2024-01"]


async def test_export_output_writes_file(cli_env, tmp_path, capsys):
    target = tmp_path / 'jan.csv'

    assert await run_cli('export', '--month', '2024-01', '--output', str(target)) == 0

    assert target.read_bytes() == b'report 2024-01'
    assert 'Report saved to' in capsys.readouterr().out


async def test_export_output_to_directory_fails_cleanly(cli_env, tmp_path, capsys):
    assert await run_cli('export', '--month', '2024-01', '--output', str(tmp_path)) == 1

    assert 'Could not write' in capsys.readouterr().out


async def test_export_rejects_bad_month(cli_env, store, capsys):
    assert await run_cli('export', '--month', '2024-1') == 1

    assert store.requests == []
    assert 'Invalid month' in capsys.readouterr().out


async def test_chart_written(cli_env, store, tmp_path):
    seed_january(store)
    chart = tmp_path / 'weekly.png'

    assert await run_cli('--month', '2024-01', '--chart', str(chart)) == 0

    assert chart.read_bytes()[:4] == b'\x89PNG'


async def test_chart_write_failure_is_reported(cli_env, store, tmp_path, capsys):
    assert await run_cli('show', '--month', '2024-01', '--chart', str(tmp_path)) == 1

    assert 'Failed to write chart' in capsys.readouterr().out


async def test_unknown_log_level_does_not_crash(cli_env, monkeypatch, store):
    monkeypatch.setenv('LOG_LEVEL', 'VERBOSE')

    assert await run_cli('show', '--month', '2024-01') == 0
