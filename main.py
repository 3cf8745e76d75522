"""
Monthly Budget Dashboard - expense and weekly earnings tracker

Records expense transactions and weekly gross earnings in a remote budget
store, derives the monthly/weekly financial summary and displays it as a
console dashboard with a weekly bar chart. Reports can be exported per month.
"""

import argparse
import asyncio
import json
import logging
import sys
import webbrowser
from datetime import date
from src.data.budget_client import BudgetApiClient
from src.data.errors import ValidationError
from src.data.models import Category, DEFAULT_CATEGORY
from src.dashboard.console_display import ConsoleDisplay
from src.dashboard.chart import render_bar_chart
from src.state.app_state import BudgetApp, AppState, TransactionForm, EarningForm, current_month, validate_month
from config.settings import load_config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Monthly budget dashboard")
    _add_display_options(parser)
    parser.set_defaults(month=current_month(), chart=None, no_color=False, json=False)

    # Same options again after the subcommand; SUPPRESS keeps the global values when omitted
    display_options = argparse.ArgumentParser(add_help=False)
    _add_display_options(display_options)

    sub = parser.add_subparsers(dest='command')
    sub.add_parser('show', parents=[display_options], help="Show the dashboard (default)")

    expense = sub.add_parser('add-expense', parents=[display_options], help="Record an expense")
    expense.add_argument('--date', type=_iso_date, required=True)
    expense.add_argument('--amount', type=float, required=True)
    expense.add_argument('--description', required=True)
    expense.add_argument('--category', default=DEFAULT_CATEGORY, choices=Category.values())

    earning = sub.add_parser('add-earning', parents=[display_options], help="Record a weekly earning")
    earning.add_argument('--week', type=int, required=True, choices=range(1, 6))
    earning.add_argument('--gross', type=float, required=True)
    earning.add_argument('--start', type=_iso_date, required=True)
    earning.add_argument('--end', type=_iso_date, required=True)
    earning.add_argument('--description', required=True)

    export = sub.add_parser('export', parents=[display_options], help="Export the monthly report")
    target = export.add_mutually_exclusive_group()
    target.add_argument('--output', help="Download the report to this file")
    target.add_argument('--open', action='store_true', help="Open the report in a browser")

    return parser


def _add_display_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--month', default=argparse.SUPPRESS, help="Month to show (YYYY-MM), default current")
    parser.add_argument('--chart', default=argparse.SUPPRESS, help="Also write the weekly bar chart to this PNG file")
    parser.add_argument('--no-color', action='store_true', default=argparse.SUPPRESS, help="Disable ANSI colours")
    parser.add_argument('--json', action='store_true', default=argparse.SUPPRESS,
                        help="Print the summary as JSON instead of the dashboard")


async def run(args: argparse.Namespace) -> int:
    """Apply the requested command and display the dashboard."""
    try:
        config = load_config()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    logging.getLogger().setLevel(config['app']['log_level'])

    client = BudgetApiClient(config['api'])
    app = BudgetApp(client, AppState())
    display = ConsoleDisplay(
        use_colors=config['app']['use_colors'] and not args.no_color,
        currency_label=config['app']['currency_label'],
    )

    command = args.command or 'show'
    if command == 'export':
        try:
            app.state.selected_month = validate_month(args.month)
        except ValidationError as e:
            display.show_notice(str(e))
            return 1
        if getattr(args, 'output', None):
            path = await app.export_report(args.output)
            if path:
                print(f"Report saved to {path}")
        else:
            url = app.export_url()
            print(url)
            if getattr(args, 'open', False):
                webbrowser.open(url)
        if app.state.notice:
            display.show_notice(app.state.notice)
            return 1
        return 0

    await app.change_month(args.month)
    if command == 'add-expense':
        app.state.active_tab = 'transactions'
        await app.submit_transaction(TransactionForm(
            day=args.date, amount=args.amount, description=args.description, category=args.category,
        ))
    elif command == 'add-earning':
        app.state.active_tab = 'earnings'
        await app.submit_earning(EarningForm(
            week_number=args.week, gross_amount=args.gross,
            start_date=args.start, end_date=args.end, description=args.description,
        ))
    notice = app.state.notice

    if args.json:
        print(json.dumps(app.state.summary.to_dict(), indent=2, ensure_ascii=False))
    else:
        display.show_dashboard(app.state.summary, app.state.selected_month)

    chart_path = args.chart or config['app']['chart_path']
    if chart_path:
        try:
            render_bar_chart(app.state.summary, chart_path, config['app']['currency_label'])
        except OSError as e:
            logger.error(f"Failed to write chart: {e}")
            notice = notice or f"Failed to write chart: {e}"

    if notice:
        display.show_notice(notice)
        return 1
    return 0


def main() -> None:
    """Main application entry point."""
    args = build_parser().parse_args()
    logger.info("Starting Monthly Budget Dashboard...")
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
