"""Console display module for rendering the monthly budget dashboard to terminal."""

import logging
from typing import List, Tuple
from datetime import datetime
from ..aggregator.summary_aggregator import FinancialSummary, SummaryAggregator, WeeklySummary
from .chart import build_chart_series

logger = logging.getLogger(__name__)

BAR_WIDTH = 40


class ConsoleDisplay:
    """Handles console-based display of the monthly budget dashboard."""

    def __init__(self, use_colors: bool = True, currency_label: str = 'R$'):
        self.use_colors = use_colors
        self.currency_label = currency_label
        self._setup_colors()
        logger.info("Console Display initialized")

    def _setup_colors(self) -> None:
        if self.use_colors:
            self.colors = {
                'reset': '\033[0m',
                'bold': '\033[1m',
                'green': '\033[92m',
                'red': '\033[91m',
                'yellow': '\033[93m',
                'blue': '\033[94m',
                'cyan': '\033[96m',
                'gray': '\033[90m',
            }
        else:
            self.colors = {k: '' for k in ['reset', 'bold', 'green', 'red', 'yellow', 'blue', 'cyan', 'gray']}

    def show_dashboard(self, summary: FinancialSummary, month: str) -> None:
        self._print_header(month)
        self._print_monthly_summary(summary)
        self._print_categories(SummaryAggregator().top_categories(summary, limit=None))
        self._print_weekly_cards(summary.weekly)
        self._print_weekly_chart(summary)
        self._print_footer(datetime.now())

    def show_notice(self, notice: str) -> None:
        print(f"\n{self.colors['yellow']}⚠️  {notice}{self.colors['reset']}")

    def money(self, amount: float) -> str:
        return f"{self.currency_label} {amount:,.2f}"

    def _signed(self, amount: float) -> str:
        color = self.colors['green'] if amount >= 0 else self.colors['red']
        return f"{color}{self.money(amount)}{self.colors['reset']}"

    def _print_header(self, month: str) -> None:
        print(f"{self.colors['cyan']}{self.colors['bold']}")
        print("╔══════════════════════════════════════════════════════════════╗")
        print("║                  MONTHLY BUDGET DASHBOARD                    ║")
        print(f"║                  Month: {month:<37}║")
        print("╚══════════════════════════════════════════════════════════════╝")
        print(self.colors['reset'])

    def _print_monthly_summary(self, summary: FinancialSummary) -> None:
        monthly = summary.monthly
        print(f"\n{self.colors['bold']}📊 MONTHLY SUMMARY{self.colors['reset']}")
        print("═" * 60)
        print(f"💰 Income:    {self.colors['green']}{self.money(monthly.income)}{self.colors['reset']}")
        print(f"🛒 Expenses:  {self.colors['red']}{self.money(monthly.expenses)}{self.colors['reset']}")
        print(f"⚖️  Balance:   {self._signed(monthly.balance)}")

    def _print_categories(self, categories: List[Tuple[str, float]]) -> None:
        print(f"\n{self.colors['bold']}🏷️  EXPENSES BY CATEGORY{self.colors['reset']}")
        print("═" * 60)
        if not categories:
            print(f"{self.colors['gray']}No expenses recorded{self.colors['reset']}")
            return
        for category, amount in categories:
            print(f"{category:<20} {self.money(amount):>20}")

    def _print_weekly_cards(self, weekly: List[WeeklySummary]) -> None:
        print(f"\n{self.colors['bold']}📅 WEEKLY SUMMARY{self.colors['reset']}")
        print("═" * 60)
        for week in weekly:
            print(f"\n{self.colors['cyan']}Week {week.week}{self.colors['reset']}")
            if week.has_range:
                print(f"   {self.colors['gray']}{week.start_date.strftime('%d/%m/%Y')} - "
                      f"{week.end_date.strftime('%d/%m/%Y')}{self.colors['reset']}")
            print(f"   Income:    {self.money(week.income)}")
            print(f"   Expenses:  {self.money(week.expenses)}")
            print(f"   Balance:   {self._signed(week.balance)}")

    def _print_weekly_chart(self, summary: FinancialSummary) -> None:
        series = build_chart_series(summary, self.currency_label)
        print(f"\n{self.colors['bold']}📈 WEEKLY PERFORMANCE{self.colors['reset']}")
        print("═" * 60)
        peak = max((abs(v) for ds in series['datasets'] for v in ds['data']), default=0.0)
        bar_colors = [self.colors['green'], self.colors['red'], self.colors['blue']]
        for i, label in enumerate(series['labels']):
            print(f"{label}")
            for dataset, color in zip(series['datasets'], bar_colors):
                value = dataset['data'][i]
                length = int(round(abs(value) / peak * BAR_WIDTH)) if peak else 0
                bar = ('-' if value < 0 else '█') * length
                name = dataset['label'].split(' (')[0]
                print(f"  {name:<9}{color}{bar}{self.colors['reset']} {value:,.2f}")

    def _print_footer(self, generated_at: datetime) -> None:
        print(f"\n{self.colors['gray']}" + "─" * 60)
        print(f"Dashboard generated at {generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
        print(f"Monthly Budget Dashboard{self.colors['reset']}\n")
