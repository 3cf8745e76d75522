"""Summary aggregation of monthly transactions and weekly earnings."""

import logging
from typing import Dict, List, Any, Optional, Tuple
from datetime import date
from collections import defaultdict
from dataclasses import dataclass, field
from ..data.models import Transaction, WeeklyEarning, WEEK_NUMBERS

logger = logging.getLogger(__name__)


@dataclass
class MonthlySummary:
    """Totals for the selected month."""
    income: float = 0.0
    expenses: float = 0.0
    balance: float = 0.0
    categories: Dict[str, float] = field(default_factory=dict)


@dataclass
class WeeklySummary:
    """Totals for one numbered week. Placeholders have no date range."""
    week: int
    income: float = 0.0
    expenses: float = 0.0
    balance: float = 0.0
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def has_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None


@dataclass
class FinancialSummary:
    """Derived monthly/weekly aggregation used for display and export."""
    monthly: MonthlySummary = field(default_factory=MonthlySummary)
    weekly: List[WeeklySummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation; missing dates become empty strings."""
        return {
            'monthly': {
                'income': self.monthly.income,
                'expenses': self.monthly.expenses,
                'balance': self.monthly.balance,
                'categories': dict(self.monthly.categories),
            },
            'weekly': [
                {
                    'week': w.week,
                    'income': w.income,
                    'expenses': w.expenses,
                    'balance': w.balance,
                    'startDate': w.start_date.isoformat() if w.start_date else '',
                    'endDate': w.end_date.isoformat() if w.end_date else '',
                }
                for w in self.weekly
            ],
        }


class SummaryAggregator:
    """Aggregates expense transactions and weekly earnings into a FinancialSummary."""

    def compute_summary(
        self,
        transactions: List[Transaction],
        earnings: List[WeeklyEarning]
    ) -> FinancialSummary:
        """
        Compute the monthly and weekly rollups.

        Every earning record yields its own weekly entry, so duplicate week
        numbers both survive. A transaction inside two overlapping earning
        ranges counts toward both weeks.

        Args:
            transactions: Expense transactions of the selected month.
            earnings: Weekly earning records of the selected month.

        Returns:
            FinancialSummary with weekly entries sorted by week number.
        """
        income = sum(e.gross_amount for e in earnings)
        expenses = sum(abs(t.amount) for t in transactions)

        category_totals = defaultdict(float)
        for transaction in transactions:
            category_totals[transaction.category] += abs(transaction.amount)

        weekly = []
        for earning in earnings:
            week_expenses = sum(
                abs(t.amount) for t in transactions if earning.covers(t.date)
            )
            weekly.append(WeeklySummary(
                week=earning.week_number,
                income=earning.gross_amount,
                expenses=week_expenses,
                balance=earning.gross_amount - week_expenses,
                start_date=earning.start_date,
                end_date=earning.end_date,
            ))

        covered = {w.week for w in weekly}
        for week in WEEK_NUMBERS:
            if week not in covered:
                weekly.append(WeeklySummary(week=week))

        # sorted() is stable: duplicate weeks keep their store order
        weekly = sorted(weekly, key=lambda w: w.week)

        summary = FinancialSummary(
            monthly=MonthlySummary(
                income=income,
                expenses=expenses,
                balance=income - expenses,
                categories=dict(category_totals),
            ),
            weekly=weekly,
        )

        logger.info(
            f"Summary computed: {len(transactions)} transactions, {len(earnings)} earnings, "
            f"balance {summary.monthly.balance:.2f}"
        )
        return summary

    def top_categories(self, summary: FinancialSummary, limit: Optional[int] = 5) -> List[Tuple[str, float]]:
        """Categories ordered by spent amount, largest first. ``limit=None`` keeps all."""
        return sorted(
            summary.monthly.categories.items(),
            key=lambda x: x[1],
            reverse=True
        )[:limit]


def compute_summary(
    transactions: List[Transaction],
    earnings: List[WeeklyEarning]
) -> FinancialSummary:
    """Module-level shortcut for ``SummaryAggregator().compute_summary``."""
    return SummaryAggregator().compute_summary(transactions, earnings)
