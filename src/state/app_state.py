"""Mutable application state and its per-event transition functions."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Union
from ..aggregator.summary_aggregator import SummaryAggregator, FinancialSummary
from ..data.budget_client import BudgetApiClient
from ..data.errors import BudgetError, UnknownError, ValidationError
from ..data.models import Category, Transaction, WeeklyEarning, DEFAULT_CATEGORY, WEEK_NUMBERS

logger = logging.getLogger(__name__)

TABS = ('transactions', 'earnings')
MIN_AMOUNT = 0.01


def current_month(today: Optional[date] = None) -> str:
    """Month key (``YYYY-MM``) of today's date."""
    today = today or date.today()
    return f"{today.year}-{today.month:02d}"


def validate_month(month: str) -> str:
    try:
        datetime.strptime(month, '%Y-%m')
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid month '{month}', expected YYYY-MM")
    if len(month) != 7:
        raise ValidationError(f"Invalid month '{month}', expected YYYY-MM")
    return month


@dataclass
class TransactionForm:
    """Pending expense input."""
    day: Optional[date] = None
    amount: Optional[float] = None
    description: str = ''
    category: str = DEFAULT_CATEGORY

    def validate(self) -> None:
        if self.day is None:
            raise ValidationError("Date is required")
        if self.amount is None or abs(self.amount) < MIN_AMOUNT:
            raise ValidationError(f"Amount must be at least {MIN_AMOUNT:.2f}")
        if not self.description.strip():
            raise ValidationError("Description is required")
        if self.category not in Category.values():
            raise ValidationError(
                f"Unknown category '{self.category}', expected one of: {', '.join(Category.values())}"
            )


@dataclass
class EarningForm:
    """Pending weekly earning input."""
    week_number: int = 1
    gross_amount: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: str = ''

    def validate(self) -> None:
        if self.week_number not in WEEK_NUMBERS:
            raise ValidationError(f"Week number must be between 1 and {WEEK_NUMBERS[-1]}")
        if self.gross_amount is None or self.gross_amount < MIN_AMOUNT:
            raise ValidationError(f"Gross amount must be at least {MIN_AMOUNT:.2f}")
        if self.start_date is None or self.end_date is None:
            raise ValidationError("Start and end dates are required")
        if self.start_date > self.end_date:
            raise ValidationError("Start date must not be after end date")
        if not self.description.strip():
            raise ValidationError("Description is required")


@dataclass
class AppState:
    """Everything the dashboard displays for the selected month."""
    selected_month: str = field(default_factory=current_month)
    active_tab: str = 'transactions'
    is_loading: bool = False
    transactions: List[Transaction] = field(default_factory=list)
    earnings: List[WeeklyEarning] = field(default_factory=list)
    summary: FinancialSummary = field(default_factory=FinancialSummary)
    notice: Optional[str] = None
    transaction_form: TransactionForm = field(default_factory=TransactionForm)
    earning_form: EarningForm = field(default_factory=EarningForm)


class BudgetApp:
    """
    Applies user events to an AppState, one at a time.

    Every successful write is followed by a full refresh of the selected
    month. Failures are logged and stored once in ``state.notice``; the last
    successfully loaded data is kept.
    """

    def __init__(
        self,
        client: BudgetApiClient,
        state: Optional[AppState] = None,
        aggregator: Optional[SummaryAggregator] = None
    ):
        self.client = client
        self.state = state or AppState()
        self.aggregator = aggregator or SummaryAggregator()

    async def refresh(self) -> FinancialSummary:
        """Re-fetch the selected month and recompute the summary."""
        state = self.state
        state.notice = None
        state.is_loading = True
        try:
            transactions, earnings = await self.client.fetch_month(state.selected_month)
            summary = self.aggregator.compute_summary(transactions, earnings)
        except BudgetError as e:
            self._report(e, "Failed to load data:")
            return state.summary
        except Exception as e:
            self._report(UnknownError(str(e) or type(e).__name__), "Failed to load data:")
            return state.summary
        finally:
            state.is_loading = False

        state.transactions = transactions
        state.earnings = earnings
        state.summary = summary
        return summary

    async def change_month(self, month: str) -> FinancialSummary:
        self.state.notice = None
        try:
            self.state.selected_month = validate_month(month)
        except ValidationError as e:
            self._report(e, "Invalid month:")
            return self.state.summary
        return await self.refresh()

    async def switch_tab(self, tab: str) -> FinancialSummary:
        self.state.notice = None
        if tab not in TABS:
            self._report(ValidationError(f"Unknown tab '{tab}'"), "Invalid tab:")
            return self.state.summary
        self.state.active_tab = tab
        return await self.refresh()

    async def submit_transaction(self, form: Optional[TransactionForm] = None) -> bool:
        """
        Validate and store an expense, then refresh.

        Returns:
            True if the expense was stored and the month reloaded.
        """
        form = form or self.state.transaction_form
        self.state.notice = None
        try:
            form.validate()
            await self.client.create_transaction(form.day, form.amount, form.description, form.category)
        except BudgetError as e:
            self._report(e, "Failed to save transaction:")
            return False

        await self.refresh()
        if self.state.notice:
            return False
        self.state.transaction_form = TransactionForm()
        return True

    async def submit_earning(self, form: Optional[EarningForm] = None) -> bool:
        """Validate and store a weekly earning, then refresh and advance the week."""
        form = form or self.state.earning_form
        self.state.notice = None
        try:
            form.validate()
            await self.client.create_earning(
                form.week_number, form.gross_amount, form.start_date, form.end_date, form.description
            )
        except BudgetError as e:
            self._report(e, "Failed to save earning:")
            return False

        await self.refresh()
        if self.state.notice:
            return False
        self.state.earning_form = EarningForm(week_number=min(form.week_number + 1, WEEK_NUMBERS[-1]))
        return True

    def export_url(self) -> str:
        return self.client.export_url(self.state.selected_month)

    async def export_report(self, output_path: Union[str, Path]) -> Optional[Path]:
        self.state.notice = None
        try:
            return await self.client.download_export(self.state.selected_month, output_path)
        except BudgetError as e:
            self._report(e, "Failed to export report:")
            return None

    def dismiss_notice(self) -> None:
        self.state.notice = None

    def _report(self, error: BudgetError, context: str) -> None:
        logger.error(f"{context} {error}")
        self.state.notice = f"{context} {error}"
