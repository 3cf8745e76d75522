"""Record types exchanged with the budget store."""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class Category(str, Enum):
    """Fixed set of expense categories."""
    FOOD = 'Alimentação'
    TRANSPORT = 'Transporte'
    HOUSING = 'Moradia'
    EDUCATION = 'Educação'
    LEISURE = 'Lazer'
    EXPENSES = 'Despesas'
    OTHER = 'Outros'

    @classmethod
    def values(cls):
        return [c.value for c in cls]


DEFAULT_CATEGORY = Category.FOOD.value
WEEK_NUMBERS = range(1, 6)


def parse_date(value: Union[str, date, datetime, None]) -> date:
    """
    Parse a store date into a calendar date.

    Accepts ``YYYY-MM-DD``, ISO timestamps (with or without a trailing ``Z``)
    and already-parsed ``date``/``datetime`` objects.

    Raises:
        ValueError: If the value is empty or not an ISO date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValueError("missing date")
    text = str(value).strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return datetime.strptime(text[:10], '%Y-%m-%d').date()


def parse_optional_date(value: Union[str, date, datetime, None], field_name: str) -> Optional[date]:
    """Like ``parse_date`` but returns None for a missing or invalid value."""
    try:
        return parse_date(value)
    except ValueError:
        logger.warning(f"Ignoring unusable {field_name} {value!r}")
        return None


def to_iso_timestamp(value: date) -> str:
    """Render a calendar date as the ISO timestamp the store expects."""
    return datetime(value.year, value.month, value.day).isoformat() + '.000Z'


class Transaction:
    """A single dated expense entry."""

    def __init__(self, transaction_data: Dict[str, Any]):
        """Initialize transaction from API data."""
        self.transaction_id = str(transaction_data.get('_id') or transaction_data.get('id') or '')
        # Records without a usable date still count toward monthly totals
        self.date = parse_optional_date(transaction_data.get('date'), 'date')
        self.amount = float(transaction_data.get('amount', 0.0))
        self.description = transaction_data.get('description', '')
        # Unknown categories are kept verbatim so no amount is dropped from the summary
        self.category = transaction_data.get('category') or Category.OTHER.value

    def __repr__(self) -> str:
        day = self.date.isoformat() if self.date else '?'
        return f"Transaction({day}, {self.amount:.2f}, {self.category!r})"


class WeeklyEarning:
    """Gross income attributed to a numbered week with explicit date bounds."""

    def __init__(self, earning_data: Dict[str, Any]):
        """Initialize weekly earning from API data."""
        self.earning_id = str(earning_data.get('_id') or earning_data.get('id') or '')
        self.week_number = int(earning_data.get('weekNumber', 0))
        self.gross_amount = float(earning_data.get('grossAmount', 0.0))
        self.start_date = parse_optional_date(earning_data.get('startDate'), 'startDate')
        self.end_date = parse_optional_date(earning_data.get('endDate'), 'endDate')
        self.description = earning_data.get('description', '')

    def covers(self, day: Optional[date]) -> bool:
        """Return True if ``day`` lies in the inclusive [start_date, end_date] range."""
        if day is None or self.start_date is None or self.end_date is None:
            return False
        return self.start_date <= day <= self.end_date

    def __repr__(self) -> str:
        start = self.start_date.isoformat() if self.start_date else '?'
        end = self.end_date.isoformat() if self.end_date else '?'
        return f"WeeklyEarning(week={self.week_number}, gross={self.gross_amount:.2f}, {start}..{end})"
