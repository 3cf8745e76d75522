"""Data package for the budget store client and record types."""

from .budget_client import BudgetApiClient
from .errors import BudgetError, ApiError, NetworkFailure, UnknownError, ValidationError
from .models import Category, Transaction, WeeklyEarning

__all__ = [
    'BudgetApiClient', 'BudgetError', 'ApiError', 'NetworkFailure', 'UnknownError',
    'ValidationError', 'Category', 'Transaction', 'WeeklyEarning',
]
