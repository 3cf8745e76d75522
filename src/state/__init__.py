"""Application state and the transitions applied on user events."""

from .app_state import AppState, BudgetApp, TransactionForm, EarningForm, current_month

__all__ = ['AppState', 'BudgetApp', 'TransactionForm', 'EarningForm', 'current_month']
