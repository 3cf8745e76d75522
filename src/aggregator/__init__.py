"""Aggregator package for financial summary computation."""

from .summary_aggregator import (
    SummaryAggregator, FinancialSummary, MonthlySummary, WeeklySummary, compute_summary
)

__all__ = ['SummaryAggregator', 'FinancialSummary', 'MonthlySummary', 'WeeklySummary', 'compute_summary']
