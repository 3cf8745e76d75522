"""Error taxonomy for budget store operations."""

from typing import Optional


class BudgetError(Exception):
    """Base class for every failure surfaced to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkFailure(BudgetError):
    """The request could not complete (connection refused, timeout, ...)."""


class ApiError(BudgetError):
    """The store answered with a non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"


class UnknownError(BudgetError):
    """Anything else, e.g. a payload that could not be parsed."""


class ValidationError(BudgetError):
    """Form input rejected before any request was issued."""
