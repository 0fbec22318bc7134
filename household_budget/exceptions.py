"""Exception types raised by the budget engine."""

from __future__ import annotations


class BudgetError(Exception):
    """Base class for all budget engine errors."""


class LedgerValidationError(BudgetError, ValueError):
    """Raised when a mutation receives missing or malformed input."""


class DeleteGuardError(BudgetError, ValueError):
    """Raised when a delete would orphan dependent records."""


class RecordNotFoundError(BudgetError, KeyError):
    """Raised when an update or delete targets an unknown id."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead
        return str(self.args[0]) if self.args else ''


class InvalidMonthError(BudgetError, ValueError):
    """Raised for month tokens that are not ``YYYY-MM``."""


class StaleLedgerError(BudgetError):
    """Raised when a write carries an older revision than the stored record."""
