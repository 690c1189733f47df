"""
Errors raised by the budget services.

Read paths return None for missing rows. Mutations raise one of
these so the API layer can tell a missing row (404) from bad
input (400) and from a lost race with another writer (409).
"""

from decimal import Decimal


class LedgerError(Exception):
    """Base class for every error raised by the services."""


class NotFoundError(LedgerError, LookupError):
    """A referenced account, envelope or transaction does not exist."""


class ValidationError(LedgerError, ValueError):
    """The request was understood but breaks a ledger rule."""


class UnbalancedTransactionError(ValidationError):
    """The entries of a transaction do not sum to zero."""

    def __init__(self, total: Decimal):
        self.total = total
        super().__init__(
            f"Transaction does not balance: entries sum to {total}"
        )


class ConflictError(LedgerError):
    """
    A row changed between being read and being written.

    Nothing was written. The caller may reload and retry.
    """
