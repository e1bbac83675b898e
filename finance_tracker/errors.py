"""
Error taxonomy.

Services raise these; the API layer maps them to HTTP
status codes. Rejections are always raised before any
row is written.
"""

from decimal import Decimal


class FinanceTrackerError(Exception):
    """Base class for all application errors."""


class ValidationError(FinanceTrackerError, ValueError):
    """Bad input: non-positive amount, missing category, and so on."""


class InvalidAmountError(ValidationError):
    pass


class SameAccountError(ValidationError):
    pass


class InsufficientFundsError(ValidationError):
    """An operation would drive an account balance below zero."""

    def __init__(self, account_name: str, balance: Decimal, delta: Decimal):
        self.account_name = account_name
        self.balance = balance
        self.delta = delta
        super().__init__(f"Insufficient balance in {account_name} account")


class NotFoundError(FinanceTrackerError, LookupError):
    """A referenced profile, account, category or transaction is absent."""


class ConcurrentModificationError(FinanceTrackerError):
    """Another writer changed a row between our read and our write."""


class CollaboratorError(FinanceTrackerError):
    """An external collaborator (database, OCR, PDF, LLM) failed."""


class ExtractionError(CollaboratorError):
    pass


class InsightError(CollaboratorError):
    pass
