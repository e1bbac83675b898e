"""
Shared enumerations for database models.

Python enums mapped to database enums, so an invalid account
type or category type is rejected by the database as well as
by request validation.
"""

import enum


class AccountKind(str, enum.Enum):
    """Where the money is held."""
    CASH = "cash"
    PAYPAL = "paypal"
    CRYPTO = "crypto"
    VISA = "visa"
    DEBIT = "debit"


class CategoryType(str, enum.Enum):
    """Determines the sign of a transaction's balance effect."""
    INCOME = "income"
    EXPENSE = "expense"
