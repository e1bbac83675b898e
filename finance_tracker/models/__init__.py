"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from finance_tracker.models.base import Base
from finance_tracker.models.enums import AccountKind, CategoryType
from finance_tracker.models.profile import Profile
from finance_tracker.models.account import Account
from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction

__all__ = [
    "Base",
    "AccountKind",
    "CategoryType",
    "Profile",
    "Account",
    "Category",
    "Transaction",
]
