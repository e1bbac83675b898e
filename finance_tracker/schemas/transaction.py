"""
Pydantic schemas for transaction operations.

Amounts are accepted as-is here and validated by the
transaction service, which reports every input problem
through the same ValidationError path.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from finance_tracker.models.enums import CategoryType


class TransactionWrite(BaseModel):
    """Body for both create and full update."""
    amount: Decimal = Field(max_digits=19, decimal_places=4)
    category_id: int | None = None
    account_id: int | None = None
    date: dt.date | None = None
    description: str = Field(default="", max_length=255)
    tags: list[str] = Field(default_factory=list)
    payment_method: str = Field(default="cash", max_length=50)
    receipt_url: str | None = Field(default=None, max_length=500)


class TransactionResponse(BaseModel):
    id: int
    owner_id: int
    amount: Decimal
    category_id: int
    category_type: CategoryType
    account_id: int | None
    date: dt.date
    description: str
    tags: list[str]
    payment_method: str
    receipt_url: str | None
    created_at: dt.datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_transaction(cls, txn) -> "TransactionResponse":
        return cls(
            id=txn.id,
            owner_id=txn.owner_id,
            amount=txn.amount,
            category_id=txn.category_id,
            category_type=txn.category.category_type,
            account_id=txn.account_id,
            date=txn.date,
            description=txn.description,
            tags=txn.tags,
            payment_method=txn.payment_method,
            receipt_url=txn.receipt_url,
            created_at=txn.created_at,
        )
