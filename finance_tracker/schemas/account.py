"""
Pydantic schemas for account operations.

The balance is only settable at creation. Afterwards it moves
through transactions, transfers and add-funds.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from finance_tracker.models.enums import AccountKind


class AccountCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    account_type: AccountKind = AccountKind.CASH
    balance: Decimal = Field(default=Decimal("0"), ge=0, max_digits=19, decimal_places=4)


class AccountUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    account_type: AccountKind | None = None


class AccountResponse(BaseModel):
    id: int
    owner_id: int
    name: str
    account_type: AccountKind
    account_number: str
    balance: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TransferRequest(BaseModel):
    source_account_id: int
    destination_account_id: int
    # Sign is checked by the ledger engine so the rejection reads
    # the same for API and service callers.
    amount: Decimal = Field(max_digits=19, decimal_places=4)


class AddFundsRequest(BaseModel):
    amount: Decimal = Field(max_digits=19, decimal_places=4)


class TransferResponse(BaseModel):
    source: AccountResponse
    destination: AccountResponse
    amount: Decimal
