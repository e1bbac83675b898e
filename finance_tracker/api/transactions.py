"""
Transaction API endpoints.

Every write here also moves the linked account balance(s);
the transaction row and the balance updates are committed in
one database transaction.
"""

from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from finance_tracker.api.deps import commit, get_events, get_owner_id, http_error
from finance_tracker.errors import FinanceTrackerError
from finance_tracker.events import EventBus
from finance_tracker.models.base import get_db
from finance_tracker.schemas.transaction import (
    TransactionWrite,
    TransactionResponse,
)
from finance_tracker.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request: TransactionWrite,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
    events: EventBus = Depends(get_events),
):
    """Record income or an expense."""
    service = TransactionService(db, events)
    try:
        txn = service.create(owner_id, request)
        commit(db)
        return TransactionResponse.from_transaction(txn)
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    start_date: date | None = None,
    end_date: date | None = None,
    category_id: int | None = None,
    account_id: int | None = None,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """List transactions, newest first."""
    transactions = TransactionService(db).list_transactions(
        owner_id,
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        account_id=account_id,
    )
    return [TransactionResponse.from_transaction(t) for t in transactions]


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    try:
        txn = TransactionService(db).get_transaction(owner_id, transaction_id)
        return TransactionResponse.from_transaction(txn)
    except FinanceTrackerError as e:
        raise http_error(e)


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    request: TransactionWrite,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
    events: EventBus = Depends(get_events),
):
    """Edit a transaction; its balance effect moves with it."""
    service = TransactionService(db, events)
    try:
        txn = service.update(owner_id, transaction_id, request)
        commit(db)
        return TransactionResponse.from_transaction(txn)
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: int,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
    events: EventBus = Depends(get_events),
):
    """Delete a transaction and reverse its balance effect."""
    service = TransactionService(db, events)
    try:
        service.delete(owner_id, transaction_id)
        commit(db)
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)
    return Response(status_code=204)
