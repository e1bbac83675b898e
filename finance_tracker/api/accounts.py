"""
Account API endpoints.

Opening, listing, renaming and deleting accounts, plus the
two balance movements that are not transactions: transfers
between accounts and adding funds.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from finance_tracker.api.deps import commit, get_events, get_owner_id, http_error
from finance_tracker.errors import FinanceTrackerError
from finance_tracker.events import EventBus
from finance_tracker.models.base import get_db
from finance_tracker.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AddFundsRequest,
    TransferRequest,
    TransferResponse,
)
from finance_tracker.services.account_service import AccountService
from finance_tracker.services.transaction_service import TransactionService

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
    events: EventBus = Depends(get_events),
):
    """Open an account with an initial balance."""
    service = AccountService(db, events)
    try:
        account = service.create_account(owner_id, request)
        commit(db)
        return account
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return AccountService(db).list_accounts(owner_id)


@router.post("/transfer", response_model=TransferResponse)
def transfer(
    request: TransferRequest,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
    events: EventBus = Depends(get_events),
):
    """
    Move money between two of the owner's accounts.

    Both balance updates are committed together or not at all.
    """
    service = TransactionService(db, events)
    try:
        source, destination = service.transfer(
            owner_id,
            request.source_account_id,
            request.destination_account_id,
            request.amount,
        )
        commit(db)
        return TransferResponse(
            source=AccountResponse.model_validate(source),
            destination=AccountResponse.model_validate(destination),
            amount=request.amount,
        )
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    try:
        return AccountService(db).get_account(owner_id, account_id)
    except FinanceTrackerError as e:
        raise http_error(e)


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    request: AccountUpdate,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
    events: EventBus = Depends(get_events),
):
    """Rename or retype an account. Balances cannot be edited directly."""
    service = AccountService(db, events)
    try:
        account = service.update_account(owner_id, account_id, request)
        commit(db)
        return account
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: int,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
    events: EventBus = Depends(get_events),
):
    service = AccountService(db, events)
    try:
        service.delete_account(owner_id, account_id)
        commit(db)
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)
    return Response(status_code=204)


@router.post("/{account_id}/funds", response_model=AccountResponse)
def add_funds(
    account_id: int,
    request: AddFundsRequest,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
    events: EventBus = Depends(get_events),
):
    service = TransactionService(db, events)
    try:
        account = service.add_funds(owner_id, account_id, request.amount)
        commit(db)
        return account
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)
