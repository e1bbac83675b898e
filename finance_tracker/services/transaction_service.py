"""
Transaction service — records income and expenses and keeps
account balances in step with them.

Each mutation:
1. Validates the input (positive amount, category, date)
2. Loads the referenced category and accounts, scoped to the owner
3. Asks the ledger engine for the balance plan (this is where
   insufficient funds are rejected, before anything is written)
4. Applies the plan to the account rows
5. Writes the transaction row
6. Flushes, so both land in the same database transaction

The caller controls the commit. Accounts are version-checked
on flush: if another session changed a balance after we read
it, ConcurrentModificationError is raised and the caller rolls
back instead of overwriting the other write.
"""

from datetime import date
from decimal import Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from finance_tracker.errors import (
    CollaboratorError,
    ConcurrentModificationError,
    InsufficientFundsError,
    InvalidAmountError,
    NotFoundError,
    ValidationError,
)
from finance_tracker.events import EventBus, ACCOUNTS_CHANGED, EXPENSES_CHANGED
from finance_tracker.models.account import Account
from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction
from finance_tracker.schemas.transaction import TransactionWrite
from finance_tracker.services import ledger_engine
from finance_tracker.services.ledger_engine import (
    AccountSnapshot,
    EffectPlan,
    TransactionSnapshot,
)

logger = structlog.get_logger(__name__)


def snapshot_account(account: Account) -> AccountSnapshot:
    return AccountSnapshot(
        id=account.id,
        name=account.name,
        balance=Decimal(account.balance),
    )


def snapshot_transaction(txn: Transaction) -> TransactionSnapshot:
    return TransactionSnapshot(
        amount=Decimal(txn.amount),
        category_type=txn.category.category_type,
        account_id=txn.account_id,
    )


class TransactionService:

    def __init__(self, db: Session, events: EventBus | None = None):
        self.db = db
        self.events = events

    # --- Loading and validation ---

    def _get_category(self, owner_id: int, category_id: int) -> Category:
        category = self.db.get(Category, category_id)
        if not category or category.owner_id != owner_id:
            raise NotFoundError("Selected category not found")
        return category

    def _get_account(self, owner_id: int, account_id: int) -> Account:
        account = self.db.get(Account, account_id)
        if not account or account.owner_id != owner_id:
            raise NotFoundError("Selected account not found")
        return account

    def _validate(self, request: TransactionWrite) -> None:
        if request.amount is None or not request.amount.is_finite() or request.amount <= 0:
            raise InvalidAmountError("Please enter a valid amount")
        if request.category_id is None:
            raise ValidationError("Please select a category")
        if request.date is None:
            raise ValidationError("Please select a date")

    def _apply(self, plan: EffectPlan, accounts: dict[int, Account]) -> None:
        for change in plan.changes:
            accounts[change.account_id].balance = change.new_balance

    def _flush(self) -> None:
        try:
            self.db.flush()
        except StaleDataError as e:
            raise ConcurrentModificationError(
                "Account was changed by another request; please retry"
            ) from e
        except SQLAlchemyError as e:
            raise CollaboratorError(f"Database write failed: {e}") from e

    def _publish(self, name: str, owner_id: int, **payload) -> None:
        if self.events is not None:
            self.events.publish(name, {"owner_id": owner_id, **payload})

    # --- Transactions ---

    def create(self, owner_id: int, request: TransactionWrite) -> Transaction:
        """Record a transaction and apply its effect to its account."""
        self._validate(request)
        category = self._get_category(owner_id, request.category_id)

        if request.account_id is not None:
            account = self._get_account(owner_id, request.account_id)
            try:
                change = ledger_engine.compute_create_effect(
                    request.amount,
                    category.category_type,
                    snapshot_account(account),
                )
            except InsufficientFundsError:
                logger.warning(
                    "transaction_rejected",
                    owner_id=owner_id,
                    account_id=account.id,
                    amount=str(request.amount),
                    reason="insufficient_funds",
                )
                raise
            account.balance = change.new_balance

        txn = Transaction(
            owner_id=owner_id,
            amount=request.amount,
            category_id=category.id,
            account_id=request.account_id,
            date=request.date,
            description=request.description.strip(),
            tags=list(request.tags),
            payment_method=request.payment_method,
            receipt_url=request.receipt_url,
        )
        txn.category = category
        self.db.add(txn)
        self._flush()

        logger.info(
            "transaction_created",
            owner_id=owner_id,
            transaction_id=txn.id,
            account_id=txn.account_id,
            amount=str(txn.amount),
            category_type=category.category_type.value,
        )
        self._publish(EXPENSES_CHANGED, owner_id, transaction_id=txn.id)
        return txn

    def update(
        self, owner_id: int, transaction_id: int, request: TransactionWrite
    ) -> Transaction:
        """
        Edit a transaction, moving its balance effect as needed.

        Amount, category type and account can each change on
        their own; the ledger engine works out which accounts
        need writing.
        """
        self._validate(request)
        txn = self.get_transaction(owner_id, transaction_id)
        category = self._get_category(owner_id, request.category_id)

        accounts: dict[int, Account] = {}
        old_account = None
        if txn.account_id is not None:
            old_account = self._get_account(owner_id, txn.account_id)
            accounts[old_account.id] = old_account
        new_account = None
        if request.account_id is not None:
            new_account = self._get_account(owner_id, request.account_id)
            accounts[new_account.id] = new_account

        old = snapshot_transaction(txn)
        new = TransactionSnapshot(
            amount=request.amount,
            category_type=category.category_type,
            account_id=request.account_id,
        )
        try:
            plan = ledger_engine.compute_update_effect(
                old,
                new,
                snapshot_account(old_account) if old_account else None,
                snapshot_account(new_account) if new_account else None,
            )
        except InsufficientFundsError:
            logger.warning(
                "transaction_update_rejected",
                owner_id=owner_id,
                transaction_id=txn.id,
                account_id=request.account_id,
                reason="insufficient_funds",
            )
            raise

        self._apply(plan, accounts)

        txn.amount = request.amount
        txn.category = category
        txn.account_id = request.account_id
        txn.date = request.date
        txn.description = request.description.strip()
        txn.tags = list(request.tags)
        txn.payment_method = request.payment_method
        txn.receipt_url = request.receipt_url
        self._flush()

        logger.info(
            "transaction_updated",
            owner_id=owner_id,
            transaction_id=txn.id,
            balance_writes=len(plan.changes),
        )
        self._publish(EXPENSES_CHANGED, owner_id, transaction_id=txn.id)
        return txn

    def delete(self, owner_id: int, transaction_id: int) -> None:
        """Delete a transaction and reverse exactly the effect it applied."""
        txn = self.get_transaction(owner_id, transaction_id)

        if txn.account_id is not None:
            account = self._get_account(owner_id, txn.account_id)
            change = ledger_engine.compute_delete_effect(
                snapshot_transaction(txn), snapshot_account(account)
            )
            account.balance = change.new_balance

        self.db.delete(txn)
        self._flush()

        logger.info(
            "transaction_deleted",
            owner_id=owner_id,
            transaction_id=transaction_id,
        )
        self._publish(EXPENSES_CHANGED, owner_id, transaction_id=transaction_id)

    def get_transaction(self, owner_id: int, transaction_id: int) -> Transaction:
        txn = self.db.get(Transaction, transaction_id)
        if not txn or txn.owner_id != owner_id:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return txn

    def list_transactions(
        self,
        owner_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
        category_id: int | None = None,
        account_id: int | None = None,
    ) -> list[Transaction]:
        """An owner's transactions, newest first, optionally filtered."""
        query = select(Transaction).where(Transaction.owner_id == owner_id)
        if start_date is not None:
            query = query.where(Transaction.date >= start_date)
        if end_date is not None:
            query = query.where(Transaction.date <= end_date)
        if category_id is not None:
            query = query.where(Transaction.category_id == category_id)
        if account_id is not None:
            query = query.where(Transaction.account_id == account_id)
        query = query.order_by(Transaction.date.desc(), Transaction.id.desc())
        return list(self.db.execute(query).scalars().all())

    # --- Account-to-account movements ---

    def transfer(
        self,
        owner_id: int,
        source_account_id: int,
        destination_account_id: int,
        amount: Decimal,
    ) -> tuple[Account, Account]:
        """Move money from one of the owner's accounts to another."""
        source = self._get_account(owner_id, source_account_id)
        destination = self._get_account(owner_id, destination_account_id)

        try:
            plan = ledger_engine.compute_transfer(
                snapshot_account(source), snapshot_account(destination), amount
            )
        except ValidationError as e:
            logger.warning(
                "transfer_rejected",
                owner_id=owner_id,
                source_account_id=source_account_id,
                destination_account_id=destination_account_id,
                amount=str(amount),
                reason=str(e),
            )
            raise

        self._apply(plan, {source.id: source, destination.id: destination})
        self._flush()

        logger.info(
            "transfer_completed",
            owner_id=owner_id,
            source_account_id=source.id,
            destination_account_id=destination.id,
            amount=str(amount),
        )
        self._publish(
            ACCOUNTS_CHANGED,
            owner_id,
            account_ids=[source.id, destination.id],
        )
        return source, destination

    def add_funds(self, owner_id: int, account_id: int, amount: Decimal) -> Account:
        """Top up an account."""
        account = self._get_account(owner_id, account_id)
        change = ledger_engine.compute_add_funds(snapshot_account(account), amount)
        account.balance = change.new_balance
        self._flush()

        logger.info(
            "funds_added",
            owner_id=owner_id,
            account_id=account.id,
            amount=str(amount),
        )
        self._publish(ACCOUNTS_CHANGED, owner_id, account_ids=[account.id])
        return account
