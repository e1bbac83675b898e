"""
Account service — opening, listing, renaming and closing accounts.

Balances are set once, at creation. After that only the
transaction service moves them, through the ledger engine.
"""

import random
from decimal import Decimal

import structlog
from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from finance_tracker.errors import NotFoundError
from finance_tracker.events import EventBus, ACCOUNTS_CHANGED, EXPENSES_CHANGED
from finance_tracker.models.account import Account
from finance_tracker.models.enums import AccountKind
from finance_tracker.models.transaction import Transaction
from finance_tracker.schemas.account import AccountCreate, AccountUpdate
from finance_tracker.services.profile_service import ProfileService

logger = structlog.get_logger(__name__)


def generate_account_number(account_type: AccountKind) -> str:
    """Two-letter type prefix followed by eight random digits, e.g. CA04718263."""
    prefix = account_type.value.upper()[:2]
    digits = "".join(random.choices("0123456789", k=8))
    return f"{prefix}{digits}"


class AccountService:

    def __init__(self, db: Session, events: EventBus | None = None):
        self.db = db
        self.events = events

    def create_account(self, owner_id: int, request: AccountCreate) -> Account:
        """Open an account with an explicit initial balance."""
        ProfileService(self.db).get_profile(owner_id)

        account = Account(
            owner_id=owner_id,
            name=request.name,
            account_type=request.account_type,
            account_number=generate_account_number(request.account_type),
            balance=request.balance,
        )
        self.db.add(account)
        self.db.flush()

        logger.info(
            "account_created",
            owner_id=owner_id,
            account_id=account.id,
            balance=str(account.balance),
        )
        self._publish(ACCOUNTS_CHANGED, owner_id, account_id=account.id)
        return account

    def get_account(self, owner_id: int, account_id: int) -> Account:
        """Get an account, only if it belongs to the owner."""
        account = self.db.get(Account, account_id)
        if not account or account.owner_id != owner_id:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    def list_accounts(self, owner_id: int) -> list[Account]:
        """All accounts of an owner, newest first."""
        accounts = self.db.execute(
            select(Account)
            .where(Account.owner_id == owner_id)
            .order_by(Account.created_at.desc(), Account.id.desc())
        ).scalars().all()
        return list(accounts)

    def update_account(
        self, owner_id: int, account_id: int, request: AccountUpdate
    ) -> Account:
        """Rename or retype an account. The balance is not editable here."""
        account = self.get_account(owner_id, account_id)
        if request.name is not None:
            account.name = request.name
        if request.account_type is not None:
            account.account_type = request.account_type
        self.db.flush()
        self._publish(ACCOUNTS_CHANGED, owner_id, account_id=account.id)
        return account

    def delete_account(self, owner_id: int, account_id: int) -> None:
        """
        Delete an account.

        Its transactions stay recorded but are detached, so they
        no longer carry a balance effect anywhere.
        """
        account = self.get_account(owner_id, account_id)
        detached = self.db.execute(
            update(Transaction)
            .where(Transaction.account_id == account.id)
            .values(account_id=None)
        ).rowcount
        self.db.delete(account)
        self.db.flush()

        logger.info(
            "account_deleted",
            owner_id=owner_id,
            account_id=account_id,
            detached_transactions=detached,
        )
        self._publish(ACCOUNTS_CHANGED, owner_id, account_id=account_id)
        if detached:
            self._publish(EXPENSES_CHANGED, owner_id, account_id=account_id)

    def total_balance(self, owner_id: int) -> Decimal:
        """Sum of all account balances of an owner."""
        total = self.db.execute(
            select(func.coalesce(func.sum(Account.balance), 0))
            .where(Account.owner_id == owner_id)
        ).scalar_one()
        return Decimal(str(total)).quantize(Decimal("0.0001"))

    def _publish(self, name: str, owner_id: int, **payload) -> None:
        if self.events is not None:
            self.events.publish(name, {"owner_id": owner_id, **payload})
