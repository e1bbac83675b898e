"""
Ledger engine — balance arithmetic for every money movement.

Pure functions over snapshots. Nothing here reads or writes
the database; the transaction service loads the snapshots,
asks the engine for a plan, and applies the plan. Every
rejection is raised before the caller has written anything.

Rules:
1. A transaction's effect is +amount for an income category
   and -amount for an expense category.
2. Creating, editing or transferring must never leave a
   balance below zero.
3. Reversing a recorded effect (on delete, or on the old
   account when a transaction moves) is never refused, even
   when removing old income takes the balance negative.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from finance_tracker.errors import (
    InsufficientFundsError,
    InvalidAmountError,
    SameAccountError,
)
from finance_tracker.models.enums import CategoryType

ZERO = Decimal("0")


@dataclass(frozen=True)
class AccountSnapshot:
    """The parts of an account the engine needs."""
    id: int
    name: str
    balance: Decimal


@dataclass(frozen=True)
class TransactionSnapshot:
    """The balance-relevant parts of a transaction."""
    amount: Decimal
    category_type: CategoryType
    account_id: int | None = None


@dataclass(frozen=True)
class BalanceChange:
    """One account write: the delta and the resulting balance."""
    account_id: int
    delta: Decimal
    new_balance: Decimal


@dataclass(frozen=True)
class EffectPlan:
    """All account writes a mutation needs, in the order to apply them."""
    changes: list[BalanceChange] = field(default_factory=list)

    def balance_for(self, account_id: int) -> Decimal | None:
        for change in reversed(self.changes):
            if change.account_id == account_id:
                return change.new_balance
        return None


def effect(amount: Decimal, category_type: CategoryType) -> Decimal:
    """Signed balance effect of a transaction."""
    if category_type == CategoryType.INCOME:
        return amount
    return -amount


def _guarded(account: AccountSnapshot, delta: Decimal) -> BalanceChange:
    new_balance = account.balance + delta
    if new_balance < ZERO:
        raise InsufficientFundsError(account.name, account.balance, delta)
    return BalanceChange(account.id, delta, new_balance)


def _unguarded(account: AccountSnapshot, delta: Decimal) -> BalanceChange:
    return BalanceChange(account.id, delta, account.balance + delta)


def compute_create_effect(
    amount: Decimal,
    category_type: CategoryType,
    account: AccountSnapshot,
) -> BalanceChange:
    """
    Balance change for a new transaction on an account.

    Raises InsufficientFundsError if the account would go
    negative. Income can never be refused.
    """
    return _guarded(account, effect(amount, category_type))


def compute_delete_effect(
    transaction: TransactionSnapshot,
    account: AccountSnapshot,
) -> BalanceChange:
    """
    Balance change that undoes a transaction's recorded effect.

    Not guarded: undoing income may take the balance negative.
    """
    return _unguarded(
        account, -effect(transaction.amount, transaction.category_type)
    )


def compute_update_effect(
    old: TransactionSnapshot,
    new: TransactionSnapshot,
    old_account: AccountSnapshot | None,
    new_account: AccountSnapshot | None,
) -> EffectPlan:
    """
    Balance changes for editing a transaction.

    Whether the account changed is decided by account_id alone;
    amount and category type may change independently of it.

    Same account: one write of effect(new) - effect(old), guarded.
    Account changed: the old account gets the unguarded reversal,
    the new account gets the guarded new effect. Either side is
    skipped when the transaction had, or now has, no account.
    """
    if old.account_id == new.account_id:
        if new.account_id is None:
            return EffectPlan()
        net = (
            effect(new.amount, new.category_type)
            - effect(old.amount, old.category_type)
        )
        if net == ZERO:
            return EffectPlan()
        return EffectPlan([_guarded(new_account, net)])

    # Check the new side first so a rejection happens before
    # any change is planned for the old account.
    applied = None
    if new.account_id is not None:
        applied = compute_create_effect(
            new.amount, new.category_type, new_account
        )

    changes = []
    if old.account_id is not None:
        changes.append(compute_delete_effect(old, old_account))
    if applied is not None:
        changes.append(applied)
    return EffectPlan(changes)


def compute_transfer(
    source: AccountSnapshot,
    destination: AccountSnapshot,
    amount: Decimal,
) -> EffectPlan:
    """Move money between two accounts of the same owner."""
    if source.id == destination.id:
        raise SameAccountError("Cannot transfer to the same account")
    if amount <= ZERO:
        raise InvalidAmountError("Please enter a valid amount")
    if source.balance < amount:
        raise InsufficientFundsError(source.name, source.balance, -amount)

    return EffectPlan([
        BalanceChange(source.id, -amount, source.balance - amount),
        BalanceChange(destination.id, amount, destination.balance + amount),
    ])


def compute_add_funds(account: AccountSnapshot, amount: Decimal) -> BalanceChange:
    """Top up an account from outside the tracked accounts."""
    if amount <= ZERO:
        raise InvalidAmountError("Please enter a valid amount")
    return BalanceChange(account.id, amount, account.balance + amount)
