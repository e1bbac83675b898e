"""
Report service — aggregates an owner's transactions over a
date range for the reports and dashboard views.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from finance_tracker.models.enums import CategoryType
from finance_tracker.models.transaction import Transaction
from finance_tracker.services.account_service import AccountService
from finance_tracker.services.transaction_service import TransactionService

ZERO = Decimal("0")
CENT = Decimal("0.01")
TOP_CATEGORY_COUNT = 5


@dataclass(frozen=True)
class NamedAmount:
    name: str
    amount: Decimal


@dataclass
class Report:
    start_date: date
    end_date: date
    transaction_count: int = 0
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    average_expense: Decimal = ZERO
    accounts_total: Decimal = ZERO
    income_by_category: list[NamedAmount] = field(default_factory=list)
    expenses_by_category: list[NamedAmount] = field(default_factory=list)
    top_categories: list[NamedAmount] = field(default_factory=list)
    daily_totals: list[NamedAmount] = field(default_factory=list)
    monthly_trend: list[NamedAmount] = field(default_factory=list)


def _by_amount(totals: dict[str, Decimal]) -> list[NamedAmount]:
    return [
        NamedAmount(name, amount)
        for name, amount in sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


def _by_name(totals: dict[str, Decimal]) -> list[NamedAmount]:
    return [NamedAmount(name, totals[name]) for name in sorted(totals)]


def summarise(
    transactions: list[Transaction], start_date: date, end_date: date
) -> Report:
    """
    Aggregate a list of transactions.

    Daily totals and the monthly trend only count expenses,
    which is what the spending charts show.
    """
    income_by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)
    expenses_by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)
    daily: dict[str, Decimal] = defaultdict(lambda: ZERO)
    monthly: dict[str, Decimal] = defaultdict(lambda: ZERO)
    expense_count = 0

    for txn in transactions:
        amount = Decimal(txn.amount)
        name = txn.category.name if txn.category else "Uncategorized"
        if txn.category and txn.category.category_type == CategoryType.INCOME:
            income_by_category[name] += amount
            continue
        expense_count += 1
        expenses_by_category[name] += amount
        daily[txn.date.isoformat()] += amount
        monthly[txn.date.strftime("%Y-%m")] += amount

    total_income = sum(income_by_category.values(), ZERO)
    total_expenses = sum(expenses_by_category.values(), ZERO)
    average = (
        (total_expenses / expense_count).quantize(CENT, rounding=ROUND_HALF_UP)
        if expense_count
        else ZERO
    )
    expenses_ranked = _by_amount(expenses_by_category)

    return Report(
        start_date=start_date,
        end_date=end_date,
        transaction_count=len(transactions),
        total_income=total_income,
        total_expenses=total_expenses,
        average_expense=average,
        income_by_category=_by_amount(income_by_category),
        expenses_by_category=expenses_ranked,
        top_categories=expenses_ranked[:TOP_CATEGORY_COUNT],
        daily_totals=_by_name(daily),
        monthly_trend=_by_name(monthly),
    )


class ReportService:

    def __init__(self, db: Session):
        self.db = db

    def transactions(
        self,
        owner_id: int,
        start_date: date,
        end_date: date,
        category_id: int | None = None,
    ) -> list[Transaction]:
        return TransactionService(self.db).list_transactions(
            owner_id,
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
        )

    def build(
        self,
        owner_id: int,
        start_date: date,
        end_date: date,
        category_id: int | None = None,
        transactions: list[Transaction] | None = None,
    ) -> Report:
        """Build the report; pass transactions if they were already loaded."""
        if transactions is None:
            transactions = self.transactions(
                owner_id, start_date, end_date, category_id
            )
        report = summarise(transactions, start_date, end_date)
        report.accounts_total = AccountService(self.db).total_balance(owner_id)
        return report
