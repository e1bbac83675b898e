"""
Transaction model.

One recorded money movement, income or expense. The table
is called "expenses" for both kinds; the sign comes from the
linked category, the amount column only ever holds the
magnitude.

account_id is optional. A transaction without an account is
recorded for reporting but has no balance effect.
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Numeric, ForeignKey, JSON,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_tracker.models.base import Base


class Transaction(Base):
    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id"), nullable=False, index=True
    )
    account_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    payment_method: Mapped[str] = mapped_column(
        String(50), nullable=False, default="cash"
    )
    receipt_url: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )

    category: Mapped["Category"] = relationship()
    account: Mapped["Account | None"] = relationship()

    def __repr__(self) -> str:
        return f"<Transaction {self.amount} on {self.date}>"
