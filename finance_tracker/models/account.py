"""
Account model.

A balance-holding place (cash, card, wallet). Unlike a ledger
that derives balances from entries, the balance is stored on
the row and only ever changed through the ledger engine's
computed deltas.

The version column is SQLAlchemy's version counter: every
UPDATE is issued as "... WHERE id = :id AND version = :seen",
so two writers racing on the same balance cannot both win.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Integer, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_tracker.models.base import Base
from finance_tracker.models.enums import AccountKind


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[AccountKind] = mapped_column(
        SAEnum(
            AccountKind,
            name="account_kind_enum",
            create_constraint=True,
            values_callable=lambda kinds: [k.value for k in kinds],
        ),
        nullable=False,
    )
    account_number: Mapped[str] = mapped_column(String(20), nullable=False)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    owner: Mapped["Profile"] = relationship(back_populates="accounts")

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"<Account {self.account_number} "
            f"{self.account_type.value} {self.balance}>"
        )
