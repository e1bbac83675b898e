"""
Category model.

A user-defined label. Its type (income or expense) decides
whether a transaction adds to or subtracts from its account.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from finance_tracker.models.base import Base
from finance_tracker.models.enums import CategoryType


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category_type: Mapped[CategoryType] = mapped_column(
        SAEnum(
            CategoryType,
            name="category_type_enum",
            create_constraint=True,
            values_callable=lambda types: [t.value for t in types],
        ),
        nullable=False,
        default=CategoryType.EXPENSE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Category {self.name} ({self.category_type.value})>"
