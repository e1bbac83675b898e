"""
Category service.

Categories are read-only inputs to the ledger engine. Once a
category has transactions, its type is frozen and it cannot
be deleted: either change would alter the sign of effects that
were already applied to account balances.
"""

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from finance_tracker.errors import NotFoundError, ValidationError
from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction
from finance_tracker.schemas.category import CategoryCreate, CategoryUpdate
from finance_tracker.services.profile_service import ProfileService


class CategoryService:

    def __init__(self, db: Session):
        self.db = db

    def create_category(self, owner_id: int, request: CategoryCreate) -> Category:
        ProfileService(self.db).get_profile(owner_id)
        category = Category(
            owner_id=owner_id,
            name=request.name,
            category_type=request.category_type,
        )
        self.db.add(category)
        self.db.flush()
        return category

    def get_category(self, owner_id: int, category_id: int) -> Category:
        category = self.db.get(Category, category_id)
        if not category or category.owner_id != owner_id:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    def list_categories(self, owner_id: int) -> list[Category]:
        """All categories of an owner, by name."""
        categories = self.db.execute(
            select(Category)
            .where(Category.owner_id == owner_id)
            .order_by(Category.name)
        ).scalars().all()
        return list(categories)

    def update_category(
        self, owner_id: int, category_id: int, request: CategoryUpdate
    ) -> Category:
        category = self.get_category(owner_id, category_id)

        if (
            request.category_type is not None
            and request.category_type != category.category_type
            and self._usage_count(category.id) > 0
        ):
            raise ValidationError(
                f"Category '{category.name}' has transactions; "
                f"its type cannot change"
            )

        if request.name is not None:
            category.name = request.name
        if request.category_type is not None:
            category.category_type = request.category_type
        self.db.flush()
        return category

    def delete_category(self, owner_id: int, category_id: int) -> None:
        category = self.get_category(owner_id, category_id)
        if self._usage_count(category.id) > 0:
            raise ValidationError(
                f"Category '{category.name}' has transactions "
                f"and cannot be deleted"
            )
        self.db.delete(category)
        self.db.flush()

    def _usage_count(self, category_id: int) -> int:
        return self.db.execute(
            select(func.count(Transaction.id))
            .where(Transaction.category_id == category_id)
        ).scalar_one()
