"""
Pydantic schemas for category operations.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from finance_tracker.models.enums import CategoryType


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    category_type: CategoryType = CategoryType.EXPENSE


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    category_type: CategoryType | None = None


class CategoryResponse(BaseModel):
    id: int
    owner_id: int
    name: str
    category_type: CategoryType
    created_at: datetime

    model_config = {"from_attributes": True}
