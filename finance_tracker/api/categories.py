"""
Category API endpoints.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from finance_tracker.api.deps import commit, get_owner_id, http_error
from finance_tracker.errors import FinanceTrackerError
from finance_tracker.models.base import get_db
from finance_tracker.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
)
from finance_tracker.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(
    request: CategoryCreate,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    service = CategoryService(db)
    try:
        category = service.create_category(owner_id, request)
        commit(db)
        return category
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)


@router.get("", response_model=list[CategoryResponse])
def list_categories(
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return CategoryService(db).list_categories(owner_id)


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    request: CategoryUpdate,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    service = CategoryService(db)
    try:
        category = service.update_category(owner_id, category_id, request)
        commit(db)
        return category
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    service = CategoryService(db)
    try:
        service.delete_category(owner_id, category_id)
        commit(db)
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)
    return Response(status_code=204)
