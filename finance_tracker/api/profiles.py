"""
Profile API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from finance_tracker.api.deps import commit, http_error
from finance_tracker.errors import FinanceTrackerError
from finance_tracker.models.base import get_db
from finance_tracker.schemas.profile import (
    ProfileCreate,
    ProfileUpdate,
    ProfileResponse,
)
from finance_tracker.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.post("", response_model=ProfileResponse, status_code=201)
def create_profile(
    request: ProfileCreate,
    db: Session = Depends(get_db),
):
    service = ProfileService(db)
    try:
        profile = service.create_profile(request)
        commit(db)
        return profile
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)


@router.get("/{profile_id}", response_model=ProfileResponse)
def get_profile(
    profile_id: int,
    db: Session = Depends(get_db),
):
    try:
        return ProfileService(db).get_profile(profile_id)
    except FinanceTrackerError as e:
        raise http_error(e)


@router.patch("/{profile_id}", response_model=ProfileResponse)
def update_profile(
    profile_id: int,
    request: ProfileUpdate,
    db: Session = Depends(get_db),
):
    service = ProfileService(db)
    try:
        profile = service.update_profile(profile_id, request)
        commit(db)
        return profile
    except FinanceTrackerError as e:
        db.rollback()
        raise http_error(e)
