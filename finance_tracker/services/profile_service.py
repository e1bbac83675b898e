"""
Profile service — the owners every other row belongs to.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from finance_tracker.errors import NotFoundError, ValidationError
from finance_tracker.models.profile import Profile
from finance_tracker.schemas.profile import ProfileCreate, ProfileUpdate


class ProfileService:

    def __init__(self, db: Session):
        self.db = db

    def create_profile(self, request: ProfileCreate) -> Profile:
        """Create a profile. Email addresses are unique."""
        existing = self.db.execute(
            select(Profile).where(Profile.email == request.email)
        ).scalar_one_or_none()

        if existing:
            raise ValidationError(
                f"Profile with email '{request.email}' already exists"
            )

        profile = Profile(
            email=request.email,
            first_name=request.first_name,
            last_name=request.last_name,
        )
        self.db.add(profile)
        self.db.flush()
        return profile

    def get_profile(self, profile_id: int) -> Profile:
        profile = self.db.get(Profile, profile_id)
        if not profile:
            raise NotFoundError(f"Profile {profile_id} not found")
        return profile

    def update_profile(self, profile_id: int, request: ProfileUpdate) -> Profile:
        """Update contact details. Only fields present in the request change."""
        profile = self.get_profile(profile_id)
        for name, value in request.model_dump(exclude_unset=True).items():
            setattr(profile, name, value)
        self.db.flush()
        return profile
