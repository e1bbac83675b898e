"""
Pydantic schemas for profile operations.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ProfileCreate(BaseModel):
    email: str = Field(min_length=5, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class ProfileUpdate(BaseModel):
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=255)


class ProfileResponse(BaseModel):
    id: int
    email: str
    first_name: str | None
    last_name: str | None
    phone: str | None
    address: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
