"""User profile data models."""

from typing import Optional
from pydantic import Field

from receipts.models import CamelModel


class UserCreate(CamelModel):
    """User creation request model."""

    google_id: str = Field(..., min_length=1, description="Owner identifier")
    email: Optional[str] = Field(None, description="Email address; required for a new profile")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    picture: Optional[str] = None


class UserUpdate(CamelModel):
    """Partial user profile update; unknown fields are dropped."""

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    picture: Optional[str] = None
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[str] = None
    ethnicity: Optional[str] = None
    marital_status: Optional[str] = None
    children: Optional[int] = Field(None, ge=0, description="Number of dependents")
    income: Optional[float] = Field(None, ge=0)
    location: Optional[str] = None


class UserProfile(UserUpdate):
    """User profile as stored."""

    google_id: str
    email: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
