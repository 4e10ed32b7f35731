from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProfileDocument(BaseModel):
    """Canonical profile document stored in MongoDB, keyed by user id."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    user_id: str = Field(alias="_id")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    bio: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    onboarding_completed: bool = Field(default=False, alias="onboardingCompleted")
    hide_mode: bool = Field(default=False, alias="hideMode")
    created_at: Optional[int] = Field(default=None, alias="createdAt")
    updated_at: Optional[int] = Field(default=None, alias="updatedAt")


class Profile(BaseModel):
    """Public representation of a profile returned via the API."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    user_id: str = Field(alias="userId")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    bio: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    onboarding_completed: bool = Field(default=False, alias="onboardingCompleted")
    hide_mode: bool = Field(default=False, alias="hideMode")
    updated_at: Optional[int] = Field(default=None, alias="updatedAt")


class ProfileUpsert(BaseModel):
    """Payload accepted when the owner creates or updates their profile.

    Unknown keys are kept and stored as free-form extra fields.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    display_name: Optional[str] = Field(default=None, alias="displayName", max_length=80)
    bio: Optional[str] = Field(default=None, max_length=600)
    photos: Optional[List[str]] = None
    onboarding_completed: Optional[bool] = Field(default=None, alias="onboardingCompleted")
    hide_mode: Optional[bool] = Field(default=None, alias="hideMode")


class FeedProfile(BaseModel):
    """Feed card projected from an eligible profile."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: str = Field(alias="displayName")
    bio: str = ""
    photos: List[str] = Field(default_factory=list)
    sober_date: Optional[Any] = Field(default=None, alias="soberDate")
    updated_at: int = Field(alias="updatedAt")


__all__ = [
    "FeedProfile",
    "Profile",
    "ProfileDocument",
    "ProfileUpsert",
]
