"""Profile endpoints; writes are limited to the caller's own profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..models.profile import Profile, ProfileUpsert
from ..services.profile_service import ProfileService, get_profile_service, to_public_profile
from .deps import require_caller_id

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=Profile)
async def get_my_profile(
    caller_id: str = Depends(require_caller_id),
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    doc = await service.get_profile(caller_id)
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="profile not found")
    return to_public_profile(doc)


@router.put("/me", response_model=Profile)
async def upsert_my_profile(
    payload: ProfileUpsert,
    caller_id: str = Depends(require_caller_id),
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    doc = await service.upsert_profile(caller_id, payload)
    return to_public_profile(doc)


@router.get("/{user_id}", response_model=Profile)
async def get_profile(
    user_id: str,
    _caller_id: str = Depends(require_caller_id),
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    profile = await service.get_public_profile(user_id.strip())
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="profile not found")
    return profile


__all__ = ["router"]
