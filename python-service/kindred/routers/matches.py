from fastapi import APIRouter, Depends, HTTPException, status

from ..models.likes import MatchesResponse, MatchSummary
from ..services.likes_service import LikesService, get_likes_service
from .deps import require_caller_id

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get("", response_model=MatchesResponse)
async def list_matches(
    caller_id: str = Depends(require_caller_id),
    service: LikesService = Depends(get_likes_service),
):
    return MatchesResponse(matches=await service.list_matches(caller_id))


@router.post("/{match_id}/activity", response_model=MatchSummary)
async def touch_match(
    match_id: str,
    caller_id: str = Depends(require_caller_id),
    service: LikesService = Depends(get_likes_service),
):
    match = await service.record_activity(caller_id, match_id.strip())
    if match is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="match not found")
    partner = next(m for m in match.members if m != caller_id)
    return MatchSummary(
        match_id=match.id,
        user_id=partner,
        created_at=match.created_at,
        last_activity_at=match.last_activity_at,
    )


__all__ = ["router"]
