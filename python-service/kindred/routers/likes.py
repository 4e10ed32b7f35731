from fastapi import APIRouter, Depends, HTTPException, status

from ..models.likes import (
    LikeRemovalResponse,
    LikeRequest,
    LikeResponse,
)
from ..repositories.exceptions import NotFoundRepositoryError
from ..services.likes_service import LikesService, get_likes_service
from .deps import require_caller_id

router = APIRouter(prefix="/likes", tags=["likes"])


@router.post("", response_model=LikeResponse)
async def create_like(
    payload: LikeRequest,
    caller_id: str = Depends(require_caller_id),
    service: LikesService = Depends(get_likes_service),
):
    try:
        created, is_match = await service.record_like(caller_id, payload.target_user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NotFoundRepositoryError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="target user not found") from None
    except PermissionError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="cannot like this user") from None

    return LikeResponse(created=created, is_match=is_match)


@router.delete("/{target_user_id}", response_model=LikeRemovalResponse)
async def delete_like(
    target_user_id: str,
    caller_id: str = Depends(require_caller_id),
    service: LikesService = Depends(get_likes_service),
):
    target = (target_user_id or "").strip()
    if not target:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="target_user_id required")
    if target == caller_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="cannot unlike yourself")

    removed = await service.remove_like(caller_id, target)
    return LikeRemovalResponse(removed=removed)


__all__ = ["router"]
