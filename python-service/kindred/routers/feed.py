from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..models.feed import FeedPage
from ..services.errors import FeedQueryError, UnauthenticatedError
from ..services.feed_service import FeedService, get_feed_service
from .deps import require_caller_id

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=FeedPage, response_model_exclude_none=True)
async def get_feed(
    limit: Optional[int] = Query(default=None),
    cursor: Optional[int] = Query(default=None, ge=1, description="updatedAt of the previous page's cursor"),
    caller_id: str = Depends(require_caller_id),
    service: FeedService = Depends(get_feed_service),
) -> FeedPage:
    try:
        return await service.get_feed(caller_id, limit=limit, cursor=cursor)
    except UnauthenticatedError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="authentication required") from None
    except FeedQueryError:
        # Diagnostic already logged by the service
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="feed unavailable") from None


__all__ = ["router"]
