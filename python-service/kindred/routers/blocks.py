from fastapi import APIRouter, Depends, HTTPException, status

from ..models.blocks import BlockedUsersResponse, BlockRequest, BlockResponse
from ..services.blocks_service import BlocksService, get_blocks_service
from .deps import require_caller_id

router = APIRouter(prefix="/blocks", tags=["blocks"])


@router.post("", response_model=BlockResponse)
async def create_block(
    payload: BlockRequest,
    caller_id: str = Depends(require_caller_id),
    service: BlocksService = Depends(get_blocks_service),
):
    try:
        created = await service.record_block(caller_id, payload.subject_user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return BlockResponse(created=created)


@router.get("", response_model=BlockedUsersResponse)
async def list_blocked(
    caller_id: str = Depends(require_caller_id),
    service: BlocksService = Depends(get_blocks_service),
):
    return BlockedUsersResponse(blocked=await service.list_blocked(caller_id))


__all__ = ["router"]
