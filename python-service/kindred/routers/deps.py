from fastapi import Depends, Header, HTTPException, status

from ..services.errors import UnauthenticatedError
from ..services.identity_service import IdentityService, get_identity_service


def _extract_token(authorization: str) -> str:
    if not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="missing bearer token")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="missing bearer token")
    return token


async def require_caller_id(
    authorization: str = Header(default=""),
    identity: IdentityService = Depends(get_identity_service),
) -> str:
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="authentication required")
    token = _extract_token(authorization)
    try:
        return identity.caller_id_from_token(token)
    except UnauthenticatedError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid token") from None


__all__ = ["require_caller_id"]
