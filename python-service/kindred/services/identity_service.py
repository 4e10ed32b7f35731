from __future__ import annotations

import time
from typing import Any, Dict, Optional

import jwt

from ..config import get_settings
from ..models.identifiers import clean_user_id
from .errors import UnauthenticatedError


class IdentityService:
    """Verifies bearer tokens issued by the identity provider."""

    def __init__(
        self,
        *,
        jwt_secret: str,
        token_ttl_seconds: int,
        audience: Optional[str] = None,
    ) -> None:
        self._jwt_secret = jwt_secret
        self._token_ttl = token_ttl_seconds
        self._audience = audience or None

    def issue_token(self, user_id: str) -> str:
        now = int(time.time())
        payload: Dict[str, Any] = {
            "sub": user_id,
            "iat": now,
            "exp": now + self._token_ttl,
        }
        if self._audience:
            payload["aud"] = self._audience
        return jwt.encode(payload, self._jwt_secret, algorithm="HS256")

    def decode_token(self, token: str) -> Optional[Dict[str, Any]]:
        if not token or not self._jwt_secret:
            return None
        try:
            return jwt.decode(
                token,
                self._jwt_secret,
                algorithms=["HS256"],
                audience=self._audience,
            )
        except jwt.PyJWTError:
            return None

    def caller_id_from_token(self, token: str) -> str:
        payload = self.decode_token(token)
        if not payload:
            raise UnauthenticatedError("invalid token")
        caller_id = clean_user_id(payload.get("sub"))
        if not caller_id:
            raise UnauthenticatedError("token missing subject")
        return caller_id


def get_identity_service() -> IdentityService:
    settings = get_settings()
    return IdentityService(
        jwt_secret=settings.jwt_secret,
        token_ttl_seconds=settings.auth_token_ttl,
        audience=settings.jwt_audience,
    )


__all__ = ["IdentityService", "get_identity_service"]
