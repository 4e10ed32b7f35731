from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import UserId


class LikeDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    from_uid: str = Field(alias="fromUid")
    to_uid: str = Field(alias="toUid")
    created_at: int = Field(alias="createdAt")


class LikeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_user_id: UserId = Field(alias="targetUserId")


class LikeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["ok"] = "ok"
    created: bool = False
    is_match: bool = Field(default=False, alias="isMatch")


class LikeRemovalResponse(BaseModel):
    status: Literal["ok"] = "ok"
    removed: bool = False


class MatchDocument(BaseModel):
    """Undirected match keyed by the sorted pair of member ids."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    members: List[str]
    created_at: int = Field(alias="createdAt")
    last_activity_at: int = Field(alias="lastActivityAt")


class MatchSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    match_id: str = Field(alias="matchId")
    user_id: str = Field(alias="userId")
    created_at: int = Field(alias="createdAt")
    last_activity_at: int = Field(alias="lastActivityAt")


class MatchesResponse(BaseModel):
    matches: List[MatchSummary] = Field(default_factory=list)


__all__ = [
    "LikeDocument",
    "LikeRemovalResponse",
    "LikeRequest",
    "LikeResponse",
    "MatchDocument",
    "MatchSummary",
    "MatchesResponse",
]
