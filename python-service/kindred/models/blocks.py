from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import UserId


class BlockDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    blocker_uid: str = Field(alias="blockerUid")
    subject_uid: str = Field(alias="subjectUid")
    created_at: int = Field(alias="createdAt")


class BlockRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject_user_id: UserId = Field(alias="subjectUserId")


class BlockResponse(BaseModel):
    status: Literal["ok"] = "ok"
    created: bool = False


class BlockedUsersResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    blocked: List[str] = Field(default_factory=list)


__all__ = [
    "BlockDocument",
    "BlockRequest",
    "BlockResponse",
    "BlockedUsersResponse",
]
