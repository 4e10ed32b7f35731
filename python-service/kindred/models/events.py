"""Payloads delivered to the reactive trigger handlers."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LIKE_CREATED = "like_created"
BLOCK_CREATED = "block_created"


class LikeCreatedEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["like_created"] = LIKE_CREATED
    from_uid: str = Field(default="", alias="fromUid")
    to_uid: str = Field(default="", alias="toUid")


class BlockCreatedEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["block_created"] = BLOCK_CREATED
    blocker_uid: str = Field(default="", alias="blockerUid")
    subject_uid: str = Field(default="", alias="subjectUid")


class TriggerAck(BaseModel):
    status: Literal["ok"] = "ok"


__all__ = [
    "BLOCK_CREATED",
    "BlockCreatedEvent",
    "LIKE_CREATED",
    "LikeCreatedEvent",
    "TriggerAck",
]
