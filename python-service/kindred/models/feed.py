from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .profile import FeedProfile


class FeedCursor(BaseModel):
    """Continuation point of a descending ``updatedAt`` scan."""

    model_config = ConfigDict(populate_by_name=True)

    updated_at: int = Field(alias="updatedAt")


class FeedPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[FeedProfile] = Field(default_factory=list)
    next_cursor: Optional[FeedCursor] = Field(default=None, alias="nextCursor")
    has_more: bool = Field(default=False, alias="hasMore")


__all__ = ["FeedCursor", "FeedPage"]
