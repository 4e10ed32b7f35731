"""MongoDB collection names used by the python-service."""

from __future__ import annotations

PROFILES_COLLECTION = "profiles"
LIKES_COLLECTION = "likes"
BLOCKS_COLLECTION = "blocks"
MATCHES_COLLECTION = "matches"

__all__ = [
    "PROFILES_COLLECTION",
    "LIKES_COLLECTION",
    "BLOCKS_COLLECTION",
    "MATCHES_COLLECTION",
]
