"""Repository layer to abstract MongoDB access patterns."""

from .blocks import BlockRepository
from .likes import LikeRepository
from .matches import MatchRepository
from .profile import ProfileRepository

__all__ = ["BlockRepository", "LikeRepository", "MatchRepository", "ProfileRepository"]
