from .exclusion_service import ExclusionService, get_exclusion_service
from .feed_service import FeedService, get_feed_service
from .match_lifecycle import MatchLifecycleService, get_match_lifecycle_service

__all__ = [
    "ExclusionService",
    "FeedService",
    "MatchLifecycleService",
    "get_exclusion_service",
    "get_feed_service",
    "get_match_lifecycle_service",
]
