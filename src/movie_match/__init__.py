"""Two-user movie matching: swipe history in, shared recommendations out."""

from movie_match.matching.service import (
    MATCHING_ALGORITHM_VERSION,
    MatchingService,
    MatchingStrategy,
    create_matching_service,
    match_session,
)
from movie_match.models.session import MatchedTitle, MatchSessionResult
from movie_match.models.swipe import Swipe

__all__ = [
    "MATCHING_ALGORITHM_VERSION",
    "MatchSessionResult",
    "MatchedTitle",
    "MatchingService",
    "MatchingStrategy",
    "Swipe",
    "create_matching_service",
    "match_session",
]
