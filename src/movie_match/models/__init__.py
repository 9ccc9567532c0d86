from movie_match.models.session import (
    MatchedTitle,
    MatchSessionResult,
    PlayerReadiness,
    Session,
    SessionStatus,
)
from movie_match.models.swipe import Swipe, SwipeDecision

__all__ = [
    "MatchSessionResult",
    "MatchedTitle",
    "PlayerReadiness",
    "Session",
    "SessionStatus",
    "Swipe",
    "SwipeDecision",
]
