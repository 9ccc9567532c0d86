"""Session-completion workflow around the matching engine."""

from movie_match.session.completion import mark_player_finished, start_matching
from movie_match.session.errors import (
    NotAParticipantError,
    SessionError,
    SessionNotFoundError,
)
from movie_match.session.store import InMemorySessionStore, SessionStore

__all__ = [
    "InMemorySessionStore",
    "NotAParticipantError",
    "SessionError",
    "SessionNotFoundError",
    "SessionStore",
    "mark_player_finished",
    "start_matching",
]
