"""Session lifecycle steps that hand off to the matching engine.

``mark_player_finished`` runs inside a store transaction so that when
both participants finish at nearly the same time, matching is computed
and written exactly once.
"""

from __future__ import annotations

import structlog

from movie_match.matching.service import MatchingService
from movie_match.models.session import Session
from movie_match.session.errors import (
    NotAParticipantError,
    SessionError,
    SessionNotFoundError,
)
from movie_match.session.store import SessionStore

logger = structlog.get_logger()

REQUIRED_PARTICIPANTS = 2


async def start_matching(store: SessionStore, session_id: str) -> None:
    """Move a full session to ``in progress`` with every player awaiting."""

    async def _start(snapshot: dict | None) -> dict:
        if snapshot is None:
            raise SessionNotFoundError(f"Session {session_id} does not exist")
        session = Session.model_validate(snapshot)
        if len(session.user_ids) != REQUIRED_PARTICIPANTS:
            raise SessionError(
                f"Session must have exactly {REQUIRED_PARTICIPANTS} users to start",
                code="wrong_participant_count",
            )
        return {
            "sessionStatus": "in progress",
            "playerStatus": {uid: "awaiting" for uid in session.user_ids},
        }

    await store.transaction(session_id, _start)
    logger.info("session_started", session_id=session_id)


async def mark_player_finished(
    store: SessionStore,
    session_id: str,
    user_id: str,
    service: MatchingService | None = None,
) -> bool:
    """Mark ``user_id`` done swiping; complete the session if everyone is.

    Marking a player who is already done is a no-op.  The session id
    seeds the fallback shuffle so a session always gets the same
    fallback picks.

    Returns:
        ``True`` if this call completed the session and wrote matches.

    Raises:
        SessionNotFoundError: The session does not exist.
        NotAParticipantError: ``user_id`` is not in the session.
    """
    service = service or MatchingService()
    log = logger.bind(session_id=session_id, user_id=user_id)
    completed = False

    async def _finish(snapshot: dict | None) -> dict | None:
        nonlocal completed
        if snapshot is None:
            raise SessionNotFoundError(f"Session {session_id} does not exist")

        session = Session.model_validate(snapshot)
        if user_id not in session.user_ids:
            raise NotAParticipantError(f"User {user_id} is not part of this session")

        readiness = session.readiness()
        if readiness.get(user_id) == "done":
            log.info("player_already_finished")
            return None

        readiness[user_id] = "done"
        updates: dict = {"playerStatus": readiness}

        if all(readiness.get(uid) == "done" for uid in session.user_ids):
            result = service.match_session(
                session.swipes, session.user_ids, session_seed=session_id
            )
            updates.update(
                sessionStatus="complete",
                matchedTitles=[t.to_document() for t in result.matched_titles],
                matchingAlgorithmVersion=result.algorithm_version,
                matchCertainty=result.certainty,
                matchFallback=result.fallback,
            )
            completed = True

        return updates

    await store.transaction(session_id, _finish)
    log.info("player_finished", session_completed=completed)
    return completed
