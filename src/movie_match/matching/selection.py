"""Candidate selection policy over the participants' likes."""

from __future__ import annotations

from collections.abc import Sequence

from movie_match.matching.config import CandidateSelectionMode
from movie_match.models.swipe import Swipe


def liked_media_ids(swipes: Sequence[Swipe], user_id: str) -> list[str]:
    """Media ids ``user_id`` liked, deduplicated, in swipe order."""
    return list(
        dict.fromkeys(
            s.media_id for s in swipes if s.user_id == user_id and s.decision == "like"
        )
    )


def select_candidate_ids(
    swipes: Sequence[Swipe],
    user_ids: Sequence[str],
    mode: CandidateSelectionMode = "hybrid",
) -> list[str]:
    """Pick the media ids to rank.

    Returns an ordered, duplicate-free list so downstream scoring is
    reproducible.  The union is ordered by participant then swipe order;
    the intersection follows the first participant's like order.
    """
    liked = [liked_media_ids(swipes, uid) for uid in user_ids]
    union = list(dict.fromkeys(mid for ids in liked for mid in ids))

    if liked:
        others = [set(ids) for ids in liked[1:]]
        intersection = [mid for mid in liked[0] if all(mid in s for s in others)]
    else:
        intersection = []

    if mode == "strict":
        return intersection
    if mode == "hybrid" and intersection:
        return intersection
    return union
