"""Shuffled fallback used when scoring has no trustworthy signal."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

from movie_match.models.session import MatchedTitle
from movie_match.models.swipe import Swipe

T = TypeVar("T")


def make_rng(seed: str | None = None) -> random.Random:
    """Random source for the fallback shuffle.

    A session seed gives the same sequence on every call and every run;
    without one the generator is seeded from the OS.
    """
    return random.Random(seed) if seed is not None else random.Random()


def fisher_yates_shuffle(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a shuffled copy of ``items``."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def build_matched_title(
    media_id: str,
    source: Swipe | None,
    similarity_score: float | None = None,
    certainty: float | None = None,
) -> MatchedTitle:
    """Package a title for display, reading metadata from ``source``.

    The display title falls back to the media id.  Empty streaming
    service lists are dropped.
    """
    return MatchedTitle(
        id=media_id,
        title=(source.media_title if source and source.media_title else media_id),
        poster_url=source.poster_url if source and source.poster_url else None,
        streaming_services=(
            list(source.streaming_services)
            if source and source.streaming_services
            else None
        ),
        similarity_score=similarity_score,
        certainty=certainty,
    )


def random_fallback_matches(
    swipes: Sequence[Swipe], count: int, rng: random.Random
) -> list[MatchedTitle]:
    """Pick up to ``count`` distinct titles from the swipe history at random.

    Swipes are deduplicated by media id, first-seen wins for metadata.
    """
    unique: dict[str, Swipe] = {}
    for swipe in swipes:
        unique.setdefault(swipe.media_id, swipe)

    if not unique:
        return []

    shuffled = fisher_yates_shuffle(list(unique.values()), rng)
    return [build_matched_title(s.media_id, s) for s in shuffled[:count]]
