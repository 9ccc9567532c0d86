"""Vector aggregation: per-user preference vectors and the session consensus."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from movie_match.matching.embedding import EMBED_DIM, embed_swipe
from movie_match.models.swipe import Swipe


@dataclass(frozen=True)
class PreferenceVector:
    """A unit-length direction in feature space, or the zero vector.

    Attributes:
        vector: Normalized components (all zeros when ``is_zero``).
        magnitude: Euclidean norm of the vector before normalization.
        is_zero: ``True`` iff the pre-normalization norm was exactly 0,
            i.e. there is no usable signal.
    """

    vector: list[float]
    magnitude: float
    is_zero: bool


def vector_magnitude(vector: Sequence[float]) -> float:
    return math.sqrt(sum(value * value for value in vector))


def dot_product(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


def normalize_vector(vector: Sequence[float]) -> PreferenceVector:
    """Scale ``vector`` to unit length.

    The zero vector comes back as zeros of the same length with
    ``is_zero=True`` and ``magnitude=0``.
    """
    magnitude = vector_magnitude(vector)
    if magnitude == 0:
        return PreferenceVector(vector=[0.0] * len(vector), magnitude=0.0, is_zero=True)
    return PreferenceVector(
        vector=[value / magnitude for value in vector],
        magnitude=magnitude,
        is_zero=False,
    )


def user_preference_vector(
    swipes: Sequence[Swipe],
    user_id: str,
    embed_fn: Callable[[Swipe], Sequence[float]] = embed_swipe,
) -> PreferenceVector:
    """Sum a user's swipe embeddings (likes added, dislikes subtracted).

    Only swipes by ``user_id`` contribute.  A user with no swipes, or
    whose likes and dislikes cancel out exactly, gets the zero vector.
    """
    aggregate = [0.0] * EMBED_DIM
    for swipe in swipes:
        if swipe.user_id != user_id:
            continue
        direction = 1.0 if swipe.decision == "like" else -1.0
        for index, value in enumerate(embed_fn(swipe)):
            aggregate[index] += value * direction
    return normalize_vector(aggregate)


def consensus_vector(
    vectors: Sequence[PreferenceVector],
    normalize: Callable[[Sequence[float]], PreferenceVector] = normalize_vector,
) -> PreferenceVector:
    """Normalized component-wise sum of the participants' vectors."""
    aggregate = [0.0] * EMBED_DIM
    for pref in vectors:
        for index, value in enumerate(pref.vector):
            aggregate[index] += value
    return normalize(aggregate)
