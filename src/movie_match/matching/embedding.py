"""Feature embedder.

Maps one swipe onto a fixed 67-dimensional vector: categorical fields
(genres, directors, cast) are multi-hot encoded into hashed buckets and
the scalar fields (release year, runtime, rating) are min-max scaled
into [0, 1].

Layout::

    [ genre x16 | year | runtime | rating | director x16 | cast x32 ]
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable

from movie_match.models.swipe import Swipe

EMBEDDING_VERSION = 1

GENRE_DIM = 16
DIRECTOR_DIM = 16
CAST_DIM = 32
SCALAR_DIM = 3  # release year, runtime, rating
EMBED_DIM = GENRE_DIM + SCALAR_DIM + DIRECTOR_DIM + CAST_DIM

GENRE_START = 0
RELEASE_YEAR_INDEX = GENRE_START + GENRE_DIM
RUNTIME_INDEX = RELEASE_YEAR_INDEX + 1
RATING_INDEX = RUNTIME_INDEX + 1
DIRECTOR_START = RATING_INDEX + 1
CAST_START = DIRECTOR_START + DIRECTOR_DIM

GENRE_SEED = 11
DIRECTOR_SEED = 23
CAST_SEED = 37

RELEASE_YEAR_RANGE = (1900.0, 2025.0)
RUNTIME_RANGE = (60.0, 240.0)
RATING_RANGE = (0.0, 10.0)

HashFn = Callable[[str, int], int]


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def hash_string(value: str, seed: int = 0) -> int:
    """Deterministic rolling hash (``h * 31 + c`` over UTF-16 code units).

    Arithmetic wraps to a signed 32-bit integer at every step and the
    absolute value is returned, so the result is non-negative and stable
    across processes and platforms.  ``seed`` keeps identical strings in
    different fields apart.
    """
    h = seed + EMBEDDING_VERSION * 31
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = _to_int32((h << 5) - h + unit)
    return abs(h)


def normalize_value(value: object, lo: float, hi: float) -> float:
    """Clamp ``value`` to [lo, hi] and scale it to [0, 1].

    Missing, non-numeric and NaN values map to 0.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value):
        return 0.0
    clamped = min(max(value, lo), hi)
    return (clamped - lo) / (hi - lo)


def add_hashed_multi_hot(
    values: Iterable[str] | None,
    start: int,
    size: int,
    vector: list[float],
    seed: int,
    hash_fn: HashFn = hash_string,
) -> None:
    """Set one bucket per value in ``vector[start:start + size]``.

    Colliding values share a bucket.  ``None`` or an empty list is a
    no-op.
    """
    if not values:
        return
    for item in values:
        vector[start + hash_fn(item, seed) % size] = 1.0


def embed_swipe(swipe: Swipe, hash_fn: HashFn = hash_string) -> list[float]:
    """Build the feature vector for a single swipe."""
    embedding = [0.0] * EMBED_DIM

    add_hashed_multi_hot(swipe.genres, GENRE_START, GENRE_DIM, embedding, GENRE_SEED, hash_fn)

    embedding[RELEASE_YEAR_INDEX] = normalize_value(swipe.release_year, *RELEASE_YEAR_RANGE)
    embedding[RUNTIME_INDEX] = normalize_value(swipe.runtime, *RUNTIME_RANGE)
    embedding[RATING_INDEX] = normalize_value(swipe.rating, *RATING_RANGE)

    add_hashed_multi_hot(
        swipe.directors, DIRECTOR_START, DIRECTOR_DIM, embedding, DIRECTOR_SEED, hash_fn
    )
    add_hashed_multi_hot(swipe.cast, CAST_START, CAST_DIM, embedding, CAST_SEED, hash_fn)

    return embedding
