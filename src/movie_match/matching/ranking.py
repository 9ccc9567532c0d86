"""Candidate scoring, certainty and ranking.

Each candidate is embedded, normalized and scored by its dot product
with the consensus vector.  Certainty maps a score's z-score within the
candidate pool through a logistic sigmoid into [0.5, 1.0].
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from movie_match.matching.embedding import embed_swipe
from movie_match.matching.vectors import PreferenceVector, dot_product, normalize_vector
from movie_match.models.swipe import Swipe

MIN_CERTAINTY = 0.5
MAX_CERTAINTY = 1.0


@dataclass(frozen=True)
class ScoreStats:
    """Distribution of candidate scores (population statistics)."""

    top: float
    mean: float
    std: float


@dataclass(frozen=True)
class RankedCandidate:
    media_id: str
    score: float
    certainty: float


@dataclass
class RankingResult:
    """Output of :func:`rank_candidates`.

    ``stats`` and ``session_certainty`` are ``None`` when the score
    distribution is degenerate; ``ranked`` is then empty.
    """

    ranked: list[RankedCandidate]
    stats: ScoreStats | None
    session_certainty: float | None


def compute_score_stats(scores: Sequence[float]) -> ScoreStats | None:
    """Mean, population standard deviation and maximum of ``scores``.

    Returns ``None`` for an empty list, non-finite statistics or a zero
    spread, none of which can be ranked meaningfully.
    """
    if not scores:
        return None

    mean = sum(scores) / len(scores)
    variance = sum((score - mean) ** 2 for score in scores) / len(scores)
    std = math.sqrt(variance)
    top = max(scores)

    if not math.isfinite(mean) or not math.isfinite(std) or std <= 0:
        return None

    return ScoreStats(top=top, mean=mean, std=std)


def _sigmoid(x: float) -> float:
    if x < -700:
        return 0.0  # math.exp would overflow
    return 1.0 / (1.0 + math.exp(-x))


def certainty_for_score(score: float, stats: ScoreStats) -> float:
    """Map ``score`` to a confidence in [0.5, 1.0].

    ``0.5 + 0.5 * sigmoid((score - mean) / std)``, clamped.
    """
    z = (score - stats.mean) / stats.std
    certainty = 0.5 + 0.5 * _sigmoid(z)
    return min(max(certainty, MIN_CERTAINTY), MAX_CERTAINTY)


def first_seen_order(swipes: Sequence[Swipe]) -> dict[str, int]:
    """Index of the first swipe for every media id."""
    order: dict[str, int] = {}
    for index, swipe in enumerate(swipes):
        order.setdefault(swipe.media_id, index)
    return order


def rank_candidates(
    swipes: Sequence[Swipe],
    consensus: PreferenceVector,
    candidate_ids: Sequence[str],
    max_results: int,
    embed_fn: Callable[[Swipe], Sequence[float]] = embed_swipe,
) -> RankingResult:
    """Score every candidate against ``consensus`` and keep the best.

    Ties are broken by first occurrence in ``swipes``.  Statistics and
    the session certainty are computed over the full candidate pool
    before truncation to ``max_results``.
    """
    seen_order = first_seen_order(swipes)
    by_media: dict[str, Swipe] = {}
    for swipe in swipes:
        by_media.setdefault(swipe.media_id, swipe)

    scored: list[tuple[str, float]] = []
    for media_id in candidate_ids:
        source = by_media.get(media_id) or Swipe.metadata_only(media_id)
        embedding = normalize_vector(embed_fn(source))
        score = 0.0 if embedding.is_zero else dot_product(consensus.vector, embedding.vector)
        scored.append((media_id, score))

    stats = compute_score_stats([score for _, score in scored])
    if stats is None:
        return RankingResult(ranked=[], stats=None, session_certainty=None)

    scored.sort(key=lambda item: (-item[1], seen_order.get(item[0], 0)))

    ranked = [
        RankedCandidate(
            media_id=media_id,
            score=score,
            certainty=certainty_for_score(score, stats),
        )
        for media_id, score in scored[:max_results]
    ]
    return RankingResult(
        ranked=ranked,
        stats=stats,
        session_certainty=certainty_for_score(stats.top, stats),
    )
