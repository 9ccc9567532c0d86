"""Session match orchestrator.

Builds per-user and consensus vectors, selects candidates, ranks them
and packages the result.  Whenever scoring has no usable signal, or
anything in the main path raises, a shuffled fallback selection is
returned instead: :meth:`MatchingService.match_session` never raises.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field

import structlog

from movie_match.matching.config import MatchingConfig
from movie_match.matching.embedding import embed_swipe
from movie_match.matching.fallback import (
    build_matched_title,
    make_rng,
    random_fallback_matches,
)
from movie_match.matching.ranking import RankingResult, ScoreStats, rank_candidates
from movie_match.matching.selection import select_candidate_ids
from movie_match.matching.vectors import (
    PreferenceVector,
    consensus_vector,
    user_preference_vector,
)
from movie_match.models.session import MatchSessionResult
from movie_match.models.swipe import Swipe

# Bump on any change to embedding layout, normalization ranges,
# the certainty formula or candidate selection.
MATCHING_ALGORITHM_VERSION = 2

# Reported for every fallback result.
FALLBACK_CERTAINTY = 0.5

logger = structlog.get_logger()

EmbedFn = Callable[[Swipe], Sequence[float]]
AggregateUserFn = Callable[[Sequence[Swipe], str], PreferenceVector]
AggregateConsensusFn = Callable[[Sequence[PreferenceVector]], PreferenceVector]
RankFn = Callable[
    [Sequence[Swipe], PreferenceVector, Sequence[str], int], RankingResult
]


@dataclass(frozen=True)
class MatchingStrategy:
    """The pluggable steps of the matching pipeline.

    Leaving ``aggregate_user`` or ``rank`` unset runs the built-in step
    with this strategy's ``embed``.
    """

    embed: EmbedFn = embed_swipe
    aggregate_user: AggregateUserFn | None = None
    aggregate_consensus: AggregateConsensusFn = consensus_vector
    rank: RankFn | None = None

    def user_vector(self, swipes: Sequence[Swipe], user_id: str) -> PreferenceVector:
        if self.aggregate_user is not None:
            return self.aggregate_user(swipes, user_id)
        return user_preference_vector(swipes, user_id, self.embed)

    def rank_titles(
        self,
        swipes: Sequence[Swipe],
        consensus: PreferenceVector,
        candidate_ids: Sequence[str],
        max_results: int,
    ) -> RankingResult:
        if self.rank is not None:
            return self.rank(swipes, consensus, candidate_ids, max_results)
        return rank_candidates(swipes, consensus, candidate_ids, max_results, self.embed)


@dataclass
class MatchingService:
    """Runs one matching computation per completed session."""

    strategy: MatchingStrategy = field(default_factory=MatchingStrategy)
    config: MatchingConfig = field(default_factory=MatchingConfig)
    rng_factory: Callable[[str | None], random.Random] = make_rng

    def match_session(
        self,
        swipes: Sequence[Swipe],
        user_ids: Sequence[str],
        session_seed: str | None = None,
    ) -> MatchSessionResult:
        """Rank the session's titles, falling back to a shuffle on failure.

        Args:
            swipes: The session's swipes, in the order they were made.
            user_ids: The session's participants.
            session_seed: Makes the fallback shuffle reproducible when set.

        Returns:
            A well-formed ``MatchSessionResult`` on every code path.
        """
        log = logger.bind(session_seed=session_seed)
        try:
            result = self._compute(swipes, user_ids, session_seed)
        except Exception as e:
            log.error("matching_failed", error=str(e), exc_info=True)
            result = self._fallback_after_error(swipes, session_seed)
        log.info("matching_complete", fallback=result.fallback)
        return result

    def _compute(
        self,
        swipes: Sequence[Swipe],
        user_ids: Sequence[str],
        session_seed: str | None,
    ) -> MatchSessionResult:
        user_vectors = [self.strategy.user_vector(swipes, uid) for uid in user_ids]
        consensus = self.strategy.aggregate_consensus(user_vectors)
        candidate_ids = select_candidate_ids(
            swipes, user_ids, self.config.selection.mode
        )

        logger.info(
            "matching_metrics",
            candidate_count=len(candidate_ids),
            user_magnitudes=[round(v.magnitude, 4) for v in user_vectors],
            consensus_magnitude=round(consensus.magnitude, 4),
            selection_mode=self.config.selection.mode,
        )

        if not candidate_ids or consensus.is_zero:
            return self._fallback(
                swipes, session_seed, reason="empty_candidates_or_zero_consensus"
            )

        ranking = self.strategy.rank_titles(
            swipes, consensus, candidate_ids, self.config.max_results
        )
        if ranking.stats is None or ranking.session_certainty is None:
            return self._fallback(
                swipes,
                session_seed,
                reason="invalid_score_distribution",
                stats=ranking.stats,
            )

        logger.info(
            "matching_ranked",
            top_scores=[
                {"media_id": r.media_id, "score": round(r.score, 4)}
                for r in ranking.ranked
            ],
            certainty=round(ranking.session_certainty, 4),
            top=round(ranking.stats.top, 4),
            mean=round(ranking.stats.mean, 4),
            std=round(ranking.stats.std, 4),
        )

        liked: dict[str, Swipe] = {}
        for swipe in swipes:
            if swipe.decision == "like":
                liked.setdefault(swipe.media_id, swipe)

        return MatchSessionResult(
            matched_titles=[
                build_matched_title(r.media_id, liked.get(r.media_id), r.score, r.certainty)
                for r in ranking.ranked
            ],
            algorithm_version=MATCHING_ALGORITHM_VERSION,
            certainty=ranking.session_certainty,
            fallback=False,
        )

    def _fallback(
        self,
        swipes: Sequence[Swipe],
        session_seed: str | None,
        reason: str,
        stats: ScoreStats | None = None,
    ) -> MatchSessionResult:
        rng = self.rng_factory(session_seed)
        matches = random_fallback_matches(swipes, self.config.max_results, rng)
        certainty = FALLBACK_CERTAINTY

        logger.info(
            "matching_fallback",
            reason=reason,
            certainty=certainty,
            stats=asdict(stats) if stats else None,
            top_matches=[m.id for m in matches],
        )

        return MatchSessionResult(
            matched_titles=matches,
            algorithm_version=MATCHING_ALGORITHM_VERSION,
            certainty=certainty,
            fallback=True,
        )

    def _fallback_after_error(
        self, swipes: Sequence[Swipe], session_seed: str | None
    ) -> MatchSessionResult:
        try:
            return self._fallback(swipes, session_seed, reason="exception")
        except Exception as e:
            logger.error("matching_fallback_failed", error=str(e), exc_info=True)
            return MatchSessionResult(
                matched_titles=[],
                algorithm_version=MATCHING_ALGORITHM_VERSION,
                certainty=FALLBACK_CERTAINTY,
                fallback=True,
            )


def create_matching_service(
    *,
    embed: EmbedFn | None = None,
    aggregate_user: AggregateUserFn | None = None,
    aggregate_consensus: AggregateConsensusFn | None = None,
    rank: RankFn | None = None,
    config: MatchingConfig | None = None,
    rng_factory: Callable[[str | None], random.Random] | None = None,
) -> MatchingService:
    """Build a ``MatchingService`` with any pipeline step replaced.

    A custom ``embed`` also drives the built-in user aggregation and
    ranking steps unless those are replaced too.
    """
    defaults = MatchingStrategy()
    strategy = MatchingStrategy(
        embed=embed or defaults.embed,
        aggregate_user=aggregate_user,
        aggregate_consensus=aggregate_consensus or defaults.aggregate_consensus,
        rank=rank,
    )
    return MatchingService(
        strategy=strategy,
        config=config or MatchingConfig(),
        rng_factory=rng_factory or make_rng,
    )


_default_service = MatchingService()


def match_session(
    swipes: Sequence[Swipe],
    user_ids: Sequence[str],
    session_seed: str | None = None,
) -> MatchSessionResult:
    """Run the default matching pipeline; see :meth:`MatchingService.match_session`."""
    return _default_service.match_session(swipes, user_ids, session_seed)
