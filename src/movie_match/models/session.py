"""Session document and match result models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from movie_match.models.swipe import Swipe

SessionStatus = Literal["awaiting", "in progress", "complete"]
PlayerReadiness = Literal["awaiting", "done"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Serialize with camelCase keys, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class MatchedTitle(_CamelModel):
    id: str
    title: str
    poster_url: str | None = None
    streaming_services: list[str] | None = None
    similarity_score: float | None = None
    certainty: float | None = None


class MatchSessionResult(_CamelModel):
    """Outcome of one matching run.

    Attributes:
        matched_titles: Ranked recommendations, at most ``max_results``.
        algorithm_version: Version of the scoring semantics that produced
            this result.
        certainty: Session-level confidence in [0.5, 1.0].
        fallback: ``True`` when the shuffled fallback replaced scoring.
    """

    matched_titles: list[MatchedTitle]
    algorithm_version: int
    certainty: float
    fallback: bool


class Session(_CamelModel):
    id: str
    user_ids: list[str]
    swipes: list[Swipe] = []
    session_status: SessionStatus = "awaiting"
    player_status: dict[str, PlayerReadiness] = Field(default_factory=dict)
    matched_titles: list[MatchedTitle] | None = None
    matching_algorithm_version: int | None = None
    match_certainty: float | None = None
    match_fallback: bool | None = None
    created_at: int = 0

    def readiness(self) -> dict[str, PlayerReadiness]:
        """Player status, defaulting every participant to ``awaiting``."""
        if self.player_status:
            return dict(self.player_status)
        return {uid: "awaiting" for uid in self.user_ids}
