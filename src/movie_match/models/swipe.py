"""Swipe record as stored in a session document."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

SwipeDecision = Literal["like", "dislike"]


class Swipe(BaseModel):
    """One user's like/dislike decision on one title.

    Carries a snapshot of the title metadata at decision time.  All
    metadata is optional; a missing field means the feature is absent.
    Field names are accepted in either snake_case or the camelCase used
    by the session document (``mediaId``, ``releaseYear``, ...).
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str
    user_id: str
    media_id: str
    decision: SwipeDecision
    created_at: int
    media_title: str | None = None
    poster_url: str | None = None
    genres: list[str] | None = None
    directors: list[str] | None = None
    cast: list[str] | None = None
    release_year: float | None = None
    runtime: float | None = None
    rating: float | None = None
    streaming_services: list[str] | None = None

    @classmethod
    def metadata_only(cls, media_id: str) -> Swipe:
        """Build a swipe that carries nothing but a media id.

        Used to embed a title with no swipe history.  Every feature field
        is unset; the required fields hold neutral placeholders.
        """
        return cls.model_construct(
            id=media_id, user_id="", media_id=media_id, decision="like", created_at=0
        )
