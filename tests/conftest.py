"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest

from movie_match.models.swipe import Swipe

REPO_ROOT = Path(__file__).resolve().parents[1]
SHIPPED_MATCHING_CONFIG = REPO_ROOT / "config" / "matching.yaml"


def build_swipe(**overrides) -> Swipe:
    """Build a swipe with plausible metadata; any field can be overridden."""
    user_id = overrides.pop("user_id", "u1")
    media_id = overrides.pop("media_id", "m1")
    created_at = overrides.pop("created_at", 1)
    fields = {
        "id": f"{user_id}_{media_id}_{created_at}",
        "user_id": user_id,
        "media_id": media_id,
        "created_at": created_at,
        "media_title": f"Movie {media_id}",
        "decision": "like",
        "genres": ["Action"],
        "directors": ["DirA"],
        "cast": ["ActorA"],
        "release_year": 2020,
        "runtime": 120,
        "rating": 7,
    }
    fields.update(overrides)
    return Swipe(**fields)


@pytest.fixture
def make_swipe() -> Callable[..., Swipe]:
    """Factory fixture for ``Swipe`` records."""
    return build_swipe


@pytest.fixture
def shared_likes() -> list[Swipe]:
    """Two users who liked the same three, clearly distinct, titles."""
    titles = [
        dict(media_id="m1", genres=["Action", "Adventure"], directors=["Christopher Nolan"],
             cast=["Cillian Murphy"], rating=8),
        dict(media_id="m2", genres=["Action"], directors=["Greta Gerwig"],
             cast=["ActorA"], rating=6),
        dict(media_id="m3", genres=["Comedy"], directors=["Denis Villeneuve"],
             cast=["ActorB"], rating=7),
    ]
    return [
        build_swipe(user_id=uid, created_at=i, **title)
        for uid in ("u1", "u2")
        for i, title in enumerate(titles)
    ]
