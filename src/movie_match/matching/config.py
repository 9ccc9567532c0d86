"""Matching engine configuration with sensible defaults.

All parameters can be overridden via ``config/matching.yaml``.
If the file does not exist, defaults are used.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog
import yaml
from pydantic import BaseModel, Field

CandidateSelectionMode = Literal["union", "strict", "hybrid"]

# Upper bound on titles returned per session.
MAX_RESULTS = 3


class SelectionConfig(BaseModel):
    """Which liked titles become ranking candidates.

    ``union`` takes anything any participant liked, ``strict`` only
    titles every participant liked, and ``hybrid`` uses the strict set
    unless it is empty.
    """

    mode: CandidateSelectionMode = "hybrid"


class MatchingConfig(BaseModel):
    """Top-level matching configuration combining all sub-configs."""

    max_results: int = Field(default=MAX_RESULTS, ge=1, le=MAX_RESULTS)
    selection: SelectionConfig = SelectionConfig()


def load_matching_config(path: Path) -> MatchingConfig:
    """Load matching configuration from a YAML file.

    If the file does not exist, returns a ``MatchingConfig`` with all
    default values.  Partial overrides are supported -- only the keys
    present in the YAML file will override defaults.
    """
    if not path.exists():
        structlog.get_logger().debug("matching_config_missing", path=str(path))
        return MatchingConfig()

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return MatchingConfig(**data)
