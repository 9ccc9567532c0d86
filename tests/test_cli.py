"""Tests for the CLI match command."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from movie_match.cli.__main__ import run_match

from conftest import SHIPPED_MATCHING_CONFIG

REPO_ROOT = Path(__file__).resolve().parents[1]


def _write_session(path: Path, swipes: list, user_ids: list[str], **extra) -> Path:
    data = {
        "swipes": [s.model_dump(by_alias=True, exclude_none=True) for s in swipes],
        "userIds": user_ids,
        **extra,
    }
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _run_cli(*args: str) -> subprocess.CompletedProcess:
    env = {**os.environ, "PYTHONPATH": str(REPO_ROOT / "src"), "MOVIE_MATCH_LOG_JSON": "true"}
    return subprocess.run(
        [sys.executable, "-m", "movie_match.cli", *args],
        capture_output=True,
        text=True,
        cwd=str(REPO_ROOT),
        env=env,
    )


def test_run_match_scores_session(tmp_path, shared_likes):
    """run_match returns a ranked result for a session with shared likes."""
    input_path = _write_session(tmp_path / "session.json", shared_likes, ["u1", "u2"])
    result = run_match(input_path, SHIPPED_MATCHING_CONFIG, seed=None)
    assert result.fallback is False
    assert len(result.matched_titles) == 3


def test_run_match_uses_session_id_as_seed(tmp_path, make_swipe):
    """Without --seed, the document id seeds the fallback shuffle."""
    swipes = [make_swipe(media_id=f"m{i}", decision="dislike") for i in range(6)]
    input_path = _write_session(tmp_path / "s.json", swipes, ["u1", "u2"], id="room-9")

    from_id = run_match(input_path, SHIPPED_MATCHING_CONFIG, seed=None)
    explicit = run_match(input_path, SHIPPED_MATCHING_CONFIG, seed="room-9")
    assert from_id.fallback is True
    assert from_id == explicit


def test_run_match_rejects_bad_decision(tmp_path):
    input_path = tmp_path / "bad.json"
    input_path.write_text(
        json.dumps(
            {
                "swipes": [
                    {"id": "s", "userId": "u1", "mediaId": "m1", "decision": "meh", "createdAt": 1}
                ],
                "userIds": ["u1"],
            }
        )
    )
    with pytest.raises(ValueError):
        run_match(input_path, SHIPPED_MATCHING_CONFIG, seed=None)


def test_cli_help_does_not_error():
    """CLI --help exits cleanly without error."""
    result = _run_cli("--help")
    assert result.returncode == 0
    assert "Movie Match CLI" in result.stdout


def test_cli_without_command_exits_1():
    result = _run_cli()
    assert result.returncode == 1


def test_cli_match_prints_result(tmp_path, shared_likes):
    """The match command prints the result document on stdout, logs on stderr."""
    input_path = _write_session(tmp_path / "session.json", shared_likes, ["u1", "u2"])
    result = _run_cli("match", "--input", str(input_path))

    assert result.returncode == 0
    output = json.loads(result.stdout)
    assert output["fallback"] is False
    assert output["algorithmVersion"] == 2
    assert len(output["matchedTitles"]) == 3
    assert "matching_complete" in result.stderr


def test_cli_match_missing_input(tmp_path):
    result = _run_cli("match", "--input", str(tmp_path / "missing.json"))
    assert result.returncode == 2


def test_run_match_rejects_non_object_input(tmp_path):
    input_path = tmp_path / "list.json"
    input_path.write_text(json.dumps([{"mediaId": "m1"}]), encoding="utf-8")
    with pytest.raises(ValueError, match="JSON object"):
        run_match(input_path, SHIPPED_MATCHING_CONFIG, seed=None)


def test_cli_match_non_object_input_exits_2(tmp_path):
    input_path = tmp_path / "list.json"
    input_path.write_text("[]", encoding="utf-8")
    result = _run_cli("match", "--input", str(input_path))
    assert result.returncode == 2
    assert "match_input_invalid" in result.stderr
