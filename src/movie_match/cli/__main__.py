"""CLI entry point: python -m movie_match.cli match --input session.json"""

import argparse
import json
import sys
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from movie_match.config.settings import get_settings
from movie_match.logging_config import configure_logging
from movie_match.matching.config import load_matching_config
from movie_match.matching.service import MatchingService
from movie_match.models.session import MatchSessionResult
from movie_match.models.swipe import Swipe

_swipe_list = TypeAdapter(list[Swipe])


def run_match(
    input_path: Path, config_path: Path, seed: str | None
) -> MatchSessionResult:
    """Load a session snapshot and run the matching engine on it.

    The input is a JSON object with ``swipes`` and ``userIds`` keys, in
    the same shape as a stored session document.
    """
    log = structlog.get_logger()
    data = json.loads(input_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(
            f"expected a JSON object with 'swipes' and 'userIds', got {type(data).__name__}"
        )
    swipes = _swipe_list.validate_python(data.get("swipes") or [])
    user_ids = list(data.get("userIds") or [])
    seed = seed if seed is not None else data.get("id")

    log.info("match_input_loaded", swipes=len(swipes), users=len(user_ids))
    service = MatchingService(config=load_matching_config(config_path))
    return service.match_session(swipes, user_ids, session_seed=seed)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="movie_match.cli",
        description="Movie Match CLI",
    )
    subparsers = parser.add_subparsers(dest="command")

    match_parser = subparsers.add_parser("match", help="Match a session snapshot")
    match_parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="JSON file with 'swipes' and 'userIds'",
    )
    match_parser.add_argument(
        "--seed",
        type=str,
        default=None,
        help="Fallback shuffle seed (default: the session 'id' field, if any)",
    )
    match_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Matching config YAML (default: MOVIE_MATCH_MATCHING_CONFIG_PATH)",
    )
    match_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the JSON output",
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "match":
        settings = get_settings()
        configure_logging(
            json_output=settings.log_json, log_level=settings.log_level, stream=sys.stderr
        )
        config_path = Path(args.config) if args.config else settings.matching_config_path

        try:
            result = run_match(Path(args.input), config_path, args.seed)
        except (OSError, ValueError, ValidationError) as e:
            structlog.get_logger().error("match_input_invalid", error=str(e))
            sys.exit(2)

        print(json.dumps(result.to_document(), indent=2 if args.pretty else None))


if __name__ == "__main__":
    main()
