from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Put the repository root on ``sys.path`` when run as a plain script."""
    pkg_dir = Path(__file__).resolve().parent
    repo_root_str = str(pkg_dir.parent)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


try:
    # Works when executed as a module: python -m speed_typer
    from .controller import TestConfig
    from .errors import ConfigurationError
    from .persistence import default_db_path
    from .word_pools import DEFAULT_POOL, available_pools
except ImportError:
    _ensure_repo_root_on_path()
    from speed_typer.controller import TestConfig
    from speed_typer.errors import ConfigurationError
    from speed_typer.persistence import default_db_path
    from speed_typer.word_pools import DEFAULT_POOL, available_pools


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="speed_typer",
        description="A typing-speed test with live accuracy and a results log.",
    )
    parser.add_argument("-w", "--words", type=int, default=15, help="number of words in the prompt (default: 15)")
    parser.add_argument("-s", "--seconds", type=int, default=None, help="time limit in seconds")
    parser.add_argument(
        "-f",
        "--full-sentences",
        type=int,
        default=None,
        metavar="N",
        help="use N generated sentences instead of a word list sample",
    )
    parser.add_argument("-d", "--death-mode", action="store_true", help="end the test on the first mistake")
    parser.add_argument("-p", "--pace", type=int, default=None, metavar="WPM", help="show a pace caret at WPM")
    parser.add_argument("-t", "--text", default=None, help="type this text instead of a generated prompt")
    parser.add_argument(
        "-l",
        "--word-list",
        default=DEFAULT_POOL,
        choices=available_pools(),
        help=f"word list to sample from (default: {DEFAULT_POOL})",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="results database (default: $SPEED_TYPER_DB or ~/.speed_typer_results.sqlite3)",
    )
    parser.add_argument("--no-log", action="store_true", help="do not save results")
    parser.add_argument("--seed", type=int, default=None, help="seed for prompt generation")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> TestConfig:
    return TestConfig(
        word_count=args.words,
        time_limit_s=args.seconds,
        sentence_count=args.full_sentences,
        death_mode=args.death_mode,
        pace_wpm=args.pace,
        custom_text=args.text,
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for running the typing test from the command line."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        print(f"speed_typer: {exc}", file=sys.stderr)
        return 2

    db_path = None if args.no_log else (args.db or default_db_path())

    # pygame is only imported once the config is known to be valid.
    try:
        from .app import run
    except ImportError:
        from speed_typer.app import run

    return run(config=config, pool_name=args.word_list, db_path=db_path, seed=args.seed)


if __name__ == "__main__":
    raise SystemExit(main())
