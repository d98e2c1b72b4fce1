"""
Operator CLI.

Usage:
    # Start the API server
    python -m app.cli serve --port 8000

    # Create the override table
    python -m app.cli init-db

    # Screen a ticker and print the result as JSON
    python -m app.cli screen --ticker XOM

    # Lock a ticker from the current screening result
    python -m app.cli lock --ticker XOM

    # Print the locked / needs-review split
    python -m app.cli review --query GO
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict

from app.core.config import settings
from app.domain.qualitative.errors import QualitativeDomainError
from app.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the FastAPI application under uvicorn."""
    import uvicorn

    logger.info("Starting %s at http://%s:%d", settings.project_name, args.host, args.port)
    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=False)


def cmd_init_db(args: argparse.Namespace) -> None:
    """Create the override table if it does not exist."""
    from app.infrastructure.qualitative.override_repository import create_schema
    from app.interfaces.qualitative.dependencies import get_db_engine

    create_schema(get_db_engine())
    logger.info("Override store ready.")


def cmd_screen(args: argparse.Namespace) -> None:
    """Print the qualitative screening of one ticker."""
    from app.application.qualitative.dtos import ScreenQualitativeQuery
    from app.interfaces.qualitative.dependencies import get_screen_qualitative_use_case

    result = get_screen_qualitative_use_case().execute(
        ScreenQualitativeQuery(ticker=args.ticker)
    )
    print(json.dumps(asdict(result), indent=2))


def cmd_lock(args: argparse.Namespace) -> None:
    """Lock a ticker from its current screening result."""
    from app.application.qualitative.dtos import LockFromCurrentResultCommand
    from app.interfaces.qualitative.dependencies import (
        get_lock_from_current_result_use_case,
    )

    result = get_lock_from_current_result_use_case().execute(
        LockFromCurrentResultCommand(ticker=args.ticker)
    )
    logger.info(result.message)


def cmd_review(args: argparse.Namespace) -> None:
    """Print the locked / pending split of the covered tickers."""
    from app.application.qualitative.dtos import ReviewSummaryQuery
    from app.interfaces.qualitative.dependencies import get_review_summary_use_case

    result = get_review_summary_use_case().execute(ReviewSummaryQuery(query=args.query))
    print(json.dumps(asdict(result), indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{settings.project_name} CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.set_defaults(func=cmd_serve)

    init_parser = subparsers.add_parser("init-db", help="Create the override table")
    init_parser.set_defaults(func=cmd_init_db)

    screen_parser = subparsers.add_parser("screen", help="Screen a ticker")
    screen_parser.add_argument("--ticker", required=True)
    screen_parser.set_defaults(func=cmd_screen)

    lock_parser = subparsers.add_parser(
        "lock", help="Lock a ticker from its current screening result"
    )
    lock_parser.add_argument("--ticker", required=True)
    lock_parser.set_defaults(func=cmd_lock)

    review_parser = subparsers.add_parser("review", help="Show the review summary")
    review_parser.add_argument(
        "--query", default=None, help="Case-insensitive ticker substring filter"
    )
    review_parser.set_defaults(func=cmd_review)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(level=settings.log_level, stream=sys.stderr)
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except QualitativeDomainError as exc:
        logger.error(exc.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
