"""Application entry point for the QuizRunner session server."""

from __future__ import annotations

import argparse
from pathlib import Path

from quiz_runner.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_runner.core.quiz_importer import load_quiz_from_file
from quiz_runner.core.services.question_source import QuestionSource, StaticQuestionSource
from quiz_runner.server.api_server import QuizSetProvider, run_api_server
from quiz_runner.utils.logging_config import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve quiz-taking sessions over HTTP.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument(
        "--api-url",
        default=None,
        help="Base URL of the quiz API (defaults to $QUIZ_API_URL or http://localhost:3000).",
    )
    parser.add_argument(
        "--quiz-file",
        type=Path,
        action="append",
        default=[],
        help="Serve quizzes from local text files instead of the quiz API. Repeatable.",
    )
    return parser.parse_args(argv)


def build_source(args: argparse.Namespace) -> QuizSetProvider:
    if args.quiz_file:
        return StaticQuestionSource([load_quiz_from_file(path) for path in args.quiz_file])
    return QuestionSource(base_url=args.api_url)


def main(argv: list[str] | None = None) -> None:
    """Initialize logging, pick the question source and run the API server."""
    args = _parse_args(argv)
    logger = configure_logging()
    logger.info("Starting QuizRunner…")

    source = build_source(args)
    if isinstance(source, QuestionSource):
        logger.info("Fetching quizzes from %s", source.get_base_url())
    else:
        logger.info("Serving %d quiz file(s)", len(args.quiz_file))

    run_api_server(source, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
