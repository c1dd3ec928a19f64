import argparse
import asyncio
import logging
from typing import Optional, Sequence

from .action import report_outcome, run_action
from .config import configure_logging, load_settings
from .context import load_event, pull_request_number
from .errors import ConfigurationError, ReviewError
from .models import RunFailure

logger = logging.getLogger("pr-review")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pr-review",
        description="Review a pull request with a language model and post the feedback as comments.",
    )
    parser.add_argument("--repo", help="owner/repo (default: $GITHUB_REPOSITORY)")
    parser.add_argument("--pr", type=int, help="Pull request number (default: from the event payload)")
    parser.add_argument("--event-path", help="Event payload JSON (default: $GITHUB_EVENT_PATH)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        number = args.pr
        if number is None:
            event = load_event(args.event_path or settings.github_event_path)
            number = pull_request_number(event)
        repository = args.repo or settings.github_repository
        if not repository:
            raise ConfigurationError("GITHUB_REPOSITORY is not set and --repo was not given")
    except ReviewError as e:
        logger.error("%s", e)
        return report_outcome(RunFailure(message=str(e)))

    outcome = asyncio.run(run_action(settings, number, repository))
    return report_outcome(outcome)
