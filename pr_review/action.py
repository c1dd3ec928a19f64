import logging
from typing import Optional

from openai import AsyncOpenAI

from .config import Settings
from .errors import ConfigurationError
from .github_client import GitHubClient, make_http_client
from .llm_client import ReviewClient
from .models import RunFailure, RunOutcome
from .review import run_review

logger = logging.getLogger("pr-review")


async def run_action(
    settings: Settings, number: int, repository: Optional[str] = None
) -> RunOutcome:
    """Build both API clients for one run and review pull request `number`."""
    try:
        repository = repository or settings.github_repository
        if not settings.models:
            raise ConfigurationError("No review model configured")

        async with make_http_client(
            settings.github_token, settings.github_api_url, settings.http_timeout
        ) as http, AsyncOpenAI(api_key=settings.openai_api_key) as openai:
            github = GitHubClient(http, repository)
            reviewer = ReviewClient(openai)
            return await run_review(
                github,
                reviewer,
                number,
                models=settings.models,
                max_changes=settings.max_changes,
                title=settings.overview_title,
            )
    except ConfigurationError as e:
        logger.error("%s", e)
        return RunFailure(message=str(e))


def escape_workflow_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def report_outcome(outcome: RunOutcome) -> int:
    """Surface an outcome the way a GitHub Action does; returns the exit code."""
    if isinstance(outcome, RunFailure):
        print(f"::error::{escape_workflow_data(outcome.message)}", flush=True)
        return 1
    logger.info("Posted %d inline comments", outcome.posted_comments)
    return 0
