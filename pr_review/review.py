import asyncio
import logging
from typing import List, Sequence, Tuple

from .diff_annotator import MAX_CHANGES, build_diff
from .github_client import GitHubClient
from .llm_client import ReviewClient
from .models import ChangedFile, PullRequest, Review, RunFailure, RunOutcome, RunSuccess, Suggestion
from .prompts import build_review_prompt

logger = logging.getLogger("pr-review")

DEFAULT_OVERVIEW_TITLE = "GPT-4 Code Review Overview"


async def fetch_pull_request_data(
    github: GitHubClient, number: int
) -> Tuple[PullRequest, List[ChangedFile]]:
    pr, files = await asyncio.gather(
        github.get_pull_request(number),
        github.list_changed_files(number),
    )
    return pr, files


def merge_reviews(results: Sequence[Tuple[str, Review]]) -> Review:
    if len(results) == 1:
        return results[0][1]
    overview = "\n\n".join(f"## {model}\n\n{review.overview}" for model, review in results)
    suggestions = [s for _, review in results for s in review.suggestions]
    return Review(overview=overview, suggestions=suggestions)


async def get_review(reviewer: ReviewClient, prompt: str, models: Sequence[str]) -> Review:
    """Ask every model concurrently and merge the answers in model order."""
    if not models:
        raise ValueError("At least one review model is required")
    reviews = await asyncio.gather(*(reviewer.generate_review(prompt, m) for m in models))
    return merge_reviews(list(zip(models, reviews)))


def format_overview(review: Review, title: str = DEFAULT_OVERVIEW_TITLE) -> str:
    return f"# {title}\n\n{review.overview}"


def format_suggestion(suggestion: Suggestion) -> str:
    return f"{suggestion.suggestion}\n\n{suggestion.explanation}"


async def post_review(
    github: GitHubClient,
    number: int,
    review: Review,
    commit_sha: str,
    title: str = DEFAULT_OVERVIEW_TITLE,
) -> int:
    """
    Post the overview, then one inline comment per suggestion.

    Comments are posted one at a time; if one fails the ones before it stay.
    """
    await github.post_issue_comment(number, format_overview(review, title))

    posted = 0
    for s in review.suggestions:
        await github.post_inline_comment(
            number,
            body=format_suggestion(s),
            commit_id=commit_sha,
            path=s.path,
            line=s.line,
        )
        posted += 1
    return posted


async def review_pull_request(
    github: GitHubClient,
    reviewer: ReviewClient,
    number: int,
    models: Sequence[str] = ("gpt-4o",),
    max_changes: int = MAX_CHANGES,
    title: str = DEFAULT_OVERVIEW_TITLE,
) -> int:
    logger.info(">>> Reviewing PR #%s", number)
    pr, files = await fetch_pull_request_data(github, number)

    diff = build_diff(files, max_changes)
    skipped = sum(1 for f in files if f.changes > max_changes)
    logger.info(">>> %d files changed, %d skipped as too large", len(files), skipped)

    prompt = build_review_prompt(pr.body, diff)
    review = await get_review(reviewer, prompt, models)

    commit_sha = await github.latest_commit_sha(number)
    logger.info(">>> Posting %d suggestions on %s", len(review.suggestions), commit_sha)

    return await post_review(github, number, review, commit_sha, title)


async def run_review(
    github: GitHubClient,
    reviewer: ReviewClient,
    number: int,
    models: Sequence[str] = ("gpt-4o",),
    max_changes: int = MAX_CHANGES,
    title: str = DEFAULT_OVERVIEW_TITLE,
) -> RunOutcome:
    try:
        posted = await review_pull_request(github, reviewer, number, models, max_changes, title)
    except Exception as e:
        logger.exception("Review of PR #%s failed", number)
        return RunFailure(message=str(e) or e.__class__.__name__)

    logger.info("Review comments posted successfully")
    return RunSuccess(posted_comments=posted)
