# pr_review/errors.py
class ReviewError(Exception):
    """Base error for a review run."""


class ConfigurationError(ReviewError):
    """Required configuration (credentials, repository) is missing or invalid."""


class NotAPullRequestError(ReviewError):
    def __init__(self, message: str = "This action can only be run on pull requests"):
        super().__init__(message)
