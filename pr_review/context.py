import json
from pathlib import Path
from typing import Any, Dict

from .errors import ConfigurationError, NotAPullRequestError


def load_event(path: str | None) -> Dict[str, Any]:
    """Read the webhook payload GitHub Actions writes to GITHUB_EVENT_PATH."""
    if not path:
        return {}
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            event = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read event payload {p}: {e}") from e
    if not isinstance(event, dict):
        raise ConfigurationError(f"Event payload {p} is not a JSON object")
    return event


def pull_request_number(event: Dict[str, Any]) -> int:
    pr = event.get("pull_request") if isinstance(event, dict) else None
    if not isinstance(pr, dict):
        raise NotAPullRequestError()
    number = pr.get("number")
    if isinstance(number, bool) or not isinstance(number, int):
        raise NotAPullRequestError()
    return number
