import logging
from typing import Any, Dict, List, Optional

import httpx

from .errors import ConfigurationError, ReviewError
from .models import ChangedFile, Commit, PullRequest

logger = logging.getLogger("pr-review.github")

API_BASE = "https://api.github.com"
USER_AGENT = "PR-Review-Action"
PER_PAGE = 100


def github_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github+json",
        "User-Agent": USER_AGENT,
    }


def make_http_client(token: str, base_url: str = API_BASE, timeout: float = 30.0) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url.rstrip("/"),
        headers=github_headers(token),
        timeout=timeout,
    )


class GitHubClient:
    """Pull-request operations for a single repository."""

    def __init__(self, http: httpx.AsyncClient, repository: Optional[str]):
        if not repository or "/" not in repository:
            raise ConfigurationError(
                f"Repository must be given as 'owner/repo', got {repository!r}"
            )
        self.http = http
        self.owner, self.repo = repository.split("/", 1)

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        resp = await self.http.get(url, params=params)
        logger.debug("GET %s -> %s", url, resp.status_code)
        resp.raise_for_status()
        return resp.json()

    async def _post(self, url: str, payload: Dict[str, Any]) -> Any:
        resp = await self.http.post(url, json=payload)
        logger.info("POST %s -> %s", url, resp.status_code)
        resp.raise_for_status()
        return resp.json()

    async def _get_paginated(self, url: str) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            batch = await self._get(url, params={"page": page, "per_page": PER_PAGE})
            if not batch:
                break
            items.extend(batch)
            if len(batch) < PER_PAGE:
                break
            page += 1
        return items

    async def get_pull_request(self, number: int) -> PullRequest:
        data = await self._get(f"{self.repo_path}/pulls/{number}")
        return PullRequest(
            number=data.get("number", number),
            body=data.get("body"),
        )

    async def list_changed_files(self, number: int) -> List[ChangedFile]:
        items = await self._get_paginated(f"{self.repo_path}/pulls/{number}/files")
        return [ChangedFile(**it) for it in items]

    async def list_commits(self, number: int) -> List[Commit]:
        items = await self._get_paginated(f"{self.repo_path}/pulls/{number}/commits")
        return [Commit(**it) for it in items]

    async def latest_commit_sha(self, number: int) -> str:
        commits = await self.list_commits(number)
        if not commits:
            raise ReviewError(f"Pull request #{number} has no commits")
        return commits[-1].sha

    async def post_issue_comment(self, number: int, body: str) -> None:
        await self._post(f"{self.repo_path}/issues/{number}/comments", {"body": body})

    async def post_inline_comment(
        self,
        number: int,
        body: str,
        commit_id: str,
        path: str,
        line: int,
    ) -> None:
        payload = {
            "body": body,
            "commit_id": commit_id,
            "path": path,
            "line": line,
            "side": "RIGHT",
        }
        await self._post(f"{self.repo_path}/pulls/{number}/comments", payload)
