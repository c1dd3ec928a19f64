import json
from types import SimpleNamespace

import httpx
import pytest

from pr_review.github_client import GitHubClient
from pr_review.llm_client import ReviewClient
from pr_review.models import Review, Suggestion

SAMPLE_PATCH = """@@ -1,5 +1,5 @@
 function greet(name) {
-  console.log('Hello, ' + name + '!');
+  console.log(`Hello, ${name}!`);
 }
 
 greet('World');"""


class FakeGitHubAPI:
    """Serves the handful of pull-request endpoints through httpx.MockTransport."""

    def __init__(self, pr=None, files=None, commits=None, fail_post_after=None):
        self.pr = pr if pr is not None else {"number": 7, "title": "Greet", "body": "This is a test PR", "head": {"sha": "head"}}
        self.files = files if files is not None else [
            {"filename": "example.js", "patch": SAMPLE_PATCH, "changes": 2, "status": "modified"}
        ]
        self.commits = commits if commits is not None else [{"sha": "aaa"}, {"sha": "bbb"}]
        self.fail_post_after = fail_post_after
        self.requests = []
        self.posted = []

    def _page(self, items, request):
        page = int(request.url.params.get("page", "1"))
        per_page = int(request.url.params.get("per_page", "30"))
        start = (page - 1) * per_page
        return httpx.Response(200, json=items[start:start + per_page])

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "GET":
            if path == "/repos/octo/repo/pulls/7":
                return httpx.Response(200, json=self.pr)
            if path == "/repos/octo/repo/pulls/7/files":
                return self._page(self.files, request)
            if path == "/repos/octo/repo/pulls/7/commits":
                return self._page(self.commits, request)
        if request.method == "POST":
            if self.fail_post_after is not None and len(self.posted) >= self.fail_post_after:
                return httpx.Response(422, json={"message": "Validation Failed"})
            self.posted.append((path, json.loads(request.content)))
            return httpx.Response(201, json={"id": len(self.posted)})
        return httpx.Response(404, json={"message": "Not Found"})


class FakeCompletions:
    def __init__(self, reviews, refusal=None):
        self.reviews = reviews
        self.refusal = refusal
        self.calls = []

    async def parse(self, model, messages, response_format):
        self.calls.append({"model": model, "messages": messages, "response_format": response_format})
        result = self.reviews[model] if isinstance(self.reviews, dict) else self.reviews
        if isinstance(result, Exception):
            raise result
        message = SimpleNamespace(parsed=result, refusal=self.refusal)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, reviews, refusal=None):
        self.completions = FakeCompletions(reviews, refusal)
        self.chat = SimpleNamespace(completions=self.completions)


def make_review(n=2, path="example.js"):
    return Review(
        overview="Looks mostly fine.",
        suggestions=[
            Suggestion(path=path, line=i + 1, suggestion=f"Fix {i}", explanation=f"Because {i}")
            for i in range(n)
        ],
    )


@pytest.fixture
def github_api():
    return FakeGitHubAPI()


def make_github(api: FakeGitHubAPI) -> GitHubClient:
    http = httpx.AsyncClient(
        base_url="https://api.github.com",
        transport=httpx.MockTransport(api.handler),
    )
    return GitHubClient(http, "octo/repo")


def make_reviewer(reviews, refusal=None):
    fake = FakeOpenAI(reviews, refusal)
    return ReviewClient(fake), fake.completions
