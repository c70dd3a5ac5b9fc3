"""Pytest configuration for the PR digest."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pytest

from pr_digest.errors import ApiError

# Reference time shared by the aggregation tests.
NOW = datetime(2024, 1, 10, 0, 0, 0, tzinfo=timezone.utc)


def make_pr(
    number: int,
    author: str = "testuser",
    state: str = "open",
    created_at: str = "2024-01-09T00:00:00Z",
    updated_at: str = "2024-01-09T00:00:00Z",
    merged_at: Optional[str] = None,
    closed_at: Optional[str] = None,
    title: Optional[str] = None,
    head: str = "feature",
    base: str = "main",
) -> Dict[str, Any]:
    """Raw pulls-endpoint object, trimmed to the fields the digest reads."""
    return {
        "number": number,
        "title": title or f"PR {number}",
        "user": {"login": author},
        "head": {"ref": head},
        "base": {"ref": base},
        "state": state,
        "created_at": created_at,
        "updated_at": updated_at,
        "merged_at": merged_at,
        "closed_at": closed_at,
        "html_url": f"https://github.com/acme/widgets/pull/{number}",
    }


def make_branch(name: str, sha: str) -> Dict[str, Any]:
    return {
        "name": name,
        "commit": {
            "sha": sha,
            "url": f"https://api.github.com/repos/acme/widgets/commits/{sha}",
        },
    }


def make_commit(sha: str, date: str) -> Dict[str, Any]:
    return {
        "sha": sha,
        "commit": {
            "author": {"name": "Test User", "date": date},
            "committer": {"name": "Test User", "date": date},
        },
    }


def make_deployment(
    deployment_id: int, environment: str, ref: str, created_at: str
) -> Dict[str, Any]:
    return {
        "id": deployment_id,
        "environment": environment,
        "ref": ref,
        "created_at": created_at,
    }


class FakeFetcher:
    """Stands in for GitHubRestFetcher, serving canned payloads."""

    def __init__(
        self,
        pulls=None,
        branches=None,
        commits=None,
        deployments=None,
        failing_commits=(),
        owner="acme",
        repo="widgets",
    ):
        self.owner = owner
        self.repo = repo
        self.pulls = pulls or {"open": [], "closed": [], "all": []}
        self.branches = branches or []
        self.commits = commits or {}
        self.deployments = deployments or []
        self.failing_commits = set(failing_commits)
        self.calls = []

    def fetch_pull_requests(self, state="open"):
        self.calls.append(("pulls", state))
        return self.pulls.get(state, [])

    def fetch_branches(self):
        self.calls.append(("branches",))
        return self.branches

    def fetch_commit(self, sha):
        self.calls.append(("commit", sha))
        if sha in self.failing_commits:
            raise ApiError(404, "No commit found for SHA: " + sha)
        return self.commits[sha]

    def fetch_deployments(self):
        self.calls.append(("deployments",))
        return self.deployments


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send(self, recipients, subject, html=None, text=None):
        self.sent.append(
            {"recipients": recipients, "subject": subject, "html": html, "text": text}
        )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_fetcher() -> FakeFetcher:
    """A repository with a little of everything, relative to NOW."""
    open_prs = [
        make_pr(1, "alice", updated_at="2024-01-09T18:00:00Z",
                created_at="2024-01-08T10:00:00Z"),
        make_pr(2, "bob", updated_at="2024-01-05T09:00:00Z",
                created_at="2023-12-20T09:00:00Z", head="stale-work"),
    ]
    closed_prs = [
        make_pr(3, "alice", state="closed", created_at="2024-01-07T00:00:00Z",
                updated_at="2024-01-09T12:00:00Z", merged_at="2024-01-09T12:00:00Z",
                closed_at="2024-01-09T12:00:00Z"),
        make_pr(4, "carol", state="closed", created_at="2024-01-01T00:00:00Z",
                updated_at="2024-01-09T20:00:00Z", closed_at="2024-01-09T20:00:00Z"),
        make_pr(5, "bob", state="closed", created_at="2023-12-01T00:00:00Z",
                updated_at="2024-01-08T00:00:00Z", merged_at="2024-01-08T00:00:00Z",
                closed_at="2024-01-08T00:00:00Z"),
    ]
    return FakeFetcher(
        pulls={"open": open_prs, "closed": closed_prs, "all": open_prs + closed_prs},
        branches=[make_branch("main", "aaa111"), make_branch("old-spike", "bbb222")],
        commits={
            "aaa111": make_commit("aaa111", "2024-01-09T20:00:00Z"),
            "bbb222": make_commit("bbb222", "2024-01-07T00:00:00Z"),
        },
        deployments=[
            make_deployment(11, "Dev", "feature-x", "2024-01-08T00:00:00Z"),
            make_deployment(12, "QA", "release-1.2", "2024-01-08T06:00:00Z"),
            make_deployment(13, "dev", "feature-y", "2024-01-09T00:00:00Z"),
        ],
    )


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    monkeypatch.setenv("GITHUB_TOKEN", "test_token")
    monkeypatch.setenv("REPO_OWNER", "acme")
    monkeypatch.setenv("REPO_NAME", "widgets")
    monkeypatch.setenv("EMAIL_USER", "digest@example.com")
    monkeypatch.setenv("EMAIL_PASS", "secret")
    monkeypatch.setenv("EMAIL_TO", "alice@example.com, bob@example.com")
    monkeypatch.delenv("LLM_SUMMARY_ENABLED", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
