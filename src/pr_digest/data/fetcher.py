# src/pr_digest/data/fetcher.py

"""REST data fetcher for GitHub pull requests, branches, commits and deployments."""

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..errors import ApiError

logger = logging.getLogger(__name__)


class GitHubRestFetcher:
    """Fetches raw JSON payloads from the GitHub REST API.

    Every call is a single attempt; failures surface as :class:`ApiError`.
    Successful responses are memoized for the lifetime of the instance, so
    one fetcher should be created per run.
    """

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        api_url: str = "https://api.github.com",
        per_page: int = 100,
        timeout: float = 30.0,
    ):
        """Initialize the fetcher."""
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.per_page = per_page
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
        }
        self._cache: Dict[Tuple[str, Tuple[Tuple[str, Any], ...]], Any] = {}

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _error_message(self, response: requests.Response) -> str:
        """Prefer the upstream JSON 'message' over the raw body."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return (response.text or response.reason or "request failed")[:300]

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Issue one GET against the API and return the decoded JSON body."""
        params = params or {}
        key = (path, tuple(sorted(params.items())))
        if key in self._cache:
            logger.debug("Cache hit for %s %s", path, params)
            return self._cache[key]

        url = f"{self.api_url}{path}"
        logger.debug("GET %s %s", url, params)
        try:
            response = requests.get(
                url, headers=self.headers, params=params, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise ApiError(None, str(exc), url=url) from exc

        if not 200 <= response.status_code < 300:
            raise ApiError(response.status_code, self._error_message(response), url=url)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError(
                response.status_code, f"invalid JSON in response: {exc}", url=url
            ) from exc

        self._cache[key] = payload
        return payload

    def _get_list(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        payload = self.get(path, params)
        if not isinstance(payload, list):
            raise ApiError(
                None, f"expected a JSON array from {path}", url=f"{self.api_url}{path}"
            )
        return payload

    def fetch_pull_requests(self, state: str = "open") -> List[Dict[str, Any]]:
        """Fetch the first page of pull requests in the given state."""
        if state not in ("open", "closed", "all"):
            raise ValueError(f"Unknown pull request state: {state!r}")
        return self._get_list(
            f"{self.repo_path}/pulls", {"state": state, "per_page": self.per_page}
        )

    def fetch_branches(self) -> List[Dict[str, Any]]:
        """Fetch the first page of branches."""
        return self._get_list(
            f"{self.repo_path}/branches", {"per_page": self.per_page}
        )

    def fetch_commit(self, sha: str) -> Dict[str, Any]:
        """Fetch a single commit by sha or ref."""
        path = f"{self.repo_path}/commits/{sha}"
        payload = self.get(path)
        if not isinstance(payload, dict):
            raise ApiError(
                None,
                f"expected a JSON object for commit {sha}",
                url=f"{self.api_url}{path}",
            )
        return payload

    def fetch_deployments(self) -> List[Dict[str, Any]]:
        """Fetch the first page of deployments."""
        return self._get_list(
            f"{self.repo_path}/deployments", {"per_page": self.per_page}
        )
