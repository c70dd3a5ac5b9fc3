# src/pr_digest/errors.py

"""Exception types raised while building and sending the digest."""

from typing import Optional


class PrDigestError(Exception):
    """Base class for errors that abort a digest run."""


class ApiError(PrDigestError):
    """The GitHub API call failed (non-2xx, network failure or bad JSON)."""

    def __init__(self, status_code: Optional[int], message: str, url: str = ""):
        self.status_code = status_code
        self.message = message
        self.url = url
        super().__init__(str(self))

    def __str__(self) -> str:
        status = self.status_code if self.status_code is not None else "n/a"
        where = f" for {self.url}" if self.url else ""
        return f"GitHub API error (HTTP {status}){where}: {self.message}"


class ConfigError(PrDigestError):
    """A required setting is missing or invalid."""


class FormatError(PrDigestError):
    """The completion API returned something other than the expected JSON."""
