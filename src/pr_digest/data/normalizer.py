"""Data normalization utilities for the PR digest."""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..errors import ApiError
from ..utils.helpers import parse_datetime
from .models import Branch, Commit, Deployment, PullRequest


class DataNormalizer:
    """Normalizes raw GitHub REST payloads into typed records.

    Malformed payloads raise :class:`ApiError`, since they mean the upstream
    response did not match the documented shape.
    """

    @staticmethod
    def _login(user_obj: Optional[Dict[str, Any]]) -> str:
        """Helper to safely extract a user handle."""
        if not user_obj:
            return "ghost"
        return user_obj.get("login") or "ghost"

    @classmethod
    def normalize_pull_request(cls, pr: Dict[str, Any]) -> PullRequest:
        """Normalize one pull request object.

        Args:
            pr: Raw PR object from the pulls endpoint.

        Returns:
            The normalized PR.
        """
        try:
            return PullRequest(
                number=pr["number"],
                title=pr.get("title") or "",
                author=cls._login(pr.get("user")),
                head_ref=(pr.get("head") or {}).get("ref", ""),
                base_ref=(pr.get("base") or {}).get("ref", ""),
                state=pr["state"],
                created_at=parse_datetime(pr["created_at"]),
                updated_at=parse_datetime(pr["updated_at"]),
                merged_at=parse_datetime(pr.get("merged_at")),
                closed_at=parse_datetime(pr.get("closed_at")),
                url=pr.get("html_url"),
            )
        except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
            number = pr.get("number") if isinstance(pr, dict) else None
            raise ApiError(
                None, f"malformed pull request payload #{number}: {exc}"
            ) from exc

    @classmethod
    def normalize_pull_requests(cls, prs: List[Dict[str, Any]]) -> List[PullRequest]:
        """Normalize a list of pull requests, preserving upstream order."""
        return [cls.normalize_pull_request(pr) for pr in prs]

    @staticmethod
    def normalize_branches(branches: List[Dict[str, Any]]) -> List[Branch]:
        """Normalize branch listing objects."""
        normalized = []
        for branch in branches:
            try:
                commit = branch["commit"]
                normalized.append(
                    Branch(
                        name=branch["name"],
                        commit_sha=commit["sha"],
                        commit_url=commit.get("url"),
                    )
                )
            except (AttributeError, KeyError, TypeError, ValidationError) as exc:
                raise ApiError(None, f"malformed branch payload: {exc}") from exc
        return normalized

    @staticmethod
    def normalize_commit(commit: Dict[str, Any]) -> Commit:
        """Normalize a single-commit lookup response."""
        try:
            details = commit["commit"]
            return Commit(
                sha=commit["sha"],
                authored_at=parse_datetime((details.get("author") or {}).get("date")),
                committed_at=parse_datetime(
                    (details.get("committer") or {}).get("date")
                ),
            )
        except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
            raise ApiError(None, f"malformed commit payload: {exc}") from exc

    @staticmethod
    def normalize_deployments(deployments: List[Dict[str, Any]]) -> List[Deployment]:
        """Normalize deployment listing objects, preserving upstream order."""
        normalized = []
        for deployment in deployments:
            try:
                normalized.append(
                    Deployment(
                        id=deployment["id"],
                        environment=deployment.get("environment") or "",
                        ref=deployment.get("ref") or "",
                        created_at=parse_datetime(deployment.get("created_at")),
                    )
                )
            except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
                raise ApiError(None, f"malformed deployment payload: {exc}") from exc
        return normalized
