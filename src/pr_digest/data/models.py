# src/pr_digest/data/models.py

"""Typed records for the data pulled from GitHub and the derived report."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class PullRequest(Record):
    number: int
    title: str
    author: str
    head_ref: str
    base_ref: str
    state: str  # "open" or "closed"
    created_at: datetime
    updated_at: datetime
    merged_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    url: Optional[str] = None

    @property
    def is_merged(self) -> bool:
        return self.merged_at is not None


class Branch(Record):
    name: str
    commit_sha: str
    commit_url: Optional[str] = None


class Commit(Record):
    sha: str
    authored_at: Optional[datetime] = None
    committed_at: Optional[datetime] = None

    @property
    def timestamp(self) -> Optional[datetime]:
        """Author date, falling back to the committer date."""
        return self.authored_at or self.committed_at


class Deployment(Record):
    id: int
    environment: str
    ref: str
    created_at: Optional[datetime] = None


class AbandonedBranch(Record):
    name: str
    last_commit: datetime


class PRStatusSummary(Record):
    open: List[PullRequest] = Field(default_factory=list)
    merged: List[PullRequest] = Field(default_factory=list)
    closed: List[PullRequest] = Field(default_factory=list)


class Report(Record):
    """Everything the digest email shows for one run."""

    repository: str
    generated_at: datetime
    summary: PRStatusSummary
    abandoned_prs: List[PullRequest] = Field(default_factory=list)
    abandoned_branches: List[AbandonedBranch] = Field(default_factory=list)
    pr_count_by_author: Dict[str, int] = Field(default_factory=dict)
    active_branches: Dict[str, Optional[str]] = Field(default_factory=dict)
    recent_window_hours: float = 24
    author_window_days: float = 7
