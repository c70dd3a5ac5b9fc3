# src/pr_digest/engine/metrics.py

from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..data.models import (
    AbandonedBranch,
    Branch,
    Commit,
    Deployment,
    PRStatusSummary,
    PullRequest,
)
from ..utils.helpers import is_after, is_before, window_start


class MetricsCalculator:
    """Time-windowed aggregations over pull requests, branches and deployments.

    All windows are measured back from the single reference time ``now``
    captured at run start. "Within a window" means strictly after its start;
    "older than a threshold" means strictly before it, so an item sitting
    exactly on a boundary is in neither bucket.
    """

    def __init__(self, now: datetime):
        """Initialize the calculator with the run's reference time."""
        self.now = now

    def pr_status_summary(
        self,
        open_prs: List[PullRequest],
        closed_prs: Iterable[PullRequest],
        window_hours: float = 24,
    ) -> PRStatusSummary:
        """Splits recently resolved PRs into merged and closed-without-merge.

        A merged PR counts if ``merged_at`` falls in the window; an unmerged
        one counts if ``closed_at`` (or ``updated_at`` when GitHub omits it)
        does.
        """
        cutoff = window_start(self.now, hours=window_hours)
        merged, closed = [], []

        for pr in closed_prs:
            if pr.is_merged:
                if is_after(pr.merged_at, cutoff):
                    merged.append(pr)
            elif is_after(pr.closed_at or pr.updated_at, cutoff):
                closed.append(pr)

        return PRStatusSummary(open=list(open_prs), merged=merged, closed=closed)

    def abandoned_prs(
        self, open_prs: Iterable[PullRequest], threshold_hours: float = 24
    ) -> List[PullRequest]:
        """Open PRs not updated within the threshold, in upstream order."""
        cutoff = window_start(self.now, hours=threshold_hours)
        return [pr for pr in open_prs if is_before(pr.updated_at, cutoff)]

    def abandoned_branches(
        self,
        branch_tips: Iterable[Tuple[Branch, Commit]],
        threshold_hours: float = 48,
    ) -> List[AbandonedBranch]:
        """Branches whose tip commit is older than the threshold."""
        cutoff = window_start(self.now, hours=threshold_hours)
        return [
            AbandonedBranch(name=branch.name, last_commit=commit.timestamp)
            for branch, commit in branch_tips
            if is_before(commit.timestamp, cutoff)
        ]

    def pr_count_by_author(
        self, prs: Iterable[PullRequest], window_days: float = 7
    ) -> Dict[str, int]:
        """Counts PRs opened within the window, grouped by author handle."""
        cutoff = window_start(self.now, days=window_days)
        counts = Counter(pr.author for pr in prs if is_after(pr.created_at, cutoff))
        return dict(counts)

    def active_branch_per_environment(
        self, deployments: Iterable[Deployment], environments: Sequence[str]
    ) -> Dict[str, Optional[str]]:
        """Maps each recognized environment to the ref most recently deployed.

        Labels match case-insensitively. The newest ``created_at`` wins; on a
        tie (or when timestamps are missing) the later entry in the listing
        wins. Environments with no deployment map to ``None``.
        """
        by_label = {env.lower(): env for env in environments}
        latest: Dict[str, Deployment] = {}

        for deployment in deployments:
            env = by_label.get(deployment.environment.lower())
            if env is None:
                continue
            current = latest.get(env)
            if (
                current is None
                or current.created_at is None
                or deployment.created_at is None
                or deployment.created_at >= current.created_at
            ):
                latest[env] = deployment

        return {
            env: (latest[env].ref if env in latest else None) for env in environments
        }
