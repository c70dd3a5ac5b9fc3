# src/pr_digest/engine/reporter.py

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..data.fetcher import GitHubRestFetcher
from ..data.models import AbandonedBranch, PRStatusSummary, PullRequest, Report
from ..data.normalizer import DataNormalizer
from .metrics import MetricsCalculator

logger = logging.getLogger(__name__)


class ReportBuilder:
    """Fetches GitHub data and runs each aggregation for one digest."""

    def __init__(
        self,
        fetcher: GitHubRestFetcher,
        now: datetime,
        recent_window_hours: float = 24,
        abandoned_pr_hours: float = 24,
        abandoned_branch_hours: float = 48,
        author_window_days: float = 7,
        environments: Sequence[str] = ("Dev", "QA", "UAT"),
    ):
        """
        Initialize the report builder.

        Args:
            fetcher: Fetcher scoped to this run; its cache dies with it.
            now: Reference time every window is measured from.
        """
        self.fetcher = fetcher
        self.now = now
        self.calculator = MetricsCalculator(now)
        self.recent_window_hours = recent_window_hours
        self.abandoned_pr_hours = abandoned_pr_hours
        self.abandoned_branch_hours = abandoned_branch_hours
        self.author_window_days = author_window_days
        self.environments = list(environments)

    def _pull_requests(self, state: str) -> List[PullRequest]:
        return DataNormalizer.normalize_pull_requests(
            self.fetcher.fetch_pull_requests(state)
        )

    def get_pr_status_summary(self) -> PRStatusSummary:
        summary = self.calculator.pr_status_summary(
            self._pull_requests("open"),
            self._pull_requests("closed"),
            window_hours=self.recent_window_hours,
        )
        logger.info(
            "PR status: %d open, %d merged, %d closed without merge",
            len(summary.open),
            len(summary.merged),
            len(summary.closed),
        )
        return summary

    def get_abandoned_prs(self) -> List[PullRequest]:
        abandoned = self.calculator.abandoned_prs(
            self._pull_requests("open"), threshold_hours=self.abandoned_pr_hours
        )
        logger.info("Found %d abandoned PRs", len(abandoned))
        return abandoned

    def get_abandoned_branches(self) -> List[AbandonedBranch]:
        """Looks up every branch tip; one failed lookup fails the whole step."""
        branches = DataNormalizer.normalize_branches(self.fetcher.fetch_branches())
        branch_tips = []
        for branch in branches:
            commit = DataNormalizer.normalize_commit(
                self.fetcher.fetch_commit(branch.commit_sha)
            )
            branch_tips.append((branch, commit))

        abandoned = self.calculator.abandoned_branches(
            branch_tips, threshold_hours=self.abandoned_branch_hours
        )
        logger.info(
            "Found %d abandoned branches out of %d", len(abandoned), len(branches)
        )
        return abandoned

    def get_pr_count_by_author(self) -> Dict[str, int]:
        counts = self.calculator.pr_count_by_author(
            self._pull_requests("all"), window_days=self.author_window_days
        )
        logger.info("PRs opened in window by %d authors", len(counts))
        return counts

    def get_active_branch_per_environment(self) -> Dict[str, Optional[str]]:
        deployments = DataNormalizer.normalize_deployments(
            self.fetcher.fetch_deployments()
        )
        active = self.calculator.active_branch_per_environment(
            deployments, self.environments
        )
        logger.info("Active branches: %s", active)
        return active

    def build(self) -> Report:
        """Runs every aggregation in order and assembles the report."""
        return Report(
            repository=f"{self.fetcher.owner}/{self.fetcher.repo}",
            generated_at=self.now,
            summary=self.get_pr_status_summary(),
            abandoned_prs=self.get_abandoned_prs(),
            abandoned_branches=self.get_abandoned_branches(),
            pr_count_by_author=self.get_pr_count_by_author(),
            active_branches=self.get_active_branch_per_environment(),
            recent_window_hours=self.recent_window_hours,
            author_window_days=self.author_window_days,
        )
