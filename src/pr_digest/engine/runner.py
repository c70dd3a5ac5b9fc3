# src/pr_digest/engine/runner.py

"""One end-to-end digest run: fetch, aggregate, render, summarize, send."""

import json
import logging
from datetime import datetime
from typing import Optional

from ..config.settings import Settings
from ..data.fetcher import GitHubRestFetcher
from ..data.models import Report
from ..llm.summarizer import ReportSummarizer
from ..notify.mailer import EmailNotifier
from ..report.html import render_report
from ..utils.helpers import now_utc
from .reporter import ReportBuilder

logger = logging.getLogger(__name__)


def build_fetcher(settings: Settings) -> GitHubRestFetcher:
    return GitHubRestFetcher(
        token=settings.github_token,
        owner=settings.repo_owner,
        repo=settings.repo_name,
        api_url=settings.github_api_url,
        per_page=settings.per_page,
        timeout=settings.request_timeout,
    )


def build_notifier(settings: Settings) -> EmailNotifier:
    return EmailNotifier(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.email_user,
        password=settings.email_pass,
        use_tls=settings.smtp_use_tls,
        sender=settings.email_user,
    )


def build_summarizer(settings: Settings) -> Optional[ReportSummarizer]:
    if not settings.llm_summary_enabled:
        return None
    return ReportSummarizer(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
    )


def run(
    settings: Settings,
    now: Optional[datetime] = None,
    fetcher: Optional[GitHubRestFetcher] = None,
    notifier: Optional[EmailNotifier] = None,
    summarizer: Optional[ReportSummarizer] = None,
) -> Report:
    """Build the digest and send it as a single email.

    Every step runs before the email is sent, so any failure leaves nothing
    delivered. A new fetcher (and with it a new response cache) is made per
    call unless one is passed in.
    """
    now = now or now_utc()
    fetcher = fetcher or build_fetcher(settings)
    notifier = notifier or build_notifier(settings)
    if summarizer is None:
        summarizer = build_summarizer(settings)

    logger.info("Building PR digest for %s", settings.repository)
    builder = ReportBuilder(
        fetcher,
        now,
        recent_window_hours=settings.recent_window_hours,
        abandoned_pr_hours=settings.abandoned_pr_hours,
        abandoned_branch_hours=settings.abandoned_branch_hours,
        author_window_days=settings.author_window_days,
        environments=settings.environments,
    )
    report = builder.build()

    summary = summarizer.summarize(report) if summarizer else None
    html = render_report(report, summary=summary)
    text = json.dumps(summary.model_dump(), indent=2) if summary else None

    notifier.send(settings.recipients, settings.email_subject, html=html, text=text)
    return report
