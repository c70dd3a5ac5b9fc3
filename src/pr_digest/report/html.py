# src/pr_digest/report/html.py

"""Renders a digest report to HTML with Jinja2."""

import os
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from jinja2 import Environment, FileSystemLoader

from ..data.models import Report

if TYPE_CHECKING:
    from ..llm.summarizer import DailySummary

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")


def format_timestamp(value: Optional[datetime]) -> str:
    """Formats a timestamp for display, or "-" when absent."""
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M UTC")


def _environment() -> Environment:
    # Autoescape everything: titles, handles and refs come from GitHub users.
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["timestamp"] = format_timestamp
    return env


def render_report(report: Report, summary: Optional["DailySummary"] = None) -> str:
    """Render the report as an HTML document.

    Args:
        report: The aggregated digest.
        summary: Optional ``DailySummary`` from the completion API, shown
            above the tables.
    """
    template = _environment().get_template("report.html")
    author_counts = sorted(
        report.pr_count_by_author.items(), key=lambda item: (-item[1], item[0])
    )
    return template.render(report=report, summary=summary, author_counts=author_counts)
