# tests/test_engine/test_runner.py

import json
from unittest.mock import MagicMock

import pytest

from pr_digest.config.settings import get_settings
from pr_digest.engine.runner import run
from pr_digest.errors import ApiError, FormatError
from pr_digest.llm.summarizer import DailySummary

from conftest import NOW, RecordingNotifier


@pytest.fixture
def settings(mock_env_vars):
    return get_settings()


def test_run_sends_one_html_email(settings, sample_fetcher):
    notifier = RecordingNotifier()

    report = run(settings, now=NOW, fetcher=sample_fetcher, notifier=notifier)

    assert len(notifier.sent) == 1
    message = notifier.sent[0]
    assert message["recipients"] == ["alice@example.com", "bob@example.com"]
    assert message["subject"] == "Daily GitHub PR Report"
    assert "old-spike" in message["html"]
    assert message["text"] is None
    assert report.repository == "acme/widgets"


def test_failed_branch_lookup_sends_nothing(settings, sample_fetcher):
    sample_fetcher.failing_commits.add("bbb222")
    notifier = RecordingNotifier()

    with pytest.raises(ApiError):
        run(settings, now=NOW, fetcher=sample_fetcher, notifier=notifier)

    assert notifier.sent == []


def test_summary_is_attached_as_json_text(settings, sample_fetcher):
    notifier = RecordingNotifier()
    summarizer = MagicMock()
    summarizer.summarize.return_value = DailySummary(
        headline="Quiet day", highlights=["PR 3 merged"]
    )

    run(
        settings,
        now=NOW,
        fetcher=sample_fetcher,
        notifier=notifier,
        summarizer=summarizer,
    )

    message = notifier.sent[0]
    assert json.loads(message["text"])["headline"] == "Quiet day"
    assert "PR 3 merged" in message["html"]


def test_bad_summary_sends_nothing(settings, sample_fetcher):
    notifier = RecordingNotifier()
    summarizer = MagicMock()
    summarizer.summarize.side_effect = FormatError("not JSON")

    with pytest.raises(FormatError):
        run(
            settings,
            now=NOW,
            fetcher=sample_fetcher,
            notifier=notifier,
            summarizer=summarizer,
        )

    assert notifier.sent == []
