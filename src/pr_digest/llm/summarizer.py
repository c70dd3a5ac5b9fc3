# src/pr_digest/llm/summarizer.py

"""Optional natural-language summary of the digest via an OpenAI-compatible API."""

import json
import logging
import os
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader
from openai import OpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from ..data.models import Report
from ..errors import FormatError, PrDigestError

logger = logging.getLogger(__name__)

PROMPT_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "prompts")


class DailySummary(BaseModel):
    """Shape the completion API must reply with."""

    headline: str
    highlights: List[str] = []
    risks: List[str] = []
    recommendations: List[str] = []


def load_prompt(report: Report, template_file: str = "daily_report.txt") -> str:
    """Render the system prompt template for this report."""
    env = Environment(loader=FileSystemLoader(PROMPT_DIR))
    template = env.get_template(template_file)
    return template.render(
        repository=report.repository,
        recent_window_hours=int(report.recent_window_hours),
        author_window_days=int(report.author_window_days),
    )


def parse_summary(content: Optional[str]) -> DailySummary:
    """Parse the model's reply, raising FormatError unless it is the expected JSON."""
    if not content:
        raise FormatError("Completion API returned an empty reply")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise FormatError(f"Completion API reply is not valid JSON: {exc}") from exc
    try:
        return DailySummary.model_validate(data)
    except ValidationError as exc:
        raise FormatError(f"Completion API reply has an unexpected shape: {exc}") from exc


class ReportSummarizer:
    """Asks a chat-completion model to summarize a digest report."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self.client = client or OpenAI(api_key=api_key, base_url=base_url)

    def summarize(self, report: Report) -> DailySummary:
        """Send the report as JSON and validate the structured reply."""
        logger.info("Requesting report summary from %s", self.model)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=0,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": load_prompt(report)},
                    {"role": "user", "content": report.model_dump_json()},
                ],
            )
        except OpenAIError as exc:
            raise PrDigestError(f"Completion API request failed: {exc}") from exc
        return parse_summary(response.choices[0].message.content)
