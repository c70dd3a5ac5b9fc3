# src/pr_digest/config/settings.py
"""Settings and environment variables for the PR digest."""

from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from ..errors import ConfigError

# Load environment variables from .env file
load_dotenv()


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def split_csv(value: str) -> List[str]:
    """Split a comma-separated setting into trimmed, non-empty parts."""
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings(BaseSettings):
    """Application settings.

    Built once at startup by :func:`get_settings` and passed explicitly to
    :func:`pr_digest.engine.runner.run`.
    """

    # GitHub
    github_token: str
    repo_owner: str
    repo_name: str
    github_api_url: str = "https://api.github.com"
    per_page: int = Field(default=100, ge=1, le=100)
    request_timeout: float = Field(default=30.0, gt=0)

    # Mail
    email_user: str
    email_pass: str
    email_to: str
    email_subject: str = "Daily GitHub PR Report"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_use_tls: bool = True

    # Optional LLM summary
    llm_summary_enabled: bool = False
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: Optional[str] = None

    # Windows and thresholds
    abandoned_pr_hours: float = Field(default=24, gt=0)
    abandoned_branch_hours: float = Field(default=48, gt=0)
    recent_window_hours: float = Field(default=24, gt=0)
    author_window_days: float = Field(default=7, gt=0)
    deployment_environments: str = "Dev,QA,UAT"

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("email_to", "deployment_environments")
    @classmethod
    def require_csv_entries(cls, value: str) -> str:
        """Reject comma-separated settings that contain no entries."""
        if not split_csv(value):
            raise ValueError("must contain at least one comma-separated entry")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def repository(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"

    @property
    def recipients(self) -> List[str]:
        return split_csv(self.email_to)

    @property
    def environments(self) -> List[str]:
        return split_csv(self.deployment_environments)


def get_settings(**overrides) -> Settings:
    """Get the application settings.

    Raises:
        ConfigError: If a required variable is missing or a value is invalid,
            or if the LLM summary is enabled without an API key.
    """
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            name = ".".join(str(part) for part in error["loc"]).upper()
            problems.append(f"{name}: {error['msg']}")
        raise ConfigError("Invalid configuration: " + "; ".join(problems)) from exc

    if settings.llm_summary_enabled and not settings.openai_api_key:
        raise ConfigError(
            "Invalid configuration: OPENAI_API_KEY is required when "
            "LLM_SUMMARY_ENABLED is set"
        )
    return settings
