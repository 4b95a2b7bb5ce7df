"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application.

    Every variable is prefixed with ISSUE_SYNC_ (e.g., ISSUE_SYNC_JIRA_URI).
    """

    model_config = SettingsConfigDict(
        env_prefix="ISSUE_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    CONFIG: Path | None = None
    LOG_LEVEL: str | None = None
    SINCE: str | None = None
    TIMEOUT: float | None = None
    PERIOD: float | None = None
    DRY_RUN: bool | None = None

    # GitHub API settings
    GITHUB_API_URL: str | None = None
    REPO_NAME: str | None = None

    # GitHub PAT settings
    GITHUB_TOKEN: str | None = None

    # GitHub App settings
    GITHUB_APP_ID: int | None = None
    GITHUB_APP_PRIVATE_KEY_PATH: Path | None = None
    GITHUB_APP_INSTALLATION_ID: int | None = None

    # JIRA settings
    JIRA_URI: str | None = None
    JIRA_USER: str | None = None
    JIRA_PASS: str | None = None
    JIRA_TOKEN: str | None = None
    JIRA_PROJECT: str | None = None
    ISSUE_TYPE: str | None = None


settings = Settings()
