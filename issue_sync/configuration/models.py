"""Models for configuration between CLI arguments, environment variables and the config file."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


class JiraAuthenticationType(str, Enum):
    """Enum for JIRA authentication types."""

    BASIC = "basic"
    TOKEN = "token"


class ProjectModel(BaseModel):
    """Pydantic model for a GitHub repository to JIRA project pair in the config file."""

    repo: str = ""
    key: str = ""


class ConfigFileModel(BaseModel):
    """Pydantic model for the configuration file.

    Keys are hyphenated in the file (e.g., `jira-uri`). Unknown keys are kept so
    that saving the file does not drop them.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    log_level: str | None = Field(default=None, alias="log-level")
    github_token: str | None = Field(default=None, alias="github-token")
    github_api_url: str | None = Field(default=None, alias="github-api-url")
    github_app_id: int | None = Field(default=None, alias="github-app-id")
    github_app_private_key_path: Path | None = Field(default=None, alias="github-app-private-key-path")
    github_app_installation_id: int | None = Field(default=None, alias="github-app-installation-id")
    jira_user: str | None = Field(default=None, alias="jira-user")
    jira_pass: str | None = Field(default=None, alias="jira-pass")
    jira_token: str | None = Field(default=None, alias="jira-token")
    jira_uri: str | None = Field(default=None, alias="jira-uri")
    repo_name: str | None = Field(default=None, alias="repo-name")
    jira_project: str | None = Field(default=None, alias="jira-project")
    projects: list[ProjectModel] = Field(default_factory=list)
    since: str | datetime | None = None
    timeout: float | None = None
    period: float | None = None
    dry_run: bool | None = Field(default=None, alias="dry-run")
    issue_type: str | None = Field(default=None, alias="issue-type")
    field_cache: dict[str, str] | None = Field(default=None, alias="fields")


@dataclass
class ProjectMapping:
    """A GitHub repository and the JIRA project its issues are synchronized into."""

    repo: str
    jira_project_key: str


@dataclass
class SyncConfig:
    """Reconciled configuration for a synchronization run."""

    log_level: str
    github_api_url: str
    github_authentication_type: GitHubAuthenticationType
    github_pat_token: str | None
    github_app_id: int | None
    github_app_private_key_path: Path | None
    github_app_installation_id: int | None
    jira_uri: str
    jira_authentication_type: JiraAuthenticationType
    jira_user: str | None
    jira_pass: str | None
    jira_token: str | None
    projects: list[ProjectMapping]
    since: datetime
    timeout: float
    period: float
    dry_run: bool
    issue_type: str
    config_file: Path | None = None
    cached_fields: dict[str, str] = field(default_factory=dict)

    @property
    def is_daemon(self) -> bool:
        """Whether the synchronization repeats on a fixed period."""
        return self.period > 0
