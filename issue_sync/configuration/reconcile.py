"""Reconcile configuration between CLI arguments, environment variables and the config file."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import urlparse

import structlog

from issue_sync.configuration.env import settings
from issue_sync.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    InvalidConfigurationValueError,
    JiraAuthenticationConfigurationUndefinedError,
    RequiredConfigurationElementError,
)
from issue_sync.configuration.models import (
    ConfigFileModel,
    GitHubAuthenticationType,
    JiraAuthenticationType,
    ProjectMapping,
    SyncConfig,
)
from issue_sync.utils.constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_JIRA_ISSUE_TYPE,
    DEFAULT_SINCE,
    DEFAULT_TIMEOUT_SECONDS,
    SINCE_DATE_FORMAT,
)
from issue_sync.utils.github import split_repository_in_configuration

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

T = TypeVar("T")


def _pick(*values: T | None) -> T | None:
    """Return the first value that is set, in priority order."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (str | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If both PAT and App configurations are undefined.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    if github_pat_token and (github_app_id or github_app_private_key_path or github_app_installation_id):
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if github_app_id and github_app_private_key_path and github_app_installation_id:
        return GitHubAuthenticationType.APP
    elif github_app_id or github_app_private_key_path or github_app_installation_id:
        missing_settings: list[dict[str, str]] = []
        if not github_app_id:
            missing_settings.append(
                {
                    "name": "GitHub App ID",
                    "cli_name": "--github-app-id",
                    "env_name": "ISSUE_SYNC_GITHUB_APP_ID",
                }
            )
        if not github_app_private_key_path:
            missing_settings.append(
                {
                    "name": "GitHub App private key path",
                    "cli_name": "--github-app-private-key-path",
                    "env_name": "ISSUE_SYNC_GITHUB_APP_PRIVATE_KEY_PATH",
                }
            )
        if not github_app_installation_id:
            missing_settings.append(
                {
                    "name": "GitHub App installation ID",
                    "cli_name": "--github-app-installation-id",
                    "env_name": "ISSUE_SYNC_GITHUB_APP_INSTALLATION_ID",
                }
            )
        msg = "Incomplete GitHub App configuration - missing settings include " + ", ".join(
            f"{setting['name']} (command line option {setting['cli_name']}, environment variable {setting['env_name']})"
            for setting in missing_settings
        )
        raise GitHubAuthenticationConfigurationUndefinedError(msg)
    else:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a token or a GitHub App configuration."
        )


async def validate_jira_authentication_configuration(
    jira_user: str | None,
    jira_pass: str | None,
    jira_token: str | None,
) -> JiraAuthenticationType:
    """Validates the JIRA authentication configuration.

    Basic authentication needs a username and a password (or API token);
    token authentication needs a personal access token only.

    Raises:
        JiraAuthenticationConfigurationUndefinedError: If no usable combination is configured.
    """
    if jira_token and jira_pass:
        raise JiraAuthenticationConfigurationUndefinedError("Both a JIRA password and a JIRA token are defined. Please use one or the other.")

    if jira_token:
        return JiraAuthenticationType.TOKEN

    if jira_user and jira_pass:
        return JiraAuthenticationType.BASIC
    elif jira_user:
        raise JiraAuthenticationConfigurationUndefinedError(
            "JIRA password required (command line option --jira-pass, environment variable ISSUE_SYNC_JIRA_PASS)"
        )
    elif jira_pass:
        raise JiraAuthenticationConfigurationUndefinedError(
            "JIRA username required (command line option --jira-user, environment variable ISSUE_SYNC_JIRA_USER)"
        )
    raise JiraAuthenticationConfigurationUndefinedError(
        "No JIRA authentication configuration provided. Please provide either a username and password or a token."
    )


def validate_jira_uri(jira_uri: str | None) -> str:
    """Validates that the JIRA URI is an absolute http(s) URL."""
    if not jira_uri:
        raise RequiredConfigurationElementError(name="JIRA URI", cli_name="--jira-uri", env_name="ISSUE_SYNC_JIRA_URI")
    parsed = urlparse(jira_uri)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidConfigurationValueError(f"JIRA URI must be a valid URI: {jira_uri}")
    return jira_uri


def parse_since(since: str | datetime | None) -> datetime:
    """Parse the `since` cursor, defaulting to the epoch.

    Naive datetimes are interpreted as UTC.
    """
    if since is None or since == "":
        since = DEFAULT_SINCE
    if isinstance(since, datetime):
        return since if since.tzinfo is not None else since.replace(tzinfo=timezone.utc)
    try:
        return datetime.strptime(since, SINCE_DATE_FORMAT)
    except ValueError as exc:
        raise InvalidConfigurationValueError(f"Since date must be in ISO-8601 format (e.g., {DEFAULT_SINCE}): {since}") from exc


async def reconcile_projects(
    repo_name: str | None,
    jira_project: str | None,
    file_projects: list[Any],
) -> list[ProjectMapping]:
    """Determine the repository/project pairs to synchronize.

    A single repository and project given together take precedence over the
    project list of the configuration file.
    """
    if repo_name or jira_project:
        logger.debug("Using provided project and repo")
        if not repo_name:
            raise RequiredConfigurationElementError(name="GitHub repository", cli_name="--repo-name", env_name="ISSUE_SYNC_REPO_NAME")
        if not jira_project:
            raise RequiredConfigurationElementError(name="JIRA project", cli_name="--jira-project", env_name="ISSUE_SYNC_JIRA_PROJECT")
        try:
            await split_repository_in_configuration(repo=repo_name)
        except ValueError as exc:
            raise InvalidConfigurationValueError(f"GitHub repository must be of form owner/repo: {repo_name}") from exc
        return [ProjectMapping(repo=repo_name.strip("/"), jira_project_key=jira_project)]

    logger.debug("Using project list from configuration file")
    if not file_projects:
        raise RequiredConfigurationElementError(name="GitHub repository and JIRA project", cli_name="--repo-name/--jira-project", env_name="ISSUE_SYNC_REPO_NAME/ISSUE_SYNC_JIRA_PROJECT")
    projects: list[ProjectMapping] = []
    for index, project in enumerate(file_projects):
        if not project.repo:
            raise InvalidConfigurationValueError(f"Project number {index} is missing a repo")
        try:
            await split_repository_in_configuration(repo=project.repo)
        except ValueError as exc:
            raise InvalidConfigurationValueError(f"Project number {index} has bad repo; must be owner/repo: {project.repo}") from exc
        if not project.key:
            raise InvalidConfigurationValueError(f"Project number {index} is missing JIRA project key")
        projects.append(ProjectMapping(repo=project.repo.strip("/"), jira_project_key=project.key))
    return projects


async def reconcile_sync_configuration(
    config_file: ConfigFileModel,
    config_path: Path | None = None,
    cli_log_level: str | None = None,
    cli_github_api_url: str | None = None,
    cli_github_token: str | None = None,
    cli_github_app_id: int | None = None,
    cli_github_app_private_key_path: Path | None = None,
    cli_github_app_installation_id: int | None = None,
    cli_jira_uri: str | None = None,
    cli_jira_user: str | None = None,
    cli_jira_pass: str | None = None,
    cli_jira_token: str | None = None,
    cli_repo_name: str | None = None,
    cli_jira_project: str | None = None,
    cli_since: str | None = None,
    cli_timeout: float | None = None,
    cli_period: float | None = None,
    cli_dry_run: bool | None = None,
    cli_issue_type: str | None = None,
) -> SyncConfig:
    """Reconcile every configuration source into a validated SyncConfig.

    Priority, highest first: CLI arguments, environment variables, config file, defaults.
    """
    logger.debug("Checking config variables")

    github_pat_token = _pick(cli_github_token, settings.GITHUB_TOKEN, config_file.github_token)
    github_app_id = _pick(cli_github_app_id, settings.GITHUB_APP_ID, config_file.github_app_id)
    github_app_private_key_path = _pick(
        cli_github_app_private_key_path, settings.GITHUB_APP_PRIVATE_KEY_PATH, config_file.github_app_private_key_path
    )
    github_app_installation_id = _pick(cli_github_app_installation_id, settings.GITHUB_APP_INSTALLATION_ID, config_file.github_app_installation_id)
    github_auth_type = await validate_github_authentication_configuration(
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )

    jira_user = _pick(cli_jira_user, settings.JIRA_USER, config_file.jira_user)
    jira_pass = _pick(cli_jira_pass, settings.JIRA_PASS, config_file.jira_pass)
    jira_token = _pick(cli_jira_token, settings.JIRA_TOKEN, config_file.jira_token)
    jira_auth_type = await validate_jira_authentication_configuration(jira_user=jira_user, jira_pass=jira_pass, jira_token=jira_token)
    logger.debug("Using JIRA authentication", auth_type=jira_auth_type.value)

    jira_uri = validate_jira_uri(_pick(cli_jira_uri, settings.JIRA_URI, config_file.jira_uri))

    projects = await reconcile_projects(
        repo_name=_pick(cli_repo_name, settings.REPO_NAME, config_file.repo_name),
        jira_project=_pick(cli_jira_project, settings.JIRA_PROJECT, config_file.jira_project),
        file_projects=config_file.projects,
    )

    since = parse_since(_pick(cli_since, settings.SINCE, config_file.since))

    timeout = _pick(cli_timeout, settings.TIMEOUT, config_file.timeout)
    timeout = DEFAULT_TIMEOUT_SECONDS if timeout is None else timeout
    if timeout <= 0:
        raise InvalidConfigurationValueError(f"Timeout must be a positive number of seconds: {timeout}")

    period = _pick(cli_period, settings.PERIOD, config_file.period)
    period = 0.0 if period is None else period
    if period < 0:
        raise InvalidConfigurationValueError(f"Period must be zero (one-shot) or a positive number of seconds: {period}")

    dry_run = _pick(cli_dry_run, settings.DRY_RUN, config_file.dry_run)

    sync_config = SyncConfig(
        log_level=_pick(cli_log_level, settings.LOG_LEVEL, config_file.log_level) or "info",
        github_api_url=_pick(cli_github_api_url, settings.GITHUB_API_URL, config_file.github_api_url) or DEFAULT_GITHUB_API_URL,
        github_authentication_type=github_auth_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
        jira_uri=jira_uri,
        jira_authentication_type=jira_auth_type,
        jira_user=jira_user,
        jira_pass=jira_pass,
        jira_token=jira_token,
        projects=projects,
        since=since,
        timeout=float(timeout),
        period=float(period),
        dry_run=bool(dry_run),
        issue_type=_pick(cli_issue_type, settings.ISSUE_TYPE, config_file.issue_type) or DEFAULT_JIRA_ISSUE_TYPE,
        config_file=config_path,
        cached_fields=dict(config_file.field_cache or {}),
    )
    logger.debug("All config variables are valid")
    return sync_config
