"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from githubkit.exception import GitHubException
from typer import Argument, Option
from typing_extensions import Annotated

from issue_sync.configuration.env import settings
from issue_sync.configuration.exceptions import ConfigurationError
from issue_sync.configuration.file import find_config_file, load_config_file
from issue_sync.configuration.reconcile import reconcile_sync_configuration
from issue_sync.jira.exceptions import JiraApiError
from issue_sync.synchronize.driver import run_sync_workflow
from issue_sync.synchronize.markup import github_to_jira
from issue_sync.synchronize.models import SyncDecision
from issue_sync.utils.logging import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Synchronize GitHub issues into JIRA.")


@typer_app.command(name="sync")
def sync_cli(
    config: Annotated[Path | None, Option("--config", help="Path to the configuration file.")] = None,
    log_level: Annotated[str | None, Option("--log-level", help="Logging level (debug, info, warn, error).")] = None,
    github_token: Annotated[str | None, Option("--github-token", help="GitHub Personal Access Token.")] = None,
    github_api_url: Annotated[str | None, Option("--github-api-url", help="GitHub API URL.")] = None,
    github_app_id: Annotated[int | None, Option("--github-app-id", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option("--github-app-private-key-path", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option("--github-app-installation-id", help="GitHub App Installation ID.")] = None,
    jira_user: Annotated[str | None, Option("--jira-user", help="JIRA username.")] = None,
    jira_pass: Annotated[str | None, Option("--jira-pass", help="JIRA password or API token.")] = None,
    jira_token: Annotated[str | None, Option("--jira-token", help="JIRA personal access token (bearer authentication).")] = None,
    jira_uri: Annotated[str | None, Option("--jira-uri", help="Base URI of the JIRA instance.")] = None,
    repo_name: Annotated[str | None, Option("--repo-name", help="GitHub repository to synchronize (owner/repo).")] = None,
    jira_project: Annotated[str | None, Option("--jira-project", help="Key of the JIRA project to synchronize into.")] = None,
    since: Annotated[str | None, Option("--since", help="Only synchronize issues updated at or after this time (e.g., 2017-06-01T10:00:00+0000).")] = None,
    dry_run: Annotated[bool | None, Option("--dry-run/--no-dry-run", help="Log JIRA changes instead of making them.")] = None,
    timeout: Annotated[float | None, Option("--timeout", help="Timeout in seconds for every API call.")] = None,
    period: Annotated[float | None, Option("--period", help="Seconds between passes; 0 runs a single pass.")] = None,
    issue_type: Annotated[str | None, Option("--issue-type", help="Type of the JIRA issues to create.")] = None,
) -> None:
    """Synchronize the issues of GitHub repositories into JIRA projects."""
    # The config file can only set the level once it has been read.
    configure_logging(log_level or settings.LOG_LEVEL or "info")
    try:
        config_path = find_config_file(config or settings.CONFIG)
        config_file = load_config_file(config_path)
        if not (log_level or settings.LOG_LEVEL) and config_file.log_level:
            configure_logging(config_file.log_level)
        sync_config = asyncio.run(
            reconcile_sync_configuration(
                config_file=config_file,
                config_path=config_path,
                cli_log_level=log_level,
                cli_github_api_url=github_api_url,
                cli_github_token=github_token,
                cli_github_app_id=github_app_id,
                cli_github_app_private_key_path=github_app_private_key_path,
                cli_github_app_installation_id=github_app_installation_id,
                cli_jira_uri=jira_uri,
                cli_jira_user=jira_user,
                cli_jira_pass=jira_pass,
                cli_jira_token=jira_token,
                cli_repo_name=repo_name,
                cli_jira_project=jira_project,
                cli_since=since,
                cli_timeout=timeout,
                cli_period=period,
                cli_dry_run=dry_run,
                cli_issue_type=issue_type,
            )
        )
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(1)

    if sync_config.dry_run:
        typer.echo("Dry run enabled - no changes will be made in JIRA")

    try:
        result = asyncio.run(run_sync_workflow(sync_config))
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(1)
    except (GitHubException, JiraApiError, ValueError) as exc:
        typer.echo(f"Synchronization failed: {exc}", err=True)
        raise typer.Exit(1)

    for repository in result.repositories:
        if repository.issue_results is None:
            typer.echo(f"{repository.repo} -> {repository.project_key}: failed ({repository.error})", err=True)
            continue
        counts = repository.issue_results.decision_counts
        typer.echo(
            f"{repository.repo} -> {repository.project_key}: "
            f"{counts[SyncDecision.CREATE]} created, {counts[SyncDecision.UPDATE]} updated, "
            f"{counts[SyncDecision.NOOP]} unchanged, {len(repository.issue_results.failures)} with errors"
        )
    if not result.succeeded:
        raise typer.Exit(1)


@typer_app.command(name="translate")
def translate_cli(
    path: Annotated[str, Argument(help="Markdown file to translate, or - to read standard input.")],
) -> None:
    """Print the JIRA markup of a GitHub Markdown document."""
    if path == "-":
        text = sys.stdin.read()
    else:
        markdown_path = Path(path)
        if not markdown_path.is_file():
            typer.echo(f"File not found: {markdown_path.absolute()}", err=True)
            raise typer.Exit(1)
        text = markdown_path.read_text(encoding="utf-8")
    typer.echo(github_to_jira(text))


if __name__ == "__main__":
    typer_app()
