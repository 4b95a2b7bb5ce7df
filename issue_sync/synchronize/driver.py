"""Orchestrates the synchronization of GitHub issues into JIRA."""

import asyncio
import time
from datetime import datetime, timezone

import structlog
from githubkit.exception import GitHubException
from ruamel.yaml.error import YAMLError

from issue_sync.configuration.exceptions import InvalidConfigurationValueError, MissingCustomFieldError
from issue_sync.configuration.file import save_config_file
from issue_sync.configuration.models import ProjectMapping, SyncConfig
from issue_sync.github.abc import GitHubClientBase
from issue_sync.github.adapter import GitHubKitAdapter
from issue_sync.jira.abc import JiraClientBase
from issue_sync.jira.adapter import JiraRestAdapter
from issue_sync.jira.exceptions import JiraApiError
from issue_sync.synchronize.comments import CommentReconciler, GitHubCommentSynchronizer
from issue_sync.synchronize.context import SyncContext
from issue_sync.synchronize.exceptions import IssueVerificationError
from issue_sync.synchronize.fields import FieldKeys
from issue_sync.synchronize.issues import sync_jira_issues
from issue_sync.synchronize.models import SourceIssue
from issue_sync.synchronize.results import AllIssueSynchronizationResults, RepositorySyncResult, SyncPassResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def resolve_field_keys(jira_adapter: JiraClientBase, cached_fields: dict[str, str] | None = None) -> FieldKeys:
    """Resolve the custom field keys, from the config file cache when it is complete."""
    if cached_fields:
        try:
            field_keys = FieldKeys.from_mapping(cached_fields)
        except MissingCustomFieldError as exc:
            logger.warning("Cached custom fields are incomplete, resolving from JIRA", missing_fields=exc.field_names)
        else:
            logger.debug("Using cached custom fields", fields=field_keys.to_mapping())
            return field_keys
    return FieldKeys.from_jira_fields(await jira_adapter.list_fields())


async def resolve_projects(jira_adapter: JiraClientBase, projects: list[ProjectMapping]) -> None:
    """Check that every configured JIRA project exists."""
    for project in projects:
        try:
            await jira_adapter.get_project(project.jira_project_key)
        except JiraApiError as exc:
            raise InvalidConfigurationValueError(f"JIRA project {project.jira_project_key} could not be retrieved: {exc}") from exc
        logger.debug("Resolved JIRA project", project=project.jira_project_key, repo=project.repo)


async def run_repository_sync(context: SyncContext) -> AllIssueSynchronizationResults:
    """Fetch the changed GitHub issues of a repository and their JIRA issues, then reconcile them."""
    start_time = time.time()
    logger.info("Fetching GitHub issues", repo=context.repo, since=str(context.since))
    github_issues = [SourceIssue.from_github(issue) for issue in await context.github_adapter.list_issues(since=context.since)]

    github_ids = [issue.id for issue in github_issues]
    jira_issues = await context.jira_adapter.list_issues(context.project_key, github_ids, context.field_keys)
    logger.info(
        "Fetched issues",
        repo=context.repo,
        project=context.project_key,
        github_issue_count=len(github_issues),
        jira_issue_count=len(jira_issues),
        duration=round(time.time() - start_time, 2),
    )
    return await sync_jira_issues(context, github_issues, jira_issues)


async def run_sync_pass(
    config: SyncConfig,
    jira_adapter: JiraClientBase,
    github_adapters: dict[str, GitHubClientBase],
    field_keys: FieldKeys,
    since: datetime | None,
    comment_reconciler: CommentReconciler | None = None,
) -> SyncPassResult:
    """Run one reconciliation pass over every repository/project pair, one after another.

    A fetch or verification failure fails that repository only.
    """
    pass_result = SyncPassResult()
    for project in config.projects:
        context = SyncContext(
            github_adapter=github_adapters[project.repo],
            jira_adapter=jira_adapter,
            field_keys=field_keys,
            repo=project.repo,
            project_key=project.jira_project_key,
            since=since,
            issue_type=config.issue_type,
            dry_run=config.dry_run,
            comment_reconciler=comment_reconciler,
        )
        try:
            issue_results = await run_repository_sync(context)
        except (GitHubException, JiraApiError, IssueVerificationError) as exc:
            logger.error("Repository synchronization failed", repo=project.repo, project=project.jira_project_key, error=str(exc))
            pass_result.repositories.append(RepositorySyncResult(project.repo, project.jira_project_key, error=str(exc)))
            continue
        pass_result.repositories.append(RepositorySyncResult(project.repo, project.jira_project_key, issue_results=issue_results))
    return pass_result


async def run_sync_workflow(config: SyncConfig, comment_reconciler: CommentReconciler | None = None) -> SyncPassResult:
    """Run the synchronization once, or forever on the configured period.

    After every successful pass outside of dry-run mode, the `since` cursor is
    moved to the start of that pass and saved to the configuration file.
    Returns the result of the last pass in one-shot mode.
    """
    jira_adapter = await JiraRestAdapter.create(
        jira_uri=config.jira_uri,
        jira_auth_type=config.jira_authentication_type,
        jira_user=config.jira_user,
        jira_pass=config.jira_pass,
        jira_token=config.jira_token,
        timeout=config.timeout,
        dry_run=config.dry_run,
    )
    try:
        field_keys = await resolve_field_keys(jira_adapter, config.cached_fields)
        await resolve_projects(jira_adapter, config.projects)

        github_adapters: dict[str, GitHubClientBase] = {}
        for project in config.projects:
            if project.repo not in github_adapters:
                github_adapters[project.repo] = await GitHubKitAdapter.create(
                    repo=project.repo,
                    github_auth_type=config.github_authentication_type,
                    github_pat_token=config.github_pat_token,
                    github_app_id=config.github_app_id,
                    github_app_private_key_path=config.github_app_private_key_path,
                    github_app_installation_id=config.github_app_installation_id,
                    github_api_url=config.github_api_url,
                    timeout=config.timeout,
                )

        if comment_reconciler is None:
            comment_reconciler = GitHubCommentSynchronizer()

        since = config.since
        while True:
            pass_start = datetime.now(timezone.utc)
            logger.info("Starting synchronization pass", since=str(since), project_count=len(config.projects), dry_run=config.dry_run)
            pass_result = await run_sync_pass(config, jira_adapter, github_adapters, field_keys, since, comment_reconciler)

            if pass_result.succeeded and not config.dry_run:
                since = pass_start
                try:
                    save_config_file(config.config_file, since, field_keys.to_mapping())
                except (OSError, YAMLError, ValueError) as exc:
                    logger.error("Failed to save config file", file=str(config.config_file), since=str(since), error=str(exc))
            elif not pass_result.succeeded:
                logger.error("Synchronization pass failed", failed_repos=[failure.repo for failure in pass_result.failures])

            logger.info("Finished synchronization pass", duration=round((datetime.now(timezone.utc) - pass_start).total_seconds(), 2))
            if not config.is_daemon:
                return pass_result
            logger.info("Waiting for next synchronization pass", period=config.period)
            await asyncio.sleep(config.period)
    finally:
        await jira_adapter.close()
