"""Contains reconciliation logic from GitHub issues to JIRA issues."""

import time
from datetime import datetime, timezone
from typing import Any, Sequence

import structlog
from githubkit.exception import GitHubException

from issue_sync.jira.exceptions import JiraApiError
from issue_sync.synchronize.context import SyncContext
from issue_sync.synchronize.exceptions import IssueVerificationError
from issue_sync.synchronize.models import FieldRole, JiraIssue, SourceIssue, SyncDecision, TranslatedIssue
from issue_sync.synchronize.results import AllIssueSynchronizationResults, IssueSynchronizationResult
from issue_sync.synchronize.utils import jira_field_differs
from issue_sync.utils.constants import JIRA_DATETIME_FORMAT

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def format_jira_timestamp(moment: datetime | None = None) -> str:
    """Format a moment (default: now) the way JIRA DateTime custom fields expect, in UTC."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime(JIRA_DATETIME_FORMAT)


async def did_issue_change(issue: TranslatedIssue, jira_issue: JiraIssue) -> bool:
    """Compare a GitHub issue and its linked JIRA issue, and decide whether JIRA is out of date.

    Status and reporter fields that cannot be read count as changed. A labels
    field that cannot be read is compared as empty.
    """
    source = issue.source
    differences: list[tuple[str, Any, Any]] = []

    if jira_field_differs(source.title, jira_issue.summary):
        differences.append(("summary", jira_issue.summary, source.title))
    if jira_field_differs(issue.translated_body, jira_issue.description):
        differences.append(("description", jira_issue.description, issue.translated_body))
    if jira_issue.github_status is None or jira_issue.github_status != source.state:
        differences.append((FieldRole.GITHUB_STATUS.value, jira_issue.github_status, source.state))
    if jira_issue.github_reporter is None or jira_issue.github_reporter != source.author:
        differences.append((FieldRole.GITHUB_REPORTER.value, jira_issue.github_reporter, source.author))
    if (jira_issue.github_labels or "") != issue.joined_labels:
        differences.append((FieldRole.GITHUB_LABELS.value, jira_issue.github_labels, issue.joined_labels))

    for field, current_value, new_value in differences:
        logger.info(
            "JIRA issue needs to be updated",
            jira_issue_key=jira_issue.key,
            github_issue_number=source.number,
            issue_field=field,
            current_value=current_value,
            new_value=new_value,
        )
    return bool(differences)


def find_linked_issue(source: SourceIssue, jira_issues: Sequence[JiraIssue]) -> JiraIssue | None:
    """Return the first JIRA issue whose GitHub ID field holds the GitHub issue's ID."""
    for jira_issue in jira_issues:
        if jira_issue.github_id == source.id:
            return jira_issue
    return None


def build_create_fields(context: SyncContext, issue: TranslatedIssue) -> dict[str, Any]:
    """Build the complete field set of a new JIRA issue, identity fields included."""
    keys = context.field_keys
    source = issue.source
    return {
        "project": {"key": context.project_key},
        "issuetype": {"name": context.issue_type},
        "summary": source.title,
        "description": issue.translated_body,
        keys.field_key(FieldRole.GITHUB_ID): source.id,
        keys.field_key(FieldRole.GITHUB_NUMBER): source.number,
        keys.field_key(FieldRole.GITHUB_LABELS): issue.joined_labels,
        keys.field_key(FieldRole.GITHUB_STATUS): source.state,
        keys.field_key(FieldRole.GITHUB_REPORTER): source.author,
        keys.field_key(FieldRole.LAST_SYNC): format_jira_timestamp(),
    }


def build_update_fields(context: SyncContext, issue: TranslatedIssue, jira_issue: JiraIssue) -> dict[str, Any]:
    """Build the fields to update on a linked JIRA issue.

    The GitHub ID and number are never rewritten; the existing issue type is kept.
    """
    keys = context.field_keys
    source = issue.source
    fields: dict[str, Any] = {
        "summary": source.title,
        "description": issue.translated_body,
        keys.field_key(FieldRole.GITHUB_STATUS): source.state,
        keys.field_key(FieldRole.GITHUB_REPORTER): source.author,
        keys.field_key(FieldRole.GITHUB_LABELS): issue.joined_labels,
        keys.field_key(FieldRole.LAST_SYNC): format_jira_timestamp(),
    }
    if jira_issue.issue_type.get("id"):
        fields["issuetype"] = {"id": jira_issue.issue_type["id"]}
    return fields


async def fetch_jira_issue(context: SyncContext, issue: TranslatedIssue, key: str) -> JiraIssue:
    """Fetch the current state of a JIRA issue after a write or for verification."""
    try:
        return await context.jira_adapter.get_issue(key, context.field_keys)
    except JiraApiError as exc:
        logger.error("Failed to fetch JIRA issue", jira_issue_key=key, github_issue_number=issue.source.number, error=str(exc))
        raise IssueVerificationError(
            f"Could not fetch JIRA issue {key} for GitHub issue #{issue.source.number}: {exc}",
            github_issue_number=issue.source.number,
            jira_issue_key=key,
        ) from exc


async def sync_issue_comments(context: SyncContext, issue: TranslatedIssue, jira_issue: JiraIssue) -> str | None:
    """Hand the issue over to comment reconciliation, returning the error message if it failed."""
    if context.comment_reconciler is None:
        return None
    try:
        await context.comment_reconciler.sync_comments(context, issue, jira_issue)
    except (GitHubException, JiraApiError) as exc:
        logger.error("Failed to synchronize comments", jira_issue_key=jira_issue.key, github_issue_number=issue.source.number, error=str(exc))
        return str(exc)
    return None


async def create_jira_issue(context: SyncContext, issue: TranslatedIssue) -> IssueSynchronizationResult:
    """Create the JIRA issue of a GitHub issue that has none yet."""
    source = issue.source
    logger.info("JIRA issue not found, creating it", github_issue_number=source.number, github_issue_id=source.id)
    fields = build_create_fields(context, issue)
    try:
        created = await context.jira_adapter.create_issue(fields, context.field_keys)
    except JiraApiError as exc:
        logger.error("Failed to create JIRA issue", github_issue_number=source.number, error=str(exc))
        return IssueSynchronizationResult(source, None, SyncDecision.CREATE, error=str(exc))

    if context.dry_run:
        return IssueSynchronizationResult(source, created, SyncDecision.CREATE)

    logger.info("Created JIRA issue", jira_issue_key=created.key, github_issue_number=source.number)
    jira_issue = await fetch_jira_issue(context, issue, created.key)
    comment_error = await sync_issue_comments(context, issue, jira_issue)
    return IssueSynchronizationResult(source, jira_issue, SyncDecision.CREATE, comment_error=comment_error)


async def update_jira_issue(context: SyncContext, issue: TranslatedIssue, jira_issue: JiraIssue) -> IssueSynchronizationResult:
    """Bring a linked JIRA issue up to date, then verify it and synchronize its comments."""
    source = issue.source
    changed = await did_issue_change(issue, jira_issue)
    decision = SyncDecision.UPDATE if changed else SyncDecision.NOOP

    if changed:
        fields = build_update_fields(context, issue, jira_issue)
        try:
            await context.jira_adapter.update_issue(jira_issue.key, fields, context.field_keys)
        except JiraApiError as exc:
            logger.error("Failed to update JIRA issue", jira_issue_key=jira_issue.key, github_issue_number=source.number, error=str(exc))
            return IssueSynchronizationResult(source, jira_issue, decision, error=str(exc))
        logger.info("Updated JIRA issue", jira_issue_key=jira_issue.key, github_issue_number=source.number)
    else:
        logger.info("JIRA issue is up to date", jira_issue_key=jira_issue.key, github_issue_number=source.number)

    try:
        refreshed = await fetch_jira_issue(context, issue, jira_issue.key)
    except IssueVerificationError as exc:
        # Only a fetch following a write fails the repository.
        if changed:
            raise
        return IssueSynchronizationResult(source, jira_issue, decision, error=str(exc))
    comment_error = await sync_issue_comments(context, issue, refreshed)
    return IssueSynchronizationResult(source, refreshed, decision, comment_error=comment_error)


async def reconcile_issue(context: SyncContext, issue: TranslatedIssue, jira_issues: Sequence[JiraIssue]) -> IssueSynchronizationResult:
    """Create or update the JIRA issue linked to a GitHub issue."""
    jira_issue = find_linked_issue(issue.source, jira_issues)
    if jira_issue is None:
        return await create_jira_issue(context, issue)
    return await update_jira_issue(context, issue, jira_issue)


async def sync_jira_issues(
    context: SyncContext,
    github_issues: Sequence[SourceIssue],
    jira_issues: Sequence[JiraIssue],
) -> AllIssueSynchronizationResults:
    """Reconcile every GitHub issue, in the order fetched, against the JIRA issues linked to them.

    Raises:
        IssueVerificationError: If a JIRA issue cannot be fetched back after a write.
    """
    if not github_issues:
        logger.info("There are no GitHub issues to synchronize", repo=context.repo, project=context.project_key)
        return AllIssueSynchronizationResults([])

    start_time = time.time()
    results: list[IssueSynchronizationResult] = []
    for source in github_issues:
        issue = TranslatedIssue.from_source(source, context.translator)
        results.append(await reconcile_issue(context, issue, jira_issues))

    all_results = AllIssueSynchronizationResults(results)
    counts = all_results.decision_counts
    logger.info(
        "Synchronized GitHub issues to JIRA",
        repo=context.repo,
        project=context.project_key,
        created=counts[SyncDecision.CREATE],
        updated=counts[SyncDecision.UPDATE],
        unchanged=counts[SyncDecision.NOOP],
        failed=len(all_results.failures),
        duration=time.time() - start_time,
    )
    return all_results
