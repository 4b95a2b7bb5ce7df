"""Mirrors the comments of GitHub issues onto their linked JIRA issues."""

import re
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

import structlog

from issue_sync.synchronize.models import JiraComment, JiraIssue, TranslatedIssue
from issue_sync.utils.constants import JIRA_MAX_COMMENT_LENGTH
from issue_sync.utils.truncation import truncate_string_at_end

if TYPE_CHECKING:
    from issue_sync.synchronize.context import SyncContext

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

COMMENT_ID_PATTERN = re.compile(r"^Comment \[\(ID (\d+)\)\|")


class CommentReconciler(Protocol):
    """Synchronizes the comments of one GitHub issue with its JIRA issue."""

    async def sync_comments(self, context: "SyncContext", issue: TranslatedIssue, jira_issue: JiraIssue) -> None: ...


def format_comment_timestamp(timestamp: datetime) -> str:
    """Render a comment time as e.g. `15:04 PM, January 2 2006`."""
    return f"{timestamp:%H:%M %p}, {timestamp:%B} {timestamp.day} {timestamp:%Y}"


def github_comment_id(jira_comment: JiraComment) -> int | None:
    """Return the GitHub comment ID recorded in the header of a mirrored JIRA comment."""
    match = COMMENT_ID_PATTERN.match(jira_comment.body)
    return int(match.group(1)) if match else None


class GitHubCommentSynchronizer:
    """Creates or updates one JIRA comment per GitHub comment.

    User profiles are looked up once per synchronizer to render display names.
    """

    def __init__(self) -> None:
        """Initialize the synchronizer with an empty user profile cache."""
        self._users: dict[str, Any] = {}

    async def _get_user(self, context: "SyncContext", login: str) -> Any:
        if login not in self._users:
            self._users[login] = await context.github_adapter.get_user_by_username(login)
        return self._users[login]

    async def build_comment_body(self, context: "SyncContext", comment: Any) -> str:
        """Render the JIRA body of a GitHub comment, header included."""
        user = comment.user
        login = getattr(user, "login", "") or ""
        name = ""
        if login:
            profile = await self._get_user(context, login)
            name = getattr(profile, "name", None) or ""

        header = f"Comment [(ID {comment.id})|{comment.html_url}] from GitHub user [{login}|{getattr(user, 'html_url', '')}]"
        if name:
            header += f" ({name})"
        header += f" at {format_comment_timestamp(comment.created_at)}:"

        body = f"{header}\n\n{context.translator.translate(comment.body or '')}"
        body, was_truncated = truncate_string_at_end(body, JIRA_MAX_COMMENT_LENGTH)
        if was_truncated:
            logger.warning("Truncated comment body to JIRA's maximum length", github_comment_id=comment.id)
        return body

    async def sync_comments(self, context: "SyncContext", issue: TranslatedIssue, jira_issue: JiraIssue) -> None:
        """Mirror every GitHub comment of the issue onto the JIRA issue."""
        github_comments = await context.github_adapter.list_issue_comments(issue.source.number)
        if not github_comments:
            return

        mirrored: dict[int, JiraComment] = {}
        for jira_comment in jira_issue.comments:
            comment_id = github_comment_id(jira_comment)
            if comment_id is not None and comment_id not in mirrored:
                mirrored[comment_id] = jira_comment

        for comment in github_comments:
            body = await self.build_comment_body(context, comment)
            existing = mirrored.get(comment.id)
            if existing is None:
                await context.jira_adapter.add_comment(jira_issue.key, body)
                logger.info("Created JIRA comment", jira_issue_key=jira_issue.key, github_comment_id=comment.id)
            elif existing.body != body:
                await context.jira_adapter.update_comment(jira_issue.key, existing.id, body)
                logger.info("Updated JIRA comment", jira_issue_key=jira_issue.key, jira_comment_id=existing.id, github_comment_id=comment.id)
            else:
                logger.debug("JIRA comment is up to date", jira_issue_key=jira_issue.key, github_comment_id=comment.id)
