"""JIRA client adapter for the JIRA REST API (version 2) over httpx."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import httpx
import structlog

from issue_sync.configuration.models import JiraAuthenticationType
from issue_sync.synchronize.fields import FieldKeys
from issue_sync.synchronize.models import FieldRole, JiraIssue
from issue_sync.utils.constants import DEFAULT_TIMEOUT_SECONDS, JIRA_SEARCH_PAGE_SIZE

from .abc import JiraClientBase
from .client import get_jira_client
from .exceptions import JiraApiError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

API_PREFIX = "rest/api/2"


def handle_jira_errors(func: F) -> F:
    """Decorator turning httpx failures into JiraApiError, logging the details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except httpx.HTTPStatusError as exc:
            try:
                error_data = exc.response.json()
            except ValueError:
                error_data = {}
            if not isinstance(error_data, dict):
                error_data = {}
            messages = error_data.get("errorMessages") or []
            errors = error_data.get("errors") or {}
            logger.error(
                "JIRA API request failed",
                function=func.__name__,
                status_code=exc.response.status_code,
                url=str(exc.request.url),
                error_messages=messages,
                errors=errors,
            )
            raise JiraApiError(
                f"JIRA {exc.response.status_code} error in {func.__name__}: {messages} | errors: {errors} | url: {exc.request.url}",
                status_code=exc.response.status_code,
                url=str(exc.request.url),
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("JIRA API request could not be completed", function=func.__name__, error=str(exc), error_type=type(exc).__name__)
            raise JiraApiError(f"JIRA request failed in {func.__name__}: {exc!r}") from exc

    return wrapper  # type: ignore


class JiraRestAdapter(JiraClientBase):
    """JIRA client adapter for the JIRA REST API."""

    def __init__(self, client: httpx.AsyncClient, dry_run: bool = False) -> None:
        """Initialize the JIRA client adapter with an already-initialized client."""
        self.client = client
        self.dry_run = dry_run

    @classmethod
    async def create(
        cls,
        jira_uri: str,
        jira_auth_type: JiraAuthenticationType,
        jira_user: str | None = None,
        jira_pass: str | None = None,
        jira_token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        dry_run: bool = False,
    ) -> Self:
        """Create a new JIRA client adapter.

        Args:
            jira_uri: Base URI of the JIRA instance
            jira_auth_type: Type of authentication (BASIC or TOKEN)
            jira_user: Username (required for BASIC auth)
            jira_pass: Password or API token (required for BASIC auth)
            jira_token: Personal access token (required for TOKEN auth)
            timeout: Timeout in seconds applied to every call
            dry_run: If True, log write operations instead of performing them

        Returns:
            Configured JiraRestAdapter instance
        """
        logger.info("Creating client for JIRA instance", jira_uri=jira_uri, auth_type=jira_auth_type.value, dry_run=dry_run)
        client = get_jira_client(
            jira_uri=jira_uri,
            jira_auth_type=jira_auth_type,
            jira_user=jira_user,
            jira_pass=jira_pass,
            jira_token=jira_token,
            timeout=timeout,
        )
        return cls(client, dry_run=dry_run)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        response = await self.client.request(method, f"{API_PREFIX}/{endpoint}", **kwargs)
        response.raise_for_status()
        if not response.content:
            return {}
        return response.json()

    # Metadata
    @handle_jira_errors
    async def list_fields(self) -> list[dict[str, Any]]:
        """List the metadata of every issue field."""
        fields: list[dict[str, Any]] = await self._request("GET", "field")
        return fields

    @handle_jira_errors
    async def get_project(self, project_key: str) -> dict[str, Any]:
        """Get a project by key."""
        project: dict[str, Any] = await self._request("GET", f"project/{project_key}")
        return project

    # Issue CRUD
    @handle_jira_errors
    async def list_issues(self, project_key: str, github_ids: list[int], field_keys: FieldKeys) -> list[JiraIssue]:
        """List the issues of a project whose GitHub ID field is in the given list, handling pagination."""
        if not github_ids:
            return []
        id_list = ",".join(str(github_id) for github_id in github_ids)
        jql = f"project = '{project_key}' AND cf[{field_keys.field_id(FieldRole.GITHUB_ID)}] in ({id_list})"
        all_issues: list[JiraIssue] = []
        start_at = 0
        while True:
            data = await self._request(
                "POST",
                "search",
                json={"jql": jql, "startAt": start_at, "maxResults": JIRA_SEARCH_PAGE_SIZE, "fields": ["*all"]},
            )
            issues = data.get("issues") or []
            all_issues.extend(JiraIssue.from_api(issue, field_keys) for issue in issues)
            start_at += len(issues)
            if not issues or start_at >= data.get("total", 0):
                break
        return all_issues

    @handle_jira_errors
    async def get_issue(self, key: str, field_keys: FieldKeys) -> JiraIssue:
        """Get an issue by key."""
        data = await self._request("GET", f"issue/{key}")
        return JiraIssue.from_api(data, field_keys)

    @handle_jira_errors
    async def create_issue(self, fields: dict[str, Any], field_keys: FieldKeys) -> JiraIssue:
        """Create an issue from a field set.

        The API only returns the identity of the new issue; callers needing its
        current state must fetch it by key.
        """
        if self.dry_run:
            logger.info("[DRY-RUN] Would create JIRA issue", summary=fields.get("summary"))
            return JiraIssue.from_api({"key": "", "id": "", "fields": fields}, field_keys)
        data = await self._request("POST", "issue", json={"fields": fields})
        return JiraIssue.from_api({"key": data.get("key", ""), "id": data.get("id", ""), "fields": fields}, field_keys)

    @handle_jira_errors
    async def update_issue(self, key: str, fields: dict[str, Any], field_keys: FieldKeys) -> JiraIssue:
        """Update the given fields of an issue."""
        if self.dry_run:
            logger.info("[DRY-RUN] Would update JIRA issue", jira_issue_key=key, fields=sorted(fields))
        else:
            await self._request("PUT", f"issue/{key}", json={"fields": fields})
        return JiraIssue.from_api({"key": key, "fields": fields}, field_keys)

    # Comment CRUD
    @handle_jira_errors
    async def add_comment(self, key: str, body: str) -> dict[str, Any]:
        """Add a comment to an issue."""
        if self.dry_run:
            logger.info("[DRY-RUN] Would add comment to JIRA issue", jira_issue_key=key)
            return {"body": body}
        comment: dict[str, Any] = await self._request("POST", f"issue/{key}/comment", json={"body": body})
        return comment

    @handle_jira_errors
    async def update_comment(self, key: str, comment_id: str, body: str) -> dict[str, Any]:
        """Update a comment of an issue."""
        if self.dry_run:
            logger.info("[DRY-RUN] Would update comment on JIRA issue", jira_issue_key=key, comment_id=comment_id)
            return {"id": comment_id, "body": body}
        comment: dict[str, Any] = await self._request("PUT", f"issue/{key}/comment/{comment_id}", json={"body": body})
        return comment
