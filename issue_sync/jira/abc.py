"""Base ABC for JIRA clients."""

from abc import ABC, abstractmethod
from typing import Any

from issue_sync.synchronize.fields import FieldKeys
from issue_sync.synchronize.models import JiraIssue


class JiraClientBase(ABC):
    """Base ABC for JIRA clients."""

    # Metadata
    @abstractmethod
    async def list_fields(self) -> list[dict[str, Any]]:
        """List the metadata of every issue field."""
        pass

    @abstractmethod
    async def get_project(self, project_key: str) -> dict[str, Any]:
        """Get a project by key."""
        pass

    # Issue CRUD
    @abstractmethod
    async def list_issues(self, project_key: str, github_ids: list[int], field_keys: FieldKeys) -> list[JiraIssue]:
        """List the issues of a project whose GitHub ID field is in the given list."""
        pass

    @abstractmethod
    async def get_issue(self, key: str, field_keys: FieldKeys) -> JiraIssue:
        """Get an issue by key."""
        pass

    @abstractmethod
    async def create_issue(self, fields: dict[str, Any], field_keys: FieldKeys) -> JiraIssue:
        """Create an issue from a field set."""
        pass

    @abstractmethod
    async def update_issue(self, key: str, fields: dict[str, Any], field_keys: FieldKeys) -> JiraIssue:
        """Update the given fields of an issue."""
        pass

    # Comment CRUD
    @abstractmethod
    async def add_comment(self, key: str, body: str) -> dict[str, Any]:
        """Add a comment to an issue."""
        pass

    @abstractmethod
    async def update_comment(self, key: str, comment_id: str, body: str) -> dict[str, Any]:
        """Update a comment of an issue."""
        pass
