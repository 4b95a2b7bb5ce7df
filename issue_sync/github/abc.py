"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients."""

    # Issue reads
    @abstractmethod
    async def list_issues(self, since: datetime | None = None, **kwargs: Any) -> list[Any]:
        """List issues (open and closed) updated at or after `since`, excluding pull requests."""
        pass

    @abstractmethod
    async def list_issue_comments(self, issue_number: int, **kwargs: Any) -> list[Any]:
        """List comments for an issue."""
        pass

    # User reads
    @abstractmethod
    async def get_user_by_username(self, username: str) -> Any:
        """Get a GitHub user by username."""
        pass
