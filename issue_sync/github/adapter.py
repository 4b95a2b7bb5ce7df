"""GitHub client adapter for the githubkit library."""

from datetime import datetime
from pathlib import Path
from typing import Any, Self

import structlog
from githubkit import Response
from githubkit.versions.latest.models import Issue, IssueComment, PrivateUser, PublicUser

from issue_sync.configuration.models import GitHubAuthenticationType
from issue_sync.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_TIMEOUT_SECONDS
from issue_sync.utils.github import split_repository_in_configuration

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)
            timeout: Timeout in seconds for every API request

        Returns:
            Configured GitHubKitAdapter instance

        Raises:
            ValueError: If the repository is malformed or the App installation cannot be found
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(
            repo=repo,
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
            timeout=timeout,
        )
        return cls(client, owner, repo_name)

    # Issue reads
    async def list_issues(self, since: datetime | None = None, per_page: int = 100, **kwargs: Any) -> list[Issue]:
        """List all issues updated since the given time, handling pagination.

        Issues are returned oldest update first. Pull requests, which the
        issues endpoint also returns, are left out.
        """
        all_issues: list[Issue] = []
        page: int = 1
        while True:
            response: Response[list[Issue]] = await self.client.rest.issues.async_list_for_repo(
                owner=self.owner,
                repo=self.repo_name,
                state="all",
                sort="updated",
                direction="asc",
                per_page=per_page,
                page=page,
                **self._omit_null_parameters(since=since, **kwargs),
            )
            issues: list[Issue] = response.parsed_data
            if not issues:
                break
            all_issues.extend(issue for issue in issues if not issue.pull_request)
            if len(issues) < per_page:
                break
            page += 1
        logger.info("Collected GitHub issues", owner=self.owner, repo=self.repo_name, count=len(all_issues), since=str(since))
        return all_issues

    async def list_issue_comments(self, issue_number: int, per_page: int = 100, **kwargs: Any) -> list[IssueComment]:
        """List all comments for an issue, handling pagination."""
        all_comments: list[IssueComment] = []
        page: int = 1
        while True:
            response: Response[list[IssueComment]] = await self.client.rest.issues.async_list_comments(
                owner=self.owner,
                repo=self.repo_name,
                issue_number=issue_number,
                per_page=per_page,
                page=page,
                **kwargs,
            )
            comments: list[IssueComment] = response.parsed_data
            if not comments:
                break
            all_comments.extend(comments)
            if len(comments) < per_page:
                break
            page += 1
        return all_comments

    # User reads
    async def get_user_by_username(self, username: str) -> PublicUser | PrivateUser:
        """Get a GitHub user by username."""
        response: Response[PublicUser | PrivateUser] = await self.client.rest.users.async_get_by_username(username=username)
        return response.parsed_data
