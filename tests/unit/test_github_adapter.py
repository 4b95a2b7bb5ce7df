"""Unit tests for the GitHubKitAdapter class and related GitHub operations."""

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from issue_sync.configuration.models import GitHubAuthenticationType
from issue_sync.github.adapter import GitHubKitAdapter


class DummyResponse:
    """A dummy response object to mock GitHub API responses."""

    def __init__(self, parsed_data: Any) -> None:
        """Initialize the dummy response with its parsed data."""
        self.status_code: int = 200
        self.parsed_data = parsed_data


def make_issue(number: int, pull_request: Any = None) -> SimpleNamespace:
    return SimpleNamespace(id=1000 + number, number=number, pull_request=pull_request)


@pytest.mark.asyncio
async def test_list_issues_skips_pull_requests() -> None:
    """Test that pull requests returned by the issues endpoint are dropped."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(
        return_value=DummyResponse([make_issue(1), make_issue(2, pull_request=SimpleNamespace(url="https://x")), make_issue(3)])
    )

    issues = await adapter.list_issues()

    assert [issue.number for issue in issues] == [1, 3]


@pytest.mark.asyncio
async def test_list_issues_requests_all_states_since() -> None:
    """Test the query of the issue listing."""
    since = datetime(2024, 1, 1, tzinfo=timezone.utc)
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(return_value=DummyResponse([]))

    await adapter.list_issues(since=since)

    adapter.client.rest.issues.async_list_for_repo.assert_awaited_once_with(
        owner="owner",
        repo="repo",
        state="all",
        sort="updated",
        direction="asc",
        per_page=100,
        page=1,
        since=since,
    )


@pytest.mark.asyncio
async def test_list_issues_without_since() -> None:
    """Test that no since parameter is sent when none is given."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(return_value=DummyResponse([]))

    await adapter.list_issues()

    assert "since" not in adapter.client.rest.issues.async_list_for_repo.await_args.kwargs


@pytest.mark.asyncio
async def test_list_issues_paginates() -> None:
    """Test that full pages trigger a request for the next page."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(
        side_effect=[
            DummyResponse([make_issue(1), make_issue(2)]),
            DummyResponse([make_issue(3)]),
        ]
    )

    issues = await adapter.list_issues(per_page=2)

    assert [issue.number for issue in issues] == [1, 2, 3]
    pages = [call.kwargs["page"] for call in adapter.client.rest.issues.async_list_for_repo.await_args_list]
    assert pages == [1, 2]


@pytest.mark.asyncio
async def test_list_issue_comments_paginates() -> None:
    """Test that every page of comments is collected."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_comments = AsyncMock(
        side_effect=[
            DummyResponse([SimpleNamespace(id=1), SimpleNamespace(id=2)]),
            DummyResponse([]),
        ]
    )

    comments = await adapter.list_issue_comments(7, per_page=2)

    assert [comment.id for comment in comments] == [1, 2]
    assert adapter.client.rest.issues.async_list_comments.await_args.kwargs["issue_number"] == 7


@pytest.mark.asyncio
async def test_get_user_by_username() -> None:
    """Test that a user profile is fetched by login."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    user = SimpleNamespace(login="octocat", name="The Octocat")
    adapter.client.rest.users.async_get_by_username = AsyncMock(return_value=DummyResponse(user))

    assert await adapter.get_user_by_username("octocat") is user
    adapter.client.rest.users.async_get_by_username.assert_awaited_once_with(username="octocat")


@pytest.mark.asyncio
async def test_create_passes_timeout() -> None:
    """Test that the adapter factory splits the repository and forwards the timeout."""
    with patch("issue_sync.github.adapter.get_github_client", AsyncMock(return_value=MagicMock())) as client_mock:
        adapter = await GitHubKitAdapter.create(
            repo="owner/repo",
            github_auth_type=GitHubAuthenticationType.PAT,
            github_pat_token="token",
            timeout=12.5,
        )

    assert (adapter.owner, adapter.repo_name) == ("owner", "repo")
    assert client_mock.await_args.kwargs["timeout"] == 12.5
