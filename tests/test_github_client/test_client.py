"""Tests for GitHub client."""

from collections.abc import Callable
from datetime import datetime
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest
from github.GithubException import UnknownObjectException

from github_issue_pdf.github_client.client import GitHubClient
from github_issue_pdf.github_client.models import GitHubIssue

Handler = Callable[[httpx.Request], httpx.Response]


def make_client(handler: Handler) -> GitHubClient:
    return GitHubClient(token="test_token", transport=httpx.MockTransport(handler))


def next_link(url: str) -> dict[str, str]:
    return {"Link": f'<{url}>; rel="next", <{url}>; rel="last"'}


@patch("github_issue_pdf.github_client.client.Github")
class TestGitHubClient:
    """Test GitHubClient class."""

    def test_init_without_token(self, mock_github_class: Mock) -> None:
        """Test initialization without token raises error."""
        with pytest.raises(ValueError, match="GitHub token is required"):
            GitHubClient(token="")

    def test_init_sets_auth_and_user_agent(self, mock_github_class: Mock) -> None:
        """Test both transports carry the token and the user agent."""
        client = GitHubClient(token="test_token", user_agent="Agent X")

        assert client.http.headers["Authorization"] == "Bearer test_token"
        assert client.http.headers["User-Agent"] == "Agent X"
        assert mock_github_class.call_args.kwargs["user_agent"] == "Agent X"

    def test_no_timeout_by_default(self, mock_github_class: Mock) -> None:
        """Test requests wait indefinitely unless a timeout is configured."""
        client = GitHubClient(token="test_token")
        assert client.http.timeout.read is None

        client = GitHubClient(token="test_token", timeout=5)
        assert client.http.timeout.read == 5

    @pytest.mark.asyncio
    async def test_list_repo_issues_params(self, mock_github_class: Mock) -> None:
        """Test the issue listing asks for every state of the given page."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=[{"number": 1}])

        async with make_client(handler) as client:
            page = await client.list_repo_issues("acme", "widgets", 2, 50)

        assert page.items == [{"number": 1}]
        assert not page.has_next
        request = requests[0]
        assert request.url.path == "/repos/acme/widgets/issues"
        assert request.url.params["state"] == "all"
        assert request.url.params["page"] == "2"
        assert request.url.params["per_page"] == "50"

    @pytest.mark.asyncio
    async def test_next_link_detected(self, mock_github_class: Mock) -> None:
        """Test a Link header with rel="next" marks more pages."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json=[],
                headers=next_link("https://api.github.com/orgs/acme/repos?page=2"),
            )

        async with make_client(handler) as client:
            page = await client.list_org_repos("acme", 1, 100)

        assert page.has_next

    @pytest.mark.asyncio
    async def test_repo_listing_types(self, mock_github_class: Mock) -> None:
        """Test organizations list public repos and users list owned repos."""
        seen: list[tuple[str, str]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.url.path, request.url.params["type"]))
            return httpx.Response(200, json=[])

        async with make_client(handler) as client:
            await client.list_org_repos("acme", 1, 100)
            await client.list_user_repos("octocat", 1, 100)

        assert seen == [("/orgs/acme/repos", "public"), ("/users/octocat/repos", "owner")]

    @pytest.mark.asyncio
    async def test_not_found_raises(self, mock_github_class: Mock) -> None:
        """Test an unknown account surfaces as an HTTP error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "Not Found"})

        async with make_client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.list_repo_issues("nobody", "nothing", 1, 100)

    @pytest.mark.asyncio
    async def test_rate_limit_retry(self, mock_github_class: Mock) -> None:
        """Test an exhausted rate limit is waited out and the request retried."""
        responses = [
            httpx.Response(
                403,
                headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "0"},
            ),
            httpx.Response(200, json={"private": True}),
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            return responses.pop(0)

        with patch(
            "github_issue_pdf.github_client.client.asyncio.sleep", new=AsyncMock()
        ) as mock_sleep:
            async with make_client(handler) as client:
                repo = await client.get_repository("acme", "widgets")

        assert repo == {"private": True}
        mock_sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_forbidden_without_rate_limit_raises(
        self, mock_github_class: Mock
    ) -> None:
        """Test a plain 403 is not retried."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, headers={"x-ratelimit-remaining": "12"})

        async with make_client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.get_repository("acme", "secret")

    @pytest.mark.asyncio
    async def test_aclose_closes_pygithub(self, mock_github_class: Mock) -> None:
        """Test leaving the context closes the PyGitHub connection too."""
        async with GitHubClient(token="test_token"):
            pass

        mock_github_class.return_value.close.assert_called_once()

    def test_check_rate_limit(self, mock_github_class: Mock) -> None:
        """Test rate limit checking does not sleep with plenty remaining."""
        mock_rate_limit = Mock()
        mock_rate_limit.rate.remaining = 50
        mock_github_class.return_value.get_rate_limit.return_value = mock_rate_limit

        client = GitHubClient(token="test_token")
        with patch("github_issue_pdf.github_client.client.time.sleep") as mock_sleep:
            client.check_rate_limit()

        mock_sleep.assert_not_called()

    def test_check_rate_limit_sleeps_when_low(self, mock_github_class: Mock) -> None:
        """Test a nearly exhausted rate limit sleeps until the reset."""
        mock_rate_limit = Mock()
        mock_rate_limit.rate.remaining = 3
        mock_rate_limit.rate.reset.timestamp.return_value = 0
        mock_github_class.return_value.get_rate_limit.return_value = mock_rate_limit

        client = GitHubClient(token="test_token")
        with patch("github_issue_pdf.github_client.client.time.sleep") as mock_sleep:
            client.check_rate_limit()

        mock_sleep.assert_called_once_with(0)

    def test_get_issue_success(self, mock_github_class: Mock) -> None:
        """Test successful issue retrieval with labels and comments."""
        mock_user = Mock()
        mock_user.login = "testuser"
        mock_user.id = 12345

        mock_label = Mock()
        mock_label.name = "bug"
        mock_label.color = "d73a4a"
        mock_label.description = "Something is broken"

        mock_comment = Mock()
        mock_comment.id = 7
        mock_comment.user = mock_user
        mock_comment.body = "Confirmed"
        mock_comment.created_at = datetime(2024, 1, 2, 9, 0, 0)

        mock_issue = Mock()
        mock_issue.number = 1
        mock_issue.title = "Test Issue"
        mock_issue.body = "Test body"
        mock_issue.state = "closed"
        mock_issue.labels = [mock_label]
        mock_issue.user = mock_user
        mock_issue.created_at = datetime(2024, 1, 1, 12, 0, 0)
        mock_issue.closed_at = datetime(2024, 1, 3, 12, 0, 0)
        mock_issue.get_comments.return_value = [mock_comment]

        mock_github = mock_github_class.return_value
        mock_github.get_repo.return_value.get_issue.return_value = mock_issue

        client = GitHubClient(token="test_token")
        result = client.get_issue("testorg", "testrepo", 1)

        assert isinstance(result, GitHubIssue)
        assert result.title == "Test Issue"
        assert result.labels[0].name == "bug"
        assert result.comments[0].body == "Confirmed"
        assert result.comments[0].user.login == "testuser"
        mock_github.get_repo.assert_called_once_with("testorg/testrepo")

    def test_get_issue_comment_failure_keeps_issue(
        self, mock_github_class: Mock
    ) -> None:
        """Test a failing comment listing still returns the issue."""
        mock_user = Mock()
        mock_user.login = "testuser"
        mock_user.id = 1

        mock_issue = Mock()
        mock_issue.number = 2
        mock_issue.title = "No comments"
        mock_issue.body = None
        mock_issue.state = "open"
        mock_issue.labels = []
        mock_issue.user = mock_user
        mock_issue.created_at = datetime(2024, 1, 1)
        mock_issue.closed_at = None
        mock_issue.get_comments.side_effect = RuntimeError("API down")

        mock_github_class.return_value.get_repo.return_value.get_issue.return_value = (
            mock_issue
        )

        result = GitHubClient(token="test_token").get_issue("o", "r", 2)

        assert result.comments == []

    def test_get_issue_not_found(self, mock_github_class: Mock) -> None:
        """Test issue not found error."""
        mock_github = mock_github_class.return_value
        mock_github.get_repo.return_value.get_issue.side_effect = (
            UnknownObjectException(404, "Not Found", None)
        )

        client = GitHubClient(token="test_token")

        with pytest.raises(ValueError, match="Issue #999 not found in testorg/testrepo"):
            client.get_issue("testorg", "testrepo", 999)
