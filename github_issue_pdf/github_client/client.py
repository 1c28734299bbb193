"""GitHub API client using httpx for list endpoints and PyGitHub for details."""

import asyncio
import logging
import time
from types import TracebackType
from typing import Any

import httpx
from github import Auth, Github
from github.GithubException import UnknownObjectException
from github.Issue import Issue
from github.IssueComment import IssueComment
from github.Label import Label
from github.NamedUser import NamedUser
from rich.console import Console

from ..config import USER_AGENT
from .models import GitHubComment, GitHubIssue, GitHubLabel, GitHubUser
from .pagination import Page

console = Console()
logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GitHubClient:
    """GitHub API client shared by every fetch and render of one run.

    List endpoints go through ``httpx`` so the ``Link`` header can drive
    pagination. Single issue lookups (with comments) go through PyGitHub.
    Use as an async context manager so the HTTP connection pool is closed.
    """

    def __init__(
        self,
        token: str,
        user_agent: str = USER_AGENT,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize GitHub client with authentication.

        Args:
            token: GitHub personal access token
            user_agent: User-Agent header sent with every request
            timeout: Request timeout in seconds, None for no timeout
            transport: Optional httpx transport (used by tests)
        """
        if not token:
            raise ValueError("GitHub token is required.")

        self.token = token
        self.http = httpx.AsyncClient(
            base_url=GITHUB_API_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "User-Agent": user_agent,
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self.github = Github(auth=Auth.Token(token), user_agent=user_agent)

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()
        self.github.close()

    def check_rate_limit(self) -> None:
        """Check rate limit and sleep if necessary."""
        try:
            rate_limit = self.github.get_rate_limit()
            remaining = rate_limit.rate.remaining
        except Exception as e:
            logger.warning("Could not check rate limit: %s", e)
            return

        console.print(f"GitHub API rate limit: {remaining} requests remaining")
        if remaining < 10:
            reset_time = rate_limit.rate.reset.timestamp()
            sleep_time = max(reset_time - time.time() + 1, 0)
            console.print(f"Rate limit low, sleeping for {sleep_time:.1f} seconds...")
            time.sleep(sleep_time)

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """GET a path, waiting out the primary rate limit when it is hit."""
        while True:
            response = await self.http.get(url, params=params)
            if (
                response.status_code in (403, 429)
                and response.headers.get("x-ratelimit-remaining") == "0"
            ):
                reset = float(response.headers.get("x-ratelimit-reset", time.time() + 60))
                sleep_time = max(reset - time.time() + 1, 1)
                console.print(
                    f"Rate limit exceeded, waiting {sleep_time:.0f} seconds..."
                )
                await asyncio.sleep(sleep_time)
                continue
            response.raise_for_status()
            return response

    async def _get_page(self, url: str, params: dict[str, Any]) -> Page:
        response = await self._get(url, params=params)
        return Page(items=response.json(), has_next="next" in response.links)

    async def list_repo_issues(
        self, owner: str, repo: str, page: int, per_page: int
    ) -> Page:
        """List one page of issues (open and closed) of a repository."""
        return await self._get_page(
            f"/repos/{owner}/{repo}/issues",
            {"state": "all", "page": page, "per_page": per_page},
        )

    async def list_org_repos(self, org: str, page: int, per_page: int) -> Page:
        """List one page of an organization's public repositories."""
        return await self._get_page(
            f"/orgs/{org}/repos",
            {"type": "public", "page": page, "per_page": per_page},
        )

    async def list_user_repos(self, user: str, page: int, per_page: int) -> Page:
        """List one page of the repositories a user owns."""
        return await self._get_page(
            f"/users/{user}/repos",
            {"type": "owner", "page": page, "per_page": per_page},
        )

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        """Get the repository descriptor."""
        response = await self._get(f"/repos/{owner}/{repo}")
        data: dict[str, Any] = response.json()
        return data

    def _convert_user(self, github_user: NamedUser) -> GitHubUser:
        """Convert PyGitHub user to our model."""
        return GitHubUser(login=github_user.login, id=github_user.id)

    def _convert_label(self, github_label: Label) -> GitHubLabel:
        """Convert PyGitHub label to our model."""
        return GitHubLabel(
            name=github_label.name,
            color=github_label.color,
            description=github_label.description,
        )

    def _convert_comment(self, github_comment: IssueComment) -> GitHubComment:
        """Convert PyGitHub comment to our model."""
        return GitHubComment(
            id=github_comment.id,
            user=self._convert_user(github_comment.user),
            body=github_comment.body,
            created_at=github_comment.created_at,
        )

    def _convert_issue(self, github_issue: Issue) -> GitHubIssue:
        """Convert PyGitHub issue to our model, fetching its comments."""
        labels = [self._convert_label(label) for label in github_issue.labels]

        comments = []
        try:
            for comment in github_issue.get_comments():
                comments.append(self._convert_comment(comment))
        except Exception as e:
            logger.warning(
                "Could not fetch comments for issue #%d: %s", github_issue.number, e
            )
            console.print(
                f"[yellow]Warning: Could not fetch comments for issue "
                f"#{github_issue.number}: {e}[/yellow]"
            )

        return GitHubIssue(
            number=github_issue.number,
            title=github_issue.title,
            body=github_issue.body,
            state=github_issue.state,
            labels=labels,
            user=self._convert_user(github_issue.user),
            comments=comments,
            created_at=github_issue.created_at,
            closed_at=github_issue.closed_at,
        )

    def get_issue(self, owner: str, repo: str, issue_number: int) -> GitHubIssue:
        """Get a specific issue with its labels and comments.

        Blocking; call through ``asyncio.to_thread`` from the event loop.

        Raises:
            ValueError: If the repository or issue does not exist
        """
        try:
            repository = self.github.get_repo(f"{owner}/{repo}")
            github_issue = repository.get_issue(issue_number)
        except UnknownObjectException:
            raise ValueError(f"Issue #{issue_number} not found in {owner}/{repo}")

        return self._convert_issue(github_issue)
