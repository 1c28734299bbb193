"""Pydantic models for GitHub data structures.

The summary models (``IssueSummary``, ``RepoRef``) are projections of the REST
list endpoints used by the fetch pipeline. The detail models (``GitHubIssue``
and friends) carry what is needed to render a private issue to HTML.
API Reference: https://docs.github.com/en/rest/issues
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

GITHUB_WEB_URL = "https://github.com"


class IssueSummary(BaseModel):
    """Minimal description of one issue, as returned by the issue listing.

    Immutable once fetched.
    """

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., description="Account that owns the repository")
    repo: str = Field(..., description="Repository name")
    number: int = Field(..., description="Issue number within the repository")
    created_at: datetime = Field(..., description="Timestamp of issue creation")
    closed_at: datetime | None = Field(
        None, description="Timestamp the issue was closed, if it was"
    )
    private: bool = Field(False, description="Whether the repository is private")

    @property
    def html_url(self) -> str:
        """Canonical public web page of the issue."""
        return f"{GITHUB_WEB_URL}/{self.owner}/{self.repo}/issues/{self.number}"

    @classmethod
    def from_api(
        cls, item: dict[str, Any], owner: str, repo: str, private: bool = False
    ) -> "IssueSummary":
        """Project one element of ``GET /repos/{owner}/{repo}/issues``."""
        repository = item.get("repository") or {}
        return cls(
            owner=owner,
            repo=repo,
            number=item["number"],
            created_at=item["created_at"],
            closed_at=item.get("closed_at"),
            private=bool(repository.get("private", private)),
        )


class RepoRef(BaseModel):
    """A repository to process.

    ``private`` is ``None`` when the repository name came from the user and
    its visibility has not been looked up yet.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Repository name")
    owner: str = Field(..., description="Owning account")
    private: bool | None = Field(None, description="Repository visibility")

    @classmethod
    def from_api(cls, item: dict[str, Any], owner: str) -> "RepoRef":
        """Project one element of a repository listing."""
        return cls(name=item["name"], owner=owner, private=item.get("private"))


class GitHubUser(BaseModel):
    """GitHub user model representing a user account.

    API Reference: https://docs.github.com/en/rest/users/users
    """

    login: str = Field(..., description="GitHub username/login (string)")
    id: int = Field(..., description="Unique user identifier (integer)")


class GitHubLabel(BaseModel):
    """GitHub label model representing repository labels.

    API Reference: https://docs.github.com/en/rest/issues/labels
    """

    name: str = Field(..., description="Name of the label (string)")
    color: str = Field(
        ..., description="Hexadecimal color code without leading # (string)"
    )
    description: str | None = Field(
        None, description="Short description of the label (string, max 100 characters)"
    )


class GitHubComment(BaseModel):
    """GitHub comment model representing issue comments.

    API Reference: https://docs.github.com/en/rest/issues/comments
    """

    id: int = Field(..., description="Unique comment identifier (integer)")
    user: GitHubUser = Field(..., description="Comment author details")
    body: str | None = Field(None, description="Markdown content of the comment")
    created_at: datetime = Field(
        ..., description="Timestamp of comment creation (ISO 8601)"
    )


class GitHubIssue(BaseModel):
    """Full issue, including its comments, used for private issue rendering.

    API Reference: https://docs.github.com/en/rest/issues/issues
    """

    number: int = Field(..., description="Issue number within the repository (integer)")
    title: str = Field(..., description="Short description/title of the issue (string)")
    body: str | None = Field(
        None, description="Detailed description of the issue in markdown (string)"
    )
    state: str = Field(..., description="Current state: 'open', 'closed' (string)")
    labels: list[GitHubLabel] = Field(
        default_factory=list, description="Array of labels attached to the issue"
    )
    user: GitHubUser = Field(..., description="Creator/author of the issue")
    comments: list[GitHubComment] = Field(
        default_factory=list, description="All comments on the issue"
    )
    created_at: datetime = Field(
        ..., description="Timestamp of issue creation (ISO 8601)"
    )
    closed_at: datetime | None = Field(
        None, description="Timestamp the issue was closed (ISO 8601)"
    )
