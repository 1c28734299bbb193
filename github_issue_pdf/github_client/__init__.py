"""GitHub client package for API interaction."""

from .client import GitHubClient
from .models import (
    GitHubComment,
    GitHubIssue,
    GitHubLabel,
    GitHubUser,
    IssueSummary,
    RepoRef,
)
from .pagination import FetchResult, Page, PageCursor, PaginatedFetcher

__all__ = [
    "FetchResult",
    "GitHubClient",
    "GitHubComment",
    "GitHubIssue",
    "GitHubLabel",
    "GitHubUser",
    "IssueSummary",
    "Page",
    "PageCursor",
    "PaginatedFetcher",
    "RepoRef",
]
