"""Test configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import pytest

from github_issue_pdf.config import AccountType, AppSettings, FetchConfig, RepoMode
from github_issue_pdf.github_client.models import IssueSummary

VALID_TOKEN = "ghp_" + "a" * 36


@pytest.fixture
def token() -> str:
    """A token that passes validation."""
    return VALID_TOKEN


@pytest.fixture
def make_issue() -> Callable[..., IssueSummary]:
    """Factory for issue summaries with sensible defaults."""

    def _make(
        number: int = 1,
        created: datetime | None = None,
        closed: datetime | None = None,
        owner: str = "acme",
        repo: str = "widgets",
        private: bool = False,
    ) -> IssueSummary:
        return IssueSummary(
            owner=owner,
            repo=repo,
            number=number,
            created_at=created or datetime(2022, 3, 4, tzinfo=timezone.utc),
            closed_at=closed,
            private=private,
        )

    return _make


@pytest.fixture
def single_repo_config() -> FetchConfig:
    """Configuration for one repository of an organization."""
    return FetchConfig(
        account_name="acme",
        account_type=AccountType.ORGANIZATION,
        repo_mode=RepoMode.ONE,
        repo_name="widgets",
        token=VALID_TOKEN,
    )


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    """Application settings writing below a temporary directory."""
    return AppSettings(
        output_dir=tmp_path / "output",
        token_file=tmp_path / "conf" / "token.json",
        log_dir=tmp_path / "logs",
    )
