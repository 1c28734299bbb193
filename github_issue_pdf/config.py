"""Run configuration, application settings and input validation."""

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

# Classic 40 character tokens, prefixed tokens (ghp_, gho_, ...) and
# fine-grained personal access tokens.
TOKEN_PATTERN = re.compile(
    r"^(?:[a-zA-Z0-9]{40}|gh[pousr]_[a-zA-Z0-9]{36,}|github_pat_[a-zA-Z0-9_]{22,})$"
)
YEAR_PATTERN = re.compile(r"^(\d{4})$")

DEFAULT_CONCURRENCY = 15
DEFAULT_PAGE_SIZE = 100
USER_AGENT = "GIP Agent"


class AccountType(str, Enum):
    """Kind of GitHub account whose repositories are queried."""

    ORGANIZATION = "organization"
    USER = "user"


class RepoMode(str, Enum):
    """How many repositories of the account to process."""

    ONE = "one"
    MULTIPLE = "multiple"
    ALL = "all"


def validate_token(value: str) -> str:
    """Validate a GitHub access token.

    Args:
        value: Raw token as typed by the user or read from disk

    Returns:
        The stripped token

    Raises:
        ValueError: If the token does not look like a GitHub token
    """
    token = value.strip()
    if not TOKEN_PATTERN.match(token):
        raise ValueError("Invalid input for GitHub access token.")
    return token


def validate_year(value: str | int) -> int:
    """Validate a four digit year.

    Args:
        value: Year as typed by the user

    Returns:
        The year as an integer

    Raises:
        ValueError: If the value is not a four digit year
    """
    match = YEAR_PATTERN.match(str(value).strip())
    if not match:
        raise ValueError("Please enter a valid year (YYYY).")
    return int(match.group(1))


def validate_name(value: str, kind: str = "account", lower: bool = True) -> str:
    """Normalise an account or repository name.

    Names are stripped, and lower-cased unless ``lower`` is False. Names in
    a repository list keep their case.

    Raises:
        ValueError: If the name is empty
    """
    name = value.strip()
    if lower:
        name = name.lower()
    if not name:
        article = "an" if kind[0] in "aeiou" else "a"
        raise ValueError(f"You must input {article} {kind} name.")
    return name


class FetchConfig(BaseModel):
    """Everything one run needs to know about what to fetch.

    Built once by the prompt collection and passed read-only through the
    pipeline. Pagination state is owned by each fetch, not by this object.
    """

    account_name: str = Field(..., description="GitHub account (user or org) name")
    account_type: AccountType = Field(..., description="organization or user")
    repo_mode: RepoMode = Field(..., description="one, multiple or all repositories")
    repo_name: str | None = Field(None, description="Repository for 'one' mode")
    multiple_repos: list[str] = Field(
        default_factory=list, description="Repositories for 'multiple' mode"
    )
    issue_year: int | None = Field(
        None, description="Only keep issues open at some point during this year"
    )
    token: str = Field(..., repr=False, description="GitHub access token")

    @field_validator("account_name")
    @classmethod
    def _check_account_name(cls, value: str) -> str:
        return validate_name(value, "account")

    @field_validator("repo_name")
    @classmethod
    def _check_repo_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return validate_name(value, "repository")

    @field_validator("multiple_repos")
    @classmethod
    def _check_multiple_repos(cls, value: list[str]) -> list[str]:
        return [validate_name(name, "repository", lower=False) for name in value]

    @field_validator("issue_year", mode="before")
    @classmethod
    def _check_issue_year(cls, value: Any) -> int | None:
        if value is None or value == "":
            return None
        return validate_year(value)

    @model_validator(mode="after")
    def _check_repo_selection(self) -> "FetchConfig":
        if self.repo_mode is RepoMode.ONE and not self.repo_name:
            raise ValueError("A repository name is required when searching one repo")
        if self.repo_mode is RepoMode.MULTIPLE and not self.multiple_repos:
            raise ValueError(
                "At least one repository is required when searching multiple repos"
            )
        return self


class PdfOptions(BaseModel):
    """Page setup passed to the headless browser's PDF printer."""

    format: str = "A4"
    scale: float = 0.7
    margin: dict[str, str] = Field(
        default_factory=lambda: {
            "top": "1.2cm",
            "right": "1.2cm",
            "bottom": "1cm",
            "left": "1.2cm",
        }
    )


def _optional_float(value: str | None) -> float | None:
    if value is None or value.strip() == "":
        return None
    return float(value)


class AppSettings(BaseModel):
    """Process-wide settings, read from the environment."""

    output_dir: Path = Path("data/output")
    token_file: Path = Path("data/conf/token.json")
    log_dir: Path = Path("data/logs")
    log_level: str = "WARNING"
    concurrency: int = Field(DEFAULT_CONCURRENCY, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=100)
    http_timeout: float | None = None
    render_timeout: float | None = None
    user_agent: str = USER_AGENT
    pdf_options: PdfOptions = Field(default_factory=PdfOptions)

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Build settings from GIP_* environment variables."""
        return cls(
            output_dir=Path(os.getenv("GIP_OUTPUT_DIR", "data/output")),
            token_file=Path(os.getenv("GIP_TOKEN_FILE", "data/conf/token.json")),
            log_dir=Path(os.getenv("GIP_LOG_DIR", "data/logs")),
            log_level=os.getenv("GIP_LOG_LEVEL", "WARNING").upper(),
            concurrency=int(
                os.getenv("GIP_RENDER_CONCURRENCY", str(DEFAULT_CONCURRENCY))
            ),
            page_size=int(os.getenv("GIP_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))),
            http_timeout=_optional_float(os.getenv("GIP_HTTP_TIMEOUT")),
            render_timeout=_optional_float(os.getenv("GIP_RENDER_TIMEOUT")),
        )
