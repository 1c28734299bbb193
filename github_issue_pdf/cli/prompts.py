"""Interactive collection of the run configuration."""

import os
from collections.abc import Callable
from typing import TypeVar

from rich.console import Console
from rich.prompt import Confirm, Prompt

from ..config import (
    AccountType,
    FetchConfig,
    RepoMode,
    validate_name,
    validate_token,
    validate_year,
)
from ..storage.token_store import TokenStore

console = Console()

T = TypeVar("T")


def ask_validated(
    message: str, validate: Callable[[str], T], password: bool = False
) -> T:
    """Ask until ``validate`` accepts the answer, showing its error otherwise."""
    while True:
        answer = Prompt.ask(message, password=password)
        try:
            return validate(answer or "")
        except ValueError as e:
            console.print(f"[red]{e}[/red]")


def resolve_token(store: TokenStore) -> str:
    """Get the access token from the environment, the token file or the user.

    A token typed by the user is saved to the token file for the next run.
    """
    env_token = os.getenv("GITHUB_TOKEN")
    if env_token:
        return validate_token(env_token)

    stored = store.load()
    if stored is not None:
        return validate_token(stored)

    token = ask_validated(
        "Access Token is not stored yet. Please enter token",
        validate_token,
        password=True,
    )
    store.save(token)
    return token


def ask_account() -> tuple[AccountType, str, RepoMode, str | None]:
    """Ask for account type, account name, repo mode and (for one repo) its name."""
    account_type = AccountType(
        Prompt.ask(
            "Please select your account type",
            choices=[t.value for t in AccountType],
            default=AccountType.ORGANIZATION.value,
        )
    )
    account_name = ask_validated(
        "Please enter the name of the account you would like to query (required)",
        lambda value: validate_name(value, "account"),
    )
    repo_mode = RepoMode(
        Prompt.ask(
            "How many repositories would you like to search?",
            choices=[m.value for m in RepoMode],
            default=RepoMode.ONE.value,
        )
    )
    repo_name = None
    if repo_mode is RepoMode.ONE:
        repo_name = ask_validated(
            "Please enter the name of the specific repository you want",
            lambda value: validate_name(value, "repository"),
        )
    return account_type, account_name, repo_mode, repo_name


def ask_for_repos() -> list[str]:
    """Ask for repository names until the user is done."""
    repos: list[str] = []
    while True:
        name = ask_validated(
            "Input a repository to search",
            lambda value: validate_name(value, "repository", lower=False),
        )
        repos.append(name)
        console.print(f"Current repository list: [yellow]{', '.join(repos)}[/yellow]")
        if not Confirm.ask("Would you like to add another repository?", default=False):
            return repos


def ask_for_year() -> int | None:
    """Ask whether to restrict the run to issues open during one year."""
    if not Confirm.ask(
        "Are you searching for issues that were open during a specific year?",
        default=False,
    ):
        return None
    return ask_validated("What year were the issues open during?", validate_year)


def collect_config(store: TokenStore) -> FetchConfig:
    """Run every prompt and build the configuration of this run."""
    token = resolve_token(store)
    account_type, account_name, repo_mode, repo_name = ask_account()
    multiple_repos = ask_for_repos() if repo_mode is RepoMode.MULTIPLE else []
    issue_year = ask_for_year()

    return FetchConfig(
        account_name=account_name,
        account_type=account_type,
        repo_mode=repo_mode,
        repo_name=repo_name,
        multiple_repos=multiple_repos,
        issue_year=issue_year,
        token=token,
    )
