"""Fetch → filter → render sequencing for one or many repositories."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from rich.console import Console

from ..config import AccountType, FetchConfig
from ..exceptions import FetchError, GipError
from ..github_client.models import IssueSummary, RepoRef
from ..github_client.pagination import FetchResult, Page, PaginatedFetcher
from ..render.queue import CompletionCallback, RenderQueue, RenderReport
from ..utils.year_filter import filter_by_year

console = Console()
logger = logging.getLogger(__name__)


class IssueSource(Protocol):
    """The part of the GitHub client the orchestrators depend on."""

    async def list_repo_issues(
        self, owner: str, repo: str, page: int, per_page: int
    ) -> Page: ...

    async def list_org_repos(self, org: str, page: int, per_page: int) -> Page: ...

    async def list_user_repos(self, user: str, page: int, per_page: int) -> Page: ...

    async def get_repository(self, owner: str, repo: str) -> dict: ...


@dataclass
class RepoOutcome:
    """What happened to one repository."""

    repo: RepoRef
    fetched: int = 0
    selected: int = 0
    report: RenderReport | None = None
    error: GipError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunSummary:
    """What happened to every repository of one run."""

    account: str
    outcomes: list[RepoOutcome] = field(default_factory=list)
    error: GipError | None = None

    @property
    def rendered(self) -> int:
        return sum(o.report.rendered for o in self.outcomes if o.report is not None)

    @property
    def failed_repos(self) -> list[RepoOutcome]:
        return [o for o in self.outcomes if not o.ok]


def print_repo_fetch_error(account: str, repo: str) -> None:
    console.print(
        f"[white on red]ERROR:[/white on red] Either the account [yellow]\\[ {account} ][/yellow] "
        f"or the repository [yellow]\\[ {repo} ][/yellow] couldn't be found, "
        "double-check the names and try again."
    )


def print_account_fetch_error(account: str) -> None:
    console.print(
        f"[white on red]ERROR:[/white on red] The account [yellow]\\[{account}][/yellow] "
        "couldn't be found, double-check the name and try again."
    )


class RepoOrchestrator:
    """Processes one repository: fetch its issues, filter them, render them."""

    def __init__(
        self,
        client: IssueSource,
        fetcher: PaginatedFetcher,
        queue: RenderQueue,
        cancel: asyncio.Event | None = None,
    ):
        self.client = client
        self.fetcher = fetcher
        self.queue = queue
        self.cancel = cancel

    async def process(
        self,
        config: FetchConfig,
        repo: RepoRef | str,
        on_complete: CompletionCallback | None = None,
    ) -> RepoOutcome:
        """Fetch, filter and render the issues of one repository.

        Rendering only starts once every page of issues has been collected.
        ``on_complete`` is called exactly once, also when the fetch fails.

        Args:
            config: Run configuration
            repo: Repository reference, or a bare name owned by the account
            on_complete: Completion hook forwarded to the render queue

        Returns:
            RepoOutcome describing the fetch and render results
        """
        if isinstance(repo, str):
            repo = RepoRef(name=repo, owner=config.account_name)
        outcome = RepoOutcome(repo=repo)

        try:
            private = await self._resolve_privacy(repo)
        except Exception as e:
            logger.error("Looking up %s/%s failed", repo.owner, repo.name, exc_info=True)
            return self._fetch_failed(
                outcome, FetchError(f"{repo.owner}/{repo.name}", e), on_complete
            )

        result = await self.fetch_issues(repo, private)
        if not result.ok:
            assert result.error is not None
            return self._fetch_failed(outcome, result.error, on_complete)

        issues = result.items
        outcome.fetched = len(issues)
        if config.issue_year is not None:
            issues = filter_by_year(issues, config.issue_year)
            logger.info(
                "%d of %d issues of %s were open during %d",
                len(issues),
                outcome.fetched,
                repo.name,
                config.issue_year,
            )
        outcome.selected = len(issues)

        if issues:
            console.print(
                f"\n[yellow]Fetching {len(issues)} issues from repo[/yellow] "
                f"[cyan]{repo.name}[/cyan][yellow]...[/yellow]\n"
            )

        outcome.report = await self.queue.run(
            issues, repo_name=repo.name, on_complete=on_complete
        )
        outcome.error = outcome.report.error
        return outcome

    async def fetch_issues(
        self, repo: RepoRef, private: bool
    ) -> FetchResult[IssueSummary]:
        """Collect every issue of a repository, in API order."""

        async def load_page(page: int, per_page: int) -> Page:
            return await self.client.list_repo_issues(
                repo.owner, repo.name, page, per_page
            )

        return await self.fetcher.fetch(
            load_page,
            lambda item: IssueSummary.from_api(item, repo.owner, repo.name, private),
            target=f"{repo.owner}/{repo.name}",
            cancel=self.cancel,
        )

    async def _resolve_privacy(self, repo: RepoRef) -> bool:
        if repo.private is not None:
            return repo.private
        descriptor = await self.client.get_repository(repo.owner, repo.name)
        return bool(descriptor.get("private", False))

    def _fetch_failed(
        self,
        outcome: RepoOutcome,
        error: FetchError,
        on_complete: CompletionCallback | None,
    ) -> RepoOutcome:
        print_repo_fetch_error(outcome.repo.owner, outcome.repo.name)
        outcome.error = error
        if on_complete is not None:
            on_complete(error, RenderReport(repo=outcome.repo.name))
        return outcome


class AccountOrchestrator:
    """Processes several repositories of one account, strictly one at a time.

    A repository's issue fetch only starts once the previous repository's
    render queue has reported completion.
    """

    def __init__(
        self,
        client: IssueSource,
        fetcher: PaginatedFetcher,
        repo_orchestrator: RepoOrchestrator,
    ):
        self.client = client
        self.fetcher = fetcher
        self.repo_orchestrator = repo_orchestrator

    async def process_all(self, config: FetchConfig) -> RunSummary:
        """Process every repository the account owns (public ones for orgs)."""
        result = await self.fetch_repositories(config)
        if not result.ok:
            print_account_fetch_error(config.account_name)
            return RunSummary(account=config.account_name, error=result.error)

        logger.info("Found %d repositories for %s", len(result.items), config.account_name)
        return await self._process_sequentially(config, result.items)

    async def process_multiple(self, config: FetchConfig) -> RunSummary:
        """Process the repositories the user listed."""
        repos = [
            RepoRef(name=name, owner=config.account_name)
            for name in config.multiple_repos
        ]
        return await self._process_sequentially(config, repos)

    async def fetch_repositories(self, config: FetchConfig) -> FetchResult[RepoRef]:
        """Collect every repository of the account.

        Organizations list their public repositories, users the ones they own.
        """
        account = config.account_name

        async def load_page(page: int, per_page: int) -> Page:
            if config.account_type is AccountType.ORGANIZATION:
                return await self.client.list_org_repos(account, page, per_page)
            return await self.client.list_user_repos(account, page, per_page)

        return await self.fetcher.fetch(
            load_page,
            lambda item: RepoRef.from_api(item, account),
            target=account,
            cancel=self.repo_orchestrator.cancel,
        )

    async def _process_sequentially(
        self, config: FetchConfig, repos: list[RepoRef]
    ) -> RunSummary:
        summary = RunSummary(account=config.account_name)

        for repo in repos:
            done = asyncio.Event()

            def on_complete(
                error: GipError | None, report: RenderReport, name: str = repo.name
            ) -> None:
                if error is not None:
                    logger.warning("Finished %s with errors: %s", name, error)
                done.set()

            outcome = await self.repo_orchestrator.process(config, repo, on_complete)
            await done.wait()
            summary.outcomes.append(outcome)

        console.print(
            "\n[yellow]All issues have finished rendering, have a nice day![/yellow]\n"
        )
        return summary
