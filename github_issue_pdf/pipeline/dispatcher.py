"""Routing a run to the single, multiple or account-wide flow."""

import asyncio
import logging
from enum import Enum

from rich.console import Console

from ..config import AccountType, AppSettings, FetchConfig, RepoMode
from ..github_client.client import GitHubClient
from ..github_client.pagination import PaginatedFetcher
from ..render.pdf import IssuePdfRenderer
from ..render.queue import RenderFunction, RenderQueue
from ..storage.manager import OutputManager
from .orchestrator import (
    AccountOrchestrator,
    IssueSource,
    RepoOrchestrator,
    RunSummary,
)

console = Console()
logger = logging.getLogger(__name__)


class Route(str, Enum):
    """Flow selected for a run."""

    ORGANIZATION_ALL = "organization-all"
    USER_ALL = "user-all"
    MULTIPLE = "multiple"
    SINGLE = "single"


def select_route(config: FetchConfig) -> Route:
    """Pick the flow for a configuration; the first matching rule wins."""
    if (
        config.account_type is AccountType.ORGANIZATION
        and config.repo_mode is RepoMode.ALL
    ):
        return Route.ORGANIZATION_ALL
    if config.account_type is AccountType.USER and config.repo_mode is RepoMode.ALL:
        return Route.USER_ALL
    if config.repo_mode is RepoMode.MULTIPLE:
        return Route.MULTIPLE
    return Route.SINGLE


class RequestDispatcher:
    """Entry point of the pipeline for one run.

    Owns the single initialization point of the run's collaborators: the
    output layout, the GitHub client and the PDF renderer.
    """

    def __init__(
        self,
        settings: AppSettings,
        output: OutputManager | None = None,
        cancel: asyncio.Event | None = None,
    ):
        self.settings = settings
        self.output = output or OutputManager(settings.output_dir)
        self.cancel = cancel

    async def dispatch(self, config: FetchConfig) -> RunSummary:
        """Prepare the output directory and the API client, then run the flow."""
        console.print(
            f"\n[yellow]Processing repos from[/yellow] "
            f"[cyan]{config.account_name}[/cyan][yellow]...[/yellow]\n"
        )
        self.output.ensure_account_dir(config.account_name)

        async with GitHubClient(
            config.token,
            user_agent=self.settings.user_agent,
            timeout=self.settings.http_timeout,
        ) as client:
            await asyncio.to_thread(client.check_rate_limit)
            async with IssuePdfRenderer(
                client,
                self.output,
                pdf_options=self.settings.pdf_options,
                navigation_timeout=self.settings.render_timeout,
            ) as renderer:
                return await self.run_pipeline(config, client, renderer.render)

    async def run_pipeline(
        self,
        config: FetchConfig,
        client: IssueSource,
        render: RenderFunction,
    ) -> RunSummary:
        """Build the orchestrators around ready collaborators and run the route.

        Args:
            config: Run configuration
            client: GitHub client (or anything with the same list methods)
            render: Coroutine function rendering one issue

        Returns:
            RunSummary of every repository processed
        """
        fetcher = PaginatedFetcher(per_page=self.settings.page_size)
        queue = RenderQueue(
            render,
            concurrency=self.settings.concurrency,
            timeout=self.settings.render_timeout,
            cancel=self.cancel,
        )
        repo_orchestrator = RepoOrchestrator(client, fetcher, queue, cancel=self.cancel)
        account_orchestrator = AccountOrchestrator(client, fetcher, repo_orchestrator)

        route = select_route(config)
        logger.info("Dispatching %s as %s", config.account_name, route.value)

        if route in (Route.ORGANIZATION_ALL, Route.USER_ALL):
            return await account_orchestrator.process_all(config)
        if route is Route.MULTIPLE:
            return await account_orchestrator.process_multiple(config)

        assert config.repo_name is not None
        outcome = await repo_orchestrator.process(config, config.repo_name)
        return RunSummary(account=config.account_name, outcomes=[outcome])
