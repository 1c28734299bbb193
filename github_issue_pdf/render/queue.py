"""Bounded-concurrency rendering of a repository's issues."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from ..config import DEFAULT_CONCURRENCY
from ..exceptions import GipError, RenderCancelledError, RenderError
from ..github_client.models import IssueSummary

console = Console()
logger = logging.getLogger(__name__)

RenderFunction = Callable[[IssueSummary], Awaitable[Path]]


@dataclass
class RenderOutcome:
    """Result of rendering one issue."""

    issue: IssueSummary
    path: Path | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RenderReport:
    """Per-issue outcomes of one queue run."""

    repo: str
    outcomes: list[RenderOutcome] = field(default_factory=list)

    @property
    def rendered(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> list[RenderOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def error(self) -> RenderError | None:
        """Aggregate error when at least one issue failed, otherwise None."""
        failed = self.failed
        if not failed:
            return None
        return RenderError(
            self.repo,
            [(o.issue.number, o.error) for o in failed if o.error is not None],
        )


CompletionCallback = Callable[[GipError | None, RenderReport], None]


class RenderQueue:
    """Renders issues to PDF with at most ``concurrency`` renders in flight.

    A failing render is recorded in the report and never cancels the
    renders already running next to it.
    """

    def __init__(
        self,
        render: RenderFunction,
        concurrency: int = DEFAULT_CONCURRENCY,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ):
        """Initialize the queue.

        Args:
            render: Coroutine function rendering one issue, returning its path
            concurrency: Maximum number of renders running at once
            timeout: Per-render timeout in seconds, None for no timeout
            cancel: Optional token; once set no further render is started
        """
        if concurrency < 1:
            raise ValueError("Concurrency must be at least 1")
        self.render = render
        self.concurrency = concurrency
        self.timeout = timeout
        self.cancel = cancel

    async def run(
        self,
        issues: Sequence[IssueSummary],
        repo_name: str | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> RenderReport:
        """Render every issue, then call ``on_complete`` exactly once.

        Args:
            issues: Issues to render
            repo_name: Repository named in notices (defaults to the issues' repo)
            on_complete: Called with the aggregate error (or None) and the report

        Returns:
            RenderReport with one outcome per issue
        """
        repo = repo_name or (issues[0].repo if issues else "")
        report = RenderReport(repo=repo)
        try:
            if not issues:
                console.print(
                    f"\n[yellow]No issues found in[/yellow] [cyan]\\[{repo}][/cyan].\n"
                )
                return report

            semaphore = asyncio.Semaphore(self.concurrency)
            tasks = [
                asyncio.create_task(self._render_one(issue, semaphore))
                for issue in issues
            ]
            try:
                report.outcomes = list(await asyncio.gather(*tasks))
            except asyncio.CancelledError:
                report.outcomes = [
                    self._settled_outcome(issue, task)
                    for issue, task in zip(issues, tasks)
                ]
                logger.warning(
                    "Rendering of %s cancelled with %d issue(s) unfinished",
                    repo,
                    len(report.failed),
                )
                raise

            if report.failed:
                console.print(
                    f"\n\t[red]{len(report.failed)} of {len(issues)} issues from repo "
                    f"[cyan]{repo}[/cyan] failed to render.[/red]\n"
                )
            else:
                console.print(
                    f"\n\t[yellow]All issues from repo[/yellow] [cyan]{repo}[/cyan] "
                    "[yellow]have finished rendering.[/yellow]\n"
                )
            return report
        finally:
            if on_complete is not None:
                on_complete(report.error, report)

    @staticmethod
    def _settled_outcome(
        issue: IssueSummary, task: "asyncio.Task[RenderOutcome]"
    ) -> RenderOutcome:
        """Outcome of a task after the queue was cancelled mid-run."""
        if task.done() and not task.cancelled():
            return task.result()
        return RenderOutcome(
            issue=issue,
            error=RenderCancelledError(
                f"Render of {issue.repo}#{issue.number} was cancelled"
            ),
        )

    async def _render_one(
        self, issue: IssueSummary, semaphore: asyncio.Semaphore
    ) -> RenderOutcome:
        async with semaphore:
            if self.cancel is not None and self.cancel.is_set():
                return RenderOutcome(
                    issue=issue,
                    error=RenderCancelledError(
                        f"Render of {issue.repo}#{issue.number} was cancelled"
                    ),
                )
            try:
                if self.timeout is None:
                    path = await self.render(issue)
                else:
                    path = await asyncio.wait_for(self.render(issue), self.timeout)
                return RenderOutcome(issue=issue, path=path)
            except Exception as e:
                logger.error(
                    "Rendering %s/%s#%d failed",
                    issue.owner,
                    issue.repo,
                    issue.number,
                    exc_info=True,
                )
                console.print(
                    f"\t[red]✗ Failed to render issue #{issue.number}: {e}[/red]"
                )
                return RenderOutcome(issue=issue, error=e)
