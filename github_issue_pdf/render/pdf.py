"""Printing issues to PDF with a headless Chromium."""

import asyncio
import logging
from pathlib import Path
from types import TracebackType

from playwright.async_api import Browser, Page, Playwright, async_playwright
from rich.console import Console

from ..config import PdfOptions
from ..github_client.client import GitHubClient
from ..github_client.models import IssueSummary
from ..storage.manager import OutputManager
from .html import IssueHTMLGenerator

console = Console()
logger = logging.getLogger(__name__)


class IssuePdfRenderer:
    """Renders one issue per browser page into the output directory.

    Public issues are printed from their github.com page. Private issues
    are rebuilt as HTML from the API, since the browser is not signed in.
    Use as an async context manager; one browser serves the whole run.
    """

    def __init__(
        self,
        client: GitHubClient,
        output: OutputManager,
        pdf_options: PdfOptions | None = None,
        html_generator: IssueHTMLGenerator | None = None,
        navigation_timeout: float | None = None,
    ):
        """Initialize the renderer.

        Args:
            client: GitHub client used to load private issues
            output: Output layout deciding where each PDF goes
            pdf_options: Page setup for the PDF printer
            html_generator: HTML builder for private issues
            navigation_timeout: Seconds to wait for a page load, None to wait forever
        """
        self.client = client
        self.output = output
        self.pdf_options = pdf_options or PdfOptions()
        self.html_generator = html_generator or IssueHTMLGenerator()
        # Playwright treats 0 as "no timeout".
        self.navigation_timeout_ms = (
            0 if navigation_timeout is None else navigation_timeout * 1000
        )
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self) -> "IssuePdfRenderer":
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def start(self) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=True)
        logger.debug("Headless browser started")

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def render(self, issue: IssueSummary) -> Path:
        """Render one issue to its PDF file.

        Args:
            issue: Issue to render

        Returns:
            Path of the written PDF
        """
        if self._browser is None:
            raise RuntimeError("Renderer has not been started")

        file_path = self.output.pdf_path(issue)
        page = await self._browser.new_page()
        try:
            if issue.private:
                await self._load_private_issue(page, issue)
            else:
                await page.goto(
                    issue.html_url,
                    wait_until="networkidle",
                    timeout=self.navigation_timeout_ms,
                )
            await page.pdf(
                path=str(file_path),
                format=self.pdf_options.format,
                scale=self.pdf_options.scale,
                margin=self.pdf_options.margin,
            )
        finally:
            await page.close()

        console.print(
            f"\t[yellow]PDF stored at[/yellow] [green]{file_path}[/green][yellow].[/yellow]"
        )
        return file_path

    async def _load_private_issue(self, page: Page, issue: IssueSummary) -> None:
        detail = await asyncio.to_thread(
            self.client.get_issue, issue.owner, issue.repo, issue.number
        )
        document = self.html_generator.generate(detail)
        await page.set_content(
            document, wait_until="networkidle", timeout=self.navigation_timeout_ms
        )
