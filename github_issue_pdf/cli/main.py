"""Main CLI entry point."""

import asyncio
import logging
import os

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import AppSettings
from ..pipeline.dispatcher import RequestDispatcher
from ..pipeline.orchestrator import RunSummary
from ..storage.manager import OutputManager
from ..storage.token_store import TokenStore
from ..utils.logging_config import setup_logging
from .prompts import collect_config

# Load environment variables from .env file
load_dotenv()

STANDALONE_ENV = "GIP_STANDALONE_BUILD"

app = typer.Typer(
    name="github-issue-pdf",
    help="Render GitHub issues to PDF files",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
logger = logging.getLogger(__name__)


@app.callback(invoke_without_command=True)
def default(ctx: typer.Context) -> None:
    """Render GitHub issues to PDF files. Runs the interactive flow by default."""
    if ctx.invoked_subcommand is None:
        run()


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def run() -> None:
    """Ask which issues to fetch, then render each one to a PDF."""
    try:
        settings = AppSettings.from_env()
        log_file = setup_logging(settings.log_dir, settings.log_level)
        logger.debug("Logging to %s", log_file)
        config = collect_config(TokenStore(settings.token_file))
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        raise typer.Exit(130)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]❌ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        summary = asyncio.run(RequestDispatcher(settings).dispatch(config))
        _print_summary(summary)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Run for %s failed", config.account_name)
        console.print(f"[red]An error occurred:[/red] {escape(str(e))}")

    console.print("\n[green]Done.[/green]")


def _print_summary(summary: RunSummary) -> None:
    if summary.error is not None or not summary.outcomes:
        return

    table = Table(title="Run Summary")
    table.add_column("Repository", style="cyan")
    table.add_column("Fetched", justify="right")
    table.add_column("Selected", justify="right")
    table.add_column("Rendered", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")

    for outcome in summary.outcomes:
        report = outcome.report
        table.add_row(
            outcome.repo.name,
            str(outcome.fetched),
            str(outcome.selected),
            str(report.rendered if report else 0),
            "fetch failed" if report is None else str(len(report.failed)),
        )
    console.print(table)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def status() -> None:
    """Show rendered PDFs per repository."""
    settings = AppSettings.from_env()
    stats = OutputManager(settings.output_dir).get_output_stats()

    stats_table = Table(title="Output Statistics")
    stats_table.add_column("Metric", style="cyan")
    stats_table.add_column("Value", style="green")
    stats_table.add_row("Total PDFs", str(stats["total_pdfs"]))
    stats_table.add_row("Output Size", f"{stats['total_size_mb']} MB")
    stats_table.add_row("Output Path", stats["output_path"])
    console.print(stats_table)

    if stats["repositories"]:
        repo_table = Table(title="PDFs by Repository")
        repo_table.add_column("Repository", style="cyan")
        repo_table.add_column("PDF Count", justify="right", style="green")
        for repo, count in sorted(stats["repositories"].items()):
            repo_table.add_row(repo, str(count))
        console.print(repo_table)
    else:
        console.print("No rendered issues found.")


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from github_issue_pdf import __version__

    console.print(f"GitHub Issues to PDF v{__version__}")


def prepare_standalone_runtime() -> None:
    """Point Playwright at the browsers bundled with a frozen executable."""
    os.environ.setdefault("PLAYWRIGHT_BROWSERS_PATH", "0")
    logger.debug("Standalone build startup")


def main() -> None:
    if os.getenv(STANDALONE_ENV) == "true":
        prepare_standalone_runtime()
    app()


if __name__ == "__main__":
    main()
