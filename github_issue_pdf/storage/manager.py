"""Output directory layout for rendered issues."""

from datetime import timezone
from pathlib import Path
from typing import Any

from ..github_client.models import IssueSummary


class OutputManager:
    """Maps issues to PDF paths under ``<base>/<owner>/<repo>/``."""

    def __init__(self, base_path: str | Path = "data/output"):
        """Initialize output manager.

        Args:
            base_path: Base directory for rendered PDFs
        """
        self.base_path = Path(base_path)

    def ensure_account_dir(self, account: str) -> Path:
        """Create the directory of an account if needed.

        Args:
            account: Account name

        Returns:
            Path of the account directory
        """
        path = self.base_path / account
        path.mkdir(parents=True, exist_ok=True)
        return path

    def ensure_repo_dir(self, owner: str, repo: str) -> Path:
        """Create the directory of a repository if needed."""
        path = self.base_path / owner / repo
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _generate_filename(self, issue: IssueSummary) -> str:
        """Generate the PDF filename of an issue.

        The creation date is taken in UTC, as GitHub reports it.

        Args:
            issue: Issue to name

        Returns:
            Filename like ``2022-03-04.#0007.pdf``
        """
        created = issue.created_at
        if created.tzinfo is not None:
            created = created.astimezone(timezone.utc)
        return f"{created:%Y-%m-%d}.#{issue.number:04d}.pdf"

    def pdf_path(self, issue: IssueSummary, create: bool = True) -> Path:
        """Get the full PDF path for an issue.

        Args:
            issue: Issue to place
            create: Create the repository directory if missing

        Returns:
            Path object for the PDF file
        """
        if create:
            directory = self.ensure_repo_dir(issue.owner, issue.repo)
        else:
            directory = self.base_path / issue.owner / issue.repo
        return directory / self._generate_filename(issue)

    def get_output_stats(self) -> dict[str, Any]:
        """Get statistics about rendered PDFs.

        Returns:
            Dictionary with output statistics
        """
        all_files = list(self.base_path.glob("*/*/*.pdf"))

        total_size = sum(f.stat().st_size for f in all_files)

        repo_counts: dict[str, int] = {}
        for f in all_files:
            repo_key = f"{f.parent.parent.name}/{f.parent.name}"
            repo_counts[repo_key] = repo_counts.get(repo_key, 0) + 1

        return {
            "total_pdfs": len(all_files),
            "total_size_bytes": total_size,
            "total_size_mb": round(total_size / (1024 * 1024), 2),
            "repositories": repo_counts,
            "output_path": str(self.base_path.absolute()),
        }
