"""Logging configuration for the command line tool."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FILE_NAME = "github-issue-pdf.log"


def setup_logging(log_dir: Path, level: str = "WARNING") -> Path:
    """Send DEBUG and above to a log file and ``level`` and above to stderr.

    Safe to call more than once; handlers are only added the first time.

    Returns:
        Path of the log file
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME
    root = logging.getLogger()

    if not any(
        isinstance(h, logging.FileHandler)
        and getattr(h, "baseFilename", "") == str(log_file.absolute())
        for h in root.handlers
    ):
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        root.addHandler(fh)

    if not any(isinstance(h, RichHandler) for h in root.handlers):
        rh = RichHandler(console=Console(stderr=True), show_path=False)
        rh.setLevel(getattr(logging, level.upper(), logging.WARNING))
        root.addHandler(rh)

    root.setLevel(logging.DEBUG)
    # Third-party request logs stop at INFO.
    for name in ("httpx", "httpcore", "github"):
        logging.getLogger(name).setLevel(logging.INFO)
    return log_file
