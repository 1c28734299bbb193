"""Turning issues into PDF files."""

from .html import IssueHTMLGenerator
from .pdf import IssuePdfRenderer
from .queue import RenderOutcome, RenderQueue, RenderReport

__all__ = [
    "IssueHTMLGenerator",
    "IssuePdfRenderer",
    "RenderOutcome",
    "RenderQueue",
    "RenderReport",
]
