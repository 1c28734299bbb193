"""Render GitHub issues to standalone PDF files."""

__version__ = "0.1.0"
