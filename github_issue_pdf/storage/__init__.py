"""Local storage for rendered PDFs and the access token."""

from .manager import OutputManager
from .token_store import TokenStore

__all__ = ["OutputManager", "TokenStore"]
