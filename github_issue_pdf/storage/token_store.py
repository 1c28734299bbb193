"""Persisting the GitHub access token between runs."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class TokenStore:
    """Reads and writes ``{"id": "<token>"}`` in a local JSON file."""

    def __init__(self, path: str | Path = "data/conf/token.json"):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> str | None:
        """Return the stored token, or None if no token has been stored.

        Raises:
            ValueError: If the file exists but does not hold a token
        """
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Token file {self.path} is not valid JSON: {e}")

        token = data.get("id") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise ValueError(f"Token file {self.path} does not contain a token")
        return token

    def save(self, token: str) -> Path:
        """Store the token, creating parent directories as needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"id": token}, f)
        logger.info("Stored access token at %s", self.path)
        return self.path
