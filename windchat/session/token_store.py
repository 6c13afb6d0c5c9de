"""Durable storage for the session token.

The token is the only piece of session state that outlives the process. It is
kept as JSON under a fixed key in ``credentials.json`` inside the client
config directory.
"""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

CREDENTIALS_FILE = "credentials.json"
TOKEN_KEY = "token"


class TokenStore:
    """Reads, writes and removes the persisted session token."""

    def __init__(self, config_dir: Path) -> None:
        self._dir = Path(config_dir)

    @property
    def path(self) -> Path:
        return self._dir / CREDENTIALS_FILE

    def load(self) -> str | None:
        """Return the persisted token, or None if nothing usable is stored."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable credentials file {self.path}: {e}")
            return None

        token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
        if not isinstance(token, str) or not token.strip():
            return None
        return token

    def save(self, token: str) -> None:
        """Persist the token atomically with owner-only permissions."""
        self._dir.mkdir(parents=True, exist_ok=True, mode=0o700)
        tmp = self._dir / f"{CREDENTIALS_FILE}.tmp"
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump({TOKEN_KEY: token}, f, indent=2)
        os.replace(tmp, self.path)

    def clear(self) -> None:
        """Remove the persisted token. Missing file is not an error."""
        self.path.unlink(missing_ok=True)
