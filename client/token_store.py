"""Persistent storage for the client's bearer token."""

import json
import logging
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)


class TokenStore:
    """
    Keeps the current token in a small JSON file so it survives restarts.

    A missing or unreadable file reads as "no token".
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self) -> Optional[str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable token file %s", self.path)
            return None

        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}), encoding="utf-8")
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
