"""Client-side session: who is logged in, and with which token"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ClientSession:
    """
    Token and user for one client

    Lifecycle: ``load()`` once at startup, ``save()`` after login,
    ``clear()`` on logout. With no ``path`` the session lives in memory only.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and (self.user or {}).get("role") == "admin"

    def load(self) -> "ClientSession":
        """Restore a saved session; a corrupt file is discarded"""
        if not self.path or not self.path.exists():
            return self
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            token, user = data["token"], data["user"]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable session file {self.path}: {e}")
            self.clear()
            return self
        if token and isinstance(user, dict):
            self.token, self.user = token, user
        return self

    def save(self, token: str, user: Dict[str, Any]) -> None:
        self.token, self.user = token, user
        if self.path:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"token": token, "user": user}), encoding="utf-8")

    def clear(self) -> None:
        self.token, self.user = None, None
        if self.path:
            self.path.unlink(missing_ok=True)

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}
