"""
Placeholder login and role checks.

Two hardcoded accounts exist (``admin``/``admin123`` and
``officer``/``officer123``).  The token is a readable placeholder, not a
signed credential, and nothing expires.  Replace this module wholesale before
exposing the service to real users.

The logged-in user is mirrored to one JSON file so it survives a restart,
the way the browser build kept it in local storage under a single key.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path

from housing.errors import AuthenticationError
from utils.config import KnownValues

logger = logging.getLogger(__name__)

# username (lower-case) -> (password, role)
_DUMMY_ACCOUNTS: dict[str, tuple[str, str]] = {
    "admin": ("admin123", "admin"),
    "officer": ("officer123", "officer"),
}


@dataclass(frozen=True)
class User:
    """The authenticated user as stored in the session file."""

    username: str
    role: str
    token: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def make_token(role: str, now_ms: int | None = None) -> str:
    """Build the placeholder token ``dummy-jwt-token-<role>-<epoch ms>``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"dummy-jwt-token-{role}-{now_ms}"


class SessionContext:
    """Holds the current user and mirrors it to *storage_path*.

    With ``storage_path=None`` the session lives in memory only.
    """

    def __init__(self, storage_path: Path | None = None) -> None:
        self._storage_path = storage_path
        self._user: User | None = self._restore()

    # ── storage ───────────────────────────────────────────────────────────

    def _restore(self) -> User | None:
        if self._storage_path is None or not self._storage_path.exists():
            return None
        try:
            data = json.loads(self._storage_path.read_text(encoding="utf-8"))
            return User(
                username=str(data["username"]),
                role=str(data["role"]),
                token=str(data["token"]),
            )
        except (OSError, ValueError, KeyError, TypeError):
            logger.error("Failed to parse stored session at %s; discarding it",
                         self._storage_path, exc_info=True)
            self._clear_storage()
            return None

    def _persist(self) -> None:
        if self._storage_path is None:
            return
        self._storage_path.parent.mkdir(parents=True, exist_ok=True)
        self._storage_path.write_text(json.dumps(self._user.to_dict()), encoding="utf-8")

    def _clear_storage(self) -> None:
        if self._storage_path is not None:
            self._storage_path.unlink(missing_ok=True)

    # ── public API ────────────────────────────────────────────────────────

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def can_manage(self) -> bool:
        """True when the user may create, edit or delete houses."""
        return self._user is not None and KnownValues.can_manage(self._user.role)

    def has_role(self, *roles: str) -> bool:
        return self._user is not None and self._user.role in roles

    def check_token(self, token: str | None) -> bool:
        """True if *token* belongs to the current session."""
        return bool(token) and self._user is not None and token == self._user.token

    def login(self, username: str, password: str) -> User:
        """Match against the dummy accounts and start a session.

        Raises:
            AuthenticationError: On empty or unknown credentials.
        """
        if not username or not password:
            raise AuthenticationError("Please enter both username and password")
        account = _DUMMY_ACCOUNTS.get(username.lower())
        if account is None or account[0] != password:
            logger.warning("login rejected username=%s", username)
            raise AuthenticationError("Invalid username or password")

        role = account[1]
        self._user = User(username=username, role=role, token=make_token(role))
        self._persist()
        logger.info("login username=%s role=%s", username, role)
        return self._user

    def logout(self) -> None:
        """Forget the current user and remove the stored copy."""
        if self._user is not None:
            logger.info("logout username=%s", self._user.username)
        self._user = None
        self._clear_storage()
