"""
Admin Session Flag

Persisted "admin is logged in" flag for the admin dashboard. Boolean
contract only: is_authenticated / login / logout. The flag survives a
restart and is read when the application starts.

File access is guarded with a file lock so API workers sharing the
data directory do not interleave writes.

Version: 1.0.0
"""

import json
import logging
import secrets
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from storefront.core.config import get_settings

logger = logging.getLogger(__name__)


class AdminSessionStore:
    """File-backed admin login flag."""

    def __init__(
        self,
        path: Path,
        username: str = "admin",
        password: Optional[str] = None,
        lock_timeout: int = 10,
    ):
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self.username = username
        self.password = password
        self.lock_timeout = lock_timeout

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {self.path.parent}")

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Error reading {self.path}: {e}")
            return {}

    def _write(self, authenticated: bool) -> None:
        self._ensure_data_dir()
        state = {
            "authenticated": authenticated,
            "updated_at": datetime.now().isoformat(),
        }
        try:
            with FileLock(str(self.lock_path), timeout=self.lock_timeout):
                self.path.write_text(json.dumps(state), encoding="utf-8")
        except Timeout:
            logger.error(f"Lock timeout ({self.lock_timeout}s) writing {self.path}")
            raise

    def is_authenticated(self) -> bool:
        return bool(self._read().get("authenticated", False))

    def check_credentials(self, username: str, password: str) -> bool:
        """Compare against the configured admin credentials."""
        if not self.password:
            logger.warning("Admin login attempted but ADMIN_PASSWORD is not set")
            return False
        return (
            secrets.compare_digest(username, self.username)
            and secrets.compare_digest(password, self.password)
        )

    def login(self, username: str, password: str) -> bool:
        """Set the flag if the credentials match. Returns the new state."""
        if not self.check_credentials(username, password):
            logger.warning(f"Admin login rejected for '{username}'")
            return False
        self._write(True)
        logger.info("Admin logged in")
        return True

    def logout(self) -> None:
        self._write(False)
        logger.info("Admin logged out")


@lru_cache()
def get_admin_session_store() -> AdminSessionStore:
    """Get the admin session store for the configured data directory."""
    settings = get_settings()
    return AdminSessionStore(
        path=settings.admin_session_path,
        username=settings.admin_username,
        password=settings.admin_password,
        lock_timeout=settings.admin_session_lock_timeout,
    )
