"""
Vault session management - holds the CLI unlock token in memory.

The token is set on unlock and cleared on lock. It is never written to disk
and never logged; restarting the process leaves the session locked.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class VaultSession:
    """Holds the password-manager session token in memory. Empty means locked."""

    _token: str = field(default="", repr=False)
    _unlocked_at: Optional[datetime] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def is_unlocked(self) -> bool:
        """Check if the session currently holds a token."""
        return self._token != ""

    @property
    def unlocked_at(self) -> Optional[datetime]:
        """When the session was last unlocked."""
        return self._unlocked_at

    def current_token(self) -> str:
        """The held token, possibly empty."""
        return self._token

    def unlock(self, token: str) -> None:
        """Replace the held token. No validation; an empty token stays locked."""
        with self._lock:
            self._token = token or ""
            self._unlocked_at = datetime.now() if self._token else None

    def lock(self) -> None:
        """Clear the token from memory."""
        with self._lock:
            self._token = ""
            self._unlocked_at = None
