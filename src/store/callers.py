"""Table of OAuth2 callers (app registrations)."""

import threading
from typing import Iterable, Optional

from log import get_logger
from models.config import RegisteredCaller

logger = get_logger(__name__)


class CallerRegistry:
    """Registered callers keyed by client id.

    Registering an existing client id replaces the previous registration.
    Entries are immutable pydantic models, so a reader either sees the old
    or the new registration, never a half-written one.
    """

    def __init__(self, callers: Iterable[RegisteredCaller] = ()) -> None:
        """Initialize the registry with callers from configuration."""
        self._callers: dict[str, RegisteredCaller] = {
            caller.client_id: caller for caller in callers
        }
        self._lock = threading.Lock()

    def register(self, caller: RegisteredCaller) -> RegisteredCaller:
        """Store a caller registration."""
        with self._lock:
            replaced = caller.client_id in self._callers
            self._callers[caller.client_id] = caller
        logger.info(
            "%s app registration %s",
            "Replaced" if replaced else "Added",
            caller.client_id,
        )
        return caller

    def get(self, client_id: str) -> Optional[RegisteredCaller]:
        """Return caller registered under given client id, if any."""
        with self._lock:
            return self._callers.get(client_id)

    def all(self) -> list[RegisteredCaller]:
        """Return snapshot of all registrations."""
        with self._lock:
            return list(self._callers.values())
