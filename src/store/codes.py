"""Table of issued authorization codes."""

import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import constants
from log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthorizationCode:
    """Single-use code linking a completed login to a token exchange."""

    code: str
    caller_id: str
    redirect_target: str
    scope: str
    subject_id: str
    issued_at: datetime


def new_code_value() -> str:
    """Return fresh unguessable code value."""
    return constants.AUTHORIZATION_CODE_PREFIX + secrets.token_urlsafe(24)


class AuthorizationCodeTable:
    """Issued codes, each one redeemable exactly once.

    Codes have no expiry: an abandoned login leaves one inert entry behind
    for the lifetime of the process.
    """

    def __init__(self) -> None:
        """Initialize empty table."""
        self._codes: dict[str, AuthorizationCode] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Return number of codes not redeemed yet."""
        with self._lock:
            return len(self._codes)

    def issue(
        self, caller_id: str, redirect_target: str, scope: str, subject_id: str
    ) -> AuthorizationCode:
        """Create and store a new code.

        Returns:
            AuthorizationCode: The stored code.
        """
        code = AuthorizationCode(
            code=new_code_value(),
            caller_id=caller_id,
            redirect_target=redirect_target,
            scope=scope,
            subject_id=subject_id,
            issued_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._codes[code.code] = code
        logger.debug("Issued authorization code for caller %s", caller_id)
        return code

    def pop(self, value: str) -> Optional[AuthorizationCode]:
        """Remove and return the code.

        Lookup and removal happen under one lock acquisition, so of two
        concurrent attempts to redeem the same code only one gets it.

        Returns:
            Optional[AuthorizationCode]: The code or None when it is unknown
            or has been redeemed already.
        """
        with self._lock:
            return self._codes.pop(value, None)
