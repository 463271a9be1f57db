"""Shared-secret authorization for translation writes.

The check runs ahead of every mutation, before the store is touched, so a
wrong secret yields Forbidden whether or not the target record exists.
"""

from __future__ import annotations

import hmac

import structlog

from verbario.core.errors import Forbidden

logger = structlog.get_logger(__name__)


class SecretGuard:
    """Authorizes writes by comparing a supplied secret to the configured one."""

    def __init__(self, configured_secret: str | None):
        self._secret = (configured_secret or "").strip()

    def is_authorized(self, supplied_secret: object) -> bool:
        supplied = str(supplied_secret).strip() if supplied_secret is not None else ""
        if not supplied or not self._secret:
            return False
        return hmac.compare_digest(supplied.encode("utf-8"), self._secret.encode("utf-8"))

    def authorize(self, supplied_secret: object, action: str = "write") -> None:
        """Raise Forbidden unless supplied_secret matches.

        Args:
            supplied_secret: Secret sent by the caller (may be None)
            action: Name of the guarded action, for logging

        Raises:
            Forbidden: If the secret is empty or does not match
        """
        if not self.is_authorized(supplied_secret):
            logger.warning("authorization.denied", action=action)
            raise Forbidden()
