"""
Admin gate: a single shared secret guarding every mutating endpoint.
"""

from __future__ import annotations

import hmac
from typing import Optional


class AdminGate:
    """Compares a caller-supplied secret with the configured admin secret."""

    def __init__(self, secret: str):
        self._secret = secret or ""

    def authorize(self, supplied: Optional[str]) -> bool:
        if not supplied or not self._secret:
            return False
        return hmac.compare_digest(
            supplied.encode("utf-8"), self._secret.encode("utf-8")
        )
