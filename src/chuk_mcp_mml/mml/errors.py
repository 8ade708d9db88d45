"""
MML compilation errors.
"""

from __future__ import annotations

from chuk_mcp_mml.constants import ErrorKind


class MMLError(ValueError):
    """
    Raised when a notation string cannot be compiled.

    Carries the error kind and the raw offending token (empty for
    MML_STRING, since no token matched).
    """

    def __init__(self, kind: ErrorKind, token: str, message: str | None = None) -> None:
        self.kind = kind
        self.token = token
        super().__init__(message or f"{kind.value}: {token!r}")
