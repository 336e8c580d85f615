"""Error types raised by timedfragment.

Only the fragment stores raise these. Meta decode problems never surface as
exceptions (they are reported as a failed decode and treated as expired), and
the expiry layer lets store errors propagate to the caller unchanged.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    STORE_READ_FAILED = "STORE_READ_FAILED"
    STORE_WRITE_FAILED = "STORE_WRITE_FAILED"
    STORE_DELETE_FAILED = "STORE_DELETE_FAILED"


class TimedFragmentError(Exception):
    """Structured error carrying a machine-readable code."""

    def __init__(self, code: ErrorCode, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.key = key

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.key is not None:
            data["key"] = self.key
        return data
