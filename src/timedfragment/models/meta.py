from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class MetaDecoded(BaseModel):
    """A meta record that decoded cleanly. ``expires_at`` may still be None."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    expires_at: datetime | None


class MetaDecodeFailure(BaseModel):
    """No usable meta record: absent, or bytes that are not a timestamp."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    reason: Literal["absent", "invalid"]
    detail: str = ""


MetaDecodeResult = MetaDecoded | MetaDecodeFailure
