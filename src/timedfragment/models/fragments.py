from __future__ import annotations

import codecs

from pydantic import BaseModel, ConfigDict, field_validator


class FragmentOptions(BaseModel):
    """Per-call options for the base cache-or-fill path."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    encoding: str = "utf-8"  # str content <-> stored bytes

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v!r}") from None
        return v
