"""Meta record encoding.

A meta record is a single JSON scalar stored next to its fragment: an ISO-8601
timestamp string, or ``null``. Decoding never raises; anything that is not a
point in time comes back as MetaDecodeFailure.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import TypeAdapter, ValidationError

from timedfragment.models.meta import MetaDecoded, MetaDecodeFailure, MetaDecodeResult

_expiry_adapter: TypeAdapter[datetime | None] = TypeAdapter(datetime | None)


def _as_aware(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def encode_meta(expires_at: datetime | None) -> bytes:
    if expires_at is not None:
        expires_at = _as_aware(expires_at)
    return _expiry_adapter.dump_json(expires_at)


def decode_meta(data: bytes | None) -> MetaDecodeResult:
    if data is None:
        return MetaDecodeFailure(reason="absent")
    try:
        expires_at = _expiry_adapter.validate_json(data)
    except ValidationError as exc:
        return MetaDecodeFailure(reason="invalid", detail=exc.errors()[0]["type"])
    if expires_at is not None:
        expires_at = _as_aware(expires_at)
    return MetaDecoded(expires_at=expires_at)
