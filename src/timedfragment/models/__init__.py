from __future__ import annotations

from timedfragment.models.fragments import FragmentOptions
from timedfragment.models.meta import MetaDecoded, MetaDecodeFailure, MetaDecodeResult

__all__ = [
    # fragments
    "FragmentOptions",
    # meta
    "MetaDecoded",
    "MetaDecodeFailure",
    "MetaDecodeResult",
]
