from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_KEY_PREFIX = "views/"
_META_SUFFIX = "_meta"

FragmentName = str | Mapping[str, Any] | list[Any] | tuple[Any, ...]


def fragment_cache_key(name: FragmentName | Any) -> str:
    """Normalize a fragment name into the string key used by the store.

    Mappings are flattened as ``k=v`` pairs in key order so that
    ``{"action": "index", "controller": "posts"}`` and the same dict built in
    another order map to one key.
    """
    if isinstance(name, str):
        body = name
    elif isinstance(name, Mapping):
        body = "/".join(f"{k}={name[k]}" for k in sorted(name, key=str))
    elif isinstance(name, (list, tuple)):
        body = "/".join(str(part) for part in name)
    else:
        body = str(name)

    if not body:
        raise ValueError(f"Fragment name must not be empty: {name!r}")
    return _KEY_PREFIX + body


def meta_fragment_key(name: FragmentName | Any) -> str:
    return fragment_cache_key(name) + _META_SUFFIX
