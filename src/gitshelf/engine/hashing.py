"""Deterministic cache-key derivation for gitshelf.

Cache keys are derived from object ids (commit, tree, blob oids) plus
optional disambiguators such as a page number or ref name. Because
object ids are content hashes, the same underlying objects always give
the same key. Nothing here looks at wall-clock time, request headers or
session state.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json(data: Any) -> bytes:
    """Serialize data to canonical JSON bytes.

    Uses sorted keys, compact separators, and UTF-8 encoding
    to ensure deterministic output.

    Args:
        data: Any JSON-serializable Python object (dict, list, str, int, etc.).

    Returns:
        UTF-8 encoded bytes of the canonical JSON string.
    """
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def cache_key(*parts: str | int) -> str:
    """Derive an opaque cache key from object ids and disambiguators.

    The parts are serialized as a JSON list before hashing, so
    ``cache_key("a/b")`` and ``cache_key("a", "b")`` never collide and
    ``cache_key(oid, 2)`` differs from ``cache_key(oid, "2")``.

    Args:
        *parts: Object ids and optional disambiguators (page number,
            ref name, view name). At least one part is required.

    Returns:
        Hex digest of SHA-256 over the canonical serialization.

    Raises:
        ValueError: If no parts are given.
        TypeError: If a part is not a str or int.
    """
    if not parts:
        raise ValueError("cache_key() needs at least one part")
    for part in parts:
        if isinstance(part, bool) or not isinstance(part, (str, int)):
            raise TypeError(f"cache key parts must be str or int, got {type(part).__name__}")
    return hashlib.sha256(canonical_json(list(parts))).hexdigest()
