"""
Identifier helpers.

Two kinds of ids exist in the engine:
- random ids for transient records (scan events, clues)
- deterministic ids for records that double as storage upsert keys
  (a discovery per account/spot/trail, a rating per account/spot)
"""

from __future__ import annotations

import uuid
from hashlib import sha256

_SEPARATOR = ":::"


def new_id() -> str:
    return uuid.uuid4().hex


def deterministic_id(*parts: str) -> str:
    """Return a 32-char hex id derived only from `parts`.

    Empty parts are ignored and the rest are sorted, so argument order does not
    matter: `deterministic_id("a", "b") == deterministic_id("b", "a")`.
    """
    if not parts:
        raise ValueError("deterministic_id requires at least one part")
    cleaned = sorted(p for p in parts if p)
    if not cleaned:
        raise ValueError("deterministic_id requires at least one non-empty part")
    return sha256(_SEPARATOR.join(cleaned).encode("utf-8")).hexdigest()[:32]
