"""Deterministic slug helpers for filesystem-safe output basenames.

Responsibilities:
- Reduce free-form ASCII text to lowercase alphanumeric words joined by `_`.
- Keep slug length bounded and the operation idempotent.
"""

from __future__ import annotations

import re

DEFAULT_SLUG_LENGTH = 200

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify(value: str, max_length: int = DEFAULT_SLUG_LENGTH) -> str:
    """Return a lowercase `[a-z0-9_]` basename of at most `max_length` characters."""

    lowered = value.lower()
    collapsed = _NON_ALNUM_RUN.sub("_", lowered)
    trimmed = collapsed.strip("_")
    return trimmed[:max_length].rstrip("_")
