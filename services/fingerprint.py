"""Stable store keys for monitored URLs."""
from __future__ import annotations

import hashlib


def fingerprint(url: str) -> str:
    """Return the 40-character SHA-1 hex digest identifying ``url``.

    Two URLs that collide share one record; collisions are not detected.
    """
    return hashlib.sha1(url.encode("utf-8")).hexdigest()


__all__ = ["fingerprint"]
