"""Time helpers shared by services and repositories."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Return naive UTC now; the store keeps naive UTC timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


__all__ = ["Clock", "utcnow"]
