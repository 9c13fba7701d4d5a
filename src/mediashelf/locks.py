"""Keyed mutual exclusion for per-entity serialization.

One lock per entity key (``asset:<id>``, ``folder:<id>``, ``tree:<user>``).
Every holder acquires keys in one global order: ``tree:`` keys first, then
the remaining keys sorted. A ``tree:`` key may be held while nested ``hold``
calls take entity keys, never the other way round.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


_TREE_PREFIX = "tree:"


@dataclass(slots=True)
class _Entry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class KeyedLock:
    """Map of lazily created locks, dropped once nobody waits on them."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    @contextmanager
    def hold(self, *keys: str | None) -> Iterator[tuple[str, ...]]:
        ordered = tuple(sorted({key for key in keys if key}, key=lock_order))
        entries = [self._checkout(key) for key in ordered]
        acquired: list[_Entry] = []
        try:
            for entry in entries:
                entry.lock.acquire()
                acquired.append(entry)
            yield ordered
        finally:
            for entry in reversed(acquired):
                entry.lock.release()
            for key in ordered:
                self._checkin(key)

    def active_keys(self) -> set[str]:
        with self._guard:
            return set(self._entries)

    def _checkout(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
            return entry

    def _checkin(self, key: str) -> None:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                return
            entry.users -= 1
            if entry.users <= 0:
                del self._entries[key]


def lock_order(key: str) -> tuple[int, str]:
    return (0 if key.startswith(_TREE_PREFIX) else 1, key)


def asset_key(asset_id: str) -> str:
    return f"asset:{asset_id}"


def folder_key(folder_id: str | None) -> str | None:
    return f"folder:{folder_id}" if folder_id else None


def tree_key(user_id: str) -> str:
    return f"{_TREE_PREFIX}{user_id}"


__all__ = ["KeyedLock", "asset_key", "folder_key", "lock_order", "tree_key"]
