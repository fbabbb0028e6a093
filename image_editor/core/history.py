from __future__ import annotations

import logging
from typing import Generic, Iterator, Optional, TypeVar

HISTORY_CAPACITY = 10

T = TypeVar("T")

logger = logging.getLogger(__name__)


class HistoryStack(Generic[T]):
    """
    Bounded stack of image snapshots, oldest at index 0.

    Pushing onto a full stack drops the oldest entry first, so the most recent
    ``capacity`` snapshots always survive. Used for both undo and redo history.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY, name: str = "history") -> None:
        if capacity < 1:
            raise ValueError("Kapazität muss mindestens 1 sein.")
        self.capacity = capacity
        self.name = name
        self._items: list[T] = []

    def push(self, item: T) -> Optional[T]:
        """Append ``item``; returns the evicted oldest entry when the stack was full."""
        evicted: Optional[T] = None
        if len(self._items) == self.capacity:
            evicted = self._items.pop(0)
            logger.debug("%s: ältester Eintrag verworfen (Kapazität %d)", self.name, self.capacity)
        self._items.append(item)
        return evicted

    def pop(self) -> Optional[T]:
        if not self._items:
            return None
        return self._items.pop()

    def peek(self) -> Optional[T]:
        if not self._items:
            return None
        return self._items[-1]

    def clear(self) -> None:
        self._items.clear()

    def snapshot(self) -> tuple[T, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"HistoryStack(name={self.name!r}, size={len(self._items)}, capacity={self.capacity})"


__all__ = ["HISTORY_CAPACITY", "HistoryStack"]
