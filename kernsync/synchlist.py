"""A list whose readers wait for items, safe to share between threads."""

from __future__ import annotations

from typing import Any, Callable

from kernsync.itemlist import ItemList
from kernsync.synch import Condition, Lock


class SynchList:
    """A FIFO list guarded in monitor style.

    Only one thread at a time touches the underlying list, and a thread
    calling ``remove`` on an empty list waits until an item is appended.
    """

    def __init__(self) -> None:
        self._list = ItemList()
        self._lock = Lock("list lock")
        self._list_empty = Condition("list empty cond")

    def append(self, item: Any) -> None:
        """Append ``item`` and wake a thread waiting in ``remove``, if any."""
        with self._lock:
            self._list.append(item)
            self._list_empty.signal(self._lock)

    def remove(self) -> Any:
        """Remove and return the first item, waiting while the list is empty."""
        with self._lock:
            while self._list.is_empty():
                self._list_empty.wait(self._lock)
            return self._list.remove()

    def mapcar(self, func: Callable[[Any], object]) -> None:
        """Apply ``func`` to every item while holding the list's lock."""
        with self._lock:
            self._list.mapcar(func)

    def __repr__(self) -> str:
        return f"SynchList({self._list!r})"