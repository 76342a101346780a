"""An ordered collection of arbitrary items, optionally kept sorted by key."""

from __future__ import annotations

from bisect import bisect_right
from typing import Any, Callable, Iterator


class ItemList:
    """A queue of items, each carrying an integer sort key.

    ``append`` and ``prepend`` give their item the key 0. ``sorted_insert``
    places an item after every existing item whose key is less than or
    equal to its own. The two kinds of insertion can be mixed, though the
    sorted order is only kept if ``sorted_insert`` alone is used.

    Mutual exclusion is the caller's job; see ``SynchList`` for a
    synchronized variant.
    """

    def __init__(self) -> None:
        self._keys: list[int] = []
        self._items: list[Any] = []

    def prepend(self, item: Any) -> None:
        """Put ``item`` at the front of the list."""
        self._keys.insert(0, 0)
        self._items.insert(0, item)

    def append(self, item: Any) -> None:
        """Put ``item`` at the end of the list."""
        self._keys.append(0)
        self._items.append(item)

    def remove(self) -> Any:
        """Take the first item off the front of the list.

        Raises IndexError if the list is empty.
        """
        item, _ = self.sorted_remove()
        return item

    def mapcar(self, func: Callable[[Any], object]) -> None:
        """Apply ``func`` to every item, front to back."""
        for item in self._items:
            func(item)

    def is_empty(self) -> bool:
        """Return True if the list holds no items."""
        return not self._items

    def sorted_insert(self, item: Any, sort_key: int) -> None:
        """Insert ``item`` so that keys stay in increasing order.

        Items with equal keys keep their insertion order.
        """
        index = bisect_right(self._keys, sort_key)
        self._keys.insert(index, sort_key)
        self._items.insert(index, item)

    def sorted_remove(self) -> tuple[Any, int]:
        """Remove the first item and return it together with its key.

        Raises IndexError if the list is empty.
        """
        if not self._items:
            raise IndexError("remove from an empty list")
        key = self._keys.pop(0)
        item = self._items.pop(0)
        return item, key

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"ItemList({self._items!r})"