"""A doubly ended list: items go in at the head and come out at the tail."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, Iterator, Optional, Tuple

log = logging.getLogger(__name__)

Dealloc = Optional[Callable[[Any], None]]
Equal = Callable[[Any, Any], bool]


class LinkedListError(Exception):
    """Base class for list errors."""


class InvalidParameterError(LinkedListError, ValueError):
    """Raised when a request carries an invalid argument."""


class ResourceUnavailableError(LinkedListError):
    """Raised when the list holds nothing to act on."""


class LinkedList:
    """List that adds at the head and removes from the tail (first in, first out).

    Each item may carry a deallocation callback, which is called on the item
    when the list is flushed or when the item is discarded without being
    handed back to the caller.
    """

    def __init__(self) -> None:
        # Left end is the head, right end is the tail.
        self._entries: Deque[Tuple[Any, Dealloc]] = deque()

    def add(self, item: Any, dealloc: Dealloc = None) -> None:
        """Add ``item`` at the head of the list."""
        if item is None:
            raise InvalidParameterError("item must not be None")
        log.debug("adding %r to list", item)
        self._entries.appendleft((item, dealloc))

    def remove(self) -> Any:
        """Remove and return the item at the tail, the oldest one added."""
        if not self._entries:
            raise ResourceUnavailableError("list is empty")
        item, _ = self._entries.pop()
        return item

    def is_empty(self) -> bool:
        """Return True when the list holds no items."""
        return not self._entries

    def flush(self) -> None:
        """Remove every item, calling each item's deallocation callback."""
        while self._entries:
            item, dealloc = self._entries.popleft()
            if dealloc is not None:
                dealloc(item)

    def _find(self, equal: Equal, key: Any) -> Optional[int]:
        if equal is None:
            raise InvalidParameterError("equal must be a callable")
        if not self._entries:
            raise ResourceUnavailableError("list is empty")
        for position, (item, _) in enumerate(self._entries):
            if equal(key, item):
                return position
        return None

    def search(self, equal: Equal, key: Any, remove: bool = False) -> Any:
        """Return the first item, from the head, for which ``equal(key, item)`` holds.

        Returns None when nothing matches. With ``remove`` the match is taken
        out of the list and handed back without being deallocated.
        """
        position = self._find(equal, key)
        if position is None:
            return None
        item, _ = self._entries[position]
        if remove:
            del self._entries[position]
        return item

    def discard(self, equal: Equal, key: Any) -> bool:
        """Remove the first matching item and deallocate it.

        Returns True when an item was removed.
        """
        position = self._find(equal, key)
        if position is None:
            return False
        item, dealloc = self._entries[position]
        del self._entries[position]
        if dealloc is not None:
            dealloc(item)
        return True

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        """Iterate from the head (newest) to the tail (oldest)."""
        return (item for item, _ in list(self._entries))