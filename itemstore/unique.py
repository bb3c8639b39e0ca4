"""Hash set of items enforcing one copy per distinct value."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic

from .errors import DuplicateItem, ItemContractError, ItemNotFound
from .items import T, ensure_item_contract


class UniqueSet(Generic[T]):
    """Unordered set of items keyed by their full value.

    There is no primary key: two items are the same exactly when they compare
    equal, and the hash is taken over the whole item.
    """

    def __init__(self, store_name: str | None = None) -> None:
        self.store_name = store_name
        self._items: set[T] = set()
        self._dirty = False

    @property
    def dirty(self) -> bool:
        """True when the set changed since the last ``mark_clean()``."""
        return self._dirty

    def mark_clean(self) -> None:
        self._dirty = False

    def add(self, item: T) -> None:
        ensure_item_contract(item)
        if item in self._items:
            raise DuplicateItem(item, self.store_name)
        stored = item.copy()
        self._items.add(stored)
        if stored not in self._items:
            # The copy is unreachable by hash, so drop it by identity.
            self._items = {kept for kept in self._items if kept is not stored}
            raise ItemContractError(f"Stored copy of {item!r} is not retrievable by value")
        self._dirty = True

    def remove(self, item: T) -> None:
        try:
            self._items.remove(item)
        except KeyError:
            raise ItemNotFound(item, self.store_name) from None
        except TypeError as exc:
            raise ItemNotFound(item, self.store_name) from exc
        self._dirty = True

    def contains(self, item: object) -> bool:
        try:
            return item in self._items
        except TypeError:
            return False

    def is_empty(self) -> bool:
        return not self._items

    def __contains__(self, item: object) -> bool:
        return self.contains(item)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"UniqueSet(store_name={self.store_name!r}, size={len(self._items)})"
