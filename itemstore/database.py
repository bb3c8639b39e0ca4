"""Public entry point: a named, optionally self-saving store of unique items."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from types import TracebackType
from typing import Generic

from .codec import load_store, save_store
from .config import StoreConfig
from .items import T
from .paths import default_store_path, resolve_snapshot_path, validate_store_name
from .query import query, query_all
from .unique import UniqueSet

logger = logging.getLogger(__name__)


class Database(Generic[T]):
    """In-memory set of unique ``item_type`` values that can be dumped to disk.

    Items have no key; look them up with ``query_item`` and a projection.
    The store is not thread-safe and expects a single owner.

    Used as a context manager, a store created with ``autosave=True`` is
    dumped when the ``with`` block exits, on every exit path, if it changed.
    A failure of that implicit save is logged and never raised.
    """

    def __init__(
        self,
        name: str,
        item_type: type[T],
        save_path: str | Path | None = None,
        autosave: bool = False,
        data_dir: str | Path | None = None,
    ) -> None:
        self.name: str = validate_store_name(name)
        self.item_type: type[T] = item_type
        self.save_path: Path | None = Path(save_path) if save_path is not None else None
        self.autosave: bool = autosave
        self.data_dir: Path | None = Path(data_dir) if data_dir is not None else None
        self._items: UniqueSet[T] = UniqueSet(store_name=name)
        self._closed = False

    @classmethod
    def from_config(cls, config: StoreConfig, item_type: type[T]) -> "Database[T]":
        return cls(
            name=config.name,
            item_type=item_type,
            save_path=config.save_path,
            autosave=config.autosave,
            data_dir=config.data_dir,
        )

    @classmethod
    def load(
        cls,
        name_or_path: str | Path,
        item_type: type[T],
        autosave: bool = False,
        data_dir: str | Path | None = None,
    ) -> "Database[T]":
        """Rebuild a store from its snapshot.

        ``name_or_path`` is a store name (resolved to ``<data_dir>/<name>.db``)
        unless it is a ``Path``, ends in ``.db`` or contains a separator. A bare
        file name like ``"users.db"`` is looked up in ``data_dir`` when given.
        The returned store saves back to the file it was read from.
        """
        path = resolve_snapshot_path(name_or_path, data_dir)
        name, items = load_store(path, item_type)
        database = cls(name, item_type, save_path=path, autosave=autosave, data_dir=data_dir)
        database._items = items
        return database

    @property
    def path(self) -> Path:
        """Where ``dump()`` writes: the explicit save path or the default one."""
        if self.save_path is not None:
            return self.save_path
        return default_store_path(self.name, self.data_dir)

    @property
    def dirty(self) -> bool:
        return self._items.dirty

    def add_item(self, item: T) -> None:
        """Add ``item``; raises ``DuplicateItem`` if an equal item is stored."""
        self._items.add(item)

    def remove_item(self, item: T) -> None:
        """Remove the item equal to ``item``; raises ``ItemNotFound`` if absent."""
        self._items.remove(item)

    def contains(self, item: T) -> bool:
        return self._items.contains(item)

    def query_item(self, extract: Callable[[T], object] | str, target: object) -> T | None:
        """Return a stored item whose projection equals ``target``, or ``None``.

        ``extract`` is a callable or a field name. If several items match,
        which one is returned is unspecified. The result is the stored item
        itself; treat it as read-only and do not keep it across mutations.
        """
        return query(self._items, extract, target)

    def query_items(self, extract: Callable[[T], object] | str, target: object) -> list[T]:
        return query_all(self._items, extract, target)

    def is_empty(self) -> bool:
        return self._items.is_empty()

    def dump(self) -> Path:
        """Write the whole store to ``self.path``; persistence errors propagate."""
        path = save_store(self.path, self.name, self.item_type, self._items)
        self._items.mark_clean()
        return path

    def close(self) -> None:
        """Run the autosave once; later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        if not (self.autosave and self.dirty):
            return
        try:
            _ = self.dump()
        except Exception:
            logger.exception("Autosave of store %r to %s failed", self.name, self.path)

    def __enter__(self) -> "Database[T]":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __contains__(self, item: object) -> bool:
        return self._items.contains(item)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return (
            f"Database(name={self.name!r}, item_type={self.item_type.__name__}, "
            f"items={len(self._items)}, autosave={self.autosave})"
        )
