"""Exception hierarchy for the item store."""

from __future__ import annotations

from pathlib import Path


class StoreError(Exception):
    """Base class for every error raised by itemstore."""


class DuplicateItem(StoreError):
    """An item equal to the one being added is already stored."""

    def __init__(self, item: object, store_name: str | None = None) -> None:
        self.item = item
        self.store_name = store_name
        where = f" in store '{store_name}'" if store_name else ""
        super().__init__(f"Duplicate item{where}: {item!r}")


class ItemNotFound(StoreError):
    """No stored item is equal to the one being removed."""

    def __init__(self, item: object, store_name: str | None = None) -> None:
        self.item = item
        self.store_name = store_name
        where = f" in store '{store_name}'" if store_name else ""
        super().__init__(f"Item not found{where}: {item!r}")


class InvalidStoreName(StoreError, ValueError):
    """The store name cannot be mapped to a file name."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Invalid store name {name!r}: {reason}")


class ItemContractError(StoreError, TypeError):
    """An item breaks the hash/equality contract (caller bug)."""


class PersistError(StoreError):
    """Saving or loading a snapshot failed."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(f"{message} ({self.path})" if self.path is not None else message)


class StoreFileNotFound(PersistError):
    """No snapshot file exists at the resolved path."""


class MalformedSnapshot(PersistError):
    """The snapshot bytes are truncated, corrupt or not a snapshot at all."""


class SchemaMismatch(PersistError):
    """The snapshot is intact but was written for an incompatible item type."""


class PersistIOError(PersistError):
    """The operating system refused to read or write the snapshot file."""
