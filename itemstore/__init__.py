"""
Item Store Module

Minimal embedded store of unique structured values.

This module provides:
- Uniqueness enforced by hashing each item's full value (no primary key)
- Linear-scan queries by projection or field name
- Checksummed binary snapshots written atomically to disk
- Optional autosave when a store's ``with`` block exits
- YAML-based store configuration
"""

__version__ = "0.1.0"

from .config import StoreConfig, load_config, save_config
from .database import Database
from .errors import (
    DuplicateItem,
    InvalidStoreName,
    ItemContractError,
    ItemNotFound,
    MalformedSnapshot,
    PersistError,
    PersistIOError,
    SchemaMismatch,
    StoreError,
    StoreFileNotFound,
)
from .items import Item, Record, schema_tag
from .unique import UniqueSet

__all__ = [
    "Database",
    "DuplicateItem",
    "InvalidStoreName",
    "Item",
    "ItemContractError",
    "ItemNotFound",
    "MalformedSnapshot",
    "PersistError",
    "PersistIOError",
    "Record",
    "SchemaMismatch",
    "StoreConfig",
    "StoreError",
    "StoreFileNotFound",
    "UniqueSet",
    "load_config",
    "save_config",
    "schema_tag",
]
