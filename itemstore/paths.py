"""Default snapshot path resolution.

A store named ``users`` lives at ``<data_dir>/users.db``. Names are restricted
so that two differently named stores never map to the same file. Names are
case-sensitive: on a case-insensitive filesystem ``users`` and ``Users`` share
one file, so pick names that differ by more than case there.
"""

from __future__ import annotations

import os
from pathlib import Path

from .errors import InvalidStoreName

SNAPSHOT_SUFFIX = ".db"


def validate_store_name(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidStoreName(str(name), "name must be a non-empty string")
    if name.startswith("."):
        raise InvalidStoreName(name, "name must not start with '.'")
    if name.endswith(SNAPSHOT_SUFFIX):
        raise InvalidStoreName(name, f"name must not end with {SNAPSHOT_SUFFIX!r}")
    separators = {"/", "\\", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators):
        raise InvalidStoreName(name, "name must not contain path separators")
    if "\x00" in name:
        raise InvalidStoreName(name, "name must not contain NUL bytes")
    return name


def default_store_path(name: str, data_dir: str | Path | None = None) -> Path:
    """Map a store name to ``<data_dir>/<name>.db`` (cwd when no data_dir)."""
    validate_store_name(name)
    base = Path(data_dir) if data_dir is not None else Path.cwd()
    return base / f"{name}{SNAPSHOT_SUFFIX}"


def _is_bare_file_name(name: str) -> bool:
    return name.endswith(SNAPSHOT_SUFFIX) and not any(sep in name for sep in ("/", "\\", os.sep))


def looks_like_path(name_or_path: str | Path) -> bool:
    """True when the argument should be read as a file path, not a store name."""
    if isinstance(name_or_path, Path):
        return True
    if name_or_path.endswith(SNAPSHOT_SUFFIX):
        return True
    return any(sep in name_or_path for sep in ("/", "\\", os.sep))


def resolve_snapshot_path(name_or_path: str | Path, data_dir: str | Path | None = None) -> Path:
    """Resolve a store name or snapshot path to the file to read.

    A bare file name such as ``"users.db"`` is looked up in ``data_dir`` when
    one is given. Paths with a directory part, and ``Path`` objects, are used
    as they are.
    """
    if isinstance(name_or_path, str) and data_dir is not None and _is_bare_file_name(name_or_path):
        return Path(data_dir) / name_or_path
    if looks_like_path(name_or_path):
        return Path(name_or_path)
    return default_store_path(str(name_or_path), data_dir)
