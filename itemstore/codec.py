"""Binary snapshot format for a store.

Layout (integers big-endian)::

    magic      b"ITEMSTORE"
    version    u16
    name       u32 length + UTF-8
    type tag   u32 length + UTF-8
    count      u32
    items      count x (u32 length + item bytes)
    digest     SHA-256 of everything above (32 bytes)

Snapshots are always written whole, through a temporary file that is renamed
over the target, so the canonical path never holds a partial write.
"""

from __future__ import annotations

import hashlib
import logging
import os
import struct
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic

from .errors import (
    DuplicateItem,
    InvalidStoreName,
    MalformedSnapshot,
    PersistIOError,
    SchemaMismatch,
    StoreFileNotFound,
)
from .items import T, Item, schema_tag
from .paths import validate_store_name
from .unique import UniqueSet

logger = logging.getLogger(__name__)

MAGIC = b"ITEMSTORE"
FORMAT_VERSION = 1
DIGEST_SIZE = hashlib.sha256().digest_size

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")


@dataclass
class Snapshot(Generic[T]):
    name: str
    type_tag: str
    items: list[T] = field(default_factory=list)


class _Reader:
    def __init__(self, data: bytes, path: Path | None) -> None:
        self._data = data
        self._offset = 0
        self._path = path

    def take(self, size: int) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise MalformedSnapshot(
                f"Snapshot truncated: wanted {size} bytes at offset {self._offset}", self._path
            )
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def u16(self) -> int:
        return _U16.unpack(self.take(_U16.size))[0]

    def u32(self) -> int:
        return _U32.unpack(self.take(_U32.size))[0]

    def blob(self) -> bytes:
        return self.take(self.u32())

    def text(self, field_name: str) -> str:
        raw = self.blob()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedSnapshot(f"Snapshot {field_name} is not valid UTF-8", self._path) from exc

    def at_end(self) -> bool:
        return self._offset == len(self._data)


def _blob(payload: bytes) -> bytes:
    return _U32.pack(len(payload)) + payload


def encode_snapshot(name: str, type_tag: str, items: Iterable[Item]) -> bytes:
    encoded = [item.to_bytes() for item in items]
    parts = [
        MAGIC,
        _U16.pack(FORMAT_VERSION),
        _blob(name.encode("utf-8")),
        _blob(type_tag.encode("utf-8")),
        _U32.pack(len(encoded)),
    ]
    parts.extend(_blob(payload) for payload in encoded)
    body = b"".join(parts)
    return body + hashlib.sha256(body).digest()


def decode_snapshot(data: bytes, item_type: type[T], path: Path | None = None) -> Snapshot[T]:
    """Decode snapshot bytes written for ``item_type``.

    Raises:
        MalformedSnapshot: bad digest, bad magic, truncation or trailing bytes
        SchemaMismatch: unknown format version, different item type, or item
            bytes the current ``item_type`` cannot decode
    """
    if len(data) < len(MAGIC) + _U16.size + DIGEST_SIZE:
        raise MalformedSnapshot("Snapshot is too short", path)
    body, digest = data[:-DIGEST_SIZE], data[-DIGEST_SIZE:]
    if hashlib.sha256(body).digest() != digest:
        raise MalformedSnapshot("Snapshot checksum mismatch", path)

    reader = _Reader(body, path)
    if reader.take(len(MAGIC)) != MAGIC:
        raise MalformedSnapshot("Not an itemstore snapshot", path)
    version = reader.u16()
    if version != FORMAT_VERSION:
        raise SchemaMismatch(f"Unsupported snapshot format version {version}", path)

    name = reader.text("name")
    stored_tag = reader.text("type tag")
    expected_tag = schema_tag(item_type)
    if stored_tag != expected_tag:
        raise SchemaMismatch(
            f"Snapshot holds {stored_tag!r} items, expected {expected_tag!r}", path
        )

    count = reader.u32()
    payloads = [reader.blob() for _ in range(count)]
    if not reader.at_end():
        raise MalformedSnapshot("Unexpected trailing bytes after items", path)

    items: list[T] = []
    for index, payload in enumerate(payloads):
        try:
            items.append(item_type.from_bytes(payload))
        except Exception as exc:
            # The digest matched, so the bytes are intact and the type is at fault.
            raise SchemaMismatch(f"Cannot decode item {index} as {expected_tag}: {exc}", path) from exc
    return Snapshot(name=name, type_tag=stored_tag, items=items)


def write_atomic(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            _ = handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def save_store(path: str | Path, name: str, item_type: type[T], items: Iterable[T]) -> Path:
    """Encode a store and write it to ``path``; returns the path written."""
    path = Path(path)
    data = encode_snapshot(name, schema_tag(item_type), items)
    try:
        write_atomic(path, data)
    except OSError as exc:
        raise PersistIOError(f"Failed to write snapshot: {exc}", path) from exc
    logger.debug("Saved store %r (%d bytes) to %s", name, len(data), path)
    return path


def read_snapshot(path: str | Path, item_type: type[T]) -> Snapshot[T]:
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise StoreFileNotFound("Snapshot file not found", path) from exc
    except OSError as exc:
        raise PersistIOError(f"Failed to read snapshot: {exc}", path) from exc
    return decode_snapshot(data, item_type, path)


def load_store(path: str | Path, item_type: type[T]) -> tuple[str, UniqueSet[T]]:
    """Read a snapshot and rebuild its items into a fresh ``UniqueSet``.

    Items are re-added one by one. A value that appears twice (only possible
    in a hand-edited or forged file) is dropped with a warning.
    """
    snapshot = read_snapshot(path, item_type)
    try:
        _ = validate_store_name(snapshot.name)
    except InvalidStoreName as exc:
        raise MalformedSnapshot(f"Snapshot holds an unusable store name: {exc}", Path(path)) from exc
    items: UniqueSet[T] = UniqueSet(store_name=snapshot.name)
    for item in snapshot.items:
        try:
            items.add(item)
        except DuplicateItem:
            logger.warning("Dropping duplicate item in snapshot %s: %r", path, item)
    items.mark_clean()
    logger.debug("Loaded store %r with %d items from %s", snapshot.name, len(items), path)
    return snapshot.name, items
