"""Item contract and the pydantic-backed ``Record`` helper.

Any type can be stored as long as it provides value equality, a hash over its
full value, ``copy()``, ``to_bytes()`` and a ``from_bytes()`` classmethod.
"""

from __future__ import annotations

import hashlib
import json
from typing import Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict

from .errors import ItemContractError
from .schemas import BaseSchema


@runtime_checkable
class Item(Protocol):
    def __eq__(self, other: object) -> bool: ...

    def __hash__(self) -> int: ...

    def copy(self) -> "Item": ...

    def to_bytes(self) -> bytes: ...

    @classmethod
    def from_bytes(cls, data: bytes) -> "Item": ...


T = TypeVar("T", bound=Item)
TRecord = TypeVar("TRecord", bound="Record")


class Record(BaseSchema):
    """Immutable pydantic model satisfying the ``Item`` contract.

    Equality and hashing cover every field, so two records are the same item
    exactly when all their fields are equal. Fields must be hashable
    (use tuples and frozensets rather than lists and dicts).
    """

    model_config = ConfigDict(frozen=True)

    def copy(self: TRecord) -> TRecord:  # type: ignore[override]
        return self.model_copy()

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls: type[TRecord], data: bytes) -> TRecord:
        return cls.model_validate_json(data)


def schema_tag(item_type: type) -> str:
    """Return the identity of ``item_type`` as written into snapshots.

    Pydantic models also carry a fingerprint of their JSON schema, so adding,
    removing or retyping a field changes the tag.
    """
    tag = f"{item_type.__module__}.{item_type.__qualname__}"
    if isinstance(item_type, type) and issubclass(item_type, BaseModel):
        schema = json.dumps(item_type.model_json_schema(), sort_keys=True, separators=(",", ":"))
        fingerprint = hashlib.sha256(schema.encode("utf-8")).hexdigest()[:16]
        tag = f"{tag}#{fingerprint}"
    return tag


def ensure_item_contract(item: object) -> None:
    """Raise ``ItemContractError`` if ``item`` cannot live in a hash set."""
    try:
        _ = hash(item)
    except TypeError as exc:
        raise ItemContractError(f"Item is not hashable: {item!r}") from exc
    if not item == item:
        raise ItemContractError(f"Item is not equal to itself: {item!r}")
