"""Tests for hash-based uniqueness."""

import pytest

from itemstore.errors import DuplicateItem, ItemContractError, ItemNotFound
from itemstore.items import Record
from itemstore.unique import UniqueSet


class Person(Record):
    name: str
    age: int


class Pet(Record):
    name: str
    age: int


class TestUniqueSet:
    def test_distinct_items_are_both_stored(self) -> None:
        items: UniqueSet[Person] = UniqueSet()
        a = Person(name="John", age=16)
        b = Person(name="John", age=17)
        items.add(a)
        items.add(b)
        assert len(items) == 2
        assert items.contains(a) and items.contains(b)

    def test_duplicate_is_rejected_and_size_unchanged(self) -> None:
        items: UniqueSet[Person] = UniqueSet(store_name="people")
        items.add(Person(name="Xander", age=33))
        with pytest.raises(DuplicateItem) as excinfo:
            items.add(Person(name="Xander", age=33))
        assert len(items) == 1
        assert excinfo.value.store_name == "people"
        assert "people" in str(excinfo.value)

    def test_remove_after_add(self) -> None:
        items: UniqueSet[Person] = UniqueSet()
        person = Person(name="Xander", age=33)
        items.add(person)
        items.remove(Person(name="Xander", age=33))
        assert not items.contains(person)
        assert items.is_empty()

    def test_remove_from_empty_raises(self) -> None:
        items: UniqueSet[Person] = UniqueSet()
        with pytest.raises(ItemNotFound):
            items.remove(Person(name="nobody", age=0))

    def test_same_fields_on_different_types_are_not_confused(self) -> None:
        items: UniqueSet[Record] = UniqueSet()
        items.add(Person(name="Rex", age=3))
        items.add(Pet(name="Rex", age=3))
        assert len(items) == 2

    def test_dirty_tracking(self) -> None:
        items: UniqueSet[Person] = UniqueSet()
        assert not items.dirty
        items.add(Person(name="a", age=1))
        assert items.dirty
        items.mark_clean()
        assert not items.dirty
        items.remove(Person(name="a", age=1))
        assert items.dirty

    def test_failed_mutations_do_not_mark_dirty(self) -> None:
        items: UniqueSet[Person] = UniqueSet()
        items.add(Person(name="a", age=1))
        items.mark_clean()
        with pytest.raises(DuplicateItem):
            items.add(Person(name="a", age=1))
        with pytest.raises(ItemNotFound):
            items.remove(Person(name="b", age=2))
        assert not items.dirty

    def test_stores_a_copy(self) -> None:
        items: UniqueSet[Person] = UniqueSet()
        person = Person(name="a", age=1)
        items.add(person)
        (stored,) = list(items)
        assert stored == person
        assert stored is not person

    def test_unhashable_item_is_a_contract_error(self) -> None:
        items: UniqueSet[object] = UniqueSet()  # type: ignore[type-var]
        with pytest.raises(ItemContractError):
            items.add([1, 2])  # type: ignore[arg-type]
        assert items.is_empty()

    def test_contains_unhashable_is_false(self) -> None:
        items: UniqueSet[Person] = UniqueSet()
        assert [1] not in items


class DriftingHash:
    """Equal to any other instance, but never hashes the same way twice."""

    _calls = 0

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DriftingHash)

    def __hash__(self) -> int:
        DriftingHash._calls += 1
        return DriftingHash._calls

    def copy(self) -> "DriftingHash":
        return DriftingHash()


def test_unreachable_copy_is_rolled_back() -> None:
    items: UniqueSet[DriftingHash] = UniqueSet()  # type: ignore[type-var]
    with pytest.raises(ItemContractError):
        items.add(DriftingHash())
    assert len(items) == 0
    assert not items.dirty
