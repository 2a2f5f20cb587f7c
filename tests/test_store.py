"""Tests for the identity-keyed owner stores."""

import gc

import pytest

from tether.store import StrongOwnerStore, WeakOwnerStore


class Equal:
    """Every instance compares equal, so only identity tells them apart."""

    def __eq__(self, other):
        return isinstance(other, Equal)

    def __hash__(self):
        return 1


@pytest.fixture(params=[WeakOwnerStore, StrongOwnerStore])
def store(request):
    return request.param()


class TestOwnerStore:
    def test_set_and_get(self, store):
        owner = Equal()
        store.set(owner, "value")
        assert store.get(owner) == "value"
        assert owner in store

    def test_get_default(self, store):
        assert store.get(Equal(), "default") == "default"

    def test_identity_not_equality(self, store):
        a, b = Equal(), Equal()
        store.set(a, "a")
        assert a == b
        assert b not in store
        store.set(b, "b")
        assert store.get(a) == "a"
        assert store.get(b) == "b"
        assert len(store) == 2

    def test_unhashable_owner(self, store):
        class Unhashable:
            __hash__ = None

        owner = Unhashable()
        store.set(owner, 1)
        assert store.get(owner) == 1

    def test_pop(self, store):
        owner = Equal()
        store.set(owner, "value")
        assert store.pop(owner) == "value"
        assert owner not in store
        assert store.pop(owner, "gone") == "gone"

    def test_items(self, store):
        a, b = Equal(), Equal()
        store.set(a, 1)
        store.set(b, 2)
        assert sorted(value for _, value in store.items()) == [1, 2]
        assert {id(owner) for owner, _ in store.items()} == {id(a), id(b)}

    def test_clear(self, store):
        owner = Equal()
        store.set(owner, 1)
        store.clear()
        assert owner not in store
        assert len(store) == 0


class TestWeakOwnerStore:
    def test_does_not_keep_owner_alive(self):
        store = WeakOwnerStore()
        owner = Equal()
        store.set(owner, "value")
        assert len(store) == 1
        del owner
        gc.collect()
        assert len(store) == 0
        assert store._data == {}

    def test_requires_weakref_support(self):
        store = WeakOwnerStore()
        with pytest.raises(TypeError, match="must support weak references"):
            store.set(object(), "value")

    def test_repr(self):
        store = WeakOwnerStore()
        assert repr(store) == "WeakOwnerStore(size=0)"


class TestStrongOwnerStore:
    def test_keeps_owner_alive(self):
        store = StrongOwnerStore()
        store.set(Equal(), "value")
        gc.collect()
        assert len(store) == 1

    def test_accepts_plain_objects(self):
        store = StrongOwnerStore()
        owner = object()
        store.set(owner, "value")
        assert store.get(owner) == "value"
