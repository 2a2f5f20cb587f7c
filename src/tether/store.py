"""Identity-keyed stores that associate bookkeeping with owner objects.

Owners are matched by identity, never by ``__eq__``/``__hash__``: two equal
but distinct owners get separate entries, and owners do not need to be
hashable.
"""

from __future__ import annotations

import threading
import weakref
from abc import ABC, abstractmethod
from typing import Any

_MISSING = object()


class BaseOwnerStore(ABC):
    """Mapping of ``owner -> value`` keyed on ``id(owner)``.

    Subclasses decide how strongly the owner itself is held through
    :meth:`_hold` and :meth:`_deref`. Every lookup verifies that the held
    owner *is* the requested one, so a recycled ``id()`` never aliases a
    dead owner's entry.
    """

    __slots__ = ("_data", "_lock")

    def __init__(self) -> None:
        self._data: dict[int, tuple[Any, Any]] = {}
        self._lock = threading.RLock()

    @abstractmethod
    def _hold(self, owner: object) -> Any:
        """Return the reference stored for *owner*."""

    @abstractmethod
    def _deref(self, held: Any) -> Any:
        """Return the owner behind *held*, or None if it is gone."""

    def get(self, owner: object, default: Any = None) -> Any:
        with self._lock:
            entry = self._data.get(id(owner))
        if entry is None or self._deref(entry[0]) is not owner:
            return default
        return entry[1]

    def set(self, owner: object, value: Any) -> None:
        with self._lock:
            self._data[id(owner)] = (self._hold(owner), value)

    def pop(self, owner: object, default: Any = None) -> Any:
        with self._lock:
            entry = self._data.get(id(owner))
            if entry is None or self._deref(entry[0]) is not owner:
                return default
            del self._data[id(owner)]
            return entry[1]

    def items(self) -> list[tuple[Any, Any]]:
        """Snapshot of ``(owner, value)`` pairs for owners that are still alive."""
        with self._lock:
            entries = list(self._data.values())
        pairs = []
        for held, value in entries:
            owner = self._deref(held)
            if owner is not None:
                pairs.append((owner, value))
        return pairs

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, owner: object) -> bool:
        return self.get(owner, _MISSING) is not _MISSING

    def __len__(self) -> int:
        return len(self.items())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={len(self)})"


class WeakOwnerStore(BaseOwnerStore):
    """Store that never keeps an owner alive.

    Entries disappear as soon as their owner is garbage collected. Values
    must not reference their owner, or the owner can never be collected.
    """

    __slots__ = ()

    def _hold(self, owner: object) -> Any:
        key = id(owner)

        def forget(ref: weakref.ref[Any]) -> None:
            with self._lock:
                entry = self._data.get(key)
                if entry is not None and entry[0] is ref:
                    del self._data[key]

        try:
            return weakref.ref(owner, forget)
        except TypeError:
            raise TypeError(f"Owner {owner!r} must support weak references") from None

    def _deref(self, held: Any) -> Any:
        return held()


class StrongOwnerStore(BaseOwnerStore):
    """Store that keeps owners alive and can be enumerated.

    Test use only: install it with ``set_registry_store`` to assert on the
    registry contents after tasks fire.
    """

    __slots__ = ()

    def _hold(self, owner: object) -> Any:
        return owner

    def _deref(self, held: Any) -> Any:
        return held
