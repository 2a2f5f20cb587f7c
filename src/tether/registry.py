"""Per-owner bookkeeping of outstanding timers and pending debounces."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tether.errors import DestroyedOwnerError
from tether.lifecycle import register_disposable
from tether.scheduler.base import BaseScheduler
from tether.scheduler.runloop import get_run_loop
from tether.scheduler.timer import Timer
from tether.store import BaseOwnerStore, WeakOwnerStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DebounceEntry:
    """The single pending debounce for one (owner, name) pair.

    ``wrapped_task`` keeps its identity for the whole burst; ``timer`` is
    replaced on every call.
    """

    name: str
    wrapped_task: Callable[..., Any]
    timer: Timer


class OwnerRecord:
    """Outstanding work of one owner.

    The record never references its owner, so it can live as the value of a
    weakly keyed store. It remembers the scheduler that was the default when
    it was created; all of the owner's work goes through that scheduler.
    """

    __slots__ = ("debounces", "disposed", "lock", "scheduler", "timers")

    def __init__(self, scheduler: BaseScheduler) -> None:
        self.scheduler = scheduler
        self.timers: set[Timer] = set()
        self.debounces: dict[str, DebounceEntry] = {}
        self.disposed = False
        self.lock = threading.RLock()

    def track(self, timer: Timer) -> None:
        with self.lock:
            self.timers.add(timer)

    def forget(self, timer: Timer) -> None:
        with self.lock:
            self.timers.discard(timer)

    def dispose(self) -> None:
        """Cancel everything outstanding and clear both collections. Runs once."""
        with self.lock:
            if self.disposed:
                return
            self.disposed = True

            timers = list(self.timers)
            entries = list(self.debounces.values())
            for timer in timers:
                self.scheduler.cancel(timer)
            for entry in entries:
                self.scheduler.cancel(entry.timer)
            self.timers.clear()
            self.debounces.clear()

        logger.debug("Disposed %d timer(s) and %d debounce(s)", len(timers), len(entries))

    def __repr__(self) -> str:
        return (
            f"OwnerRecord(timers={len(self.timers)}, "
            f"debounces={sorted(self.debounces)}, "
            f"disposed={self.disposed})"
        )


class OwnerRegistry:
    """Maps owners to their :class:`OwnerRecord`.

    Records are created lazily. Creating one registers its :meth:`dispose`
    as a disposable of the owner, exactly once per owner.

    Args:
        store: Backing store. Defaults to a :class:`WeakOwnerStore`, which
               never keeps an owner alive.
    """

    __slots__ = ("_lock", "store")

    def __init__(self, store: BaseOwnerStore | None = None) -> None:
        self.store: BaseOwnerStore = store if store is not None else WeakOwnerStore()
        self._lock = threading.RLock()

    def has(self, owner: object) -> bool:
        return owner in self.store

    def get(self, owner: object) -> OwnerRecord | None:
        return self.store.get(owner)

    def get_or_create(self, owner: object) -> OwnerRecord:
        with self._lock:
            record = self.store.get(owner)
            if record is None:
                record = OwnerRecord(get_run_loop())
                self.store.set(owner, record)
                register_disposable(owner, record.dispose)
                logger.debug("Created task record for %r", owner)
            elif record.disposed:
                raise DestroyedOwnerError(f"Tasks of {owner!r} were already disposed; it cannot be reused.")
        return record


# Module-level registry shared by the task functions
_registry = OwnerRegistry()


def get_registry() -> OwnerRegistry:
    return _registry


def set_registry_store(store: BaseOwnerStore) -> BaseOwnerStore:
    """Swap the registry's backing store and return the previous one.

    Test use only. A :class:`StrongOwnerStore` makes the registry enumerable
    so tests can assert that timers were removed after firing.
    """
    with _registry._lock:
        previous, _registry.store = _registry.store, store
    return previous
