"""Host lifecycle: destruction state and one-shot cleanup callbacks per owner."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from tether.store import WeakOwnerStore

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=Callable[[], Any])

_disposables = WeakOwnerStore()
_lock = threading.Lock()


def is_destroyed(owner: object) -> bool:
    """Whether *owner* reports itself destroyed. Owners without the flag are alive."""
    return bool(getattr(owner, "is_destroyed", False))


def register_disposable(owner: object, dispose: D) -> D:
    """Register *dispose* to run once when :func:`run_disposables` is called for *owner*.

    *dispose* must not hold a strong reference to *owner*: the disposables
    table is weakly keyed, and a value that points back at its key keeps the
    owner alive forever.

    Returns *dispose* unchanged.
    """
    if not callable(dispose):
        raise TypeError(f"dispose must be callable, got {dispose!r}")

    with _lock:
        disposables = _disposables.get(owner)
        if disposables is None:
            disposables = []
            _disposables.set(owner, disposables)
        disposables.append(dispose)
    return dispose


def run_disposables(owner: object) -> None:
    """Run and forget every disposable registered for *owner*, in registration order.

    Safe to call for owners that never registered anything, and safe to call
    more than once. A disposable that raises does not stop the ones after it;
    the first error is re-raised once all of them ran.
    """
    with _lock:
        disposables = _disposables.pop(owner)
    if not disposables:
        return

    logger.debug("Running %d disposable(s) for %r", len(disposables), owner)
    error: BaseException | None = None
    for dispose in disposables:
        try:
            dispose()
        except Exception as exc:
            if error is None:
                error = exc
            else:
                logger.exception("Disposable %r for %r failed", dispose, owner)
    if error is not None:
        raise error


class Destroyable:
    """Minimal owner with an explicit, one-shot destruction.

    ``destroy()`` calls :meth:`will_destroy`, runs the owner's disposables
    and then flags it destroyed. Any tether task scheduled on the owner is
    cancelled by the disposables before the flag flips.

    Example::

        with Destroyable() as owner:
            run_task(owner, poll, 500)
        # owner is destroyed, poll never runs
    """

    is_destroying = False
    is_destroyed = False

    def will_destroy(self) -> None:
        """Hook for subclasses, called once before disposables run."""

    def destroy(self) -> None:
        if self.is_destroying or self.is_destroyed:
            return

        self.is_destroying = True
        try:
            self.will_destroy()
            run_disposables(self)
        finally:
            self.is_destroyed = True

    def __enter__(self) -> Destroyable:
        return self

    def __exit__(self, *_: Any) -> None:
        self.destroy()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} destroyed={self.is_destroyed}>"
