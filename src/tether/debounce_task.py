"""Debounced tasks bound to the lifetime of an owner."""

from __future__ import annotations

import logging
from typing import Any

from tether.registry import DebounceEntry, get_registry
from tether.tasks import as_named_task, ensure_alive, resolve, split_wait

logger = logging.getLogger(__name__)


def debounce_task(owner: object, name: str, *args: Any) -> None:
    """Run the method *name* once, *wait_ms* after the last call in a burst.

    The last positional argument is the wait in milliseconds; the ones before
    it are passed to the method. Each call restarts the wait and replaces the
    arguments, so the method runs once with the arguments of the most recent
    call. Nothing runs if *owner* is destroyed first.

    Example::

        class SearchBox(Destroyable):
            def on_input(self, text):
                debounce_task(self, "search", text, 300)

            def search(self, text):
                ...

    Raises:
        InvalidTaskError: *name* is not a string naming a method of *owner*.
        DestroyedOwnerError: *owner* is already destroyed.
        InvalidDelayError: The trailing wait argument is missing, not an int,
                           or negative.
    """
    task = as_named_task(owner, name, "debounce_task")
    ensure_alive(owner, "debounce_task")
    task_args, wait_ms = split_wait(args, "debounce_task")

    record = get_registry().get_or_create(owner)
    with record.lock:
        entry = record.debounces.get(name)
        if entry is None:

            def debounced(*call_args: Any) -> None:
                with record.lock:
                    record.debounces.pop(name, None)
                resolve(owner, task)(*call_args)

            wrapped = debounced
        else:
            # Same callable for the whole burst: the scheduler keys debounces
            # on it, and reschedules instead of adding a second call.
            wrapped = entry.wrapped_task
            logger.debug("Debounce %r on %r restarted", name, owner)

        timer = record.scheduler.debounce(owner, wrapped, *task_args, wait_ms=wait_ms)
        record.debounces[name] = DebounceEntry(name=name, wrapped_task=wrapped, timer=timer)


def cancel_debounce(owner: object, name: str) -> None:
    """Cancel the pending debounce of *name* on *owner*, if there is one."""
    record = get_registry().get(owner)
    if record is None:
        return

    with record.lock:
        entry = record.debounces.pop(name, None)
        if entry is None:
            return
        record.scheduler.cancel(entry.timer)
    logger.debug("Cancelled debounce %r on %r", name, owner)
