"""Delayed, queued and throttled tasks bound to the lifetime of an owner."""

from __future__ import annotations

import logging
import warnings
from typing import Any, overload

from tether.errors import InvalidQueueError, ReservedQueueError
from tether.registry import get_registry
from tether.scheduler.base import BaseScheduler
from tether.scheduler.runloop import get_run_loop
from tether.scheduler.timer import Timer
from tether.tasks import (
    TaskOrName,
    as_named_task,
    as_task,
    ensure_alive,
    resolve,
    split_wait,
    validate_delay,
)

logger = logging.getLogger(__name__)

_MISSING: Any = object()


def _scheduler_for(owner: object) -> BaseScheduler:
    record = get_registry().get(owner)
    return record.scheduler if record is not None else get_run_loop()


def run_task(owner: object, task_or_name: TaskOrName, delay_ms: int = 0) -> Timer:
    """Run a task on *owner* after *delay_ms* milliseconds, unless the owner is destroyed first.

    The task never runs synchronously, even with a delay of 0. A task given by
    name is looked up on *owner* when it fires, so reassigning the attribute
    in the meantime changes what runs.

    Example::

        class Poller(Destroyable):
            def start(self):
                run_task(self, "poll", 5000)

            def poll(self):
                print("runs after 5s if the poller is still alive")

    Args:
        owner: The object whose lifetime bounds the task.
        task_or_name: A callable, or the name of a method on *owner*.
        delay_ms: Milliseconds to wait before running the task.

    Returns:
        The timer, usable with :func:`cancel_task`.

    Raises:
        DestroyedOwnerError: *owner* is already destroyed.
        InvalidTaskError: *task_or_name* is not callable / not a method name.
        InvalidDelayError: *delay_ms* is not a non-negative int.
    """
    ensure_alive(owner, "run_task")
    task = as_task(owner, task_or_name, "run_task")
    delay_ms = validate_delay(delay_ms, "run_task")

    record = get_registry().get_or_create(owner)
    timer: Timer | None = None

    def run() -> None:
        record.forget(timer)
        resolve(owner, task)()

    timer = record.scheduler.later(delay_ms, run)
    record.track(timer)
    return timer


def schedule_task(owner: object, queue_name: str, task_or_name: TaskOrName, *args: Any) -> Timer:
    """Run a task on *owner* in the named run-loop queue, unless the owner is destroyed first.

    *args* are captured now and passed to the task when the queue flushes.

    Raises:
        InvalidQueueError: *queue_name* is empty, not a string or unknown.
        ReservedQueueError: *queue_name* is reserved (``after_render``).
        DestroyedOwnerError: *owner* is already destroyed.
        InvalidTaskError: *task_or_name* is not callable / not a method name.
    """
    if not isinstance(queue_name, str) or not queue_name:
        raise InvalidQueueError(f"Called `schedule_task` without a queue name string on {owner!r}.")

    scheduler = _scheduler_for(owner)
    if queue_name in scheduler.reserved_queues:
        raise ReservedQueueError(
            f"Called `schedule_task` while trying to schedule to the `{queue_name}` queue on {owner!r}."
        )
    if queue_name not in scheduler.queues:
        raise InvalidQueueError(
            f"Called `schedule_task` with unknown queue `{queue_name}` on {owner!r}. "
            f"Known queues: {', '.join(scheduler.queues)}"
        )

    ensure_alive(owner, "schedule_task")
    task = as_task(owner, task_or_name, "schedule_task")

    record = get_registry().get_or_create(owner)
    timer: Timer | None = None

    def run(*task_args: Any) -> None:
        record.forget(timer)
        resolve(owner, task)(*task_args)

    timer = record.scheduler.schedule(queue_name, run, *args)
    record.track(timer)
    return timer


def throttle_task(owner: object, name: str, *args: Any, immediate: bool = True) -> Timer:
    """Run the method *name* at most once per window, with the first call's arguments.

    The last positional argument is the window length in milliseconds; the
    ones before it are passed to the method. Calls made while a window is
    open are dropped, and return the timer of the open window.

    Example::

        throttle_task(view, "refresh", query, 300)

    Args:
        owner: The object whose lifetime bounds the task.
        name: Name of a method on *owner*.
        *args: Task arguments, followed by the window length in milliseconds.
        immediate: Run at the start of the window (default) instead of at
                   its end.

    Raises:
        InvalidTaskError: *name* is not a string naming a method of *owner*.
        DestroyedOwnerError: *owner* is already destroyed.
        InvalidDelayError: The trailing window argument is missing, not an
                           int, or negative.
    """
    as_named_task(owner, name, "throttle_task")
    ensure_alive(owner, "throttle_task")
    task_args, wait_ms = split_wait(args, "throttle_task")

    record = get_registry().get_or_create(owner)
    timer = record.scheduler.throttle(owner, name, *task_args, wait_ms=wait_ms, immediate=immediate)

    with record.lock:
        if timer.active and timer not in record.timers:
            record.track(timer)
            timer.add_done_callback(record.forget)
    return timer


@overload
def cancel_task(timer: Timer | None, /) -> None: ...


@overload
def cancel_task(owner: object, timer: Timer | None, /) -> None: ...


def cancel_task(owner_or_timer: Any, timer: Any = _MISSING, /) -> None:
    """Cancel a timer returned by :func:`run_task`, :func:`schedule_task` or :func:`throttle_task`.

    Cancelling a timer that already fired or was already cancelled is a
    no-op.

    The one-argument form ``cancel_task(timer)`` is deprecated. It cannot
    remove the timer from its owner's tracked set, so the stale handle stays
    there until the owner is destroyed.
    """
    if timer is _MISSING:
        warnings.warn(
            "cancel_task(timer) is deprecated. Use cancel_task(owner, timer), "
            "which also removes the timer from the owner's tracked set.",
            DeprecationWarning,
            stacklevel=2,
        )
        logger.debug("Cancelling %r without an owner", owner_or_timer)
        get_run_loop().cancel(owner_or_timer)
        return

    record = get_registry().get(owner_or_timer)
    if record is None:
        get_run_loop().cancel(timer)
        return

    with record.lock:
        record.forget(timer)
        record.scheduler.cancel(timer)
