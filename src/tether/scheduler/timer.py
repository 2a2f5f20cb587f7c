"""Opaque timer handles issued by a scheduler."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from enum import StrEnum
from typing import Any

_ids = itertools.count(1)


class TimerState(StrEnum):
    PENDING = "pending"
    FIRED = "fired"
    CANCELLED = "cancelled"


class Timer:
    """Handle for one outstanding delayed, queued, throttled or debounced call.

    Timers compare and hash by identity. The only meaningful operation for a
    caller is handing the timer back to the scheduler that issued it for
    cancellation.

    Once a timer has fired or been cancelled it drops its callback and
    arguments, so a finished timer never keeps the objects it closed over
    alive.
    """

    __slots__ = ("_args", "_callback", "_done_callbacks", "handle", "id", "key", "state", "target")

    def __init__(self, callback: Callable[..., Any] | None, args: tuple[Any, ...] = ()) -> None:
        self.id = next(_ids)
        self.state = TimerState.PENDING
        self._callback = callback
        self._args = args
        self._done_callbacks: list[Callable[[Timer], Any]] = []
        # Set by the scheduler: the asyncio handle backing the timer, the
        # throttle/debounce key it occupies and the target it is keyed on.
        self.handle: Any = None
        self.key: Any = None
        self.target: Any = None

    @property
    def active(self) -> bool:
        return self.state is TimerState.PENDING

    def add_done_callback(self, fn: Callable[[Timer], Any]) -> None:
        """Call *fn* with this timer once it fires or is cancelled.

        Runs immediately if the timer is already finished.
        """
        if self.active:
            self._done_callbacks.append(fn)
        else:
            fn(self)

    def fire(self) -> Any:
        """Mark the timer fired and invoke its callback. No-op if not pending."""
        if not self.active:
            return None
        callback, args = self._finish(TimerState.FIRED)
        if callback is None:
            return None
        return callback(*args)

    def cancel(self) -> bool:
        """Mark the timer cancelled. Returns False if it already finished."""
        if not self.active:
            return False
        if self.handle is not None:
            self.handle.cancel()
        self._finish(TimerState.CANCELLED)
        return True

    def _finish(self, state: TimerState) -> tuple[Callable[..., Any] | None, tuple[Any, ...]]:
        self.state = state
        callback, args = self._callback, self._args
        self._callback, self._args = None, ()
        self.handle = None
        self.target = None
        done, self._done_callbacks = self._done_callbacks, []
        for fn in done:
            fn(self)
        self.key = None
        return callback, args

    def __repr__(self) -> str:
        return f"Timer(id={self.id}, state={self.state.value})"
