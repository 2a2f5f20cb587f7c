"""asyncio-backed run loop with named queues, throttling and debouncing."""

from __future__ import annotations

import logging
from asyncio import AbstractEventLoop, Handle, get_running_loop
from collections import deque
from collections.abc import Callable, Iterator
from contextlib import contextmanager, suppress
from typing import Any

from tether.config import RunLoopConfig
from tether.errors import InvalidQueueError
from tether.scheduler.base import BaseScheduler
from tether.scheduler.timer import Timer

logger = logging.getLogger(__name__)


def _bind(target: object, method: Callable[..., Any] | str) -> Callable[..., Any]:
    if isinstance(method, str):
        return lambda *args: getattr(target, method)(*args)
    return method


class RunLoop(BaseScheduler):
    """Primitive scheduler on top of the running asyncio event loop.

    How it works:
        - ``later`` maps to ``loop.call_later``.
        - ``schedule`` appends to a named FIFO queue. Queues drain when the
          outermost :meth:`batch` (or :meth:`run`) exits. Work queued outside
          a batch drains on the next loop iteration (an "autorun").
        - A flush drains queues in configured order and goes back to the
          first queue whenever an earlier one received new work.
        - ``throttle`` and ``debounce`` are keyed on ``(id(target), method)``,
          so passing the same callable (or method name) for the same target
          is what makes two calls "the same" throttle or debounce.

    Example::

        run_loop = RunLoop()

        with run_loop.batch():
            run_loop.schedule("render", draw)
            run_loop.schedule("actions", save)
        # save() ran, then draw()

    The event loop is resolved lazily, so a RunLoop can be created outside a
    coroutine. Only ``later``, ``throttle``, ``debounce`` and autoruns need a
    running loop; batches flush synchronously.
    """

    __slots__ = (
        "_autorun",
        "_batch_depth",
        "_debounces",
        "_flushing",
        "_loop",
        "_queues",
        "_throttles",
    )

    def __init__(self, config: RunLoopConfig | None = None) -> None:
        super().__init__(config)
        self._queues: dict[str, deque[Timer]] = {name: deque() for name in self.config.queues}
        self._throttles: dict[tuple[int, Any], Timer] = {}
        self._debounces: dict[tuple[int, Any], Timer] = {}
        self._batch_depth = 0
        self._flushing = False
        self._autorun: Handle | None = None
        self._loop: AbstractEventLoop | None = None

    def _get_loop(self) -> AbstractEventLoop:
        if self._loop is None or self._loop.is_closed():
            self._loop = get_running_loop()
        return self._loop

    @property
    def in_batch(self) -> bool:
        return self._batch_depth > 0

    def later(self, delay_ms: float, fn: Callable[..., Any], *args: Any) -> Timer:
        timer = Timer(fn, args)
        timer.handle = self._get_loop().call_later(delay_ms / 1000, timer.fire)
        return timer

    def schedule(self, queue_name: str, fn: Callable[..., Any], *args: Any) -> Timer:
        queue = self._queues.get(queue_name)
        if queue is None:
            raise InvalidQueueError(
                f"Unknown queue {queue_name!r}. Configured: {', '.join(self.config.queues)}"
            )

        if not (self._batch_depth or self._flushing):
            # An autorun needs a running loop; fail before anything is queued.
            self._loop = get_running_loop()

        timer = Timer(fn, args)
        queue.append(timer)
        self._ensure_flush()
        return timer

    def throttle(
        self,
        target: object,
        method: Callable[..., Any] | str,
        *args: Any,
        wait_ms: float,
        immediate: bool = True,
    ) -> Timer:
        key = (id(target), method)
        existing = self._throttles.get(key)
        if existing is not None and existing.active:
            logger.debug("Suppressed throttled call to %r on %r", method, target)
            return existing

        fn = _bind(target, method)
        # With immediate=True the timer only marks the throttle window.
        timer = Timer(None) if immediate else Timer(fn, args)
        timer.key = key
        timer.target = target
        timer.add_done_callback(self._release_throttle)
        self._throttles[key] = timer
        timer.handle = self._get_loop().call_later(wait_ms / 1000, timer.fire)

        if immediate:
            try:
                fn(*args)
            except BaseException:
                # A failed call does not open a window.
                timer.cancel()
                raise
        return timer

    def debounce(self, target: object, method: Callable[..., Any] | str, *args: Any, wait_ms: float) -> Timer:
        key = (id(target), method)
        previous = self._debounces.pop(key, None)
        if previous is not None:
            previous.cancel()
            logger.debug("Rescheduled debounced call to %r on %r", method, target)

        timer = Timer(_bind(target, method), args)
        timer.key = key
        timer.target = target
        timer.add_done_callback(self._release_debounce)
        self._debounces[key] = timer
        timer.handle = self._get_loop().call_later(wait_ms / 1000, timer.fire)
        return timer

    def cancel(self, timer: Timer | None) -> bool:
        if not isinstance(timer, Timer):
            return False

        cancelled = timer.cancel()
        if cancelled:
            logger.debug("Cancelled %r", timer)
        return cancelled

    def run(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Call ``fn(*args)`` inside a batch and return its result."""
        with self.batch():
            return fn(*args)

    @contextmanager
    def batch(self) -> Iterator[RunLoop]:
        """Open a batch. Queued work flushes when the outermost batch exits."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self.flush()

    def flush(self) -> None:
        """Drain every queue in configured order."""
        if self._flushing:
            return

        self._flushing = True
        try:
            queue = self._next_queue()
            while queue is not None:
                # Only the work present now; anything added meanwhile waits
                # for the next pass so earlier queues can jump ahead.
                for _ in range(len(queue)):
                    queue.popleft().fire()
                queue = self._next_queue()
        finally:
            self._flushing = False
            if not self._batch_depth and self._next_queue() is not None:
                # Without a running loop the rest drains with the next batch.
                with suppress(RuntimeError):
                    self._ensure_flush()

    def _next_queue(self) -> deque[Timer] | None:
        for queue in self._queues.values():
            if queue:
                return queue
        return None

    def _ensure_flush(self) -> None:
        if self._batch_depth or self._flushing or self._autorun is not None:
            return
        self._autorun = self._get_loop().call_soon(self._run_autorun)

    def _run_autorun(self) -> None:
        self._autorun = None
        self.flush()

    def _release_throttle(self, timer: Timer) -> None:
        if self._throttles.get(timer.key) is timer:
            del self._throttles[timer.key]

    def _release_debounce(self, timer: Timer) -> None:
        if self._debounces.get(timer.key) is timer:
            del self._debounces[timer.key]


# Process-wide default used by the task functions
_default_run_loop: BaseScheduler = RunLoop()


def get_run_loop() -> BaseScheduler:
    """Return the process-wide default scheduler."""
    return _default_run_loop


def set_run_loop(run_loop: BaseScheduler) -> BaseScheduler:
    """Install *run_loop* as the process-wide default and return the previous one."""
    global _default_run_loop
    previous, _default_run_loop = _default_run_loop, run_loop
    return previous
