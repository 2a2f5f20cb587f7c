"""Abstract base class for the primitive schedulers tether runs on top of."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from tether.config import RunLoopConfig
from tether.scheduler.timer import Timer


class BaseScheduler(ABC):
    """Base class for "run later / run in queue / throttle / debounce" primitives.

    The lifecycle layer never touches timers directly: it asks a scheduler for
    a :class:`Timer`, keeps it in the owner's bookkeeping, and hands it back to
    :meth:`cancel` when the owner goes away.

    Subclasses must implement :meth:`later`, :meth:`schedule`,
    :meth:`throttle`, :meth:`debounce` and :meth:`cancel`. The constructor
    handles the common ``config`` parameter.

    Args:
        config: Queue layout for :meth:`schedule`. Defaults to
                :class:`RunLoopConfig`'s defaults.
    """

    __slots__ = ("config",)

    def __init__(self, config: RunLoopConfig | None = None) -> None:
        self.config = config or RunLoopConfig()

    @property
    def queues(self) -> tuple[str, ...]:
        return self.config.queues

    @property
    def reserved_queues(self) -> frozenset[str]:
        return self.config.reserved

    @abstractmethod
    def later(self, delay_ms: float, fn: Callable[..., Any], *args: Any) -> Timer:
        """Run ``fn(*args)`` after *delay_ms* milliseconds. Never synchronous."""

    @abstractmethod
    def schedule(self, queue_name: str, fn: Callable[..., Any], *args: Any) -> Timer:
        """Run ``fn(*args)`` when *queue_name* is next flushed."""

    @abstractmethod
    def throttle(
        self,
        target: object,
        method: Callable[..., Any] | str,
        *args: Any,
        wait_ms: float,
        immediate: bool = True,
    ) -> Timer:
        """Run *method* at most once per *wait_ms* window for ``(target, method)``."""

    @abstractmethod
    def debounce(self, target: object, method: Callable[..., Any] | str, *args: Any, wait_ms: float) -> Timer:
        """Run *method* once, *wait_ms* after the last call for ``(target, method)``."""

    @abstractmethod
    def cancel(self, timer: Timer | None) -> bool:
        """Cancel *timer*. Returns False for unknown, fired or cancelled timers."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(queues={list(self.queues)})"
