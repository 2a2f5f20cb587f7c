"""Configuration types for the tether run loop."""

from dataclasses import dataclass, field
from enum import StrEnum


class Queue(StrEnum):
    """Named queues, in the order a batch flushes them.

    AFTER_RENDER is reserved: owners may not schedule into it directly.
    """

    SYNC = "sync"
    ACTIONS = "actions"
    ROUTER_TRANSITIONS = "router_transitions"
    RENDER = "render"
    AFTER_RENDER = "after_render"
    DESTROY = "destroy"


@dataclass(frozen=True, slots=True)
class RunLoopConfig:
    """Configuration for a RunLoop instance.

    Attributes:
        queues: Queue names in flush order. Earlier queues always drain
                before later ones get a turn.
        reserved: Queue names that ``schedule_task`` refuses to target.
                  Every reserved name must also appear in ``queues``.
    """

    queues: tuple[str, ...] = tuple(Queue)
    reserved: frozenset[str] = field(default_factory=lambda: frozenset({Queue.AFTER_RENDER}))

    def __post_init__(self) -> None:
        if not self.queues:
            raise ValueError("queues must contain at least one queue name")

        for name in self.queues:
            if not isinstance(name, str) or not name:
                raise ValueError(f"queue names must be non-empty strings, got {name!r}")

        if len(set(self.queues)) != len(self.queues):
            raise ValueError(f"queue names must be unique, got {self.queues!r}")

        unknown = set(self.reserved) - set(self.queues)
        if unknown:
            raise ValueError(f"reserved queues ({', '.join(sorted(unknown))}) must be configured queues")
