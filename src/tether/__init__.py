"""tether: tasks that never outlive their owner.

Delayed, queued, throttled and debounced work is tied to an owner object.
When the owner is destroyed, everything it still has pending is cancelled
and released.

Basic usage:

    from tether import Destroyable, run_task, debounce_task

    class SearchBox(Destroyable):
        def on_input(self, text):
            debounce_task(self, "search", text, 300)

        def search(self, text):
            ...

    box = SearchBox()
    box.on_input("py")
    box.destroy()  # the pending search is cancelled

Queued work:

    from tether import get_run_loop, schedule_task

    with get_run_loop().batch():
        schedule_task(box, "actions", box.save, "draft")
    # save("draft") has run
"""

import logging

from tether.config import Queue, RunLoopConfig
from tether.debounce_task import cancel_debounce, debounce_task
from tether.errors import (
    DestroyedOwnerError,
    InvalidDelayError,
    InvalidQueueError,
    InvalidTaskError,
    ReservedQueueError,
    TetherError,
)
from tether.lifecycle import Destroyable, is_destroyed, register_disposable, run_disposables
from tether.mixin import ContextBoundTasks
from tether.registry import set_registry_store
from tether.run_task import cancel_task, run_task, schedule_task, throttle_task
from tether.scheduler import BaseScheduler, RunLoop, Timer, get_run_loop, set_run_loop
from tether.store import StrongOwnerStore, WeakOwnerStore

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BaseScheduler",
    "ContextBoundTasks",
    "Destroyable",
    "DestroyedOwnerError",
    "InvalidDelayError",
    "InvalidQueueError",
    "InvalidTaskError",
    "Queue",
    "ReservedQueueError",
    "RunLoop",
    "RunLoopConfig",
    "StrongOwnerStore",
    "TetherError",
    "Timer",
    "WeakOwnerStore",
    "cancel_debounce",
    "cancel_task",
    "debounce_task",
    "get_run_loop",
    "is_destroyed",
    "register_disposable",
    "run_disposables",
    "run_task",
    "schedule_task",
    "set_registry_store",
    "set_run_loop",
    "throttle_task",
]

__version__ = "0.1.0"
