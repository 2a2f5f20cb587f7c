"""Destroyable base class with the task functions bound to ``self``."""

from typing import Any

from tether.debounce_task import cancel_debounce, debounce_task
from tether.lifecycle import Destroyable
from tether.run_task import cancel_task, run_task, schedule_task, throttle_task
from tether.scheduler.timer import Timer
from tether.tasks import TaskOrName


class ContextBoundTasks(Destroyable):
    """Owner whose tasks are cancelled by :meth:`destroy`.

    Example::

        class Clock(ContextBoundTasks):
            def start(self):
                self.run_task("tick", 1000)

            def tick(self):
                print("tick")
                self.run_task("tick", 1000)

        clock = Clock()
        clock.start()
        clock.destroy()  # the pending tick is cancelled
    """

    def run_task(self, task_or_name: TaskOrName, delay_ms: int = 0) -> Timer:
        return run_task(self, task_or_name, delay_ms)

    def schedule_task(self, queue_name: str, task_or_name: TaskOrName, *args: Any) -> Timer:
        return schedule_task(self, queue_name, task_or_name, *args)

    def throttle_task(self, name: str, *args: Any, immediate: bool = True) -> Timer:
        return throttle_task(self, name, *args, immediate=immediate)

    def debounce_task(self, name: str, *args: Any) -> None:
        debounce_task(self, name, *args)

    def cancel_task(self, timer: Timer | None) -> None:
        cancel_task(self, timer)

    def cancel_debounce(self, name: str) -> None:
        cancel_debounce(self, name)
