from tether.scheduler.base import BaseScheduler
from tether.scheduler.runloop import RunLoop, get_run_loop, set_run_loop
from tether.scheduler.timer import Timer, TimerState

__all__ = [
    "BaseScheduler",
    "RunLoop",
    "Timer",
    "TimerState",
    "get_run_loop",
    "set_run_loop",
]
