"""Error types raised by tether.

Every error is raised synchronously at the call site, before anything is
registered with the scheduler.
"""


class TetherError(Exception):
    """Base class for all tether errors."""


class DestroyedOwnerError(TetherError, RuntimeError):
    """Work was scheduled on an owner that is already destroyed."""


class InvalidTaskError(TetherError, TypeError):
    """A task is not callable, or names a missing / non-callable attribute."""


class InvalidQueueError(TetherError, ValueError):
    """A queue name is empty, not a string, or unknown to the run loop."""


class ReservedQueueError(InvalidQueueError):
    """A task was scheduled into a queue that is reserved for the host."""


class InvalidDelayError(TetherError, ValueError):
    """A delay or wait is not a non-negative integer number of milliseconds."""
