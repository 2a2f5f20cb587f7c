"""Task resolution and argument validation shared by the task functions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from numbers import Integral
from typing import Any

from tether.errors import DestroyedOwnerError, InvalidDelayError, InvalidTaskError
from tether.lifecycle import is_destroyed

TaskOrName = Callable[..., Any] | str


@dataclass(frozen=True, slots=True)
class Direct:
    """A task given as a callable."""

    fn: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class Named:
    """A task given as the name of a method, looked up on the owner at fire time."""

    name: str


Task = Direct | Named


def ensure_alive(owner: object, caller: str) -> None:
    if is_destroyed(owner):
        raise DestroyedOwnerError(f"Called `{caller}` on destroyed object: {owner!r}.")


def as_task(owner: object, task_or_name: TaskOrName, caller: str) -> Task:
    """Validate *task_or_name* against *owner* and wrap it.

    A name must refer to a callable attribute of *owner* right now, but the
    attribute is only read again when the task fires (see :func:`resolve`).
    """
    if isinstance(task_or_name, str):
        if not callable(getattr(owner, task_or_name, None)):
            raise InvalidTaskError(
                f"Called `{caller}('{task_or_name}')` where '{task_or_name}' is not a function on {owner!r}."
            )
        return Named(task_or_name)

    if callable(task_or_name):
        return Direct(task_or_name)

    raise InvalidTaskError(
        f"Called `{caller}` with {task_or_name!r}; expected a callable or the name of a method on {owner!r}."
    )


def as_named_task(owner: object, name: Any, caller: str) -> Named:
    """Like :func:`as_task`, but only method names are accepted."""
    if not isinstance(name, str):
        raise InvalidTaskError(f"Called `{caller}` without a string as the task name on {owner!r}.")
    as_task(owner, name, caller)
    return Named(name)


def resolve(owner: object, task: Task) -> Callable[..., Any]:
    """Return the callable to invoke for *task* at this moment."""
    if isinstance(task, Direct):
        return task.fn

    fn = getattr(owner, task.name, None)
    if not callable(fn):
        raise InvalidTaskError(f"Task '{task.name}' is no longer a function on {owner!r}.")
    return fn


def validate_delay(value: Any, caller: str, label: str = "delay_ms") -> int:
    # bool is an Integral, but True is never a sensible number of milliseconds
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidDelayError(
            f"Called `{caller}` with incorrect `{label}` argument. Expected int and received {value!r}."
        )
    if value < 0:
        raise InvalidDelayError(f"Called `{caller}` with negative `{label}` argument: {value!r}.")
    return int(value)


def split_wait(args: tuple[Any, ...], caller: str) -> tuple[tuple[Any, ...], int]:
    """Split ``(*task_args, wait_ms)`` into the task arguments and the validated wait."""
    if not args:
        raise InvalidDelayError(f"Called `{caller}` without a `wait_ms` argument.")
    *task_args, wait = args
    return tuple(task_args), validate_delay(wait, caller, "wait_ms")
