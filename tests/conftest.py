"""Shared fixtures for tether tests."""

import pytest

from tether.lifecycle import Destroyable, run_disposables
from tether.registry import set_registry_store
from tether.scheduler.runloop import RunLoop, set_run_loop
from tether.store import StrongOwnerStore


class Owner(Destroyable):
    def __init__(self):
        self.calls = []

    def record(self, *args):
        self.calls.append(args)

    def other(self, *args):
        self.calls.append(("other", *args))


@pytest.fixture(autouse=True)
def run_loop():
    loop = RunLoop()
    previous = set_run_loop(loop)
    yield loop
    set_run_loop(previous)


@pytest.fixture(autouse=True)
def registry_store():
    store = StrongOwnerStore()
    previous = set_registry_store(store)
    yield store
    for owner, _ in store.items():
        run_disposables(owner)
    set_registry_store(previous)


@pytest.fixture
def owner():
    return Owner()


@pytest.fixture
def make_owner():
    return Owner
