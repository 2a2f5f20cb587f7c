"""Tests for the host lifecycle helpers."""

import asyncio

import pytest

from tether.lifecycle import Destroyable, is_destroyed, register_disposable, run_disposables
from tether.run_task import run_task


class Plain:
    pass


class TestIsDestroyed:
    def test_missing_flag_means_alive(self):
        assert is_destroyed(Plain()) is False

    def test_reads_flag(self):
        owner = Plain()
        owner.is_destroyed = True
        assert is_destroyed(owner) is True

    def test_destroyable(self):
        owner = Destroyable()
        assert is_destroyed(owner) is False
        owner.destroy()
        assert is_destroyed(owner) is True


class TestDisposables:
    def test_run_in_registration_order(self):
        owner = Plain()
        order = []
        register_disposable(owner, lambda: order.append(1))
        register_disposable(owner, lambda: order.append(2))
        run_disposables(owner)
        assert order == [1, 2]

    def test_run_only_once(self):
        owner = Plain()
        calls = []
        register_disposable(owner, lambda: calls.append(1))
        run_disposables(owner)
        run_disposables(owner)
        assert calls == [1]

    def test_run_without_registration(self):
        run_disposables(Plain())

    def test_scoped_per_owner(self):
        a, b = Plain(), Plain()
        calls = []
        register_disposable(a, lambda: calls.append("a"))
        register_disposable(b, lambda: calls.append("b"))
        run_disposables(a)
        assert calls == ["a"]
        run_disposables(b)
        assert calls == ["a", "b"]

    def test_returns_dispose(self):
        def dispose():
            pass

        assert register_disposable(Plain(), dispose) is dispose

    def test_non_callable_raises(self):
        with pytest.raises(TypeError, match="dispose must be callable"):
            register_disposable(Plain(), "nope")  # type: ignore[arg-type]


class TestDestroyable:
    def test_destroy_runs_disposables(self):
        owner = Destroyable()
        calls = []
        register_disposable(owner, lambda: calls.append(owner.is_destroyed))
        owner.destroy()
        # disposables run before the destroyed flag flips
        assert calls == [False]
        assert owner.is_destroyed is True

    def test_destroy_is_idempotent(self):
        owner = Destroyable()
        calls = []
        register_disposable(owner, lambda: calls.append(1))
        owner.destroy()
        owner.destroy()
        assert calls == [1]

    def test_will_destroy_hook(self):
        order = []

        class Hooked(Destroyable):
            def will_destroy(self):
                order.append("will_destroy")

        owner = Hooked()
        register_disposable(owner, lambda: order.append("dispose"))
        owner.destroy()
        assert order == ["will_destroy", "dispose"]

    async def test_flagged_destroyed_even_if_disposable_raises(self):
        owner = Destroyable()
        calls = []

        def boom():
            raise RuntimeError("boom")

        register_disposable(owner, boom)
        run_task(owner, lambda: calls.append("ran"), 5)
        with pytest.raises(RuntimeError, match="boom"):
            owner.destroy()
        assert owner.is_destroyed is True
        await asyncio.sleep(0.03)
        assert calls == []

    def test_context_manager(self):
        with Destroyable() as owner:
            assert owner.is_destroyed is False
        assert owner.is_destroyed is True

    def test_repr(self):
        assert repr(Destroyable()) == "<Destroyable destroyed=False>"


class TestFailingDisposables:
    def test_later_disposables_still_run(self):
        owner = Plain()
        calls = []

        def boom():
            raise RuntimeError("boom")

        register_disposable(owner, boom)
        register_disposable(owner, lambda: calls.append("after"))
        with pytest.raises(RuntimeError, match="boom"):
            run_disposables(owner)
        assert calls == ["after"]

    def test_first_error_is_raised(self):
        owner = Plain()

        def first():
            raise RuntimeError("first")

        def second():
            raise ValueError("second")

        register_disposable(owner, first)
        register_disposable(owner, second)
        with pytest.raises(RuntimeError, match="first"):
            run_disposables(owner)
        run_disposables(owner)
