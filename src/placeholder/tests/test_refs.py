"""Tests for back-references and task markers."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from placeholder.core import BackRef, Task, is_task, task


def test_backref_item_set_and_get() -> None:
    data = {"a": 1}
    ref = BackRef(data, "a")
    ref.set(2)
    assert data == {"a": 2}
    assert ref.get() == 2


def test_backref_attr_set() -> None:
    ns = SimpleNamespace(x=None)
    BackRef(ns, "x", "attr").set("filled")
    assert ns.x == "filled"


def test_backref_location_identity() -> None:
    data = {"a": 1}
    assert BackRef(data, "a").location == BackRef(data, "a").location
    assert BackRef(data, "a").location != BackRef({"a": 1}, "a").location


def test_task_marker() -> None:
    t = Task(lambda: 42)
    assert t() == 42
    assert task(t) is t
    with pytest.raises(TypeError):
        Task(42)  # type: ignore[arg-type]


def test_task_decorator() -> None:
    @task
    def load() -> str:
        return "loaded"
    
    assert isinstance(load, Task)
    assert load() == "loaded"


def test_is_task_modes() -> None:
    assert is_task(lambda: 1)
    assert is_task(Task(lambda: 1))
    assert not is_task(lambda: 1, strict=True)
    assert is_task(Task(lambda: 1), strict=True)
    assert not is_task(int)
    assert not is_task("text")
    assert not is_task(None)
