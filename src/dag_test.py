from __future__ import annotations

import pytest

from uberdeploy.dag import expand, format_hook_tree
from uberdeploy.errors import HookCycleError, UnknownTaskError
from uberdeploy.model import Phase
from uberdeploy.registry import TaskRegistry


def _noop(ctx):
    pass


def _registry(*names: str) -> TaskRegistry:
    r = TaskRegistry()
    for name in names:
        ns, _, short = name.rpartition(":")
        r.define_task(ns, short, _noop)
    return r


def test_before_and_after_hooks_wrap_the_trigger():
    r = _registry("T", "B1", "B2", "A1")
    r.add_hook("T", Phase.BEFORE, "B1")
    r.add_hook("T", Phase.BEFORE, "B2")
    r.add_hook("T", Phase.AFTER, "A1")

    assert expand(r, "T") == ["B1", "B2", "T", "A1"]


def test_nested_hooks_expand_in_place():
    r = _registry("T", "B1", "B2", "A1", "X", "Y")
    r.before("T", "B1", "B2")
    r.after("T", "A1")
    r.before("B1", "X")
    r.after("B1", "Y")

    assert expand(r, "T") == ["X", "B1", "Y", "B2", "T", "A1"]


def test_hooks_keep_registration_order_across_phases():
    r = _registry("deploy:setup", "a", "b", "c")
    r.add_hook("deploy:setup", "after", "b")
    r.add_hook("deploy:setup", "before", "a")
    r.add_hook("deploy:setup", "after", "c")

    assert expand(r, "deploy:setup") == ["a", "deploy:setup", "b", "c"]


def test_hooks_on_other_tasks_are_ignored():
    r = _registry("T", "U", "hook")
    r.after("U", "hook")
    assert expand(r, "T") == ["T"]


def test_same_task_may_run_twice_through_separate_hooks():
    r = _registry("T", "B", "shared")
    r.before("T", "B")
    r.after("B", "shared")
    r.after("T", "shared")

    assert expand(r, "T") == ["B", "shared", "T", "shared"]


def test_cycle_is_rejected():
    r = _registry("a", "b")
    r.after("a", "b")
    r.before("b", "a")

    with pytest.raises(HookCycleError) as exc:
        expand(r, "a")
    assert exc.value.path == ["a", "b", "a"]


def test_unknown_hooked_task():
    r = _registry("deploy")
    r.after("deploy", "deploy:cleanup")

    with pytest.raises(UnknownTaskError) as exc:
        expand(r, "deploy")
    assert exc.value.name == "deploy:cleanup"


def test_unknown_root_task():
    with pytest.raises(UnknownTaskError):
        expand(TaskRegistry(), "deploy")


def test_format_hook_tree_marks_cycles():
    r = _registry("a", "b", "c")
    r.before("a", "b")
    r.after("a", "c")
    r.after("b", "a")

    lines = format_hook_tree(r, "a")
    assert lines[0] == "a"
    assert lines[1] == "├─ before b"
    assert any("↻ cycle" in line for line in lines)
    assert lines[-1] == "└─ after c"
