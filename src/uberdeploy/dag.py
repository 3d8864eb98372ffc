# dag.py
from __future__ import annotations

from typing import List

from .errors import HookCycleError
from .model import Phase
from .registry import TaskRegistry


def expand(registry: TaskRegistry, root: str) -> List[str]:
    """
    Expand a task into its linear execution order.

    For every task T reached (starting with `root`): all `before` hooks of T
    (registration order, each expanded the same way), then T, then all
    `after` hooks of T. Hooks are inserted around a single path; unrelated
    tasks are never reordered.

    Raises:
      UnknownTaskError: a task or hooked task is not registered
      HookCycleError:   a task is reached again through its own hooks
    """
    order: List[str] = []

    def visit(name: str, path: List[str]) -> None:
        if name in path:
            raise HookCycleError(path=path + [name])
        registry.get(name)  # fail early on unknown names
        path = path + [name]

        for hooked in registry.hooks_for(name, Phase.BEFORE):
            visit(hooked, path)
        order.append(name)
        for hooked in registry.hooks_for(name, Phase.AFTER):
            visit(hooked, path)

    visit(root, [])
    return order


def format_hook_tree(registry: TaskRegistry, root: str) -> List[str]:
    """
    Render the hook expansion of `root` as tree lines.

    Cycles are marked instead of followed, so this is safe to call on a
    registry that expand() would reject.
    """
    lines: List[str] = [root]

    def render(name: str, prefix: str, path: set[str]) -> None:
        children = [(Phase.BEFORE, h) for h in registry.hooks_for(name, Phase.BEFORE)]
        children += [(Phase.AFTER, h) for h in registry.hooks_for(name, Phase.AFTER)]
        for idx, (phase, child) in enumerate(children):
            is_last = idx == len(children) - 1
            connector = "└─" if is_last else "├─"
            marker = "" if child in registry else " (undefined)"
            lines.append(f"{prefix}{connector} {phase.value} {child}{marker}")
            if child in path:
                lines.append(f"{prefix}{'   ' if is_last else '│  '}↻ cycle")
                continue
            render(child, f"{prefix}{'   ' if is_last else '│  '}", path | {child})

    render(root, "", {root})
    return lines
