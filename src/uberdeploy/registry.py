# registry.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional

from .errors import UnknownTaskError
from .model import Hook, Phase, Task, TaskBody, join_name, split_name


class TaskRegistry:
    """
    Named, namespaced tasks plus the before/after hook edges between them.

    Hooks on the same trigger and phase keep registration order.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}
        self._hooks: List[Hook] = []
        self._namespace: List[str] = []

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def define_task(
        self,
        namespace: str,
        name: str,
        body: TaskBody,
        description: str | None = None,
    ) -> Task:
        t = Task(namespace=namespace, name=name, body=body, description=description)
        # re-registration overwrites
        self._tasks[t.full_name] = t
        return t

    def task(self, name: str, description: str | None = None) -> Callable[[TaskBody], TaskBody]:
        """Decorator form; `name` is relative to the active namespace()."""
        def decorator(func: TaskBody) -> TaskBody:
            ns, short = split_name(self._qualify(name))
            doc_lines = (func.__doc__ or "").strip().splitlines()
            self.define_task(ns, short, func, description or (doc_lines[0] if doc_lines else None))
            return func

        return decorator

    @contextmanager
    def namespace(self, ns: str) -> Iterator["TaskRegistry"]:
        self._namespace.append(ns)
        try:
            yield self
        finally:
            self._namespace.pop()

    def _qualify(self, name: str) -> str:
        if not self._namespace:
            return name
        return join_name(":".join(self._namespace), name)

    def get(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name=name, known=sorted(self._tasks)) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    @property
    def tasks(self) -> Dict[str, Task]:
        return dict(self._tasks)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def add_hook(self, trigger: str, phase: Phase | str, task: str) -> Hook:
        hook = Hook(trigger=trigger, phase=Phase(phase), task=task)
        self._hooks.append(hook)
        return hook

    def before(self, trigger: str, *tasks: str) -> None:
        for t in tasks:
            self.add_hook(trigger, Phase.BEFORE, t)

    def after(self, trigger: str, *tasks: str) -> None:
        for t in tasks:
            self.add_hook(trigger, Phase.AFTER, t)

    def hooks_for(self, trigger: str, phase: Optional[Phase] = None) -> List[str]:
        return [
            h.task
            for h in self._hooks
            if h.trigger == trigger and (phase is None or h.phase == phase)
        ]
