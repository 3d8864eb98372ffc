# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from .runner import TaskContext


TaskBody = Callable[["TaskContext"], None]


class Phase(str, Enum):
    BEFORE = "before"
    AFTER = "after"


def split_name(name: str) -> tuple[str, str]:
    """'db:dump' -> ('db', 'dump'); 'deploy' -> ('', 'deploy')."""
    namespace, _, short = name.rpartition(":")
    return namespace, short


def join_name(namespace: str, name: str) -> str:
    return f"{namespace}:{name}" if namespace else name


@dataclass(frozen=True)
class Task:
    """A named unit of work inside a namespace."""
    namespace: str
    name: str
    body: TaskBody = field(compare=False)
    description: Optional[str] = None

    @property
    def full_name(self) -> str:
        return join_name(self.namespace, self.name)


@dataclass(frozen=True)
class Hook:
    """Run `task` immediately before/after `trigger`."""
    trigger: str
    phase: Phase
    task: str
