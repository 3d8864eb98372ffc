# runner.py
from __future__ import annotations

import runpy
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional

from .config import ConfigStore
from .dag import expand
from .errors import HookCycleError, RecipeLoadError
from .executor import RemoteExecutor
from .overrides import EnvOverrides
from .registry import TaskRegistry
from .ui.console import Console, get_console

Clock = Callable[[], datetime]


@dataclass
class Deployment:
    """
    What a recipe file configures: the config store and the task registry.

    A recipe defines `configure(deployment)` and uses the passthroughs below:

        def configure(d):
            d.set("user", "alice")
            d.after("deploy", "notify:slack")
    """
    config: ConfigStore = field(default_factory=ConfigStore)
    registry: TaskRegistry = field(default_factory=TaskRegistry)

    def set(self, key: str, value: Any) -> None:
        self.config.set(key, value)

    def fetch(self, key: str) -> Any:
        return self.config.get(key)

    def task(self, name: str, description: str | None = None):
        return self.registry.task(name, description)

    def namespace(self, ns: str):
        return self.registry.namespace(ns)

    def before(self, trigger: str, *tasks: str) -> None:
        self.registry.before(trigger, *tasks)

    def after(self, trigger: str, *tasks: str) -> None:
        self.registry.after(trigger, *tasks)


@dataclass
class TaskContext:
    """Everything a task body may touch."""
    config: ConfigStore
    executor: RemoteExecutor
    overrides: EnvOverrides
    orchestrator: "Orchestrator"
    console: Console

    def now(self) -> datetime:
        return self.orchestrator.clock()

    def fetch(self, key: str) -> Any:
        return self.config.get(key)

    def invoke(self, name: str) -> List[str]:
        """Run another task together with its hooks."""
        return self.orchestrator.run(name)


class Orchestrator:
    """
    Expands a task through the hook graph and runs the bodies one by one.

    The first body that raises stops the run; nothing already executed is
    rolled back.
    """

    def __init__(
        self,
        registry: TaskRegistry,
        config: ConfigStore,
        executor: RemoteExecutor,
        *,
        overrides: Optional[EnvOverrides] = None,
        clock: Clock = datetime.now,
        console: Optional[Console] = None,
    ):
        self.registry = registry
        self.config = config
        self.executor = executor
        self.overrides = overrides if overrides is not None else EnvOverrides()
        self.clock = clock
        self.console = console or get_console()
        self._active: List[str] = []

    def run(self, name: str) -> List[str]:
        order = expand(self.registry, name)
        executed: List[str] = []
        ctx = TaskContext(
            config=self.config,
            executor=self.executor,
            overrides=self.overrides,
            orchestrator=self,
            console=self.console,
        )

        for task_name in order:
            if task_name in self._active:
                raise HookCycleError(path=self._active + [task_name])
            t = self.registry.get(task_name)
            self.console.print_task_start(task_name)
            self._active.append(task_name)
            try:
                t.body(ctx)
            finally:
                self._active.pop()
            executed.append(task_name)

        return executed


# ----------------------------------------------------------------------
# Recipe loading (local file)
# ----------------------------------------------------------------------

def load_recipe(path: str | Path, deployment: Deployment) -> Deployment:
    """
    Load a recipe from a python file path into `deployment`.

    The file must define configure(deployment).
    """
    recipe_path = Path(path).expanduser().resolve()
    if not recipe_path.exists():
        raise RecipeLoadError(path=str(recipe_path), message="file not found")
    if recipe_path.suffix != ".py":
        raise RecipeLoadError(path=str(recipe_path), message=f"recipe must be a .py file, got: {recipe_path.name}")

    module_name = f"uberdeploy_recipe_{recipe_path.stem}"
    globals_dict = runpy.run_path(str(recipe_path), run_name=module_name)

    configure = globals_dict.get("configure")
    if not callable(configure):
        raise RecipeLoadError(
            path=str(recipe_path),
            message="recipe must define configure(deployment)",
        )
    configure(deployment)
    return deployment
