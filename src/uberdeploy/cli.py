# cli.py
from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import click

from uberdeploy.coerce import config_flag
from uberdeploy.config import parse_assignment
from uberdeploy.dag import format_hook_tree
from uberdeploy.errors import DeployError, LocalFilesystemError, MissingRequiredConfig, RemoteCommandFailed
from uberdeploy.executor import RemoteExecutor, SSHExecutor
from uberdeploy.overrides import EnvOverrides
from uberdeploy.recipes.defaults import default_deployment
from uberdeploy.runner import Deployment, Orchestrator, load_recipe
from uberdeploy.ui.console import Console, get_console, set_console

RECIPE_CANDIDATES = ("config/deploy.py", "deploy.py")

ERROR_TITLES = {
    MissingRequiredConfig: "Missing required configuration",
    RemoteCommandFailed: "Remote command failed",
    LocalFilesystemError: "Local write failed",
}

WARNING_PREFIX = "WARNING: "


def find_recipe(recipe_arg: str | None) -> Optional[Path]:
    """
    Resolve the recipe file from --recipe or the conventional locations.

    Returns None when no recipe is given and none is found; the stock
    defaults then apply and required keys fail when first read.
    """
    if recipe_arg:
        path = Path(recipe_arg)
        if not path.exists() and path.suffix != ".py":
            path = Path(str(path) + ".py")
        return path

    for candidate in RECIPE_CANDIDATES:
        path = Path(candidate)
        if path.exists():
            return path
    return None


def build_executor(deployment: Deployment, dry_run: bool) -> RemoteExecutor:
    config = deployment.config
    return SSHExecutor(
        config["server"],
        config["user"],
        forward_agent=config_flag(config.fetch("forward_agent", True)),
        pty=config_flag(config.fetch("pty", True)),
        dry_run=dry_run,
    )


def _state(ctx: click.Context) -> Dict[str, Any]:
    """
    Per-process state, built once: console, deployment (defaults + recipe +
    --set overrides) and the environment overrides.

    Task subcommands are resolved before the group callback runs, so both
    paths go through here. Eager options such as --help can ask for the
    task list before every group option is parsed, so the cached state is
    rebuilt once more options have arrived.
    """
    root = ctx.find_root()
    params = root.params
    parsed = frozenset(params)
    if root.meta.get("uberdeploy.parsed") == parsed:
        return root.meta["uberdeploy"]

    obj = root.obj if isinstance(root.obj, dict) else {}
    console = Console(debug=bool(params.get("debug", False)))
    set_console(console)

    clock = obj.get("clock", datetime.now)
    deployment = default_deployment(clock)
    recipe = find_recipe(params.get("recipe"))
    if recipe is not None:
        load_recipe(recipe, deployment)
    for assignment in params.get("assignments") or ():
        try:
            key, value = parse_assignment(assignment)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--set") from e
        deployment.set(key, value)

    state = {
        "console": console,
        "deployment": deployment,
        "recipe": str(recipe) if recipe else None,
        "overrides": EnvOverrides.from_environ(),
        "clock": clock,
        "dry_run": bool(params.get("dry_run", False)),
        "executor_factory": obj.get("executor_factory", build_executor),
    }
    root.meta["uberdeploy"] = state
    root.meta["uberdeploy.parsed"] = parsed
    return state


def _fail(ctx: click.Context, exc: BaseException, debug: bool) -> None:
    console = get_console()
    if isinstance(exc, DeployError):
        title = ERROR_TITLES.get(type(exc), type(exc).__name__)
        message, *rest = str(exc).splitlines()
        details = [line for line in rest if not line.startswith(WARNING_PREFIX)]
        console.print_error(title, message, details=details or None)
        for line in rest:
            if line.startswith(WARNING_PREFIX):
                console.print_warning(line[len(WARNING_PREFIX):])
        if debug:
            console.print_exception(exc)
    else:
        console.print_exception(exc)
    ctx.exit(1)


def _run_task(ctx: click.Context, name: str) -> None:
    state = _state(ctx)
    console: Console = state["console"]
    deployment: Deployment = state["deployment"]

    try:
        executor = state["executor_factory"](deployment, state["dry_run"])
        host = getattr(executor, "target", None) or str(deployment.config["server"])
        console.print_run_started(task=name, host=host, recipe=state["recipe"])

        orchestrator = Orchestrator(
            deployment.registry,
            deployment.config,
            executor,
            overrides=state["overrides"],
            clock=state["clock"],
            console=console,
        )
        executed = orchestrator.run(name)
        console.print_results(executed)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        ctx.exit(130)
    except Exception as e:
        _fail(ctx, e, console.debug)


def _task_command(name: str, description: str | None) -> click.Command:
    @click.command(name=name, help=description)
    @click.pass_context
    def command(ctx):
        _run_task(ctx, name)

    return command


class TaskGroup(click.Group):
    """A click group whose extra subcommands are the registered tasks."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        builtins = super().list_commands(ctx)
        try:
            tasks = sorted(_state(ctx)["deployment"].registry.tasks)
        except DeployError:
            tasks = []
        return builtins + [t for t in tasks if t not in builtins]

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        try:
            registry = _state(ctx)["deployment"].registry
        except DeployError as e:
            _fail(ctx, e, bool(ctx.params.get("debug", False)))
            return None
        if cmd_name not in registry:
            return None
        return _task_command(cmd_name, registry.get(cmd_name).description)


@click.group(cls=TaskGroup)
@click.option(
    "--recipe",
    default=None,
    is_eager=True,
    help="Recipe file (defaults to config/deploy.py or deploy.py)",
)
@click.option(
    "--set",
    "assignments",
    multiple=True,
    is_eager=True,
    metavar="KEY=VALUE",
    help="Override a config value",
)
@click.option("--dry-run", is_flag=True, default=False, help="Print commands instead of running them")
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, recipe, assignments, dry_run, debug):
    """uberdeploy: deploy a Rails app to a single Uberspace host."""
    ctx.ensure_object(dict)
    try:
        _state(ctx)
    except DeployError as e:
        _fail(ctx, e, debug)


@cli.command()
@click.argument("task", required=False)
@click.pass_context
def tasks(ctx, task):
    """List tasks, or show the hook expansion of TASK."""
    state = _state(ctx)
    console: Console = state["console"]
    registry = state["deployment"].registry

    if task is None:
        rows = [(name, t.description) for name, t in sorted(registry.tasks.items())]
        console.print_task_list(rows)
        return

    if task not in registry:
        console.print_error("Unknown task", f"No task named '{task}'", suggestion="Run `uberdeploy tasks` to list them.")
        ctx.exit(1)
    console.print_task_tree(format_hook_tree(registry, task))


def main() -> None:
    cli(prog_name="uberdeploy")


if __name__ == "__main__":
    sys.exit(main())
