# recipes/files.py
from __future__ import annotations

from ..executor import TransferMode
from ..registry import TaskRegistry
from ..rotation import time_pathsafe
from ..runner import TaskContext

DEFAULT_DATA_DIR = "public/system"


def dump(ctx: TaskContext) -> None:
    """Download the uploaded files directory (default "public/system") as files.<timestamp>."""
    data_folder = ctx.overrides.data_dir or DEFAULT_DATA_DIR
    via = TransferMode.parse(ctx.overrides.via)
    local_path = ".".join(["files", time_pathsafe(ctx.now())])
    path = "/".join([ctx.fetch("current_path"), data_folder])

    ctx.executor.download(path, local_path, recursive=True, via=via)


def register(registry: TaskRegistry) -> None:
    with registry.namespace("files"):
        registry.task("dump")(dump)
