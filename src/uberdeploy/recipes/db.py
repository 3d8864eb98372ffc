# recipes/db.py
from __future__ import annotations

import os
import shlex
from dataclasses import dataclass

from ..coerce import RAILS_ENVIRONMENTS, coerce_choice, env_flag
from ..errors import LocalFilesystemError
from ..overrides import EnvOverrides
from ..registry import TaskRegistry
from ..rotation import time_pathsafe, to_past_filename
from ..runner import TaskContext

DEFAULT_LOCAL_RAILS_ENV = "development"


@dataclass(frozen=True)
class DumpJob:
    """One resolved db:dump invocation. Built fresh every run, never stored."""
    root_dir: str
    remote_dump_env: str
    remote_dump_file: str
    remote_rails_env: str
    local_load_env: str
    local_rails_env: str
    load_to_db: bool
    local_destination: str
    backup_local: bool
    keep_remote_dump: bool

    @classmethod
    def resolve(cls, root_dir: str, overrides: EnvOverrides, stamp: str) -> "DumpJob":
        load = coerce_choice(overrides.load or "false", RAILS_ENVIRONMENTS)
        return cls(
            root_dir=root_dir,
            remote_dump_env=overrides.remote_dump_env or "",
            remote_dump_file=overrides.remote_dump_file or "/".join([root_dir, "db", "data.yml"]),
            remote_rails_env=overrides.rails_env or "production",
            local_load_env=overrides.load_env or "",
            local_rails_env=load.matched or DEFAULT_LOCAL_RAILS_ENV,
            load_to_db=load.value,
            local_destination=overrides.dump_file or f"db/data.{stamp}.yml",
            backup_local=env_flag(overrides.backup, "true"),
            keep_remote_dump=env_flag(overrides.keep_remote_dump, "false"),
        )


def dump_script(job: DumpJob, stamp: str) -> str:
    """
    Remote script: rotate a leftover dump out of the way, then regenerate it,
    so a failed dump can never be mistaken for the previous one.
    """
    remote_file = shlex.quote(job.remote_dump_file)
    rotated = shlex.quote(to_past_filename(job.remote_dump_file, stamp))
    lines = [
        f"cd {shlex.quote(job.root_dir)}",
        f"[ -f {remote_file} ] && mv {remote_file} {rotated}",
        f"bundle exec rake db:data:dump RAILS_ENV={job.remote_rails_env} {job.remote_dump_env}",
    ]
    return "; ".join(line.strip() for line in lines)


def load_command(job: DumpJob) -> str:
    return f"bundle exec rake db:data:load RAILS_ENV={job.local_rails_env} {job.local_load_env}".strip()


def write_local(job: DumpJob, data: bytes, stamp: str) -> None:
    """Write the captured dump, rotating an existing destination first when backups are on."""
    dest = job.local_destination
    try:
        if job.backup_local and os.path.isfile(dest):
            os.rename(dest, to_past_filename(dest, stamp))
        with open(dest, "wb") as f:
            f.write(data)
    except OSError as e:
        raise LocalFilesystemError(path=dest, message=e.strerror or str(e)) from e


def dump(ctx: TaskContext) -> None:
    """
    Dump the remote database to a local YAML file, optionally loading it.

    Env: REMOTE_DUMP_ENV, REMOTE_DUMP_FILE, RAILS_ENV, LOAD_ENV, LOAD,
         DUMP_FILE, BACKUP (default true), KEEP_REMOTE_DUMP (default false)
    """
    stamp = time_pathsafe(ctx.now())
    job = DumpJob.resolve(ctx.fetch("current_path"), ctx.overrides, stamp)
    ex = ctx.executor
    remote_file = shlex.quote(job.remote_dump_file)

    ex.run_remote(dump_script(job, stamp))
    data = ex.capture_remote(f"cat {remote_file}")
    if not job.keep_remote_dump:
        # the remote copy is gone from here on; a failing local write below loses it
        ex.run_remote(f"rm {remote_file}")

    write_local(job, data, stamp)
    ctx.console.print_info(f"    wrote {len(data)} bytes to {job.local_destination}")

    if job.load_to_db:
        ex.run_local(load_command(job))


def register(registry: TaskRegistry) -> None:
    with registry.namespace("db"):
        registry.task("dump")(dump)
