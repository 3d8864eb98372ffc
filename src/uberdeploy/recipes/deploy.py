# recipes/deploy.py
from __future__ import annotations

from typing import List

from ..coerce import config_flag
from ..errors import ConfigValueError
from ..registry import TaskRegistry
from ..runner import TaskContext

STRATEGIES = ("remote_cache", "checkout")


def setup(ctx: TaskContext) -> None:
    deploy_to = ctx.fetch("deploy_to")
    shared = ctx.fetch("shared_path")
    dirs = [
        deploy_to,
        ctx.fetch("releases_path"),
        shared,
        f"{shared}/config",
        f"{shared}/log",
        f"{shared}/pids",
        f"{shared}/system",
    ]
    ctx.executor.run_remote("mkdir -p " + " ".join(dirs))


def checkout_command(ctx: TaskContext) -> str:
    """Shell command that puts the configured branch into release_path."""
    strategy = str(ctx.fetch("deploy_via"))
    repository = ctx.fetch("repository")
    branch = ctx.fetch("branch")
    release = ctx.fetch("release_path")
    submodules = config_flag(ctx.fetch("git_enable_submodules"))

    if strategy == "remote_cache":
        cached = f"{ctx.fetch('shared_path')}/cached-copy"
        cmd = (
            f"if [ -d {cached} ]; then "
            f"cd {cached} && git fetch -q origin && git reset -q --hard origin/{branch}; "
            f"else git clone -q -b {branch} {repository} {cached}; fi"
        )
        if submodules:
            cmd += f" && cd {cached} && git submodule -q update --init --recursive"
        return cmd + f" && cp -RPp {cached} {release}"

    if strategy == "checkout":
        cmd = f"git clone -q -b {branch} {repository} {release}"
        if submodules:
            cmd += f" && cd {release} && git submodule -q update --init --recursive"
        return cmd

    raise ConfigValueError(key="deploy_via", value=strategy, message=f"expected one of {list(STRATEGIES)}")


def update_code(ctx: TaskContext) -> None:
    ctx.executor.run_remote(checkout_command(ctx))
    ctx.invoke("deploy:finalize_update")


def finalize_update(ctx: TaskContext) -> None:
    release = ctx.fetch("release_path")
    shared = ctx.fetch("shared_path")
    ctx.executor.run_remote(" && ".join([
        f"chmod -R g+w {release}",
        f"rm -rf {release}/log {release}/public/system {release}/tmp/pids",
        f"mkdir -p {release}/public {release}/tmp",
        f"ln -s {shared}/log {release}/log",
        f"ln -s {shared}/system {release}/public/system",
        f"ln -s {shared}/pids {release}/tmp/pids",
    ]))


def symlink_shared(ctx: TaskContext) -> None:
    shared = ctx.fetch("shared_path")
    release = ctx.fetch("release_path")
    ctx.executor.run_remote(f"ln -nfs {shared}/config/database.yml {release}/config/database.yml")


def create_symlink(ctx: TaskContext) -> None:
    current = ctx.fetch("current_path")
    ctx.executor.run_remote(f"rm -f {current} && ln -s {ctx.fetch('release_path')} {current}")


def update(ctx: TaskContext) -> None:
    ctx.invoke("deploy:update_code")
    ctx.invoke("deploy:create_symlink")


def deploy(ctx: TaskContext) -> None:
    ctx.invoke("deploy:update")
    ctx.invoke("deploy:restart")


def stale_releases(releases: List[str], keep: int) -> List[str]:
    """Oldest releases beyond `keep`; release names sort chronologically."""
    ordered = sorted(r for r in releases if r)
    if keep < 1 or len(ordered) <= keep:
        return []
    return ordered[:-keep]


def cleanup(ctx: TaskContext) -> None:
    releases_path = ctx.fetch("releases_path")
    keep = int(ctx.fetch("keep_releases"))
    listing = ctx.executor.capture_remote(f"ls -1 {releases_path}")
    stale = stale_releases(listing.decode("utf-8").split(), keep)

    if not stale:
        ctx.console.print_info(f"    no old releases to clean up (keeping {keep})")
        return
    paths = " ".join(f"{releases_path}/{r}" for r in stale)
    ctx.executor.run_remote(f"rm -rf {paths}")


def _svc(flag: str):
    def body(ctx: TaskContext) -> None:
        ctx.executor.run_remote(f"svc {flag} {ctx.fetch('home')}/service/rails-{ctx.fetch('application')}")
    return body


def register(registry: TaskRegistry) -> None:
    registry.define_task("", "deploy", deploy, "Update the code and restart the app")
    with registry.namespace("deploy"):
        registry.task("setup", "Create the directory layout on the host")(setup)
        registry.task("update_code", "Check out the code into a new release")(update_code)
        registry.task("finalize_update", "Link shared dirs into the release")(finalize_update)
        registry.task("symlink_shared", "Link shared database.yml into the release")(symlink_shared)
        registry.task("create_symlink", "Point current at the new release")(create_symlink)
        registry.task("update", "update_code + create_symlink")(update)
        registry.task("cleanup", "Remove releases beyond keep_releases")(cleanup)
        registry.task("start", "Start the supervised app")(_svc("-u"))
        registry.task("stop", "Stop the supervised app")(_svc("-d"))
        registry.task("restart", "Restart the supervised app")(_svc("-du"))
