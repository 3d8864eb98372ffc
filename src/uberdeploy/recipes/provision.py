# recipes/provision.py
from __future__ import annotations

from ..registry import TaskRegistry
from ..runner import TaskContext
from .templates import ServiceSettings, daemon_script, htaccess, log_script


def setup_svscan(ctx: TaskContext) -> None:
    # uberspace-setup-svscan exits non-zero when svscan is already set up
    ctx.executor.run_remote("uberspace-setup-svscan ; echo 0")


def setup_daemon(ctx: TaskContext) -> None:
    s = ServiceSettings.from_config(ctx.config)
    ex = ctx.executor

    ex.run_remote(f"mkdir -p {s.run_dir}")
    ex.run_remote(f"mkdir -p {s.run_dir}/log")
    ex.put(daemon_script(s), f"{s.run_dir}/run")
    ex.put(log_script(s), f"{s.run_dir}/log/run")
    ex.run_remote(f"chmod +x {s.run_dir}/run")
    ex.run_remote(f"chmod +x {s.run_dir}/log/run")
    ex.run_remote(f"ln -nfs {s.run_dir} {s.service_dir}")


def setup_reverse_proxy(ctx: TaskContext) -> None:
    s = ServiceSettings.from_config(ctx.config)
    path = s.web_root

    ctx.executor.run_remote(f"mkdir -p {path}")
    ctx.executor.put(htaccess(s), f"{path}/.htaccess")
    ctx.executor.run_remote(f"chmod +r {path}/.htaccess")


def install_rvm(ctx: TaskContext) -> None:
    ctx.executor.run_remote("curl -sSL https://get.rvm.io | bash -s stable")


def install_ruby(ctx: TaskContext) -> None:
    ruby_string = ctx.fetch("rvm_ruby_string")
    ruby = ruby_string.split("@", 1)[0]
    ctx.executor.run_remote(
        f"rvm {ctx.fetch('rvm_install_ruby')} {ruby} && rvm use --create {ruby_string}"
    )


def bundle_install(ctx: TaskContext) -> None:
    release = ctx.fetch("release_path")
    shared = ctx.fetch("shared_path")
    ctx.executor.run_remote(
        f"cd {release} && bundle install --gemfile {release}/Gemfile "
        f"--path {shared}/bundle --deployment --quiet --without development test"
    )


def register(registry: TaskRegistry) -> None:
    with registry.namespace("uberspace"):
        registry.task("setup_svscan", "Enable the per-user svscan supervisor")(setup_svscan)
    with registry.namespace("daemontools"):
        registry.task("setup_daemon", "Install service and log run scripts")(setup_daemon)
    with registry.namespace("apache"):
        registry.task("setup_reverse_proxy", "Proxy the web root to passenger")(setup_reverse_proxy)
    with registry.namespace("rvm"):
        registry.task("install_rvm", "Install rvm for the deploy user")(install_rvm)
        registry.task("install_ruby", "Install the configured ruby and gemset")(install_ruby)
    with registry.namespace("bundle"):
        registry.task("install", "Install gems into the shared bundle")(bundle_install)
