# recipes/defaults.py
from __future__ import annotations

import random
from datetime import datetime
from typing import Callable

from ..config import ConfigStore
from ..registry import TaskRegistry
from ..rotation import time_pathsafe
from ..runner import Deployment
from . import db, deploy, files, provision

EPHEMERAL_PORTS = (32768, 61000)


def register_config(config: ConfigStore, clock: Callable[[], datetime] = datetime.now) -> None:
    # required
    config.required("user", "Please configure your Uberspace user in config/deploy.py using d.set('user', <username>)")
    config.required("repository", "Please configure your code repository in config/deploy.py using d.set('repository', <repo uri>)")
    config.required("application", "Please name your application in config/deploy.py using d.set('application', <name>)")
    config.required("server", "Please configure your Uberspace host in config/deploy.py using d.set('server', <host>)")

    # optional
    config.set_default("domain", None)
    config.set_default("passenger_port", lambda: random.randint(*EPHEMERAL_PORTS))
    config.set_default("deploy_via", "remote_cache")
    config.set_default("git_enable_submodules", True)
    config.set_default("branch", "master")
    config.set_default("keep_releases", 3)
    config.set_default("db_pool", 5)

    # host presets
    config.set("deploy_to", lambda: f"/var/www/virtual/{config['user']}/rails/{config['application']}")
    config.set("home", lambda: f"/home/{config['user']}")
    config.set("use_sudo", False)
    config.set("rvm_type", "user")
    config.set("rvm_install_ruby", "install")
    config.set("rvm_ruby_string", lambda: f"ree@rails-{config['application']}")
    config.set("forward_agent", True)
    config.set("pty", True)

    # release layout
    config.set_default("current_dir", "current")
    config.set_default("releases_path", lambda: f"{config['deploy_to']}/releases")
    config.set_default("shared_path", lambda: f"{config['deploy_to']}/shared")
    config.set_default("current_path", lambda: "/".join([config["deploy_to"], config["current_dir"]]))
    config.set_default("release_name", lambda: time_pathsafe(clock()))
    config.set_default("release_path", lambda: f"{config['releases_path']}/{config['release_name']}")


def register_tasks(registry: TaskRegistry) -> None:
    deploy.register(registry)
    provision.register(registry)
    db.register(registry)
    files.register(registry)

    registry.before("deploy:setup", "rvm:install_rvm", "rvm:install_ruby")
    registry.after(
        "deploy:setup",
        "uberspace:setup_svscan",
        "daemontools:setup_daemon",
        "apache:setup_reverse_proxy",
    )
    registry.before("deploy:finalize_update", "deploy:symlink_shared")
    registry.after("deploy:finalize_update", "bundle:install")
    registry.after("deploy", "deploy:cleanup")


def default_deployment(clock: Callable[[], datetime] = datetime.now) -> Deployment:
    """A Deployment with the stock config defaults, recipes and hooks."""
    d = Deployment()
    register_config(d.config, clock)
    register_tasks(d.registry)
    return d
