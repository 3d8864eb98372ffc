# recipes/templates.py
# Remote artifacts consumed by daemontools and apache. Their text is a
# compatibility surface: keep it byte-for-byte stable.
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config import ConfigStore


@dataclass(frozen=True)
class ServiceSettings:
    user: str
    application: str
    home: str
    deploy_to: str
    rvm_ruby_string: str
    passenger_port: int
    domain: Optional[str] = None

    @classmethod
    def from_config(cls, config: ConfigStore) -> "ServiceSettings":
        return cls(
            user=config.get("user"),
            application=config.get("application"),
            home=config.get("home"),
            deploy_to=config.get("deploy_to"),
            rvm_ruby_string=config.get("rvm_ruby_string"),
            passenger_port=config.get("passenger_port"),
            domain=config.get("domain"),
        )

    @property
    def run_dir(self) -> str:
        return f"{self.home}/etc/run-rails-{self.application}"

    @property
    def service_dir(self) -> str:
        return f"{self.home}/service/rails-{self.application}"

    @property
    def web_root(self) -> str:
        if self.domain:
            return f"/var/www/virtual/{self.user}/{self.domain}"
        return f"{self.home}/html"


def daemon_script(s: ServiceSettings) -> str:
    return (
        "#!/bin/bash\n"
        f"export HOME={s.home}\n"
        "source $HOME/.bash_profile\n"
        f"cd {s.deploy_to}/current\n"
        f"rvm use {s.rvm_ruby_string}\n"
        f"exec bundle exec passenger start -p {s.passenger_port} -e production 2>&1\n"
    )


def log_script(s: ServiceSettings) -> str:
    return (
        "#!/bin/sh\n"
        "exec multilog t ./main\n"
    )


def htaccess(s: ServiceSettings) -> str:
    return (
        "RewriteEngine On\n"
        f"RewriteRule ^(.*)$ http://localhost:{s.passenger_port}/$1 [P]\n"
    )
