# conftest.py
from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from uberdeploy.errors import LocalCommandFailed, RemoteCommandFailed
from uberdeploy.executor import RemoteExecutor, TransferMode
from uberdeploy.recipes.defaults import default_deployment
from uberdeploy.ui.console import Console, set_console

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0)


class RecordingExecutor(RemoteExecutor):
    """
    Fake target host: records every call in order.

    captures: command -> stdout bytes for capture_remote
    fail_on:  substrings; a command containing one fails with exit code 1
    remote_root: local dir standing in for the remote filesystem (download)
    """

    def __init__(
        self,
        captures: Optional[Dict[str, bytes]] = None,
        fail_on: Iterable[str] = (),
        remote_root: Optional[Path] = None,
    ):
        self.calls: List[tuple] = []
        self.captures = dict(captures or {})
        self.fail_on = list(fail_on)
        self.remote_root = remote_root

    def _check(self, command: str, local: bool = False) -> None:
        if any(pat in command for pat in self.fail_on):
            if local:
                raise LocalCommandFailed(exit_code=1, command=command)
            raise RemoteCommandFailed(exit_code=1, command=command)

    def run_remote(self, command: str) -> None:
        self.calls.append(("remote", command))
        self._check(command)

    def capture_remote(self, command: str) -> bytes:
        self.calls.append(("capture", command))
        self._check(command)
        return self.captures.get(command, b"")

    def run_local(self, command: str) -> None:
        self.calls.append(("local", command))
        self._check(command, local=True)

    def put(self, content: str, remote_path: str) -> None:
        self.calls.append(("put", remote_path, content))

    def download(self, remote_path, local_path, *, recursive=False, via=TransferMode.SCP) -> None:
        self.calls.append(("download", remote_path, local_path, recursive, TransferMode(via)))
        if self.remote_root is not None:
            source = self.remote_root / remote_path.lstrip("/")
            if recursive:
                shutil.copytree(source, local_path)
            else:
                shutil.copyfile(source, local_path)

    def commands(self, kind: str) -> List[str]:
        return [c[1] for c in self.calls if c[0] == kind]


@pytest.fixture(autouse=True)
def fresh_console():
    set_console(Console())
    yield


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def deployment(clock):
    d = default_deployment(clock)
    d.set("user", "alice")
    d.set("application", "shop")
    d.set("repository", "git@example.com:alice/shop.git")
    d.set("server", "lyra.uberspace.de")
    d.set("passenger_port", 61234)
    return d
