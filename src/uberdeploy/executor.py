# executor.py
from __future__ import annotations

import shlex
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from .errors import InvalidTransferMode, LocalCommandFailed, RemoteCommandFailed
from .ui.console import get_console


class TransferMode(str, Enum):
    SCP = "scp"
    SFTP = "sftp"

    @classmethod
    def parse(cls, raw: str | None) -> "TransferMode":
        value = (raw or cls.SCP.value).strip().lower()
        try:
            return cls(value)
        except ValueError:
            raise InvalidTransferMode(input=raw or "", allowed=[m.value for m in cls]) from None


class RemoteExecutor(ABC):
    """
    Boundary to the target host: remote commands, local commands and
    file transfer. Every failure is fatal to the run.
    """

    @abstractmethod
    def run_remote(self, command: str) -> None:
        """Run on the target host; raises RemoteCommandFailed on non-zero exit."""

    @abstractmethod
    def capture_remote(self, command: str) -> bytes:
        """Run on the target host and return stdout."""

    @abstractmethod
    def run_local(self, command: str) -> None:
        """Run on the operator's machine; raises LocalCommandFailed on non-zero exit."""

    @abstractmethod
    def put(self, content: str, remote_path: str) -> None:
        """Write `content` as a file on the target host."""

    @abstractmethod
    def download(
        self,
        remote_path: str,
        local_path: str,
        *,
        recursive: bool = False,
        via: TransferMode = TransferMode.SCP,
    ) -> None:
        """Copy a remote path to local storage."""


class SSHExecutor(RemoteExecutor):
    """
    RemoteExecutor backed by the system ssh/scp/sftp clients.

    With dry_run=True commands are only echoed; captures return b"".
    """

    def __init__(
        self,
        host: str,
        user: str,
        *,
        forward_agent: bool = True,
        pty: bool = True,
        dry_run: bool = False,
    ):
        self.host = host
        self.user = user
        self.forward_agent = forward_agent
        self.pty = pty
        self.dry_run = dry_run

    @property
    def target(self) -> str:
        return f"{self.user}@{self.host}"

    def _ssh_args(self, *, tty: bool) -> List[str]:
        args = ["ssh"]
        if self.forward_agent:
            args.append("-A")
        if tty and self.pty:
            args.append("-t")
        args.append(self.target)
        return args

    def run_remote(self, command: str) -> None:
        get_console().print_command("remote", command)
        if self.dry_run:
            return
        proc = subprocess.run([*self._ssh_args(tty=True), command])
        if proc.returncode != 0:
            raise RemoteCommandFailed(exit_code=proc.returncode, command=command)

    def capture_remote(self, command: str) -> bytes:
        get_console().print_command("capture", command)
        if self.dry_run:
            return b""
        # no tty: a pty would rewrite newlines in the captured bytes
        proc = subprocess.run([*self._ssh_args(tty=False), command], capture_output=True)
        if proc.returncode != 0:
            get_console().print_debug(proc.stderr.decode("utf-8", "replace")[-4000:])
            raise RemoteCommandFailed(exit_code=proc.returncode, command=command)
        return proc.stdout

    def run_local(self, command: str) -> None:
        get_console().print_command("local", command)
        if self.dry_run:
            return
        proc = subprocess.run(command, shell=True)
        if proc.returncode != 0:
            raise LocalCommandFailed(exit_code=proc.returncode, command=command)

    def put(self, content: str, remote_path: str) -> None:
        command = f"cat > {shlex.quote(remote_path)}"
        get_console().print_command("put", remote_path)
        if self.dry_run:
            return
        proc = subprocess.run(
            [*self._ssh_args(tty=False), command],
            input=content.encode("utf-8"),
            capture_output=True,
        )
        if proc.returncode != 0:
            raise RemoteCommandFailed(exit_code=proc.returncode, command=command)

    def download(
        self,
        remote_path: str,
        local_path: str,
        *,
        recursive: bool = False,
        via: TransferMode = TransferMode.SCP,
    ) -> None:
        args = [TransferMode(via).value]
        if recursive:
            args.append("-r")
        args += [f"{self.target}:{remote_path}", local_path]

        command = " ".join(args)
        get_console().print_command("download", command)
        if self.dry_run:
            return
        proc = subprocess.run(args)
        if proc.returncode != 0:
            raise RemoteCommandFailed(exit_code=proc.returncode, command=command)
