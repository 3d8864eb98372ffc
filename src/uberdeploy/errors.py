# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


class DeployError(Exception):
    """Base class for every fatal, operator-facing failure of a run."""


@dataclass
class MissingRequiredConfig(DeployError):
    key: str
    hint: str | None = None

    def __str__(self) -> str:
        msg = f"missing required config '{self.key}'"
        if self.hint:
            msg += f": {self.hint}"
        else:
            msg += f" (set it in your recipe with config.set({self.key!r}, ...))"
        return msg


@dataclass
class RemoteCommandFailed(DeployError):
    exit_code: int
    command: str

    def __str__(self) -> str:
        return f"remote command failed (exit={self.exit_code}): {self.command}"


@dataclass
class LocalCommandFailed(DeployError):
    exit_code: int
    command: str

    def __str__(self) -> str:
        return f"local command failed (exit={self.exit_code}): {self.command}"


@dataclass
class InvalidBooleanLiteral(DeployError):
    input: str
    reason: str | None = None

    def __str__(self) -> str:
        msg = f"cannot convert {self.input!r} to boolean"
        if self.reason:
            msg += f" ({self.reason})"
        return msg


@dataclass
class InvalidTransferMode(DeployError):
    input: str
    allowed: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"unknown transfer mode {self.input!r}, expected one of {self.allowed}"


@dataclass
class LocalFilesystemError(DeployError):
    path: str
    message: str

    def __str__(self) -> str:
        return (
            f"local filesystem error at {self.path}: {self.message}\n"
            "WARNING: remote state may already have changed (the remote dump "
            "may have been rotated or deleted)."
        )


@dataclass
class UnknownTaskError(DeployError):
    name: str
    known: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"unknown task '{self.name}'. Known tasks: {self.known}"


@dataclass
class HookCycleError(DeployError):
    path: List[str]

    def __str__(self) -> str:
        return "hook cycle detected: " + " -> ".join(self.path)


@dataclass
class RecipeLoadError(DeployError):
    path: str
    message: str

    def __str__(self) -> str:
        return f"could not load recipe {self.path}: {self.message}"


@dataclass
class ConfigValueError(DeployError):
    key: str
    value: object
    message: str

    def __str__(self) -> str:
        return f"invalid value {self.value!r} for '{self.key}': {self.message}"
