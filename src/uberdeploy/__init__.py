from .config import ConfigStore, Deferred, Value
from .dag import expand
from .errors import DeployError
from .executor import RemoteExecutor, SSHExecutor, TransferMode
from .model import Hook, Phase, Task
from .registry import TaskRegistry
from .runner import Deployment, Orchestrator, TaskContext, load_recipe

__all__ = [
    "ConfigStore",
    "Deferred",
    "Value",
    "expand",
    "DeployError",
    "RemoteExecutor",
    "SSHExecutor",
    "TransferMode",
    "Hook",
    "Phase",
    "Task",
    "TaskRegistry",
    "Deployment",
    "Orchestrator",
    "TaskContext",
    "load_recipe",
]
