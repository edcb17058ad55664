from .runner import SequentialTaskRunner
from .types import (
    Completion,
    RunnerError,
    RunnerState,
    ShutdownInvariantError,
    Task,
    TaskBody,
    TaskFailedError,
)

__all__ = [
    "SequentialTaskRunner",
    "Completion",
    "RunnerError",
    "RunnerState",
    "ShutdownInvariantError",
    "Task",
    "TaskBody",
    "TaskFailedError",
]
