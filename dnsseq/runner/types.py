from __future__ import annotations

from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

Completion = Callable[[], None]
TaskBody = Callable[[Completion], Awaitable[None] | None]


@dataclass(frozen=True)
class Task:
    name: str
    body: TaskBody


@dataclass
class RunnerState:
    expected_count: int = 0
    completed_count: int = 0
    is_running: bool = False
    pending: deque[Task] = field(default_factory=deque)
    completed: list[str] = field(default_factory=list)
    current: Task | None = None
    violations: int = 0

    def pending_names(self) -> list[str]:
        return [task.name for task in self.pending]


class RunnerError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class TaskFailedError(RunnerError):
    def __init__(self, task_name: str, error: BaseException):
        super().__init__(f"{task_name}: {error!r}")
        self.task_name = task_name
        self.error = error


class ShutdownInvariantError(RunnerError):
    def __init__(
        self,
        *,
        expected: int,
        completed: int,
        running: bool,
        violations: int,
    ):
        problems = []
        if running:
            problems.append("a task is still running")
        if completed != expected:
            problems.append(f"{completed} of {expected} tasks completed")
        if violations:
            problems.append(f"{violations} stale completion signal(s)")
        super().__init__("Shutdown invariants violated: " + ", ".join(problems))
        self.expected = expected
        self.completed = completed
        self.running = running
        self.violations = violations
