from __future__ import annotations

import asyncio
import inspect
import logging
from functools import partial

from .types import (
    Completion,
    RunnerState,
    ShutdownInvariantError,
    Task,
    TaskBody,
    TaskFailedError,
)

logger = logging.getLogger(__name__)


class SequentialTaskRunner:
    """
    Runs registered tasks one at a time, in registration order.

    A task body receives a completion callback and must call it exactly once,
    whether its own async work succeeded or not. The runner starts the next
    task on a later loop iteration, never from inside the callback.

    Must be driven from a running asyncio loop.
    """

    def __init__(self, state: RunnerState | None = None) -> None:
        self.state = RunnerState() if state is None else state
        self._failure: TaskFailedError | None = None
        self._changed = asyncio.Event()
        # Strong reference until the body settles, the loop only keeps weak ones.
        self._inflight: asyncio.Future[None] | None = None
        self._abandoned: asyncio.Future[None] | None = None

    @property
    def idle(self) -> bool:
        return not self.state.is_running and not self.state.pending and not self._settling

    @property
    def failure(self) -> TaskFailedError | None:
        return self._failure

    @property
    def _settling(self) -> bool:
        # A coroutine body may still be executing after it signalled completion.
        return self._inflight is not None

    def register(self, name: str, body: TaskBody) -> None:
        # Fails before any state changes when there is no loop to drive tasks.
        asyncio.get_running_loop()

        self.state.expected_count += 1
        self.state.pending.append(Task(name, body))

        if not self.state.is_running:
            self.advance()

    def task(self, fn: TaskBody) -> TaskBody:
        """Decorator form of register(), named after the function."""
        self.register(fn.__name__, fn)
        return fn

    def advance(self) -> None:
        if self.state.is_running or self._settling or self._failure is not None:
            return
        if not self.state.pending:
            return

        task = self.state.pending.popleft()
        self.state.is_running = True
        self.state.current = task
        logger.info("%s", task.name)

        try:
            result = task.body(self._completion_for(task))
        except Exception as exc:
            self._fail(task, exc)
            return

        if inspect.isawaitable(result):
            self._inflight = asyncio.ensure_future(result)
            self._inflight.add_done_callback(partial(self._body_finished, task))

    async def join(self) -> None:
        """
        Wait until every registered task has completed.

        Raises TaskFailedError as soon as a task body fails. There is no
        timeout: a body that never signals completion blocks forever, so
        callers wanting a bound wrap this in asyncio.wait_for().
        """
        while True:
            if self._failure is not None:
                raise self._failure
            if self.idle:
                return
            self._changed.clear()
            await self._changed.wait()

    async def cancel_inflight(self) -> None:
        """
        Cancel a coroutine body that is still executing and wait for it.

        For drivers giving up on a run, e.g. after a timeout. The task is not
        counted as completed, so finalize() still reports it.
        """
        fut = self._inflight
        if fut is None or fut.done():
            return

        self._abandoned = fut
        fut.cancel()
        await asyncio.wait([fut])

    def finalize(self) -> None:
        state = self.state
        logger.info("%d tests completed", state.completed_count)

        if (
            state.is_running
            or state.completed_count != state.expected_count
            or state.violations
        ):
            raise ShutdownInvariantError(
                expected=state.expected_count,
                completed=state.completed_count,
                running=state.is_running,
                violations=state.violations,
            )

    def _completion_for(self, task: Task) -> Completion:
        def done() -> None:
            self._complete(task)

        return done

    def _complete(self, task: Task) -> None:
        if not self.state.is_running or self.state.current is not task:
            # Counters stay untouched; finalize() reports the violation.
            self.state.violations += 1
            logger.error("%s signalled completion while not running", task.name)
            return

        loop = asyncio.get_running_loop()
        self.state.is_running = False
        self.state.current = None
        self.state.completed_count += 1
        self.state.completed.append(task.name)

        # A coroutine body still executing advances once it settles, so a
        # late exception aborts the run before the next task starts.
        if not self._settling:
            loop.call_soon(self._advance_deferred)

    def _advance_deferred(self) -> None:
        self.advance()
        self._changed.set()

    def _body_finished(self, task: Task, fut: asyncio.Future[None]) -> None:
        if fut is self._inflight:
            self._inflight = None

        if fut.cancelled():
            if fut is not self._abandoned:
                self._fail(task, asyncio.CancelledError())
            return

        exc = fut.exception()
        if exc is not None:
            self._fail(task, exc)
        elif self.state.current is not task:
            # Completion was signalled while the body was still executing.
            asyncio.get_running_loop().call_soon(self._advance_deferred)

    def _fail(self, task: Task, exc: BaseException) -> None:
        if self._failure is None:
            logger.error("%s failed: %s", task.name, exc)
            failure = TaskFailedError(task.name, exc)
            failure.__cause__ = exc
            self._failure = failure
        self._changed.set()
