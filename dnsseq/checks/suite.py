from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from dnsseq.config import SuiteConfig
from dnsseq.resolver import Resolver
from dnsseq.runner import SequentialTaskRunner, ShutdownInvariantError, TaskFailedError

from .ipv4 import IPV4_CHECKS
from .types import CheckFactory

logger = logging.getLogger(__name__)


def checks_for(names: list[str] | None = None) -> dict[str, CheckFactory]:
    """
    Select checks by name, keeping registry order.

    None selects every check. Unknown names raise KeyError.
    """
    if names is None:
        return dict(IPV4_CHECKS)

    for name in names:
        if name not in IPV4_CHECKS:
            raise KeyError(f"Unknown check: {name}")

    wanted = set(names)
    return {name: factory for name, factory in IPV4_CHECKS.items() if name in wanted}


def register_checks(
    runner: SequentialTaskRunner,
    resolver: Resolver,
    config: SuiteConfig,
    names: list[str] | None = None,
) -> list[str]:
    selected = checks_for(config.checks if names is None else names)

    for name, factory in selected.items():
        runner.register(name, factory(resolver, config))

    return list(selected)


@dataclass(frozen=True)
class SuiteResult:
    order: list[str]
    completed: list[str]
    failed: str | None
    skipped: list[str]
    error: Exception | None

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_suite(
    config: SuiteConfig,
    resolver: Resolver,
    names: list[str] | None = None,
    *,
    timeout: float | None = None,
) -> SuiteResult:
    """
    Register the selected checks on a fresh runner and drive it to the end.

    timeout bounds the whole run; a check still in flight when it expires
    is cancelled and reported as failed, and the shutdown invariants are
    violated.
    The resolver is closed before returning.
    """
    runner = SequentialTaskRunner()
    error: Exception | None = None

    try:
        order = register_checks(runner, resolver, config, names)

        try:
            await asyncio.wait_for(runner.join(), timeout)
        except TaskFailedError as exc:
            error = exc
        except TimeoutError:
            logger.error("Run timed out after %ss", timeout)
            error = TimeoutError(f"run timed out after {timeout}s")
            await runner.cancel_inflight()

        try:
            runner.finalize()
        except ShutdownInvariantError as exc:
            if error is None:
                error = exc
    finally:
        await resolver.close()

    state = runner.state
    if runner.failure is not None:
        failed = runner.failure.task_name
    elif state.current is not None:
        failed = state.current.name
    else:
        failed = None

    skipped = [name for name in order if name not in state.completed and name != failed]
    return SuiteResult(order, list(state.completed), failed, skipped, error)
