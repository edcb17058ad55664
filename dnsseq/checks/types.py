from __future__ import annotations

from collections.abc import Callable

from dnsseq.config import SuiteConfig
from dnsseq.resolver import Resolver
from dnsseq.runner import TaskBody

CheckFactory = Callable[[Resolver, SuiteConfig], TaskBody]


class CheckError(AssertionError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


def expect(condition: object, message: str) -> None:
    if not condition:
        raise CheckError(message)
