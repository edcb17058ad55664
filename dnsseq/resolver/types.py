from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LookupAddress:
    address: str
    family: int


@dataclass(frozen=True)
class ServiceLookup:
    hostname: str
    service: str


class ResolutionError(Exception):
    def __init__(self, operation: str, target: str, code: str, message: str = ""):
        text = f"{operation} {target} failed: {code}"
        if message:
            text += f" ({message})"
        super().__init__(text)
        self.operation = operation
        self.target = target
        self.code = code
