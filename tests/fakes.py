# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from dnsseq.resolver import LookupAddress, ServiceLookup, ip_family


@dataclass
class FakeResolver:
    """
    In-memory stand-in for dnsseq.resolver.Resolver.

    Answers come from plain fields so tests can break one operation at a
    time. `errors` maps an operation name to the exception raised when its
    request is awaited; `delays` maps it to a sleep before answering.
    """

    a_records: list[str] = field(default_factory=lambda: ["142.250.74.36", "142.250.74.68"])
    ptr_names: list[str] = field(default_factory=lambda: ["dns.google"])
    addresses: list[LookupAddress] = field(
        default_factory=lambda: [
            LookupAddress("2a00:1450:4001:82b::2004", 6),
            LookupAddress("142.250.74.36", 4),
        ]
    )
    service: ServiceLookup = field(default_factory=lambda: ServiceLookup("localhost", "http"))
    services_db: dict[int, str] = field(default_factory=lambda: {80: "http"})
    errors: dict[str, Exception] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    calls: list[tuple[str, object]] = field(default_factory=list)
    closed: bool = False

    async def _answer(self, operation: str, target: object, answer):
        self.calls.append((operation, target))
        delay = self.delays.get(operation)
        if delay:
            await asyncio.sleep(delay)
        if operation in self.errors:
            raise self.errors[operation]
        return answer

    def resolve4(self, hostname: str):
        return self._answer("resolve4", hostname, list(self.a_records))

    def reverse(self, address: str):
        return self._answer("reverse", address, list(self.ptr_names))

    def lookup(self, hostname, family=0, *, hints=0, all_addresses=False, verbatim=False):
        literal = ip_family(hostname)
        if literal:
            found = [LookupAddress(hostname, literal)]
        elif hostname == "localhost":
            found = [LookupAddress("127.0.0.1", 4)]
        else:
            found = [a for a in self.addresses if family in (0, a.family)]
            if not verbatim:
                found.sort(key=lambda a: a.family != 4)
        answer = found if all_addresses else found[0]
        return self._answer("lookup", (hostname, family, hints, all_addresses), answer)

    def lookup_service(self, address: str, port: int):
        return self._answer("lookup_service", (address, port), self.service)

    def service_name(self, port: int, protocol: str = "tcp") -> str | None:
        return self.services_db.get(port)

    async def close(self) -> None:
        self.closed = True
