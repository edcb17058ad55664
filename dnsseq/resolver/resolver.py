from __future__ import annotations

import asyncio
import ipaddress
import logging
import socket
from collections.abc import Coroutine
from typing import Any

import aiodns
from pycares import errno as ares_errno

from .types import LookupAddress, ResolutionError, ServiceLookup

logger = logging.getLogger(__name__)

_FAMILIES = {0: socket.AF_UNSPEC, 4: socket.AF_INET, 6: socket.AF_INET6}

_GAI_CODES = {
    getattr(socket, name): name for name in dir(socket) if name.startswith("EAI_")
}
_GAI_CODES[socket.EAI_NONAME] = "ENOTFOUND"


def ip_family(value: str) -> int:
    """Return 4 or 6 for an IP literal, 0 for anything else."""
    try:
        return ipaddress.ip_address(value).version
    except ValueError:
        return 0


def is_ipv4(value: object) -> bool:
    return isinstance(value, str) and ip_family(value) == 4


def _gai_code(exc: socket.gaierror) -> str:
    return _GAI_CODES.get(exc.errno, str(exc.errno))


def _dns_error(operation: str, target: str, exc: aiodns.error.DNSError) -> ResolutionError:
    errno = exc.args[0] if exc.args else None
    name = ares_errno.errorcode.get(errno, str(errno))
    message = exc.args[1] if len(exc.args) > 1 else ""
    return ResolutionError(operation, target, name.removeprefix("ARES_"), message)


class Resolver:
    """
    Async name resolution backed by c-ares (aiodns) and the loop's resolver.

    resolve4() and reverse() talk DNS directly through c-ares, honouring
    the configured nameservers. lookup() and lookup_service() go through
    the system resolver (getaddrinfo/getnameinfo), like any other socket
    client would.

    Every call returns an awaitable request; argument errors are raised
    before anything is scheduled.
    """

    def __init__(
        self,
        nameservers: list[str] | None = None,
        *,
        timeout: float | None = None,
        tries: int | None = None,
        dns_resolver: aiodns.DNSResolver | None = None,
    ) -> None:
        self.nameservers = list(nameservers or [])
        self.timeout = timeout
        self.tries = tries
        self._dns = dns_resolver

    def _channel(self) -> aiodns.DNSResolver:
        if self._dns is None:
            options: dict[str, Any] = {}
            if self.timeout is not None:
                options["timeout"] = self.timeout
            if self.tries is not None:
                options["tries"] = self.tries
            self._dns = aiodns.DNSResolver(nameservers=self.nameservers or None, **options)
        return self._dns

    async def close(self) -> None:
        if self._dns is not None:
            await self._dns.close()
            self._dns = None

    async def resolve4(self, hostname: str) -> list[str]:
        logger.debug("queryA %s", hostname)
        try:
            records = await self._channel().query(hostname, "A")
        except aiodns.error.DNSError as exc:
            raise _dns_error("queryA", hostname, exc) from exc
        return [record.host for record in records]

    def reverse(self, address: str) -> Coroutine[Any, Any, list[str]]:
        if not ip_family(address):
            raise ValueError(f"Invalid IP address: {address!r}")
        return self._reverse(address)

    async def _reverse(self, address: str) -> list[str]:
        logger.debug("getHostByAddr %s", address)
        try:
            result = await self._channel().gethostbyaddr(address)
        except aiodns.error.DNSError as exc:
            raise _dns_error("getHostByAddr", address, exc) from exc
        return [result.name, *result.aliases]

    def lookup(
        self,
        hostname: str,
        family: int = 0,
        *,
        hints: int = 0,
        all_addresses: bool = False,
        verbatim: bool = False,
    ) -> Coroutine[Any, Any, LookupAddress | list[LookupAddress]]:
        if family not in _FAMILIES:
            raise ValueError(f"Invalid address family: {family!r}, expected 0, 4 or 6")
        return self._lookup(hostname, family, hints, all_addresses, verbatim)

    async def _lookup(
        self,
        hostname: str,
        family: int,
        hints: int,
        all_addresses: bool,
        verbatim: bool,
    ) -> LookupAddress | list[LookupAddress]:
        literal = ip_family(hostname)
        if literal:
            found = [LookupAddress(hostname, literal)]
        else:
            found = await self._getaddrinfo(hostname, family, hints)
            if not verbatim:
                found.sort(key=lambda entry: entry.family != 4)

        if not found:
            raise ResolutionError("getaddrinfo", hostname, "ENOTFOUND")

        return found if all_addresses else found[0]

    async def _getaddrinfo(self, hostname: str, family: int, hints: int) -> list[LookupAddress]:
        logger.debug("getaddrinfo %s family=%s hints=%s", hostname, family, hints)
        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(
                hostname,
                None,
                family=_FAMILIES[family],
                type=socket.SOCK_STREAM,
                flags=hints,
            )
        except socket.gaierror as exc:
            raise ResolutionError("getaddrinfo", hostname, _gai_code(exc), exc.strerror) from exc

        found: list[LookupAddress] = []
        seen: set[str] = set()
        for af, _type, _proto, _canonname, sockaddr in infos:
            if af not in (socket.AF_INET, socket.AF_INET6):
                continue
            address = sockaddr[0]
            if address in seen:
                continue
            seen.add(address)
            found.append(LookupAddress(address, 4 if af == socket.AF_INET else 6))
        return found

    def lookup_service(self, address: str, port: int) -> Coroutine[Any, Any, ServiceLookup]:
        family = ip_family(address)
        if not family:
            raise ValueError(f"Invalid IP address: {address!r}")
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
            raise ValueError(f"Port should be >= 0 and < 65536, got {port!r}")

        sockaddr = (address, port) if family == 4 else (address, port, 0, 0)
        return self._lookup_service(address, sockaddr)

    async def _lookup_service(self, address: str, sockaddr: tuple) -> ServiceLookup:
        logger.debug("getnameinfo %s", sockaddr)
        loop = asyncio.get_running_loop()
        try:
            hostname, service = await loop.getnameinfo(sockaddr, socket.NI_NAMEREQD)
        except socket.gaierror as exc:
            raise ResolutionError("getnameinfo", address, _gai_code(exc), exc.strerror) from exc
        return ServiceLookup(hostname, service)

    @staticmethod
    def service_name(port: int, protocol: str = "tcp") -> str | None:
        try:
            return socket.getservbyport(port, protocol)
        except OSError:
            return None
