"""
IPv4 resolution checks.

Each check is a factory returning a task body for SequentialTaskRunner.
A body issues one resolver request, asserts on the answer and signals
completion. Any resolver error or failed expectation propagates and aborts
the whole run.
"""

from __future__ import annotations

import inspect
import socket

from dnsseq.config import SuiteConfig
from dnsseq.resolver import LookupAddress, Resolver, is_ipv4
from dnsseq.runner import Completion, TaskBody

from .types import CheckFactory, expect

IPV4_CHECKS: dict[str, CheckFactory] = {}

# Fallbacks when the services database has no entry for the port.
_DEFAULT_SERVICES = {80: "http"}


def _check(factory: CheckFactory) -> CheckFactory:
    IPV4_CHECKS[factory.__name__] = factory
    return factory


def _check_wrap(req: object) -> None:
    expect(inspect.isawaitable(req), f"resolver returned {type(req)}, not a request")


def _expect_ipv4_answer(answer: object, expected: str | None = None) -> None:
    expect(isinstance(answer, LookupAddress), f"expected one address, got {answer!r}")
    expect(is_ipv4(answer.address), f"{answer.address!r} is not an IPv4 address")
    expect(answer.family == 4, f"family is {answer.family}, expected 4")
    if expected is not None:
        expect(answer.address == expected, f"got {answer.address}, expected {expected}")


@_check
def resolve4(resolver: Resolver, config: SuiteConfig) -> TaskBody:
    async def body(done: Completion) -> None:
        req = resolver.resolve4(config.hostname)
        _check_wrap(req)
        ips = await req

        expect(len(ips) > 0, f"no A records for {config.hostname}")
        for ip in ips:
            expect(is_ipv4(ip), f"{ip!r} is not an IPv4 address")

        done()

    return body


@_check
def reverse_ipv4(resolver: Resolver, config: SuiteConfig) -> TaskBody:
    async def body(done: Completion) -> None:
        req = resolver.reverse(config.reverse_address)
        _check_wrap(req)
        domains = await req

        expect(len(domains) > 0, f"no PTR names for {config.reverse_address}")
        for domain in domains:
            expect(domain and isinstance(domain, str), f"bad PTR name {domain!r}")

        done()

    return body


@_check
def lookup_ipv4_explicit(resolver: Resolver, config: SuiteConfig) -> TaskBody:
    async def body(done: Completion) -> None:
        req = resolver.lookup(config.hostname, 4)
        _check_wrap(req)
        _expect_ipv4_answer(await req)
        done()

    return body


@_check
def lookup_ipv4_implicit(resolver: Resolver, config: SuiteConfig) -> TaskBody:
    async def body(done: Completion) -> None:
        req = resolver.lookup(config.hostname)
        _check_wrap(req)
        _expect_ipv4_answer(await req)
        done()

    return body


@_check
def lookup_ipv4_explicit_object(resolver: Resolver, config: SuiteConfig) -> TaskBody:
    async def body(done: Completion) -> None:
        req = resolver.lookup(config.hostname, family=4)
        _check_wrap(req)
        _expect_ipv4_answer(await req)
        done()

    return body


@_check
def lookup_ipv4_hint_addrconfig(resolver: Resolver, config: SuiteConfig) -> TaskBody:
    async def body(done: Completion) -> None:
        req = resolver.lookup(config.hostname, hints=socket.AI_ADDRCONFIG)
        _check_wrap(req)
        _expect_ipv4_answer(await req)
        done()

    return body


@_check
def lookup_ip_ipv4(resolver: Resolver, config: SuiteConfig) -> TaskBody:
    async def body(done: Completion) -> None:
        req = resolver.lookup("127.0.0.1")
        _check_wrap(req)
        _expect_ipv4_answer(await req, "127.0.0.1")
        done()

    return body


@_check
def lookup_localhost_ipv4(resolver: Resolver, config: SuiteConfig) -> TaskBody:
    async def body(done: Completion) -> None:
        req = resolver.lookup("localhost", 4)
        _check_wrap(req)
        _expect_ipv4_answer(await req, "127.0.0.1")
        done()

    return body


@_check
def lookup_all_ipv4(resolver: Resolver, config: SuiteConfig) -> TaskBody:
    async def body(done: Completion) -> None:
        req = resolver.lookup(config.hostname, family=4, all_addresses=True)
        _check_wrap(req)
        answers = await req

        expect(isinstance(answers, list), f"expected a list, got {type(answers)}")
        expect(len(answers) > 0, f"no addresses for {config.hostname}")
        for answer in answers:
            _expect_ipv4_answer(answer)

        done()

    return body


@_check
def lookup_service_ip_ipv4(resolver: Resolver, config: SuiteConfig) -> TaskBody:
    async def body(done: Completion) -> None:
        req = resolver.lookup_service(config.service_address, config.service_port)
        _check_wrap(req)
        answer = await req

        expect(isinstance(answer.hostname, str), f"hostname is {type(answer.hostname)}")
        expect(answer.hostname, "empty hostname")

        # The local services database is the reference; fall back when the
        # host has no entry for the port.
        port = config.service_port
        service = resolver.service_name(port, "tcp")
        if not service:
            service = _DEFAULT_SERVICES.get(port, str(port))

        expect(answer.service == service, f"service is {answer.service!r}, expected {service!r}")

        done()

    return body
