from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dnsseq.checks import SuiteResult, checks_for, run_suite
from dnsseq.config import ConfigError, load_suite
from dnsseq.logging_setup import setup_logging
from dnsseq.resolver import Resolver

from .args import build_parser


def run_cli(argv: list[str] | None = None, *, configure_logging: bool = False) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)

        if configure_logging:
            setup_logging(logging.DEBUG if args.verbose else logging.INFO)

        match args.command:
            case "run":
                return cmd_run(args)
            case "list":
                return cmd_list(args)
            case _:
                return 2

    except (ConfigError, KeyError) as exc:
        print(_describe(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def main(argv: list[str] | None = None) -> None:
    sys.exit(run_cli(argv, configure_logging=True))


def cmd_run(args: argparse.Namespace) -> int:
    config = load_suite(args.config)
    names: list[str] | None = args.checks or None

    # Reject unknown names before any network traffic.
    checks_for(config.checks if names is None else names)

    resolver = Resolver(config.nameservers, timeout=config.timeout, tries=config.tries)
    result = asyncio.run(run_suite(config, resolver, names, timeout=args.timeout))
    _print_result(result)
    return 0 if result.ok else 1


def cmd_list(args: argparse.Namespace) -> int:
    config = load_suite(args.config)
    for name in checks_for(config.checks):
        print(name)
    return 0


def _describe(exc: Exception) -> str:
    # KeyError wraps its message in quotes.
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    return str(exc)


def _print_result(result: SuiteResult) -> None:
    for name in result.order:
        if name in result.completed:
            print(f"OK {name}")
        elif name == result.failed:
            print(f"FAIL {name}: {result.error}")
        else:
            print(f"SKIP {name}")

    if result.error is not None and (result.failed is None or result.failed in result.completed):
        print(str(result.error), file=sys.stderr)
