from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dnsseq")

    parser.add_argument(
        "--config",
        default=None,
        help="Path to suite config file (YAML, TOML or JSON)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log resolver requests",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # run
    run = subparsers.add_parser("run", help="Run checks one at a time")
    run.add_argument(
        "checks",
        nargs="*",
        help="Check names (default: the configured suite)",
    )
    run.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Abort the run after this many seconds",
    )

    # list
    subparsers.add_parser("list", help="List checks")

    return parser
