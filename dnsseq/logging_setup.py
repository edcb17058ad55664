from __future__ import annotations

import logging
import sys


class _ThirdPartyFilter(logging.Filter):
    """
    Keep dnsseq logs at the handler level.

    Other libraries only at WARNING+, captured Python warnings only at ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "dnsseq" or record.name.startswith("dnsseq."):
            return True

        # Python warnings captured into logging, e.g. library deprecations.
        if record.name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.WARNING


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure a single stderr handler for the CLI.

    Call this once, before the first log line.
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ThirdPartyFilter())
    root.addHandler(ch)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
