from .ipv4 import IPV4_CHECKS
from .suite import SuiteResult, checks_for, register_checks, run_suite
from .types import CheckError, CheckFactory, expect

__all__ = [
    "IPV4_CHECKS",
    "SuiteResult",
    "checks_for",
    "register_checks",
    "run_suite",
    "CheckError",
    "CheckFactory",
    "expect",
]
