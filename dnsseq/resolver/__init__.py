from .resolver import Resolver, ip_family, is_ipv4
from .types import LookupAddress, ResolutionError, ServiceLookup

__all__ = [
    "Resolver",
    "ip_family",
    "is_ipv4",
    "LookupAddress",
    "ResolutionError",
    "ServiceLookup",
]
