"""
=============================================================================
IP FILTER MIDDLEWARE
=============================================================================

Routes requests to different applications depending on the client's IP
address. Requests from an unlisted address go to the wrapped application.

    app = IPFilter(router, ips={
        "10.0.0.0/8":     intranet_app,
        "192.168.0.0/16": lan_app,
        "::1":            localhost_app,
    })

=============================================================================
MATCHING
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │   client_ip = request.client_ip                                      │
    │                                                                      │
    │   for rule in rules:              (registration order)               │
    │       if client_ip in rule.network:                                  │
    │           return rule.handler(request)                               │
    │                                                                      │
    │   return app(request)             (no rule matched)                  │
    └─────────────────────────────────────────────────────────────────────┘

- A bare address ("10.1.1.1") is a single-host network (/32 or /128).
- Host bits are allowed: "10.1.2.3/8" means 10.0.0.0/8.
- An IPv4 client never matches an IPv6 rule and vice versa.
- A client address that cannot be parsed matches no rule.

Invalid ranges raise ValueError when the rule is added, never during a
request.

=============================================================================
"""

import ipaddress
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from .base import App, Middleware


logger = logging.getLogger(__name__)


Network = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]
Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

IPRange = Union[str, Network, Address]


def parse_range(ip_range: IPRange) -> Network:
    """
    Parse an address or CIDR range into a network.

        parse_range("10.0.0.0/8")   # IPv4Network('10.0.0.0/8')
        parse_range("::1")          # IPv6Network('::1/128')

    Raises:
        ValueError: If `ip_range` is not a valid address or range.
    """
    if isinstance(ip_range, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        return ip_range
    try:
        return ipaddress.ip_network(str(ip_range).strip(), strict=False)
    except ValueError as e:
        raise ValueError(f"Invalid IP range {ip_range!r}: {e}") from e


@dataclass(frozen=True)
class IPRule:
    """One IP range and the application that serves it."""

    network: Network
    handler: App

    def matches(self, address: Address) -> bool:
        return address.version == self.network.version and address in self.network


class IPFilter(Middleware):
    """
    Dispatches by client IP, falling through to the wrapped application.

    Args:
        app: Application for clients no rule matches.
        ips: Optional mapping of IP range → application, added in order.
        configure: Optional builder, called once with the new filter.

    Rules can also be added afterwards, directly or as a decorator:

        ip_filter.map("10.0.0.0/8", intranet_app)

        @ip_filter.map("127.0.0.1")
        def local_only(request):
            return ok("hello, localhost")
    """

    def __init__(
        self,
        app: App,
        ips: Optional[Dict[IPRange, App]] = None,
        configure: Optional[Callable[["IPFilter"], None]] = None,
    ):
        super().__init__(app)
        self.rules: List[IPRule] = []

        for ip_range, handler in (ips or {}).items():
            self.map(ip_range, handler)

        if configure is not None:
            configure(self)

    def map(self, ip_range: IPRange, handler: Optional[App] = None):
        """
        Send requests from `ip_range` to `handler`.

        The range is parsed immediately. Returns self, or a decorator when
        `handler` is omitted.

        Raises:
            ValueError: If `ip_range` is not a valid address or range.
        """
        network = parse_range(ip_range)

        def register(func: App) -> None:
            self.rules.append(IPRule(network, func))
            logger.debug(f"Mapped {network} to {getattr(func, '__name__', func)!r}")

        if handler is None:
            def decorator(func: App) -> App:
                register(func)
                return func
            return decorator

        register(handler)
        return self

    def match(self, client_ip: Optional[str]) -> Optional[IPRule]:
        """Return the first rule containing `client_ip`, or None."""
        if not client_ip:
            return None
        try:
            address = ipaddress.ip_address(client_ip.strip())
        except ValueError:
            logger.debug(f"Unparseable client address {client_ip!r}")
            return None

        for rule in self.rules:
            if rule.matches(address):
                return rule
        return None

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        rule = self.match(request.client_ip)
        if rule is None:
            return super().__call__(request)
        return rule.handler(request)
