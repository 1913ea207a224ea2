"""
Middleware that wraps a handler with extra behaviour.

    Middleware          - Base class: holds the wrapped app, passes through
    MiddlewarePipeline  - Stacks middleware around an app, first added outermost
    IPFilter            - Dispatch by client IP range
    LoggingMiddleware   - Access log line per request
"""

from .base import App, Middleware, MiddlewarePipeline
from .ip_filter import IPFilter, IPRule, parse_range
from .logging import LoggingMiddleware

__all__ = [
    "App",
    "Middleware",
    "MiddlewarePipeline",
    "IPFilter",
    "IPRule",
    "parse_range",
    "LoggingMiddleware",
]
