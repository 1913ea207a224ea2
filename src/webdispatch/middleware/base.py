"""
=============================================================================
BASE MIDDLEWARE INTERFACE
=============================================================================

Defines the middleware base class and the pipeline that stacks middleware
around an application.

=============================================================================
WRAPPING MODEL
=============================================================================

A middleware wraps the application it sits in front of. It is itself a
handler (request → response), so it can be handed to anything that expects
one: a Router rule, another middleware, or the hosting server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Request ──► LoggingMiddleware ──► IPFilter ──► Router ──► handler  │
    │                     │                  │                             │
    │                     │                  └── may answer with a         │
    │                     │                      different app instead     │
    │                     │                      of calling Router         │
    │                     ▼                                                │
    │               logs the response on the way back                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Each middleware receives the inner application in its constructor:

    class MyMiddleware(Middleware):
        def __call__(self, request):
            if not self.is_valid(request):
                return forbidden()        # short-circuit
            response = self.app(request)  # continue the chain
            response.set_header("X-Processed-By", self.name)
            return response

=============================================================================
"""

import logging
from typing import Any, Callable, List

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# App is the signature of anything a middleware can wrap:
# a Router, another middleware, or a plain function.
App = Callable[[HTTPRequest], HTTPResponse]


class Middleware:
    """
    Base class for middleware.

    Subclasses override __call__. The default implementation just passes
    the request through to the wrapped application, so a subclass can call
    super().__call__(request) to continue the chain.

    Args:
        app: The application this middleware sits in front of.
    """

    def __init__(self, app: App):
        self.app = app

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return self.app(request)

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Stacks middleware around an application.

    =========================================================================
    PIPELINE ARCHITECTURE
    =========================================================================

    Middleware is recorded as a factory plus arguments and only instantiated
    by wrap(), once the innermost application is known:

        pipeline = MiddlewarePipeline()
        pipeline.use(LoggingMiddleware)                       # outermost
        pipeline.use(IPFilter, ips={"10.0.0.0/8": intranet})  # next
        app = pipeline.wrap(router)                           # innermost

        Resulting structure:

            LoggingMiddleware(IPFilter(router, ips=...))

    The first middleware added is the outermost one: it sees the request
    first and the response last.

    =========================================================================
    """

    def __init__(self):
        self._middleware: List[tuple[Callable[..., App], tuple, dict]] = []

    def use(self, factory: Callable[..., App], *args: Any, **kwargs: Any) -> "MiddlewarePipeline":
        """
        Add middleware to the pipeline.

        Args:
            factory: Middleware class (or any callable taking the inner
                     app as first argument and returning a handler).
            *args, **kwargs: Extra constructor arguments.

        Returns:
            Self for method chaining.
        """
        self._middleware.append((factory, args, kwargs))
        logger.debug(f"Added middleware: {getattr(factory, '__name__', factory)!r}")
        return self

    def wrap(self, app: App) -> App:
        """
        Wrap `app` with all middleware in the pipeline.

        We wrap in REVERSE order so that the first-added middleware is the
        outermost wrapper:

            [A, B, C] + app  →  A(B(C(app)))
        """
        current = app
        for factory, args, kwargs in reversed(self._middleware):
            current = factory(current, *args, **kwargs)
        return current

    def __len__(self) -> int:
        return len(self._middleware)
