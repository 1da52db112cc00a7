"""Catch-all fault translation middleware.

Exceptions that none of the registered exception handlers claimed surface
here. They are translated into a response instead of being re-raised to the
server, so each one is logged exactly once (by the catch-all rule).
A ClassificationError is a defect in the rule table and always propagates.
"""

from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from restfaults.errors import ClassificationError

FaultResponder = Callable[[Request, Exception], Awaitable[Response]]


class FaultTranslationMiddleware(BaseHTTPMiddleware):
    """Turns any exception escaping the app into a translated response."""

    def __init__(self, app: ASGIApp, handler: FaultResponder) -> None:
        super().__init__(app)
        self.handler = handler

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        try:
            return await call_next(request)
        except ClassificationError:
            raise
        except Exception as exc:
            return await self.handler(request, exc)
