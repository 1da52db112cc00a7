"""FastAPI integration: wires the translator into an application.

Two activation scopes translate faults identically:

Global, for every route of the application::

    app = FastAPI()
    install_error_handlers(app)

Scoped, only for the routes of one router::

    router = APIRouter(route_class=FaultTranslatingRoute)
"""

import logging
from collections.abc import Callable, Coroutine
from functools import lru_cache
from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response

from restfaults.errors import ApiError, ClassificationError
from restfaults.faults import (
    ArgumentNotValidError,
    ArgumentTypeMismatchError,
    MessageNotReadableError,
    MethodNotAllowedError,
    RequestFault,
    ResourceNotFoundError,
    ResponseStatusError,
    UploadSizeExceededError,
)
from restfaults.middleware import FaultTranslationMiddleware
from restfaults.translator import ErrorTranslator

logger = logging.getLogger(__name__)

_PARAMETER_SOURCES = frozenset({"path", "query", "header", "cookie"})
_CONVERSION_ERROR_SUFFIXES = ("_parsing", "_type")


@lru_cache
def get_translator() -> ErrorTranslator:
    """Process-wide translator built from the module settings."""
    return ErrorTranslator.from_settings()


# ---------------------------------------------------------------------------
# Native exception coercion
# ---------------------------------------------------------------------------


def _chain(fault: Exception, native: Exception) -> Exception:
    fault.__cause__ = native
    return fault


def _coerce_validation_error(exc: RequestValidationError) -> Exception:
    errors = exc.errors()
    if not errors:
        return _chain(ArgumentNotValidError(), exc)

    first = errors[0]
    error_type = str(first.get("type", ""))
    loc = tuple(first.get("loc") or ())

    if error_type == "json_invalid":
        message = str(first.get("msg", "JSON decode error"))
        reason = (first.get("ctx") or {}).get("error")
        if reason:
            message = f"{message}: {reason}"
        return _chain(MessageNotReadableError(message), exc)

    if (
        len(loc) >= 2
        and loc[0] in _PARAMETER_SOURCES
        and error_type.endswith(_CONVERSION_ERROR_SUFFIXES)
    ):
        return _chain(
            ArgumentTypeMismatchError(
                parameter=str(loc[-1]),
                value=first.get("input"),
                message=str(first.get("msg", "")),
            ),
            exc,
        )

    return _chain(ArgumentNotValidError.from_errors(errors), exc)


def _coerce_http_exception(request: Request, exc: HTTPException) -> Exception:
    if exc.status_code == 405:
        allow = (exc.headers or {}).get("Allow", "")
        allowed = [method.strip() for method in allow.split(",") if method.strip()]
        return _chain(MethodNotAllowedError(request.method, allowed), exc)
    if exc.status_code == 404 and "endpoint" not in request.scope:
        # Raised by the router itself: no route matched the path.
        return _chain(ResourceNotFoundError(request.url.path, request.method), exc)
    if exc.status_code == 413:
        # The native exception is not a recognized limit cause: both limits are reported.
        return _chain(UploadSizeExceededError(), exc)
    return exc


def coerce_fault(request: Request, exc: Exception) -> Exception:
    """Convert FastAPI/Starlette exceptions into the library's fault kinds.

    The native exception is chained as ``__cause__`` of the converted fault.
    Anything else is returned unchanged.
    """
    if isinstance(exc, RequestValidationError):
        return _coerce_validation_error(exc)
    if isinstance(exc, HTTPException) and not isinstance(exc, ResponseStatusError):
        return _coerce_http_exception(request, exc)
    return exc


# ---------------------------------------------------------------------------
# Handler and activation
# ---------------------------------------------------------------------------


class FaultHandler:
    """Exception handler translating a fault into a JSON error response."""

    def __init__(self, translator: ErrorTranslator | None = None) -> None:
        self._translator = translator

    @property
    def translator(self) -> ErrorTranslator:
        return self._translator or get_translator()

    async def __call__(self, request: Request, exc: Exception) -> Response:
        fault = coerce_fault(request, exc)
        return self.translator.translate(fault).to_response()


def install_error_handlers(app: FastAPI, translator: ErrorTranslator | None = None) -> None:
    """Activate fault translation for every route of ``app``.

    Known fault kinds go through the exception handlers; anything else is
    caught by FaultTranslationMiddleware. Installing twice is a no-op.
    """
    if getattr(app.state, "restfaults_installed", False):
        logger.debug("Fault translation already installed on %r", app)
        return

    handler = FaultHandler(translator)
    for exc_class in (ApiError, RequestFault, HTTPException, RequestValidationError):
        app.add_exception_handler(exc_class, handler)
    app.add_middleware(FaultTranslationMiddleware, handler=handler)
    app.state.restfaults_installed = True


class FaultTranslatingRoute(APIRoute):
    """APIRoute translating faults raised by its handler and dependencies.

    Use as ``APIRouter(route_class=FaultTranslatingRoute)`` to limit fault
    translation to that router's routes.
    """

    translator: ErrorTranslator | None = None

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        route_handler = super().get_route_handler()
        handler = FaultHandler(self.translator)

        async def translating_route_handler(request: Request) -> Response:
            try:
                return await route_handler(request)
            except ClassificationError:
                raise
            except Exception as exc:
                return await handler(request, exc)

        return translating_route_handler


def scoped_route_class(translator: ErrorTranslator) -> type[FaultTranslatingRoute]:
    """Return a FaultTranslatingRoute subclass bound to ``translator``."""
    return type(
        "BoundFaultTranslatingRoute",
        (FaultTranslatingRoute,),
        {"translator": translator},
    )
