"""OpenAPI response metadata for routes that may return ApiErrorBody.

Pure metadata, consumed by FastAPI's OpenAPI generator only:

    @router.get("/items/{item_id}", responses={**OK, **NOT_FOUND, **BAD_REQUEST})
"""

from http import HTTPStatus
from typing import Any

from restfaults.schemas import ApiErrorBody


def error_responses(*status_codes: int) -> dict[int | str, dict[str, Any]]:
    """Return a ``responses=`` mapping documenting ApiErrorBody for each status."""
    return {
        code: {"model": ApiErrorBody, "description": HTTPStatus(code).phrase}
        for code in status_codes
    }


def success_responses(*status_codes: int) -> dict[int | str, dict[str, Any]]:
    """Return a ``responses=`` mapping describing each success status.

    No model is attached: the route's own ``response_model`` documents the body.
    """
    return {code: {"description": HTTPStatus(code).phrase} for code in status_codes}


OK = success_responses(200)
CREATED = success_responses(201)
NO_CONTENT = success_responses(204)

BAD_REQUEST = error_responses(400)
UNAUTHORIZED = error_responses(401)
FORBIDDEN = error_responses(403)
NOT_FOUND = error_responses(404)
CONFLICT = error_responses(409)
UNPROCESSABLE_CONTENT = error_responses(422)
LOCKED = error_responses(423)
INTERNAL_SERVER_ERROR = error_responses(500)
SERVICE_UNAVAILABLE = error_responses(503)
