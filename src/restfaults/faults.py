"""Fault kinds recognized by the classification table.

These are framework-neutral: the FastAPI integration converts Starlette and
FastAPI exceptions into them (see restfaults.handlers), and application code
or upload checks may raise them directly.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from starlette.exceptions import HTTPException

# First element of a pydantic error location naming where the value came from.
REQUEST_SOURCES: frozenset[str] = frozenset({"body", "query", "path", "header", "cookie"})


class RequestFault(Exception):
    """Base class of every fault kind that maps to a fixed 4xx response."""

    default_message: str | None = None

    def __init__(self, message: str | None = None) -> None:
        text = message if message is not None else self.default_message
        if text is None:
            super().__init__()
        else:
            super().__init__(text)

    @property
    def message(self) -> str | None:
        return str(self.args[0]) if self.args else None


class MethodNotAllowedError(RequestFault):
    def __init__(
        self, method: str, allowed: Iterable[str] = (), message: str | None = None
    ) -> None:
        self.method = method
        self.allowed = tuple(allowed)
        super().__init__(message or f"Request method '{method}' is not supported")


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class ObjectError:
    object_name: str
    message: str


class ArgumentNotValidError(RequestFault):
    """Validation of a request argument failed.

    Field errors name the failing field; global errors are raised by
    object-level validators and name the validated object instead.
    """

    def __init__(
        self,
        field_errors: Iterable[FieldError] = (),
        global_errors: Iterable[ObjectError] = (),
        message: str | None = None,
    ) -> None:
        self.field_errors = tuple(field_errors)
        self.global_errors = tuple(global_errors)
        count = len(self.field_errors) + len(self.global_errors)
        super().__init__(message or f"Validation failed for argument with {count} error(s)")

    @property
    def field_error(self) -> FieldError | None:
        return self.field_errors[0] if self.field_errors else None

    @property
    def global_error(self) -> ObjectError | None:
        return self.global_errors[0] if self.global_errors else None

    @classmethod
    def from_errors(
        cls, errors: Sequence[Mapping[str, Any]], object_name: str = "request"
    ) -> "ArgumentNotValidError":
        """Build from pydantic-style error dicts (``loc`` and ``msg`` keys).

        A location that starts with a request source (``body``, ``query``...)
        is relative to that source; the source itself names global errors.
        """
        field_errors: list[FieldError] = []
        global_errors: list[ObjectError] = []
        for error in errors:
            loc = tuple(error.get("loc") or ())
            message = str(error.get("msg", ""))
            if loc and loc[0] in REQUEST_SOURCES:
                name, path = str(loc[0]), loc[1:]
            else:
                name, path = object_name, loc
            if path:
                field_errors.append(FieldError(".".join(str(part) for part in path), message))
            else:
                global_errors.append(ObjectError(name, message))
        return cls(field_errors, global_errors)


class MessageNotReadableError(RequestFault):
    default_message = "Request body is not readable"


class ArgumentTypeMismatchError(RequestFault):
    def __init__(self, parameter: str, value: Any = None, message: str | None = None) -> None:
        self.parameter = parameter
        self.value = value
        super().__init__(
            message or f"Failed to convert value '{value}' for parameter '{parameter}'"
        )


class MediaTypeNotAcceptableError(RequestFault):
    def __init__(self, supported: Iterable[str] = (), message: str | None = None) -> None:
        self.supported = tuple(supported)
        super().__init__(message or "No acceptable representation")


class MediaTypeNotSupportedError(RequestFault):
    def __init__(
        self,
        content_type: str | None,
        supported: Iterable[str] = (),
        message: str | None = None,
    ) -> None:
        self.content_type = content_type
        self.supported = tuple(supported)
        super().__init__(message or f"Content-Type '{content_type}' is not supported")


class UploadSizeExceededError(RequestFault):
    """The upload went over a configured limit.

    Raise it from a SizeLimitExceededError or a FileSizeLimitExceededError
    to say which limit was hit.
    """

    def __init__(
        self,
        max_upload_size: int | None = None,
        message: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.max_upload_size = max_upload_size
        if message is None:
            message = "Maximum upload size exceeded"
            if max_upload_size is not None:
                message = f"Maximum upload size of {max_upload_size} bytes exceeded"
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class UploadLimitError(Exception):
    def __init__(self, message: str, actual: int, permitted: int) -> None:
        super().__init__(message)
        self.actual = actual
        self.permitted = permitted


class SizeLimitExceededError(UploadLimitError):
    """The whole request is larger than the maximum request size."""

    def __init__(self, actual: int, permitted: int) -> None:
        super().__init__(
            f"The request was rejected because its size ({actual}) exceeds "
            f"the configured maximum ({permitted})",
            actual,
            permitted,
        )


class FileSizeLimitExceededError(UploadLimitError):
    """A single uploaded file is larger than the maximum file size."""

    def __init__(self, actual: int, permitted: int, file_name: str | None = None) -> None:
        self.file_name = file_name
        super().__init__(
            f"The file {file_name or '<unnamed>'} exceeds its maximum permitted "
            f"size of {permitted} bytes",
            actual,
            permitted,
        )


class ResourceNotFoundError(RequestFault):
    def __init__(self, resource_path: str, method: str = "GET") -> None:
        self.method = method
        self.resource_path = resource_path
        super().__init__(f"No static resource {resource_path}.")


class AccessDeniedError(RequestFault):
    default_message = "Access is denied"


class ResponseStatusError(HTTPException):
    """HTTPException carrying an explicit reason and a detail message code.

    Any Starlette HTTPException is translated as a status fault; this
    subclass adds the ``detail_code`` reported as ``details``.
    """

    def __init__(
        self,
        status_code: int,
        reason: str | None = None,
        detail_code: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=reason, headers=headers)
        self.reason = reason
        self.detail_code = detail_code
