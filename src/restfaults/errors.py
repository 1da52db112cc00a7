"""restfaults error hierarchy.

ApiError is raised by application code to signal an API-level error on
purpose. The translator turns it into a JSON response verbatim: the status
code comes from the error, ``reason`` becomes the response ``message`` and
``message`` becomes ``details``. The chained cause is kept for diagnostics
only and is never serialized.
"""

_READ_ONLY = frozenset({"status_code", "reason", "message", "cause"})


class ApiError(Exception):
    def __init__(
        self,
        status_code: int,
        reason: str,
        message: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        if not 100 <= status_code <= 599:
            raise ValueError(f"Invalid HTTP status code: {status_code}")
        if not reason:
            raise ValueError("ApiError reason must not be empty")
        if message is None:
            super().__init__()
        else:
            super().__init__(message)
        object.__setattr__(self, "status_code", status_code)
        object.__setattr__(self, "reason", reason)
        object.__setattr__(self, "message", message)
        if cause is not None:
            self.__cause__ = cause

    def __setattr__(self, name: str, value: object) -> None:
        if name in _READ_ONLY:
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__setattr__(name, value)

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code!r}, "
            f"reason={self.reason!r}, message={self.message!r})"
        )

    def __reduce__(self):
        # Preset subclasses take different constructor arguments.
        return _restore_api_error, (
            type(self),
            self.status_code,
            self.reason,
            self.message,
            self.__cause__,
        )


def _restore_api_error(cls, status_code, reason, message, cause):
    exc = cls.__new__(cls)
    ApiError.__init__(exc, status_code, reason, message, cause)
    return exc


class _PresetApiError(ApiError):
    """ApiError with a fixed status and a default reason."""

    default_status: int = 500
    default_reason: str = "internal application error"

    def __init__(
        self,
        message: str | None = None,
        *,
        reason: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(self.default_status, reason or self.default_reason, message, cause)


class BadRequestError(_PresetApiError):
    default_status = 400
    default_reason = "bad request"


class UnauthorizedError(_PresetApiError):
    default_status = 401
    default_reason = "unauthorized"


class ForbiddenError(_PresetApiError):
    default_status = 403
    default_reason = "access denied"


class NotFoundError(_PresetApiError):
    default_status = 404
    default_reason = "not found"


class ConflictError(_PresetApiError):
    default_status = 409
    default_reason = "conflict"


class UnprocessableError(_PresetApiError):
    default_status = 422
    default_reason = "unprocessable content"


class LockedError(_PresetApiError):
    default_status = 423
    default_reason = "locked"


class ServiceUnavailableError(_PresetApiError):
    default_status = 503
    default_reason = "service unavailable"


class ClassificationError(Exception):
    """A classification rule failed while translating a fault.

    This is a defect in the rule itself, never a recoverable condition.
    The rule's own exception is chained as ``__cause__``.
    """

    def __init__(self, rule_name: str, fault: BaseException) -> None:
        super().__init__(f"Rule {rule_name!r} failed to translate {type(fault).__name__}")
        self.rule_name = rule_name
        self.fault = fault

    def __reduce__(self):
        return type(self), (self.rule_name, self.fault)
