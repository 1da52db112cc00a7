"""Classification table: ordered rules mapping a fault to a response.

Rules are evaluated in order and the first matching predicate wins, so a
specific kind must come before any broader kind that would shadow it. The
catch-all rule matches everything and is always last.

Each rule gives a status (fixed, or read from the fault), a message (fixed,
or read from the fault) and a details extractor. Extractors return None when
there is nothing useful to report.
"""

from collections.abc import Callable
from dataclasses import dataclass
from http import HTTPStatus

from starlette.exceptions import HTTPException

from restfaults.config import UploadLimits, to_megabytes
from restfaults.errors import ApiError
from restfaults.faults import (
    AccessDeniedError,
    ArgumentNotValidError,
    ArgumentTypeMismatchError,
    FileSizeLimitExceededError,
    MediaTypeNotAcceptableError,
    MediaTypeNotSupportedError,
    MessageNotReadableError,
    MethodNotAllowedError,
    ResourceNotFoundError,
    SizeLimitExceededError,
    UploadSizeExceededError,
)
from restfaults.messages import ENGLISH, MessageCatalogue

Predicate = Callable[[BaseException], bool]
Extractor = Callable[[BaseException], str | None]


def _no_details(exc: BaseException) -> str | None:
    return None


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    predicate: Predicate
    status: int | Callable[[BaseException], int]
    message: str | Callable[[BaseException], str]
    details: Extractor = _no_details
    unclassified: bool = False

    def status_for(self, exc: BaseException) -> int:
        return self.status if isinstance(self.status, int) else self.status(exc)

    def message_for(self, exc: BaseException) -> str:
        return self.message if isinstance(self.message, str) else self.message(exc)


def is_instance(*kinds: type[BaseException]) -> Predicate:
    def predicate(exc: BaseException) -> bool:
        return isinstance(exc, kinds)

    return predicate


def _always(exc: BaseException) -> bool:
    return True


def _text(value: object) -> str | None:
    if value is None:
        return None
    return str(value) or None


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return f"HTTP {status_code}"


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


def _api_error_status(exc: ApiError) -> int:
    return exc.status_code


def _api_error_reason(exc: ApiError) -> str:
    return exc.reason


def _api_error_details(exc: ApiError) -> str | None:
    return _text(exc.message)


def _fault_message(exc: BaseException) -> str | None:
    return _text(exc.args[0]) if exc.args else None


def _http_status(exc: HTTPException) -> int:
    return exc.status_code


def _http_reason(exc: HTTPException) -> str:
    if isinstance(exc.detail, str) and exc.detail.strip():
        return exc.detail
    return _reason_phrase(exc.status_code)


def _http_detail_code(exc: HTTPException) -> str | None:
    return _text(getattr(exc, "detail_code", None))


def _resource_path(exc: ResourceNotFoundError) -> str | None:
    return _text(exc.resource_path)


def _unclassified_details(exc: BaseException) -> str | None:
    return _text(exc)


def _validation_details(catalogue: MessageCatalogue) -> Extractor:
    def extract(exc: ArgumentNotValidError) -> str | None:
        field_error = exc.field_error
        if field_error is not None:
            return catalogue.validation.format(name=field_error.field, message=field_error.message)
        global_error = exc.global_error
        if global_error is not None:
            return catalogue.validation.format(
                name=global_error.object_name, message=global_error.message
            )
        return None

    return extract


def _type_mismatch_details(catalogue: MessageCatalogue) -> Extractor:
    def extract(exc: ArgumentTypeMismatchError) -> str | None:
        return catalogue.type_mismatch.format(parameter=exc.parameter, message=exc.message)

    return extract


def _upload_details(limits: UploadLimits, catalogue: MessageCatalogue) -> Extractor:
    # A recognized cause carries the limit its check enforced; report that one.
    # Without one, report the configured limits, formatted once at startup.
    both_limits = catalogue.max_upload_sizes.format(
        max_request_size=limits.max_request_size_mb,
        max_file_size=limits.max_file_size_mb,
    )

    def extract(exc: UploadSizeExceededError) -> str | None:
        cause = exc.__cause__
        if isinstance(cause, SizeLimitExceededError):
            return catalogue.max_request_size.format(
                max_request_size=to_megabytes(cause.permitted)
            )
        if isinstance(cause, FileSizeLimitExceededError):
            return catalogue.max_file_size.format(max_file_size=to_megabytes(cause.permitted))
        return both_limits

    return extract


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


def build_rules(
    limits: UploadLimits, catalogue: MessageCatalogue = ENGLISH
) -> tuple[ClassificationRule, ...]:
    """Build the classification table, most specific rule first."""
    return (
        ClassificationRule(
            name="api_error",
            predicate=is_instance(ApiError),
            status=_api_error_status,
            message=_api_error_reason,
            details=_api_error_details,
        ),
        ClassificationRule(
            name="method_not_allowed",
            predicate=is_instance(MethodNotAllowedError),
            status=405,
            message=catalogue.method_not_supported,
        ),
        ClassificationRule(
            name="argument_not_valid",
            predicate=is_instance(ArgumentNotValidError),
            status=400,
            message=catalogue.bad_request,
            details=_validation_details(catalogue),
        ),
        ClassificationRule(
            name="message_not_readable",
            predicate=is_instance(MessageNotReadableError),
            status=400,
            message=catalogue.bad_request,
            details=_fault_message,
        ),
        ClassificationRule(
            name="argument_type_mismatch",
            predicate=is_instance(ArgumentTypeMismatchError),
            status=400,
            message=catalogue.bad_request,
            details=_type_mismatch_details(catalogue),
        ),
        ClassificationRule(
            name="media_type_not_acceptable",
            predicate=is_instance(MediaTypeNotAcceptableError),
            status=406,
            message=catalogue.media_type_not_acceptable,
            details=_fault_message,
        ),
        ClassificationRule(
            name="media_type_not_supported",
            predicate=is_instance(MediaTypeNotSupportedError),
            status=415,
            message=catalogue.media_type_not_supported,
            details=_fault_message,
        ),
        ClassificationRule(
            name="upload_size_exceeded",
            predicate=is_instance(UploadSizeExceededError),
            status=413,
            message=catalogue.request_too_large,
            details=_upload_details(limits, catalogue),
        ),
        ClassificationRule(
            name="response_status",
            predicate=is_instance(HTTPException),
            status=_http_status,
            message=_http_reason,
            details=_http_detail_code,
        ),
        ClassificationRule(
            name="resource_not_found",
            predicate=is_instance(ResourceNotFoundError),
            status=404,
            message=catalogue.not_found,
            details=_resource_path,
        ),
        ClassificationRule(
            name="access_denied",
            predicate=is_instance(AccessDeniedError),
            status=403,
            message=catalogue.access_denied,
            details=_fault_message,
        ),
        ClassificationRule(
            name="unclassified",
            predicate=_always,
            status=500,
            message=catalogue.internal_error,
            details=_unclassified_details,
            unclassified=True,
        ),
    )
