"""Stable, user-facing messages and detail templates.

Messages are part of the API contract: clients may match on them, so they
never change with the fault's own text.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MessageCatalogue:
    method_not_supported: str
    bad_request: str
    media_type_not_acceptable: str
    media_type_not_supported: str
    request_too_large: str
    not_found: str
    access_denied: str
    internal_error: str

    # Detail templates
    validation: str
    type_mismatch: str
    max_request_size: str
    max_file_size: str
    max_upload_sizes: str


ENGLISH = MessageCatalogue(
    method_not_supported="method not supported",
    bad_request="bad request",
    media_type_not_acceptable="media type not supported",
    media_type_not_supported="unsupported media type",
    request_too_large="request too large",
    not_found="not found",
    access_denied="access denied",
    internal_error="internal application error",
    validation="{name} {message}",
    type_mismatch="Invalid value of parameter < {parameter} >. {message}",
    max_request_size="Max request size: {max_request_size} Mb",
    max_file_size="Max file size: {max_file_size} Mb",
    max_upload_sizes="Max request size: {max_request_size} Mb. Max file size: {max_file_size} Mb",
)

RUSSIAN = MessageCatalogue(
    method_not_supported="Метод не поддерживается",
    bad_request="Некорректный запрос",
    media_type_not_acceptable="Тип данных не поддерживается",
    media_type_not_supported="Не поддерживаемый тип данных",
    request_too_large="Превышен максимальный размер запроса",
    not_found="Не найдено",
    access_denied="Доступ запрещен",
    internal_error="Внутренняя ошибка приложения",
    validation="{name} {message}",
    type_mismatch="Некорректное значение параметра < {parameter} >. {message}",
    max_request_size="Максимальный размер тела запроса: {max_request_size} Mb",
    max_file_size="Максимальный размер загружаемого файла: {max_file_size} Mb",
    max_upload_sizes=(
        "Максимальный размер тела запроса: {max_request_size} Mb. "
        "Максимальный размер одного файла: {max_file_size} Mb"
    ),
)

CATALOGUES: dict[str, MessageCatalogue] = {"en": ENGLISH, "ru": RUSSIAN}


def get_catalogue(locale: str) -> MessageCatalogue:
    try:
        return CATALOGUES[locale.lower()]
    except KeyError:
        raise ValueError(f"Unsupported locale: {locale!r}") from None
