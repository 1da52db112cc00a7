"""Translator: converts any raised fault into a complete JSON error response.

The translator holds only the immutable classification table, so one
instance is safely shared by every request. Faults that reach the catch-all
rule are logged at ERROR level, with their traceback and chained causes,
before the response is built.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from starlette.responses import Response

from restfaults.config import FaultSettings, UploadLimits, settings
from restfaults.errors import ClassificationError
from restfaults.messages import get_catalogue
from restfaults.rules import ClassificationRule, build_rules
from restfaults.schemas import ApiErrorBody

logger = logging.getLogger(__name__)

MEDIA_TYPE = "application/json"


def log_unclassified(exc: BaseException) -> None:
    """Log a fault no rule anticipated, including its chained causes."""
    logger.error(
        "Unexpected error: %s: %s",
        type(exc).__name__,
        exc,
        exc_info=(type(exc), exc, exc.__traceback__),
    )


@dataclass(frozen=True)
class TranslatedResponse:
    status_code: int
    headers: dict[str, str]
    body: ApiErrorBody

    def render(self) -> bytes:
        """Serialize the body as compact UTF-8 JSON, dropping absent details."""
        return self.body.model_dump_json(exclude_none=True).encode("utf-8")

    def to_response(self) -> Response:
        return Response(
            content=self.render(),
            status_code=self.status_code,
            headers=self.headers,
        )


class ErrorTranslator:
    def __init__(self, rules: Sequence[ClassificationRule]) -> None:
        self._rules = tuple(rules)
        if not self._rules or not self._rules[-1].unclassified:
            raise ValueError("The last classification rule must be the catch-all rule")

    @classmethod
    def from_settings(cls, app_settings: FaultSettings | None = None) -> "ErrorTranslator":
        app_settings = app_settings or settings
        rules = build_rules(
            UploadLimits.from_settings(app_settings),
            get_catalogue(app_settings.LOCALE),
        )
        return cls(rules)

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    def classify(self, exc: BaseException) -> ClassificationRule:
        """Return the first rule whose predicate matches ``exc``."""
        for rule in self._rules:
            try:
                matched = rule.predicate(exc)
            except Exception as err:
                raise ClassificationError(rule.name, exc) from err
            if matched:
                return rule
        # The catch-all matches everything; reaching this is a broken table.
        raise ClassificationError(self._rules[-1].name, exc)

    def translate(self, exc: BaseException) -> TranslatedResponse:
        rule = self.classify(exc)
        if rule.unclassified:
            log_unclassified(exc)

        try:
            status_code = rule.status_for(exc)
            body = ApiErrorBody(message=rule.message_for(exc), details=rule.details(exc) or None)
        except Exception as err:
            raise ClassificationError(rule.name, exc) from err

        return TranslatedResponse(
            status_code=status_code,
            headers={"Connection": "close", "Content-Type": MEDIA_TYPE},
            body=body,
        )
