"""Error envelope returned for every failed request."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorResponse(BaseModel):
    """Top-level error envelope.

    ``details`` is dropped from the rendered body when it is ``None``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    error_code: str
    exception_type: str
    status_code: int
    details: dict[str, Any] | None = None
    trace_id: str
    timestamp: datetime = Field(default_factory=_utcnow)

    def to_content(self) -> dict[str, Any]:
        content = self.model_dump(mode="json", by_alias=True)
        if self.details is None:
            content.pop("details")
        return content


class ValidationErrorResponse(ErrorResponse):
    """Envelope for validation failures, carrying the field -> messages map."""

    validation_errors: dict[str, list[str]] = Field(default_factory=dict)
