"""Error translation boundary.

Every failure leaving the request pipeline is turned into exactly one
:class:`~catalog_service.schemas.responses.ErrorResponse` here and logged
once: ``error`` with traceback for status >= 500, ``warning`` otherwise.
Client errors keep their structured detail; unclassified faults only ever
produce a generic message.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from catalog_service.exceptions import AppException, ErrorCode, ValidationException
from catalog_service.middleware.request_id import get_request_id
from catalog_service.schemas.responses import ErrorResponse, ValidationErrorResponse

logger = logging.getLogger(__name__)

SYSTEM_EXCEPTION_TYPE = "SystemException"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."

_REQUEST_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})

_FaultTypes = type[BaseException] | tuple[type[BaseException], ...]

# First match wins. A message of None means the exception's own text is shown.
SYSTEM_FAULTS: tuple[tuple[_FaultTypes, str | None, ErrorCode, int], ...] = (
    (KeyError, "Required parameter is missing.", ErrorCode.MISSING_PARAMETER, 400),
    (PermissionError, None, ErrorCode.ACCESS_DENIED, 403),
    (TimeoutError, "The operation timed out.", ErrorCode.TIMEOUT, 408),
    (asyncio.CancelledError, "The operation was cancelled.", ErrorCode.OPERATION_CANCELLED, 408),
    ((ValueError, TypeError), None, ErrorCode.ARGUMENT_ERROR, 400),
    (RuntimeError, None, ErrorCode.INVALID_OPERATION, 400),
)


def _field_name(loc: Sequence[Any]) -> str:
    parts = list(loc)
    if parts and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
        # A bare location or a character position means the payload itself is unusable
        if parts and isinstance(parts[0], int):
            parts = []
    return ".".join(str(part) for part in parts) or "request"


def normalize_validation_errors(
    exc: RequestValidationError | PydanticValidationError,
) -> ValidationException:
    """Fold framework validation errors into the field -> messages shape."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = _field_name(error.get("loc", ()))
        errors.setdefault(field, []).append(error.get("msg", "Invalid value."))
    return ValidationException(validation_errors=errors, cause=exc)


def _plain(details: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: list(value) if isinstance(value, tuple) else value
        for key, value in details.items()
    }


class ErrorTranslator:
    """Classify any exception into the error envelope."""

    def translate(self, exc: BaseException, trace_id: str) -> ErrorResponse:
        response = self._classify(exc, trace_id)
        self._log(exc, response)
        return response

    def to_response(self, exc: BaseException, trace_id: str) -> JSONResponse:
        envelope = self.translate(exc, trace_id)
        return JSONResponse(status_code=envelope.status_code, content=envelope.to_content())

    def _classify(self, exc: BaseException, trace_id: str) -> ErrorResponse:
        if isinstance(exc, ValidationException):
            return self._validation_response(exc, trace_id)

        if isinstance(exc, AppException):
            return ErrorResponse(
                message=exc.message,
                error_code=exc.error_code,
                exception_type=exc.exception_type,
                status_code=exc.status_code,
                details=_plain(exc.details) if exc.details is not None else None,
                trace_id=trace_id,
            )

        if isinstance(exc, (RequestValidationError, PydanticValidationError)):
            return self._validation_response(normalize_validation_errors(exc), trace_id)

        for fault_type, message, code, status_code in SYSTEM_FAULTS:
            if isinstance(exc, fault_type):
                return self._system_response(message or str(exc) or code.value, code, status_code, trace_id)

        return self._system_response(UNEXPECTED_ERROR_MESSAGE, ErrorCode.INTERNAL_ERROR, 500, trace_id)

    @staticmethod
    def _validation_response(exc: ValidationException, trace_id: str) -> ValidationErrorResponse:
        errors = _plain(exc.validation_errors)
        return ValidationErrorResponse(
            message=exc.message,
            error_code=exc.error_code,
            exception_type=exc.exception_type,
            status_code=exc.status_code,
            details=errors,
            validation_errors=errors,
            trace_id=trace_id,
        )

    @staticmethod
    def _system_response(message: str, code: ErrorCode, status_code: int, trace_id: str) -> ErrorResponse:
        return ErrorResponse(
            message=message,
            error_code=code.value,
            exception_type=SYSTEM_EXCEPTION_TYPE,
            status_code=status_code,
            trace_id=trace_id,
        )

    @staticmethod
    def _log(exc: BaseException, response: ErrorResponse) -> None:
        if isinstance(response, ValidationErrorResponse):
            logger.warning(
                "Validation failed: %s | TraceId: %s | Details: %s",
                response.message,
                response.trace_id,
                response.validation_errors,
            )
        elif response.status_code >= 500:
            logger.error(
                "Server error occurred: %s | TraceId: %s",
                exc,
                response.trace_id,
                exc_info=exc,
            )
        else:
            logger.warning(
                "Client error occurred: %s | TraceId: %s | StatusCode: %d",
                response.message,
                response.trace_id,
                response.status_code,
            )


class ErrorTranslationMiddleware(BaseHTTPMiddleware):
    """Catch anything no exception handler claimed and answer with the envelope."""

    def __init__(self, app: ASGIApp, translator: ErrorTranslator) -> None:
        super().__init__(app)
        self._translator = translator

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return self._translator.to_response(exc, get_request_id(request))


def register_exception_handlers(app: FastAPI, translator: ErrorTranslator) -> None:
    """Route domain and request-validation errors through *translator*.

    Everything else is left to :class:`ErrorTranslationMiddleware`, so each
    failing request is translated by exactly one of the two paths.
    """

    async def _translate(request: Request, exc: Exception) -> JSONResponse:
        return translator.to_response(exc, get_request_id(request))

    app.add_exception_handler(AppException, _translate)
    app.add_exception_handler(RequestValidationError, _translate)
