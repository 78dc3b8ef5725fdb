"""Domain exception hierarchy and the error-code table for structured error responses.

Every exception carries a fixed ``status_code`` and ``category`` set at the
class level and a stable ``code`` taken from :class:`ErrorCode`. Callers
provide ``message`` and an optional ``details`` mapping; an inner cause is
chained as ``__cause__`` and is never rendered to clients.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any


class ErrorCategory(str, enum.Enum):
    CLIENT = "CLIENT"
    SERVER = "SERVER"


class ErrorCode(str, enum.Enum):
    # Client errors
    BAD_REQUEST = "BadRequest"
    VALIDATION = "ValidationError"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    BUSINESS_RULE = "BusinessRule"

    # Server errors
    CONFIGURATION = "Configuration"
    DATABASE = "Database"
    EXTERNAL_DEPENDENCY = "ExternalDependency"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"

    # Boundary-only codes for faults outside the taxonomy
    MISSING_PARAMETER = "MissingParameter"
    ARGUMENT_ERROR = "ArgumentError"
    INVALID_OPERATION = "InvalidOperation"
    ACCESS_DENIED = "AccessDenied"
    TIMEOUT = "Timeout"
    OPERATION_CANCELLED = "OperationCancelled"
    INTERNAL_ERROR = "InternalError"


class AppException(Exception):
    """Base exception for all domain errors.

    Subclasses set ``code``, ``status_code`` and ``category`` at the class
    level. Instances are read-only once constructed.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    category: ErrorCategory = ErrorCategory.SERVER

    _read_only = frozenset({"message", "details", "code", "status_code", "category"})

    def __init__(
        self,
        message: str,
        details: Mapping[str, Any] | None = None,
        *,
        code: ErrorCode | str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = MappingProxyType(dict(details)) if details else None
        if code is not None:
            self.code = code
        if cause is not None:
            self.__cause__ = cause
        self._sealed = True

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self._read_only and self.__dict__.get("_sealed", False):
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__setattr__(name, value)

    @property
    def error_code(self) -> str:
        return self.code.value if isinstance(self.code, ErrorCode) else str(self.code)

    @property
    def exception_type(self) -> str:
        return type(self).__name__


class ClientErrorException(AppException):
    """4xx family: the caller can fix the request and retry."""

    code = ErrorCode.BAD_REQUEST
    status_code = 400
    category = ErrorCategory.CLIENT


class ServerErrorException(AppException):
    """5xx family: the failure is ours; clients only get a generic message."""

    code = ErrorCode.INTERNAL_ERROR
    status_code = 500
    category = ErrorCategory.SERVER


# ---------------------------------------------------------------------------
# Client errors
# ---------------------------------------------------------------------------

class BadRequestException(ClientErrorException):
    code = ErrorCode.BAD_REQUEST
    status_code = 400


class ValidationException(ClientErrorException):
    """Aggregated field-level validation failure.

    ``details`` maps a field name to its ordered violation messages. Fields
    without violations are absent.
    """

    code = ErrorCode.VALIDATION
    status_code = 400

    DEFAULT_MESSAGE = "One or more validation errors occurred."

    def __init__(
        self,
        message: str | None = None,
        validation_errors: Mapping[str, Sequence[str]] | None = None,
        *,
        cause: BaseException | None = None,
    ) -> None:
        errors = {
            field: tuple(messages)
            for field, messages in (validation_errors or {}).items()
            if messages
        }
        super().__init__(message or self.DEFAULT_MESSAGE, errors, cause=cause)

    @property
    def validation_errors(self) -> Mapping[str, tuple[str, ...]]:
        return self.details if self.details is not None else MappingProxyType({})

    @classmethod
    def from_errors(cls, validation_errors: Mapping[str, Sequence[str]]) -> ValidationException:
        return cls(validation_errors=validation_errors)

    @classmethod
    def for_field(cls, field: str, error: str) -> ValidationException:
        return cls(f"Validation failed for {field}", {field: [error]})


class UnauthorizedException(ClientErrorException):
    code = ErrorCode.UNAUTHORIZED
    status_code = 401


class ForbiddenException(ClientErrorException):
    code = ErrorCode.FORBIDDEN
    status_code = 403


class NotFoundException(ClientErrorException):
    code = ErrorCode.NOT_FOUND
    status_code = 404

    @classmethod
    def for_entity(cls, entity_name: str, key: Any) -> NotFoundException:
        return cls(
            f"{entity_name} with identifier '{key}' was not found",
            {"entityName": entity_name, "key": key},
        )


class ConflictException(ClientErrorException):
    code = ErrorCode.CONFLICT
    status_code = 409

    @classmethod
    def for_entity(cls, entity_name: str, key: Any) -> ConflictException:
        return cls(
            f"The {entity_name} with the '{key}' already exists.",
            {"entityName": entity_name, "key": key},
        )


class BusinessRuleException(ClientErrorException):
    code = ErrorCode.BUSINESS_RULE
    status_code = 400

    @classmethod
    def for_rule(cls, rule: str, violation: str) -> BusinessRuleException:
        return cls(
            f"The business rule '{rule}' was violated: {violation}.",
            {"rule": rule, "violation": violation},
        )


# ---------------------------------------------------------------------------
# Server errors
# ---------------------------------------------------------------------------

class ConfigurationException(ServerErrorException):
    code = ErrorCode.CONFIGURATION
    status_code = 500


class DatabaseException(ServerErrorException):
    code = ErrorCode.DATABASE
    status_code = 500

    @classmethod
    def for_operation(cls, operation: str, cause: BaseException) -> DatabaseException:
        return cls(
            f"Database operation '{operation}' failed.",
            {"operation": operation},
            cause=cause,
        )


class ExternalDependencyException(ServerErrorException):
    code = ErrorCode.EXTERNAL_DEPENDENCY
    status_code = 502

    @classmethod
    def for_dependency(
        cls,
        dependency_name: str,
        message: str | None = None,
        cause: BaseException | None = None,
    ) -> ExternalDependencyException:
        text = f"External dependency '{dependency_name}' failed"
        text = f"{text}: {message}" if message else f"{text}."
        return cls(text, {"dependencyName": dependency_name}, cause=cause)


class ServiceUnavailableException(ServerErrorException):
    code = ErrorCode.SERVICE_UNAVAILABLE
    status_code = 503
