"""Request validation — declarative field rules and the stage that runs them.

Each request shape gets a :class:`RequestValidator` made of ordered
:class:`FieldRules`. Every field is evaluated; violations for all fields are
collected before anything is reported. The :class:`ValidationStage` holds the
explicit shape -> validator mapping built once at startup.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from fastapi import Body, Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from catalog_service.exceptions import ConfigurationException, ValidationException


@dataclass(frozen=True)
class Rule:
    check: Callable[[Any], bool]
    message: str


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def required(message: str) -> Rule:
    return Rule(_is_present, message)


def length(minimum: int, maximum: int, message: str) -> Rule:
    return Rule(lambda value: minimum <= len(value) <= maximum, message)


def max_length(maximum: int, message: str) -> Rule:
    return Rule(lambda value: len(value) <= maximum, message)


def matches(pattern: str, message: str) -> Rule:
    compiled = re.compile(pattern)
    return Rule(lambda value: compiled.fullmatch(value) is not None, message)


def at_least(minimum: int | Decimal, message: str) -> Rule:
    return Rule(lambda value: value >= minimum, message)


def at_most(maximum: int | Decimal, message: str) -> Rule:
    return Rule(lambda value: value <= maximum, message)


def greater_than(minimum: int | Decimal, message: str) -> Rule:
    return Rule(lambda value: value > minimum, message)


def fits_precision(value: Decimal, precision: int, scale: int) -> bool:
    """Return True when *value* has at most ``precision`` digits of which at most ``scale`` are decimals.

    Trailing fractional zeros are not counted, so ``12.50`` has one decimal.
    """
    if not value.is_finite():
        return False
    _, digits, exponent = value.normalize().as_tuple()
    decimals = max(-exponent, 0)
    integer_digits = max(len(digits) + exponent, 0)
    return decimals <= scale and integer_digits <= precision - scale


def precision(total_digits: int, decimal_places: int, message: str) -> Rule:
    return Rule(lambda value: fits_precision(Decimal(value), total_digits, decimal_places), message)


@dataclass(frozen=True)
class FieldRules:
    """Ordered rules for a single request field.

    ``field`` is the wire name used as the key in the error map and
    ``attribute`` the model attribute the value is read from. With a
    ``presence`` rule, a failed presence check ends the chain for this field.
    Without one, the field is optional and absent values are not checked.
    """

    field: str
    attribute: str
    rules: tuple[Rule, ...] = ()
    presence: Rule | None = None

    def evaluate(self, value: Any) -> list[str]:
        if self.presence is not None:
            if not self.presence.check(value):
                return [self.presence.message]
        elif value is None or value == "":
            return []
        return [rule.message for rule in self.rules if not rule.check(value)]


class RequestValidator:
    """Evaluates every field of one request shape and collects all violations."""

    def __init__(self, *fields: FieldRules) -> None:
        self._fields = fields

    @property
    def fields(self) -> tuple[FieldRules, ...]:
        return self._fields

    def validate(self, request: BaseModel) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        for field_rules in self._fields:
            messages = field_rules.evaluate(getattr(request, field_rules.attribute, None))
            if messages:
                errors[field_rules.field] = messages
        return errors


def parse_payload(
    request_type: type[BaseModel], payload: Any
) -> tuple[BaseModel | None, dict[str, list[str]]]:
    """Parse *payload* into *request_type*, keeping the fields that parse.

    Returns the request model and the parse errors keyed by wire field name.
    When some fields fail, the model is built from the remaining ones so their
    rules can still run. A payload that is not an object yields no model.
    """
    try:
        return request_type.model_validate(payload), {}
    except PydanticValidationError as exc:
        failures = exc.errors()

    errors: dict[str, list[str]] = {}
    for failure in failures:
        field = ".".join(str(part) for part in failure["loc"]) or "request"
        errors.setdefault(field, []).append(failure["msg"])

    if not isinstance(payload, Mapping):
        return None, errors

    failed = {str(failure["loc"][0]) for failure in failures if failure["loc"]}
    aliases = {name: info.alias or name for name, info in request_type.model_fields.items()}
    parsed = {
        key: value
        for key, value in payload.items()
        if key not in failed and aliases.get(key, key) not in failed
    }
    return request_type.model_validate(parsed), errors


class ValidationStage:
    """Runs the registered validator for a request before it reaches a service."""

    def __init__(self, validators: Mapping[type[BaseModel], RequestValidator]) -> None:
        self._validators = dict(validators)

    def validator_for(self, request_type: type[BaseModel]) -> RequestValidator | None:
        return self._validators.get(request_type)

    def collect(self, request: BaseModel) -> dict[str, list[str]]:
        validator = self.validator_for(type(request))
        return validator.validate(request) if validator is not None else {}

    def validate(self, request: BaseModel) -> None:
        """Raise one aggregated :class:`ValidationException` if *request* violates any rule."""
        errors = self.collect(request)
        if errors:
            raise ValidationException.from_errors(errors)

    def validate_payload(self, request_type: type[BaseModel], payload: Any) -> BaseModel:
        """Parse and validate a raw payload, reporting parse and rule violations together.

        A field that fails to parse keeps its parse message; the rules still run
        on every field that did parse.
        """
        request, errors = parse_payload(request_type, payload)
        if request is not None:
            for field, messages in self.collect(request).items():
                errors.setdefault(field, messages)
        if errors:
            raise ValidationException.from_errors(errors)
        return request


def get_validation_stage(request: Request) -> ValidationStage:
    stage = getattr(request.app.state, "validation_stage", None)
    if stage is None:
        raise ConfigurationException("Request validation stage is not configured")
    return stage


def validated_body(request_type: type[BaseModel]):
    """Factory for a FastAPI dependency yielding a validated request body.

    The raw JSON body is parsed here rather than by FastAPI so that parse
    failures and rule violations are reported together. The endpoint body
    runs only after the stage accepts the payload, so no service or
    repository call happens for an invalid request.
    """

    async def _validate(request: Request, body: Any = Body(...)) -> BaseModel:
        return get_validation_stage(request).validate_payload(request_type, body)

    return _validate
