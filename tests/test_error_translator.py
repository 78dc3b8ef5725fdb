"""Tests for the error translator and the request pipeline boundary."""

from __future__ import annotations

import asyncio
import logging

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pydantic import BaseModel, ValidationError

from catalog_service.exceptions import (
    ConflictException,
    DatabaseException,
    ServiceUnavailableException,
    ValidationException,
)
from catalog_service.middleware.error_handler import ErrorTranslator
from catalog_service.middleware.request_id import REQUEST_ID_HEADER
from catalog_service.schemas.responses import ValidationErrorResponse

TRACE = "trace-123"


@pytest.fixture
def translator() -> ErrorTranslator:
    return ErrorTranslator()


class TestDomainErrors:
    def test_client_error_keeps_fields(self, translator: ErrorTranslator) -> None:
        envelope = translator.translate(ConflictException.for_entity("Category", "Tools"), TRACE)

        assert envelope.status_code == 409
        assert envelope.error_code == "Conflict"
        assert envelope.exception_type == "ConflictException"
        assert envelope.details == {"entityName": "Category", "key": "Tools"}
        assert envelope.trace_id == TRACE

    def test_validation_error_uses_validation_envelope(self, translator: ErrorTranslator) -> None:
        exc = ValidationException.from_errors({"newStock": ["Stock must be greater than or equal to 0."]})
        envelope = translator.translate(exc, TRACE)

        assert isinstance(envelope, ValidationErrorResponse)
        content = envelope.to_content()
        assert content["validationErrors"] == {"newStock": ["Stock must be greater than or equal to 0."]}
        assert content["details"] == content["validationErrors"]
        assert content["errorCode"] == "ValidationError"

    def test_server_domain_error_keeps_message_not_cause(self, translator: ErrorTranslator) -> None:
        cause = OSError("password=hunter2")
        envelope = translator.translate(DatabaseException.for_operation("list categories", cause), TRACE)

        assert envelope.status_code == 500
        assert envelope.message == "Database operation 'list categories' failed."
        assert "hunter2" not in envelope.model_dump_json()

    def test_details_absent_when_none(self, translator: ErrorTranslator) -> None:
        content = translator.translate(ServiceUnavailableException("down"), TRACE).to_content()
        assert "details" not in content
        assert content["statusCode"] == 503


class TestFrameworkValidation:
    def test_pydantic_error_is_normalised(self, translator: ErrorTranslator) -> None:
        class Shape(BaseModel):
            stock: int

        with pytest.raises(ValidationError) as exc_info:
            Shape(stock="many")

        envelope = translator.translate(exc_info.value, TRACE)

        assert envelope.status_code == 400
        assert envelope.exception_type == "ValidationException"
        assert "stock" in envelope.validation_errors

    @pytest.mark.parametrize(
        "loc,field",
        [
            (("body", 0), "request"),
            (("body",), "request"),
            (("body", "price"), "price"),
            (("query", "maxPrice"), "maxPrice"),
            ((), "request"),
        ],
    )
    def test_field_keys(self, translator: ErrorTranslator, loc, field) -> None:
        exc = RequestValidationError([{"loc": loc, "msg": "Invalid value.", "type": "value_error"}])

        envelope = translator.translate(exc, TRACE)

        assert list(envelope.validation_errors) == [field]

    def test_undecodable_body_keyed_as_request(self, client: TestClient) -> None:
        resp = client.post(
            "/api/v1/categories",
            content=b"\xff\xfe",
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        assert list(resp.json()["validationErrors"]) == ["request"]

    def test_missing_body_keyed_as_request(self, client: TestClient) -> None:
        resp = client.post("/api/v1/categories")

        assert resp.status_code == 400
        assert list(resp.json()["validationErrors"]) == ["request"]


class TestSystemFaults:
    @pytest.mark.parametrize(
        "exc,status,code,message",
        [
            (KeyError("id"), 400, "MissingParameter", "Required parameter is missing."),
            (ValueError("bad value"), 400, "ArgumentError", "bad value"),
            (TypeError("wrong type"), 400, "ArgumentError", "wrong type"),
            (RuntimeError("not now"), 400, "InvalidOperation", "not now"),
            (PermissionError("no access"), 403, "AccessDenied", "no access"),
            (TimeoutError(), 408, "Timeout", "The operation timed out."),
            (asyncio.CancelledError(), 408, "OperationCancelled", "The operation was cancelled."),
            (ZeroDivisionError("division by zero"), 500, "InternalError", "An unexpected error occurred."),
        ],
    )
    def test_mapping(self, translator: ErrorTranslator, exc, status, code, message) -> None:
        envelope = translator.translate(exc, TRACE)

        assert envelope.status_code == status
        assert envelope.error_code == code
        assert envelope.message == message
        assert envelope.exception_type == "SystemException"
        assert envelope.details is None


class TestLogging:
    def test_server_error_logged_once_at_error(
        self, translator: ErrorTranslator, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="catalog_service.middleware.error_handler"):
            translator.translate(ZeroDivisionError("x"), TRACE)

        assert [r.levelno for r in caplog.records] == [logging.ERROR]
        assert TRACE in caplog.records[0].getMessage()
        assert caplog.records[0].exc_info is not None

    def test_validation_logged_with_field_map(
        self, translator: ErrorTranslator, caplog: pytest.LogCaptureFixture
    ) -> None:
        exc = ValidationException.from_errors({"name": ["Category name is required."]})
        with caplog.at_level(logging.WARNING, logger="catalog_service.middleware.error_handler"):
            translator.translate(exc, TRACE)

        assert [r.levelno for r in caplog.records] == [logging.WARNING]
        assert "Category name is required." in caplog.records[0].getMessage()


class TestPipeline:
    def _add_failing_route(self, app: FastAPI, exc: Exception) -> None:
        @app.get("/boom")
        async def boom() -> dict:
            raise exc

    def test_unexpected_fault_becomes_generic_500(self, app: FastAPI) -> None:
        self._add_failing_route(app, ZeroDivisionError("secret internals"))
        client = TestClient(app)

        resp = client.get("/boom", headers={REQUEST_ID_HEADER: TRACE})

        assert resp.status_code == 500
        body = resp.json()
        assert body["message"] == "An unexpected error occurred."
        assert body["errorCode"] == "InternalError"
        assert body["traceId"] == TRACE
        assert "secret" not in resp.text
        assert resp.headers[REQUEST_ID_HEADER] == TRACE

    def test_domain_error_translated_once(self, app: FastAPI, caplog: pytest.LogCaptureFixture) -> None:
        self._add_failing_route(app, ConflictException.for_entity("Product", "Hammer"))
        client = TestClient(app)

        with caplog.at_level(logging.WARNING, logger="catalog_service.middleware.error_handler"):
            resp = client.get("/boom")

        assert resp.status_code == 409
        assert len(caplog.records) == 1
        assert resp.json()["traceId"] == resp.headers[REQUEST_ID_HEADER]

    def test_storage_fault_from_repository(self, client: TestClient, categories) -> None:
        async def failing_get_all():
            raise DatabaseException.for_operation("list categories", OSError("connection refused"))

        categories.get_all = failing_get_all

        resp = client.get("/api/v1/categories")

        assert resp.status_code == 500
        assert resp.json()["errorCode"] == "Database"
        assert resp.json()["details"] == {"operation": "list categories"}
        assert "refused" not in resp.text
