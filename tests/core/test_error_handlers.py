import json
import logging

from fastapi.exceptions import RequestValidationError
import pytest

from src.core.errors import handlers
from src.core.errors.exceptions import (
    CoreException,
    DuplicateFieldException,
    InfrastructureException,
    InstanceNotFoundException,
)
from tests.helpers.requests import build_request


@pytest.fixture(autouse=True)
def _patch_response_logger(monkeypatch: pytest.MonkeyPatch) -> logging.Logger:
    logger = logging.getLogger("response_logger_test")
    logger.handlers = []
    logger.setLevel(logging.DEBUG)
    logger.propagate = True
    monkeypatch.setattr(handlers, "response_logger", logger)
    return logger


@pytest.fixture(autouse=True)
def _mute_sentry(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        handlers.sentry_sdk, "capture_exception", lambda *_, **__: None
    )


def test_format_log_message_masks_sensitive_data() -> None:
    request = build_request(path="/users/1", headers={"x-request-id": "req-123"})

    message = handlers.format_log_message(
        request,
        "instance not found",
        "user missing",
        {"token": "secret", "id": 1},
        include_request_path=True,
    )

    assert "[req-123] [Instance not found] GET /users/1 | user missing" in message
    assert "token=***" in message
    assert "id=1" in message


def test_format_log_message_truncates_long_text() -> None:
    request = build_request()
    long_message = "a" * 600

    message = handlers.format_log_message(request, "error", long_message)

    assert message.endswith("...")
    assert message.count("a") == 497


def test_field_errors_from_validation() -> None:
    errors = [
        {
            "type": "value_error",
            "loc": ("body", "name"),
            "msg": "Value error, Name must be a string and cannot be empty",
            "input": "",
        },
        {
            "type": "missing",
            "loc": ("body", "email"),
            "msg": "Field required",
            "input": {"name": ""},
        },
        {
            "type": "int_parsing",
            "loc": ("path", "user_id"),
            "msg": "Input should be a valid integer",
            "input": "abc",
        },
    ]

    assert handlers.field_errors_from_validation(errors) == [
        {
            "type": "field",
            "value": "",
            "msg": "Name must be a string and cannot be empty",
            "path": "name",
            "location": "body",
        },
        {
            "type": "field",
            "value": None,
            "msg": "Field required",
            "path": "email",
            "location": "body",
        },
        {
            "type": "field",
            "value": "abc",
            "msg": "Input should be a valid integer",
            "path": "user_id",
            "location": "path",
        },
    ]


@pytest.mark.asyncio
async def test_request_validation_handler_returns_400_field_errors() -> None:
    handler = handlers.RequestValidationExceptionHandler()
    exc = RequestValidationError(
        [
            {
                "type": "value_error",
                "loc": ("body", "email"),
                "msg": "value is not a valid email address",
                "input": "nope",
            }
        ]
    )

    response = await handler(build_request(method="POST"), exc)

    assert response.status_code == 400
    assert json.loads(response.body) == {
        "errors": [
            {
                "type": "field",
                "value": "nope",
                "msg": "value is not a valid email address",
                "path": "email",
                "location": "body",
            }
        ]
    }


@pytest.mark.asyncio
async def test_duplicate_field_handler_matches_validation_shape(
    caplog: pytest.LogCaptureFixture,
) -> None:
    handler = handlers.DuplicateFieldExceptionHandler()
    caplog.set_level(logging.INFO, logger="response_logger_test")

    response = await handler(
        build_request(method="POST"),
        DuplicateFieldException(
            field="email", value="taken@example.com", message="Email already exists"
        ),
    )

    assert response.status_code == 400
    assert json.loads(response.body) == {
        "errors": [
            {
                "type": "field",
                "value": "taken@example.com",
                "msg": "Email already exists",
                "path": "email",
                "location": "body",
            }
        ]
    }
    assert any("Instance already exists" in r.message for r in caplog.records)


def test_duplicate_field_default_message() -> None:
    exc = DuplicateFieldException(field="email", value="a@b.co")

    assert exc.message == "Email already exists"


@pytest.mark.asyncio
async def test_core_exception_handler(caplog: pytest.LogCaptureFixture) -> None:
    handler = handlers.CoreExceptionHandler()
    caplog.set_level(logging.INFO, logger="response_logger_test")

    response = await handler(build_request(), CoreException("failed to process"))

    assert response.status_code == 400
    assert json.loads(response.body) == {
        "error": "Bad request",
        "message": "failed to process",
    }
    assert any("Bad request" in record.message for record in caplog.records)


@pytest.mark.asyncio
async def test_instance_not_found_handler() -> None:
    handler = handlers.InstanceNotFoundExceptionHandler()

    response = await handler(
        build_request(path="/users/9"), InstanceNotFoundException("User not found")
    )

    assert response.status_code == 404
    assert json.loads(response.body) == {
        "error": "Instance not found",
        "message": "User not found",
    }


@pytest.mark.asyncio
async def test_infrastructure_handler_logs_error(
    caplog: pytest.LogCaptureFixture,
) -> None:
    handler = handlers.InfrastructureExceptionHandler()
    caplog.set_level(logging.ERROR, logger="response_logger_test")

    response = await handler(
        build_request(path="/health/"),
        InfrastructureException("db down", additional_info={"database": False}),
    )

    assert response.status_code == 500
    assert json.loads(response.body) == {
        "error": "Infrastructure error",
        "message": "db down",
    }
    assert any(
        record.levelno == logging.ERROR and "database=False" in record.message
        for record in caplog.records
    )
