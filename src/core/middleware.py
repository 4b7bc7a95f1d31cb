from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import re
import time
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import sentry_sdk
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError
from starlette.responses import Response

from loggers import get_logger
from src.core.database.errors import is_unique_violation

logger = get_logger(__name__)
timing_logger = get_logger("src.request.timing", plain_format=True)
UNEXPECTED_ERROR_DETAIL = "Unexpected error"

SLOW_REQUEST_SECONDS = 2
MODERATE_REQUEST_SECONDS = 0.5


@dataclass(slots=True)
class IntegrityErrorHandlingResult:
    response: JSONResponse
    send_to_sentry: bool
    is_server_error: bool


def register_middlewares(app: FastAPI) -> None:
    """Registers all custom middlewares in proper order"""

    @app.middleware("http")
    async def security_headers_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        return response

    @app.middleware("http")
    async def request_timing_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        if process_time < MODERATE_REQUEST_SECONDS:
            level = timing_logger.info
            category = "[FAST]"
        elif process_time < SLOW_REQUEST_SECONDS:
            level = timing_logger.warning
            category = "[MODERATE]"
        else:
            level = timing_logger.warning
            category = "[SLOW]"

        level(
            "%s %s %s |%.3fs|%s",
            category,
            request.method,
            request.url.path,
            process_time,
            response.status_code,
        )
        return response

    @app.middleware("http")
    async def database_error_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except IntegrityError as exc:
            handled_result = handle_integrity_error(exc)
            log_message = f"Integrity error at {request.url.path}: {str(exc.orig)}"
            if handled_result.is_server_error:
                logger.error(log_message, exc_info=True)
            else:
                logger.info(log_message)
            if handled_result.send_to_sentry:
                sentry_sdk.capture_exception(exc)
            return handled_result.response
        except OperationalError as e:
            logger.error(
                f"Database connection error at {request.url.path}: {str(e.orig)}"
            )
            sentry_sdk.capture_exception(e)
            return JSONResponse(
                status_code=500,
                content={
                    "detail": "Database connection error. Please try again later."
                },
            )
        except ProgrammingError as e:
            logger.error(f"SQL syntax error at {request.url.path}: {str(e.orig)}")
            sentry_sdk.capture_exception(e)
            return JSONResponse(
                status_code=500, content={"detail": "Database query error."}
            )

    @app.middleware("http")
    async def unexpected_error_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                "Unexpected error at %s: %s\n%s",
                request.url.path,
                str(e),
                traceback.format_exc(),
            )
            sentry_sdk.capture_exception(e)
            return JSONResponse(
                status_code=500, content={"detail": UNEXPECTED_ERROR_DETAIL}
            )


def handle_integrity_error(error: IntegrityError) -> IntegrityErrorHandlingResult:
    """
    Build a handling result for an IntegrityError that escaped the service layer.

    Unique violations become 409 with the conflicting key; anything else is a
    server error reported to Sentry.
    """
    if is_unique_violation(error):
        raw_message = str(error.orig)
        detail_message = getattr(error.orig, "detail", None) or raw_message
        match = re.search(r"\(([^)]+)\)", detail_message)
        return IntegrityErrorHandlingResult(
            response=JSONResponse(
                status_code=409,
                content={"detail": match.group(1) if match else detail_message},
            ),
            send_to_sentry=False,
            is_server_error=False,
        )

    return IntegrityErrorHandlingResult(
        response=JSONResponse(
            status_code=500, content={"detail": UNEXPECTED_ERROR_DETAIL}
        ),
        send_to_sentry=True,
        is_server_error=True,
    )
