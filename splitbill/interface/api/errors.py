"""Error responses for the HTTP API.

Bodies carry only user-facing text, never exception internals.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from splitbill.domain.value import FieldError

logger = logging.getLogger(__name__)

SERVER_ERROR = "Something went wrong. Please try again."


def error_response(
    status_code: int, message: str, fields: list[FieldError] | None = None
) -> JSONResponse:
    """Build a JSON error body ``{error, fields?}``."""
    content: dict = {"error": message}
    if fields is not None:
        content["fields"] = [
            {"field": error.field, "message": error.message} for error in fields
        ]
    return JSONResponse(status_code=status_code, content=content)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        fields.append(
            FieldError(
                field=".".join(location) or "body",
                message="Invalid value",
                code="format",
            )
        )
    return error_response(
        status.HTTP_400_BAD_REQUEST, "Please correct the highlighted fields", fields
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    """Install the API-wide error handlers."""
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
