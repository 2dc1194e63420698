"""Exception handlers that turn failures into JSON bodies.

Nothing raised while serving a request escapes as a crash: pipeline errors
keep their status and payload, body validation errors become 400, and
anything else is logged and answered with a generic 500.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import StudyAidError
from app.core.logging import get_logger

logger = get_logger(__name__)


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


async def study_aid_error_handler(request: Request, exc: StudyAidError) -> JSONResponse:
    logger.error(
        f"[{exc.status_code}] {request.method} {request.url.path}: {exc.message}"
        + (f" ({exc.details})" if exc.details else "")
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = _describe_validation(exc)
    logger.info(f"[400] {request.method} {request.url.path}: {details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": details},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"[500] {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StudyAidError, study_aid_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
