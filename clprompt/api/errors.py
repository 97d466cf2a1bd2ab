"""
API error handling and exception mapping.

Converts domain errors into JSON ``ErrorResponse`` bodies with an HTTP
status chosen from the error code.
"""

from datetime import datetime, timezone

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clprompt.api.schemas.common import ErrorResponse
from clprompt.domain.exceptions import DomainError
from clprompt.infra.config.logging_config import get_logger

logger = get_logger("api.errors")

STATUS_CODE_MAPPING = {
    "SLIDE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_PROJECT_NAME": status.HTTP_400_BAD_REQUEST,
    "EXTERNAL_SERVICE_ERROR": status.HTTP_502_BAD_GATEWAY,
    "STORAGE_QUOTA_EXCEEDED": status.HTTP_507_INSUFFICIENT_STORAGE,
    "STORAGE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_body(code: str, detail: str) -> dict:
    return ErrorResponse(
        error=code, detail=detail, timestamp=datetime.now(timezone.utc)
    ).model_dump(mode="json")


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.warning("api.domain_error", code=exc.code, detail=exc.message)
    status_code = STATUS_CODE_MAPPING.get(
        exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(status_code=status_code, content=_error_body(exc.code, exc.message))


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    formatted_errors = []
    for error in exc.errors():
        location = " -> ".join(str(loc) for loc in error["loc"])
        formatted_errors.append(f"{location}: {error['msg']}")
    detail = "Validation failed: " + "; ".join(formatted_errors)
    logger.warning("api.validation_error", detail=detail)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body("VALIDATION_ERROR", detail),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    logger.warning("api.http_exception", status=exc.status_code, detail=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(f"HTTP_{exc.status_code}", str(exc.detail)),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("api.unexpected_error", error_type=type(exc).__name__, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred. Please try again later.",
        ),
    )


def setup_error_handlers(app) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
