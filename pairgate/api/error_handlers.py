"""Error Handlers — map every failure onto the PairGate error envelope.

Invariants:
    - Every error body is {"error": {code, message, category, severity, ...}}
    - Domain errors raised on a /viewers/{viewer_id}/... route carry that viewer_id
      in their context, even when the route did not set it
    - Validation failures list offending fields only, never the submitted values
      (drafts and invitation tokens must not echo back)
    - Unhandled exceptions answer 500 INTERNAL_ERROR with no internal detail

Design Decisions:
    - Three layers, most specific first: PairGateError, RequestValidationError, Exception
    - Recoverable domain errors (CAP_REACHED, DRAFT_NOT_FOUND) log at WARNING,
      everything else at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pairgate.core.errors import (
    ErrorCategory, ErrorCode, ErrorSeverity, PairGateError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PairGateError, handle_pairgate_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _viewer_of(request: Request) -> str | None:
    return request.path_params.get("viewer_id")


def _envelope(
    code: ErrorCode,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code.value,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


async def handle_pairgate_error(request: Request, exc: PairGateError) -> JSONResponse:
    if exc.context.viewer_id is None:
        exc.context.viewer_id = _viewer_of(request)
    log = logger.warning if exc.recoverable else logger.error
    log(
        f"{exc.code.value} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "viewer_id": exc.context.viewer_id,
            "candidate_id": exc.context.candidate_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    fields = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected {request.method} {request.url.path}: "
        f"{', '.join(f['field'] for f in fields)}",
        extra={
            "error_code": ErrorCode.VALIDATION_ERROR.value,
            "path": request.url.path,
            "viewer_id": _viewer_of(request),
        },
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            ErrorCode.VALIDATION_ERROR,
            "Invalid request data",
            ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR,
            details=fields,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={
            "error_code": ErrorCode.INTERNAL_ERROR.value,
            "path": request.url.path,
            "viewer_id": _viewer_of(request),
        },
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            ErrorCode.INTERNAL_ERROR,
            "An unexpected error occurred",
            ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL,
        ),
    )
