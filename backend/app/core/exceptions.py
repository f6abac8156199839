"""
Global exception handlers for FastAPI.

Maps domain exceptions to HTTP responses so routers stay free of
try/except. Register with register_exception_handlers(app).
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    detail: str,
    code: Optional[str] = None,
    errors: Optional[list] = None,
) -> JSONResponse:
    """Build a standardized error JSON response."""
    content: dict = {"detail": detail}
    if code:
        content["code"] = code
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all domain exception handlers on the FastAPI app."""
    from app.models.report import (
        DuplicateReportError,
        InvalidStatusTransitionError,
        PostNotFoundError,
        ReportAccessDeniedError,
        ReportNotFoundError,
        ReportValidationError,
        SelfReportError,
    )
    from app.services.user_service import UserNotFoundError

    # --- Request validation ---

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg")}
            for err in exc.errors()
        ]
        return error_response(400, "Validation failed", "VALIDATION_ERROR", errors)

    @app.exception_handler(ReportValidationError)
    async def _report_validation(request: Request, exc: ReportValidationError) -> JSONResponse:
        return error_response(400, str(exc), "VALIDATION_ERROR")

    # --- User handlers ---

    @app.exception_handler(UserNotFoundError)
    async def _user_not_found(request: Request, exc: UserNotFoundError) -> JSONResponse:
        return error_response(404, "User not found.", "USER_NOT_FOUND")

    # --- Report handlers ---

    @app.exception_handler(PostNotFoundError)
    async def _post_not_found(request: Request, exc: PostNotFoundError) -> JSONResponse:
        return error_response(404, "Post not found.", "POST_NOT_FOUND")

    @app.exception_handler(ReportNotFoundError)
    async def _report_not_found(request: Request, exc: ReportNotFoundError) -> JSONResponse:
        return error_response(404, "Report not found.", "REPORT_NOT_FOUND")

    @app.exception_handler(SelfReportError)
    async def _self_report(request: Request, exc: SelfReportError) -> JSONResponse:
        return error_response(409, "You cannot report your own post.", "SELF_REPORT")

    @app.exception_handler(DuplicateReportError)
    async def _duplicate_report(request: Request, exc: DuplicateReportError) -> JSONResponse:
        return error_response(
            409, "Report already submitted for this post.", "DUPLICATE_REPORT"
        )

    @app.exception_handler(ReportAccessDeniedError)
    async def _report_access_denied(
        request: Request, exc: ReportAccessDeniedError
    ) -> JSONResponse:
        return error_response(403, "You can only view your own reports.", "REPORT_FORBIDDEN")

    @app.exception_handler(InvalidStatusTransitionError)
    async def _invalid_transition(
        request: Request, exc: InvalidStatusTransitionError
    ) -> JSONResponse:
        return error_response(409, str(exc), "INVALID_STATUS_TRANSITION")

    # --- Catch-all ---

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return error_response(500, "Internal server error.", "INTERNAL_ERROR")
