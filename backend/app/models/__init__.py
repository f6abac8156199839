"""Pydantic models for Portlink API."""

from app.models.report import (
    DuplicateReportError,
    InvalidStatusTransitionError,
    MyReportsResponse,
    PostNotFoundError,
    ReportAccessDeniedError,
    ReportError,
    ReportNotFoundError,
    ReportResponse,
    ReportStatus,
    ReportType,
    ReportValidationError,
    SelfReportError,
    SubmitReportRequest,
)
from app.models.user import PostRef, UserProfile, UserRole

__all__ = [
    # User models
    "PostRef",
    "UserProfile",
    "UserRole",
    # Report models
    "MyReportsResponse",
    "ReportResponse",
    "ReportStatus",
    "ReportType",
    "SubmitReportRequest",
    # Report exceptions
    "DuplicateReportError",
    "InvalidStatusTransitionError",
    "PostNotFoundError",
    "ReportAccessDeniedError",
    "ReportError",
    "ReportNotFoundError",
    "ReportValidationError",
    "SelfReportError",
]
