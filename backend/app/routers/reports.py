"""
Reports router.

Endpoints:
- POST /: Report a post for moderator review
- GET /me: Reports submitted by the authenticated user
- GET /{report_id}: One of the authenticated user's reports
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from app.core.auth import AuthUser, require_auth_from_state
from app.core.config import get_settings
from app.core.rate_limit import limiter
from app.models.report import (
    MyReportsResponse,
    ReportResponse,
    SubmitReportRequest,
)
from app.services.report_service import ReportService
from app.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_report_service() -> ReportService:
    return ReportService()


def get_user_service() -> UserService:
    return UserService()


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_settings().submit_report_rate_limit)
async def submit_report(
    request: Request,
    report_request: SubmitReportRequest,
    user: AuthUser = Depends(require_auth_from_state),
    report_service: ReportService = Depends(get_report_service),
    user_service: UserService = Depends(get_user_service),
) -> ReportResponse:
    """Report a post. The reporter is always the authenticated caller."""
    profile = user_service.require_user(user.auth_id)

    result = report_service.submit(
        reporter_id=profile.id,
        post_id=str(report_request.post_id),
        type=report_request.type,
        reason=report_request.reason,
    )
    return ReportResponse(**result)


@router.get("/me", response_model=MyReportsResponse)
async def get_my_reports(
    user: AuthUser = Depends(require_auth_from_state),
    report_service: ReportService = Depends(get_report_service),
    user_service: UserService = Depends(get_user_service),
) -> MyReportsResponse:
    """Reports submitted by the authenticated user, newest first."""
    profile = user_service.require_user(user.auth_id)

    reports = report_service.list_mine(profile.id)
    return MyReportsResponse(
        reports=[ReportResponse(**r) for r in reports],
        total=len(reports),
    )


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: str,
    user: AuthUser = Depends(require_auth_from_state),
    report_service: ReportService = Depends(get_report_service),
    user_service: UserService = Depends(get_user_service),
) -> ReportResponse:
    """A single report; only its reporter may read it."""
    profile = user_service.require_user(user.auth_id)

    report = report_service.get_by_id(report_id, profile.id)
    return ReportResponse(**report)
