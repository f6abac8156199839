"""
Admin moderation router.

Endpoints (admin role only):
- GET /reports: All reports, optional ?status= filter
- GET /reports/{report_id}: Report details
- POST /reports/{report_id}/handle: Apply a decision (review / keep / hide)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import AuthUser, require_auth_from_state
from app.models.report import (
    AdminReportResponse,
    AdminReportsResponse,
    HandleReportRequest,
    HandleReportResponse,
    ReportStatus,
)
from app.models.user import UserProfile
from app.services.moderation_service import ModerationService
from app.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_moderation_service() -> ModerationService:
    return ModerationService()


def get_user_service() -> UserService:
    return UserService()


async def require_admin(
    user: AuthUser = Depends(require_auth_from_state),
    user_service: UserService = Depends(get_user_service),
) -> UserProfile:
    """Resolve the caller and insist on the admin role."""
    profile = user_service.require_user(user.auth_id)
    if not profile.is_admin:
        logger.warning("Non-admin attempted moderation access: user=%s", profile.id)
        raise HTTPException(status_code=403, detail="Admin access required")
    return profile


@router.get("/reports", response_model=AdminReportsResponse)
async def list_reports(
    status: Optional[ReportStatus] = None,
    admin: UserProfile = Depends(require_admin),
    moderation_service: ModerationService = Depends(get_moderation_service),
) -> AdminReportsResponse:
    """List reports for review."""
    reports = moderation_service.list_reports(status)
    return AdminReportsResponse(
        reports=[AdminReportResponse(**r) for r in reports],
        total=len(reports),
    )


@router.get("/reports/{report_id}", response_model=AdminReportResponse)
async def get_report(
    report_id: str,
    admin: UserProfile = Depends(require_admin),
    moderation_service: ModerationService = Depends(get_moderation_service),
) -> AdminReportResponse:
    return AdminReportResponse(**moderation_service.get_report(report_id))


@router.post("/reports/{report_id}/handle", response_model=HandleReportResponse)
async def handle_report(
    report_id: str,
    body: HandleReportRequest,
    admin: UserProfile = Depends(require_admin),
    moderation_service: ModerationService = Depends(get_moderation_service),
) -> HandleReportResponse:
    """Apply a moderator decision to a report."""
    result = moderation_service.handle_report(
        report_id=report_id,
        action=body.action,
        admin_note=body.admin_note,
    )
    logger.info("Moderator %s handled report %s", admin.id, report_id)
    return HandleReportResponse(**result)
