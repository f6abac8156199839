"""
Post report models.

Users flag posts for moderator review. A reporter can never report their
own post and can hold at most one open (PENDING or REVIEWED) report per
post. Moderators move reports to REVIEWED, RESOLVED or REJECTED.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from app.core.constants import (
    ADMIN_NOTE_MAX_LENGTH,
    REPORT_REASON_MAX_LENGTH,
    REPORT_REASON_MIN_LENGTH,
)

# ===========================================
# Enums
# ===========================================


class ReportType(str, Enum):
    """Why a post is being reported."""

    SPAM = "SPAM"
    ABUSE = "ABUSE"
    INAPPROPRIATE = "INAPPROPRIATE"
    COPYRIGHT = "COPYRIGHT"
    OTHER = "OTHER"


class ReportStatus(str, Enum):
    """Moderation state of a report."""

    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


# Statuses that block the same reporter from filing again on the same post
OPEN_REPORT_STATUSES: tuple[ReportStatus, ...] = (ReportStatus.PENDING, ReportStatus.REVIEWED)

# Moderator-driven transitions; RESOLVED and REJECTED are terminal
ALLOWED_STATUS_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.PENDING: frozenset(
        {ReportStatus.REVIEWED, ReportStatus.REJECTED, ReportStatus.RESOLVED}
    ),
    ReportStatus.REVIEWED: frozenset({ReportStatus.REJECTED, ReportStatus.RESOLVED}),
    ReportStatus.RESOLVED: frozenset(),
    ReportStatus.REJECTED: frozenset(),
}


class HandleReportAction(str, Enum):
    """Moderator decision on a report."""

    REVIEW = "review"  # acknowledge, keep investigating
    KEEP = "keep"  # post is fine, report rejected
    HIDE = "hide"  # post hidden, report resolved


ACTION_TARGET_STATUS: dict[HandleReportAction, ReportStatus] = {
    HandleReportAction.REVIEW: ReportStatus.REVIEWED,
    HandleReportAction.KEEP: ReportStatus.REJECTED,
    HandleReportAction.HIDE: ReportStatus.RESOLVED,
}


# ===========================================
# Request Models
# ===========================================


class SubmitReportRequest(BaseModel):
    """Report a post for moderator review."""

    post_id: UUID = Field(..., validation_alias=AliasChoices("post_id", "postId"))
    type: ReportType
    reason: str = Field(
        ...,
        min_length=REPORT_REASON_MIN_LENGTH,
        max_length=REPORT_REASON_MAX_LENGTH,
    )


class HandleReportRequest(BaseModel):
    """Moderator decision on a report."""

    action: HandleReportAction
    admin_note: Optional[str] = Field(None, max_length=ADMIN_NOTE_MAX_LENGTH)


# ===========================================
# Response Models
# ===========================================


class ReportPostSummary(BaseModel):
    """Minimal post context shown next to a report."""

    id: str
    title: str
    status: str


class ReportResponse(BaseModel):
    """A report as seen by its reporter."""

    id: str
    reporter_id: str
    post_id: str
    type: ReportType
    reason: str
    status: ReportStatus
    created_at: datetime
    post: Optional[ReportPostSummary] = None


class MyReportsResponse(BaseModel):
    """Reports submitted by the caller, newest first."""

    reports: list[ReportResponse]
    total: int


class AdminReportResponse(ReportResponse):
    """A report as seen by a moderator."""

    post_author_id: Optional[str] = None
    admin_note: Optional[str] = None
    reviewed_at: Optional[datetime] = None


class AdminReportsResponse(BaseModel):
    reports: list[AdminReportResponse]
    total: int


class HandleReportResponse(BaseModel):
    """Outcome of a moderator decision."""

    id: str
    status: ReportStatus
    post_hidden: bool
    message: str


# ===========================================
# Exception Classes
# ===========================================


class ReportError(Exception):
    """Base exception for report errors."""

    pass


class ReportValidationError(ReportError):
    """Malformed report input (unknown type, reason length out of bounds)."""

    pass


class PostNotFoundError(ReportError):
    """Reported post does not exist."""

    pass


class ReportNotFoundError(ReportError):
    """Report does not exist."""

    pass


class SelfReportError(ReportError):
    """Cannot report your own post."""

    pass


class DuplicateReportError(ReportError):
    """An open report from this reporter already exists for this post."""

    pass


class ReportAccessDeniedError(ReportError):
    """Report belongs to another user."""

    pass


class InvalidStatusTransitionError(ReportError):
    """Requested moderation action is not allowed from the report's current status."""

    def __init__(self, current: ReportStatus, target: ReportStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move report from {current.value} to {target.value}")
