"""
Report service for post reports.

Handles:
- Submitting a report against a post (validation, self-report and
  duplicate-open-report prevention)
- Listing the caller's own reports with minimal post context
- Reading a single report, visible only to its reporter

Duplicate prevention relies on the partial unique index
uq_reports_open_reporter_post (migrations/001_create_reports.sql); the
pre-insert lookup only gives callers a clean error in the common case.
"""

import logging
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from app.core.constants import (
    PG_INVALID_TEXT_REPRESENTATION,
    PG_UNIQUE_VIOLATION,
    REPORT_REASON_MAX_LENGTH,
    REPORT_REASON_MIN_LENGTH,
    REPORTS_TABLE,
)
from app.core.database import get_supabase
from app.models.report import (
    OPEN_REPORT_STATUSES,
    DuplicateReportError,
    PostNotFoundError,
    ReportAccessDeniedError,
    ReportError,
    ReportNotFoundError,
    ReportStatus,
    ReportType,
    ReportValidationError,
    SelfReportError,
)
from app.services.post_service import PostService

logger = logging.getLogger(__name__)

# PostgREST embed of the reported post's display fields
REPORT_WITH_POST_SELECT = "*, post:posts(id, title, status)"


def validate_report_input(type: Any, reason: Any) -> ReportType:
    """Check report type and reason before touching the database."""
    try:
        report_type = ReportType(type)
    except ValueError:
        allowed = ", ".join(t.value for t in ReportType)
        raise ReportValidationError(f"Invalid report type {type!r}. Allowed: {allowed}")

    if not isinstance(reason, str):
        raise ReportValidationError("Reason must be a string")
    if not REPORT_REASON_MIN_LENGTH <= len(reason) <= REPORT_REASON_MAX_LENGTH:
        raise ReportValidationError(
            f"Reason must be between {REPORT_REASON_MIN_LENGTH} and "
            f"{REPORT_REASON_MAX_LENGTH} characters"
        )
    return report_type


class ReportService:
    """Service for submitting and reading post reports."""

    def __init__(
        self,
        supabase: Optional[Client] = None,
        post_service: Optional[PostService] = None,
    ) -> None:
        self._supabase = supabase
        self._post_service = post_service

    @property
    def supabase(self) -> Client:
        if self._supabase is None:
            self._supabase = get_supabase()
        return self._supabase

    @property
    def post_service(self) -> PostService:
        if self._post_service is None:
            self._post_service = PostService(supabase=self._supabase)
        return self._post_service

    def submit(
        self,
        reporter_id: str,
        post_id: str,
        type: ReportType,
        reason: str,
    ) -> dict[str, Any]:
        """
        Submit a report against a post.

        Raises:
            ReportValidationError: unknown type or reason outside [10, 500] characters
            PostNotFoundError: no post with post_id
            SelfReportError: reporter authored the post
            DuplicateReportError: reporter already has a PENDING/REVIEWED report on the post
        """
        report_type = validate_report_input(type, reason)
        post_id = str(post_id)

        post = self.post_service.find_by_id(post_id)
        if post is None:
            raise PostNotFoundError(f"Post {post_id} not found")

        if post.author_id == reporter_id:
            raise SelfReportError("You cannot report your own post")

        existing = (
            self.supabase.table(REPORTS_TABLE)
            .select("id")
            .eq("reporter_id", reporter_id)
            .eq("post_id", post_id)
            .in_("status", [s.value for s in OPEN_REPORT_STATUSES])
            .limit(1)
            .execute()
        )
        if existing.data:
            raise DuplicateReportError("Report already submitted for this post")

        row = {
            "reporter_id": reporter_id,
            "post_id": post_id,
            "type": report_type.value,
            "reason": reason,
            "status": ReportStatus.PENDING.value,
        }
        try:
            result = self.supabase.table(REPORTS_TABLE).insert(row).execute()
        except APIError as e:
            if e.code == PG_UNIQUE_VIOLATION:
                # Lost the race against a concurrent submission
                raise DuplicateReportError("Report already submitted for this post") from e
            raise

        if not result.data:
            raise ReportError("Failed to create report")

        logger.info(
            "Report submitted: reporter=%s post=%s type=%s",
            reporter_id,
            post_id,
            report_type.value,
            extra={"user_id": reporter_id, "post_id": post_id},
        )
        return dict(result.data[0])  # type: ignore[arg-type]

    def list_mine(self, user_id: str) -> list[dict[str, Any]]:
        """Reports submitted by user_id, newest first, each with its post's id/title/status."""
        result = (
            self.supabase.table(REPORTS_TABLE)
            .select(REPORT_WITH_POST_SELECT)
            .eq("reporter_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        reports: list[dict[str, Any]] = result.data or []
        return reports

    def get_by_id(self, report_id: str, user_id: str) -> dict[str, Any]:
        """
        Fetch one report for its reporter.

        Raises:
            ReportNotFoundError: no report with report_id (including ids that are not uuids)
            ReportAccessDeniedError: report was filed by someone else
        """
        try:
            result = (
                self.supabase.table(REPORTS_TABLE)
                .select(REPORT_WITH_POST_SELECT)
                .eq("id", report_id)
                .execute()
            )
        except APIError as e:
            if e.code == PG_INVALID_TEXT_REPRESENTATION:
                raise ReportNotFoundError(f"Report {report_id} not found") from e
            raise
        if not result.data:
            raise ReportNotFoundError(f"Report {report_id} not found")

        report: dict[str, Any] = result.data[0]
        if report["reporter_id"] != user_id:
            logger.warning(
                "Report access denied: report=%s user=%s",
                report_id,
                user_id,
                extra={"report_id": report_id, "user_id": user_id},
            )
            raise ReportAccessDeniedError("You can only view your own reports")
        return report
