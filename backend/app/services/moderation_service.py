"""
Moderation service for admins handling post reports.

Handles:
- Listing all reports, optionally filtered by status
- Reading any report with reporter and post author context
- Applying a moderator decision (review / keep / hide) under the
  report status transition rules
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from app.core.constants import (
    PG_INVALID_TEXT_REPRESENTATION,
    POST_STATUS_HIDDEN,
    REPORTS_TABLE,
)
from app.core.database import get_supabase
from app.models.report import (
    ACTION_TARGET_STATUS,
    ALLOWED_STATUS_TRANSITIONS,
    HandleReportAction,
    InvalidStatusTransitionError,
    ReportNotFoundError,
    ReportStatus,
)
from app.services.post_service import PostService

logger = logging.getLogger(__name__)

ADMIN_REPORT_SELECT = "*, post:posts(id, title, status, author_id)"


def _flatten_post_author(report: dict[str, Any]) -> dict[str, Any]:
    """Lift post.author_id to post_author_id for the admin response."""
    post = report.get("post") or {}
    report["post_author_id"] = post.get("author_id")
    return report


class ModerationService:
    """Service for moderator actions on reports."""

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

    def list_reports(self, status: Optional[ReportStatus] = None) -> list[dict[str, Any]]:
        """All reports, newest first."""
        query = self.supabase.table(REPORTS_TABLE).select(ADMIN_REPORT_SELECT)
        if status is not None:
            query = query.eq("status", status.value)
        result = query.order("created_at", desc=True).execute()
        return [_flatten_post_author(r) for r in result.data or []]

    def _fetch_report(self, report_id: str, columns: str) -> dict[str, Any]:
        """Single report row; an id that is not a uuid cannot exist either."""
        try:
            result = (
                self.supabase.table(REPORTS_TABLE).select(columns).eq("id", report_id).execute()
            )
        except APIError as e:
            if e.code == PG_INVALID_TEXT_REPRESENTATION:
                raise ReportNotFoundError(f"Report {report_id} not found") from e
            raise
        if not result.data:
            raise ReportNotFoundError(f"Report {report_id} not found")
        return result.data[0]

    def get_report(self, report_id: str) -> dict[str, Any]:
        return _flatten_post_author(self._fetch_report(report_id, ADMIN_REPORT_SELECT))

    def handle_report(
        self,
        report_id: str,
        action: HandleReportAction,
        admin_note: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Apply a moderator decision to a report.

        review -> REVIEWED, keep -> REJECTED, hide -> RESOLVED and the post is hidden.
        Repeating hide on a RESOLVED report whose post is still visible re-applies
        the post hide, so a decision interrupted between the two writes can be finished.

        Raises:
            ReportNotFoundError: no report with report_id
            InvalidStatusTransitionError: decision not allowed from the current status,
                including when another moderator changed the status concurrently
        """
        report = self._fetch_report(report_id, "id, post_id, status")
        current = ReportStatus(report["status"])
        target = ACTION_TARGET_STATUS[action]
        if target not in ALLOWED_STATUS_TRANSITIONS[current]:
            if action == HandleReportAction.HIDE and current == ReportStatus.RESOLVED:
                if self._rehide_post(report_id, report["post_id"]):
                    return self._handled(report_id, action, target, post_hidden=True)
            raise InvalidStatusTransitionError(current, target)

        updated = (
            self.supabase.table(REPORTS_TABLE)
            .update(
                {
                    "status": target.value,
                    "admin_note": admin_note,
                    "reviewed_at": datetime.now(timezone.utc).isoformat(),
                }
            )
            .eq("id", report_id)
            .eq("status", current.value)
            .execute()
        )
        if not updated.data:
            # Status moved underneath us; re-read to report the real state
            latest = self.get_report(report_id)
            raise InvalidStatusTransitionError(ReportStatus(latest["status"]), target)

        post_hidden = action == HandleReportAction.HIDE
        if post_hidden:
            self.post_service.hide(report["post_id"])

        logger.info(
            "Report handled: report=%s action=%s status=%s->%s",
            report_id,
            action.value,
            current.value,
            target.value,
            extra={"report_id": report_id, "post_id": report["post_id"]},
        )
        return self._handled(report_id, action, target, post_hidden)

    def _rehide_post(self, report_id: str, post_id: str) -> bool:
        """
        Finish a hide whose post update failed after the report was resolved.

        Only hide resolves a report, so a RESOLVED report with a visible post
        means the earlier post_service.hide() never landed.
        """
        post = self.post_service.find_by_id(post_id)
        if post is None or post.status == POST_STATUS_HIDDEN:
            return False

        self.post_service.hide(post_id)
        logger.warning(
            "Re-applied hide for resolved report: report=%s post=%s",
            report_id,
            post_id,
            extra={"report_id": report_id, "post_id": post_id},
        )
        return True

    @staticmethod
    def _handled(
        report_id: str, action: HandleReportAction, target: ReportStatus, post_hidden: bool
    ) -> dict[str, Any]:
        return {
            "id": report_id,
            "status": target.value,
            "post_hidden": post_hidden,
            "message": f"Report handled: {action.value}",
        }
