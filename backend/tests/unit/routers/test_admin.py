"""Unit tests for admin moderation router endpoints.

Endpoints tested:
- require_admin() dependency
- GET /admin/reports - list_reports()
- GET /admin/reports/{report_id} - get_report()
- POST /admin/reports/{report_id}/handle - handle_report()
"""

from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.core.auth import AuthUser
from app.main import app
from app.models.report import (
    HandleReportAction,
    HandleReportRequest,
    InvalidStatusTransitionError,
    ReportStatus,
)
from app.routers.admin import (
    get_moderation_service,
    get_report,
    handle_report,
    list_reports,
    require_admin,
)
from app.services.moderation_service import ModerationService


@pytest.fixture
def mock_moderation_service() -> MagicMock:
    return MagicMock()


def _admin_row(report_row_factory, **overrides) -> dict:
    row = report_row_factory(**overrides)
    row["post_author_id"] = "user-r2"
    return row


# =============================================================================
# require_admin()
# =============================================================================


class TestRequireAdmin:
    @pytest.mark.unit
    async def test_admin_passes(self, admin_profile) -> None:
        user_service = MagicMock()
        user_service.require_user.return_value = admin_profile

        result = await require_admin(
            user=AuthUser(auth_id="auth-admin", email="admin@example.com"),
            user_service=user_service,
        )

        assert result is admin_profile

    @pytest.mark.unit
    async def test_regular_user_forbidden(self, reporter_profile) -> None:
        user_service = MagicMock()
        user_service.require_user.return_value = reporter_profile

        with pytest.raises(HTTPException) as exc_info:
            await require_admin(
                user=AuthUser(auth_id="auth-r1", email="r1@example.com"),
                user_service=user_service,
            )

        assert exc_info.value.status_code == 403


# =============================================================================
# Handlers
# =============================================================================


class TestListReports:
    @pytest.mark.unit
    async def test_passes_status_filter(
        self, admin_profile, mock_moderation_service, report_row_factory
    ) -> None:
        mock_moderation_service.list_reports.return_value = [_admin_row(report_row_factory)]

        result = await list_reports(
            status=ReportStatus.PENDING,
            admin=admin_profile,
            moderation_service=mock_moderation_service,
        )

        assert result.total == 1
        assert result.reports[0].post_author_id == "user-r2"
        mock_moderation_service.list_reports.assert_called_once_with(ReportStatus.PENDING)


class TestGetReport:
    @pytest.mark.unit
    async def test_any_report_visible_to_admin(
        self, admin_profile, mock_moderation_service, report_row_factory
    ) -> None:
        mock_moderation_service.get_report.return_value = _admin_row(
            report_row_factory, reporter_id="user-r3", admin_note="checked"
        )

        result = await get_report(
            report_id="report-1",
            admin=admin_profile,
            moderation_service=mock_moderation_service,
        )

        assert result.reporter_id == "user-r3"
        assert result.admin_note == "checked"


class TestHandleReport:
    @pytest.mark.unit
    async def test_hide(self, admin_profile, mock_moderation_service) -> None:
        mock_moderation_service.handle_report.return_value = {
            "id": "report-1",
            "status": "RESOLVED",
            "post_hidden": True,
            "message": "Report handled: hide",
        }

        result = await handle_report(
            report_id="report-1",
            body=HandleReportRequest(action=HandleReportAction.HIDE, admin_note="spam ring"),
            admin=admin_profile,
            moderation_service=mock_moderation_service,
        )

        assert result.status == ReportStatus.RESOLVED
        assert result.post_hidden is True
        mock_moderation_service.handle_report.assert_called_once_with(
            report_id="report-1",
            action=HandleReportAction.HIDE,
            admin_note="spam ring",
        )


# =============================================================================
# HTTP surface
# =============================================================================


class TestHTTPSurface:
    @pytest.fixture
    def client(self, admin_profile, mock_moderation_service):
        app.dependency_overrides[require_admin] = lambda: admin_profile
        app.dependency_overrides[get_moderation_service] = lambda: mock_moderation_service
        yield TestClient(app, raise_server_exceptions=False)
        app.dependency_overrides = {}

    @pytest.mark.unit
    def test_invalid_transition_is_409(self, client, mock_moderation_service) -> None:
        mock_moderation_service.handle_report.side_effect = InvalidStatusTransitionError(
            ReportStatus.RESOLVED, ReportStatus.REJECTED
        )

        resp = client.post("/api/v1/admin/reports/report-1/handle", json={"action": "keep"})

        assert resp.status_code == 409
        assert resp.json()["code"] == "INVALID_STATUS_TRANSITION"
        assert "RESOLVED to REJECTED" in resp.json()["detail"]

    @pytest.mark.unit
    def test_unknown_action_is_400(self, client, mock_moderation_service) -> None:
        resp = client.post("/api/v1/admin/reports/report-1/handle", json={"action": "delete"})

        assert resp.status_code == 400
        mock_moderation_service.handle_report.assert_not_called()

    @pytest.mark.unit
    def test_status_query_param(self, client, mock_moderation_service) -> None:
        mock_moderation_service.list_reports.return_value = []

        resp = client.get("/api/v1/admin/reports", params={"status": "REVIEWED"})

        assert resp.status_code == 200
        assert resp.json() == {"reports": [], "total": 0}
        mock_moderation_service.list_reports.assert_called_once_with(ReportStatus.REVIEWED)

    @pytest.mark.unit
    def test_malformed_report_id_is_404(self, client) -> None:
        supabase = MagicMock()
        supabase.table.return_value.select.return_value.eq.return_value.execute.side_effect = (
            APIError({"code": "22P02", "message": "invalid uuid", "details": None, "hint": None})
        )
        app.dependency_overrides[get_moderation_service] = lambda: ModerationService(
            supabase=supabase
        )

        get_resp = client.get("/api/v1/admin/reports/not-a-uuid")
        handle_resp = client.post(
            "/api/v1/admin/reports/not-a-uuid/handle", json={"action": "hide"}
        )

        assert get_resp.status_code == 404
        assert get_resp.json()["code"] == "REPORT_NOT_FOUND"
        assert handle_resp.status_code == 404
