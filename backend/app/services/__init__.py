"""Business logic services for Portlink API."""

from app.services.moderation_service import ModerationService
from app.services.post_service import PostService
from app.services.report_service import ReportService
from app.services.user_service import (
    UserNotFoundError,
    UserService,
    UserServiceError,
)

__all__ = [
    "ModerationService",
    "PostService",
    "ReportService",
    "UserService",
    "UserServiceError",
    "UserNotFoundError",
]
