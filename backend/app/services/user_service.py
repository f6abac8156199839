"""
User lookups.

Maps a Supabase auth ID (JWT ``sub``) to the internal user record so
services only ever see internal user IDs.
"""

from typing import Optional

from supabase import Client

from app.core.constants import USERS_TABLE
from app.core.database import get_supabase
from app.models.user import UserProfile


class UserServiceError(Exception):
    """Base exception for user service errors."""

    pass


class UserNotFoundError(UserServiceError):
    """User not found."""

    pass


class UserService:
    """Service for user identity lookups."""

    def __init__(self, supabase: Optional[Client] = None):
        self._supabase = supabase

    @property
    def supabase(self) -> Client:
        if self._supabase is None:
            self._supabase = get_supabase()
        return self._supabase

    def get_user_by_auth_id(self, auth_id: str) -> Optional[UserProfile]:
        """
        Fetch the active user for a Supabase auth ID.

        Args:
            auth_id: Supabase auth.uid()

        Returns:
            UserProfile if found and not deleted, None otherwise
        """
        result = (
            self.supabase.table(USERS_TABLE)
            .select("id, auth_id, email, username, role, created_at, deleted_at")
            .eq("auth_id", auth_id)
            .execute()
        )

        if not result.data:
            return None

        user_data = result.data[0]
        if user_data.get("deleted_at"):
            return None

        return UserProfile(**user_data)

    def require_user(self, auth_id: str) -> UserProfile:
        """Like get_user_by_auth_id, but raises UserNotFoundError when absent."""
        profile = self.get_user_by_auth_id(auth_id)
        if profile is None:
            raise UserNotFoundError(f"No user for auth_id {auth_id}")
        return profile
