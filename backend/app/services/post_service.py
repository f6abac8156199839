"""Read-only post lookups used by the report workflow."""

import logging
from typing import Optional

from supabase import Client

from app.core.constants import POST_STATUS_HIDDEN, POSTS_TABLE
from app.core.database import get_supabase
from app.models.user import PostRef

logger = logging.getLogger(__name__)


class PostService:
    """Post lookup collaborator."""

    def __init__(self, supabase: Optional[Client] = None) -> None:
        self._supabase = supabase

    @property
    def supabase(self) -> Client:
        if self._supabase is None:
            self._supabase = get_supabase()
        return self._supabase

    def find_by_id(self, post_id: str) -> Optional[PostRef]:
        """Return id, author and display fields of a post, or None if it does not exist."""
        result = (
            self.supabase.table(POSTS_TABLE)
            .select("id, author_id, title, status")
            .eq("id", post_id)
            .execute()
        )
        if not result.data:
            return None
        return PostRef(**result.data[0])

    def hide(self, post_id: str) -> None:
        """Take a post out of public view."""
        self.supabase.table(POSTS_TABLE).update({"status": POST_STATUS_HIDDEN}).eq(
            "id", post_id
        ).execute()
        logger.info("Post hidden: post=%s", post_id, extra={"post_id": post_id})
