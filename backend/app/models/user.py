"""
User and post reference models.

Profiles and posts are owned by other parts of the platform; the report
workflow only needs identifiers, authorship and roles.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class UserProfile(BaseModel):
    """Internal user record for the authenticated caller."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    auth_id: str
    email: str
    username: Optional[str] = None
    role: UserRole = UserRole.USER
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class PostRef(BaseModel):
    """The slice of a post the report workflow reads."""

    id: str
    author_id: str
    title: str = ""
    status: str = "PUBLISHED"
