"""Announcement schemas."""

import uuid
from datetime import datetime

from pydantic import Field

from portal.models.announcement import DEFAULT_TARGET_ROLES
from portal.models.user import Role
from portal.schemas.common import BaseSchema


class AnnouncementCreate(BaseSchema):
    """Schema for creating an announcement."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    target_roles: list[Role] = Field(default_factory=lambda: list(DEFAULT_TARGET_ROLES), min_length=1)


class AnnouncementResponse(BaseSchema):
    """Schema for an announcement."""

    id: uuid.UUID
    author_id: uuid.UUID
    title: str
    content: str
    target_roles: list[str]
    created_at: datetime
    author_name: str | None = None
