"""Message schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from portal.schemas.common import BaseSchema, blank_to_none


class MessageCreate(BaseSchema):
    """Schema for sending a message."""

    recipient_id: uuid.UUID
    subject: str | None = Field(None, max_length=255)
    content: str = Field(..., min_length=1)
    sender_id: uuid.UUID | None = None  # Defaults to the caller

    normalize_blanks = field_validator("subject", mode="before")(blank_to_none)


class MessageResponse(BaseSchema):
    """Schema for a message."""

    id: uuid.UUID
    sender_id: uuid.UUID
    recipient_id: uuid.UUID
    subject: str | None = None
    content: str
    read: bool
    created_at: datetime

    # Computed fields
    direction: str | None = None  # "received" or "sent" from the caller's side
    sender_name: str | None = None
    recipient_name: str | None = None


class UnreadCountResponse(BaseModel):
    """Unread message count."""

    messages: int
