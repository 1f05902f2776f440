"""Point-to-point message model."""

import uuid

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portal.models.base import BaseModel


class Message(BaseModel):
    """A directed message. Only the recipient may flip `read`."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("idx_messages_sender", "sender_id"),
        Index("idx_messages_recipient_read", "recipient_id", "read"),
    )

    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    recipient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    sender = relationship("Principal", foreign_keys=[sender_id], lazy="selectin")
    recipient = relationship("Principal", foreign_keys=[recipient_id], lazy="selectin")

    def is_received_by(self, principal_id: uuid.UUID) -> bool:
        """Check if the given principal is this message's recipient."""
        return self.recipient_id == principal_id
