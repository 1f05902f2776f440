"""Announcement model with per-role targeting."""

import uuid

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from uuid_extensions import uuid7

from portal.models.base import Base, BaseModel
from portal.models.user import Role

DEFAULT_TARGET_ROLES = (Role.STUDENT, Role.PARENT, Role.TEACHER)


class Announcement(BaseModel):
    """A notice visible only to principals whose role is targeted."""

    __tablename__ = "announcements"
    __table_args__ = (Index("idx_announcements_author", "author_id"),)

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships
    author = relationship("Principal", lazy="selectin")
    targets = relationship(
        "AnnouncementTarget",
        back_populates="announcement",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def target_roles(self) -> list[str]:
        """Get the targeted role values in canonical role order."""
        order = [role.value for role in Role]
        return sorted({t.role for t in self.targets}, key=order.index)


class AnnouncementTarget(Base):
    """One targeted role of an announcement."""

    __tablename__ = "announcement_targets"
    __table_args__ = (
        UniqueConstraint("announcement_id", "role", name="uq_announcement_target_role"),
        Index("idx_announcement_targets_role", "role"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid7)
    announcement_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("announcements.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)

    # Relationships
    announcement = relationship("Announcement", back_populates="targets")
