"""Shared learning material model."""

import uuid
from enum import Enum

from sqlalchemy import ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portal.models.base import BaseModel


class FileCategory(str, Enum):
    """Categories of shared files."""

    STUDY_MATERIAL = "study_material"
    ASSIGNMENT = "assignment"
    RESOURCE = "resource"
    OTHER = "other"


class FileResource(BaseModel):
    """A file shared by a teacher. The URL is opaque to the portal.

    target_grade and target_section follow the same null-means-all
    convention as assignments.
    """

    __tablename__ = "files"
    __table_args__ = (
        Index("idx_files_uploader", "uploaded_by"),
        Index("idx_files_scope", "target_grade", "target_section"),
    )

    uploaded_by: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    category: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=FileCategory.STUDY_MATERIAL.value,
    )
    target_grade: Mapped[str | None] = mapped_column(String(20), nullable=True)
    target_section: Mapped[str | None] = mapped_column(String(20), nullable=True)
    subject: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Relationships
    uploader = relationship("Principal", lazy="selectin")
