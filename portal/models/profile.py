"""Student and teacher profiles, and parent-student links."""

import uuid

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portal.models.base import BaseModel


class StudentProfile(BaseModel):
    """Domain record linked 1:1 to a student principal."""

    __tablename__ = "students"
    __table_args__ = (
        Index("idx_students_grade_section", "grade_level", "section"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    grade_level: Mapped[str] = mapped_column(String(20), nullable=False)
    section: Mapped[str] = mapped_column(String(20), nullable=False)
    student_id: Mapped[str] = mapped_column(String(50), nullable=False)

    # Relationships
    user = relationship("Principal", lazy="selectin")


class TeacherProfile(BaseModel):
    """Domain record linked 1:1 to a teacher principal."""

    __tablename__ = "teachers"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    subject: Mapped[str | None] = mapped_column(String(100), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Relationships
    user = relationship("Principal", lazy="selectin")


class ParentLink(BaseModel):
    """Links a parent principal to one of their children."""

    __tablename__ = "parent_student_relations"
    __table_args__ = (
        UniqueConstraint("parent_id", "student_id", name="uq_parent_student_relation"),
        Index("idx_parent_student_parent", "parent_id"),
    )

    parent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Relationships
    student = relationship("StudentProfile", lazy="selectin")
