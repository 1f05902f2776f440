"""Weekly class schedule model."""

import uuid
from datetime import time
from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portal.models.base import BaseModel


class DayOfWeek(str, Enum):
    """School days, declared in canonical week order."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"

    @property
    def position(self) -> int:
        """Zero-based position in the school week."""
        return list(DayOfWeek).index(self)


class ScheduleEntry(BaseModel):
    """One weekly class slot belonging to exactly one student."""

    __tablename__ = "schedules"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_schedules_time_order"),
        Index("idx_schedules_student", "student_id"),
    )

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    teacher_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("teachers.id", ondelete="SET NULL"),
        nullable=True,
    )
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    day_of_week: Mapped[str] = mapped_column(String(10), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    room: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Relationships
    teacher = relationship("TeacherProfile", lazy="selectin")
