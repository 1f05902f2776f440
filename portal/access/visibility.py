"""Row visibility predicates.

Assignments and files use broadcast scope: a row targets a grade and a
section, and a null in either column means "every grade" or "every section".
The two wildcards are independent, so a row matches a student with grade g
and section s iff

    (row.grade == g OR row.grade IS NULL) AND (row.section == s OR row.section IS NULL)

An empty string is a concrete value here, never a wildcard.

Owned collections match on ownership: schedules and submissions by student,
messages by sender or recipient, announcements by targeted role.

Each predicate is available as a SQLAlchemy clause for the store and as a
plain function over values.
"""

import uuid
from collections.abc import Iterable
from datetime import time

from sqlalchemy import and_, case, or_, select
from sqlalchemy.sql import ColumnElement

from portal.access.identity import Identity, LinkedStudent
from portal.exceptions import NotProvisionedException
from portal.models import (
    Announcement,
    AnnouncementTarget,
    Assignment,
    DayOfWeek,
    FileResource,
    Message,
    Role,
    ScheduleEntry,
    Submission,
)

WEEK_ORDER = [day.value for day in DayOfWeek]


# === Plain predicates ===

def matches_broadcast_scope(
    row_grade: str | None,
    row_section: str | None,
    grade: str,
    section: str,
) -> bool:
    """Check a broadcast-scoped row against a student's grade and section."""
    return (row_grade is None or row_grade == grade) and (
        row_section is None or row_section == section
    )


def matches_message(sender_id: uuid.UUID, recipient_id: uuid.UUID, principal_id: uuid.UUID) -> bool:
    """Check whether a principal is a party to a message."""
    return principal_id in (sender_id, recipient_id)


def matches_announcement(target_roles: Iterable[str], role: Role) -> bool:
    """Check whether an announcement targets a role."""
    return role.value in set(target_roles)


def schedule_sort_key(day_of_week: str, start_time: time) -> tuple[int, time]:
    """Sort key placing schedule slots in Monday-to-Friday order."""
    try:
        position = DayOfWeek(day_of_week).position
    except ValueError:
        position = len(WEEK_ORDER)
    return position, start_time


# === Store clauses ===

def broadcast_scope(
    grade_column,
    section_column,
    grade: str,
    section: str,
) -> ColumnElement[bool]:
    """Build the broadcast-scope clause for a grade/section column pair."""
    return and_(
        or_(grade_column == grade, grade_column.is_(None)),
        or_(section_column == section, section_column.is_(None)),
    )


def schedule_order() -> tuple:
    """Order schedules by canonical weekday, then start time."""
    weekday = case(
        {day: position for position, day in enumerate(WEEK_ORDER)},
        value=ScheduleEntry.day_of_week,
        else_=len(WEEK_ORDER),
    )
    return weekday, ScheduleEntry.start_time, ScheduleEntry.id


def due_date_order() -> tuple:
    """Order assignments by due date ascending with undated ones last."""
    return Assignment.due_date.is_(None), Assignment.due_date, Assignment.id


def newest_first(model) -> tuple:
    """Order any timestamped collection most recent first."""
    return model.created_at.desc(), model.id.desc()


class VisibilityFilter:
    """Computes per-collection filters for one identity.

    For parents the student-scoped collections are evaluated against the
    currently selected child, passed in as `child`.
    """

    def __init__(self, identity: Identity, child: LinkedStudent | None = None):
        self.identity = identity
        self.child = child

    @property
    def student_scope(self) -> LinkedStudent | None:
        """The student whose schedules, assignments and files are being viewed."""
        if self.identity.role == Role.STUDENT:
            return self.identity.student
        if self.identity.role == Role.PARENT:
            if self.child is None:
                raise NotProvisionedException("No child is selected")
            return self.child
        return None

    def schedules(self) -> list[ColumnElement[bool]]:
        student = self.student_scope
        if student is not None:
            return [ScheduleEntry.student_id == student.id]
        if self.identity.role == Role.TEACHER:
            return [ScheduleEntry.teacher_id == self.identity.teacher.id]
        return []

    def assignments(self) -> list[ColumnElement[bool]]:
        student = self.student_scope
        if student is not None:
            return [
                broadcast_scope(
                    Assignment.grade_level,
                    Assignment.section,
                    student.grade_level,
                    student.section,
                )
            ]
        if self.identity.role == Role.TEACHER:
            return [Assignment.teacher_id == self.identity.teacher.id]
        return []

    def files(self) -> list[ColumnElement[bool]]:
        student = self.student_scope
        if student is not None:
            return [
                broadcast_scope(
                    FileResource.target_grade,
                    FileResource.target_section,
                    student.grade_level,
                    student.section,
                )
            ]
        if self.identity.role == Role.TEACHER:
            return [FileResource.uploaded_by == self.identity.principal.id]
        return []

    def submissions(self) -> list[ColumnElement[bool]]:
        student = self.student_scope
        if student is not None:
            return [Submission.student_id == student.id]
        if self.identity.role == Role.TEACHER:
            own_assignments = select(Assignment.id).where(
                Assignment.teacher_id == self.identity.teacher.id
            )
            return [Submission.assignment_id.in_(own_assignments)]
        return []

    def messages(self) -> list[ColumnElement[bool]]:
        principal_id = self.identity.principal.id
        return [or_(Message.sender_id == principal_id, Message.recipient_id == principal_id)]

    def received_messages(self) -> list[ColumnElement[bool]]:
        return [Message.recipient_id == self.identity.principal.id]

    def announcements(self) -> list[ColumnElement[bool]]:
        return [Announcement.targets.any(AnnouncementTarget.role == self.identity.role.value)]
