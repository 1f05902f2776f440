"""Schedule listing and creation."""

import logging
from datetime import date

from portal.access.authorization import Action, get_authorization_gate
from portal.access.identity import Identity, LinkedStudent
from portal.access.visibility import VisibilityFilter, schedule_order
from portal.exceptions import NotFoundException
from portal.models import DayOfWeek, ScheduleEntry, StudentProfile, TeacherProfile
from portal.schemas.schedule import ScheduleCreate
from portal.store.gateway import RecordStoreGateway

logger = logging.getLogger(__name__)


def school_day(today: date) -> DayOfWeek | None:
    """Map a calendar date onto the Monday-to-Friday week. Weekends map to None."""
    days = list(DayOfWeek)
    weekday = today.weekday()
    return days[weekday] if weekday < len(days) else None


def todays_entries(schedules: list[ScheduleEntry], today: date) -> list[ScheduleEntry]:
    """The slots of an already ordered schedule that fall on `today`."""
    day = school_day(today)
    if day is None:
        return []
    return [entry for entry in schedules if entry.day_of_week == day.value]


def group_by_day(schedules: list[ScheduleEntry]) -> dict[str, list[ScheduleEntry]]:
    """Group an ordered schedule into Monday-to-Friday buckets."""
    grouped = {day.value: [] for day in DayOfWeek}
    for entry in schedules:
        grouped.setdefault(entry.day_of_week, []).append(entry)
    return grouped


class ScheduleService:
    """Service for weekly schedules."""

    async def list_schedules(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        child: LinkedStudent | None = None,
    ) -> list[ScheduleEntry]:
        """List the schedule visible to the identity (or selected child)."""
        filters = VisibilityFilter(identity, child).schedules()
        return await gateway.list(ScheduleEntry, filters, order_by=schedule_order())

    async def create_schedule(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        data: ScheduleCreate,
    ) -> ScheduleEntry:
        """Add a weekly slot to a student's schedule."""
        get_authorization_gate().require(identity, Action.CREATE_SCHEDULE)

        if await gateway.get(StudentProfile, data.student_id) is None:
            raise NotFoundException("Student")
        if data.teacher_id and await gateway.get(TeacherProfile, data.teacher_id) is None:
            raise NotFoundException("Teacher")

        entry = ScheduleEntry(
            student_id=data.student_id,
            teacher_id=data.teacher_id,
            subject=data.subject,
            day_of_week=data.day_of_week.value,
            start_time=data.start_time,
            end_time=data.end_time,
            room=data.room,
        )
        await gateway.insert(entry)
        await gateway.commit()

        logger.info(f"Created {entry.day_of_week} {entry.subject} slot for student {entry.student_id}")
        return entry


def get_schedule_service() -> ScheduleService:
    """Get schedule service instance."""
    return ScheduleService()
