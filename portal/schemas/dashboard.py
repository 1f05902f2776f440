"""Dashboard read models."""

import uuid

from pydantic import BaseModel

from portal.schemas.assignment import AssignmentResponse
from portal.schemas.file import FileResponse
from portal.schemas.profile import StudentProfileResponse, TeacherProfileResponse
from portal.schemas.schedule import ScheduleResponse


class StudentOverview(BaseModel):
    total_assignments: int
    submitted_count: int
    pending_count: int
    todays_schedule: list[ScheduleResponse]
    recent_assignments: list[AssignmentResponse]


class TeacherOverview(BaseModel):
    total_assignments_created: int
    total_files_uploaded: int
    recent_assignments: list[AssignmentResponse]
    recent_files: list[FileResponse]


class ParentOverview(BaseModel):
    weekly_class_count: int
    active_assignment_count: int
    todays_schedule: list[ScheduleResponse]
    recent_assignments: list[AssignmentResponse]


class AdminOverview(BaseModel):
    announcement_count: int


class DashboardResponse(BaseModel):
    """One dashboard tab for the calling principal.

    `provisioned` is False when the principal has no linked record yet; the
    panels are then empty. `failed_panels` names panels whose data could not
    be loaded. `stale` is set when a parent switched child while this view
    was loading.
    """

    role: str
    tab: str
    tabs: list[str]
    provisioned: bool = True
    stale: bool = False
    failed_panels: list[str] = []
    capabilities: list[str] = []

    profile: StudentProfileResponse | TeacherProfileResponse | None = None
    children: list[StudentProfileResponse] = []
    selected_child_id: uuid.UUID | None = None

    overview: StudentOverview | TeacherOverview | ParentOverview | AdminOverview | None = None
    schedule: dict[str, list[ScheduleResponse]] | None = None
    assignments: list[AssignmentResponse] | None = None
    files: list[FileResponse] | None = None
