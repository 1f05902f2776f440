"""Response builders shared by the API routers."""

import uuid
from typing import Any

from sqlalchemy import inspect

from portal.access.authorization import Action
from portal.access.identity import LinkedStudent, SessionEntry
from portal.models import (
    Announcement,
    Assignment,
    FileResource,
    Message,
    ScheduleEntry,
    Submission,
)
from portal.models.user import Role
from portal.schemas.announcement import AnnouncementResponse
from portal.schemas.assignment import AssignmentResponse, SubmissionResponse
from portal.schemas.dashboard import (
    AdminOverview,
    DashboardResponse,
    ParentOverview,
    StudentOverview,
    TeacherOverview,
)
from portal.schemas.file import FileResponse
from portal.schemas.message import MessageResponse
from portal.schemas.profile import (
    IdentityResponse,
    PrincipalResponse,
    StudentProfileResponse,
    TeacherProfileResponse,
)
from portal.schemas.schedule import ScheduleResponse
from portal.services.dashboard_service import DashboardView
from portal.services.schedule_service import group_by_day

UNAVAILABLE_NOTICE = "Some data could not be loaded, please retry"


def related(record: Any, name: str) -> Any | None:
    """Get a relationship only if it is already loaded.

    Freshly inserted rows have their relationships unloaded, and touching
    them would trigger IO outside the async context.
    """
    if name in inspect(record).unloaded:
        return None
    return getattr(record, name)


def related_name(record: Any, name: str) -> str | None:
    principal = related(record, name)
    return principal.full_name if principal else None


def sorted_capabilities(capabilities: frozenset[Action]) -> list[str]:
    return sorted(action.value for action in capabilities)


def build_schedule_response(entry: ScheduleEntry) -> ScheduleResponse:
    return ScheduleResponse.model_validate(entry)


def build_submission_response(submission: Submission) -> SubmissionResponse:
    return SubmissionResponse.model_validate(submission)


def build_assignment_response(
    assignment: Assignment,
    submissions: dict[uuid.UUID, Submission] | None = None,
) -> AssignmentResponse:
    """Build assignment response, attaching the viewer's submission when known."""
    submission = (submissions or {}).get(assignment.id)
    return AssignmentResponse(
        id=assignment.id,
        teacher_id=assignment.teacher_id,
        title=assignment.title,
        description=assignment.description,
        subject=assignment.subject,
        due_date=assignment.due_date,
        grade_level=assignment.grade_level,
        section=assignment.section,
        created_at=assignment.created_at,
        submission=build_submission_response(submission) if submission else None,
    )


def build_file_response(file_resource: FileResource) -> FileResponse:
    return FileResponse(
        id=file_resource.id,
        uploaded_by=file_resource.uploaded_by,
        file_name=file_resource.file_name,
        file_url=file_resource.file_url,
        file_type=file_resource.file_type,
        category=file_resource.category,
        subject=file_resource.subject,
        target_grade=file_resource.target_grade,
        target_section=file_resource.target_section,
        created_at=file_resource.created_at,
        uploader_name=related_name(file_resource, "uploader"),
    )


def build_announcement_response(announcement: Announcement) -> AnnouncementResponse:
    return AnnouncementResponse(
        id=announcement.id,
        author_id=announcement.author_id,
        title=announcement.title,
        content=announcement.content,
        target_roles=announcement.target_roles,
        created_at=announcement.created_at,
        author_name=related_name(announcement, "author"),
    )


def build_message_response(message: Message, principal_id: uuid.UUID) -> MessageResponse:
    """Build message response from the point of view of `principal_id`."""
    return MessageResponse(
        id=message.id,
        sender_id=message.sender_id,
        recipient_id=message.recipient_id,
        subject=message.subject,
        content=message.content,
        read=message.read,
        created_at=message.created_at,
        direction="received" if message.is_received_by(principal_id) else "sent",
        sender_name=related_name(message, "sender"),
        recipient_name=related_name(message, "recipient"),
    )


def build_student_profile_response(student: LinkedStudent) -> StudentProfileResponse:
    return StudentProfileResponse(
        id=student.id,
        grade_level=student.grade_level,
        section=student.section,
        student_id=student.student_id,
        full_name=student.full_name,
    )


def build_identity_response(entry: SessionEntry, capabilities: frozenset[Action]) -> IdentityResponse:
    identity = entry.identity
    principal = identity.principal
    teacher = identity.teacher
    return IdentityResponse(
        principal=PrincipalResponse(
            id=principal.id,
            email=principal.email,
            full_name=principal.full_name,
            role=principal.role.value,
        ),
        student=build_student_profile_response(identity.student) if identity.student else None,
        teacher=TeacherProfileResponse(
            id=teacher.id, subject=teacher.subject, department=teacher.department
        ) if teacher else None,
        children=[build_student_profile_response(child) for child in identity.children],
        selected_child_id=entry.selection.selected_id if entry.selection else None,
        capabilities=sorted_capabilities(capabilities),
    )


def build_dashboard_response(view: DashboardView) -> DashboardResponse:
    """Convert a dashboard view into its API read model."""
    response = DashboardResponse(
        role=view.role.value if view.role else "unknown",
        tab=view.tab,
        tabs=list(view.tabs),
        provisioned=view.provisioned,
        stale=view.stale,
        failed_panels=view.failed_panels,
        capabilities=sorted_capabilities(view.capabilities),
    )
    if view.identity is None:
        return response

    identity = view.identity
    if identity.student:
        response.profile = build_student_profile_response(identity.student)
    elif identity.teacher:
        teacher = identity.teacher
        response.profile = TeacherProfileResponse(
            id=teacher.id, subject=teacher.subject, department=teacher.department
        )
    response.children = [build_student_profile_response(child) for child in identity.children]
    response.selected_child_id = view.selected_child.id if view.selected_child else None

    submissions = {s.assignment_id: s for s in view.submissions}
    if view.overview is not None:
        response.overview = _build_overview(view.role, view.overview, submissions)
    if view.schedules is not None and view.tab == "schedule":
        response.schedule = {
            day: [build_schedule_response(entry) for entry in entries]
            for day, entries in group_by_day(view.schedules).items()
        }
    if view.assignments is not None and view.tab == "assignments":
        response.assignments = [build_assignment_response(a, submissions) for a in view.assignments]
    if view.files is not None and view.tab in ("materials", "files"):
        response.files = [build_file_response(f) for f in view.files]

    return response


def _build_overview(role: Role, overview: dict[str, Any], submissions: dict[uuid.UUID, Submission]):
    if role == Role.STUDENT:
        return StudentOverview(
            total_assignments=overview["total_assignments"],
            submitted_count=overview["submitted_count"],
            pending_count=overview["pending_count"],
            todays_schedule=[build_schedule_response(s) for s in overview["todays_schedule"]],
            recent_assignments=[
                build_assignment_response(a, submissions) for a in overview["recent_assignments"]
            ],
        )
    if role == Role.TEACHER:
        return TeacherOverview(
            total_assignments_created=overview["total_assignments_created"],
            total_files_uploaded=overview["total_files_uploaded"],
            recent_assignments=[build_assignment_response(a) for a in overview["recent_assignments"]],
            recent_files=[build_file_response(f) for f in overview["recent_files"]],
        )
    if role == Role.PARENT:
        return ParentOverview(
            weekly_class_count=overview["weekly_class_count"],
            active_assignment_count=overview["active_assignment_count"],
            todays_schedule=[build_schedule_response(s) for s in overview["todays_schedule"]],
            recent_assignments=[build_assignment_response(a) for a in overview["recent_assignments"]],
        )
    return AdminOverview(announcement_count=overview["announcement_count"])
