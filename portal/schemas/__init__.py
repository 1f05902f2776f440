"""Pydantic schemas for request/response validation."""

from portal.schemas.announcement import AnnouncementCreate, AnnouncementResponse
from portal.schemas.assignment import (
    AssignmentCreate,
    AssignmentResponse,
    SubmissionCreate,
    SubmissionResponse,
)
from portal.schemas.common import APIResponse, BaseSchema
from portal.schemas.dashboard import DashboardResponse
from portal.schemas.file import FileCreate, FileResponse
from portal.schemas.message import MessageCreate, MessageResponse, UnreadCountResponse
from portal.schemas.profile import (
    ChildSelectionRequest,
    DirectoryEntry,
    IdentityResponse,
    ParentLinkCreate,
    ParentLinkResponse,
    PrincipalResponse,
    ProvisionRequest,
    StudentProfileResponse,
    TeacherProfileResponse,
)
from portal.schemas.schedule import ScheduleCreate, ScheduleResponse

__all__ = [
    # Common
    "APIResponse",
    "BaseSchema",
    # Profiles
    "ProvisionRequest",
    "PrincipalResponse",
    "DirectoryEntry",
    "StudentProfileResponse",
    "TeacherProfileResponse",
    "IdentityResponse",
    "ParentLinkCreate",
    "ParentLinkResponse",
    "ChildSelectionRequest",
    # Schedule
    "ScheduleCreate",
    "ScheduleResponse",
    # Assignment
    "AssignmentCreate",
    "AssignmentResponse",
    "SubmissionCreate",
    "SubmissionResponse",
    # File
    "FileCreate",
    "FileResponse",
    # Announcement
    "AnnouncementCreate",
    "AnnouncementResponse",
    # Message
    "MessageCreate",
    "MessageResponse",
    "UnreadCountResponse",
    # Dashboard
    "DashboardResponse",
]
