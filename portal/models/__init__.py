"""SQLAlchemy models for the school portal."""

from portal.models.base import Base, BaseModel, TimestampMixin
from portal.models.user import Principal, Role
from portal.models.profile import ParentLink, StudentProfile, TeacherProfile
from portal.models.schedule import DayOfWeek, ScheduleEntry
from portal.models.assignment import Assignment, Submission
from portal.models.file_resource import FileCategory, FileResource
from portal.models.announcement import DEFAULT_TARGET_ROLES, Announcement, AnnouncementTarget
from portal.models.message import Message

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "TimestampMixin",
    # Principal
    "Principal",
    "Role",
    # Profiles
    "StudentProfile",
    "TeacherProfile",
    "ParentLink",
    # Schedule
    "ScheduleEntry",
    "DayOfWeek",
    # Assignment
    "Assignment",
    "Submission",
    # File
    "FileResource",
    "FileCategory",
    # Announcement
    "Announcement",
    "AnnouncementTarget",
    "DEFAULT_TARGET_ROLES",
    # Message
    "Message",
]
