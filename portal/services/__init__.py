"""Service layer."""

from portal.services.announcement_service import AnnouncementService, get_announcement_service
from portal.services.assignment_service import AssignmentService, get_assignment_service
from portal.services.dashboard_service import DashboardService, DashboardView, get_dashboard_service
from portal.services.file_service import FileService, get_file_service
from portal.services.message_service import MessageService, get_message_service
from portal.services.profile_service import ProfileService, get_profile_service
from portal.services.schedule_service import ScheduleService, get_schedule_service

__all__ = [
    "AnnouncementService",
    "AssignmentService",
    "DashboardService",
    "DashboardView",
    "FileService",
    "MessageService",
    "ProfileService",
    "ScheduleService",
    "get_announcement_service",
    "get_assignment_service",
    "get_dashboard_service",
    "get_file_service",
    "get_message_service",
    "get_profile_service",
    "get_schedule_service",
]
