"""Tests for request schema normalisation and validation."""

from datetime import time

import pytest
from pydantic import ValidationError
from uuid_extensions import uuid7

from portal.models import Role
from portal.models.announcement import DEFAULT_TARGET_ROLES
from portal.schemas.announcement import AnnouncementCreate
from portal.schemas.assignment import AssignmentCreate, SubmissionCreate
from portal.schemas.file import FileCreate
from portal.schemas.profile import ProvisionRequest
from portal.schemas.schedule import ScheduleCreate

pytestmark = pytest.mark.unit


class TestBlankNormalisation:
    """Blank form input becomes the null wildcard before it reaches the store."""

    def test_blank_assignment_scope_becomes_none(self):
        data = AssignmentCreate(title="Essay", grade_level="", section="   ", due_date="")
        assert data.grade_level is None
        assert data.section is None
        assert data.due_date is None

    def test_concrete_scope_is_kept(self):
        data = AssignmentCreate(title="Essay", grade_level=" 10 ", section="A")
        assert data.grade_level == "10"
        assert data.section == "A"

    def test_blank_file_targets_become_none(self):
        data = FileCreate(file_name="a.pdf", file_url="https://x/a.pdf", target_grade="", target_section="")
        assert data.target_grade is None
        assert data.target_section is None


class TestScheduleCreate:
    """Test schedule time ordering."""

    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError):
            ScheduleCreate(
                student_id=uuid7(),
                subject="Math",
                day_of_week="Monday",
                start_time=time(10),
                end_time=time(9),
            )

    def test_equal_times_rejected(self):
        with pytest.raises(ValidationError):
            ScheduleCreate(
                student_id=uuid7(),
                subject="Math",
                day_of_week="Monday",
                start_time=time(9),
                end_time=time(9),
            )

    def test_weekend_day_rejected(self):
        with pytest.raises(ValidationError):
            ScheduleCreate(
                student_id=uuid7(),
                subject="Math",
                day_of_week="Saturday",
                start_time=time(9),
                end_time=time(10),
            )


class TestOtherSchemas:
    """Test defaults and cross-field checks."""

    def test_announcement_defaults_to_three_roles(self):
        data = AnnouncementCreate(title="Hi", content="Welcome")
        assert data.target_roles == list(DEFAULT_TARGET_ROLES)
        assert Role.ADMIN not in data.target_roles

    def test_announcement_needs_a_target(self):
        with pytest.raises(ValidationError):
            AnnouncementCreate(title="Hi", content="Welcome", target_roles=[])

    def test_submission_needs_content(self):
        with pytest.raises(ValidationError):
            SubmissionCreate(submission_text="  ", file_url="")

    def test_student_provisioning_needs_profile_fields(self):
        with pytest.raises(ValidationError):
            ProvisionRequest(full_name="Tom", role="student", grade_level="10")

    def test_admin_cannot_self_provision(self):
        with pytest.raises(ValidationError):
            ProvisionRequest(full_name="Root", role="admin")
