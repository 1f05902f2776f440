"""Tests for the authorization gate."""

import pytest
from uuid_extensions import uuid7

from portal.access.authorization import Action, AuthorizationGate, Decision
from portal.exceptions import AuthorizationDenied
from tests.factories import (
    admin_identity,
    linked_student,
    parent_identity,
    student_identity,
    teacher_identity,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def gate() -> AuthorizationGate:
    return AuthorizationGate()


class TestRoleRules:
    """Test which roles may attempt each action."""

    def test_only_teachers_create_assignments(self, gate):
        for identity in (student_identity(), parent_identity(linked_student()), admin_identity()):
            decision = gate.authorize(identity, Action.CREATE_ASSIGNMENT, {"teacher_id": uuid7()})
            assert not decision
            assert "cannot create assignment" in decision.reason

    def test_announcements_by_teacher_or_admin(self, gate):
        assert gate.authorize(teacher_identity(), Action.CREATE_ANNOUNCEMENT)
        assert gate.authorize(admin_identity(), Action.CREATE_ANNOUNCEMENT)
        assert not gate.authorize(student_identity(), Action.CREATE_ANNOUNCEMENT)
        assert not gate.authorize(parent_identity(linked_student()), Action.CREATE_ANNOUNCEMENT)

    def test_admin_only_actions(self, gate):
        for action in (Action.LINK_PARENT, Action.CREATE_SCHEDULE):
            assert gate.authorize(admin_identity(), action)
            assert not gate.authorize(teacher_identity(), action)

    def test_capabilities(self, gate):
        assert gate.capabilities(student_identity()) == frozenset(
            {Action.SEND_MESSAGE, Action.MARK_MESSAGE_READ, Action.CREATE_SUBMISSION}
        )
        assert gate.capabilities(teacher_identity()) == frozenset(
            {
                Action.SEND_MESSAGE,
                Action.MARK_MESSAGE_READ,
                Action.CREATE_ANNOUNCEMENT,
                Action.CREATE_ASSIGNMENT,
                Action.CREATE_FILE,
            }
        )
        assert Action.CREATE_ASSIGNMENT not in gate.capabilities(admin_identity())


class TestPayloadRules:
    """Test the per-action payload constraints."""

    def test_assignment_must_use_own_teacher_profile(self, gate):
        identity = teacher_identity()
        assert gate.authorize(identity, Action.CREATE_ASSIGNMENT, {"teacher_id": identity.teacher.id})
        assert not gate.authorize(identity, Action.CREATE_ASSIGNMENT, {"teacher_id": uuid7()})

    def test_file_must_be_uploaded_by_caller(self, gate):
        identity = teacher_identity()
        assert gate.authorize(identity, Action.CREATE_FILE, {"uploaded_by": identity.principal.id})
        assert not gate.authorize(identity, Action.CREATE_FILE, {"uploaded_by": uuid7()})

    def test_message_sender_and_recipient(self, gate):
        identity = parent_identity(linked_student())
        own = identity.principal.id
        assert gate.authorize(identity, Action.SEND_MESSAGE, {"sender_id": own, "recipient_exists": True})
        assert not gate.authorize(identity, Action.SEND_MESSAGE, {"sender_id": uuid7(), "recipient_exists": True})
        decision = gate.authorize(identity, Action.SEND_MESSAGE, {"sender_id": own, "recipient_exists": False})
        assert decision.reason == "Recipient does not exist"

    def test_only_recipient_marks_read(self, gate):
        identity = student_identity()
        assert gate.authorize(identity, Action.MARK_MESSAGE_READ, {"recipient_id": identity.principal.id})
        assert not gate.authorize(identity, Action.MARK_MESSAGE_READ, {"recipient_id": uuid7()})

    def test_submission_for_own_profile_only(self, gate):
        identity = student_identity()
        assert gate.authorize(identity, Action.CREATE_SUBMISSION, {"student_id": identity.student.id})
        assert not gate.authorize(identity, Action.CREATE_SUBMISSION, {"student_id": uuid7()})


class TestRequire:
    """Test the raising form of the gate."""

    def test_require_raises_with_reason(self, gate):
        with pytest.raises(AuthorizationDenied) as exc_info:
            gate.require(student_identity(), Action.CREATE_FILE, {})
        assert exc_info.value.status_code == 403
        assert "student" in exc_info.value.message

    def test_require_passes_silently(self, gate):
        identity = admin_identity()
        assert gate.require(identity, Action.LINK_PARENT) is None

    def test_decision_truthiness(self):
        assert Decision.allow()
        assert not Decision.deny("no")
