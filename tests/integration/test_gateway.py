"""Tests for the record store gateway."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from uuid_extensions import uuid7

from portal.exceptions import NotFoundException, StoreUnavailableException, ValidationException
from portal.models import Assignment, Message, Principal, Role, Submission
from portal.store.gateway import RecordStoreGateway

pytestmark = pytest.mark.integration


@pytest.fixture
def broken_gateway() -> RecordStoreGateway:
    """Gateway over a session whose connection is gone."""
    session = MagicMock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("connection refused")))
    session.get = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("connection refused")))
    session.rollback = AsyncMock()
    return RecordStoreGateway(session)


class TestReads:
    """Test list/count/get."""

    async def test_empty_filter_result_is_empty_list(self, gateway):
        rows = await gateway.list(Assignment, [Assignment.grade_level == "12"])
        assert rows == []

    async def test_count(self, gateway, factory):
        teacher = await factory.teacher()
        await factory.assignment(teacher, grade_level="10")
        await factory.assignment(teacher, grade_level="9")
        assert await gateway.count(Assignment) == 2
        assert await gateway.count(Assignment, [Assignment.grade_level == "10"]) == 1

    async def test_get_missing_is_none(self, gateway):
        assert await gateway.get(Principal, uuid7()) is None

    async def test_store_failure_on_list(self, broken_gateway):
        with pytest.raises(StoreUnavailableException) as exc_info:
            await broken_gateway.list(Assignment)
        assert exc_info.value.status_code == 503

    async def test_store_failure_on_count_and_get(self, broken_gateway):
        with pytest.raises(StoreUnavailableException):
            await broken_gateway.count(Assignment)
        with pytest.raises(StoreUnavailableException):
            await broken_gateway.get(Assignment, uuid7())


class TestInsert:
    """Test insert validation."""

    async def test_insert_returns_id_and_timestamps(self, gateway, factory):
        teacher = await factory.teacher()
        assignment = Assignment(teacher_id=teacher.id, title="Essay")
        record_id = await gateway.insert(assignment)
        assert record_id == assignment.id
        assert assignment.created_at is not None

    async def test_missing_required_field(self, gateway):
        with pytest.raises(ValidationException) as exc_info:
            await gateway.insert(Principal(id=uuid7(), email="x@school.test", role=Role.STUDENT.value))
        assert exc_info.value.errors == [{"field": "full_name", "message": "full_name is required"}]

    async def test_blank_required_field(self, gateway, factory):
        teacher = await factory.teacher()
        with pytest.raises(ValidationException) as exc_info:
            await gateway.insert(Assignment(teacher_id=teacher.id, title="  "))
        assert exc_info.value.errors[0]["field"] == "title"

    async def test_constraint_violation_is_validation_error(self, gateway, factory):
        student = await factory.student()
        teacher = await factory.teacher()
        assignment = await factory.assignment(teacher)
        await factory.submission(assignment, student)

        with pytest.raises(ValidationException):
            await gateway.insert(
                Submission(assignment_id=assignment.id, student_id=student.id, submission_text="Again")
            )


class TestUpdate:
    """Test partial updates."""

    async def test_update_missing_row(self, gateway):
        with pytest.raises(NotFoundException) as exc_info:
            await gateway.update(Message, uuid7(), {"read": True})
        assert exc_info.value.message == "Message not found"

    async def test_update_applies_patch(self, gateway, factory):
        sender = await factory.principal(Role.TEACHER)
        recipient = await factory.principal(Role.PARENT)
        message = await factory.message(sender.id, recipient.id)

        await gateway.update(Message, message.id, {"read": True})
        await gateway.commit()

        assert (await gateway.get(Message, message.id)).read is True
