"""Assignment and submission service."""

import logging
import uuid

from portal.access.authorization import Action, get_authorization_gate
from portal.access.identity import Identity, LinkedStudent
from portal.access.visibility import (
    VisibilityFilter,
    due_date_order,
    matches_broadcast_scope,
    newest_first,
)
from portal.exceptions import ConflictException, NotFoundException
from portal.models import Assignment, Role, Submission
from portal.schemas.assignment import AssignmentCreate, SubmissionCreate
from portal.store.gateway import RecordStoreGateway

logger = logging.getLogger(__name__)


class AssignmentService:
    """Service for assignments and submissions."""

    async def list_assignments(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        child: LinkedStudent | None = None,
    ) -> list[Assignment]:
        """List assignments visible to the identity.

        Students and parents get the broadcast-scoped set ordered by due date.
        Teachers get the assignments they created, newest first.
        """
        filters = VisibilityFilter(identity, child).assignments()
        order = newest_first(Assignment) if identity.role == Role.TEACHER else due_date_order()
        return await gateway.list(Assignment, filters, order_by=order)

    async def create_assignment(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        data: AssignmentCreate,
    ) -> Assignment:
        """Create an assignment under the caller's teacher profile."""
        teacher_id = data.teacher_id
        if teacher_id is None and identity.teacher is not None:
            teacher_id = identity.teacher.id

        get_authorization_gate().require(
            identity, Action.CREATE_ASSIGNMENT, {"teacher_id": teacher_id}
        )

        assignment = Assignment(
            teacher_id=teacher_id,
            title=data.title,
            description=data.description,
            subject=data.subject,
            due_date=data.due_date,
            grade_level=data.grade_level,
            section=data.section,
        )
        await gateway.insert(assignment)
        await gateway.commit()

        logger.info(
            f"Teacher {teacher_id} created assignment {assignment.id} "
            f"(grade={assignment.grade_level or '*'}, section={assignment.section or '*'})"
        )
        return assignment

    async def list_submissions(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        child: LinkedStudent | None = None,
    ) -> list[Submission]:
        """List submissions visible to the identity, newest first."""
        filters = VisibilityFilter(identity, child).submissions()
        return await gateway.list(
            Submission,
            filters,
            order_by=[Submission.submitted_at.desc(), Submission.id.desc()],
        )

    async def create_submission(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        assignment_id: uuid.UUID,
        data: SubmissionCreate,
    ) -> Submission:
        """Submit work on an assignment. One submission per student per assignment."""
        student = identity.student
        student_id = data.student_id or (student.id if student else None)

        get_authorization_gate().require(
            identity, Action.CREATE_SUBMISSION, {"student_id": student_id}
        )

        assignment = await gateway.get(Assignment, assignment_id)
        if assignment is None or not matches_broadcast_scope(
            assignment.grade_level, assignment.section, student.grade_level, student.section
        ):
            raise NotFoundException("Assignment")

        existing = await gateway.first(
            Submission,
            [Submission.assignment_id == assignment_id, Submission.student_id == student_id],
        )
        if existing is not None:
            raise ConflictException("You have already submitted this assignment")

        submission = Submission(
            assignment_id=assignment_id,
            student_id=student_id,
            submission_text=data.submission_text,
            file_url=data.file_url,
        )
        await gateway.insert(submission)
        await gateway.commit()

        logger.info(f"Student {student_id} submitted assignment {assignment_id}")
        return submission


def get_assignment_service() -> AssignmentService:
    """Get assignment service instance."""
    return AssignmentService()
