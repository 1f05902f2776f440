"""Assignment API endpoints."""

import uuid

from fastapi import APIRouter, Depends

from portal.access.identity import SessionEntry
from portal.api.v1.deps import get_gateway, get_session_entry
from portal.api.v1.helpers import (
    UNAVAILABLE_NOTICE,
    build_assignment_response,
    build_submission_response,
)
from portal.models.user import Role
from portal.schemas.assignment import (
    AssignmentCreate,
    AssignmentResponse,
    SubmissionCreate,
    SubmissionResponse,
)
from portal.schemas.common import APIResponse
from portal.services.assignment_service import get_assignment_service
from portal.services.loading import load_or_empty
from portal.store.gateway import RecordStoreGateway

router = APIRouter()


@router.get("", response_model=APIResponse[list[AssignmentResponse]])
async def list_assignments(
    entry: SessionEntry = Depends(get_session_entry),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """List assignments visible to the caller.

    Students also see their own submission on each assignment.
    """
    service = get_assignment_service()
    identity = entry.identity
    assignments, ok = await load_or_empty(
        gateway, "assignments",
        lambda: service.list_assignments(gateway, identity, entry.selected_child),
    )

    submissions = {}
    if identity.role == Role.STUDENT:
        rows, submissions_ok = await load_or_empty(
            gateway, "submissions", lambda: service.list_submissions(gateway, identity)
        )
        submissions = {s.assignment_id: s for s in rows}
        ok = ok and submissions_ok

    return APIResponse(
        data=[build_assignment_response(a, submissions) for a in assignments],
        message=None if ok else UNAVAILABLE_NOTICE,
    )


@router.post("", response_model=APIResponse[AssignmentResponse], status_code=201)
async def create_assignment(
    data: AssignmentCreate,
    entry: SessionEntry = Depends(get_session_entry),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """Create an assignment (teachers only)."""
    service = get_assignment_service()
    assignment = await service.create_assignment(gateway, entry.identity, data)
    return APIResponse(
        data=build_assignment_response(assignment),
        message="Assignment created successfully",
    )


@router.get("/submissions", response_model=APIResponse[list[SubmissionResponse]])
async def list_submissions(
    entry: SessionEntry = Depends(get_session_entry),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """List submissions visible to the caller."""
    service = get_assignment_service()
    submissions, ok = await load_or_empty(
        gateway, "submissions",
        lambda: service.list_submissions(gateway, entry.identity, entry.selected_child),
    )
    return APIResponse(
        data=[build_submission_response(s) for s in submissions],
        message=None if ok else UNAVAILABLE_NOTICE,
    )


@router.post(
    "/{assignment_id}/submissions",
    response_model=APIResponse[SubmissionResponse],
    status_code=201,
)
async def create_submission(
    assignment_id: uuid.UUID,
    data: SubmissionCreate,
    entry: SessionEntry = Depends(get_session_entry),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """Submit work on an assignment (students only)."""
    service = get_assignment_service()
    submission = await service.create_submission(gateway, entry.identity, assignment_id, data)
    return APIResponse(
        data=build_submission_response(submission),
        message="Assignment submitted successfully",
    )
