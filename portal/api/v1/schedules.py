"""Schedule API endpoints."""

from fastapi import APIRouter, Depends

from portal.access.identity import SessionEntry
from portal.api.v1.deps import get_gateway, get_session_entry
from portal.api.v1.helpers import UNAVAILABLE_NOTICE, build_schedule_response
from portal.schemas.common import APIResponse
from portal.schemas.schedule import ScheduleCreate, ScheduleResponse
from portal.services.loading import load_or_empty
from portal.services.schedule_service import get_schedule_service
from portal.store.gateway import RecordStoreGateway

router = APIRouter()


@router.get("", response_model=APIResponse[list[ScheduleResponse]])
async def list_schedules(
    entry: SessionEntry = Depends(get_session_entry),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """List the weekly schedule visible to the caller."""
    service = get_schedule_service()
    schedules, ok = await load_or_empty(
        gateway, "schedule",
        lambda: service.list_schedules(gateway, entry.identity, entry.selected_child),
    )
    return APIResponse(
        data=[build_schedule_response(s) for s in schedules],
        message=None if ok else UNAVAILABLE_NOTICE,
    )


@router.post("", response_model=APIResponse[ScheduleResponse], status_code=201)
async def create_schedule(
    data: ScheduleCreate,
    entry: SessionEntry = Depends(get_session_entry),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """Add a weekly slot to a student's schedule (admin only)."""
    service = get_schedule_service()
    schedule = await service.create_schedule(gateway, entry.identity, data)
    return APIResponse(
        data=build_schedule_response(schedule),
        message="Schedule entry created successfully",
    )
