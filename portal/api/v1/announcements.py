"""Announcement API endpoints."""

from fastapi import APIRouter, Depends

from portal.access.identity import Identity
from portal.api.v1.deps import get_gateway, get_principal_identity
from portal.api.v1.helpers import UNAVAILABLE_NOTICE, build_announcement_response
from portal.schemas.announcement import AnnouncementCreate, AnnouncementResponse
from portal.schemas.common import APIResponse
from portal.services.announcement_service import get_announcement_service
from portal.services.loading import load_or_empty
from portal.store.gateway import RecordStoreGateway

router = APIRouter()


@router.get("", response_model=APIResponse[list[AnnouncementResponse]])
async def list_announcements(
    identity: Identity = Depends(get_principal_identity),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """List the newest announcements for the caller's role."""
    service = get_announcement_service()
    announcements, ok = await load_or_empty(
        gateway, "announcements", lambda: service.list_announcements(gateway, identity)
    )
    return APIResponse(
        data=[build_announcement_response(a) for a in announcements],
        message=None if ok else UNAVAILABLE_NOTICE,
    )


@router.post("", response_model=APIResponse[AnnouncementResponse], status_code=201)
async def create_announcement(
    data: AnnouncementCreate,
    identity: Identity = Depends(get_principal_identity),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """Post an announcement (teachers and admins)."""
    service = get_announcement_service()
    announcement = await service.create_announcement(gateway, identity, data)
    return APIResponse(
        data=build_announcement_response(announcement),
        message="Announcement posted successfully",
    )
