"""Message API endpoints."""

import uuid

from fastapi import APIRouter, Depends

from portal.access.identity import Identity
from portal.api.v1.deps import get_gateway, get_principal_identity
from portal.api.v1.helpers import UNAVAILABLE_NOTICE, build_message_response
from portal.schemas.common import APIResponse
from portal.schemas.message import MessageCreate, MessageResponse, UnreadCountResponse
from portal.services.loading import load_or_empty
from portal.services.message_service import get_message_service
from portal.store.gateway import RecordStoreGateway

router = APIRouter()


@router.get("", response_model=APIResponse[list[MessageResponse]])
async def list_messages(
    identity: Identity = Depends(get_principal_identity),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """List the caller's newest sent and received messages."""
    service = get_message_service()
    messages, ok = await load_or_empty(
        gateway, "messages", lambda: service.list_messages(gateway, identity)
    )
    return APIResponse(
        data=[build_message_response(m, identity.principal.id) for m in messages],
        message=None if ok else UNAVAILABLE_NOTICE,
    )


@router.get("/unread-count", response_model=APIResponse[UnreadCountResponse])
async def get_unread_count(
    identity: Identity = Depends(get_principal_identity),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """Get the caller's unread message count."""
    service = get_message_service()
    count = await service.unread_count(gateway, identity)
    return APIResponse(data=UnreadCountResponse(messages=count))


@router.post("", response_model=APIResponse[MessageResponse], status_code=201)
async def send_message(
    data: MessageCreate,
    identity: Identity = Depends(get_principal_identity),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """Send a message to another principal."""
    service = get_message_service()
    message = await service.send_message(gateway, identity, data)
    return APIResponse(
        data=build_message_response(message, identity.principal.id),
        message="Message sent successfully",
    )


@router.post("/{message_id}/read", response_model=APIResponse[MessageResponse])
async def mark_message_read(
    message_id: uuid.UUID,
    identity: Identity = Depends(get_principal_identity),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """Mark a received message as read."""
    service = get_message_service()
    message = await service.mark_read(gateway, identity, message_id)
    return APIResponse(
        data=build_message_response(message, identity.principal.id),
        message="Message marked as read",
    )
