"""File API endpoints."""

from fastapi import APIRouter, Depends

from portal.access.identity import SessionEntry
from portal.api.v1.deps import get_gateway, get_session_entry
from portal.api.v1.helpers import UNAVAILABLE_NOTICE, build_file_response
from portal.schemas.common import APIResponse
from portal.schemas.file import FileCreate, FileResponse
from portal.services.file_service import get_file_service
from portal.services.loading import load_or_empty
from portal.store.gateway import RecordStoreGateway

router = APIRouter()


@router.get("", response_model=APIResponse[list[FileResponse]])
async def list_files(
    entry: SessionEntry = Depends(get_session_entry),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """List shared files visible to the caller."""
    service = get_file_service()
    files, ok = await load_or_empty(
        gateway, "files",
        lambda: service.list_files(gateway, entry.identity, entry.selected_child),
    )
    return APIResponse(
        data=[build_file_response(f) for f in files],
        message=None if ok else UNAVAILABLE_NOTICE,
    )


@router.post("", response_model=APIResponse[FileResponse], status_code=201)
async def create_file(
    data: FileCreate,
    entry: SessionEntry = Depends(get_session_entry),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """Share a file by URL (teachers only)."""
    service = get_file_service()
    file_resource = await service.create_file(gateway, entry.identity, data)
    return APIResponse(
        data=build_file_response(file_resource),
        message="File shared successfully",
    )
