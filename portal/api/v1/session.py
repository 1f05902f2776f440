"""Session API endpoints."""

import uuid

from fastapi import APIRouter, Depends

from portal.access.identity import IdentityResolver
from portal.api.v1.deps import get_principal_id, get_resolver
from portal.schemas.common import APIResponse

router = APIRouter()


@router.post("/end", response_model=APIResponse[None])
async def end_session(
    principal_id: uuid.UUID = Depends(get_principal_id),
    resolver: IdentityResolver = Depends(get_resolver),
):
    """Sign-out teardown: forget the caller's cached identity."""
    resolver.end_session(principal_id)
    return APIResponse(message="Session ended")
