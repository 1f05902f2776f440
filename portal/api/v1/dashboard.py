"""Dashboard API endpoint."""

import uuid

from fastapi import APIRouter, Depends, Query

from portal.access.identity import IdentityResolver
from portal.api.v1.deps import get_gateway, get_principal_id, get_resolver
from portal.api.v1.helpers import UNAVAILABLE_NOTICE, build_dashboard_response
from portal.schemas.common import APIResponse
from portal.schemas.dashboard import DashboardResponse
from portal.services.dashboard_service import get_dashboard_service
from portal.store.gateway import RecordStoreGateway

router = APIRouter()


@router.get("", response_model=APIResponse[DashboardResponse])
async def get_dashboard(
    tab: str = Query("overview"),
    principal_id: uuid.UUID = Depends(get_principal_id),
    gateway: RecordStoreGateway = Depends(get_gateway),
    resolver: IdentityResolver = Depends(get_resolver),
):
    """Get one tab of the caller's dashboard."""
    service = get_dashboard_service()
    view = await service.build(gateway, resolver, principal_id, tab=tab)
    return APIResponse(
        data=build_dashboard_response(view),
        message=UNAVAILABLE_NOTICE if view.failed_panels else None,
    )
