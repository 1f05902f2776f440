"""Profile API endpoints."""

import uuid

from fastapi import APIRouter, Depends

from portal.access.authorization import get_authorization_gate
from portal.access.identity import Identity, IdentityResolver, SessionEntry
from portal.api.v1.deps import (
    get_gateway,
    get_identity,
    get_principal_id,
    get_principal_identity,
    get_resolver,
    get_session_entry,
)
from portal.api.v1.helpers import build_identity_response, build_student_profile_response
from portal.exceptions import AuthorizationDenied
from portal.schemas.common import APIResponse
from portal.schemas.profile import (
    ChildSelectionRequest,
    DirectoryEntry,
    IdentityResponse,
    ParentLinkCreate,
    ParentLinkResponse,
    PrincipalResponse,
    ProvisionRequest,
    StudentProfileResponse,
)
from portal.services.profile_service import get_profile_service
from portal.store.gateway import RecordStoreGateway
from portal.utils.request_context import get_current_email

router = APIRouter()


@router.get("/me", response_model=APIResponse[IdentityResponse])
async def get_me(entry: SessionEntry = Depends(get_session_entry)):
    """Get the caller's identity and what it may do."""
    capabilities = get_authorization_gate().capabilities(entry.identity)
    return APIResponse(data=build_identity_response(entry, capabilities))


@router.post("", response_model=APIResponse[PrincipalResponse], status_code=201)
async def provision_profile(
    data: ProvisionRequest,
    principal_id: uuid.UUID = Depends(get_principal_id),
    gateway: RecordStoreGateway = Depends(get_gateway),
    resolver: IdentityResolver = Depends(get_resolver),
):
    """Create the caller's profile after signing up with the auth provider."""
    service = get_profile_service()
    principal = await service.provision(gateway, principal_id, data, token_email=get_current_email())
    resolver.end_session(principal_id)

    return APIResponse(
        data=PrincipalResponse.model_validate(principal),
        message="Profile created successfully",
    )


@router.get("/directory", response_model=APIResponse[list[DirectoryEntry]])
async def list_directory(
    identity: Identity = Depends(get_principal_identity),
    gateway: RecordStoreGateway = Depends(get_gateway),
):
    """List everyone the caller can message."""
    service = get_profile_service()
    principals = await service.list_directory(gateway, identity)
    return APIResponse(data=[DirectoryEntry.model_validate(p) for p in principals])


@router.post("/parent-links", response_model=APIResponse[ParentLinkResponse], status_code=201)
async def link_parent(
    data: ParentLinkCreate,
    identity: Identity = Depends(get_identity),
    gateway: RecordStoreGateway = Depends(get_gateway),
    resolver: IdentityResolver = Depends(get_resolver),
):
    """Link a parent to a student (admin only)."""
    service = get_profile_service()
    link = await service.link_parent(gateway, identity, data)
    resolver.end_session(data.parent_id)

    return APIResponse(
        data=ParentLinkResponse.model_validate(link),
        message="Parent linked successfully",
    )


@router.get("/children", response_model=APIResponse[list[StudentProfileResponse]])
async def list_children(entry: SessionEntry = Depends(get_session_entry)):
    """List the caller's linked children."""
    return APIResponse(
        data=[build_student_profile_response(child) for child in entry.identity.children]
    )


@router.put("/children/selection", response_model=APIResponse[IdentityResponse])
async def select_child(
    data: ChildSelectionRequest,
    entry: SessionEntry = Depends(get_session_entry),
):
    """Switch the child a parent is viewing."""
    if entry.selection is None:
        raise AuthorizationDenied("Only parents can select a child")

    entry.selection.select(data.child_id)
    capabilities = get_authorization_gate().capabilities(entry.identity)
    return APIResponse(
        data=build_identity_response(entry, capabilities),
        message="Child selected",
    )
