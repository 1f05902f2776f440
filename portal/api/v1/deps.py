"""Shared endpoint dependencies."""

import uuid

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from portal.access.identity import Identity, IdentityResolver, SessionEntry, SessionRegistry
from portal.database import get_db
from portal.exceptions import UnauthorizedException
from portal.store.gateway import RecordStoreGateway
from portal.utils.request_context import get_current_principal_id_or_none


async def get_gateway(db: AsyncSession = Depends(get_db)) -> RecordStoreGateway:
    """Gateway bound to the request's database session."""
    return RecordStoreGateway(db)


def get_registry(request: Request) -> SessionRegistry:
    """The application's identity cache."""
    return request.app.state.sessions


def get_resolver(
    gateway: RecordStoreGateway = Depends(get_gateway),
    registry: SessionRegistry = Depends(get_registry),
) -> IdentityResolver:
    return IdentityResolver(gateway, registry)


def get_principal_id() -> uuid.UUID:
    """The authenticated principal, or 401."""
    principal_id = get_current_principal_id_or_none()
    if principal_id is None:
        raise UnauthorizedException()
    return principal_id


async def get_session_entry(
    principal_id: uuid.UUID = Depends(get_principal_id),
    resolver: IdentityResolver = Depends(get_resolver),
) -> SessionEntry:
    """The caller's cached session, resolving the identity on first use."""
    return await resolver.session(principal_id)


async def get_identity(entry: SessionEntry = Depends(get_session_entry)) -> Identity:
    return entry.identity


async def get_principal_identity(
    principal_id: uuid.UUID = Depends(get_principal_id),
    resolver: IdentityResolver = Depends(get_resolver),
) -> Identity:
    """The caller's identity for endpoints that only need the principal.

    Unlike get_identity, a missing profile or parent link is not an error.
    """
    return await resolver.principal_identity(principal_id)
