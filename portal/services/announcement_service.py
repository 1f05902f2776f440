"""Announcement service with role targeting."""

import logging

from portal.access.authorization import Action, get_authorization_gate
from portal.access.identity import Identity
from portal.access.visibility import VisibilityFilter, newest_first
from portal.config import settings
from portal.models import Announcement, AnnouncementTarget
from portal.schemas.announcement import AnnouncementCreate
from portal.store.gateway import RecordStoreGateway

logger = logging.getLogger(__name__)


class AnnouncementService:
    """Service for school-wide announcements."""

    async def list_announcements(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        limit: int | None = None,
    ) -> list[Announcement]:
        """List the newest announcements targeted at the identity's role."""
        filters = VisibilityFilter(identity).announcements()
        return await gateway.list(
            Announcement,
            filters,
            order_by=newest_first(Announcement),
            limit=limit or settings.announcement_page_size,
        )

    async def count_announcements(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
    ) -> int:
        """Count every announcement targeted at the identity's role."""
        return await gateway.count(Announcement, VisibilityFilter(identity).announcements())

    async def create_announcement(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        data: AnnouncementCreate,
    ) -> Announcement:
        """Post an announcement to one or more roles."""
        get_authorization_gate().require(identity, Action.CREATE_ANNOUNCEMENT)

        announcement = Announcement(
            author_id=identity.principal.id,
            title=data.title,
            content=data.content,
            targets=[
                AnnouncementTarget(role=role.value)
                for role in dict.fromkeys(data.target_roles)
            ],
        )
        await gateway.insert(announcement)
        await gateway.commit()

        logger.info(
            f"Principal {identity.principal.id} posted announcement {announcement.id} "
            f"to {', '.join(announcement.target_roles)}"
        )
        return announcement


def get_announcement_service() -> AnnouncementService:
    """Get announcement service instance."""
    return AnnouncementService()
