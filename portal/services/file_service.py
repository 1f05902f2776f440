"""Shared file service. File URLs are stored as given; hosting is external."""

import logging

from portal.access.authorization import Action, get_authorization_gate
from portal.access.identity import Identity, LinkedStudent
from portal.access.visibility import VisibilityFilter, newest_first
from portal.models import FileResource
from portal.schemas.file import FileCreate
from portal.store.gateway import RecordStoreGateway

logger = logging.getLogger(__name__)


class FileService:
    """Service for shared learning materials."""

    async def list_files(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        child: LinkedStudent | None = None,
    ) -> list[FileResource]:
        """List files visible to the identity, newest first."""
        filters = VisibilityFilter(identity, child).files()
        return await gateway.list(FileResource, filters, order_by=newest_first(FileResource))

    async def create_file(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        data: FileCreate,
    ) -> FileResource:
        """Share a file under the caller's account."""
        uploaded_by = data.uploaded_by or identity.principal.id

        get_authorization_gate().require(
            identity, Action.CREATE_FILE, {"uploaded_by": uploaded_by}
        )

        file_resource = FileResource(
            uploaded_by=uploaded_by,
            file_name=data.file_name,
            file_url=data.file_url,
            file_type=data.file_type,
            category=data.category.value,
            subject=data.subject,
            target_grade=data.target_grade,
            target_section=data.target_section,
        )
        await gateway.insert(file_resource)
        await gateway.commit()

        logger.info(f"Principal {uploaded_by} shared file {file_resource.id} ({file_resource.file_name})")
        return file_resource


def get_file_service() -> FileService:
    """Get file service instance."""
    return FileService()
