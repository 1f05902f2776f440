"""Profile provisioning, directory and parent links."""

import logging
import uuid

from portal.access.authorization import Action, get_authorization_gate
from portal.access.identity import Identity
from portal.exceptions import ConflictException, NotFoundException, ValidationException
from portal.models import ParentLink, Principal, Role, StudentProfile, TeacherProfile
from portal.schemas.profile import ParentLinkCreate, ProvisionRequest
from portal.store.gateway import RecordStoreGateway

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for principals and their linked records."""

    async def provision(
        self,
        gateway: RecordStoreGateway,
        principal_id: uuid.UUID,
        data: ProvisionRequest,
        token_email: str | None = None,
    ) -> Principal:
        """Create the profile rows for a freshly signed-up principal.

        Safe to retry: rows that already exist are kept. A retry with a
        different role is rejected because roles are fixed at sign-up.
        """
        email = data.email or token_email
        if not email:
            raise ValidationException([{"field": "email", "message": "email is required"}])

        principal = await gateway.get(Principal, principal_id)
        if principal is None:
            principal = Principal(
                id=principal_id,
                email=email.lower(),
                full_name=data.full_name,
                role=data.role.value,
            )
            await gateway.insert(principal)
        elif principal.role != data.role.value:
            raise ConflictException("A profile with a different role already exists")

        if data.role == Role.STUDENT:
            existing = await gateway.first(StudentProfile, [StudentProfile.user_id == principal_id])
            if existing is None:
                await gateway.insert(
                    StudentProfile(
                        user_id=principal_id,
                        grade_level=data.grade_level,
                        section=data.section,
                        student_id=data.student_id,
                    )
                )
        elif data.role == Role.TEACHER:
            existing = await gateway.first(TeacherProfile, [TeacherProfile.user_id == principal_id])
            if existing is None:
                await gateway.insert(
                    TeacherProfile(
                        user_id=principal_id,
                        subject=data.subject,
                        department=data.department,
                    )
                )

        await gateway.commit()
        logger.info(f"Provisioned {data.role.value} profile for principal {principal_id}")
        return principal

    async def list_directory(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
    ) -> list[Principal]:
        """Everyone the caller can address a message to."""
        return await gateway.list(
            Principal,
            [Principal.id != identity.principal.id],
            order_by=[Principal.full_name, Principal.id],
        )

    async def link_parent(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        data: ParentLinkCreate,
    ) -> ParentLink:
        """Link a parent principal to an existing student."""
        get_authorization_gate().require(identity, Action.LINK_PARENT)

        parent = await gateway.get(Principal, data.parent_id)
        if parent is None or not parent.is_parent:
            raise NotFoundException("Parent")

        student = await gateway.get(StudentProfile, data.student_id)
        if student is None:
            raise NotFoundException("Student")

        existing = await gateway.first(
            ParentLink,
            [ParentLink.parent_id == data.parent_id, ParentLink.student_id == data.student_id],
        )
        if existing is not None:
            raise ConflictException("Parent is already linked to this student")

        link = ParentLink(parent_id=data.parent_id, student_id=data.student_id)
        await gateway.insert(link)
        await gateway.commit()

        logger.info(f"Linked parent {data.parent_id} to student {data.student_id}")
        return link


def get_profile_service() -> ProfileService:
    """Get profile service instance."""
    return ProfileService()
