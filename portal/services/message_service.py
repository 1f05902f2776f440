"""Message service for direct communication between principals."""

import logging
import uuid

from portal.access.authorization import Action, get_authorization_gate
from portal.access.identity import Identity
from portal.access.visibility import VisibilityFilter, newest_first
from portal.config import settings
from portal.exceptions import NotFoundException, ValidationException
from portal.models import Message, Principal
from portal.schemas.message import MessageCreate
from portal.store.gateway import RecordStoreGateway

logger = logging.getLogger(__name__)


class MessageService:
    """Service for sending and reading messages."""

    async def list_messages(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        limit: int | None = None,
    ) -> list[Message]:
        """List the newest messages the identity sent or received."""
        filters = VisibilityFilter(identity).messages()
        return await gateway.list(
            Message,
            filters,
            order_by=newest_first(Message),
            limit=limit or settings.message_page_size,
        )

    async def send_message(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        data: MessageCreate,
    ) -> Message:
        """Send a message to another principal."""
        sender_id = data.sender_id or identity.principal.id
        recipient = await gateway.get(Principal, data.recipient_id)

        get_authorization_gate().require(
            identity,
            Action.SEND_MESSAGE,
            {"sender_id": sender_id, "recipient_exists": recipient is not None},
        )
        if data.recipient_id == sender_id:
            raise ValidationException(
                [{"field": "recipient_id", "message": "You cannot send a message to yourself"}]
            )

        message = Message(
            sender_id=sender_id,
            recipient_id=data.recipient_id,
            subject=data.subject,
            content=data.content,
            read=False,
        )
        await gateway.insert(message)
        await gateway.commit()

        logger.info(f"Message {message.id} sent from {sender_id} to {data.recipient_id}")
        return message

    async def mark_read(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
        message_id: uuid.UUID,
    ) -> Message:
        """Mark a received message as read.

        Marking an already-read message again changes nothing.

        Raises:
            NotFoundException: If the message is not visible to the caller
            AuthorizationDenied: If the caller sent rather than received it
        """
        message = await gateway.get(Message, message_id)
        if message is None or identity.principal.id not in (message.sender_id, message.recipient_id):
            raise NotFoundException("Message")

        get_authorization_gate().require(
            identity, Action.MARK_MESSAGE_READ, {"recipient_id": message.recipient_id}
        )

        if message.read:
            return message

        await gateway.update(Message, message_id, {"read": True})
        await gateway.commit()
        return message

    async def unread_count(
        self,
        gateway: RecordStoreGateway,
        identity: Identity,
    ) -> int:
        """Count unread messages received by the identity."""
        filters = VisibilityFilter(identity).received_messages()
        return await gateway.count(Message, [*filters, Message.read.is_(False)])


def get_message_service() -> MessageService:
    """Get message service instance."""
    return MessageService()
