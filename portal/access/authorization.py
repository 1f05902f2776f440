"""Authorization gate for mutations.

Every command is checked here before anything is sent to the record store.
A decision combines a role rule with an action-specific payload constraint:

| action              | roles          | payload constraint                     |
|---------------------|----------------|----------------------------------------|
| create_announcement | teacher, admin |                                        |
| create_assignment   | teacher        | teacher_id is the caller's profile     |
| create_file         | teacher        | uploaded_by is the caller              |
| send_message        | any            | sender_id is the caller; recipient exists |
| mark_message_read   | any            | caller is the recipient                |
| create_submission   | student        | student_id is the caller's profile     |
| create_schedule     | admin          |                                        |
| link_parent         | admin          |                                        |
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from portal.access.identity import Identity
from portal.exceptions import AuthorizationDenied
from portal.models.user import Role

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Mutations the portal accepts."""

    CREATE_ANNOUNCEMENT = "create_announcement"
    CREATE_ASSIGNMENT = "create_assignment"
    CREATE_FILE = "create_file"
    SEND_MESSAGE = "send_message"
    MARK_MESSAGE_READ = "mark_message_read"
    CREATE_SUBMISSION = "create_submission"
    CREATE_SCHEDULE = "create_schedule"
    LINK_PARENT = "link_parent"


ALL_ROLES = frozenset(Role)

ROLE_RULES: dict[Action, frozenset[Role]] = {
    Action.CREATE_ANNOUNCEMENT: frozenset({Role.TEACHER, Role.ADMIN}),
    Action.CREATE_ASSIGNMENT: frozenset({Role.TEACHER}),
    Action.CREATE_FILE: frozenset({Role.TEACHER}),
    Action.SEND_MESSAGE: ALL_ROLES,
    Action.MARK_MESSAGE_READ: ALL_ROLES,
    Action.CREATE_SUBMISSION: frozenset({Role.STUDENT}),
    Action.CREATE_SCHEDULE: frozenset({Role.ADMIN}),
    Action.LINK_PARENT: frozenset({Role.ADMIN}),
}


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check."""

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(False, reason)

    def __bool__(self) -> bool:
        return self.allowed


def _own_teacher_profile(identity: Identity, payload: Mapping[str, Any]) -> Decision:
    teacher = identity.teacher
    if teacher is None or payload.get("teacher_id") != teacher.id:
        return Decision.deny("Assignments can only be created under your own teacher profile")
    return Decision.allow()


def _own_upload(identity: Identity, payload: Mapping[str, Any]) -> Decision:
    if payload.get("uploaded_by") != identity.principal.id:
        return Decision.deny("Files can only be shared under your own account")
    return Decision.allow()


def _own_outgoing_message(identity: Identity, payload: Mapping[str, Any]) -> Decision:
    if payload.get("sender_id") != identity.principal.id:
        return Decision.deny("Messages can only be sent from your own account")
    if not payload.get("recipient_exists"):
        return Decision.deny("Recipient does not exist")
    return Decision.allow()


def _recipient_only(identity: Identity, payload: Mapping[str, Any]) -> Decision:
    if payload.get("recipient_id") != identity.principal.id:
        return Decision.deny("Only the recipient can mark a message as read")
    return Decision.allow()


def _own_student_profile(identity: Identity, payload: Mapping[str, Any]) -> Decision:
    student = identity.student
    if student is None or payload.get("student_id") != student.id:
        return Decision.deny("Submissions can only be made for your own student profile")
    return Decision.allow()


PAYLOAD_RULES: dict[Action, Callable[[Identity, Mapping[str, Any]], Decision]] = {
    Action.CREATE_ASSIGNMENT: _own_teacher_profile,
    Action.CREATE_FILE: _own_upload,
    Action.SEND_MESSAGE: _own_outgoing_message,
    Action.MARK_MESSAGE_READ: _recipient_only,
    Action.CREATE_SUBMISSION: _own_student_profile,
}


class AuthorizationGate:
    """Allow/deny decisions for mutations."""

    def authorize(
        self,
        identity: Identity,
        action: Action,
        payload: Mapping[str, Any] | None = None,
    ) -> Decision:
        """Decide whether an identity may perform an action with a payload."""
        if identity.role not in ROLE_RULES[action]:
            return Decision.deny(
                f"Your role ({identity.role.value}) cannot {action.value.replace('_', ' ')}"
            )

        rule = PAYLOAD_RULES.get(action)
        if rule is None:
            return Decision.allow()
        return rule(identity, payload or {})

    def require(
        self,
        identity: Identity,
        action: Action,
        payload: Mapping[str, Any] | None = None,
    ) -> None:
        """Raise AuthorizationDenied unless the action is allowed."""
        decision = self.authorize(identity, action, payload)
        if not decision:
            logger.warning(
                f"Denied {action.value} for principal {identity.principal.id} "
                f"({identity.role.value}): {decision.reason}"
            )
            raise AuthorizationDenied(decision.reason)

    def capabilities(self, identity: Identity) -> frozenset[Action]:
        """Actions the identity's role permits, for the UI to render controls."""
        return frozenset(action for action, roles in ROLE_RULES.items() if identity.role in roles)


def get_authorization_gate() -> AuthorizationGate:
    """Get authorization gate instance."""
    return AuthorizationGate()
