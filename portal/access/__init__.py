"""Role-scoped identity, visibility and authorization."""

from portal.access.authorization import Action, AuthorizationGate, Decision, get_authorization_gate
from portal.access.identity import (
    ChildSelection,
    Identity,
    IdentityResolver,
    LinkedStudent,
    LinkedTeacher,
    PrincipalRef,
    SessionRegistry,
)
from portal.access.visibility import VisibilityFilter

__all__ = [
    "Action",
    "AuthorizationGate",
    "Decision",
    "get_authorization_gate",
    "ChildSelection",
    "Identity",
    "IdentityResolver",
    "LinkedStudent",
    "LinkedTeacher",
    "PrincipalRef",
    "SessionRegistry",
    "VisibilityFilter",
]
