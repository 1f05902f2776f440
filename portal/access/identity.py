"""Identity resolution and per-session caching.

An Identity pairs the authenticated principal with its linked domain entity:

- student: the StudentProfile
- teacher: the TeacherProfile
- parent: every StudentProfile linked through ParentLink, in link order
- admin: nothing

Identities are resolved once per session and cached in a SessionRegistry.
Role and linkage do not change while a session is open, so an entry is
dropped on sign-out, when provisioning changes a principal's links, or when
the registry evicts it for being idle or least recently used.

Messages, announcements and the directory only need the principal, so
principal_identity() serves them even when the linked entity is missing.
"""

import logging
import time
import uuid
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple

from portal.exceptions import AuthorizationDenied, NotProvisionedException
from portal.models import ParentLink, Principal, Role, StudentProfile, TeacherProfile
from portal.store.gateway import RecordStoreGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrincipalRef:
    """Snapshot of the authenticated principal."""

    id: uuid.UUID
    role: Role
    email: str
    full_name: str


@dataclass(frozen=True)
class LinkedStudent:
    """Snapshot of a StudentProfile as needed for visibility decisions."""

    id: uuid.UUID
    user_id: uuid.UUID
    grade_level: str
    section: str
    student_id: str
    full_name: str | None = None

    @classmethod
    def from_profile(cls, profile: StudentProfile) -> "LinkedStudent":
        return cls(
            id=profile.id,
            user_id=profile.user_id,
            grade_level=profile.grade_level,
            section=profile.section,
            student_id=profile.student_id,
            full_name=profile.user.full_name if profile.user else None,
        )


@dataclass(frozen=True)
class LinkedTeacher:
    """Snapshot of a TeacherProfile."""

    id: uuid.UUID
    user_id: uuid.UUID
    subject: str | None = None
    department: str | None = None


@dataclass(frozen=True)
class Identity:
    """A resolved principal with its linked entity."""

    principal: PrincipalRef
    linked: LinkedStudent | LinkedTeacher | tuple[LinkedStudent, ...] | None

    @property
    def role(self) -> Role:
        return self.principal.role

    @property
    def student(self) -> LinkedStudent | None:
        """The principal's own student record, for student principals."""
        return self.linked if isinstance(self.linked, LinkedStudent) else None

    @property
    def teacher(self) -> LinkedTeacher | None:
        """The principal's teacher record, for teacher principals."""
        return self.linked if isinstance(self.linked, LinkedTeacher) else None

    @property
    def children(self) -> tuple[LinkedStudent, ...]:
        """Linked children, for parent principals."""
        return self.linked if isinstance(self.linked, tuple) else ()

    def child(self, child_id: uuid.UUID) -> LinkedStudent | None:
        """Find a linked child by StudentProfile id."""
        for child in self.children:
            if child.id == child_id:
                return child
        return None


class SelectionToken(NamedTuple):
    """Marks which child selection a load was started for."""

    child_id: uuid.UUID
    generation: int


@dataclass
class ChildSelection:
    """The child a parent is currently looking at.

    Every switch bumps the generation, so a load started before the switch
    can tell that its result is no longer for the selected child.
    """

    child_ids: tuple[uuid.UUID, ...]
    selected_id: uuid.UUID | None = None
    generation: int = 0

    def __post_init__(self):
        if self.selected_id is None and self.child_ids:
            self.selected_id = self.child_ids[0]

    def select(self, child_id: uuid.UUID) -> SelectionToken:
        """Switch to another linked child."""
        if child_id not in self.child_ids:
            raise AuthorizationDenied("That student is not linked to your account")
        self.selected_id = child_id
        self.generation += 1
        return self.token()

    def token(self) -> SelectionToken:
        """Token for the current selection."""
        if self.selected_id is None:
            raise NotProvisionedException("No children are linked to this account")
        return SelectionToken(self.selected_id, self.generation)

    def is_current(self, token: SelectionToken) -> bool:
        """Check whether a token still describes the current selection."""
        return token == SelectionToken(self.selected_id, self.generation)


@dataclass
class SessionEntry:
    """Cached state for one signed-in principal."""

    identity: Identity
    selection: ChildSelection | None = None

    @property
    def selected_child(self) -> LinkedStudent | None:
        if self.selection is None or self.selection.selected_id is None:
            return None
        return self.identity.child(self.selection.selected_id)


class SessionRegistry:
    """Resolved identities keyed by principal id.

    Bounded two ways: entries idle for longer than ``idle_seconds`` are
    dropped on the next access, and storing past ``max_entries`` evicts the
    least recently used entry. An evicted principal is resolved again on its
    next request.
    """

    def __init__(
        self,
        max_entries: int = 1000,
        idle_seconds: float = 1800,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._entries: OrderedDict[uuid.UUID, tuple[SessionEntry, float]] = OrderedDict()

    def get(self, principal_id: uuid.UUID) -> SessionEntry | None:
        self._evict_idle()
        cached = self._entries.get(principal_id)
        if cached is None:
            return None
        entry, _ = cached
        self._entries[principal_id] = (entry, self._clock())
        self._entries.move_to_end(principal_id)
        return entry

    def store(self, identity: Identity) -> SessionEntry:
        selection = None
        if identity.role == Role.PARENT:
            selection = ChildSelection(tuple(child.id for child in identity.children))
        entry = SessionEntry(identity=identity, selection=selection)

        self._evict_idle()
        self._entries[identity.principal.id] = (entry, self._clock())
        self._entries.move_to_end(identity.principal.id)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cached identity for principal {evicted}")
        return entry

    def end(self, principal_id: uuid.UUID) -> bool:
        """Drop a principal's cached identity. Returns True if one was cached."""
        return self._entries.pop(principal_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def _evict_idle(self) -> None:
        # Oldest access first, so stop at the first entry still in use
        cutoff = self._clock() - self.idle_seconds
        while self._entries:
            principal_id, (_, last_seen) = next(iter(self._entries.items()))
            if last_seen > cutoff:
                break
            del self._entries[principal_id]

    def __len__(self) -> int:
        return len(self._entries)


class IdentityResolver:
    """Resolves principals to identities through the record store."""

    def __init__(self, gateway: RecordStoreGateway, registry: SessionRegistry):
        self.gateway = gateway
        self.registry = registry

    async def session(self, principal_id: uuid.UUID) -> SessionEntry:
        """Get the cached session entry, resolving the identity on first use."""
        entry = self.registry.get(principal_id)
        if entry is not None:
            return entry

        identity = await self.resolve(principal_id)
        logger.info(f"Resolved {identity.role.value} identity for principal {principal_id}")
        return self.registry.store(identity)

    async def principal_identity(self, principal_id: uuid.UUID) -> Identity:
        """Identity for features scoped to the principal alone.

        Falls back to the bare principal with no linked entity when the
        profile or parent links are missing. The fallback is not cached, so
        the full identity is picked up once provisioning completes.

        Raises:
            NotProvisionedException: If the principal row itself is missing
        """
        try:
            entry = await self.session(principal_id)
        except NotProvisionedException:
            ref = await self._principal_ref(principal_id)
            logger.info(f"Principal {principal_id} has no linked {ref.role.value} record")
            return Identity(principal=ref, linked=None)
        return entry.identity

    async def resolve(self, principal_id: uuid.UUID) -> Identity:
        """Resolve a principal and its linked entity without using the cache.

        Raises:
            NotProvisionedException: If the principal row or its linked
                entity is missing
        """
        ref = await self._principal_ref(principal_id)

        if ref.role == Role.STUDENT:
            linked = await self._resolve_student(principal_id)
        elif ref.role == Role.TEACHER:
            linked = await self._resolve_teacher(principal_id)
        elif ref.role == Role.PARENT:
            linked = await self._resolve_children(principal_id)
        elif ref.role == Role.ADMIN:
            linked = None
        else:
            raise ValueError(f"Unhandled role: {ref.role}")

        return Identity(principal=ref, linked=linked)

    def end_session(self, principal_id: uuid.UUID) -> bool:
        """Sign-out teardown: forget the cached identity."""
        ended = self.registry.end(principal_id)
        if ended:
            logger.info(f"Ended session for principal {principal_id}")
        return ended

    async def _principal_ref(self, principal_id: uuid.UUID) -> PrincipalRef:
        principal = await self.gateway.get(Principal, principal_id)
        if principal is None:
            raise NotProvisionedException("No profile exists for this account")
        return PrincipalRef(
            id=principal.id,
            role=principal.role_enum,
            email=principal.email,
            full_name=principal.full_name,
        )

    async def _resolve_student(self, principal_id: uuid.UUID) -> LinkedStudent:
        profile = await self.gateway.first(
            StudentProfile, [StudentProfile.user_id == principal_id]
        )
        if profile is None:
            raise NotProvisionedException("Student profile has not been set up")
        return LinkedStudent.from_profile(profile)

    async def _resolve_teacher(self, principal_id: uuid.UUID) -> LinkedTeacher:
        profile = await self.gateway.first(
            TeacherProfile, [TeacherProfile.user_id == principal_id]
        )
        if profile is None:
            raise NotProvisionedException("Teacher profile has not been set up")
        return LinkedTeacher(
            id=profile.id,
            user_id=profile.user_id,
            subject=profile.subject,
            department=profile.department,
        )

    async def _resolve_children(self, principal_id: uuid.UUID) -> tuple[LinkedStudent, ...]:
        links = await self.gateway.list(
            ParentLink,
            [ParentLink.parent_id == principal_id],
            order_by=[ParentLink.created_at, ParentLink.id],
        )
        children = tuple(
            LinkedStudent.from_profile(link.student) for link in links if link.student
        )
        if not children:
            raise NotProvisionedException("No children are linked to this account")
        return children
