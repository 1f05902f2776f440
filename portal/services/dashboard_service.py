"""Dashboard aggregation.

Composes the per-role read model for one dashboard tab. Every panel loads
independently: a store failure empties that panel and names it in
`failed_panels` while the rest of the dashboard still renders. A principal
without a linked record gets an unprovisioned view instead of an error.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from portal.access.authorization import Action, get_authorization_gate
from portal.access.identity import Identity, IdentityResolver, LinkedStudent, SessionEntry
from portal.exceptions import (
    NotProvisionedException,
    StoreUnavailableException,
    ValidationException,
)
from portal.models import Assignment, FileResource, Principal, Role, ScheduleEntry, Submission
from portal.services.announcement_service import get_announcement_service
from portal.services.assignment_service import get_assignment_service
from portal.services.file_service import get_file_service
from portal.services.loading import load_or_empty
from portal.services.schedule_service import get_schedule_service, todays_entries
from portal.store.gateway import RecordStoreGateway

logger = logging.getLogger(__name__)

ROLE_TABS: dict[Role, tuple[str, ...]] = {
    Role.STUDENT: ("overview", "schedule", "assignments", "materials"),
    Role.TEACHER: ("overview", "assignments", "files", "create"),
    Role.PARENT: ("overview", "schedule", "assignments"),
    Role.ADMIN: ("overview", "create"),
}

RECENT_ITEMS = 5


@dataclass
class DashboardView:
    """One tab of a principal's dashboard."""

    role: Role | None
    tab: str
    tabs: tuple[str, ...] = ()
    provisioned: bool = True
    stale: bool = False
    failed_panels: list[str] = field(default_factory=list)
    capabilities: frozenset[Action] = frozenset()
    identity: Identity | None = None
    selected_child: LinkedStudent | None = None

    overview: dict[str, Any] | None = None
    schedules: list[ScheduleEntry] | None = None
    assignments: list[Assignment] | None = None
    submissions: list[Submission] = field(default_factory=list)
    files: list[FileResource] | None = None


def student_counts(assignments: list[Assignment], submissions: list[Submission]) -> dict[str, int]:
    """Assignment totals for a student. Pending never goes below zero."""
    total = len(assignments)
    submitted = len(submissions)
    return {
        "total_assignments": total,
        "submitted_count": submitted,
        "pending_count": max(0, total - submitted),
    }


class DashboardService:
    """Builds dashboard read models."""

    def __init__(self):
        self.schedules = get_schedule_service()
        self.assignments = get_assignment_service()
        self.files = get_file_service()
        self.announcements = get_announcement_service()
        self.gate = get_authorization_gate()

    async def build(
        self,
        gateway: RecordStoreGateway,
        resolver: IdentityResolver,
        principal_id: uuid.UUID,
        tab: str = "overview",
        today: date | None = None,
    ) -> DashboardView:
        """Build one dashboard tab for a principal."""
        today = today or date.today()

        try:
            entry = await resolver.session(principal_id)
        except NotProvisionedException as exc:
            logger.info(f"Principal {principal_id} is not provisioned: {exc.message}")
            return await self._unprovisioned(gateway, principal_id, tab)

        identity = entry.identity
        tabs = ROLE_TABS[identity.role]
        if tab not in tabs:
            raise ValidationException(
                [{"field": "tab", "message": f"'{tab}' is not a {identity.role.value} dashboard tab"}]
            )

        view = DashboardView(
            role=identity.role,
            tab=tab,
            tabs=tabs,
            identity=identity,
            capabilities=self.gate.capabilities(identity),
        )

        if identity.role == Role.STUDENT:
            await self._student(gateway, view, today)
        elif identity.role == Role.TEACHER:
            await self._teacher(gateway, view)
        elif identity.role == Role.PARENT:
            await self._parent(gateway, view, entry, today)
        elif identity.role == Role.ADMIN:
            await self._admin(gateway, view)
        else:
            raise ValueError(f"Unhandled role: {identity.role}")

        return view

    async def _unprovisioned(
        self,
        gateway: RecordStoreGateway,
        principal_id: uuid.UUID,
        tab: str,
    ) -> DashboardView:
        role = None
        try:
            principal = await gateway.get(Principal, principal_id)
            role = principal.role_enum if principal else None
        except StoreUnavailableException:
            await gateway.reset()

        return DashboardView(
            role=role,
            tab=tab,
            tabs=ROLE_TABS.get(role, ("overview",)),
            provisioned=False,
        )

    async def _load(self, gateway: RecordStoreGateway, view: DashboardView, panel: str, loader) -> list:
        rows, ok = await load_or_empty(gateway, panel, loader)
        if not ok:
            view.failed_panels.append(panel)
        return rows

    async def _student(self, gateway: RecordStoreGateway, view: DashboardView, today: date) -> None:
        identity = view.identity

        if view.tab in ("overview", "assignments"):
            view.assignments = await self._load(
                gateway, view, "assignments",
                lambda: self.assignments.list_assignments(gateway, identity),
            )
            view.submissions = await self._load(
                gateway, view, "submissions",
                lambda: self.assignments.list_submissions(gateway, identity),
            )

        if view.tab in ("overview", "schedule"):
            view.schedules = await self._load(
                gateway, view, "schedule",
                lambda: self.schedules.list_schedules(gateway, identity),
            )

        if view.tab == "materials":
            view.files = await self._load(
                gateway, view, "materials",
                lambda: self.files.list_files(gateway, identity),
            )

        if view.tab == "overview":
            view.overview = {
                **student_counts(view.assignments, view.submissions),
                "todays_schedule": todays_entries(view.schedules, today),
                "recent_assignments": view.assignments[:RECENT_ITEMS],
            }

    async def _teacher(self, gateway: RecordStoreGateway, view: DashboardView) -> None:
        identity = view.identity

        if view.tab in ("overview", "assignments"):
            view.assignments = await self._load(
                gateway, view, "assignments",
                lambda: self.assignments.list_assignments(gateway, identity),
            )

        if view.tab == "assignments":
            view.submissions = await self._load(
                gateway, view, "submissions",
                lambda: self.assignments.list_submissions(gateway, identity),
            )

        if view.tab in ("overview", "files"):
            view.files = await self._load(
                gateway, view, "files",
                lambda: self.files.list_files(gateway, identity),
            )

        if view.tab == "overview":
            view.overview = {
                "total_assignments_created": len(view.assignments),
                "total_files_uploaded": len(view.files),
                "recent_assignments": view.assignments[:RECENT_ITEMS],
                "recent_files": view.files[:RECENT_ITEMS],
            }

    async def _parent(
        self,
        gateway: RecordStoreGateway,
        view: DashboardView,
        entry: SessionEntry,
        today: date,
    ) -> None:
        identity = view.identity
        token = entry.selection.token()
        child = entry.selected_child
        view.selected_child = child

        if view.tab in ("overview", "schedule"):
            view.schedules = await self._load(
                gateway, view, "schedule",
                lambda: self.schedules.list_schedules(gateway, identity, child),
            )

        if view.tab in ("overview", "assignments"):
            view.assignments = await self._load(
                gateway, view, "assignments",
                lambda: self.assignments.list_assignments(gateway, identity, child),
            )

        if view.tab == "overview":
            view.overview = {
                "weekly_class_count": len(view.schedules),
                "active_assignment_count": len(view.assignments),
                "todays_schedule": todays_entries(view.schedules, today),
                "recent_assignments": view.assignments[:RECENT_ITEMS],
            }

        if not entry.selection.is_current(token):
            logger.info(
                f"Parent {identity.principal.id} switched child while loading; "
                f"discarding view for student {token.child_id}"
            )
            view.stale = True

    async def _admin(self, gateway: RecordStoreGateway, view: DashboardView) -> None:
        if view.tab != "overview":
            return

        count = 0
        try:
            count = await self.announcements.count_announcements(gateway, view.identity)
        except StoreUnavailableException:
            logger.error("Loading announcement count failed, rendering it empty")
            await gateway.reset()
            view.failed_panels.append("announcements")

        view.overview = {"announcement_count": count}


def get_dashboard_service() -> DashboardService:
    """Get dashboard service instance."""
    return DashboardService()
