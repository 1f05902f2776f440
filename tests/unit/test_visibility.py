"""Tests for row visibility predicates."""

from datetime import time

import pytest
from uuid_extensions import uuid7

from portal.access.visibility import (
    VisibilityFilter,
    matches_announcement,
    matches_broadcast_scope,
    matches_message,
    schedule_sort_key,
)
from portal.exceptions import NotProvisionedException
from portal.models import Role
from tests.factories import (
    admin_identity,
    linked_student,
    parent_identity,
    student_identity,
    teacher_identity,
)

pytestmark = pytest.mark.unit


class TestBroadcastScope:
    """Test the grade/section wildcard predicate."""

    @pytest.mark.parametrize(
        ("row_grade", "row_section", "expected"),
        [
            ("10", "A", True),
            ("10", None, True),
            (None, "A", True),
            (None, None, True),
            ("10", "B", False),
            ("9", "A", False),
            ("9", None, False),
            (None, "B", False),
        ],
    )
    def test_truth_table_for_grade_10_section_a(self, row_grade, row_section, expected):
        """Each dimension matches on equality or null, independently."""
        assert matches_broadcast_scope(row_grade, row_section, "10", "A") is expected

    def test_empty_string_is_not_a_wildcard(self):
        """An empty grade or section only matches an empty student value."""
        assert not matches_broadcast_scope("", None, "10", "A")
        assert not matches_broadcast_scope(None, "", "10", "A")
        assert matches_broadcast_scope("", "", "", "")

    def test_grade_10_assignment_scenario(self):
        """A grade-10/any-section row reaches 10A but not 9A."""
        assert matches_broadcast_scope("10", None, "10", "A")
        assert not matches_broadcast_scope("10", None, "9", "A")


class TestOwnershipPredicates:
    """Test message and announcement predicates."""

    def test_message_visible_to_both_parties_only(self):
        sender, recipient, other = uuid7(), uuid7(), uuid7()
        assert matches_message(sender, recipient, sender)
        assert matches_message(sender, recipient, recipient)
        assert not matches_message(sender, recipient, other)

    def test_announcement_role_targeting(self):
        targets = ["student", "parent"]
        assert matches_announcement(targets, Role.STUDENT)
        assert matches_announcement(targets, Role.PARENT)
        assert not matches_announcement(targets, Role.TEACHER)
        assert not matches_announcement(targets, Role.ADMIN)

    def test_schedule_sort_key_follows_school_week(self):
        slots = [
            ("Friday", time(8)),
            ("Monday", time(10)),
            ("Wednesday", time(9)),
            ("Monday", time(8)),
        ]
        ordered = sorted(slots, key=lambda slot: schedule_sort_key(*slot))
        assert ordered == [
            ("Monday", time(8)),
            ("Monday", time(10)),
            ("Wednesday", time(9)),
            ("Friday", time(8)),
        ]

    def test_schedule_sort_key_places_unknown_day_last(self):
        assert schedule_sort_key("Monday", time(8)) == (0, time(8))
        assert schedule_sort_key("Friday", time(8)) == (4, time(8))
        assert schedule_sort_key("Saturday", time(8)) == (5, time(8))


class TestVisibilityFilter:
    """Test per-role filter construction."""

    def test_student_scope_is_own_profile(self):
        identity = student_identity()
        assert VisibilityFilter(identity).student_scope == identity.student

    def test_parent_scope_is_selected_child(self):
        child = linked_student("9", "B")
        identity = parent_identity(child, linked_student())
        assert VisibilityFilter(identity, child).student_scope == child

    def test_parent_without_selected_child_is_not_provisioned(self):
        identity = parent_identity(linked_student())
        with pytest.raises(NotProvisionedException):
            VisibilityFilter(identity).assignments()

    def test_teacher_has_no_student_scope(self):
        assert VisibilityFilter(teacher_identity()).student_scope is None

    def test_admin_reads_student_collections_unfiltered(self):
        visibility = VisibilityFilter(admin_identity())
        assert visibility.schedules() == []
        assert visibility.assignments() == []
        assert visibility.files() == []
        assert visibility.submissions() == []

    def test_messages_always_filtered_by_party(self):
        for identity in (student_identity(), teacher_identity(), admin_identity()):
            assert len(VisibilityFilter(identity).messages()) == 1
            assert len(VisibilityFilter(identity).announcements()) == 1
