"""End-to-end tests of the HTTP surface."""

import pytest
from sqlalchemy import func, select
from uuid_extensions import uuid7

from portal.models import Assignment, Message, Role

pytestmark = pytest.mark.integration


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar()


class TestAuthentication:
    """Test token handling."""

    async def test_health_needs_no_token(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_missing_token(self, client):
        response = await client.get("/api/v1/assignments")
        assert response.status_code == 401
        assert response.json() == {"status": "error", "message": "Authentication required"}

    async def test_garbage_token(self, client):
        response = await client.get("/api/v1/assignments", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401


class TestProfiles:
    """Test provisioning and identity endpoints."""

    async def test_provision_student_then_read_identity(self, client, auth_headers):
        principal_id = uuid7()
        headers = auth_headers(principal_id, "new.student@school.test")

        response = await client.post(
            "/api/v1/profiles",
            json={
                "full_name": "New Student",
                "role": "student",
                "grade_level": "10",
                "section": "A",
                "student_id": "S-77",
            },
            headers=headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["email"] == "new.student@school.test"

        response = await client.get("/api/v1/profiles/me", headers=headers)
        body = response.json()["data"]
        assert body["principal"]["role"] == "student"
        assert body["student"]["grade_level"] == "10"
        assert "create_submission" in body["capabilities"]

    async def test_unprovisioned_identity(self, client, auth_headers):
        response = await client.get("/api/v1/profiles/me", headers=auth_headers(uuid7()))
        assert response.status_code == 409

    async def test_directory_excludes_self(self, client, auth_headers, factory):
        teacher = await factory.teacher(full_name="Zed Teacher")
        await factory.student(full_name="Amy Student")
        await factory.admin(full_name="Bob Admin")

        response = await client.get("/api/v1/profiles/directory", headers=auth_headers(teacher.user_id))
        names = [entry["full_name"] for entry in response.json()["data"]]
        assert names == ["Amy Student", "Bob Admin"]

    async def test_admin_links_parent(self, client, auth_headers, factory):
        admin = await factory.admin()
        first = await factory.student()
        second = await factory.student()
        parent = await factory.parent(first)
        parent_headers = auth_headers(parent.id)

        response = await client.get("/api/v1/profiles/children", headers=parent_headers)
        assert len(response.json()["data"]) == 1

        payload = {"parent_id": str(parent.id), "student_id": str(second.id)}
        response = await client.post("/api/v1/profiles/parent-links", json=payload, headers=auth_headers(admin.id))
        assert response.status_code == 201

        response = await client.post("/api/v1/profiles/parent-links", json=payload, headers=auth_headers(admin.id))
        assert response.status_code == 409

        response = await client.get("/api/v1/profiles/children", headers=parent_headers)
        assert len(response.json()["data"]) == 2

    async def test_non_admin_cannot_link(self, client, auth_headers, factory):
        teacher = await factory.teacher()
        student = await factory.student()
        parent = await factory.parent()

        response = await client.post(
            "/api/v1/profiles/parent-links",
            json={"parent_id": str(parent.id), "student_id": str(student.id)},
            headers=auth_headers(teacher.user_id),
        )
        assert response.status_code == 403


class TestAssignmentsApi:
    """Test assignment commands over HTTP."""

    async def test_non_teacher_create_is_denied_without_insert(self, client, auth_headers, factory, session_factory):
        student = await factory.student()

        response = await client.post(
            "/api/v1/assignments",
            json={"title": "Free marks"},
            headers=auth_headers(student.user_id),
        )

        assert response.status_code == 403
        assert response.json()["status"] == "error"
        assert await count_rows(session_factory, Assignment) == 0

    async def test_teacher_creates_and_student_sees(self, client, auth_headers, factory):
        teacher = await factory.teacher()
        student_10a = await factory.student("10", "A")
        student_9a = await factory.student("9", "A")

        response = await client.post(
            "/api/v1/assignments",
            json={"title": "Algebra", "grade_level": "10", "section": ""},
            headers=auth_headers(teacher.user_id),
        )
        assert response.status_code == 201
        created = response.json()["data"]
        assert created["section"] is None

        response = await client.get("/api/v1/assignments", headers=auth_headers(student_10a.user_id))
        assert [a["id"] for a in response.json()["data"]] == [created["id"]]

        response = await client.get("/api/v1/assignments", headers=auth_headers(student_9a.user_id))
        assert response.json()["data"] == []

    async def test_submit_once(self, client, auth_headers, factory):
        teacher = await factory.teacher()
        assignment = await factory.assignment(teacher)
        student = await factory.student()
        headers = auth_headers(student.user_id)
        url = f"/api/v1/assignments/{assignment.id}/submissions"

        response = await client.post(url, json={"submission_text": "My answer"}, headers=headers)
        assert response.status_code == 201

        response = await client.post(url, json={"submission_text": "Again"}, headers=headers)
        assert response.status_code == 409

        response = await client.get("/api/v1/assignments", headers=headers)
        assert response.json()["data"][0]["submission"]["submission_text"] == "My answer"


class TestMessagesApi:
    """Test messaging over HTTP."""

    async def test_mark_read_is_recipient_only_and_repeatable(self, client, auth_headers, factory):
        teacher = await factory.teacher()
        student = await factory.student()
        teacher_headers = auth_headers(teacher.user_id)
        student_headers = auth_headers(student.user_id)

        response = await client.post(
            "/api/v1/messages",
            json={"recipient_id": str(student.user_id), "content": "See me after class"},
            headers=teacher_headers,
        )
        assert response.status_code == 201
        message_id = response.json()["data"]["id"]

        response = await client.get("/api/v1/messages/unread-count", headers=student_headers)
        assert response.json()["data"]["messages"] == 1

        response = await client.post(f"/api/v1/messages/{message_id}/read", headers=teacher_headers)
        assert response.status_code == 403

        for _ in range(2):
            response = await client.post(f"/api/v1/messages/{message_id}/read", headers=student_headers)
            assert response.status_code == 200
            assert response.json()["data"]["read"] is True

        response = await client.get("/api/v1/messages/unread-count", headers=student_headers)
        assert response.json()["data"]["messages"] == 0

        response = await client.get("/api/v1/messages", headers=student_headers)
        message = response.json()["data"][0]
        assert message["direction"] == "received"
        assert message["sender_name"] is not None

    async def test_message_to_self_is_rejected(self, client, auth_headers, factory, session_factory):
        teacher = await factory.teacher()

        response = await client.post(
            "/api/v1/messages",
            json={"recipient_id": str(teacher.user_id), "content": "Note to self"},
            headers=auth_headers(teacher.user_id),
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "recipient_id"
        assert await count_rows(session_factory, Message) == 0

    async def test_unlinked_parent_can_message(self, client, auth_headers, factory):
        admin = await factory.admin()
        parent = await factory.parent()
        headers = auth_headers(parent.id)

        response = await client.get("/api/v1/messages", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"] == []

        response = await client.get("/api/v1/profiles/directory", headers=headers)
        assert response.status_code == 200
        assert str(admin.id) in [p["id"] for p in response.json()["data"]]

        response = await client.post(
            "/api/v1/messages",
            json={"recipient_id": str(admin.id), "content": "Please link my child"},
            headers=headers,
        )
        assert response.status_code == 201

        response = await client.get("/api/v1/messages/unread-count", headers=auth_headers(admin.id))
        assert response.json()["data"]["messages"] == 1

    async def test_unknown_principal_still_not_provisioned(self, client, auth_headers):
        response = await client.get("/api/v1/messages", headers=auth_headers(uuid7()))
        assert response.status_code == 409


class TestAnnouncementsApi:
    """Test role-targeted announcements over HTTP."""

    async def test_parents_only_announcement(self, client, auth_headers, factory):
        admin = await factory.admin()
        student = await factory.student()
        parent = await factory.parent(student)

        response = await client.post(
            "/api/v1/announcements",
            json={"title": "Parents evening", "content": "Thursday 6pm", "target_roles": ["parent"]},
            headers=auth_headers(admin.id),
        )
        assert response.status_code == 201
        assert response.json()["data"]["target_roles"] == ["parent"]

        response = await client.get("/api/v1/announcements", headers=auth_headers(student.user_id))
        assert response.json()["data"] == []

        response = await client.get("/api/v1/announcements", headers=auth_headers(parent.id))
        assert [a["title"] for a in response.json()["data"]] == ["Parents evening"]

    async def test_unlinked_parent_reads_announcements(self, client, auth_headers, factory):
        admin = await factory.admin()
        await factory.announcement(admin.id, "Open day", roles=(Role.PARENT,))
        parent = await factory.parent()

        response = await client.get("/api/v1/announcements", headers=auth_headers(parent.id))

        assert response.status_code == 200
        assert [a["title"] for a in response.json()["data"]] == ["Open day"]

    async def test_teacher_without_profile_posts_announcement(self, client, auth_headers, factory):
        principal = await factory.principal(Role.TEACHER)

        response = await client.post(
            "/api/v1/announcements",
            json={"title": "Trip", "content": "Friday", "target_roles": ["student"]},
            headers=auth_headers(principal.id),
        )

        assert response.status_code == 201


class TestDashboardApi:
    """Test the dashboard read model over HTTP."""

    async def test_parent_switches_child(self, client, auth_headers, factory):
        teacher = await factory.teacher()
        await factory.assignment(teacher, "Grade 9 work", grade_level="9")
        child_10 = await factory.student("10", "A")
        child_9 = await factory.student("9", "B")
        parent = await factory.parent(child_10, child_9)
        headers = auth_headers(parent.id)

        response = await client.get("/api/v1/dashboard?tab=assignments", headers=headers)
        body = response.json()["data"]
        assert body["selected_child_id"] == str(child_10.id)
        assert body["assignments"] == []

        response = await client.put(
            "/api/v1/profiles/children/selection",
            json={"child_id": str(child_9.id)},
            headers=headers,
        )
        assert response.status_code == 200

        response = await client.get("/api/v1/dashboard?tab=assignments", headers=headers)
        body = response.json()["data"]
        assert body["selected_child_id"] == str(child_9.id)
        assert [a["title"] for a in body["assignments"]] == ["Grade 9 work"]

    async def test_selecting_unlinked_child(self, client, auth_headers, factory):
        child = await factory.student()
        stranger = await factory.student()
        parent = await factory.parent(child)

        response = await client.put(
            "/api/v1/profiles/children/selection",
            json={"child_id": str(stranger.id)},
            headers=auth_headers(parent.id),
        )
        assert response.status_code == 403

    async def test_unprovisioned_dashboard_is_empty_state(self, client, auth_headers, factory):
        principal = await factory.principal(Role.TEACHER)

        response = await client.get("/api/v1/dashboard", headers=auth_headers(principal.id))

        assert response.status_code == 200
        body = response.json()["data"]
        assert body["provisioned"] is False
        assert body["role"] == "teacher"

    async def test_student_overview(self, client, auth_headers, factory):
        teacher = await factory.teacher()
        await factory.assignment(teacher, "One")
        student = await factory.student()

        response = await client.get("/api/v1/dashboard", headers=auth_headers(student.user_id))

        overview = response.json()["data"]["overview"]
        assert overview["total_assignments"] == 1
        assert overview["pending_count"] == 1


class TestSessionApi:
    """Test sign-out teardown."""

    async def test_end_session_clears_cache(self, client, app, auth_headers, factory):
        student = await factory.student()
        headers = auth_headers(student.user_id)

        await client.get("/api/v1/profiles/me", headers=headers)
        assert app.state.sessions.get(student.user_id) is not None

        response = await client.post("/api/v1/session/end", headers=headers)
        assert response.status_code == 200
        assert app.state.sessions.get(student.user_id) is None

    async def test_cache_stays_within_capacity(self, client, app, auth_headers, factory):
        app.state.sessions.max_entries = 2
        students = [await factory.student() for _ in range(5)]

        for student in students:
            response = await client.get("/api/v1/profiles/me", headers=auth_headers(student.user_id))
            assert response.status_code == 200

        assert len(app.state.sessions) == 2
        assert app.state.sessions.get(students[-1].user_id) is not None
        assert app.state.sessions.get(students[0].user_id) is None
