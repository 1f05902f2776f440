#!/usr/bin/env python3
"""
Development seed data script.

Creates test data for development:
- 1 admin
- 2 teachers
- 3 students (two in grade 10 section A, one in grade 9 section B)
- 2 parents, one with two children
- A weekly schedule, assignments, shared files and an announcement

Usage:
    python scripts/seed.py

Prints a one-hour access token for every principal, standing in for the
external auth provider.
"""

import asyncio
import sys
from datetime import date, time, timedelta
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from portal.database import async_session_factory, engine, init_db
from portal.models import (
    Announcement,
    AnnouncementTarget,
    Assignment,
    DayOfWeek,
    FileCategory,
    FileResource,
    ParentLink,
    Principal,
    Role,
    ScheduleEntry,
    StudentProfile,
    TeacherProfile,
)
from portal.models.announcement import DEFAULT_TARGET_ROLES
from portal.utils.security import create_access_token


async def seed_database():
    """Seed the database with test data."""
    print("\n" + "=" * 50)
    print("SchoolPortal - Seeding Development Data")
    print("=" * 50 + "\n")

    await init_db()

    async with async_session_factory() as session:
        result = await session.execute(
            select(Principal).where(Principal.email == "admin@school.test")
        )
        if result.scalar_one_or_none():
            print("Seed data already exists (admin@school.test found). Aborting.")
            return False

        print("Creating principals...")
        admin = Principal(email="admin@school.test", full_name="Sarah Johnson", role=Role.ADMIN.value)
        teacher1 = Principal(email="jane.smith@school.test", full_name="Jane Smith", role=Role.TEACHER.value)
        teacher2 = Principal(email="mary.williams@school.test", full_name="Mary Williams", role=Role.TEACHER.value)
        student1 = Principal(email="tom.brown@school.test", full_name="Tom Brown", role=Role.STUDENT.value)
        student2 = Principal(email="amy.brown@school.test", full_name="Amy Brown", role=Role.STUDENT.value)
        student3 = Principal(email="leo.davis@school.test", full_name="Leo Davis", role=Role.STUDENT.value)
        parent1 = Principal(email="john.brown@email.test", full_name="John Brown", role=Role.PARENT.value)
        parent2 = Principal(email="lisa.davis@email.test", full_name="Lisa Davis", role=Role.PARENT.value)
        principals = [admin, teacher1, teacher2, student1, student2, student3, parent1, parent2]
        session.add_all(principals)
        await session.flush()

        print("Creating teacher and student profiles...")
        math_teacher = TeacherProfile(user_id=teacher1.id, subject="Mathematics", department="Sciences")
        english_teacher = TeacherProfile(user_id=teacher2.id, subject="English", department="Languages")
        tom = StudentProfile(user_id=student1.id, grade_level="10", section="A", student_id="S-1001")
        amy = StudentProfile(user_id=student2.id, grade_level="10", section="A", student_id="S-1002")
        leo = StudentProfile(user_id=student3.id, grade_level="9", section="B", student_id="S-0901")
        session.add_all([math_teacher, english_teacher, tom, amy, leo])
        await session.flush()

        print("Linking parents...")
        session.add_all([
            ParentLink(parent_id=parent1.id, student_id=tom.id),
            ParentLink(parent_id=parent1.id, student_id=amy.id),
            ParentLink(parent_id=parent2.id, student_id=leo.id),
        ])

        print("Creating schedules...")
        for student in (tom, amy, leo):
            for day in DayOfWeek:
                session.add_all([
                    ScheduleEntry(
                        student_id=student.id,
                        teacher_id=math_teacher.id,
                        subject="Mathematics",
                        day_of_week=day.value,
                        start_time=time(8, 0),
                        end_time=time(9, 0),
                        room="Room 101",
                    ),
                    ScheduleEntry(
                        student_id=student.id,
                        teacher_id=english_teacher.id,
                        subject="English",
                        day_of_week=day.value,
                        start_time=time(9, 15),
                        end_time=time(10, 15),
                        room="Room 204",
                    ),
                ])

        print("Creating assignments...")
        today = date.today()
        session.add_all([
            Assignment(
                teacher_id=math_teacher.id,
                title="Quadratic equations",
                description="Exercises 4.1 to 4.6",
                subject="Mathematics",
                due_date=today + timedelta(days=3),
                grade_level="10",
                section="A",
            ),
            Assignment(
                teacher_id=math_teacher.id,
                title="Grade 10 revision sheet",
                subject="Mathematics",
                due_date=today + timedelta(days=7),
                grade_level="10",
            ),
            Assignment(
                teacher_id=english_teacher.id,
                title="Reading journal",
                description="One entry per chapter",
                subject="English",
            ),
        ])

        print("Sharing files...")
        session.add_all([
            FileResource(
                uploaded_by=teacher1.id,
                file_name="algebra-notes.pdf",
                file_url="https://files.school.test/algebra-notes.pdf",
                file_type="application/pdf",
                category=FileCategory.STUDY_MATERIAL.value,
                subject="Mathematics",
                target_grade="10",
            ),
            FileResource(
                uploaded_by=teacher2.id,
                file_name="reading-list.pdf",
                file_url="https://files.school.test/reading-list.pdf",
                file_type="application/pdf",
                category=FileCategory.RESOURCE.value,
                subject="English",
            ),
        ])

        print("Posting announcement...")
        session.add(
            Announcement(
                author_id=admin.id,
                title="Welcome back",
                content="Term starts on Monday. Timetables are on the dashboard.",
                targets=[AnnouncementTarget(role=role.value) for role in DEFAULT_TARGET_ROLES],
            )
        )

        await session.commit()

        print("\n" + "=" * 50)
        print("Seed Data Created Successfully!")
        print("=" * 50)
        print("\nAccess tokens (valid for one hour):")
        for principal in principals:
            token = create_access_token(principal.id, principal.email)
            print(f"  {principal.role:<8} {principal.email}")
            print(f"           {token}")
        print("=" * 50 + "\n")

        return True


async def main():
    """Main entry point."""
    try:
        success = await seed_database()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nAborted by user.")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
