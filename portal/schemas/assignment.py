"""Assignment and submission schemas."""

import uuid
from datetime import date, datetime

from pydantic import Field, field_validator, model_validator

from portal.schemas.common import BaseSchema, blank_to_none


class AssignmentCreate(BaseSchema):
    """Schema for creating an assignment.

    Leaving grade_level or section empty targets every grade or section.
    """

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    subject: str | None = Field(None, max_length=100)
    due_date: date | None = None
    grade_level: str | None = Field(None, max_length=20)
    section: str | None = Field(None, max_length=20)
    teacher_id: uuid.UUID | None = None  # Defaults to the caller's teacher profile

    normalize_blanks = field_validator(
        "description", "subject", "due_date", "grade_level", "section", mode="before"
    )(blank_to_none)


class SubmissionResponse(BaseSchema):
    """Schema for a submission."""

    id: uuid.UUID
    assignment_id: uuid.UUID
    student_id: uuid.UUID
    submission_text: str | None = None
    file_url: str | None = None
    grade: float | None = None
    submitted_at: datetime
    graded_at: datetime | None = None


class AssignmentResponse(BaseSchema):
    """Schema for an assignment."""

    id: uuid.UUID
    teacher_id: uuid.UUID
    title: str
    description: str | None = None
    subject: str | None = None
    due_date: date | None = None
    grade_level: str | None = None
    section: str | None = None
    created_at: datetime

    # Filled in for student views
    submission: SubmissionResponse | None = None


class SubmissionCreate(BaseSchema):
    """Schema for submitting work on an assignment."""

    submission_text: str | None = None
    file_url: str | None = Field(None, max_length=1000)
    student_id: uuid.UUID | None = None  # Defaults to the caller's student profile

    normalize_blanks = field_validator("submission_text", "file_url", mode="before")(blank_to_none)

    @model_validator(mode="after")
    def check_content(self) -> "SubmissionCreate":
        if self.submission_text is None and self.file_url is None:
            raise ValueError("A submission needs text or a file URL")
        return self
