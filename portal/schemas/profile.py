"""Principal and profile schemas."""

import uuid

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from portal.models.user import Role
from portal.schemas.common import BaseSchema, blank_to_none


class ProvisionRequest(BaseSchema):
    """Profile data captured at sign-up, after the auth provider created the account."""

    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr | None = None  # Defaults to the token's email claim
    role: Role

    # Student fields
    grade_level: str | None = Field(None, max_length=20)
    section: str | None = Field(None, max_length=20)
    student_id: str | None = Field(None, max_length=50)

    # Teacher fields
    subject: str | None = Field(None, max_length=100)
    department: str | None = Field(None, max_length=100)

    normalize_blanks = field_validator(
        "grade_level", "section", "student_id", "subject", "department", mode="before"
    )(blank_to_none)

    @model_validator(mode="after")
    def check_role_fields(self) -> "ProvisionRequest":
        if self.role == Role.ADMIN:
            raise ValueError("Admin accounts cannot be self-provisioned")
        if self.role == Role.STUDENT:
            missing = [
                name for name in ("grade_level", "section", "student_id")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(f"Students must provide: {', '.join(missing)}")
        return self


class PrincipalResponse(BaseSchema):
    """Basic principal information."""

    id: uuid.UUID
    email: str
    full_name: str
    role: str


class DirectoryEntry(BaseSchema):
    """A principal that can receive messages."""

    id: uuid.UUID
    full_name: str
    role: str
    email: str


class StudentProfileResponse(BaseSchema):
    """Student profile as shown to the student or a linked parent."""

    id: uuid.UUID
    grade_level: str
    section: str
    student_id: str
    full_name: str | None = None


class TeacherProfileResponse(BaseSchema):
    """Teacher profile."""

    id: uuid.UUID
    subject: str | None = None
    department: str | None = None


class IdentityResponse(BaseModel):
    """The resolved identity and what it may do."""

    principal: PrincipalResponse
    student: StudentProfileResponse | None = None
    teacher: TeacherProfileResponse | None = None
    children: list[StudentProfileResponse] = []
    selected_child_id: uuid.UUID | None = None
    capabilities: list[str] = []


class ParentLinkCreate(BaseModel):
    """Request to link a parent to a student."""

    parent_id: uuid.UUID
    student_id: uuid.UUID


class ParentLinkResponse(BaseSchema):
    """A parent-student link."""

    id: uuid.UUID
    parent_id: uuid.UUID
    student_id: uuid.UUID


class ChildSelectionRequest(BaseModel):
    """Switch the child a parent is viewing."""

    child_id: uuid.UUID
