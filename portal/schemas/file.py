"""File resource schemas."""

import uuid
from datetime import datetime

from pydantic import Field, field_validator

from portal.models.file_resource import FileCategory
from portal.schemas.common import BaseSchema, blank_to_none


class FileCreate(BaseSchema):
    """Schema for sharing a file. The URL is stored as given."""

    file_name: str = Field(..., min_length=1, max_length=255)
    file_url: str = Field(..., min_length=1, max_length=1000)
    file_type: str | None = Field(None, max_length=100)
    category: FileCategory = FileCategory.STUDY_MATERIAL
    subject: str | None = Field(None, max_length=100)
    target_grade: str | None = Field(None, max_length=20)
    target_section: str | None = Field(None, max_length=20)
    uploaded_by: uuid.UUID | None = None  # Defaults to the caller

    normalize_blanks = field_validator(
        "file_type", "subject", "target_grade", "target_section", mode="before"
    )(blank_to_none)


class FileResponse(BaseSchema):
    """Schema for a shared file."""

    id: uuid.UUID
    uploaded_by: uuid.UUID
    file_name: str
    file_url: str
    file_type: str | None = None
    category: str
    subject: str | None = None
    target_grade: str | None = None
    target_section: str | None = None
    created_at: datetime
    uploader_name: str | None = None
