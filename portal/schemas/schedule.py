"""Schedule schemas."""

import uuid
from datetime import time

from pydantic import Field, field_validator, model_validator

from portal.models.schedule import DayOfWeek
from portal.schemas.common import BaseSchema, blank_to_none


class ScheduleCreate(BaseSchema):
    """Schema for creating a schedule slot."""

    student_id: uuid.UUID
    teacher_id: uuid.UUID | None = None
    subject: str = Field(..., min_length=1, max_length=100)
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    room: str | None = Field(None, max_length=50)

    normalize_blanks = field_validator("room", mode="before")(blank_to_none)

    @model_validator(mode="after")
    def check_time_order(self) -> "ScheduleCreate":
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class ScheduleResponse(BaseSchema):
    """Schema for a schedule slot."""

    id: uuid.UUID
    student_id: uuid.UUID
    teacher_id: uuid.UUID | None = None
    subject: str
    day_of_week: str
    start_time: time
    end_time: time
    room: str | None = None
