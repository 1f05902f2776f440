"""Common Pydantic schemas used across the application."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response envelope.

    All JSON API responses use this consistent envelope structure.
    """

    status: str = "success"
    data: T | None = None
    message: str | None = None
    errors: list[dict[str, Any]] | None = None


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def blank_to_none(value: Any) -> Any:
    """Turn blank form input into None.

    Broadcast-scope fields use None as the "applies to all" wildcard, so a
    form left empty must arrive as None rather than as an empty string.
    """
    if isinstance(value, str) and not value.strip():
        return None
    return value
