"""Principal model with role-based access."""

from enum import Enum

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base import BaseModel


class Role(str, Enum):
    """Principal roles. A principal's role never changes after sign-up."""

    STUDENT = "student"
    PARENT = "parent"
    TEACHER = "teacher"
    ADMIN = "admin"


class Principal(BaseModel):
    """An authenticated user as known to the portal.

    The id is the subject issued by the external auth provider, so it is
    supplied by the caller at provisioning time rather than generated.
    """

    __tablename__ = "user_profiles"
    __table_args__ = (
        Index("idx_user_profiles_email", "email", unique=True),
        Index("idx_user_profiles_role", "role"),
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    @property
    def role_enum(self) -> Role:
        """Get the role as an enum member."""
        return Role(self.role)

    @property
    def is_parent(self) -> bool:
        """Check if principal is a parent."""
        return self.role == Role.PARENT.value
