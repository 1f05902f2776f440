"""Request context management using contextvars.

Holds the authenticated principal's id for the duration of one request. The
auth middleware sets it from the provider token and clears it afterwards.
"""

import contextvars
import uuid

_current_principal_id: contextvars.ContextVar[uuid.UUID | None] = contextvars.ContextVar(
    "current_principal_id", default=None
)
_current_email: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "current_email", default=None
)


def get_current_principal_id_or_none() -> uuid.UUID | None:
    """Get the current principal ID or None if not set."""
    return _current_principal_id.get()


def set_current_principal_id(pid: uuid.UUID | None) -> None:
    """Set the current principal ID.

    Args:
        pid: Principal UUID to set (or None to clear)
    """
    _current_principal_id.set(pid)


def get_current_email() -> str | None:
    """Get the email claim of the current token, if any."""
    return _current_email.get()


def set_current_email(email: str | None) -> None:
    """Set the email claim of the current token."""
    _current_email.set(email)


def clear_all_context() -> None:
    """Clear all context variables.

    Call this at the end of each request to prevent context leakage.
    """
    _current_principal_id.set(None)
    _current_email.set(None)
