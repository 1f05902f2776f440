"""SchoolPortal: role-scoped data access for a school portal."""

__version__ = "1.0.0"
