"""Unit tests (no database)."""
