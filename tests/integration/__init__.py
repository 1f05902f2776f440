"""Integration tests against an in-memory database."""
