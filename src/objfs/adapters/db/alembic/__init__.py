"""Alembic migration scripts for the objfs SQL object store."""
