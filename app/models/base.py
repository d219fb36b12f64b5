"""Shared metadata for all tables."""

from sqlalchemy import MetaData

# Metadata for all tables, so foreign keys resolve across modules
metadata = MetaData()
