"""SQLAlchemy ORM schema for the gitshelf stats cache.

Defines the tables of the optional persistent cache: stats_reports and
_shelf_meta.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all gitshelf ORM models."""

    pass


class StatsRow(Base):
    """A computed branch stats report. Keyed by the report's cache key."""

    __tablename__ = "stats_reports"

    cache_key: Mapped[str] = mapped_column(String(64), primary_key=True)
    repo_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    ref: Mapped[str] = mapped_column(String(255), nullable=False)
    tip_oid: Mapped[str] = mapped_column(String(64), nullable=False)
    payload_json: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class ShelfMetaRow(Base):
    """Key-value metadata for the cache database itself (e.g., schema version)."""

    __tablename__ = "_shelf_meta"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
