"""Configuration model for gitshelf.

ShelfConfig holds process-level settings: where repositories live,
the log page size, and the optional stats cache database.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator

DEFAULT_PAGE_SIZE = 10


class ShelfConfig(BaseModel):
    """Process-level configuration."""

    repos_root: str = "."
    page_size: int = DEFAULT_PAGE_SIZE
    stats_db_path: Optional[str] = None  # None = no persistent stats cache
    default_branch: str = "master"
    include_hidden: bool = False

    @field_validator("page_size")
    @classmethod
    def _check_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("page_size must be at least 1")
        return v
