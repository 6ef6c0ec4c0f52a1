"""Branch statistics models.

StatsReport is what BranchStats returns for a ref. It round-trips
through JSON so the SQLite stats cache can store it verbatim.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class AuthorCount(BaseModel):
    """Commit count for one author identity."""

    identity: str
    name: str
    email: str
    commits: int


class StatsReport(BaseModel):
    """Per-branch metrics.

    ``authors`` is ranked by commit count (descending), ties broken by
    identity (ascending).
    """

    ref: str
    tip_oid: str
    commit_count: int
    authors: list[AuthorCount] = []
    merge_count: int = 0
    first_commit_at: datetime
    last_commit_at: datetime
    cache_key: str

    @property
    def author_count(self) -> int:
        return len(self.authors)

    def top_authors(self, n: int = 5) -> list[AuthorCount]:
        return self.authors[:n]

    def __str__(self) -> str:
        return (
            f"{self.ref} @ {self.tip_oid[:8]} | {self.commit_count} commits | "
            f"{self.author_count} authors"
        )
