"""Abstract repository interfaces for the stats cache.

No SQLAlchemy imports here -- pure abstract contracts.

Concrete implementations are in sqlite.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitshelf.models.stats import StatsReport


class StatsRepository(ABC):
    """Abstract interface for stats report storage."""

    @abstractmethod
    def get(self, cache_key: str) -> StatsReport | None:
        """Get a report by its cache key. Returns None if not stored."""
        ...

    @abstractmethod
    def save(self, report: StatsReport, repo_name: str) -> None:
        """Store a report. Saving an already stored key replaces it."""
        ...

    @abstractmethod
    def delete_for_repo(self, repo_name: str) -> int:
        """Drop every report of a repository. Returns the number removed."""
        ...
