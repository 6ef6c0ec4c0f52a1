"""SQLite implementations of repository interfaces.

All repositories use SQLAlchemy 2.0-style queries (select() + session.execute()).
Each repository takes a Session in its constructor.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from gitshelf.models.stats import StatsReport
from gitshelf.storage.repositories import StatsRepository
from gitshelf.storage.schema import StatsRow


class SqliteStatsRepository(StatsRepository):
    """SQLite implementation of the stats report cache.

    Reports are stored as pydantic JSON and keyed by their cache key,
    which already pins the tip oid, so rows never need invalidating.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _row(self, cache_key: str) -> StatsRow | None:
        stmt = select(StatsRow).where(StatsRow.cache_key == cache_key)
        return self._session.execute(stmt).scalar_one_or_none()

    def get(self, cache_key: str) -> StatsReport | None:
        row = self._row(cache_key)
        if row is None:
            return None
        return StatsReport.model_validate_json(row.payload_json)

    def save(self, report: StatsReport, repo_name: str) -> None:
        payload = report.model_dump_json()
        row = self._row(report.cache_key)
        if row is None:
            self._session.add(
                StatsRow(
                    cache_key=report.cache_key,
                    repo_name=repo_name,
                    ref=report.ref,
                    tip_oid=report.tip_oid,
                    payload_json=payload,
                    created_at=datetime.now(timezone.utc),
                )
            )
        else:
            row.repo_name = repo_name
            row.payload_json = payload
        self._session.flush()

    def delete_for_repo(self, repo_name: str) -> int:
        stmt = delete(StatsRow).where(StatsRow.repo_name == repo_name)
        result = self._session.execute(stmt)
        self._session.flush()
        return result.rowcount
