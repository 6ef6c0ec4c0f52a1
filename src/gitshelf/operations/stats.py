"""Branch statistics.

Aggregates commit count and per-author activity over everything
reachable from a ref. The report's cache key derives from the tip oid,
so a stored report never goes stale for that tip.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from gitshelf.engine.hashing import cache_key
from gitshelf.models.stats import AuthorCount, StatsReport

if TYPE_CHECKING:
    from gitshelf.handle import RepoHandle
    from gitshelf.models.objects import Signature
    from gitshelf.storage.repositories import StatsRepository

logger = logging.getLogger(__name__)


def stats_key(tip_oid: str, ref: str) -> str:
    """Cache key of the stats report for *ref* at *tip_oid*."""
    return cache_key(tip_oid, "stats", ref)


def rank_authors(counts: Counter[str], names: dict[str, Signature]) -> list[AuthorCount]:
    """Order authors by commit count descending, then identity ascending."""
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        AuthorCount(
            identity=identity,
            name=names[identity].name,
            email=names[identity].email,
            commits=count,
        )
        for identity, count in ranked
    ]


def compute_stats(handle: RepoHandle, ref: str, tip: str | None = None) -> StatsReport:
    """Walk every commit reachable from *ref* once and aggregate it.

    *ref* is resolved once; pass *tip* to aggregate an already resolved
    tip so the report, its key and its counts all describe that commit.

    Raises:
        InvalidRefError: If *ref* does not resolve.
        ObjectNotFoundError: If *ref* names no commit or the walk hits a
            missing object.
    """
    if tip is None:
        tip = handle.resolve(ref)
    counts: Counter[str] = Counter()
    names: dict[str, Signature] = {}
    seen: set[str] = set()
    merges = 0
    first = last = None

    for commit in handle.adapter.walk(tip):
        if commit.oid in seen:
            continue
        seen.add(commit.oid)

        author = commit.author
        counts[author.identity] += 1
        names.setdefault(author.identity, author)
        if commit.is_merge:
            merges += 1
        when = commit.committer.time
        if first is None or when < first:
            first = when
        if last is None or when > last:
            last = when

    logger.debug("Stats for %s @ %s: %d commits, %d authors", ref, tip[:12], len(seen), len(counts))
    return StatsReport(
        ref=ref,
        tip_oid=tip,
        commit_count=len(seen),
        authors=rank_authors(counts, names),
        merge_count=merges,
        first_commit_at=first,
        last_commit_at=last,
        cache_key=stats_key(tip, ref),
    )


class BranchStats:
    """Branch statistics with an optional persistent report cache.

    Args:
        stats_repo: Where computed reports are stored and looked up.
            None computes every report from scratch.
    """

    def __init__(self, stats_repo: StatsRepository | None = None) -> None:
        self._stats_repo = stats_repo

    def compute(self, handle: RepoHandle, ref: str, repo_name: str | None = None) -> StatsReport:
        if self._stats_repo is None:
            return compute_stats(handle, ref)

        tip = handle.resolve(ref)
        key = stats_key(tip, ref)
        cached = self._stats_repo.get(key)
        if cached is not None:
            logger.debug("Stats cache hit: %s", key[:12])
            return cached

        logger.debug("Stats cache miss: %s", key[:12])
        report = compute_stats(handle, ref, tip)
        self._stats_repo.save(report, repo_name or handle.name)
        return report
