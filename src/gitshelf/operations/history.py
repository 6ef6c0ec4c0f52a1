"""History operations: windowed commit logs and page lookahead.

``walk_history`` is the single primitive: a bounded slice of the commit
walk from a ref's tip. ``HistoryPaginator`` builds log pages on top of
it, including the "is there a next page" check.

The check reuses ``walk_history`` with the next page's
offset instead of keeping a separate count index, so deciding that a
next page exists costs a second walk over the first ``offset + limit``
commits. Walks are expected to be shallow relative to request latency;
if that stops being true, a total-count index keyed by the tip oid can
replace the check without changing what callers observe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import islice
from typing import TYPE_CHECKING

from gitshelf.engine.hashing import cache_key
from gitshelf.models.config import DEFAULT_PAGE_SIZE

if TYPE_CHECKING:
    from gitshelf.handle import RepoHandle
    from gitshelf.models.objects import CommitInfo
    from gitshelf.storage.adapter import ObjectGraphAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageWindow:
    """A {ref, skip, limit} request for a slice of history."""

    ref: str
    skip: int = 0
    limit: int | None = None

    def __post_init__(self) -> None:
        if self.skip < 0:
            raise ValueError(f"skip must be >= 0, got {self.skip}")
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")

    @property
    def stop(self) -> int | None:
        return None if self.limit is None else self.skip + self.limit

    def next(self) -> PageWindow:
        """The window immediately after this one (same size)."""
        if self.limit is None:
            raise ValueError("an unbounded window has no next window")
        return PageWindow(self.ref, self.skip + self.limit, self.limit)


@dataclass(frozen=True)
class LogPage:
    """One page of a commit log, as rendered by the log view.

    Attributes:
        ref: The ref the log walks from.
        page: 1-based page number.
        page_size: Commits per page.
        commits: Commits on this page, most recent first.
        has_next: Whether the following page holds any commits.
        has_previous: Whether the preceding page holds any commits.
        cache_key: Validator for this page, or None when the page is empty.
    """

    ref: str
    page: int
    page_size: int
    commits: list[CommitInfo] = field(default_factory=list)
    has_next: bool = False
    has_previous: bool = False
    cache_key: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.commits

    def __str__(self) -> str:
        return f"{self.ref} page {self.page} | {len(self.commits)} commits | next={self.has_next}"


def walk_history(
    adapter: ObjectGraphAdapter,
    ref: str,
    limit: int | None = None,
    skip: int = 0,
) -> list[CommitInfo]:
    """Return up to *limit* commits reachable from *ref*, skipping *skip*.

    Commits come most recent first, in the adapter's walk order. A
    window that starts past the end of history is an empty list, not an
    error.

    Raises:
        InvalidRefError: If *ref* does not resolve.
        ObjectNotFoundError: If *ref* names no commit or the walk hits
            a missing object.
        ValueError: If *skip* or *limit* is negative.
    """
    window = PageWindow(ref, skip, limit)
    tip = adapter.resolve_ref(ref)
    history = adapter.walk(tip)
    if window.limit == 0:
        return []
    commits = list(islice(history, window.skip, window.stop))
    logger.debug(
        "History %s (tip %s) skip=%d limit=%s -> %d commits",
        ref, tip[:12], skip, limit, len(commits),
    )
    return commits


class HistoryPaginator:
    """Fixed-size pages over a ref's history.

    The same page size is used for the page itself and for the
    lookahead check.
    """

    def __init__(self, handle: RepoHandle, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._handle = handle
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    def commits(self, ref: str, limit: int | None = None, skip: int = 0) -> list[CommitInfo]:
        return self._handle.commits(ref, limit, skip)

    def has_more(self, ref: str, page_size: int, offset: int) -> bool:
        """Whether the *page_size* window at *offset* holds any commit."""
        return bool(self.commits(ref, page_size, offset))

    def page(self, ref: str, page: int = 1) -> LogPage:
        """Build the 1-based *page* of *ref*'s log.

        Raises:
            ValueError: If *page* is less than 1.
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        offset = (page - 1) * self._page_size
        commits = self.commits(ref, self._page_size, offset)
        has_next = self.has_more(ref, self._page_size, page * self._page_size)
        has_previous = page > 1 and self.has_more(ref, self._page_size, offset - self._page_size)

        key = None
        if commits:
            if page == 1:
                key = cache_key(commits[0].oid, "log", ref)
            else:
                key = cache_key(commits[0].oid, "page", page, "ref", ref)
        return LogPage(
            ref=ref,
            page=page,
            page_size=self._page_size,
            commits=commits,
            has_next=has_next,
            has_previous=has_previous,
            cache_key=key,
        )
