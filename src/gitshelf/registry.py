"""Repository registry.

Maps URL-safe repository names to repositories on disk. Discovery scans
one root directory; lookups are exact and case-sensitive.

The name index is replaced wholesale on every write (under a lock), so
readers always see a complete dict without taking the lock. When two
directories sanitize to the same name, the first one registered wins.

A process-wide registry is available through init_registry() and
get_registry(). It is never created implicitly.
"""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from gitshelf.exceptions import RepositoryNotFoundError, ShelfError
from gitshelf.handle import RepoHandle
from gitshelf.models.objects import RepositorySummary
from gitshelf.storage.dulwich_graph import DulwichGraph

if TYPE_CHECKING:
    from gitshelf.models.config import ShelfConfig
    from gitshelf.storage.adapter import ObjectGraphAdapter

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_name(name: str) -> str:
    """Turn a directory name into a URL-safe repository name.

    Case is preserved. A trailing ``.git`` is removed, runs of characters
    outside ``[A-Za-z0-9._-]`` become a single ``-`` and leading or
    trailing dashes are stripped.

    >>> sanitize_name("My Project.git")
    'My-Project'
    """
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return _UNSAFE.sub("-", name).strip("-")


class RepoRegistry:
    """Index of available repositories by sanitized name.

    Args:
        opener: Opens a repository path as an object-graph adapter.
            Defaults to dulwich.
    """

    def __init__(
        self,
        opener: Callable[[str], ObjectGraphAdapter] = DulwichGraph.open,
    ) -> None:
        self._opener = opener
        self._lock = threading.Lock()
        self._index: dict[str, RepositorySummary] = {}

    def discover(self, root: str | Path, include_hidden: bool = False) -> list[RepositorySummary]:
        """Register every repository directly below *root*.

        Directories that are not repositories are skipped. Returns the
        summaries that were newly registered.
        """
        root_path = Path(root)
        if not root_path.is_dir():
            raise ShelfError(f"Repository root is not a directory: {root_path}")

        added: list[RepositorySummary] = []
        for child in sorted(root_path.iterdir()):
            if not child.is_dir():
                continue
            if child.name.startswith(".") and not include_hidden:
                continue
            if not DulwichGraph.is_repository(child):
                logger.warning("Skipping %s: not a git repository", child)
                continue
            summary = self.register(child.name, child)
            if summary is not None:
                added.append(summary)

        logger.debug("Discovered %d repositories under %s", len(added), root_path)
        return added

    def register(self, name: str, path: str | Path) -> RepositorySummary | None:
        """Register the repository at *path* under ``sanitize_name(name)``.

        Returns the new summary, or None when the name was already taken.

        Raises:
            ShelfError: If the name sanitizes to nothing.
            RepositoryNotFoundError: If *path* is not a repository.
        """
        safe = sanitize_name(name)
        if not safe:
            raise ShelfError(f"Repository name {name!r} has no URL-safe characters")
        if safe in self._index:
            return None

        adapter = self._opener(str(path))
        try:
            summary = RepositorySummary(
                name=safe,
                path=str(path),
                description=getattr(adapter, "description", None),
                is_bare=bool(getattr(adapter, "is_bare", False)),
            )
        finally:
            adapter.close()

        with self._lock:
            if safe in self._index:
                logger.debug("Repository name %s already registered, keeping first", safe)
                return None
            index = dict(self._index)
            index[safe] = summary
            self._index = index
        logger.debug("Registered repository %s -> %s", safe, path)
        return summary

    def list(self) -> list[RepositorySummary]:
        """All registered repositories, ordered by name."""
        index = self._index
        return [index[name] for name in sorted(index)]

    def get(self, name: str) -> RepositorySummary:
        """Summary of the repository registered as *name*."""
        try:
            return self._index[name]
        except KeyError:
            raise RepositoryNotFoundError(name) from None

    def find(self, name: str) -> RepoHandle:
        """Open the repository registered as *name*.

        The returned handle owns an open adapter; close it (or use it as
        a context manager) when done.

        Raises:
            RepositoryNotFoundError: If no repository has exactly that name.
        """
        summary = self.get(name)
        return RepoHandle(summary, self._opener(summary.path))

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"RepoRegistry(repos={len(self)})"


_registry: RepoRegistry | None = None
_registry_lock = threading.Lock()


def init_registry(config: ShelfConfig) -> RepoRegistry:
    """Build the process-wide registry from *config* and install it.

    This is the only place the process-wide registry is created.
    Calling it again rescans and replaces the previous registry.
    """
    global _registry
    registry = RepoRegistry()
    registry.discover(config.repos_root, include_hidden=config.include_hidden)
    with _registry_lock:
        _registry = registry
    return registry


def get_registry() -> RepoRegistry:
    """The process-wide registry.

    Raises:
        ShelfError: If init_registry() has not been called.
    """
    registry = _registry
    if registry is None:
        raise ShelfError("Repository registry is not initialized; call init_registry() first")
    return registry


def reset_registry() -> None:
    """Forget the process-wide registry."""
    global _registry
    with _registry_lock:
        _registry = None
