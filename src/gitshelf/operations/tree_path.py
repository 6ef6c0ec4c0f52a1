"""Tree path resolution.

Resolves a slash-separated path below a root tree to the tree or blob
entry it names. The walk is an explicit stack of pending trees, each
carrying the path prefix accumulated from the root, so no walk state
lives outside the loop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitshelf.exceptions import PathNotFoundError
from gitshelf.models.objects import TreeEntry

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from gitshelf.storage.adapter import ObjectGraphAdapter

logger = logging.getLogger(__name__)


def split_path(path: str) -> list[str]:
    """Split a slash path into segments, dropping empty ones.

    ``"src/main.go"``, ``"/src/main.go"`` and ``"src//main.go/"`` all give
    ``["src", "main.go"]``; ``""`` and ``"/"`` give ``[]``.
    """
    return [segment for segment in path.split("/") if segment]


def walk_postorder(
    adapter: ObjectGraphAdapter,
    root_tree_oid: str,
) -> Iterator[tuple[str, TreeEntry]]:
    """Yield ``(prefix, entry)`` for every entry below *root_tree_oid*.

    ``prefix`` is the accumulated path of the entry's parent tree with a
    trailing slash ("" at the root) and ``entry.path`` is the full path.
    A tree's own entry is yielded after all of its descendants. Each tree
    is expanded exactly once, even when the same tree oid appears at
    several paths.

    Raises:
        ObjectNotFoundError: If a tree on the way is missing.
    """
    # oid -> entries, so identical subtrees are read only once
    expanded: dict[str, list[TreeEntry]] = {}

    # Frames are (tree_oid, prefix, entry, children_pushed). ``entry`` is
    # None for the root, which has no entry of its own to yield.
    stack: list[tuple[str, str, TreeEntry | None, bool]] = [(root_tree_oid, "", None, False)]
    while stack:
        oid, prefix, entry, children_pushed = stack.pop()
        if children_pushed:
            if entry is not None:
                yield prefix, entry
            continue

        stack.append((oid, prefix, entry, True))
        child_prefix = f"{entry.path}/" if entry is not None else ""
        if oid not in expanded:
            expanded[oid] = adapter.entries(oid)
        children = [child.at(child_prefix) for child in expanded[oid]]

        # Reversed so children come off the stack in tree order
        for child in reversed(children):
            if child.is_tree:
                stack.append((child.oid, child_prefix, child, False))
            else:
                stack.append((child.oid, child_prefix, child, True))


def resolve_path(
    adapter: ObjectGraphAdapter,
    root_tree_oid: str,
    segments: Sequence[str],
) -> TreeEntry:
    """Resolve *segments* below *root_tree_oid* to a tree or blob entry.

    An empty sequence resolves to the root tree itself.

    Raises:
        PathNotFoundError: If no entry has exactly that path.
        ObjectNotFoundError: If a tree on the way is missing.
    """
    if not segments:
        return TreeEntry.root(root_tree_oid)

    target = "/".join(segments)
    for _prefix, entry in walk_postorder(adapter, root_tree_oid):
        if entry.path == target:
            logger.debug("Resolved path %s under %s -> %s %s", target, root_tree_oid[:12], entry.kind, entry.oid[:12])
            return entry
    raise PathNotFoundError(target, root_tree_oid)
