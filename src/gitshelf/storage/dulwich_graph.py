"""dulwich implementation of the object-graph adapter.

Reads commits, trees, blobs and refs straight from a git repository on
disk (bare or with a working tree) through dulwich. Object decoding and
pack access stay inside dulwich; this module only maps dulwich objects
to gitshelf models and dulwich lookup failures to gitshelf exceptions.
"""

from __future__ import annotations

import logging
import re
import stat
from datetime import datetime, timedelta, timezone
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING

from dulwich.errors import NotGitRepository
from dulwich.objects import S_ISGITLINK, Blob, Commit, Tag, Tree
from dulwich.patch import is_binary, write_tree_diff
from dulwich.repo import Repo
from dulwich.walk import Walker

from gitshelf.exceptions import (
    InvalidRefError,
    ObjectNotFoundError,
    RepositoryNotFoundError,
    TagNotFoundError,
)
from gitshelf.models.objects import BlobInfo, CommitInfo, EntryKind, Signature, TreeEntry
from gitshelf.storage.adapter import ObjectGraphAdapter

if TYPE_CHECKING:
    from collections.abc import Iterator

    from dulwich.objects import ShaFile

logger = logging.getLogger(__name__)

_FULL_OID = re.compile(r"[0-9a-fA-F]{40}")
_HEX = re.compile(r"[0-9a-fA-F]+")

# Abbreviated object ids shorter than this are not looked up
MIN_ABBREV_LENGTH = 4

HEADS_PREFIX = b"refs/heads/"
TAGS_PREFIX = b"refs/tags/"

# Placeholder git and dulwich write into a fresh description file
_DEFAULT_DESCRIPTION = b"Unnamed repository"


def parse_identity(raw: bytes) -> tuple[str, str]:
    """Split a raw ``Name <email>`` identity into (name, email)."""
    text = raw.decode("utf-8", errors="replace")
    name, sep, rest = text.partition(" <")
    if not sep:
        return text.strip(), ""
    return name.strip(), rest.rstrip().rstrip(">").strip()


def _signature(raw: bytes, timestamp: int, tz_offset: int) -> Signature:
    name, email = parse_identity(raw)
    tz = timezone(timedelta(seconds=tz_offset))
    return Signature(name=name, email=email, time=datetime.fromtimestamp(timestamp, tz=tz))


def _decode_message(commit: Commit) -> str:
    encoding = (commit.encoding or b"utf-8").decode("ascii", errors="replace")
    try:
        return commit.message.decode(encoding, errors="replace")
    except LookupError:
        return commit.message.decode("utf-8", errors="replace")


def to_commit_info(commit: Commit) -> CommitInfo:
    """Map a dulwich Commit to a CommitInfo."""
    return CommitInfo(
        oid=commit.id.decode("ascii"),
        parent_oids=[p.decode("ascii") for p in commit.parents],
        tree_oid=commit.tree.decode("ascii"),
        author=_signature(commit.author, commit.author_time, commit.author_timezone),
        committer=_signature(commit.committer, commit.commit_time, commit.commit_timezone),
        message=_decode_message(commit),
    )


class DulwichGraph(ObjectGraphAdapter):
    """Object-graph adapter over a dulwich ``Repo``.

    One instance wraps one open repository. Instances are cheap to open
    and are meant to live for a single request.
    """

    def __init__(self, repo: Repo) -> None:
        self._repo = repo

    @classmethod
    def open(cls, path: str | Path) -> DulwichGraph:
        """Open the repository at *path*.

        Raises:
            RepositoryNotFoundError: If *path* is not a git repository.
        """
        try:
            repo = Repo(str(path))
        except NotGitRepository:
            raise RepositoryNotFoundError(str(path)) from None
        return cls(repo)

    @staticmethod
    def is_repository(path: str | Path) -> bool:
        """Check whether dulwich can open *path* as a repository."""
        try:
            repo = Repo(str(path))
        except NotGitRepository:
            return False
        repo.close()
        return True

    # ------------------------------------------------------------------
    # Repository metadata
    # ------------------------------------------------------------------

    @property
    def is_bare(self) -> bool:
        return bool(self._repo.bare)

    @property
    def description(self) -> str | None:
        """Contents of the description file, unless it is git's placeholder."""
        raw = self._repo.get_description()
        if not raw or raw.startswith(_DEFAULT_DESCRIPTION):
            return None
        return raw.decode("utf-8", errors="replace").strip() or None

    # ------------------------------------------------------------------
    # Refs
    # ------------------------------------------------------------------

    def list_branches(self) -> list[str]:
        names = self._repo.refs.as_dict(HEADS_PREFIX.rstrip(b"/"))
        return sorted(name.decode("utf-8", errors="replace") for name in names)

    def list_tags(self) -> list[str]:
        names = self._repo.refs.as_dict(TAGS_PREFIX.rstrip(b"/"))
        return sorted(name.decode("utf-8", errors="replace") for name in names)

    def resolve_ref(self, ref: str) -> str:
        """Resolve *ref* to a commit oid.

        Resolution order:
        1. Full 40-character object id (returned as-is; existence is
           checked when the commit is read)
        2. Branch name (refs/heads/{ref})
        3. Tag name (refs/tags/{ref}), peeled to its target
        4. Full ref name (HEAD, refs/...)
        5. Unique abbreviated object id (min 4 hex chars)
        """
        if not ref:
            raise InvalidRefError(ref, "empty ref")
        if _FULL_OID.fullmatch(ref):
            return ref.lower()

        raw = ref.encode("utf-8")
        candidates = [HEADS_PREFIX + raw, TAGS_PREFIX + raw]
        if raw == b"HEAD" or raw.startswith(b"refs/"):
            candidates.append(raw)
        for candidate in candidates:
            try:
                sha = self._repo.refs[candidate]
            except KeyError:
                continue
            oid = self._peel(sha).id.decode("ascii")
            logger.debug("Resolved %s via %s -> %s", ref, candidate.decode("utf-8", "replace"), oid[:12])
            return oid

        if len(ref) >= MIN_ABBREV_LENGTH and _HEX.fullmatch(ref):
            return self._resolve_prefix(ref)

        raise InvalidRefError(ref)

    def resolve_tag(self, tag_name: str) -> str:
        try:
            sha = self._repo.refs[TAGS_PREFIX + tag_name.encode("utf-8")]
        except KeyError:
            raise TagNotFoundError(tag_name) from None
        return self._peel(sha).id.decode("ascii")

    def _resolve_prefix(self, prefix: str) -> str:
        needle = prefix.lower().encode("ascii")
        matches = [sha for sha in self._repo.object_store if sha.startswith(needle)]
        if not matches:
            raise InvalidRefError(prefix)
        if len(matches) > 1:
            raise InvalidRefError(prefix, f"ambiguous prefix, {len(matches)} matches")
        return matches[0].decode("ascii")

    def _peel(self, sha: bytes) -> ShaFile:
        """Follow annotated tags until a non-tag object is reached."""
        obj = self._get(sha)
        while isinstance(obj, Tag):
            _, target = obj.object
            obj = self._get(target)
        return obj

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def _get(self, sha: bytes, expected: str | None = None) -> ShaFile:
        try:
            return self._repo.object_store[sha]
        except KeyError:
            raise ObjectNotFoundError(sha.decode("ascii", errors="replace"), expected) from None

    def read_commit(self, oid: str) -> CommitInfo:
        if not _FULL_OID.fullmatch(oid):
            raise ObjectNotFoundError(oid, "commit")
        obj = self._get(oid.lower().encode("ascii"), "commit")
        if not isinstance(obj, Commit):
            raise ObjectNotFoundError(oid, "commit")
        return to_commit_info(obj)

    def parents(self, commit: CommitInfo) -> list[CommitInfo]:
        return [self.read_commit(oid) for oid in commit.parent_oids]

    def root_tree(self, commit: CommitInfo) -> str:
        tree_sha = commit.tree_oid.encode("ascii")
        if tree_sha not in self._repo.object_store:
            raise ObjectNotFoundError(commit.tree_oid, "tree")
        return commit.tree_oid

    def entries(self, tree_oid: str) -> list[TreeEntry]:
        obj = self._get(tree_oid.encode("ascii"), "tree")
        if not isinstance(obj, Tree):
            raise ObjectNotFoundError(tree_oid, "tree")

        result: list[TreeEntry] = []
        for item in obj.iteritems():
            name = item.path.decode("utf-8", errors="replace")
            if S_ISGITLINK(item.mode):
                # Submodule commits live in another repository
                logger.debug("Skipping submodule entry %s in tree %s", name, tree_oid[:12])
                continue
            kind = EntryKind.TREE if stat.S_ISDIR(item.mode) else EntryKind.BLOB
            result.append(
                TreeEntry(
                    name=name,
                    kind=kind,
                    oid=item.sha.decode("ascii"),
                    mode=item.mode,
                    path=name,
                )
            )
        return result

    def read_blob(self, oid: str) -> BlobInfo:
        obj = self._get(oid.encode("ascii"), "blob")
        if not isinstance(obj, Blob):
            raise ObjectNotFoundError(oid, "blob")
        data = obj.data
        return BlobInfo(oid=oid, data=data, is_binary=is_binary(data))

    def diff(self, old: CommitInfo | None, new: CommitInfo) -> str:
        out = BytesIO()
        old_tree = old.tree_oid.encode("ascii") if old is not None else None
        write_tree_diff(out, self._repo.object_store, old_tree, new.tree_oid.encode("ascii"))
        return out.getvalue().decode("utf-8", errors="replace")

    def walk(self, tip_oid: str) -> Iterator[CommitInfo]:
        """Check the tip eagerly, then return a lazy walk from it.

        Raises:
            ObjectNotFoundError: If *tip_oid* is missing or does not peel
                to a commit (a tree, a blob, or a tag of either).
        """
        tip = self._peel(tip_oid.encode("ascii"))
        if not isinstance(tip, Commit):
            raise ObjectNotFoundError(tip_oid, "commit")
        return self._walk_from(tip.id)

    def _walk_from(self, tip: bytes) -> Iterator[CommitInfo]:
        try:
            for entry in Walker(self._repo.object_store, [tip]):
                yield to_commit_info(entry.commit)
        except KeyError as exc:
            missing = exc.args[0] if exc.args else tip
            if isinstance(missing, bytes):
                missing = missing.decode("ascii", errors="replace")
            raise ObjectNotFoundError(str(missing), "commit") from None

    def close(self) -> None:
        self._repo.close()

    def __repr__(self) -> str:
        return f"DulwichGraph(path='{self._repo.path}')"
