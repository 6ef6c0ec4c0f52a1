"""Shared test fixtures for gitshelf.

Builds real git repositories with dulwich objects under tmp_path.
Commit timestamps advance by one minute per commit, so history order is
deterministic.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from dulwich.objects import Blob, Commit, Tag, Tree
from dulwich.repo import Repo

from gitshelf.models.config import ShelfConfig
from gitshelf.registry import RepoRegistry, reset_registry
from gitshelf.shelf import Shelf

BASE_TIME = 1_700_000_000
ALICE = "Alice <alice@example.com>"
BOB = "Bob <bob@example.com>"
CAROL = "Carol <carol@example.com>"


class RepoBuilder:
    """Writes commits, trees and refs straight into a dulwich repository."""

    def __init__(self, path: Path, *, bare: bool = False) -> None:
        self.path = path
        if bare:
            path.mkdir(parents=True)
            self.repo = Repo.init_bare(str(path))
        else:
            self.repo = Repo.init(str(path), mkdir=True)
        self.commits: list[str] = []
        self._clock = BASE_TIME

    def tree(self, files: dict[str, bytes | str]) -> bytes:
        """Store a (nested) tree for slash-separated paths and return its id."""
        store = self.repo.object_store
        tree = Tree()
        subtrees: dict[str, dict[str, bytes | str]] = {}
        for path, data in files.items():
            head, _, rest = path.partition("/")
            if rest:
                subtrees.setdefault(head, {})[rest] = data
                continue
            if isinstance(data, str):
                data = data.encode("utf-8")
            blob = Blob.from_string(data)
            store.add_object(blob)
            tree.add(head.encode("utf-8"), 0o100644, blob.id)
        for name, sub in subtrees.items():
            tree.add(name.encode("utf-8"), 0o040000, self.tree(sub))
        store.add_object(tree)
        return tree.id

    def commit(
        self,
        files: dict[str, bytes | str],
        message: str,
        *,
        parents: list[str] | None = None,
        author: str = ALICE,
        branch: str | None = "master",
    ) -> str:
        """Create a commit with exactly *files* and return its hex id.

        Parents default to the current tip of *branch*.
        """
        if parents is None:
            parents = []
            if branch is not None:
                ref = b"refs/heads/" + branch.encode("utf-8")
                if ref in self.repo.refs:
                    parents = [self.repo.refs[ref].decode("ascii")]

        self._clock += 60
        commit = Commit()
        commit.tree = self.tree(files)
        commit.parents = [p.encode("ascii") for p in parents]
        commit.author = commit.committer = author.encode("utf-8")
        commit.author_time = commit.commit_time = self._clock
        commit.author_timezone = commit.commit_timezone = 0
        commit.encoding = b"UTF-8"
        commit.message = message.encode("utf-8")
        self.repo.object_store.add_object(commit)

        if branch is not None:
            self.branch(branch, commit.id.decode("ascii"))
        self.commits.append(commit.id.decode("ascii"))
        return commit.id.decode("ascii")

    def branch(self, name: str, oid: str) -> None:
        self.repo.refs[b"refs/heads/" + name.encode("utf-8")] = oid.encode("ascii")

    def tag(self, name: str, oid: str) -> None:
        """Lightweight tag."""
        self.repo.refs[b"refs/tags/" + name.encode("utf-8")] = oid.encode("ascii")

    def annotated_tag(self, name: str, oid: str, message: str = "release", *, target_type: type = Commit) -> str:
        tag = Tag()
        tag.name = name.encode("utf-8")
        tag.object = (target_type, oid.encode("ascii"))
        tag.tagger = ALICE.encode("utf-8")
        tag.tag_time = self._clock
        tag.tag_timezone = 0
        tag.message = message.encode("utf-8")
        self.repo.object_store.add_object(tag)
        self.repo.refs[b"refs/tags/" + name.encode("utf-8")] = tag.id
        return tag.id.decode("ascii")

    def close(self) -> None:
        self.repo.close()


@pytest.fixture(autouse=True)
def _clean_registry():
    """Never leak the process-wide registry between tests."""
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def repos_root(tmp_path: Path) -> Path:
    root = tmp_path / "repos"
    root.mkdir()
    return root


@pytest.fixture
def make_repo(repos_root: Path):
    """Factory creating a RepoBuilder for a new repository under repos_root."""
    builders: list[RepoBuilder] = []

    def _make(name: str, *, bare: bool = False) -> RepoBuilder:
        builder = RepoBuilder(repos_root / name, bare=bare)
        builders.append(builder)
        return builder

    yield _make
    for builder in builders:
        builder.close()


@pytest.fixture
def linear_repo(make_repo) -> RepoBuilder:
    """15 commits on master; develop points at the 8th; tags v1.0 (light) and v2.0 (annotated).

    ``commits`` is oldest first, so ``commits[-1]`` is the master tip.
    Commits alternate between Alice, Bob and Carol (Alice 5, Bob 5, Carol 5).
    """
    builder = make_repo("linear")
    authors = [ALICE, BOB, CAROL]
    for i in range(1, 16):
        builder.commit(
            {"counter.txt": f"{i}\n", "README.md": "# linear\n"},
            f"commit {i}\n\nBody of commit {i}.\n",
            author=authors[(i - 1) % 3],
        )
    builder.branch("develop", builder.commits[7])
    builder.tag("v1.0", builder.commits[4])
    builder.annotated_tag("v2.0", builder.commits[14])
    return builder


@pytest.fixture
def tree_repo(make_repo) -> RepoBuilder:
    """One commit with README.md, src/main.go, src/util/strings.go and a binary logo."""
    builder = make_repo("tree")
    builder.commit(
        {
            "README.md": "# tree\n",
            "src/main.go": "package main\n\nfunc main() {}\n",
            "src/util/strings.go": "package util\n",
            "assets/logo.png": b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR",
        },
        "initial layout",
    )
    return builder


@pytest.fixture
def merge_repo(make_repo) -> RepoBuilder:
    """A merge of side-branch s1 into master.

    c1: a.txt=1 -> c2: a.txt=2 (master)
    c1 -> s1: adds side.txt (branch side)
    m: parents [c2, s1], a.txt=2 + side.txt

    ``commits`` is [c1, c2, s1, m].
    """
    builder = make_repo("merge")
    c1 = builder.commit({"a.txt": "1\n"}, "first")
    c2 = builder.commit({"a.txt": "2\n"}, "second", author=BOB)
    builder.commit({"a.txt": "1\n", "side.txt": "side\n"}, "side work", parents=[c1], branch="side")
    s1 = builder.commits[-1]
    builder.commit(
        {"a.txt": "2\n", "side.txt": "side\n"},
        "Merge branch 'side'",
        parents=[c2, s1],
    )
    return builder


@pytest.fixture
def registry(repos_root: Path, linear_repo, tree_repo, merge_repo) -> RepoRegistry:
    reg = RepoRegistry()
    reg.discover(repos_root)
    return reg


@pytest.fixture
def config(repos_root: Path) -> ShelfConfig:
    return ShelfConfig(repos_root=str(repos_root))


@pytest.fixture
def shelf(registry: RepoRegistry, config: ShelfConfig):
    s = Shelf(registry, config)
    yield s
    s.close()
