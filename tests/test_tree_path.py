"""Tests for tree path resolution and the postorder tree walk."""

from __future__ import annotations

import pytest

from gitshelf.exceptions import PathNotFoundError
from gitshelf.models.objects import EntryKind
from gitshelf.operations.tree_path import resolve_path, split_path, walk_postorder


class CountingAdapter:
    """Wraps an adapter and counts entries() calls per tree oid."""

    def __init__(self, adapter) -> None:
        self._adapter = adapter
        self.calls: dict[str, int] = {}

    def entries(self, tree_oid: str):
        self.calls[tree_oid] = self.calls.get(tree_oid, 0) + 1
        return self._adapter.entries(tree_oid)


@pytest.fixture
def tree_handle(registry):
    with registry.find("tree") as handle:
        yield handle


@pytest.fixture
def root_oid(tree_handle) -> str:
    return tree_handle.find_tree("master").oid


class TestSplitPath:
    @pytest.mark.parametrize(
        ("path", "segments"),
        [
            ("", []),
            ("/", []),
            ("src", ["src"]),
            ("src/main.go", ["src", "main.go"]),
            ("/src//main.go/", ["src", "main.go"]),
        ],
    )
    def test_split(self, path: str, segments: list[str]) -> None:
        assert split_path(path) == segments


class TestResolvePath:
    def test_blob_in_subtree(self, tree_handle, root_oid) -> None:
        entry = resolve_path(tree_handle.adapter, root_oid, ["src", "main.go"])
        assert entry.kind is EntryKind.BLOB
        assert entry.name == "main.go"
        assert entry.path == "src/main.go"
        assert tree_handle.find_blob(entry.oid).text.startswith("package main")

    def test_tree_entry(self, tree_handle, root_oid) -> None:
        entry = resolve_path(tree_handle.adapter, root_oid, ["src"])
        assert entry.kind is EntryKind.TREE
        assert entry.path == "src"

    def test_deeply_nested(self, tree_handle, root_oid) -> None:
        entry = resolve_path(tree_handle.adapter, root_oid, ["src", "util", "strings.go"])
        assert entry.path == "src/util/strings.go"

    def test_empty_path_is_root(self, tree_handle, root_oid) -> None:
        entry = resolve_path(tree_handle.adapter, root_oid, [])
        assert entry.kind is EntryKind.TREE
        assert entry.oid == root_oid
        assert entry.name == ""
        assert entry.path == ""

    def test_missing_file(self, tree_handle, root_oid) -> None:
        with pytest.raises(PathNotFoundError) as exc_info:
            resolve_path(tree_handle.adapter, root_oid, ["src", "missing.go"])
        assert exc_info.value.path == "src/missing.go"
        assert exc_info.value.root_oid == root_oid

    def test_path_through_blob(self, tree_handle, root_oid) -> None:
        with pytest.raises(PathNotFoundError):
            resolve_path(tree_handle.adapter, root_oid, ["README.md", "x"])

    def test_name_only_matches_at_its_own_depth(self, tree_handle, root_oid) -> None:
        with pytest.raises(PathNotFoundError):
            resolve_path(tree_handle.adapter, root_oid, ["main.go"])

    def test_every_walked_path_round_trips(self, tree_handle, root_oid) -> None:
        for _prefix, entry in walk_postorder(tree_handle.adapter, root_oid):
            resolved = resolve_path(tree_handle.adapter, root_oid, split_path(entry.path))
            assert resolved.path == entry.path
            assert resolved.oid == entry.oid


class TestWalkPostorder:
    def test_children_before_parent(self, tree_handle, root_oid) -> None:
        order = [entry.path for _prefix, entry in walk_postorder(tree_handle.adapter, root_oid)]

        assert order.index("src/main.go") < order.index("src")
        assert order.index("src/util/strings.go") < order.index("src/util") < order.index("src")
        assert order.index("assets/logo.png") < order.index("assets")

    def test_visits_every_entry_once(self, tree_handle, root_oid) -> None:
        paths = [entry.path for _prefix, entry in walk_postorder(tree_handle.adapter, root_oid)]
        assert sorted(paths) == [
            "README.md",
            "assets",
            "assets/logo.png",
            "src",
            "src/main.go",
            "src/util",
            "src/util/strings.go",
        ]

    def test_prefixes(self, tree_handle, root_oid) -> None:
        prefixes = {entry.path: prefix for prefix, entry in walk_postorder(tree_handle.adapter, root_oid)}
        assert prefixes["README.md"] == ""
        assert prefixes["src"] == ""
        assert prefixes["src/main.go"] == "src/"
        assert prefixes["src/util/strings.go"] == "src/util/"

    def test_each_tree_expanded_once(self, make_repo, repos_root) -> None:
        from gitshelf.registry import RepoRegistry

        # Identical subtrees share one tree oid
        builder = make_repo("dupes")
        builder.commit({"a/x.txt": "same\n", "b/x.txt": "same\n"}, "dupes")
        reg = RepoRegistry()
        reg.discover(repos_root)

        with reg.find("dupes") as handle:
            counting = CountingAdapter(handle.adapter)
            root = handle.find_tree("master").oid
            paths = [entry.path for _prefix, entry in walk_postorder(counting, root)]

        assert sorted(paths) == ["a", "a/x.txt", "b", "b/x.txt"]
        assert all(count == 1 for count in counting.calls.values())
        assert len(counting.calls) == 2
