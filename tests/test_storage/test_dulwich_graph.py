"""Tests for the dulwich object-graph adapter."""

from __future__ import annotations

import pytest
from dulwich.objects import Tree

from gitshelf.exceptions import InvalidRefError, ObjectNotFoundError, RepositoryNotFoundError
from gitshelf.models.objects import EntryKind
from gitshelf.storage.dulwich_graph import DulwichGraph, parse_identity


@pytest.fixture
def graph(tree_repo):
    g = DulwichGraph.open(tree_repo.path)
    yield g
    g.close()


class TestParseIdentity:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (b"Alice <alice@example.com>", ("Alice", "alice@example.com")),
            (b"Alice Smith <a@x> ", ("Alice Smith", "a@x")),
            (b"nobody", ("nobody", "")),
            (b"<only@mail>", ("<only@mail>", "")),
        ],
    )
    def test_parse(self, raw: bytes, expected: tuple[str, str]) -> None:
        assert parse_identity(raw) == expected


class TestOpen:
    def test_not_a_repository(self, tmp_path) -> None:
        with pytest.raises(RepositoryNotFoundError):
            DulwichGraph.open(tmp_path)

    def test_is_repository(self, tree_repo, tmp_path) -> None:
        assert DulwichGraph.is_repository(tree_repo.path) is True
        assert DulwichGraph.is_repository(tmp_path) is False

    def test_metadata(self, graph) -> None:
        assert graph.is_bare is False
        assert graph.description is None
        assert "DulwichGraph" in repr(graph)


class TestEntries:
    def test_root_entries_in_tree_order(self, graph) -> None:
        root = graph.read_commit(graph.resolve_ref("master")).tree_oid
        entries = graph.entries(root)

        assert [e.name for e in entries] == ["README.md", "assets", "src"]
        kinds = {e.name: e.kind for e in entries}
        assert kinds["src"] is EntryKind.TREE
        assert kinds["README.md"] is EntryKind.BLOB
        assert all(e.path == e.name for e in entries)

    def test_missing_tree(self, graph) -> None:
        with pytest.raises(ObjectNotFoundError):
            graph.entries("f" * 40)


class TestBlobs:
    def test_binary_classification(self, graph) -> None:
        root = graph.read_commit(graph.resolve_ref("master")).tree_oid
        assets = next(e for e in graph.entries(root) if e.name == "assets")
        logo = graph.entries(assets.oid)[0]

        blob = graph.read_blob(logo.oid)
        assert blob.is_binary is True
        assert blob.size == len(blob.data)

    def test_text_blob(self, graph) -> None:
        root = graph.read_commit(graph.resolve_ref("master")).tree_oid
        readme = next(e for e in graph.entries(root) if e.name == "README.md")
        assert graph.read_blob(readme.oid).text == "# tree\n"

    def test_tree_is_not_a_blob(self, graph) -> None:
        root = graph.read_commit(graph.resolve_ref("master")).tree_oid
        with pytest.raises(ObjectNotFoundError):
            graph.read_blob(root)


class TestResolveRef:
    def test_head(self, graph) -> None:
        assert graph.resolve_ref("refs/heads/master") == graph.resolve_ref("master")

    def test_short_prefix_rejected(self, graph) -> None:
        oid = graph.resolve_ref("master")
        with pytest.raises(InvalidRefError):
            graph.resolve_ref(oid[:3])

    def test_uppercase_full_oid(self, graph) -> None:
        oid = graph.resolve_ref("master")
        assert graph.resolve_ref(oid.upper()) == oid


class TestWalk:
    def test_missing_tip(self, graph) -> None:
        with pytest.raises(ObjectNotFoundError):
            list(graph.walk("e" * 40))

    def test_tree_tip_fails_before_iteration(self, graph) -> None:
        root = graph.read_commit(graph.resolve_ref("master")).tree_oid
        with pytest.raises(ObjectNotFoundError) as exc_info:
            graph.walk(root)
        assert exc_info.value.oid == root

    def test_tag_of_tree_is_not_walkable(self, tree_repo, graph) -> None:
        root = graph.read_commit(graph.resolve_ref("master")).tree_oid
        tree_repo.annotated_tag("snapshot", root, target_type=Tree)

        assert graph.resolve_ref("snapshot") == root
        with pytest.raises(ObjectNotFoundError):
            graph.walk(graph.resolve_ref("snapshot"))

    def test_tip_commit_comes_first(self, graph) -> None:
        tip = graph.resolve_ref("master")
        assert next(graph.walk(tip)).oid == tip
