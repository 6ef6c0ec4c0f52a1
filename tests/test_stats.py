"""Tests for branch statistics."""

from __future__ import annotations

from collections import Counter

import pytest

from gitshelf.exceptions import InvalidRefError, ObjectNotFoundError
from gitshelf.operations.stats import BranchStats, compute_stats, rank_authors, stats_key

from tests.conftest import ALICE, BOB, CAROL


class TestComputeStats:
    def test_counts_and_ranking(self, registry, linear_repo) -> None:
        with registry.find("linear") as handle:
            report = compute_stats(handle, "master")

        assert report.ref == "master"
        assert report.tip_oid == linear_repo.commits[-1]
        assert report.commit_count == 15
        assert report.merge_count == 0
        # 5 commits each: ties broken by identity ascending
        assert [(a.identity, a.commits) for a in report.authors] == [
            (ALICE, 5),
            (BOB, 5),
            (CAROL, 5),
        ]

    def test_partial_history(self, registry) -> None:
        with registry.find("linear") as handle:
            report = compute_stats(handle, "develop")

        # commits 1..8 -> Alice 1,4,7; Bob 2,5,8; Carol 3,6
        assert report.commit_count == 8
        assert [(a.name, a.commits) for a in report.authors] == [
            ("Alice", 3),
            ("Bob", 3),
            ("Carol", 2),
        ]

    def test_time_span(self, registry) -> None:
        with registry.find("linear") as handle:
            report = compute_stats(handle, "master")
            commits = handle.commits("master")
        assert report.first_commit_at == commits[-1].committer.time
        assert report.last_commit_at == commits[0].committer.time

    def test_merge_history_counted_once(self, registry) -> None:
        with registry.find("merge") as handle:
            report = compute_stats(handle, "master")

        assert report.commit_count == 4
        assert report.merge_count == 1
        assert report.authors[0].identity == ALICE
        assert report.authors[0].commits == 3
        assert report.authors[1].identity == BOB

    def test_cache_key_from_tip(self, registry, linear_repo) -> None:
        with registry.find("linear") as handle:
            report = compute_stats(handle, "master")
        assert report.cache_key == stats_key(linear_repo.commits[-1], "master")
        assert report.cache_key != stats_key(linear_repo.commits[-1], "v2.0")

    def test_invalid_ref(self, registry) -> None:
        with registry.find("linear") as handle:
            with pytest.raises(InvalidRefError):
                compute_stats(handle, "nope")

    def test_tree_oid_is_not_a_commit(self, registry) -> None:
        with registry.find("linear") as handle:
            tree_oid = handle.commit("master").tree_oid
            with pytest.raises(ObjectNotFoundError):
                compute_stats(handle, tree_oid)

    def test_explicit_tip_is_aggregated(self, registry, linear_repo) -> None:
        tip = linear_repo.commits[7]
        with registry.find("linear") as handle:
            report = compute_stats(handle, "master", tip)

        assert report.tip_oid == tip
        assert report.commit_count == 8
        assert report.cache_key == stats_key(tip, "master")


class TestRankAuthors:
    def test_count_desc_then_identity_asc(self) -> None:
        from datetime import datetime, timezone

        from gitshelf.models.objects import Signature

        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        names = {
            "b <b@x>": Signature(name="b", email="b@x", time=now),
            "a <a@x>": Signature(name="a", email="a@x", time=now),
            "c <c@x>": Signature(name="c", email="c@x", time=now),
        }
        ranked = rank_authors(Counter({"b <b@x>": 2, "a <a@x>": 2, "c <c@x>": 7}), names)
        assert [a.identity for a in ranked] == ["c <c@x>", "a <a@x>", "b <b@x>"]


class FakeStatsRepository:
    def __init__(self) -> None:
        self.rows: dict[str, object] = {}
        self.gets = 0

    def get(self, cache_key):
        self.gets += 1
        return self.rows.get(cache_key)

    def save(self, report, repo_name):
        self.rows[report.cache_key] = report

    def delete_for_repo(self, repo_name):
        return 0


class TestBranchStats:
    def test_without_cache(self, registry) -> None:
        with registry.find("linear") as handle:
            assert BranchStats().compute(handle, "master").commit_count == 15

    def test_cache_miss_then_hit(self, registry) -> None:
        repo = FakeStatsRepository()
        stats = BranchStats(repo)
        with registry.find("linear") as handle:
            first = stats.compute(handle, "master")
            second = stats.compute(handle, "master")

        assert len(repo.rows) == 1
        assert repo.gets == 2
        assert second is first

    def test_branch_moving_mid_compute(self, registry, linear_repo, monkeypatch) -> None:
        repo = FakeStatsRepository()
        tip = linear_repo.commits[-1]
        with registry.find("linear") as handle:
            resolve = handle.resolve

            def resolve_then_move(ref: str) -> str:
                oid = resolve(ref)
                linear_repo.repo.refs[b"refs/heads/master"] = linear_repo.commits[7].encode("ascii")
                return oid

            monkeypatch.setattr(handle, "resolve", resolve_then_move)
            report = BranchStats(repo).compute(handle, "master")

        assert report.tip_oid == tip
        assert report.commit_count == 15
        assert report.cache_key == stats_key(tip, "master")
        assert list(repo.rows) == [stats_key(tip, "master")]
