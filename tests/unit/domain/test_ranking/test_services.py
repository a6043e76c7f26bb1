"""Tests for the RankEngine domain service."""

from __future__ import annotations

import itertools
import logging
import random

from dataclasses import dataclass, field

import pytest

from cmdrank.domain.ranking.services import RankEngine
from cmdrank.domain.ranking.sorting import sorts_before
from cmdrank.shared.types import CommandId

# =============================================================================
# Fixtures
# =============================================================================


@dataclass
class ListSource:
    """Mutable in-memory command source."""

    commands: list[str] = field(default_factory=list[str])
    scopes: dict[str, list[str]] = field(default_factory=dict[str, list[str]])
    calls: int = 0

    def list_commands(self, scope: str | None = None) -> list[str]:
        self.calls += 1
        if scope is None:
            return list(self.commands)
        return list(self.scopes.get(scope, []))


@pytest.fixture
def greek_source() -> ListSource:
    return ListSource(commands=["alpha", "beta", "gamma"])


@pytest.fixture
def greek_engine(greek_source: ListSource) -> RankEngine:
    engine = RankEngine(source=greek_source)
    engine.rebuild()
    return engine


@pytest.fixture
def pair_source() -> ListSource:
    """Five equal-length names, so unranked order is alphabetical."""
    return ListSource(commands=["ee", "dd", "cc", "bb", "aa"])


def _display(engine: RankEngine) -> list[str]:
    return list(engine.display)


def _counts(engine: RankEngine) -> dict[str, int | None]:
    return {e.command_id: e.count for e in engine.entries}


def _assert_tail_sorted(engine: RankEngine) -> None:
    tail = engine.entries[engine.history_length :]
    for a, b in itertools.pairwise(tail):
        assert sorts_before(a, b), f"{a.command_id} before {b.command_id}"


def test_history_length_must_be_positive(greek_source: ListSource) -> None:
    with pytest.raises(ValueError, match="history_length"):
        RankEngine(source=greek_source, history_length=0)


# =============================================================================
# Rebuild
# =============================================================================


class TestRebuild:
    def test_unranked_commands_sort_by_length_then_name(
        self, greek_engine: RankEngine
    ) -> None:
        assert _display(greek_engine) == ["beta", "alpha", "gamma"]

    def test_sorted_without_history(self, pair_source: ListSource) -> None:
        pair_source.commands += ["a", "bbb", "ccccc"]
        engine = RankEngine(source=pair_source)
        engine.load_initial([], [("dd", 2), ("bbb", 2), ("ee", 1)])

        engine.rebuild()

        assert _display(engine) == [
            "dd", "bbb", "ee", "a", "aa", "bb", "cc", "ccccc",
        ]
        for a, b in itertools.pairwise(engine.entries):
            assert sorts_before(a, b)

    def test_rebuild_is_idempotent(self, greek_engine: RankEngine) -> None:
        greek_engine.promote("gamma")
        greek_engine.promote("alpha")

        greek_engine.rebuild()
        first = _display(greek_engine)
        greek_engine.rebuild()
        second = _display(greek_engine)

        assert first == second

    def test_duplicate_enumeration_is_collapsed(self) -> None:
        engine = RankEngine(source=ListSource(commands=["ls", "cd", "ls"]))
        engine.rebuild()
        assert _display(engine) == ["cd", "ls"]

    def test_folds_loaded_history(self) -> None:
        source = ListSource(commands=["c1", "c2", "c3", "c4", "c5"])
        engine = RankEngine(source=source)
        engine.load_initial(["c3", "c1", "c2"], [])

        engine.rebuild()

        assert _display(engine)[:3] == ["c3", "c1", "c2"]

    def test_uses_scope(self) -> None:
        source = ListSource(
            commands=["ls", "commit", "push"],
            scopes={"vcs": ["commit", "push"]},
        )
        engine = RankEngine(source=source, scope="vcs")

        engine.rebuild()

        assert _display(engine) == ["push", "commit"]

    def test_nested_rebuild_is_ignored(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        source = ListSource(commands=["b", "a"])
        engine = RankEngine(source=source)
        enumerate_commands = source.list_commands

        def reentrant(scope: str | None = None) -> list[str]:
            engine.rebuild()
            return enumerate_commands(scope)

        source.list_commands = reentrant  # type: ignore[method-assign]

        with caplog.at_level(logging.WARNING):
            engine.rebuild()

        assert _display(engine) == ["a", "b"]
        assert "already in progress" in caplog.text


# =============================================================================
# Promote
# =============================================================================


class TestPromote:
    def test_scenario_alpha_beta_gamma(self, greek_engine: RankEngine) -> None:
        assert greek_engine.promote("gamma") is True
        assert _display(greek_engine) == ["gamma", "beta", "alpha"]
        assert greek_engine.ledger.pairs() == [("gamma", 1)]

        assert greek_engine.promote("beta") is True
        assert _display(greek_engine) == ["beta", "gamma", "alpha"]
        assert greek_engine.ledger.pairs() == [("gamma", 1), ("beta", 1)]

    def test_front_entry_only_gains_count(self, greek_engine: RankEngine) -> None:
        greek_engine.promote("beta")
        greek_engine.promote("beta")

        assert _display(greek_engine) == ["beta", "alpha", "gamma"]
        assert _counts(greek_engine)["beta"] == 2

    def test_unknown_command_triggers_one_update(
        self, greek_source: ListSource, greek_engine: RankEngine
    ) -> None:
        greek_source.commands.append("delta")

        assert greek_engine.promote("delta") is True

        assert _display(greek_engine) == ["delta", "beta", "alpha", "gamma"]
        assert greek_engine.ledger.pairs() == [("delta", 1)]

    def test_unknown_command_is_ignored(
        self, greek_source: ListSource, greek_engine: RankEngine
    ) -> None:
        calls_before = greek_source.calls

        assert greek_engine.promote("omega") is False

        assert greek_source.calls == calls_before + 1
        assert _display(greek_engine) == ["beta", "alpha", "gamma"]
        assert len(greek_engine.ledger) == 0

    def test_loaded_count_is_shared_with_ledger(
        self, greek_source: ListSource
    ) -> None:
        engine = RankEngine(source=greek_source)
        engine.load_initial([], [("gamma", 4)])
        engine.rebuild()

        assert _display(engine) == ["gamma", "beta", "alpha"]

        engine.promote("gamma")

        assert engine.ledger.pairs() == [("gamma", 5)]
        assert _counts(engine)["gamma"] == 5

    def test_resettle_sends_demoted_entry_down(self, pair_source: ListSource) -> None:
        engine = RankEngine(source=pair_source, history_length=2)
        engine.load_initial(["ee", "dd"], [])
        engine.rebuild()
        assert _display(engine) == ["ee", "dd", "aa", "bb", "cc"]

        engine.promote("cc")

        assert _display(engine) == ["cc", "ee", "aa", "bb", "dd"]
        _assert_tail_sorted(engine)

    def test_resettle_respects_counts(self, pair_source: ListSource) -> None:
        engine = RankEngine(source=pair_source, history_length=2)
        engine.load_initial(["dd", "cc"], [("ee", 5)])
        engine.rebuild()
        assert _display(engine) == ["dd", "cc", "ee", "aa", "bb"]

        engine.promote("bb")

        assert _display(engine) == ["bb", "dd", "ee", "aa", "cc"]
        _assert_tail_sorted(engine)

    def test_resettle_first_fit_stops_midway(self) -> None:
        source = ListSource(commands=["a", "bbb", "cc", "dddd"])
        engine = RankEngine(source=source, history_length=1)
        engine.load_initial(["cc"], [])
        engine.rebuild()
        assert _display(engine) == ["cc", "a", "bbb", "dddd"]

        engine.promote("dddd")

        assert _display(engine) == ["dddd", "a", "cc", "bbb"]

    def test_promotion_within_window_leaves_tail_alone(
        self, pair_source: ListSource
    ) -> None:
        engine = RankEngine(source=pair_source, history_length=3)
        engine.rebuild()

        engine.promote("cc")

        assert _display(engine) == ["cc", "aa", "bb", "dd", "ee"]

    def test_random_promotions_keep_invariants(self) -> None:
        names = ["ls", "cd", "cat", "grep", "make", "git", "vim", "top", "ps", "du"]
        source = ListSource(commands=list(names))
        engine = RankEngine(source=source, history_length=3)
        engine.rebuild()
        rng = random.Random(7)

        for _ in range(200):
            engine.promote(rng.choice(names))

            display = _display(engine)
            assert len(display) == len(set(display)) == len(names)
            assert display == [e.command_id for e in engine.entries]
            _assert_tail_sorted(engine)

        assert sum(count for _, count in engine.ledger.pairs()) == 200


# =============================================================================
# Ledger
# =============================================================================


class TestLedger:
    def test_count_survives_command_disappearing(
        self, greek_source: ListSource, greek_engine: RankEngine
    ) -> None:
        greek_engine.promote("gamma")
        greek_source.commands.remove("gamma")

        greek_engine.rebuild()

        assert "gamma" not in _display(greek_engine)
        assert greek_engine.ledger.pairs() == [("gamma", 1)]

        greek_source.commands.append("gamma")
        greek_engine.rebuild()

        assert _display(greek_engine)[0] == "gamma"
        assert _counts(greek_engine)["gamma"] == 1

    def test_counts_never_revert(self, greek_engine: RankEngine) -> None:
        greek_engine.promote("alpha")
        for _ in range(3):
            greek_engine.update()
            assert _counts(greek_engine)["alpha"] == 1
            assert "alpha" in greek_engine.ledger


# =============================================================================
# Persistence interface
# =============================================================================


class TestPersistence:
    def test_export_state(self, greek_engine: RankEngine) -> None:
        greek_engine.promote("gamma")
        greek_engine.promote("gamma")
        greek_engine.promote("beta")

        state = greek_engine.export_state()

        assert state.history == ("beta", "gamma", "alpha")
        assert state.data == (("gamma", 2), ("beta", 1))

    def test_export_keeps_commands_no_longer_live(
        self, greek_source: ListSource
    ) -> None:
        engine = RankEngine(source=greek_source)
        engine.load_initial([], [("zeta", 2)])
        engine.rebuild()

        assert "zeta" not in _display(engine)
        assert engine.export_state().data == (("zeta", 2),)

    def test_extract_history_is_capped(self, pair_source: ListSource) -> None:
        engine = RankEngine(source=pair_source, history_length=2)
        engine.rebuild()
        assert engine.extract_history() == ("aa", "bb")

    def test_unbuilt_engine_returns_loaded_history(
        self, greek_source: ListSource
    ) -> None:
        engine = RankEngine(source=greek_source, history_length=2)
        engine.load_initial(["gamma", "alpha", "beta"], [])

        assert engine.extract_history() == ("gamma", "alpha")
        assert greek_source.calls == 0


# =============================================================================
# Update
# =============================================================================


class TestUpdate:
    def test_update_keeps_recency_window(self, pair_source: ListSource) -> None:
        engine = RankEngine(source=pair_source, history_length=2)
        engine.rebuild()
        engine.promote("ee")
        engine.promote("ee")
        engine.promote("dd")

        engine.update()
        assert _display(engine)[:2] == ["dd", "ee"]

        fresh = RankEngine(source=pair_source, history_length=2)
        fresh.load_initial([], engine.ledger.pairs())
        fresh.rebuild()
        assert _display(fresh)[:2] == ["ee", "dd"]

    def test_update_if_needed_builds_once(self, greek_source: ListSource) -> None:
        engine = RankEngine(source=greek_source)

        assert engine.update_if_needed() is True
        assert engine.is_built
        assert engine.update_if_needed() is False

    def test_detects_new_commands(
        self, greek_source: ListSource, greek_engine: RankEngine
    ) -> None:
        assert greek_engine.detect_new_commands() is False

        greek_source.commands.append("delta")

        assert greek_engine.detect_new_commands() is True
        assert greek_engine.update_if_needed() is True
        assert "delta" in _display(greek_engine)
        assert greek_engine.update_if_needed() is False


# =============================================================================
# Scoped ordering
# =============================================================================


def test_sort_by_rank_orders_known_first(greek_engine: RankEngine) -> None:
    greek_engine.promote("gamma")

    ordered = greek_engine.sort_by_rank(["alpha", "zeta", "gamma", "alpha"])

    assert ordered == [CommandId("gamma"), CommandId("alpha"), CommandId("zeta")]
