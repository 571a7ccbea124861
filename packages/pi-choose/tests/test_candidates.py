"""Tests for pi.choose.candidates -- the candidate pipeline."""

from __future__ import annotations

import pytest

from pi.choose.candidates import (
    LENGTH_BITS,
    MAX_LENGTH,
    MAX_RANK,
    arrange_candidates,
    compute_candidates,
    group_candidates,
    history_length_key,
    promote_default,
    sort_alpha,
    sort_history_alpha,
    sort_history_length_alpha,
    sort_length_alpha,
)
from pi.choose.history import HistoryRanker
from pi.choose.settings import ChooseSettings
from pi.choose.sources import MatchResult, Metadata


def _arrange(
    candidates: list[str],
    *,
    metadata: Metadata | None = None,
    history: list[str] | None = None,
    text: str = "",
    **settings,
) -> list[str]:
    return arrange_candidates(
        text,
        candidates,
        metadata or Metadata(),
        HistoryRanker(history),
        ChooseSettings(**settings),
    )


class _StaticMatcher:
    def __init__(self, result: MatchResult | None) -> None:
        self._result = result

    def match(self, text, predicate=None):
        return self._result

    def contains(self, text, predicate=None) -> bool:
        return False


class _AsyncMatcher(_StaticMatcher):
    async def match(self, text, predicate=None):
        return self._result


class TestSortKey:
    """Rank is the major key, length the minor key."""

    def test_rank_shifted_above_length(self) -> None:
        assert history_length_key(1, 0) == 1 << LENGTH_BITS
        assert history_length_key(0, 5) == 5

    def test_rank_dominates_length(self) -> None:
        assert history_length_key(0, MAX_LENGTH) < history_length_key(1, 0)

    def test_length_saturates(self) -> None:
        assert history_length_key(0, 10**6) == MAX_LENGTH
        assert history_length_key(0, 10**6) < history_length_key(1, 0)

    def test_rank_saturates(self) -> None:
        assert history_length_key(2**60, 0) == MAX_RANK << LENGTH_BITS


class TestSortFunctions:
    """Sorting orders by (rank, length, text)."""

    def test_history_example(self) -> None:
        assert _arrange(["bar", "baz", "foo"], history=["foo", "bar"]) == ["foo", "bar", "baz"]

    def test_length_then_alpha_without_history(self) -> None:
        assert _arrange(["ccc", "bb", "a", "aa"]) == ["a", "aa", "bb", "ccc"]

    def test_history_beats_shorter_candidates(self) -> None:
        assert _arrange(["a", "longer"], history=["longer"]) == ["longer", "a"]

    def test_sorting_is_idempotent(self) -> None:
        ranker = HistoryRanker(["q", "zz"])
        ranker.update()
        once = sort_history_length_alpha(["b", "zz", "a", "q", "ab", "ba"], ranker)
        assert sort_history_length_alpha(once, ranker) == once

    def test_order_does_not_depend_on_input_order(self) -> None:
        ranker = HistoryRanker(["m"])
        ranker.update()
        items = ["b", "m", "aa", "a", "c"]
        assert sort_history_length_alpha(items, ranker) == sort_history_length_alpha(
            list(reversed(items)), ranker
        )

    def test_history_alpha_ignores_length(self) -> None:
        ranker = HistoryRanker([])
        ranker.update()
        assert sort_history_alpha(["bb", "a", "ab"], ranker) == ["a", "ab", "bb"]

    def test_length_alpha(self) -> None:
        assert sort_length_alpha(["bb", "c", "a"], HistoryRanker()) == ["a", "c", "bb"]

    def test_alpha(self) -> None:
        assert sort_alpha(["bb", "c", "a"], HistoryRanker()) == ["a", "bb", "c"]

    def test_named_sort_function(self) -> None:
        assert _arrange(["bb", "c", "a"], sort_function="alpha") == ["a", "bb", "c"]
        assert _arrange(["bb", "c", "a"], sort_function="none") == ["bb", "c", "a"]

    def test_input_list_is_not_mutated(self) -> None:
        items = ["c", "b", "a"]
        _arrange(items)
        assert items == ["c", "b", "a"]


class TestThresholdAndOverride:
    """Large sets skip sorting; metadata may take over sorting."""

    def test_threshold_exceeded_keeps_matcher_order(self) -> None:
        assert _arrange(["c", "b", "a"], sort_threshold=2) == ["c", "b", "a"]

    def test_threshold_reached_still_sorts(self) -> None:
        assert _arrange(["c", "b", "a"], sort_threshold=3) == ["a", "b", "c"]

    def test_sort_override(self) -> None:
        metadata = Metadata(sort=lambda items: sorted(items, reverse=True))
        assert _arrange(["a", "c", "b"], metadata=metadata) == ["c", "b", "a"]

    def test_threshold_beats_override(self) -> None:
        metadata = Metadata(sort=lambda items: sorted(items))
        assert _arrange(["c", "a"], metadata=metadata, sort_threshold=1) == ["c", "a"]


class TestDefaultPromotion:
    """The default value moves to the front."""

    def test_promote_default(self) -> None:
        assert promote_default(["b", "a", "c"], "c") == ["c", "b", "a"]

    def test_missing_default_is_ignored(self) -> None:
        assert promote_default(["b", "a"], "z") == ["b", "a"]

    def test_no_default(self) -> None:
        assert promote_default(["b", "a"], None) == ["b", "a"]

    def test_only_first_occurrence_moves(self) -> None:
        assert promote_default(["a", "c", "b", "c"], "c") == ["c", "a", "b", "c"]

    def test_pipeline_promotes_after_sorting(self) -> None:
        metadata = Metadata(default="ccc")
        assert _arrange(["ccc", "b", "a"], metadata=metadata) == ["ccc", "a", "b"]


class TestGrouping:
    """Grouping reorders into buckets without adding or dropping."""

    def test_groups_in_first_appearance_order(self) -> None:
        groups = group_candidates(["a1", "b1", "a2", "b2"], lambda c: c[0])
        assert groups == [("a", ["a1", "a2"]), ("b", ["b1", "b2"])]

    def test_pipeline_flattens_groups(self) -> None:
        metadata = Metadata(group=lambda c: c[0])
        result = _arrange(["a1", "b1", "a2", "b2"], metadata=metadata, sort_function="none")
        assert result == ["a1", "a2", "b1", "b2"]

    @pytest.mark.parametrize("modulus", [1, 2, 3, 7])
    def test_grouping_preserves_count(self, modulus: int) -> None:
        items = [f"c{i}" for i in range(20)] + ["c3"]
        metadata = Metadata(group=lambda c: str(int(c[1:]) % modulus))
        result = _arrange(items, metadata=metadata)
        assert sorted(result) == sorted(items)


class TestFileSentinels:
    """./ and ../ are dropped for file completion only."""

    def test_removed_for_file_category(self) -> None:
        metadata = Metadata(category="file")
        assert _arrange(["./", "../", "a"], metadata=metadata) == ["a"]

    def test_kept_for_other_categories(self) -> None:
        assert _arrange(["./", "../", "a"]) == ["a", "./", "../"]


class TestComputeCandidates:
    """compute_candidates drives the matcher."""

    @pytest.mark.asyncio
    async def test_returns_candidate_set(self) -> None:
        matcher = _StaticMatcher(MatchResult(candidates=["bb", "a"], base=1))
        result = await compute_candidates(
            "xa", matcher, Metadata(), HistoryRanker(), ChooseSettings()
        )
        assert result is not None
        assert result.items == ["a", "bb"]
        assert result.total == 2
        assert result.base == 1

    @pytest.mark.asyncio
    async def test_async_matcher(self) -> None:
        matcher = _AsyncMatcher(MatchResult(candidates=["b", "a"]))
        result = await compute_candidates(
            "", matcher, Metadata(), HistoryRanker(), ChooseSettings()
        )
        assert result is not None
        assert result.items == ["a", "b"]

    @pytest.mark.asyncio
    async def test_unavailable_matcher(self) -> None:
        result = await compute_candidates(
            "", _StaticMatcher(None), Metadata(), HistoryRanker(), ChooseSettings()
        )
        assert result is None

    @pytest.mark.asyncio
    async def test_base_is_clamped_to_input(self) -> None:
        matcher = _StaticMatcher(MatchResult(candidates=["a"], base=99))
        result = await compute_candidates(
            "ab", matcher, Metadata(), HistoryRanker(), ChooseSettings()
        )
        assert result is not None
        assert result.base == 2

    @pytest.mark.asyncio
    async def test_total_counts_filtered_items(self) -> None:
        matcher = _StaticMatcher(MatchResult(candidates=["./", "../", "x", "y"]))
        result = await compute_candidates(
            "", matcher, Metadata(category="file"), HistoryRanker(), ChooseSettings()
        )
        assert result is not None
        assert result.total == 2
