"""Candidate pipeline: match, filter, rank, promote and group.

Runs once per input change and produces a ``CandidateSet``. Sorting packs
the history rank and the candidate length into one integer::

    key = (rank << LENGTH_BITS) + min(len(candidate), MAX_LENGTH)

with ties broken alphabetically. Ranks above ``MAX_RANK`` and lengths above
``MAX_LENGTH`` saturate instead of spilling into the neighbouring field.
"""

from __future__ import annotations

import inspect
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import NamedTuple

from pi.choose.history import HistoryRanker
from pi.choose.settings import ChooseSettings
from pi.choose.sources import Matcher, Metadata, Predicate

logger = logging.getLogger(__name__)

LENGTH_BITS = 13
MAX_LENGTH = (1 << LENGTH_BITS) - 1
MAX_RANK = (1 << 51) - 1

# Always valid for file completion, never worth showing
FILE_SENTINELS = frozenset({"." + os.sep, ".." + os.sep})


@dataclass
class CandidateSet:
    base: int = 0
    total: int = 0
    items: list[str] = field(default_factory=list)


class _Ranked(NamedTuple):
    """Transient sort wrapper; tuple order gives (key, text)."""

    key: int
    text: str


def history_length_key(rank: int, length: int) -> int:
    return (min(max(rank, 0), MAX_RANK) << LENGTH_BITS) + min(max(length, 0), MAX_LENGTH)


# ---------------------------------------------------------------------------
# Sort functions
# ---------------------------------------------------------------------------


def sort_history_length_alpha(candidates: list[str], ranker: HistoryRanker) -> list[str]:
    ranked = [_Ranked(history_length_key(ranker.rank(c), len(c)), c) for c in candidates]
    ranked.sort()
    return [r.text for r in ranked]


def sort_history_alpha(candidates: list[str], ranker: HistoryRanker) -> list[str]:
    ranked = [_Ranked(min(ranker.rank(c), MAX_RANK), c) for c in candidates]
    ranked.sort()
    return [r.text for r in ranked]


def sort_length_alpha(candidates: list[str], ranker: HistoryRanker) -> list[str]:
    return sorted(candidates, key=lambda c: (len(c), c))


def sort_alpha(candidates: list[str], ranker: HistoryRanker) -> list[str]:
    return sorted(candidates)


def sort_none(candidates: list[str], ranker: HistoryRanker) -> list[str]:
    return list(candidates)


SortFunction = Callable[[list[str], HistoryRanker], list[str]]

SORT_FUNCTIONS: dict[str, SortFunction] = {
    "history-length-alpha": sort_history_length_alpha,
    "history-alpha": sort_history_alpha,
    "length-alpha": sort_length_alpha,
    "alpha": sort_alpha,
    "none": sort_none,
}


# ---------------------------------------------------------------------------
# Default promotion and grouping
# ---------------------------------------------------------------------------


def promote_default(candidates: list[str], default: str | None) -> list[str]:
    """Move the first occurrence of *default* to the front."""
    if default is None:
        return list(candidates)
    try:
        index = candidates.index(default)
    except ValueError:
        return list(candidates)
    return [default, *candidates[:index], *candidates[index + 1 :]]


def group_candidates(
    candidates: list[str], classify: Callable[[str], str]
) -> list[tuple[str, list[str]]]:
    """Bucket *candidates* by label, in order of each label's first appearance."""
    groups: dict[str, list[str]] = {}
    for cand in candidates:
        groups.setdefault(classify(cand), []).append(cand)
    return list(groups.items())


def flatten_groups(groups: list[tuple[str, list[str]]]) -> list[str]:
    return [cand for _label, members in groups for cand in members]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def arrange_candidates(
    text: str,
    candidates: list[str],
    metadata: Metadata,
    ranker: HistoryRanker,
    settings: ChooseSettings,
) -> list[str]:
    """Filter, sort, promote and group already-matched *candidates*."""
    items = list(candidates)
    if metadata.category == "file":
        items = [c for c in items if c not in FILE_SENTINELS]

    if len(items) > settings.sort_threshold:
        logger.debug("Not sorting %d candidates (threshold %d)", len(items), settings.sort_threshold)
    elif metadata.sort is not None:
        items = list(metadata.sort(items))
    else:
        if settings.sort_function.startswith("history"):
            ranker.update(text)
        items = SORT_FUNCTIONS[settings.sort_function](items, ranker)

    items = promote_default(items, metadata.default)

    if metadata.group is not None:
        items = flatten_groups(group_candidates(items, metadata.group))
    return items


async def compute_candidates(
    text: str,
    matcher: Matcher,
    metadata: Metadata,
    ranker: HistoryRanker,
    settings: ChooseSettings,
    predicate: Predicate | None = None,
) -> CandidateSet | None:
    """Run the full pipeline for *text*.

    Returns ``None`` when the matcher is unavailable.
    """
    result = matcher.match(text, predicate)
    if inspect.isawaitable(result):
        result = await result
    if result is None:
        return None

    items = arrange_candidates(text, list(result.candidates), metadata, ranker, settings)
    base = max(0, min(result.base, len(text)))
    logger.debug("Recomputed %r: %d candidates, base %d", text, len(items), base)
    return CandidateSet(base=base, total=len(items), items=items)
