"""Candidate sources: the matcher and metadata interfaces plus two matchers.

A matcher turns the current input into the full list of matching candidate
strings and a *base* offset: the length of the input prefix that candidates
are appended to (e.g. the directory part of a path). Candidates never
include that prefix.
"""

from __future__ import annotations

import os
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

Predicate = Callable[[str], bool]


@dataclass
class MatchResult:
    """Everything the matcher found for one input snapshot."""

    candidates: list[str]
    base: int = 0


class Matcher(Protocol):
    """Protocol for matchers.

    ``match`` may return its result directly or an awaitable; ``None`` means
    the matcher is unavailable, which aborts the session.
    """

    def match(
        self, text: str, predicate: Predicate | None = None
    ) -> MatchResult | None | Awaitable[MatchResult | None]:
        ...

    def contains(self, text: str, predicate: Predicate | None = None) -> bool:
        """Whether *text* is itself a valid completion."""
        ...


@dataclass
class Metadata:
    """Optional per-session hooks describing how candidates are presented.

    Every hook may be left unset.
    """

    category: str | None = None
    annotate: Callable[[str], str | None] | None = None
    affixate: Callable[[list[str]], list[tuple[str, str, str]]] | None = None
    group: Callable[[str], str] | None = None
    group_transform: Callable[[str], str] | None = None
    sort: Callable[[list[str]], list[str]] | None = None
    default: str | None = None


# ---------------------------------------------------------------------------
# CompletionTable
# ---------------------------------------------------------------------------


@dataclass
class CompletionTable:
    """Matches a fixed collection of strings by prefix or substring."""

    collection: Sequence[str]
    ignore_case: bool = False
    style: str = "substring"  # "substring" or "prefix"
    metadata: Metadata = field(default_factory=Metadata)

    def _fold(self, text: str) -> str:
        return text.lower() if self.ignore_case else text

    def match(self, text: str, predicate: Predicate | None = None) -> MatchResult:
        needle = self._fold(text)
        if self.style == "prefix":
            hits = [c for c in self.collection if self._fold(c).startswith(needle)]
        else:
            hits = [c for c in self.collection if needle in self._fold(c)]
        if predicate is not None:
            hits = [c for c in hits if predicate(c)]
        return MatchResult(candidates=hits, base=0)

    def contains(self, text: str, predicate: Predicate | None = None) -> bool:
        folded = self._fold(text)
        return any(
            self._fold(c) == folded and (predicate is None or predicate(c))
            for c in self.collection
        )


# ---------------------------------------------------------------------------
# FileMatcher
# ---------------------------------------------------------------------------


def _expand(path: str) -> str:
    return os.path.expanduser(os.path.expandvars(path))


class FileMatcher:
    """Completes file names in the directory named by the input.

    The base offset covers everything up to the last separator, so
    candidates are bare entry names. Directories carry a trailing
    separator, and the ``./`` and ``../`` entries are always offered.
    """

    def __init__(self, root: str | None = None) -> None:
        self._root = root if root is not None else os.getcwd()
        self.metadata = Metadata(category="file")

    def _search_dir(self, dir_part: str) -> str:
        expanded = _expand(dir_part)
        if os.path.isabs(expanded):
            return expanded or os.sep
        return os.path.join(self._root, expanded)

    def _entries(self, search_dir: str) -> Iterable[str]:
        yield "." + os.sep
        yield ".." + os.sep
        try:
            with os.scandir(search_dir) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError:
            return
        for entry in entries:
            is_directory = entry.is_dir(follow_symlinks=False)
            if not is_directory and entry.is_symlink():
                is_directory = os.path.isdir(os.path.join(search_dir, entry.name))
            yield entry.name + os.sep if is_directory else entry.name

    def match(self, text: str, predicate: Predicate | None = None) -> MatchResult:
        base = text.rfind(os.sep) + 1
        dir_part, file_part = text[:base], text[base:]
        search_dir = self._search_dir(dir_part)

        hits = [
            name
            for name in self._entries(search_dir)
            if name.startswith(file_part) and (predicate is None or predicate(name))
        ]
        return MatchResult(candidates=hits, base=base)

    def contains(self, text: str, predicate: Predicate | None = None) -> bool:
        if not text:
            return False
        expanded = _expand(text)
        if not os.path.isabs(expanded):
            expanded = os.path.join(self._root, expanded)
        if not os.path.exists(expanded):
            return False
        return predicate is None or predicate(os.path.basename(text.rstrip(os.sep)))
