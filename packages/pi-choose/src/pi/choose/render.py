"""Window renderer: turns the session state into decoration lines.

The renderer is pure. It describes what to paint (group headers, candidate
rows, the count indicator and whether the prompt itself is selected) and
leaves painting to the host surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol

from pi.choose.candidates import CandidateSet
from pi.choose.selection import clamp
from pi.choose.settings import ChooseSettings
from pi.choose.sources import Metadata
from pi.choose.text import normalize_candidate


class ChooseTheme(Protocol):
    current: Callable[[str], str]
    prompt_selected: Callable[[str], str]
    group_title: Callable[[str], str]
    annotation: Callable[[str], str]
    count: Callable[[str], str]


def _identity(text: str) -> str:
    return text


@dataclass
class Theme:
    """A ``ChooseTheme`` built from plain styling functions."""

    current: Callable[[str], str] = _identity
    prompt_selected: Callable[[str], str] = _identity
    group_title: Callable[[str], str] = _identity
    annotation: Callable[[str], str] = _identity
    count: Callable[[str], str] = _identity


PLAIN_THEME = Theme()

DEFAULT_THEME = Theme(
    current=lambda s: f"\x1b[7m{s}\x1b[27m",
    prompt_selected=lambda s: f"\x1b[4m{s}\x1b[24m",
    group_title=lambda s: f"\x1b[1;35m{s}\x1b[0m",
    annotation=lambda s: f"\x1b[2m{s}\x1b[22m",
    count=lambda s: f"\x1b[2m{s}\x1b[22m",
)


@dataclass
class RenderedRow:
    index: int
    candidate: str
    line: str
    group: str | None = None


@dataclass
class Rendered:
    start: int = 0
    end: int = 0
    rows: list[RenderedRow] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)
    count: str | None = None
    prompt_selected: bool = False


def window_bounds(index: int, total: int, page_size: int) -> tuple[int, int]:
    """Visible ``[start, end)`` slice keeping *index* vertically centred."""
    page_size = max(page_size, 1)
    start = clamp(index - page_size // 2, 0, max(0, total - page_size))
    return start, min(start + page_size, total)


def format_count(
    index: int, total: int, count_format: tuple[str, str] | None
) -> str | None:
    if count_format is None:
        return None
    outer, inner = count_format
    current = "*" if index < 0 else str(index + 1)
    return outer.format(inner.format(current, total))


class WindowRenderer:
    """Renders the visible page of candidates around the cursor."""

    def __init__(self, settings: ChooseSettings, theme: ChooseTheme | None = None) -> None:
        self._settings = settings
        self._theme = theme if theme is not None else PLAIN_THEME

    def _affixate(self, candidates: list[str], metadata: Metadata) -> list[tuple[str, str, str]]:
        if metadata.affixate is not None:
            return [tuple(t) for t in metadata.affixate(candidates)]  # type: ignore[misc]
        if metadata.annotate is not None:
            triples: list[tuple[str, str, str]] = []
            for cand in candidates:
                suffix = metadata.annotate(cand) or ""
                triples.append((cand, "", self._theme.annotation(suffix) if suffix else ""))
            return triples
        return [(cand, "", "") for cand in candidates]

    def render(
        self,
        candidates: CandidateSet,
        index: int,
        metadata: Metadata,
        *,
        match_required: bool = False,
    ) -> Rendered:
        settings = self._settings
        theme = self._theme
        total = len(candidates.items)
        start, end = window_bounds(index, total, settings.page_size)
        visible = candidates.items[start:end]

        group_fun = metadata.group
        group_format = settings.group_format
        prev_title: str | None = None

        count = format_count(index, candidates.total, settings.count_format)
        rendered = Rendered(
            start=start,
            end=end,
            count=theme.count(count) if count is not None else None,
            prompt_selected=index < 0 and not match_required,
        )

        for offset, (text, prefix, suffix) in enumerate(self._affixate(visible, metadata)):
            row_index = start + offset
            cand = visible[offset]
            title = group_fun(cand) if group_fun is not None else None

            if group_format is not None and group_fun is not None and title != prev_title:
                rendered.lines.append(theme.group_title(group_format.format(title)))
            prev_title = title

            if group_fun is not None and metadata.group_transform is not None:
                text = metadata.group_transform(text)
            line = prefix + normalize_candidate(text, settings.newline_glyph) + suffix
            if row_index == index:
                line = theme.current(line)

            rendered.rows.append(RenderedRow(index=row_index, candidate=cand, line=line, group=title))
            rendered.lines.append(line)

        return rendered
