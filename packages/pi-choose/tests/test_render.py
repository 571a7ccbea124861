"""Tests for pi.choose.render -- the window renderer."""

from __future__ import annotations

from pi.choose.candidates import CandidateSet
from pi.choose.render import Theme, WindowRenderer, format_count, window_bounds
from pi.choose.settings import ChooseSettings
from pi.choose.sources import Metadata

_MARK_THEME = Theme(
    current=lambda s: f"[{s}]",
    annotation=lambda s: f"<{s}>",
    group_title=lambda s: f"#{s}",
)


def _set(*items: str) -> CandidateSet:
    return CandidateSet(base=0, total=len(items), items=list(items))


def _renderer(**settings) -> WindowRenderer:
    return WindowRenderer(ChooseSettings(**settings), _MARK_THEME)


class TestWindowBounds:
    """The window keeps the cursor centred except near the ends."""

    def test_top(self) -> None:
        assert window_bounds(0, 100, 10) == (0, 10)

    def test_middle(self) -> None:
        assert window_bounds(50, 100, 10) == (45, 55)

    def test_bottom(self) -> None:
        assert window_bounds(99, 100, 10) == (90, 100)

    def test_short_list(self) -> None:
        assert window_bounds(3, 5, 10) == (0, 5)

    def test_prompt(self) -> None:
        assert window_bounds(-1, 5, 3) == (0, 3)

    def test_empty(self) -> None:
        assert window_bounds(-1, 0, 10) == (0, 0)

    def test_cursor_always_visible(self) -> None:
        for page in range(1, 6):
            for total in range(1, 20):
                for index in range(total):
                    start, end = window_bounds(index, total, page)
                    assert start <= index < end
                    assert end - start == min(page, total)


class TestFormatCount:
    """The count indicator shows position and total."""

    def test_position_is_one_based(self) -> None:
        assert format_count(4, 10, ("{}", "{}/{}")) == "5/10"

    def test_prompt_shows_star(self) -> None:
        assert format_count(-1, 3, ("{}", "{}/{}")) == "*/3"

    def test_default_format_pads(self) -> None:
        count = format_count(0, 3, ChooseSettings().count_format)
        assert count is not None
        assert count.startswith("1/3")
        assert len(count) == 7

    def test_disabled(self) -> None:
        assert format_count(0, 3, None) is None


class TestRenderRows:
    """Rows, highlighting and the prompt state."""

    def test_visible_slice_around_cursor(self) -> None:
        rendered = _renderer(page_size=3).render(_set("a", "b", "c", "d", "e"), 2, Metadata())
        assert [row.index for row in rendered.rows] == [1, 2, 3]
        assert rendered.lines == ["b", "[c]", "d"]

    def test_only_current_row_is_highlighted(self) -> None:
        rendered = _renderer().render(_set("a", "b"), 0, Metadata())
        assert rendered.lines == ["[a]", "b"]

    def test_prompt_selected_when_allowed(self) -> None:
        rendered = _renderer().render(_set("a"), -1, Metadata())
        assert rendered.prompt_selected is True
        assert rendered.lines == ["a"]

    def test_prompt_not_highlighted_when_match_required(self) -> None:
        rendered = _renderer().render(_set(), -1, Metadata(), match_required=True)
        assert rendered.prompt_selected is False

    def test_empty_set_renders_nothing(self) -> None:
        rendered = _renderer().render(_set(), -1, Metadata())
        assert rendered.lines == []
        assert rendered.count is not None
        assert rendered.count.startswith("*/0")

    def test_count_uses_total(self) -> None:
        rendered = _renderer(count_format=("{}", "{}/{}")).render(_set("a", "b", "c"), 1, Metadata())
        assert rendered.count == "2/3"

    def test_candidates_are_normalized(self) -> None:
        rendered = _renderer().render(_set("two\nlines  here"), -1, Metadata())
        assert rendered.lines == ["two⤶lines here"]

    def test_row_keeps_raw_candidate(self) -> None:
        rendered = _renderer().render(_set("two\nlines"), 0, Metadata())
        assert rendered.rows[0].candidate == "two\nlines"

    def test_cursor_row_always_rendered(self) -> None:
        items = [f"c{i}" for i in range(37)]
        renderer = _renderer(page_size=7)
        for index in range(len(items)):
            rendered = renderer.render(_set(*items), index, Metadata())
            assert f"[c{index}]" in rendered.lines


class TestAnnotations:
    """Affixation wins over annotation, which wins over bare text."""

    def test_annotation_becomes_styled_suffix(self) -> None:
        metadata = Metadata(annotate=lambda c: f" ({len(c)})")
        rendered = _renderer().render(_set("ab"), -1, metadata)
        assert rendered.lines == ["ab< (2)>"]

    def test_empty_annotation_is_not_styled(self) -> None:
        metadata = Metadata(annotate=lambda c: None)
        rendered = _renderer().render(_set("ab"), -1, metadata)
        assert rendered.lines == ["ab"]

    def test_affixation_preferred(self) -> None:
        metadata = Metadata(
            annotate=lambda c: "ignored",
            affixate=lambda cands: [(c, "> ", " <") for c in cands],
        )
        rendered = _renderer().render(_set("ab"), 0, metadata)
        assert rendered.lines == ["[> ab <]"]

    def test_affixation_sees_only_visible_candidates(self) -> None:
        seen: list[list[str]] = []

        def affixate(cands: list[str]) -> list[tuple[str, str, str]]:
            seen.append(list(cands))
            return [(c, "", "") for c in cands]

        _renderer(page_size=2).render(_set("a", "b", "c", "d"), 3, Metadata(affixate=affixate))
        assert seen == [["c", "d"]]


class TestGroups:
    """Group headers appear where the group changes."""

    def test_headers_between_groups(self) -> None:
        metadata = Metadata(group=lambda c: c[0])
        rendered = _renderer(group_format="-- {} --").render(_set("a1", "a2", "b1"), -1, metadata)
        assert rendered.lines == ["#-- a --", "a1", "a2", "#-- b --", "b1"]

    def test_first_visible_row_gets_header(self) -> None:
        metadata = Metadata(group=lambda c: c[0])
        rendered = _renderer(page_size=2, group_format="{}").render(
            _set("a1", "a2", "a3", "a4", "b1"), 4, metadata
        )
        assert rendered.lines == ["#a", "a4", "#b", "[b1]"]

    def test_headers_disabled(self) -> None:
        metadata = Metadata(group=lambda c: c[0])
        rendered = _renderer(group_format=None).render(_set("a1", "b1"), -1, metadata)
        assert rendered.lines == ["a1", "b1"]

    def test_rows_record_their_group(self) -> None:
        metadata = Metadata(group=lambda c: c[0])
        rendered = _renderer().render(_set("a1", "b1"), -1, metadata)
        assert [row.group for row in rendered.rows] == ["a", "b"]

    def test_group_transform_changes_display_only(self) -> None:
        metadata = Metadata(group=lambda c: c.split(":")[0], group_transform=lambda c: c.split(":")[1])
        rendered = _renderer(group_format=None).render(_set("fruit:apple"), 0, metadata)
        assert rendered.lines == ["[apple]"]
        assert rendered.rows[0].candidate == "fruit:apple"
