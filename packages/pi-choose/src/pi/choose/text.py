"""Display text helpers: invisible-span stripping, width measurement, truncation.

Candidate strings may carry terminal markup from the matcher's highlighting.
Styling (SGR) codes are kept, but concealed spans (``ESC[8m`` .. ``ESC[28m``
or a reset) are dropped entirely, and hyperlink/APC wrappers are reduced to
the text they wrap, so only the effective visible text counts towards width.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# OSC 8 hyperlink wrappers and APC payloads carry no visible text
_WRAPPER_RE = re.compile(r"\x1b\]8;[^\x07\x1b]*(?:\x07|\x1b\\)|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)")
_STRIP_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"
    r"|\x1b\]8;[^\x07\x1b]*(?:\x07|\x1b\\)"
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"
)
_SGR_RE = re.compile(r"\x1b\[([0-9;]*)m")
# Colour selectors whose arguments follow as extra parameters (5;n or 2;r;g;b)
_EXTENDED_COLOURS = frozenset({"38", "48", "58"})

_BLANKS_RE = re.compile(r"[ \t]+")
_NEWLINES_RE = re.compile(r"(?:\r?\n)+")

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def strip_ansi(text: str) -> str:
    return _STRIP_RE.sub("", text)


def _drop_conceal(params: str, concealed: bool) -> tuple[list[str], bool]:
    """Remove conceal (8) and reveal (28) from an SGR parameter list.

    Returns the remaining parameters and the conceal state after the code.
    """
    codes = params.split(";")
    kept: list[str] = []
    i = 0
    while i < len(codes):
        code = codes[i]
        if code in _EXTENDED_COLOURS and i + 1 < len(codes):
            step = {"5": 3, "2": 5}.get(codes[i + 1], 1)
            kept.extend(codes[i : i + step])
            i += step
            continue
        if code == "8":
            concealed = True
        elif code == "28":
            concealed = False
        else:
            if code in ("", "0"):
                concealed = False
            kept.append(code)
        i += 1
    return kept, concealed


def _strip_concealed(text: str) -> str:
    out: list[str] = []
    concealed = False
    pos = 0
    for match in _SGR_RE.finditer(text):
        if not concealed:
            out.append(text[pos : match.start()])
        kept, concealed = _drop_conceal(match.group(1), concealed)
        if kept:
            out.append("\x1b[" + ";".join(kept) + "m")
        pos = match.end()
    if not concealed:
        out.append(text[pos:])
    return "".join(out)


def strip_invisible(text: str) -> str:
    """Drop concealed spans and non-printing wrappers, keeping SGR styling.

    Concealed text runs from an SGR code carrying 8 until one carrying 28 or
    a full reset.
    """
    if "\x1b" not in text:
        return text
    return _WRAPPER_RE.sub("", _strip_concealed(text))


def normalize_candidate(text: str, newline_glyph: str = "⤶") -> str:
    """Squash a candidate onto one display line."""
    text = strip_invisible(text)
    text = _NEWLINES_RE.sub(newline_glyph, text)
    text = _BLANKS_RE.sub(" ", text)
    return text.strip()


# ---------------------------------------------------------------------------
# Width
# ---------------------------------------------------------------------------


def _grapheme_width(g: str) -> int:
    """Terminal width of a single grapheme cluster (emoji count as 2)."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        # VS16, ZWJ, skin tone modifiers, regional indicators
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first).startswith("M") or unicodedata.category(first) == "Cf":
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def visible_width(text: str) -> int:
    """Visible terminal width of *text*, ignoring escape sequences."""
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


def _take_columns(text: str, max_cols: int) -> str:
    """Longest prefix of *text* fitting in *max_cols*, keeping escape codes."""
    result: list[str] = []
    cols = 0
    pos = 0
    for match in _STRIP_RE.finditer(text):
        cols, done = _take_plain(text[pos : match.start()], max_cols, cols, result)
        if done:
            return "".join(result)
        result.append(match.group())
        pos = match.end()
    _take_plain(text[pos:], max_cols, cols, result)
    return "".join(result)


def _take_plain(
    segment: str, max_cols: int, cols: int, out: list[str]
) -> tuple[int, bool]:
    for g in grapheme.graphemes(segment):
        w = _grapheme_width(g)
        if cols + w > max_cols:
            return cols, True
        out.append(g)
        cols += w
    return cols, False


def truncate_to_width(text: str, max_width: int, ellipsis: str = "…") -> str:
    """Truncate *text* to *max_width* columns, ending in *ellipsis* when cut."""
    if max_width <= 0:
        return ""

    if visible_width(text) <= max_width:
        return text

    target_width = max_width - visible_width(ellipsis)
    if target_width <= 0:
        return _take_columns(ellipsis, max_width)

    result = _take_columns(text, target_width) + ellipsis
    # Close any styling left open by the cut
    if "\x1b[" in result:
        result += "\x1b[0m"
    return result
