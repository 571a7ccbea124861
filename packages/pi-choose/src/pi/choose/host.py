"""Host surface: the editable input the chooser decorates.

The chooser never edits decorations into the text itself. It paints two
independent anchors, ``"count"`` before the prompt and ``"candidates"``
after the input, and replaces the editable region only when inserting a
candidate.
"""

from __future__ import annotations

from typing import Literal, Protocol

from pi.choose.keys import is_printable_input, parse_key
from pi.choose.kill_ring import KillRing, get_kill_ring
from pi.choose.render import PLAIN_THEME, ChooseTheme
from pi.choose.text import truncate_to_width

Anchor = Literal["count", "candidates"]
ConfirmPolicy = Literal["none", "confirm", "confirm-after-completion"]


class HostSurface(Protocol):
    """Protocol for host surfaces."""

    def prompt_end(self) -> int: ...

    def buffer_end(self) -> int: ...

    def current_text(self) -> str: ...

    def replace_completable_region(self, text: str) -> None: ...

    def paint_decoration(self, anchor: Anchor, text: str) -> None: ...

    def clear_decorations(self) -> None: ...

    def set_prompt_selected(self, selected: bool) -> None: ...

    def set_ellipsis(self, ellipsis: str) -> None:
        """Marker to end painted rows the host has to cut to its width."""
        ...

    def confirm_policy(self) -> ConfirmPolicy: ...

    def input_pending(self) -> bool:
        """Whether a newer input event is already queued."""
        ...

    def message(self, text: str) -> None: ...

    def region_active(self) -> bool: ...

    def copy_region(self) -> None: ...


class BufferSurface:
    """In-memory host surface: a prompt followed by one editable line."""

    def __init__(
        self,
        prompt: str = "> ",
        text: str = "",
        *,
        confirm: ConfirmPolicy = "none",
        theme: ChooseTheme | None = None,
        ellipsis: str = "…",
        kill_ring: KillRing | None = None,
    ) -> None:
        self._prompt = prompt
        self._text = text
        self._confirm = confirm
        self._theme = theme if theme is not None else PLAIN_THEME
        self._ellipsis = ellipsis
        self._kill_ring = kill_ring
        self._decorations: dict[str, str] = {}
        self._prompt_selected = False
        self._region: tuple[int, int] | None = None
        self.pending = False
        self.messages: list[str] = []

    # --- HostSurface ---

    def prompt_end(self) -> int:
        return len(self._prompt)

    def buffer_end(self) -> int:
        return len(self._prompt) + len(self._text)

    def current_text(self) -> str:
        return self._text

    def replace_completable_region(self, text: str) -> None:
        self._text = text
        self._region = None

    def paint_decoration(self, anchor: Anchor, text: str) -> None:
        self._decorations[anchor] = text

    def clear_decorations(self) -> None:
        self._decorations.clear()
        self._prompt_selected = False

    def set_prompt_selected(self, selected: bool) -> None:
        self._prompt_selected = selected

    def set_ellipsis(self, ellipsis: str) -> None:
        self._ellipsis = ellipsis

    def confirm_policy(self) -> ConfirmPolicy:
        return self._confirm

    def input_pending(self) -> bool:
        return self.pending

    def message(self, text: str) -> None:
        self.messages.append(text)

    def region_active(self) -> bool:
        return self._region is not None

    def copy_region(self) -> None:
        if self._region is None:
            return
        start, end = self._region
        ring = self._kill_ring if self._kill_ring is not None else get_kill_ring()
        ring.push(self._text[start:end])
        self._region = None

    # --- Editing ---

    def decoration(self, anchor: Anchor) -> str:
        return self._decorations.get(anchor, "")

    @property
    def prompt_selected(self) -> bool:
        return self._prompt_selected

    def set_region(self, start: int, end: int) -> None:
        start, end = sorted((max(0, start), min(end, len(self._text))))
        self._region = (start, end) if start < end else None

    def handle_input(self, data: str) -> bool:
        """Apply an editing key. Returns ``False`` when *data* is not an edit."""
        key = parse_key(data)
        if key == "backspace":
            self._text = self._text[:-1]
        elif key == "ctrl+u":
            self._text = ""
        elif is_printable_input(data):
            self._text += data
        else:
            return False
        self._region = None
        return True

    def render(self, width: int) -> list[str]:
        text = self._theme.prompt_selected(self._text) if self._prompt_selected else self._text
        first = self._decorations.get("count", "") + self._prompt + text
        lines = [first]
        candidates = self._decorations.get("candidates", "")
        if candidates:
            lines.extend(candidates.split("\n"))
        return [truncate_to_width(line, width, self._ellipsis) for line in lines]
