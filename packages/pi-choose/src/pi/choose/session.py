"""Chooser session: candidate state, selection and the commands acting on them.

One ``Session`` lives for one interactive read. Every input change goes
through ``update()`` (recompute + cursor reconciliation), every keystroke
that moves the cursor goes through ``goto()``, and the session ends either
with a committed string from ``accept_current()`` or with
``CompletionAborted``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from pi.choose.candidates import CandidateSet, compute_candidates
from pi.choose.history import HistoryRanker
from pi.choose.host import HostSurface
from pi.choose.kill_ring import KillRing, get_kill_ring
from pi.choose.render import ChooseTheme, Rendered, WindowRenderer
from pi.choose.selection import Selection
from pi.choose.settings import ChooseSettings
from pi.choose.sources import Matcher, Metadata, Predicate

logger = logging.getLogger(__name__)


class CompletionAborted(Exception):
    """The session ended without a commit (cancelled or matcher failure)."""


AcceptStatus = Literal["committed", "confirm", "rejected"]


@dataclass
class AcceptResult:
    status: AcceptStatus
    value: str | None = None

    @property
    def done(self) -> bool:
        return self.status == "committed"


class Session:
    """State of one interactive completion session."""

    def __init__(
        self,
        surface: HostSurface,
        matcher: Matcher,
        *,
        metadata: Metadata | None = None,
        history: Sequence[str] | None = None,
        path_history: bool = False,
        history_enabled: bool = True,
        require_match: bool = False,
        predicate: Predicate | None = None,
        settings: ChooseSettings | None = None,
        theme: ChooseTheme | None = None,
        kill_ring: KillRing | None = None,
        ranker: HistoryRanker | None = None,
    ) -> None:
        self._surface = surface
        self._matcher = matcher
        if metadata is None:
            metadata = getattr(matcher, "metadata", None) or Metadata()
        self._metadata = metadata
        self._settings = settings if settings is not None else ChooseSettings()
        self._ranker = (
            ranker
            if ranker is not None
            else HistoryRanker(history, path_like=path_history, enabled=history_enabled)
        )
        self._renderer = WindowRenderer(self._settings, theme)
        self._require_match = require_match
        self._predicate = predicate
        self._kill_ring = kill_ring

        self._candidates = CandidateSet()
        self._selection = Selection()
        self._input: str | None = None
        self._generation = 0
        self._started = False
        self._active = True
        self._confirm_pending = False

    # --- State ---

    @property
    def settings(self) -> ChooseSettings:
        return self._settings

    @property
    def metadata(self) -> Metadata:
        return self._metadata

    @property
    def match_required(self) -> bool:
        return self._require_match

    @property
    def active(self) -> bool:
        return self._active

    @property
    def index(self) -> int:
        return self._selection.index

    @property
    def keep(self) -> bool:
        return self._selection.keep

    @property
    def total(self) -> int:
        return self._candidates.total

    @property
    def base(self) -> int:
        return self._candidates.base

    @property
    def items(self) -> list[str]:
        return self._candidates.items

    @property
    def confirm_pending(self) -> bool:
        return self._confirm_pending

    # --- Recompute ---

    async def update(self, *, force: bool = False) -> bool:
        """Recompute candidates if the input changed.

        Returns ``True`` when a new candidate set was applied. A recompute
        overtaken by a newer ``update()`` or by pending input is discarded.
        """
        text = self._surface.current_text()
        if not force and text == self._input:
            return False

        self._generation += 1
        generation = self._generation
        try:
            result = await compute_candidates(
                text,
                self._matcher,
                self._metadata,
                self._ranker,
                self._settings,
                self._predicate,
            )
        except KeyboardInterrupt:
            self._teardown()
            raise CompletionAborted("Quit") from None
        except asyncio.CancelledError:
            self._teardown()
            raise

        if generation != self._generation or self._surface.input_pending():
            logger.debug("Discarding superseded recompute for %r", text)
            return False
        if result is None:
            self._teardown()
            raise CompletionAborted("Matcher unavailable")

        old_items = self._candidates.items
        self._candidates = result
        self._input = text
        self._confirm_pending = False
        if self._started:
            self._selection.reconcile(old_items, result.items, self._require_match)
        else:
            self._selection.start(result.total, self._require_match)
            self._started = True
        return True

    # --- Rendering ---

    def render(self) -> Rendered:
        return self._renderer.render(
            self._candidates,
            self._selection.index,
            self._metadata,
            match_required=self._require_match,
        )

    def paint(self) -> Rendered:
        rendered = self.render()
        self._surface.paint_decoration("count", rendered.count or "")
        self._surface.paint_decoration("candidates", "\n".join(rendered.lines))
        self._surface.set_prompt_selected(rendered.prompt_selected)
        self._surface.set_ellipsis(self._settings.ellipsis)
        return rendered

    # --- Navigation ---

    def goto(self, index: int) -> None:
        self._confirm_pending = False
        self._selection.goto(index, self.total, self._require_match)

    def first(self) -> None:
        self.goto(0)

    def last(self) -> None:
        self.goto(self.total - 1)

    def page_up(self) -> None:
        self.goto(self.index - self._settings.page_size)

    def page_down(self) -> None:
        self.goto(self.index + self._settings.page_size)

    def next(self, n: int = 1) -> None:
        index = self.index + n
        if self._settings.cycle:
            if self.total == 0:
                index = -1
            elif not self._require_match:
                # Cycle through the prompt as well
                index = (index + 1) % (self.total + 1) - 1
            else:
                index %= self.total
        self.goto(index)

    def previous(self, n: int = 1) -> None:
        self.next(-n)

    # --- Candidate access ---

    def candidate(self) -> str:
        """The string that would be committed for the current selection."""
        text = self._surface.current_text()
        if self._selection.at_prompt:
            return text
        return text[: self.base] + self.items[self.index]

    def current_candidate(self) -> str | None:
        if not self._active or not self._started:
            return None
        return self.candidate()

    def current_candidate_set(self) -> CandidateSet | None:
        if not self._active or not self._started:
            return None
        return CandidateSet(base=self.base, total=self.total, items=list(self.items))

    # --- Commands ---

    def insert_current(self) -> None:
        self._surface.replace_completable_region(self.candidate())

    def accept_current(self, force_raw_input: bool = False) -> AcceptResult:
        if not force_raw_input:
            self.insert_current()
        text = self._surface.current_text()
        policy = self._surface.confirm_policy()

        if (
            not self._require_match
            or policy == "confirm-after-completion"
            or text == ""
            or self._matcher.contains(text, self._predicate)
        ):
            return self._commit(text)

        if policy == "confirm":
            if self._confirm_pending:
                return self._commit(text)
            self._confirm_pending = True
            self._surface.message("Confirm")
            return AcceptResult(status="confirm")

        self._surface.message("Match required")
        return AcceptResult(status="rejected")

    def accept_raw_input(self) -> AcceptResult:
        return self.accept_current(force_raw_input=True)

    def copy_current(self) -> None:
        if self._surface.region_active():
            self._surface.copy_region()
            return
        ring = self._kill_ring if self._kill_ring is not None else get_kill_ring()
        ring.push(self.candidate())

    def cancel_confirmation(self) -> None:
        self._confirm_pending = False

    def abort(self, reason: str = "Quit") -> None:
        self._teardown()
        raise CompletionAborted(reason)

    def _commit(self, text: str) -> AcceptResult:
        logger.info(
            "Committed %s %r",
            "input" if self._selection.at_prompt else "candidate",
            text,
        )
        self._teardown()
        return AcceptResult(status="committed", value=text)

    def _teardown(self) -> None:
        self._surface.clear_decorations()
        self._candidates = CandidateSet()
        self._selection = Selection()
        self._input = None
        self._active = False
        self._confirm_pending = False
