"""pi-choose: incremental rank-and-render engine for interactive selection."""

# Candidate pipeline
from pi.choose.candidates import (
    SORT_FUNCTIONS,
    CandidateSet,
    compute_candidates,
    group_candidates,
    history_length_key,
    promote_default,
)

# History ranking
from pi.choose.history import UNSEEN, HistoryRanker

# Host surface
from pi.choose.host import BufferSurface, ConfirmPolicy, HostSurface

# Keys and keymap
from pi.choose.keymap import (
    DEFAULT_CHOOSE_KEYBINDINGS,
    ChooseAction,
    ChooseKeymap,
    get_choose_keymap,
    run_action,
    set_choose_keymap,
)
from pi.choose.keys import parse_key

# Clipboard
from pi.choose.kill_ring import KillRing, get_kill_ring, set_kill_ring

# Entry points
from pi.choose.read import choose, completing

# Rendering
from pi.choose.render import (
    DEFAULT_THEME,
    PLAIN_THEME,
    ChooseTheme,
    Rendered,
    RenderedRow,
    Theme,
    WindowRenderer,
    format_count,
    window_bounds,
)

# Selection
from pi.choose.selection import Selection

# Session
from pi.choose.session import AcceptResult, CompletionAborted, Session

# Settings
from pi.choose.settings import ChooseSettings, load_settings

# Sources
from pi.choose.sources import (
    CompletionTable,
    FileMatcher,
    Matcher,
    MatchResult,
    Metadata,
)

# Text utilities
from pi.choose.text import normalize_candidate, truncate_to_width, visible_width

__all__ = [
    # Candidates
    "SORT_FUNCTIONS",
    "CandidateSet",
    "compute_candidates",
    "group_candidates",
    "history_length_key",
    "promote_default",
    # History
    "UNSEEN",
    "HistoryRanker",
    # Host
    "BufferSurface",
    "ConfirmPolicy",
    "HostSurface",
    # Keys
    "DEFAULT_CHOOSE_KEYBINDINGS",
    "ChooseAction",
    "ChooseKeymap",
    "get_choose_keymap",
    "parse_key",
    "run_action",
    "set_choose_keymap",
    # Clipboard
    "KillRing",
    "get_kill_ring",
    "set_kill_ring",
    # Entry points
    "choose",
    "completing",
    # Rendering
    "DEFAULT_THEME",
    "PLAIN_THEME",
    "ChooseTheme",
    "Rendered",
    "RenderedRow",
    "Theme",
    "WindowRenderer",
    "format_count",
    "window_bounds",
    # Selection
    "Selection",
    # Session
    "AcceptResult",
    "CompletionAborted",
    "Session",
    # Settings
    "ChooseSettings",
    "load_settings",
    # Sources
    "CompletionTable",
    "FileMatcher",
    "MatchResult",
    "Matcher",
    "Metadata",
    # Text
    "normalize_candidate",
    "truncate_to_width",
    "visible_width",
]
