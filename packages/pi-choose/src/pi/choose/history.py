"""History ranking: maps candidates to their recency in the session history.

Lower rank means more recent. Candidates that never appear in the history
get ``UNSEEN``, which sorts after every real history entry.

For path-like histories the table is scoped to a directory: the directory
portion of the current input is stripped from every history entry, and the
remainder is cut after its first path separator so ``src/pi/x.py`` ranks
the candidate ``src/``. Changing directory rebuilds the table.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence

logger = logging.getLogger(__name__)

UNSEEN = 0xFFFF


def resolve_scope(text: str) -> str:
    """Return the directory part of *text* after ``$VAR`` and ``~`` expansion.

    The result always ends with a separator, or is empty when *text* has no
    directory part.
    """
    expanded = os.path.expanduser(os.path.expandvars(text))
    directory = os.path.dirname(expanded)
    if not directory:
        return ""
    return directory if directory.endswith(os.sep) else directory + os.sep


def _abbreviate(directory: str) -> str | None:
    home = os.path.expanduser("~")
    if home and home != "~" and directory.startswith(home.rstrip(os.sep) + os.sep):
        return "~" + directory[len(home.rstrip(os.sep)) :]
    return None


class HistoryRanker:
    """Builds and caches a candidate -> rank table from a history list.

    The history is ordered most recent first. ``enabled=False`` (or no
    history at all) makes every candidate rank ``UNSEEN``.
    """

    def __init__(
        self,
        history: Sequence[str] | None = None,
        *,
        path_like: bool = False,
        enabled: bool = True,
    ) -> None:
        self._history = history
        self._path_like = path_like
        self._enabled = enabled
        self._table: dict[str, int] | None = None
        self._scope: str | None = None

    @property
    def scope(self) -> str | None:
        return self._scope

    @property
    def table(self) -> dict[str, int]:
        return self._table if self._table is not None else {}

    def update(self, text: str = "") -> dict[str, int]:
        """Bring the table up to date for the current input *text*."""
        if self._path_like:
            scope = resolve_scope(text)
            if self._table is None or scope != self._scope:
                self._scope = scope
                self._table = self._build_path_table(scope)
                logger.debug(
                    "Rebuilt rank table for %r (%d entries)", scope, len(self._table)
                )
        elif self._table is None:
            self._table = self._build_table()
        return self._table

    def rank(self, candidate: str) -> int:
        if self._table is None:
            return UNSEEN
        return self._table.get(candidate, UNSEEN)

    def invalidate(self) -> None:
        self._table = None
        self._scope = None

    def _entries(self) -> Sequence[str]:
        if not self._enabled or not self._history:
            return ()
        return self._history

    def _build_table(self) -> dict[str, int]:
        table: dict[str, int] = {}
        for index, entry in enumerate(self._entries()):
            # First occurrence is the most recent one
            table.setdefault(entry, index)
        return table

    def _build_path_table(self, scope: str) -> dict[str, int]:
        prefixes = [scope] if scope else [""]
        abbreviated = _abbreviate(scope) if scope else None
        if abbreviated:
            prefixes.append(abbreviated)

        table: dict[str, int] = {}
        for index, entry in enumerate(self._entries()):
            for prefix in prefixes:
                if prefix and not (len(entry) > len(prefix) and entry.startswith(prefix)):
                    continue
                rest = entry[len(prefix) :]
                sep = rest.find(os.sep)
                if sep != -1:
                    rest = rest[: sep + 1]
                if rest:
                    table.setdefault(rest, index)
                break
        return table
