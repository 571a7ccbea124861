"""Selection cursor over the ordered candidates.

``index >= 0`` selects ``items[index]``; ``index == -1`` selects the raw
input (the prompt). When a match is required and there are candidates, the
prompt can never be selected.
"""

from __future__ import annotations

from dataclasses import dataclass

PROMPT = -1


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


@dataclass
class Selection:
    index: int = PROMPT
    keep: bool = False

    @staticmethod
    def floor(total: int, match_required: bool) -> int:
        return 0 if match_required and total > 0 else PROMPT

    @property
    def at_prompt(self) -> bool:
        return self.index < 0

    def start(self, total: int, match_required: bool) -> None:
        self.keep = False
        self.index = 0 if match_required and total > 0 else PROMPT

    def goto(self, target: int, total: int, match_required: bool) -> None:
        self.keep = True
        self.index = clamp(target, self.floor(total, match_required), total - 1)

    def reconcile(
        self,
        old_items: list[str],
        new_items: list[str],
        match_required: bool,
    ) -> None:
        """Carry the cursor over to a freshly computed candidate list."""
        previous = (
            old_items[self.index] if 0 <= self.index < len(old_items) else None
        )
        if self.keep and self.index < 0:
            pass
        elif self.keep and previous is not None and previous in new_items:
            self.index = new_items.index(previous)
        else:
            self.keep = False
            self.index = 0 if new_items else PROMPT

        floor = self.floor(len(new_items), match_required)
        if self.index < floor:
            self.index = floor
