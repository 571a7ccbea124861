"""Chooser keybindings and action dispatch."""

from __future__ import annotations

from typing import Literal

from pi.choose.keys import parse_key
from pi.choose.session import AcceptResult, Session

ChooseAction = Literal[
    # Navigation
    "next",
    "previous",
    "first",
    "last",
    "pageUp",
    "pageDown",
    # Commit
    "insert",
    "accept",
    "acceptInput",
    "copy",
    # Exit
    "abort",
]

ChooseKeybindingsConfig = dict[ChooseAction, str | list[str]]

DEFAULT_CHOOSE_KEYBINDINGS: dict[ChooseAction, str | list[str]] = {
    "next": ["down", "ctrl+n"],
    "previous": ["up", "ctrl+p"],
    "first": ["alt+<", "home"],
    "last": ["alt+>", "end"],
    "pageUp": ["pageUp", "alt+v"],
    "pageDown": ["pageDown", "ctrl+v"],
    "insert": "tab",
    "accept": "enter",
    "acceptInput": "alt+enter",
    "copy": "alt+w",
    "abort": ["escape", "ctrl+g", "ctrl+c"],
}


class ChooseKeymap:
    """Maps key identifiers to chooser actions."""

    def __init__(self, config: ChooseKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[ChooseAction, list[str]] = {}
        self._key_to_action: dict[str, ChooseAction] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: ChooseKeybindingsConfig) -> None:
        self._action_to_keys.clear()
        self._key_to_action.clear()

        # Defaults first, so user bindings win on shared keys
        for source in (DEFAULT_CHOOSE_KEYBINDINGS, config):
            for action, keys in source.items():
                for old in self._action_to_keys.get(action, []):
                    if self._key_to_action.get(old) == action:
                        del self._key_to_action[old]
                key_array = keys if isinstance(keys, list) else [keys]
                self._action_to_keys[action] = list(key_array)
                for key in key_array:
                    self._key_to_action[key] = action

    def action_for(self, data: str) -> ChooseAction | None:
        """Action bound to raw input *data* (or to an already parsed key id)."""
        key = parse_key(data)
        if key is not None and key in self._key_to_action:
            return self._key_to_action[key]
        return self._key_to_action.get(data)

    def get_keys(self, action: ChooseAction) -> list[str]:
        return self._action_to_keys.get(action, [])

    def set_config(self, config: ChooseKeybindingsConfig) -> None:
        self._build_maps(config)


_global_choose_keymap: ChooseKeymap | None = None


def get_choose_keymap() -> ChooseKeymap:
    global _global_choose_keymap
    if _global_choose_keymap is None:
        _global_choose_keymap = ChooseKeymap()
    return _global_choose_keymap


def set_choose_keymap(keymap: ChooseKeymap) -> None:
    global _global_choose_keymap
    _global_choose_keymap = keymap


def run_action(session: Session, action: ChooseAction) -> AcceptResult | None:
    """Perform *action* on *session*.

    Returns the ``AcceptResult`` for commit actions and ``None`` otherwise.
    ``abort`` raises ``CompletionAborted``.
    """
    if action not in ("accept", "acceptInput"):
        session.cancel_confirmation()

    if action == "next":
        session.next()
    elif action == "previous":
        session.previous()
    elif action == "first":
        session.first()
    elif action == "last":
        session.last()
    elif action == "pageUp":
        session.page_up()
    elif action == "pageDown":
        session.page_down()
    elif action == "insert":
        session.insert_current()
    elif action == "accept":
        return session.accept_current()
    elif action == "acceptInput":
        return session.accept_raw_input()
    elif action == "copy":
        session.copy_current()
    elif action == "abort":
        session.abort()
    return None
