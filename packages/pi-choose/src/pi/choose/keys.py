"""Raw terminal input -> key identifiers.

Only legacy (non-kitty) sequences are recognised. Identifiers use the
``"ctrl+n"`` / ``"alt+<"`` / ``"pageDown"`` format the keymap expects.
"""

from __future__ import annotations

_LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[Z": "shift+tab",
}

_SINGLE_KEYS: dict[str, str] = {
    "\x1b": "escape",
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    " ": "space",
    "\x7f": "backspace",
    "\x08": "backspace",
}


def parse_key(data: str) -> str | None:
    """Return the key identifier for *data*, or ``None`` if unrecognised."""
    if not data:
        return None

    if data in _LEGACY_KEY_SEQUENCES:
        return _LEGACY_KEY_SEQUENCES[data]
    if data in _SINGLE_KEYS:
        return _SINGLE_KEYS[data]

    # Ctrl + letter
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # Alt + key (ESC prefix)
    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key(data[1])
        if inner is not None and len(data[1]) == 1 and not data[1].isprintable():
            return "alt+" + inner
        if data[1].isprintable():
            return "alt+" + data[1]

    if len(data) == 1 and data.isprintable():
        return data

    return None


def is_printable_input(data: str) -> bool:
    """Whether *data* is plain text to insert rather than a control key."""
    return bool(data) and "\x1b" not in data and data.isprintable()
