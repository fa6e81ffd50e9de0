"""Keyboard input parsing for terminal applications.

Turns raw terminal input into key identifiers such as ``"a"``,
``"ctrl+a"``, ``"shift+up"`` or ``"f5"``.  Key identifiers are what
:class:`tuikit.event.Event` carries and what global callbacks are bound to.
"""

from __future__ import annotations

ESC = "\x1b"

KeyId = str

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    # Special keys
    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    clear = "clear"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def f(n: int) -> str:
        return f"f{n}"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"

    @staticmethod
    def ctrl_shift(key: str) -> str:
        return f"ctrl+shift+{key}"

    @staticmethod
    def ctrl_alt(key: str) -> str:
        return f"ctrl+alt+{key}"


# ---------------------------------------------------------------------------
# Legacy escape sequences
# ---------------------------------------------------------------------------

LEGACY_KEY_SEQUENCES: dict[str, str] = {
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
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1bOP": "f1",
    "\x1bOQ": "f2",
    "\x1bOR": "f3",
    "\x1bOS": "f4",
    "\x1b[15~": "f5",
    "\x1b[17~": "f6",
    "\x1b[18~": "f7",
    "\x1b[19~": "f8",
    "\x1b[20~": "f9",
    "\x1b[21~": "f10",
    "\x1b[23~": "f11",
    "\x1b[24~": "f12",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[E": "clear",
    "\x1b[Z": "shift+tab",
}

# xterm modifier parameter -> key id prefix
_MODIFIER_PREFIXES: dict[int, str] = {
    2: "shift+",
    3: "alt+",
    4: "shift+alt+",
    5: "ctrl+",
    6: "ctrl+shift+",
    7: "ctrl+alt+",
    8: "ctrl+shift+alt+",
}

# CSI 1;<mod><final> keys
_LETTER_FINALS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

# CSI <n>;<mod>~ keys
_TILDE_NUMBERS: dict[int, str] = {
    2: "insert",
    3: "delete",
    5: "pageUp",
    6: "pageDown",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}


def _build_modified_sequences() -> dict[str, str]:
    table: dict[str, str] = {}
    for mod, prefix in _MODIFIER_PREFIXES.items():
        for final, name in _LETTER_FINALS.items():
            table[f"\x1b[1;{mod}{final}"] = prefix + name
        for number, name in _TILDE_NUMBERS.items():
            table[f"\x1b[{number};{mod}~"] = prefix + name
    return table


MODIFIED_KEY_SEQUENCES: dict[str, str] = _build_modified_sequences()

# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


def parse_key(data: str) -> KeyId | None:
    """Parse one complete input sequence and return its key id, or ``None``.

    The returned string uses the same format key bindings use:
    e.g. ``"a"``, ``"ctrl+a"``, ``"shift+up"``, ``"f5"``.
    """
    if not data:
        return None

    if data in MODIFIED_KEY_SEQUENCES:
        return MODIFIED_KEY_SEQUENCES[data]
    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    # --- Simple single-byte keys ---
    if data == ESC:
        return "escape"
    if data in ("\r", "\n"):
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data in ("\x7f", "\x08"):
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == ESC:
        ch = data[1]
        if ch == ESC:
            return "alt+escape"
        if ch in ("\r", "\n"):
            return "alt+enter"
        if ch == "\t":
            return "alt+tab"
        if ch == " ":
            return "alt+space"
        if ch in ("\x7f", "\x08"):
            return "alt+backspace"
        if 1 <= ord(ch) <= 26:
            return "ctrl+alt+" + chr(ord(ch) + ord("a") - 1)
        if ch.isupper():
            return "shift+alt+" + ch.lower()
        if ch.isprintable():
            return "alt+" + ch

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return data

    return None


# ---------------------------------------------------------------------------
# Sequence splitting
# ---------------------------------------------------------------------------


def _sequence_length(data: str) -> int | None:
    """Length of the escape sequence at the start of *data*.

    Returns ``None`` when *data* holds only the beginning of a sequence.
    """
    if len(data) == 1:
        return None

    introducer = data[1]
    if introducer == "[":
        # CSI: parameters, then a final byte in 0x40..0x7E
        for i in range(2, len(data)):
            if 0x40 <= ord(data[i]) <= 0x7E:
                return i + 1
        return None
    if introducer == "O":
        return 3 if len(data) >= 3 else None
    # Meta key: ESC followed by a single character
    return 2


def split_sequences(data: str, final: bool = True) -> tuple[list[str], str]:
    """Split a chunk of raw input into complete key sequences.

    Returns ``(sequences, remainder)``.  With *final* set, an incomplete
    trailing sequence is flushed as-is (a lone ESC becomes the escape key)
    instead of being kept as remainder.
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(data):
        if data[pos] != ESC:
            sequences.append(data[pos])
            pos += 1
            continue

        length = _sequence_length(data[pos:])
        if length is None:
            if not final:
                return sequences, data[pos:]
            sequences.append(data[pos:])
            break
        sequences.append(data[pos : pos + length])
        pos += length

    return sequences, ""
