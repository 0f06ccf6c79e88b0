"""PC keyboard scancode interpretation."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence, Tuple

from sectorfs.intq import IntQueue

Keymap = Sequence[Tuple[int, str]]

INVARIANT_KEYMAP: Keymap = (
    (0x01, "\033"),
    (0x0E, "\b"),
    (0x0F, "\tQWERTYUIOP"),
    (0x1C, "\r"),
    (0x1E, "ASDFGHJKL"),
    (0x2C, "ZXCVBNM"),
    (0x37, "*"),
    (0x39, " "),
    (0x53, "\177"),
)
"""Keys whose character does not depend on Shift (letter case aside)."""

UNSHIFTED_KEYMAP: Keymap = (
    (0x02, "1234567890-="),
    (0x1A, "[]"),
    (0x27, ";'`"),
    (0x2B, "\\"),
    (0x33, ",./"),
)
"""Characters for keys pressed without Shift."""

SHIFTED_KEYMAP: Keymap = (
    (0x02, "!@#$%^&*()_+"),
    (0x1A, "{}"),
    (0x27, ":\"~"),
    (0x2B, "|"),
    (0x33, "<>?"),
)
"""Characters for keys pressed with Shift."""

_CAPS_LOCK = 0x3A
_RELEASE = 0x80
_DELETE = 0x7F

_LEFT_SHIFT, _RIGHT_SHIFT = 0x2A, 0x36
_LEFT_ALT, _RIGHT_ALT = 0x38, 0xE038
_LEFT_CTRL, _RIGHT_CTRL = 0x1D, 0xE01D
_SHIFT_KEYS = frozenset(
    {_LEFT_SHIFT, _RIGHT_SHIFT, _LEFT_ALT, _RIGHT_ALT, _LEFT_CTRL, _RIGHT_CTRL}
)


def map_key(keymap: Keymap, scancode: int) -> Optional[int]:
    """Returns the character code KEYMAP gives SCANCODE, or None."""
    for first, chars in keymap:
        if first <= scancode < first + len(chars):
            return ord(chars[scancode - first])
    return None


class Keyboard:
    """Turns scancodes into characters queued in BUFFER.

    ON_REBOOT is called when Ctrl+Alt+Del is pressed.
    """

    def __init__(
        self,
        buffer: Optional[IntQueue] = None,
        on_reboot: Optional[Callable[[], None]] = None,
    ) -> None:
        self.buffer = IntQueue() if buffer is None else buffer
        self.on_reboot = on_reboot
        self.caps_lock = False
        self.key_cnt = 0
        self._held: Dict[int, bool] = {key: False for key in _SHIFT_KEYS}

    @property
    def shift(self) -> bool:
        return self._held[_LEFT_SHIFT] or self._held[_RIGHT_SHIFT]

    @property
    def alt(self) -> bool:
        return self._held[_LEFT_ALT] or self._held[_RIGHT_ALT]

    @property
    def ctrl(self) -> bool:
        return self._held[_LEFT_CTRL] or self._held[_RIGHT_CTRL]

    def feed(self, code: int) -> Optional[int]:
        """Handles one scancode, 0xe0-prefixed codes given whole.

        Returns the character queued, or None if none was.
        """
        if not 0 <= code <= 0xFFFF:
            raise ValueError(f"invalid scancode {code:#x}")
        shift, alt, ctrl = self.shift, self.alt, self.ctrl

        release = bool(code & _RELEASE)
        code &= ~_RELEASE

        if code == _CAPS_LOCK:
            if not release:
                self.caps_lock = not self.caps_lock
            return None

        c = map_key(INVARIANT_KEYMAP, code)
        if c is None:
            c = map_key(SHIFTED_KEYMAP if shift else UNSHIFTED_KEYMAP, code)
        if c is None:
            if code in self._held:
                self._held[code] = not release
            return None
        if release:
            return None

        if c == _DELETE and ctrl and alt:
            if self.on_reboot is not None:
                self.on_reboot()
            return None

        # Ctrl overrides Shift: A is 0x41, Ctrl+A is 0x01.
        if ctrl and 0x40 <= c < 0x60:
            c -= 0x40
        elif shift == self.caps_lock and ord("A") <= c <= ord("Z"):
            c += ord("a") - ord("A")

        if alt:
            c = (c + 0x80) & 0xFF

        if self.buffer.full():
            return None
        self.key_cnt += 1
        self.buffer.put(c)
        return c

    def stats_line(self) -> str:
        """Returns the keyboard statistics line."""
        return f"Keyboard: {self.key_cnt} keys pressed"