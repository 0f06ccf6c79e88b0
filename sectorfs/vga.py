"""VGA text-mode screen: an 80x25 character framebuffer with a cursor."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Tuple, Union

COL_CNT = 80
ROW_CNT = 25

GRAY_ON_BLACK = 0x07
"""Attribute for gray text on a black background."""

_TAB = 8


def _blank_row() -> bytearray:
    return bytearray(b" " * COL_CNT)


def _blank_attrs() -> bytearray:
    return bytearray([GRAY_ON_BLACK] * COL_CNT)


class VgaScreen:
    """Text screen that interprets control characters conventionally.

    ON_BEEP is called for a bell character.
    """

    def __init__(
        self,
        cursor: Tuple[int, int] = (0, 0),
        on_beep: Optional[Callable[[], None]] = None,
    ) -> None:
        x, y = cursor
        if not (0 <= x < COL_CNT and 0 <= y < ROW_CNT):
            raise ValueError(f"cursor {cursor} is off screen")
        self.cx, self.cy = x, y
        self.on_beep = on_beep
        self.chars: List[bytearray] = [_blank_row() for _ in range(ROW_CNT)]
        self.attrs: List[bytearray] = [_blank_attrs() for _ in range(ROW_CNT)]

    @property
    def cursor(self) -> Tuple[int, int]:
        return self.cx, self.cy

    def _clear_row(self, y: int) -> None:
        self.chars[y] = _blank_row()
        self.attrs[y] = _blank_attrs()

    def _cls(self) -> None:
        for y in range(ROW_CNT):
            self._clear_row(y)
        self.cx = self.cy = 0

    def _newline(self) -> None:
        self.cx = 0
        self.cy += 1
        if self.cy >= ROW_CNT:
            self.cy = ROW_CNT - 1
            del self.chars[0]
            del self.attrs[0]
            self.chars.append(_blank_row())
            self.attrs.append(_blank_attrs())

    def putc(self, c: Union[int, str]) -> None:
        """Writes character C, handling control characters."""
        code = ord(c) if isinstance(c, str) else c
        if not 0 <= code <= 0xFF:
            raise ValueError(f"character {c!r} cannot be displayed")
        if code == ord("\n"):
            self._newline()
        elif code == ord("\f"):
            self._cls()
        elif code == ord("\b"):
            if self.cx > 0:
                self.cx -= 1
        elif code == ord("\r"):
            self.cx = 0
        elif code == ord("\t"):
            self.cx = -(-(self.cx + 1) // _TAB) * _TAB
            if self.cx >= COL_CNT:
                self._newline()
        elif code == ord("\a"):
            if self.on_beep is not None:
                self.on_beep()
        else:
            self.chars[self.cy][self.cx] = code
            self.attrs[self.cy][self.cx] = GRAY_ON_BLACK
            self.cx += 1
            if self.cx >= COL_CNT:
                self._newline()

    def write(self, text: Union[str, bytes, Iterable[int]]) -> None:
        """Writes every character of TEXT."""
        for c in text:
            self.putc(c)

    def cursor_registers(self) -> Tuple[int, int]:
        """Returns the two words written to the CRTC to place the cursor."""
        cp = (self.cx + COL_CNT * self.cy) & 0xFFFF
        return 0x0E | (cp & 0xFF00), (0x0F | (cp << 8)) & 0xFFFF

    def row_text(self, y: int) -> str:
        """Returns row Y's characters."""
        return self.chars[y].decode("latin-1")

    def text(self) -> str:
        """Returns the screen as lines with trailing blanks removed."""
        lines = (self.row_text(y).rstrip() for y in range(ROW_CNT))
        return "\n".join(lines).rstrip("\n")