import pytest

from sectorfs.intq import CAPACITY
from sectorfs.kbd import (
    INVARIANT_KEYMAP,
    SHIFTED_KEYMAP,
    UNSHIFTED_KEYMAP,
    Keyboard,
    map_key,
)

A = 0x1E
LSHIFT = 0x2A
CAPS = 0x3A
CTRL = 0x1D
ALT = 0x38
RALT = 0xE038
DEL = 0x53


def test_map_key_finds_characters():
    assert map_key(INVARIANT_KEYMAP, 0x0F) == ord("\t")
    assert map_key(INVARIANT_KEYMAP, 0x10) == ord("Q")
    assert map_key(UNSHIFTED_KEYMAP, 0x02) == ord("1")
    assert map_key(SHIFTED_KEYMAP, 0x02) == ord("!")


def test_map_key_misses():
    assert map_key(INVARIANT_KEYMAP, 0x3A) is None
    assert map_key(UNSHIFTED_KEYMAP, 0x01) is None


def test_plain_letter_is_lowercase():
    kbd = Keyboard()
    assert kbd.feed(A) == ord("a")
    assert kbd.buffer.get() == ord("a")


def test_shift_gives_uppercase_and_symbols():
    kbd = Keyboard()
    kbd.feed(LSHIFT)
    assert kbd.feed(A) == ord("A")
    assert kbd.feed(0x02) == ord("!")
    kbd.feed(LSHIFT | 0x80)
    assert kbd.feed(0x02) == ord("1")


def test_caps_lock_toggles_case():
    kbd = Keyboard()
    kbd.feed(CAPS)
    kbd.feed(CAPS | 0x80)
    assert kbd.caps_lock
    assert kbd.feed(A) == ord("A")
    kbd.feed(LSHIFT)
    assert kbd.feed(A) == ord("a")


def test_caps_lock_does_not_affect_digits():
    kbd = Keyboard()
    kbd.feed(CAPS)
    assert kbd.feed(0x02) == ord("1")


def test_ctrl_letter():
    kbd = Keyboard()
    kbd.feed(CTRL)
    assert kbd.feed(A) == 0x01


def test_alt_sets_high_bit():
    kbd = Keyboard()
    kbd.feed(RALT)
    assert kbd.feed(A) == ord("a") + 0x80
    kbd.feed(RALT | 0x80)
    assert kbd.feed(A) == ord("a")


def test_release_produces_nothing():
    kbd = Keyboard()
    assert kbd.feed(A | 0x80) is None
    assert kbd.buffer.empty()
    assert kbd.key_cnt == 0


def test_ctrl_alt_del_reboots():
    calls = []
    kbd = Keyboard(on_reboot=lambda: calls.append(True))
    kbd.feed(CTRL)
    kbd.feed(ALT)
    assert kbd.feed(DEL) is None
    assert calls == [True]
    assert kbd.buffer.empty()


def test_delete_alone_is_queued():
    kbd = Keyboard()
    assert kbd.feed(DEL) == 0x7F


def test_full_buffer_drops_keys():
    kbd = Keyboard()
    for _ in range(CAPACITY + 10):
        kbd.feed(A)
    assert kbd.key_cnt == CAPACITY
    assert kbd.buffer.full()


def test_stats_line_counts_keys():
    kbd = Keyboard()
    kbd.feed(A)
    kbd.feed(0x02)
    assert kbd.stats_line() == "Keyboard: 2 keys pressed"


def test_invalid_scancode():
    with pytest.raises(ValueError):
        Keyboard().feed(0x10000)