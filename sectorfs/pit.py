"""8254 programmable interval timer configuration."""

from __future__ import annotations

from typing import List, Tuple

PIT_PORT_CONTROL = 0x43
"""Control port."""

PIT_HZ = 1193180
"""PIT cycles per second."""


def _counter_port(channel: int) -> int:
    return 0x40 + channel


def pit_counter(frequency: int) -> int:
    """Returns the 16-bit counter value for FREQUENCY Hz (0 means 65536)."""
    if frequency < 19:
        # The quotient would overflow; 0 is the largest count.
        return 0
    if frequency > PIT_HZ:
        # The quotient would be 0; a count of 1 is illegal in mode 2.
        return 2
    return ((PIT_HZ + frequency // 2) // frequency) & 0xFFFF


def pit_control_byte(channel: int, mode: int) -> int:
    """Returns the control byte selecting CHANNEL in MODE."""
    if channel not in (0, 2):
        raise ValueError(f"unsupported PIT channel {channel}")
    if mode not in (2, 3):
        raise ValueError(f"unsupported PIT mode {mode}")
    return (channel << 6) | 0x30 | (mode << 1)


def pit_program(channel: int, mode: int, frequency: int) -> List[Tuple[int, int]]:
    """Returns the (port, byte) writes that configure CHANNEL."""
    control = pit_control_byte(channel, mode)
    count = pit_counter(frequency)
    port = _counter_port(channel)
    return [
        (PIT_PORT_CONTROL, control),
        (port, count & 0xFF),
        (port, (count >> 8) & 0xFF),
    ]