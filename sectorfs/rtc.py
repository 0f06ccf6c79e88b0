"""Real-time clock: CMOS BCD registers to seconds since the epoch."""

from __future__ import annotations

from typing import Callable

RTC_REG_SEC = 0
RTC_REG_MIN = 2
RTC_REG_HOUR = 4
RTC_REG_MDAY = 7
RTC_REG_MON = 8
RTC_REG_YEAR = 9

_DAYS_PER_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_DAY = 24 * 60 * 60


def bcd_to_bin(x: int) -> int:
    """Returns the integer value of BCD byte X."""
    if not 0 <= x <= 0xFF:
        raise ValueError(f"{x} is not a byte value")
    return (x & 0x0F) + (x >> 4) * 10


def rtc_time(sec: int, minute: int, hour: int, mday: int, mon: int, year: int) -> int:
    """Converts clock fields to seconds since 1970.

    YEAR counts from 1900, two digits; years before 70 are taken to
    be past 2000.
    """
    if not 0 <= mon <= len(_DAYS_PER_MONTH):
        raise ValueError(f"invalid month {mon}")
    if year < 70:
        year += 100
    year -= 70

    leap_days = int((year - 1) / 4)
    time = (year * 365 + leap_days) * _DAY
    time += sum(_DAYS_PER_MONTH[:mon]) * _DAY
    if mon > 2 and year % 4 == 0:
        time += _DAY
    time += (mday - 1) * _DAY
    time += hour * 60 * 60
    time += minute * 60
    time += sec
    return time


def read_time(cmos_read: Callable[[int], int]) -> int:
    """Reads the clock through CMOS_READ, retrying until the seconds hold."""
    while True:
        sec = bcd_to_bin(cmos_read(RTC_REG_SEC))
        minute = bcd_to_bin(cmos_read(RTC_REG_MIN))
        hour = bcd_to_bin(cmos_read(RTC_REG_HOUR))
        mday = bcd_to_bin(cmos_read(RTC_REG_MDAY))
        mon = bcd_to_bin(cmos_read(RTC_REG_MON))
        year = bcd_to_bin(cmos_read(RTC_REG_YEAR))
        if sec == bcd_to_bin(cmos_read(RTC_REG_SEC)):
            return rtc_time(sec, minute, hour, mday, mon, year)