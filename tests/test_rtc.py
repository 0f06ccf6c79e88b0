import pytest

from sectorfs.rtc import (
    RTC_REG_HOUR,
    RTC_REG_MDAY,
    RTC_REG_MIN,
    RTC_REG_MON,
    RTC_REG_SEC,
    RTC_REG_YEAR,
    bcd_to_bin,
    read_time,
    rtc_time,
)

DAY = 24 * 60 * 60


def test_bcd_to_bin_documented_value():
    assert bcd_to_bin(0x59) == 59
    assert bcd_to_bin(0x00) == 0


def test_bcd_to_bin_rejects_non_bytes():
    with pytest.raises(ValueError):
        bcd_to_bin(0x100)


def test_epoch_start_is_zero_plus_first_month():
    base = rtc_time(0, 0, 0, 1, 0, 70)
    assert base == 0


def test_seconds_minutes_hours_add_up():
    base = rtc_time(0, 0, 0, 1, 5, 90)
    assert rtc_time(1, 0, 0, 1, 5, 90) - base == 1
    assert rtc_time(0, 1, 0, 1, 5, 90) - base == 60
    assert rtc_time(0, 0, 1, 1, 5, 90) - base == 60 * 60
    assert rtc_time(0, 0, 0, 2, 5, 90) - base == DAY


def test_two_digit_year_wraps_past_2000():
    assert rtc_time(0, 0, 0, 1, 1, 0) > rtc_time(0, 0, 0, 1, 1, 99)


def test_invalid_month():
    with pytest.raises(ValueError):
        rtc_time(0, 0, 0, 1, 13, 90)


def _cmos(regs, seconds):
    def read(index):
        if index == RTC_REG_SEC:
            return seconds.pop(0) if len(seconds) > 1 else seconds[0]
        return regs[index]

    return read


REGS = {
    RTC_REG_MIN: 0x30,
    RTC_REG_HOUR: 0x12,
    RTC_REG_MDAY: 0x15,
    RTC_REG_MON: 0x06,
    RTC_REG_YEAR: 0x05,
}


def test_read_time_matches_fields():
    result = read_time(_cmos(REGS, [0x45]))
    assert result == rtc_time(45, 30, 12, 15, 6, 5)


def test_read_time_retries_until_stable():
    result = read_time(_cmos(REGS, [0x10, 0x11, 0x11]))
    assert result == rtc_time(11, 30, 12, 15, 6, 5)