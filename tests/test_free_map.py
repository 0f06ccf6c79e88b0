import pytest

from sectorfs.free_map import FREE_MAP_SECTOR, ROOT_DIR_SECTOR, FreeMap


class MemoryFile:
    def __init__(self, size, writable=True):
        self.data = bytearray(size)
        self.writable = writable
        self.closed = False

    def read_at(self, size, offset):
        return bytes(self.data[offset:offset + size])

    def write_at(self, data, offset):
        if not self.writable:
            return 0
        end = min(len(self.data), offset + len(data))
        count = max(0, end - offset)
        self.data[offset:end] = data[:count]
        return count

    def close(self):
        self.closed = True


def test_system_sectors_are_reserved():
    fm = FreeMap(40)
    assert fm[FREE_MAP_SECTOR] and fm[ROOT_DIR_SECTOR]
    assert not any(list(fm)[2:])
    assert len(fm) == 40


def test_too_small_device_rejected():
    with pytest.raises(ValueError):
        FreeMap(1)


def test_allocate_first_fit():
    fm = FreeMap(40)
    first = fm.allocate(1)
    second = fm.allocate(3)
    assert first == 2
    assert second == first + 1
    assert all(fm[s] for s in range(second, second + 3))
    assert not fm[second + 3]


def test_allocate_too_many_raises_and_changes_nothing():
    fm = FreeMap(10)
    before = list(fm)
    with pytest.raises(OSError):
        fm.allocate(9)
    assert list(fm) == before


def test_release_allows_reuse():
    fm = FreeMap(20)
    sector = fm.allocate(4)
    fm.release(sector, 4)
    assert not any(fm[s] for s in range(sector, sector + 4))
    assert fm.allocate(4) == sector


def test_release_free_sector_raises():
    fm = FreeMap(20)
    with pytest.raises(ValueError):
        fm.release(5, 1)


def test_release_out_of_range_raises():
    fm = FreeMap(20)
    with pytest.raises(ValueError):
        fm.release(19, 2)


def test_file_size_is_whole_words():
    assert FreeMap(100).file_size() == 16
    assert FreeMap(32).file_size() == 4


def test_attach_then_load_round_trip():
    fm = FreeMap(70)
    fm.allocate(5)
    fm.allocate(1)
    file = MemoryFile(fm.file_size())
    fm.attach(file)
    copy = FreeMap(70)
    copy.load(file)
    assert list(copy) == list(fm)


def test_allocation_is_mirrored_to_file():
    fm = FreeMap(50)
    file = MemoryFile(fm.file_size())
    fm.attach(file)
    sector = fm.allocate(4)
    copy = FreeMap(50)
    copy.load(file)
    assert all(copy[s] for s in range(sector, sector + 4))


def test_failed_mirror_write_reverts_allocation():
    fm = FreeMap(50)
    file = MemoryFile(fm.file_size())
    fm.attach(file)
    file.writable = False
    with pytest.raises(OSError):
        fm.allocate(2)
    assert not fm[2] and not fm[3]


def test_attach_to_unwritable_file_raises():
    fm = FreeMap(50)
    with pytest.raises(OSError):
        fm.attach(MemoryFile(fm.file_size(), writable=False))


def test_load_short_file_raises():
    fm = FreeMap(100)
    with pytest.raises(OSError):
        fm.load(MemoryFile(fm.file_size() - 1))


def test_detach_closes_file():
    fm = FreeMap(50)
    file = MemoryFile(fm.file_size())
    fm.attach(file)
    fm.detach()
    assert file.closed
    file.data[:] = bytes(len(file.data))
    fm.allocate(1)
    assert file.data == bytearray(len(file.data))