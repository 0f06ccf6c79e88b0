"""Free sector map: one bit per sector of the file system device."""

from __future__ import annotations

import errno
from typing import Iterator, Optional, Protocol

FREE_MAP_SECTOR = 0
"""Sector holding the free map file's inode."""

ROOT_DIR_SECTOR = 1
"""Sector holding the root directory's inode."""

_WORD_BYTES = 4
_WORD_BITS = _WORD_BYTES * 8


class _SectorFile(Protocol):
    def read_at(self, size: int, offset: int) -> bytes: ...

    def write_at(self, data: bytes, offset: int) -> int: ...

    def close(self) -> None: ...


class FreeMap:
    """Tracks which sectors are in use, optionally mirrored to a file."""

    def __init__(self, sector_count: int) -> None:
        if sector_count <= ROOT_DIR_SECTOR:
            raise ValueError(f"device of {sector_count} sectors is too small")
        self._bits = bytearray(sector_count)
        self._bits[FREE_MAP_SECTOR] = 1
        self._bits[ROOT_DIR_SECTOR] = 1
        self._file: Optional[_SectorFile] = None

    def __len__(self) -> int:
        return len(self._bits)

    def __getitem__(self, sector: int) -> bool:
        return bool(self._bits[sector])

    def __iter__(self) -> Iterator[bool]:
        return (bool(bit) for bit in self._bits)

    def _serialize(self) -> bytes:
        value = sum(1 << i for i, bit in enumerate(self._bits) if bit)
        return value.to_bytes(self.file_size(), "little")

    def _store(self) -> bool:
        assert self._file is not None
        data = self._serialize()
        return self._file.write_at(data, 0) == len(data)

    def _check_range(self, sector: int, count: int) -> None:
        if count < 0 or sector < 0 or sector + count > len(self._bits):
            raise ValueError(
                f"sectors {sector}..{sector + count} outside map of "
                f"{len(self._bits)} sectors"
            )

    def allocate(self, count: int) -> int:
        """Marks COUNT consecutive free sectors used and returns the first."""
        if count < 0:
            raise ValueError(f"invalid sector count {count}")
        start = self._bits.find(bytes(count))
        if start < 0:
            raise OSError(errno.ENOSPC, f"no run of {count} free sectors")
        self._bits[start:start + count] = b"\x01" * count
        if self._file is not None and not self._store():
            self._bits[start:start + count] = bytes(count)
            raise OSError(errno.EIO, "free map could not be written")
        return start

    def release(self, sector: int, count: int) -> None:
        """Makes COUNT sectors starting at SECTOR available again."""
        self._check_range(sector, count)
        if not all(self._bits[sector:sector + count]):
            raise ValueError(f"sectors {sector}..{sector + count} are not all in use")
        self._bits[sector:sector + count] = bytes(count)
        if self._file is not None:
            self._store()

    def file_size(self) -> int:
        """Returns the number of bytes the map occupies in its file."""
        words = -(-len(self._bits) // _WORD_BITS)
        return words * _WORD_BYTES

    def attach(self, file: _SectorFile) -> None:
        """Writes the map to FILE and keeps it mirrored there."""
        self._file = file
        if not self._store():
            self._file = None
            raise OSError(errno.EIO, "can't write free map")

    def load(self, file: _SectorFile) -> None:
        """Reads the map from FILE and keeps it mirrored there."""
        size = self.file_size()
        data = file.read_at(size, 0)
        if len(data) != size:
            raise OSError(errno.EIO, "can't read free map")
        value = int.from_bytes(data, "little")
        self._bits = bytearray((value >> i) & 1 for i in range(len(self._bits)))
        self._file = file

    def detach(self) -> None:
        """Closes the map's file, if any."""
        if self._file is not None:
            self._file.close()
            self._file = None