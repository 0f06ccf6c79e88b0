"""Inodes: contiguous files stored on the file system device."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Dict

from sectorfs.block import BLOCK_SECTOR_SIZE, Block
from sectorfs.free_map import FreeMap

INODE_MAGIC = 0x494E4F44
"""Identifies an on-disk inode."""

OFF_T_MAX = 2**31 - 1
"""Largest file offset or length (signed 32-bit)."""

_HEADER = struct.Struct("<IiI")


def _bytes_to_sectors(size: int) -> int:
    return -(-size // BLOCK_SECTOR_SIZE)


@dataclass
class DiskInode:
    """On-disk inode, exactly one sector long."""

    start: int = 0
    length: int = 0
    magic: int = INODE_MAGIC

    def pack(self) -> bytes:
        """Returns the sector image of this inode."""
        header = _HEADER.pack(self.start, self.length, self.magic)
        return header.ljust(BLOCK_SECTOR_SIZE, b"\0")

    @classmethod
    def unpack(cls, data: bytes) -> DiskInode:
        """Parses a sector image into an inode."""
        if len(data) < _HEADER.size:
            raise ValueError(f"inode data too short: {len(data)} bytes")
        start, length, magic = _HEADER.unpack_from(data)
        return cls(start, length, magic)


class Inode:
    """An open inode shared by everyone who has it open."""

    def __init__(self, table: InodeTable, sector: int, data: DiskInode) -> None:
        self._table = table
        self.sector = sector
        self.data = data
        self.open_cnt = 1
        self.removed = False
        self.deny_write_cnt = 0

    @property
    def inumber(self) -> int:
        """The inode's number, its sector."""
        return self.sector

    @property
    def length(self) -> int:
        """Length of the inode's data in bytes."""
        return self.data.length

    def _byte_to_sector(self, pos: int) -> int:
        return self.data.start + pos // BLOCK_SECTOR_SIZE

    def reopen(self) -> Inode:
        """Adds an opener and returns this inode."""
        self.open_cnt += 1
        return self

    def close(self) -> None:
        """Drops an opener; the last one frees a removed inode's sectors."""
        if self.open_cnt <= 0:
            raise RuntimeError(f"inode {self.sector} is not open")
        self.open_cnt -= 1
        if self.open_cnt == 0:
            self._table._forget(self)
            if self.removed:
                free_map = self._table.free_map
                free_map.release(self.sector, 1)
                free_map.release(self.data.start, _bytes_to_sectors(self.data.length))

    def remove(self) -> None:
        """Marks the inode for deletion when its last opener closes it."""
        self.removed = True

    def _chunks(self, size: int, offset: int):
        if offset < 0:
            raise ValueError(f"negative offset {offset}")
        done = 0
        while size > 0:
            sector_ofs = offset % BLOCK_SECTOR_SIZE
            chunk = min(size, self.length - offset, BLOCK_SECTOR_SIZE - sector_ofs)
            if chunk <= 0:
                break
            yield self._byte_to_sector(offset), sector_ofs, chunk, done
            size -= chunk
            offset += chunk
            done += chunk

    def read_at(self, size: int, offset: int) -> bytes:
        """Reads up to SIZE bytes at OFFSET; stops at end of file."""
        device = self._table.device
        out = bytearray()
        for sector, sector_ofs, chunk, _ in self._chunks(size, offset):
            out += device.read(sector)[sector_ofs:sector_ofs + chunk]
        return bytes(out)

    def write_at(self, data: bytes, offset: int) -> int:
        """Writes DATA at OFFSET and returns the bytes written.

        Files do not grow, so writing stops at end of file. Nothing is
        written while writes are denied.
        """
        if self.deny_write_cnt:
            return 0
        data = bytes(data)
        device = self._table.device
        written = 0
        for sector, sector_ofs, chunk, done in self._chunks(len(data), offset):
            piece = data[done:done + chunk]
            if chunk == BLOCK_SECTOR_SIZE:
                device.write(sector, piece)
            else:
                bounce = bytearray(device.read(sector))
                bounce[sector_ofs:sector_ofs + chunk] = piece
                device.write(sector, bytes(bounce))
            written += chunk
        return written

    def deny_write(self) -> None:
        """Disables writes; at most once per opener."""
        if self.deny_write_cnt >= self.open_cnt:
            raise RuntimeError("more write denials than openers")
        self.deny_write_cnt += 1

    def allow_write(self) -> None:
        """Re-enables writes denied by one opener."""
        if self.deny_write_cnt <= 0:
            raise RuntimeError("writes are not denied")
        self.deny_write_cnt -= 1


class InodeTable:
    """Creates inodes on DEVICE and keeps one object per open inode."""

    def __init__(self, device: Block, free_map: FreeMap) -> None:
        self.device = device
        self.free_map = free_map
        self._open: Dict[int, Inode] = {}

    def __contains__(self, sector: int) -> bool:
        return sector in self._open

    def _forget(self, inode: Inode) -> None:
        self._open.pop(inode.sector, None)

    def create(self, sector: int, length: int) -> DiskInode:
        """Writes a new inode of LENGTH zeroed bytes to SECTOR."""
        if not 0 <= length <= OFF_T_MAX:
            raise ValueError(f"invalid file length {length}")
        sectors = _bytes_to_sectors(length)
        disk_inode = DiskInode(start=self.free_map.allocate(sectors), length=length)
        self.device.write(sector, disk_inode.pack())
        zeros = bytes(BLOCK_SECTOR_SIZE)
        for data_sector in range(disk_inode.start, disk_inode.start + sectors):
            self.device.write(data_sector, zeros)
        return disk_inode

    def open(self, sector: int) -> Inode:
        """Opens the inode at SECTOR, sharing it if already open."""
        inode = self._open.get(sector)
        if inode is not None:
            return inode.reopen()
        inode = Inode(self, sector, DiskInode.unpack(self.device.read(sector)))
        self._open[sector] = inode
        return inode