"""Directories: files holding fixed-size name-to-inode entries."""

from __future__ import annotations

import errno
import struct
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from sectorfs.free_map import ROOT_DIR_SECTOR
from sectorfs.inode import Inode, InodeTable

NAME_MAX = 14
"""Maximum length of a file name component, in bytes."""

_ENTRY = struct.Struct("<I15s?")

ENTRY_SIZE = _ENTRY.size
"""Size of one on-disk directory entry in bytes."""


def _encode_name(name: str) -> bytes:
    return name.encode("utf-8", "surrogateescape")


@dataclass
class DirEntry:
    """A single directory slot."""

    inode_sector: int = 0
    name: str = ""
    in_use: bool = False

    def pack(self) -> bytes:
        """Returns the on-disk image of this entry."""
        raw = _encode_name(self.name)
        if len(raw) > NAME_MAX:
            raise ValueError(f"file name {self.name!r} is too long")
        return _ENTRY.pack(self.inode_sector, raw, self.in_use)

    @classmethod
    def unpack(cls, data: bytes) -> DirEntry:
        """Parses an on-disk entry image."""
        if len(data) < ENTRY_SIZE:
            raise ValueError(f"directory entry too short: {len(data)} bytes")
        sector, raw, in_use = _ENTRY.unpack_from(data)
        name = raw.split(b"\0", 1)[0].decode("utf-8", "surrogateescape")
        return cls(sector, name, in_use)


class Directory:
    """An open directory over INODE, which it owns one opener of."""

    def __init__(self, inodes: InodeTable, inode: Inode) -> None:
        self.inodes = inodes
        self.inode = inode
        self.pos = 0

    def __enter__(self) -> Directory:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @classmethod
    def create(cls, inodes: InodeTable, sector: int, entry_count: int) -> None:
        """Creates a directory with room for ENTRY_COUNT entries at SECTOR."""
        if entry_count < 0:
            raise ValueError(f"invalid entry count {entry_count}")
        inodes.create(sector, entry_count * ENTRY_SIZE)

    @classmethod
    def open_root(cls, inodes: InodeTable) -> Directory:
        """Opens the root directory."""
        return cls(inodes, inodes.open(ROOT_DIR_SECTOR))

    def reopen(self) -> Directory:
        """Opens a new directory over the same inode."""
        return Directory(self.inodes, self.inode.reopen())

    def close(self) -> None:
        """Closes the directory."""
        self.inode.close()

    def _entries(self, start: int = 0) -> Iterator[Tuple[int, DirEntry]]:
        ofs = start
        while True:
            data = self.inode.read_at(ENTRY_SIZE, ofs)
            if len(data) != ENTRY_SIZE:
                return
            yield ofs, DirEntry.unpack(data)
            ofs += ENTRY_SIZE

    def _find(self, name: str) -> Optional[Tuple[int, DirEntry]]:
        return next(
            ((ofs, e) for ofs, e in self._entries() if e.in_use and e.name == name),
            None,
        )

    def lookup(self, name: str) -> Optional[Inode]:
        """Returns an opened inode for NAME, or None if there is none."""
        found = self._find(name)
        if found is None:
            return None
        return self.inodes.open(found[1].inode_sector)

    def add(self, name: str, inode_sector: int) -> None:
        """Adds NAME, whose inode is at INODE_SECTOR, to the directory."""
        raw = _encode_name(name)
        if not raw or len(raw) > NAME_MAX:
            raise ValueError(f"invalid file name {name!r}")
        if self._find(name) is not None:
            raise FileExistsError(errno.EEXIST, "file exists", name)
        ofs = next((o for o, e in self._entries() if not e.in_use), None)
        if ofs is None:
            ofs = self.inode.length // ENTRY_SIZE * ENTRY_SIZE
        data = DirEntry(inode_sector, name, True).pack()
        if self.inode.write_at(data, ofs) != len(data):
            raise OSError(errno.ENOSPC, "directory is full", name)

    def remove(self, name: str) -> None:
        """Removes NAME and marks its inode for deletion."""
        found = self._find(name)
        if found is None:
            raise FileNotFoundError(errno.ENOENT, "no such file", name)
        ofs, entry = found
        inode = self.inodes.open(entry.inode_sector)
        try:
            entry.in_use = False
            data = entry.pack()
            if self.inode.write_at(data, ofs) != len(data):
                raise OSError(errno.EIO, "directory entry could not be erased", name)
            inode.remove()
        finally:
            inode.close()

    def readdir(self) -> Iterator[str]:
        """Yields the names of entries past the current position, advancing it."""
        for ofs, entry in self._entries(self.pos):
            self.pos = ofs + ENTRY_SIZE
            if entry.in_use:
                yield entry.name