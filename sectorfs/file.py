"""Open files: an inode plus a current position."""

from __future__ import annotations

from sectorfs.inode import Inode


class File:
    """An open file over INODE, which it owns one opener of."""

    def __init__(self, inode: Inode) -> None:
        self.inode = inode
        self.pos = 0
        self._write_denied = False

    def __enter__(self) -> File:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def reopen(self) -> File:
        """Opens a new file over the same inode, positioned at the start."""
        return File(self.inode.reopen())

    def close(self) -> None:
        """Closes the file, lifting any write denial it holds."""
        self.allow_write()
        self.inode.close()

    def read(self, size: int) -> bytes:
        """Reads up to SIZE bytes at the current position and advances."""
        data = self.inode.read_at(size, self.pos)
        self.pos += len(data)
        return data

    def read_at(self, size: int, offset: int) -> bytes:
        """Reads up to SIZE bytes at OFFSET without moving the position."""
        return self.inode.read_at(size, offset)

    def write(self, data: bytes) -> int:
        """Writes DATA at the current position, advances, returns the count."""
        written = self.inode.write_at(data, self.pos)
        self.pos += written
        return written

    def write_at(self, data: bytes, offset: int) -> int:
        """Writes DATA at OFFSET without moving the position."""
        return self.inode.write_at(data, offset)

    def deny_write(self) -> None:
        """Blocks writes to the inode until allowed again or closed."""
        if not self._write_denied:
            self._write_denied = True
            self.inode.deny_write()

    def allow_write(self) -> None:
        """Lifts this file's write denial, if it holds one."""
        if self._write_denied:
            self._write_denied = False
            self.inode.allow_write()

    def length(self) -> int:
        """Returns the file's size in bytes."""
        return self.inode.length

    def seek(self, pos: int) -> None:
        """Moves the current position to POS bytes from the start."""
        if pos < 0:
            raise ValueError(f"negative file position {pos}")
        self.pos = pos

    def tell(self) -> int:
        """Returns the current position."""
        return self.pos