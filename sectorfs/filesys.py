"""The file system: a flat root directory on a block device."""

from __future__ import annotations

import errno
from typing import List, Optional, TextIO

from sectorfs.block import Block
from sectorfs.directory import Directory
from sectorfs.file import File
from sectorfs.free_map import FREE_MAP_SECTOR, ROOT_DIR_SECTOR, FreeMap
from sectorfs.inode import InodeTable

_ROOT_ENTRIES = 16


class FileSystemError(Exception):
    """Raised when the file system cannot be set up or used."""


class FileSystem:
    """A mounted file system on DEVICE, formatted first if FORMAT is true."""

    def __init__(
        self,
        device: Optional[Block],
        format: bool = False,
        out: Optional[TextIO] = None,
    ) -> None:
        if device is None:
            raise FileSystemError(
                "No file system device found, can't initialize file system."
            )
        self.device = device
        self.out = out
        self.free_map = FreeMap(device.size)
        self.inodes = InodeTable(device, self.free_map)
        if format:
            self._format()
        file = File(self.inodes.open(FREE_MAP_SECTOR))
        try:
            self.free_map.load(file)
        except OSError as exc:
            file.close()
            raise FileSystemError("can't read free map") from exc

    def __enter__(self) -> FileSystem:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _say(self, text: str) -> None:
        if self.out is not None:
            self.out.write(text)

    def _format(self) -> None:
        self._say("Formatting file system...")
        try:
            self.inodes.create(FREE_MAP_SECTOR, self.free_map.file_size())
        except OSError as exc:
            raise FileSystemError("free map creation failed") from exc
        file = File(self.inodes.open(FREE_MAP_SECTOR))
        try:
            self.free_map.attach(file)
        except OSError as exc:
            file.close()
            raise FileSystemError("can't write free map") from exc
        try:
            Directory.create(self.inodes, ROOT_DIR_SECTOR, _ROOT_ENTRIES)
        except OSError as exc:
            raise FileSystemError("root directory creation failed") from exc
        self.free_map.detach()
        self._say("done.\n")

    def _root(self) -> Directory:
        return Directory.open_root(self.inodes)

    def close(self) -> None:
        """Writes out and closes the free map."""
        self.free_map.detach()

    def create(self, name: str, initial_size: int) -> None:
        """Creates a file NAME of INITIAL_SIZE zero bytes."""
        with self._root() as directory:
            sector = self.free_map.allocate(1)
            try:
                self.inodes.create(sector, initial_size)
                directory.add(name, sector)
            except Exception:
                self.free_map.release(sector, 1)
                raise

    def open(self, name: str) -> File:
        """Opens the file called NAME."""
        with self._root() as directory:
            inode = directory.lookup(name)
        if inode is None:
            raise FileNotFoundError(errno.ENOENT, "no such file", name)
        return File(inode)

    def remove(self, name: str) -> None:
        """Deletes the file called NAME."""
        with self._root() as directory:
            directory.remove(name)

    def list_root(self) -> List[str]:
        """Returns the names in the root directory, in slot order."""
        with self._root() as directory:
            return list(directory.readdir())