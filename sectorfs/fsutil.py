"""File system utilities: listing, dumping, deleting and ustar transfer."""

from __future__ import annotations

import sys
import tarfile
from typing import Iterator, List, Optional, TextIO

from sectorfs.block import BLOCK_SECTOR_SIZE, Block
from sectorfs.filesys import FileSystem, FileSystemError

PGSIZE = 4096
"""Chunk size used when dumping a file."""

_HEX_WIDTH = 16
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _stream(out: Optional[TextIO]) -> TextIO:
    return sys.stdout if out is None else out


def _hex_lines(offset: int, data: bytes) -> Iterator[str]:
    for start in range(0, len(data), _HEX_WIDTH):
        row = data[start:start + _HEX_WIDTH]
        text = "".join(chr(b) if 32 <= b < 127 else "." for b in row)
        yield f"{offset + start:08x}  {row.hex(' '):<47}  |{text}|"


def list_files(fs: FileSystem, out: Optional[TextIO] = None) -> None:
    """Prints the names of the files in the root directory."""
    out = _stream(out)
    out.write("Files in the root directory:\n")
    for name in fs.list_root():
        out.write(f"{name}\n")
    out.write("End of listing.\n")


def cat(fs: FileSystem, name: str, out: Optional[TextIO] = None) -> None:
    """Prints file NAME as hex and ASCII."""
    out = _stream(out)
    out.write(f"Printing '{name}' to the console...\n")
    try:
        file = fs.open(name)
    except FileNotFoundError as exc:
        raise FileSystemError(f"{name}: open failed") from exc
    with file:
        while True:
            pos = file.tell()
            data = file.read(PGSIZE)
            if not data:
                break
            for line in _hex_lines(pos, data):
                out.write(line + "\n")


def remove_file(fs: FileSystem, name: str, out: Optional[TextIO] = None) -> None:
    """Deletes file NAME."""
    _stream(out).write(f"Deleting '{name}'...\n")
    try:
        fs.remove(name)
    except FileNotFoundError as exc:
        raise FileSystemError(f"{name}: delete failed") from exc


def _parse_header(header: bytes, sector: int) -> Optional[tarfile.TarInfo]:
    try:
        info = tarfile.TarInfo.frombuf(header, _ENCODING, _ERRORS)
    except tarfile.EOFHeaderError:
        return None
    except tarfile.HeaderError as exc:
        raise FileSystemError(f"bad ustar header in sector {sector} ({exc})") from exc
    if header[257:262] != b"ustar":
        raise FileSystemError(f"bad ustar header in sector {sector} (not ustar)")
    return info


def extract(
    fs: FileSystem, scratch: Block, out: Optional[TextIO] = None
) -> List[str]:
    """Copies a ustar archive from SCRATCH into FS, then erases its header.

    Returns the names of the files extracted.
    """
    out = _stream(out)
    out.write("Extracting ustar archive from scratch device into file system...\n")
    extracted: List[str] = []
    sector = 0
    while True:
        header = scratch.read(sector)
        info = _parse_header(header, sector)
        sector += 1
        if info is None:
            break
        if info.type == tarfile.DIRTYPE:
            out.write(f"ignoring directory {info.name}\n")
            continue
        if info.type not in (tarfile.REGTYPE, tarfile.AREGTYPE):
            raise FileSystemError(
                f"bad ustar header in sector {sector - 1} (unsupported file type)"
            )
        name = info.name
        out.write(f"Putting '{name}' into the file system...\n")
        try:
            fs.create(name, info.size)
            dst = fs.open(name)
        except (OSError, ValueError) as exc:
            raise FileSystemError(f"{name}: create failed") from exc
        with dst:
            size = info.size
            while size > 0:
                chunk = min(size, BLOCK_SECTOR_SIZE)
                data = scratch.read(sector)[:chunk]
                sector += 1
                if dst.write(data) != chunk:
                    raise FileSystemError(
                        f"{name}: write failed with {size} bytes unwritten"
                    )
                size -= chunk
        extracted.append(name)

    # Two zero sectors mark the end of an archive, so erasing the first
    # two makes extraction idempotent.
    out.write("Erasing ustar archive...\n")
    zeros = bytes(BLOCK_SECTOR_SIZE)
    scratch.write(0, zeros)
    scratch.write(1, zeros)
    return extracted


class ScratchAppender:
    """Appends files from FS to a ustar archive on SCRATCH.

    Each appender writes from the start of the device and advances
    across it with every file.
    """

    def __init__(
        self, fs: FileSystem, scratch: Block, out: Optional[TextIO] = None
    ) -> None:
        self.fs = fs
        self.scratch = scratch
        self.out = out
        self.sector = 0

    def append(self, name: str) -> None:
        """Appends file NAME, followed by an end-of-archive marker."""
        _stream(self.out).write(
            f"Appending '{name}' to ustar archive on scratch device...\n"
        )
        try:
            src = self.fs.open(name)
        except FileNotFoundError as exc:
            raise FileSystemError(f"{name}: open failed") from exc
        with src:
            size = src.length()
            info = tarfile.TarInfo(name)
            info.size = size
            info.type = tarfile.REGTYPE
            try:
                header = info.tobuf(tarfile.USTAR_FORMAT, _ENCODING, _ERRORS)
            except ValueError as exc:
                raise FileSystemError(
                    f"{name}: name too long for ustar format"
                ) from exc
            self.scratch.write(self.sector, header)
            self.sector += 1
            while size > 0:
                chunk = min(size, BLOCK_SECTOR_SIZE)
                if self.sector >= self.scratch.size:
                    raise FileSystemError(f"{name}: out of space on scratch device")
                data = src.read(chunk)
                if len(data) != chunk:
                    raise FileSystemError(
                        f"{name}: read failed with {size} bytes unread"
                    )
                self.scratch.write(self.sector, data.ljust(BLOCK_SECTOR_SIZE, b"\0"))
                self.sector += 1
                size -= chunk
            # The marker is not passed over, so later files overwrite it.
            self.scratch.write(self.sector, bytes(BLOCK_SECTOR_SIZE))