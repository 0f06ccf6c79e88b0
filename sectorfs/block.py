"""Block devices: sector-addressed storage and the registry that names them."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, TextIO

BLOCK_SECTOR_SIZE = 512
"""Size of a block device sector in bytes."""

SECTOR_MAX = 0xFFFFFFFF
"""Largest sector index a device may address (32-bit sector numbers)."""

_NAME_LIMIT = 15


class BlockType(enum.IntEnum):
    """Kind of block device; the first four are roles the system assigns."""

    KERNEL = 0
    FILESYS = 1
    SCRATCH = 2
    SWAP = 3
    RAW = 4
    FOREIGN = 5


ROLE_COUNT = 4
"""Number of block types that can be assigned as a role."""

_TYPE_NAMES = ("kernel", "filesys", "scratch", "swap", "raw", "foreign")


class BlockError(Exception):
    """Raised on an invalid access to a block device."""


class BlockOperations(Protocol):
    """Driver interface: reads and writes whole sectors."""

    def read(self, sector: int) -> bytes:
        """Returns the BLOCK_SECTOR_SIZE bytes of SECTOR."""

    def write(self, sector: int, data: bytes) -> None:
        """Stores BLOCK_SECTOR_SIZE bytes of DATA into SECTOR."""


def block_type_name(block_type: int) -> str:
    """Returns a human-readable name for BLOCK_TYPE."""
    return _TYPE_NAMES[BlockType(block_type)]


def human_readable_size(size: int) -> str:
    """Formats a byte count using the largest fitting binary unit."""
    if size == 1:
        return "1 byte"
    units = ("bytes", "kB", "MB", "GB", "TB")
    unit = 0
    while size >= 1024 and unit < len(units) - 1:
        size //= 1024
        unit += 1
    return f"{size} {units[unit]}"


def _sector_data(data: bytes) -> bytes:
    data = bytes(data)
    if len(data) != BLOCK_SECTOR_SIZE:
        raise ValueError(
            f"sector data must be {BLOCK_SECTOR_SIZE} bytes, got {len(data)}"
        )
    return data


class MemoryDisk:
    """A driver that keeps its sectors in memory."""

    def __init__(self, sector_count: int) -> None:
        if not 0 <= sector_count <= SECTOR_MAX:
            raise ValueError(f"invalid sector count {sector_count}")
        self.sector_count = sector_count
        self._data = bytearray(sector_count * BLOCK_SECTOR_SIZE)

    def _span(self, sector: int) -> slice:
        if not 0 <= sector < self.sector_count:
            raise BlockError(
                f"sector {sector} outside memory disk of {self.sector_count} sectors"
            )
        start = sector * BLOCK_SECTOR_SIZE
        return slice(start, start + BLOCK_SECTOR_SIZE)

    def read(self, sector: int) -> bytes:
        """Returns the contents of SECTOR."""
        return bytes(self._data[self._span(sector)])

    def write(self, sector: int, data: bytes) -> None:
        """Replaces the contents of SECTOR with DATA."""
        self._data[self._span(sector)] = _sector_data(data)


@dataclass(eq=False)
class Block:
    """A registered block device with access counters."""

    name: str
    block_type: BlockType
    size: int
    ops: BlockOperations
    read_cnt: int = 0
    write_cnt: int = 0

    def _check_sector(self, sector: int) -> None:
        if not 0 <= sector < self.size:
            raise BlockError(
                f"Access past end of device {self.name} "
                f"(sector={sector}, size={self.size})"
            )

    def read(self, sector: int) -> bytes:
        """Reads and returns sector SECTOR."""
        self._check_sector(sector)
        data = bytes(self.ops.read(sector))
        self.read_cnt += 1
        return data

    def write(self, sector: int, data: bytes) -> None:
        """Writes DATA, exactly one sector long, to sector SECTOR."""
        self._check_sector(sector)
        if self.block_type == BlockType.FOREIGN:
            raise BlockError(f"{self.name}: writes to foreign devices are not allowed")
        self.ops.write(sector, _sector_data(data))
        self.write_cnt += 1


def _role(role: int) -> BlockType:
    role = BlockType(role)
    if role >= ROLE_COUNT:
        raise ValueError(f"{block_type_name(role)} is not a role")
    return role


class BlockRegistry:
    """All registered block devices, in probe order, and their roles."""

    def __init__(self, out: Optional[TextIO] = None) -> None:
        self.out = out
        self.messages: List[str] = []
        self._blocks: List[Block] = []
        self._roles: List[Optional[Block]] = [None] * ROLE_COUNT

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def _emit(self, line: str) -> None:
        self.messages.append(line)
        if self.out is not None:
            self.out.write(line + "\n")

    def register(
        self,
        name: str,
        block_type: int,
        size: int,
        ops: BlockOperations,
        extra_info: Optional[str] = None,
    ) -> Block:
        """Registers a new device of SIZE sectors served by OPS."""
        if not 0 <= size <= SECTOR_MAX:
            raise ValueError(f"invalid device size {size}")
        block = Block(name[:_NAME_LIMIT], BlockType(block_type), size, ops)
        self._blocks.append(block)
        line = (
            f"{block.name}: {block.size:,} sectors "
            f"({human_readable_size(block.size * BLOCK_SECTOR_SIZE)})"
        )
        if extra_info is not None:
            line += f", {extra_info}"
        self._emit(line)
        return block

    def get_role(self, role: int) -> Optional[Block]:
        """Returns the device assigned ROLE, or None."""
        return self._roles[_role(role)]

    def set_role(self, role: int, block: Optional[Block]) -> None:
        """Assigns BLOCK the given ROLE."""
        self._roles[_role(role)] = block

    def get_by_name(self, name: str) -> Optional[Block]:
        """Returns the device called NAME, or None."""
        return next((b for b in self._blocks if b.name == name), None)

    def stats_lines(self) -> List[str]:
        """Returns a statistics line for each device holding a role."""
        return [
            f"{b.name} ({block_type_name(b.block_type)}): "
            f"{b.read_cnt} reads, {b.write_cnt} writes"
            for b in self._roles
            if b is not None
        ]