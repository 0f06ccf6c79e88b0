"""Small user programs that work on a file system: cat, cmp, cp and more."""

from __future__ import annotations

import sys
from typing import Iterator, List, Optional, Sequence, TextIO

from sectorfs.file import File
from sectorfs.filesys import FileSystem

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_CHUNK = 1024


def _stream(out: Optional[TextIO]) -> TextIO:
    return sys.stdout if out is None else out


def _open(fs: FileSystem, name: str) -> Optional[File]:
    try:
        return fs.open(name)
    except FileNotFoundError:
        return None


def _chunks(file: File) -> Iterator[bytes]:
    while data := file.read(_CHUNK):
        yield data


def cat(fs: FileSystem, names: Sequence[str], out: Optional[TextIO] = None) -> int:
    """Prints the named files; returns the exit status."""
    out = _stream(out)
    success = True
    for name in names:
        file = _open(fs, name)
        if file is None:
            out.write(f"{name}: open failed\n")
            success = False
            continue
        with file:
            for data in _chunks(file):
                out.write(data.decode("latin-1"))
    return EXIT_SUCCESS if success else EXIT_FAILURE


def cmp(fs: FileSystem, a: str, b: str, out: Optional[TextIO] = None) -> int:
    """Compares files A and B; returns the exit status."""
    out = _stream(out)
    first = _open(fs, a)
    if first is None:
        out.write(f"{a}: open failed\n")
        return EXIT_FAILURE
    second = _open(fs, b)
    if second is None:
        first.close()
        out.write(f"{a}: open failed\n")
        return EXIT_FAILURE

    with first, second:
        while True:
            pos = first.tell()
            data_a = first.read(_CHUNK)
            data_b = second.read(_CHUNK)
            min_read = min(len(data_a), len(data_b))
            if min_read == 0:
                break
            for i, (x, y) in enumerate(zip(data_a, data_b)):
                if x != y:
                    out.write(
                        f"Byte {pos + i} is {x:02x} ('{chr(x)}') in {a} "
                        f"but {y:02x} ('{chr(y)}') in {b}\n"
                    )
                    return EXIT_FAILURE
            if min_read < len(data_b):
                out.write(f"{a} is shorter than {b}\n")
            elif min_read < len(data_a):
                out.write(f"{b} is shorter than {a}\n")

    out.write(f"{a} and {b} are identical\n")
    return EXIT_SUCCESS


def cp(fs: FileSystem, old: str, new: str, out: Optional[TextIO] = None) -> int:
    """Copies file OLD to a newly created file NEW; returns the exit status."""
    out = _stream(out)
    src = _open(fs, old)
    if src is None:
        out.write(f"{old}: open failed\n")
        return EXIT_FAILURE
    with src:
        try:
            fs.create(new, src.length())
        except (OSError, ValueError):
            out.write(f"{new}: create failed\n")
            return EXIT_FAILURE
        dst = _open(fs, new)
        if dst is None:
            out.write(f"{new}: open failed\n")
            return EXIT_FAILURE
        with dst:
            for data in _chunks(src):
                if dst.write(data) != len(data):
                    out.write(f"{new}: write failed\n")
                    return EXIT_FAILURE
    return EXIT_SUCCESS


def echo(args: Sequence[str], out: Optional[TextIO] = None) -> int:
    """Prints each argument followed by a space, then a newline."""
    out = _stream(out)
    out.write("".join(f"{arg} " for arg in args) + "\n")
    return EXIT_SUCCESS


def rm(fs: FileSystem, names: Sequence[str], out: Optional[TextIO] = None) -> int:
    """Removes the named files; returns the exit status."""
    out = _stream(out)
    success = True
    for name in names:
        try:
            fs.remove(name)
        except OSError:
            out.write(f"{name}: remove failed\n")
            success = False
    return EXIT_SUCCESS if success else EXIT_FAILURE


def lineup(fs: FileSystem, name: str, out: Optional[TextIO] = None) -> int:
    """Converts file NAME to upper case in place; returns the exit status."""
    out = _stream(out)
    file = _open(fs, name)
    if file is None:
        return 2
    with file:
        while True:
            data = file.read(_CHUNK)
            if not data:
                break
            file.seek(file.tell() - len(data))
            if file.write(data.upper()) != len(data):
                out.write("write failed\n")
    return EXIT_SUCCESS


def bubsort(size: int = 128) -> List[int]:
    """Bubble-sorts SIZE integers that start in descending order."""
    array = list(range(size - 1, -1, -1))
    for i in range(size - 1):
        for j in range(size - 1 - i):
            if array[j] > array[j + 1]:
                array[j], array[j + 1] = array[j + 1], array[j]
    return array


def matmult(dim: int = 128) -> int:
    """Multiplies two DIM x DIM matrices; returns the bottom-right element."""
    a = [[i] * dim for i in range(dim)]
    b = [list(range(dim)) for _ in range(dim)]
    columns = list(zip(*b))
    c = [[sum(x * y for x, y in zip(row, col)) for col in columns] for row in a]
    return c[dim - 1][dim - 1]