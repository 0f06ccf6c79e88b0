import io

import pytest

from sectorfs.block import Block, BlockType, MemoryDisk
from sectorfs.filesys import FileSystem
from sectorfs.programs import bubsort, cat, cmp, cp, echo, lineup, matmult, rm


@pytest.fixture
def fs():
    device = Block("hda1", BlockType.FILESYS, 128, MemoryDisk(128))
    with FileSystem(device, format=True) as filesystem:
        yield filesystem


def put(fs, name, data):
    fs.create(name, len(data))
    with fs.open(name) as file:
        assert file.write(data) == len(data)


def get(fs, name):
    with fs.open(name) as file:
        return file.read(file.length())


def test_cat_prints_files(fs):
    put(fs, "a", b"hello ")
    put(fs, "b", b"x" * 3000)
    out = io.StringIO()
    assert cat(fs, ["a", "b"], out) == 0
    assert out.getvalue() == "hello " + "x" * 3000


def test_cat_missing_file(fs):
    put(fs, "a", b"data")
    out = io.StringIO()
    assert cat(fs, ["nope", "a"], out) == 1
    assert out.getvalue() == "nope: open failed\ndata"


def test_cmp_identical(fs):
    put(fs, "a", b"same bytes")
    put(fs, "b", b"same bytes")
    out = io.StringIO()
    assert cmp(fs, "a", "b", out) == 0
    assert out.getvalue() == "a and b are identical\n"


def test_cmp_difference(fs):
    put(fs, "a", b"abc")
    put(fs, "b", b"abd")
    out = io.StringIO()
    assert cmp(fs, "a", "b", out) == 1
    assert out.getvalue() == "Byte 2 is 63 ('c') in a but 64 ('d') in b\n"


def test_cmp_shorter(fs):
    put(fs, "a", b"abc")
    put(fs, "b", b"abcdef")
    out = io.StringIO()
    assert cmp(fs, "a", "b", out) == 0
    assert "a is shorter than b\n" in out.getvalue()


def test_cmp_missing(fs):
    put(fs, "b", b"x")
    out = io.StringIO()
    assert cmp(fs, "a", "b", out) == 1
    assert out.getvalue() == "a: open failed\n"


def test_cp_copies(fs):
    data = bytes(range(256)) * 5
    put(fs, "src", data)
    out = io.StringIO()
    assert cp(fs, "src", "dst", out) == 0
    assert get(fs, "dst") == data
    assert out.getvalue() == ""


def test_cp_existing_target(fs):
    put(fs, "src", b"one")
    put(fs, "dst", b"two")
    out = io.StringIO()
    assert cp(fs, "src", "dst", out) == 1
    assert out.getvalue() == "dst: create failed\n"
    assert get(fs, "dst") == b"two"


def test_cp_missing_source(fs):
    out = io.StringIO()
    assert cp(fs, "src", "dst", out) == 1
    assert out.getvalue() == "src: open failed\n"


def test_echo():
    out = io.StringIO()
    assert echo(["echo", "x", "y"], out) == 0
    assert out.getvalue() == "echo x y \n"


def test_rm(fs):
    put(fs, "a", b"1")
    put(fs, "b", b"2")
    out = io.StringIO()
    assert rm(fs, ["a", "missing"], out) == 1
    assert out.getvalue() == "missing: remove failed\n"
    assert fs.list_root() == ["b"]


def test_lineup(fs):
    text = b"Hello, world! " * 100
    put(fs, "t", text)
    out = io.StringIO()
    assert lineup(fs, "t", out) == 0
    assert get(fs, "t") == text.upper()
    assert out.getvalue() == ""


def test_lineup_missing(fs):
    assert lineup(fs, "nope", io.StringIO()) == 2


def test_bubsort():
    result = bubsort(50)
    assert result == sorted(result)
    assert result[0] == 0
    assert len(result) == 50


def test_bubsort_default_size():
    assert bubsort() == list(range(128))


def test_matmult_grows():
    assert matmult(3) < matmult(4) < matmult(5)