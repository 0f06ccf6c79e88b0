import io

import pytest

from sectorfs.block import BlockRegistry, BlockType, MemoryDisk
from sectorfs.filesys import FileSystem, FileSystemError

SECTORS = 64


def make_block(sectors=SECTORS):
    registry = BlockRegistry()
    return registry.register("hda2", BlockType.FILESYS, sectors, MemoryDisk(sectors))


def test_format_message():
    out = io.StringIO()
    fs = FileSystem(make_block(), format=True, out=out)
    assert out.getvalue() == "Formatting file system...done.\n"
    assert fs.list_root() == []


def test_missing_device():
    with pytest.raises(FileSystemError):
        FileSystem(None)


def test_unformatted_device():
    with pytest.raises(FileSystemError):
        FileSystem(make_block())


def test_create_write_read():
    fs = FileSystem(make_block(), format=True)
    fs.create("hello", 700)
    payload = bytes(range(256)) * 2 + b"tail"
    with fs.open("hello") as f:
        assert f.length() == 700
        assert f.write(payload) == len(payload)
    with fs.open("hello") as f:
        assert f.read(len(payload)) == payload
        assert f.read(1000) == bytes(700 - len(payload))


def test_persists_after_remount():
    block = make_block()
    fs = FileSystem(block, format=True)
    fs.create("one", 10)
    fs.create("two", 0)
    with fs.open("one") as f:
        f.write(b"persistent")
    fs.close()
    bits = list(fs.free_map)
    with FileSystem(block) as again:
        assert again.list_root() == ["one", "two"]
        assert list(again.free_map) == bits
        with again.open("one") as f:
            assert f.read(10) == b"persistent"


def test_duplicate_create_releases_inode_sector():
    fs = FileSystem(make_block(), format=True)
    fs.create("dup", 0)
    before = list(fs.free_map)
    with pytest.raises(FileExistsError):
        fs.create("dup", 0)
    assert list(fs.free_map) == before


def test_invalid_name():
    fs = FileSystem(make_block(), format=True)
    with pytest.raises(ValueError):
        fs.create("name-that-is-too-long", 0)
    assert fs.list_root() == []


def test_open_missing():
    fs = FileSystem(make_block(), format=True)
    with pytest.raises(FileNotFoundError):
        fs.open("nothing")


def test_remove_frees_space():
    fs = FileSystem(make_block(), format=True)
    used = sum(fs.free_map)
    fs.create("big", 2000)
    assert sum(fs.free_map) > used
    fs.remove("big")
    assert sum(fs.free_map) == used
    assert fs.list_root() == []
    with pytest.raises(FileNotFoundError):
        fs.remove("big")


def test_removed_file_stays_readable_while_open():
    fs = FileSystem(make_block(), format=True)
    used = sum(fs.free_map)
    fs.create("keep", 5)
    f = fs.open("keep")
    f.write(b"abcde")
    fs.remove("keep")
    assert fs.list_root() == []
    assert f.read_at(5, 0) == b"abcde"
    assert sum(fs.free_map) > used
    f.close()
    assert sum(fs.free_map) == used


def test_out_of_space():
    fs = FileSystem(make_block(16), format=True)
    with pytest.raises(OSError):
        fs.create("huge", 100 * 512)
    assert fs.list_root() == []