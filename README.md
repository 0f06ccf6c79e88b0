# sectorfs

`sectorfs` is a small file system that lives on 512-byte sectors. It is
written in plain Python and has no dependencies. It also includes models
of several classic PC devices and a few small programs that run on top of
the file system.

## What it contains

- **Block layer** (`sectorfs.block`)
  - `Block`: a registered device with per-device read and write counters.
    Access past the end of a device, and writes to devices of type
    `BlockType.FOREIGN`, raise `BlockError`.
  - `BlockType`: kernel, file-system, scratch, swap, raw and foreign. The
    first four can be assigned as roles.
  - `BlockRegistry`: devices by name and by role, plus `stats_lines()`.
  - `MemoryDisk`: a driver that keeps its sectors in memory.
  - `block_type_name` and `human_readable_size` are formatting helpers.
- **Partitions** (`sectorfs.partition`)
  - `partition_scan(registry, block)` reads MBR partition tables. It
    follows extended and logical partitions and registers each partition
    it finds as a device of its own, with a `Partition` driver.
  - `partition_type_name` gives the name of a partition type byte.
- **File system**
  - `FreeMap`: a bitmap of free sectors.
  - `InodeTable` and `Inode`: contiguous on-disk inodes. An inode can be
    held open by several holders at once, marked for removal, and
    protected from writes.
  - `File`: an open file with a position.
  - `Directory`: fixed-size entries with names of at most 14 bytes.
  - `FileSystem`: the whole system, with a single flat root directory.
    Missing files raise `FileNotFoundError`, and a name that is already
    taken raises `FileExistsError`.
- **Utilities** (`sectorfs.fsutil`)
  - `list_files` lists the root directory.
  - `cat` prints a file as hex and ASCII.
  - `remove_file` deletes a file.
  - `extract` copies the regular files of a ustar archive on a scratch
    device into the file system, then erases the archive header.
  - `ScratchAppender` writes files from the file system to a scratch
    device as a ustar archive.
- **Device models**
  - `Keyboard` (`sectorfs.kbd`): decodes scancodes with Shift, Ctrl, Alt
    and Caps Lock, and queues the characters into an `IntQueue`.
    Ctrl+Alt+Del calls an optional `on_reboot` callback.
  - `IntQueue` (`sectorfs.intq`): a thread-safe byte queue that holds up
    to 63 bytes. It blocks readers while it is empty and writers while it
    is full.
  - Real-time clock helpers (`sectorfs.rtc`): `bcd_to_bin`, `rtc_time`
    and `read_time`.
  - Timer-chip helpers (`sectorfs.pit`): `pit_counter`,
    `pit_control_byte` and `pit_program`. `pit_program` returns the
    port writes as a list of `(port, byte)` pairs.
  - `VgaScreen` (`sectorfs.vga`): an 80×25 text screen. It handles
    newline, form feed, backspace, carriage return, tab and bell, and it
    scrolls.
- **Programs** (`sectorfs.programs`)
  - `cat`, `cmp`, `cp`, `echo`, `rm` and `lineup` work on a `FileSystem`
    and return an exit status.
  - `bubsort` and `matmult` are small compute exercises.

## Installation

```
pip install .
```

## Quick look

```python
from sectorfs.block import BlockRegistry, BlockType, MemoryDisk
from sectorfs.filesys import FileSystem

registry = BlockRegistry()
disk = registry.register("hda", BlockType.FILESYS, 1024, MemoryDisk(1024))
registry.set_role(BlockType.FILESYS, disk)

with FileSystem(registry.get_role(BlockType.FILESYS), format=True) as fs:
    fs.create("hello", 11)
    with fs.open("hello") as f:
        f.write(b"hello world")
    fs.list_root()   # ['hello']
```

```python
from sectorfs.rtc import bcd_to_bin
from sectorfs.pit import pit_counter

bcd_to_bin(0x59)   # 59
pit_counter(100)   # 11932, the counter value for a 100 Hz timer
```

## Command line

The package includes a random sentence generator that works from a fixed
grammar:

```
sectorfs-insult -n 2 -s 4951
```

The options are:

- `-s <integer>` sets the random seed. The default is 4951.
- `-n <integer>` sets the number of sentences. The default is 4.
- `-f <file>` writes the output to a file instead of standard output.
- `-h` prints help. It is recognised only as the first argument.

## What it does not do

- Devices are in memory only. There is no driver that reads or writes
  a disk image file.
- Files have a fixed size that is set when they are created. Writes stop
  at the end of the file.
- The root directory is the only directory. It is created with room for
  16 entries and cannot grow.
- The device models work on values and callbacks. They do not touch
  real hardware.
- There is no command for the file system itself. It is used from Python.
  The only command is `sectorfs-insult`.

## Running the tests

```
pip install ".[test]"
pytest
```