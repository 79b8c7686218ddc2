# diskkit

Building blocks for tools that install an operating system: describing file
systems, partitions and partition tables, turning human-friendly sector values
into real sector numbers, reading how much of a file system is in use,
running external programs, and planning how existing partitions are moved
and resized.

The parts that touch real devices only work on Linux. They use
`/sys/class/block`, `/proc/self/mounts`, block device files and the usual
file-system utilities. The parsing and planning parts work anywhere.

## Installation

    pip install diskkit

## Modules

| Module | What it holds |
| --- | --- |
| `diskkit.fs` | `FileSystem`, `parse_file_system`, size-limit errors |
| `diskkit.bootloader` | `Bootloader`, `detect_bootloader`, `force_bootloader` |
| `diskkit.device` | `BlockDevice` (sysfs queries), `read_file` |
| `diskkit.sector` | `Sector`, `SectorKind`, `parse_sector`, `SectorDevice` |
| `diskkit.usage` | `sectors_used` and the parsers for each tool's output |
| `diskkit.partition` | `PartitionType`, `PartitionFlag`, `PartitionDevice` |
| `diskkit.table` | `PartitionTable`, `PartitionTableDevice` and its errors |
| `diskkit.errors` | `NewPartition` and the fsck, partitioning and resize errors |
| `diskkit.command` | `Command`, `CommandNotFoundError`, `CommandFailedError` |
| `diskkit.nspawn` | `SystemdNspawn` |
| `diskkit.coords` | `BlockCoordinates`, `OffsetCoordinates`, `move_partition`, `zero` |
| `diskkit.resize` | `ResizeOperation`, `ResizeUnit`, `ResizeTool`, `PartitionChange`, `resize_tool`, `format_size` |

## A quick tour

### File systems

```python
from diskkit.fs import FileSystem, parse_file_system, PartitionTooSmallError

fs = parse_file_system("FAT32")        # case-insensitive; ValueError if unknown
str(fs)                                # "fat32"
fs.mount_type()                        # "vfat"

try:
    FileSystem.BTRFS.validate_size(100 * 1024 * 1024)
except PartitionTooSmallError as err:
    print(err.size, err.limit)
```

`validate_size` checks the minimum sizes of Btrfs, FAT16 and FAT32 and the
maximum sizes of FAT16, FAT32 and ext4. It raises `PartitionTooSmallError` or
`PartitionTooLargeError`, both subclasses of `PartitionSizeError`.

### Boot mode

`detect_bootloader()` returns `Bootloader.EFI` when `/sys/firmware/efi` is a
directory and `Bootloader.BIOS` otherwise. You can pass another directory to
check. `force_bootloader(Bootloader.BIOS)` overrides detection, and
`force_bootloader(None)` clears the override. It returns the previous
override.

### Block devices

`BlockDevice` is an abstract base class. A subclass supplies `device_path()`
and gets:

- `device_name()`
- `sys_block_path()`
- `is_partition()`
- `is_read_only()`
- `is_removable()`
- `is_rotational()`
- `parent_device()`
- `mount_point()`, which looks the device up in `/proc/self/mounts`

The class attributes `sys_class_block` and `mounts_file` can be pointed
elsewhere.

### Sectors

Positions and sizes are written the way a user types them:

```python
from diskkit.sector import parse_sector

parse_sector("start")    # 2 MiB into the disk
parse_sector("end")      # 2 MiB before the end of the disk
parse_sector("500M")     # 500 megabytes
parse_sector("-500M")    # 500 megabytes before the end
parse_sector("1024")     # sector 1024
parse_sector("-1024")    # 1024 sectors before the end
parse_sector("50%")      # half of the disk (0 to 100)
```

`parse_sector` raises `ValueError` for anything else.

A `SectorDevice` subclass supplies `sectors()`. Its `get_sector(sector)` then
turns a `Sector` into an absolute sector number, using
`logical_block_size()`. When the device has no sysfs entry, the logical
block size is 512.

### Partitions and partition tables

`PartitionDevice` is an abstract base class. A subclass supplies:

- `file_system()`
- `partition_flags()`
- `partition_label()`
- `partition_type()`
- `sector_start()`
- `sector_end()`

It then gets these checks:

- `is_esp_partition()`
- `is_linux_compatible()`
- `is_luks()`
- `is_swap()`
- `sector_lies_within()`
- `sectors_overlap()`
- `sectors_differ_from()`
- `sectors_used()`

`PartitionTableDevice.supports_additional_partition_type(kind)` checks whether
an MSDOS table still has room for another primary or logical partition. It
raises `PrimaryPartitionsExceededError` when the table is full, and
`PartitionTableNotFoundError` when there is no table. GPT always has room.

### File-system usage

`diskkit.usage.sectors_used(path, fs)` runs the file system's own inspection
tool and returns the number of 512-byte sectors in use. The tools are
`dumpe2fs` for ext2/3/4, `fsck.fat` for FAT, `ntfsresize` for NTFS and
`btrfs` for Btrfs. Other file systems raise `UsageError`.

The parsers for each tool's output work on captured lines directly:

- `get_ext4_usage`
- `get_fat_usage`
- `get_ntfs_usage`
- `get_ntfs_size`
- `get_btrfs_usage`

### Running commands

```python
from diskkit.command import Command

output = Command("echo").arg("hello").run_with_stdout()   # "hello\n"
```

`Command` collects arguments, environment variables (`env`, `env_clear`) and
standard input (`stdin_input`).

- `run_with_stdout()` returns what the program wrote to stdout and does not
  check the exit status.
- `run()` and `run_with_callbacks(info, error)` check the exit status. They
  raise `CommandNotFoundError` when the program is missing or exits with 127,
  and `CommandFailedError` otherwise.
- When `capture_output` is set, each stdout line goes to `info` and each
  stderr line to `error`. `run()` logs them.

`SystemdNspawn(path)` builds `Command`s that run inside a `systemd-nspawn`
container rooted at `path`, with output captured.

### Moving and resizing

`ResizeOperation` compares old and new `BlockCoordinates` and reports:

- `is_moving()`
- `is_growing()`
- `is_shrinking()`
- `relative_sectors()`
- `absolute_sectors()`
- `offset()`, as an `OffsetCoordinates`

`resize_tool(fs, shrinking)` returns the `ResizeTool` for a file system:
`btrfs`, `resize2fs`, `fatresize`, `ntfsresize` or `xfs_growfs`. XFS cannot
be shrunk and raises `ShrinkNotSupportedError`. `format_size(unit, operation)`
writes the new size in the unit that tool expects.

`move_partition(path, coords, bs)` shifts a partition's data on the device
sector by sector, in an order that never overwrites data still to be read.
`zero(device, sectors, offset)` writes 512-byte sectors of zeroes.

## What it does not do

- There is no command-line program.
- The package does not create or delete partitions, and it does not write
  partition tables. `NewPartition` and `PartitionError` describe such
  requests and failures, but nothing in the package carries them out.
- The package does not mount file systems or run the resizing tools. It
  chooses the tool and its size argument, and the caller runs them.

## Running the tests

    pip install -e .[test]
    pytest