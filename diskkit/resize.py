"""Planning partition resizes: offsets, size units and the tool for each file system."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .coords import MEBIBYTE, MEGABYTE, BlockCoordinates, OffsetCoordinates
from .errors import ResizeError, ShrinkNotSupportedError
from .fs import FileSystem
from .partition import PartitionFlag, PartitionType

_log = logging.getLogger(__name__)

SIZE_BEFORE_PATH = 0b1
"""The size argument goes before the path."""
NO_SIZE = 0b10
"""The tool takes no size argument."""
BTRFS = 0b100
"""The partition holds a Btrfs file system."""
XFS = 0b1000
"""The partition holds an XFS file system."""
NTFS = 0b10000
"""The partition holds an NTFS file system."""


class ResizeUnit(Enum):
    """The unit in which a resizing tool expects the new size."""

    ABSOLUTE_BYTES = "bytes"
    ABSOLUTE_KIBIS = "kibis"
    ABSOLUTE_MEBIBYTE = "mebibyte"
    ABSOLUTE_MEGABYTE = "megabyte"
    ABSOLUTE_SECTORS = "sectors"
    ABSOLUTE_SECTORS_WITH_UNIT = "sectors_with_unit"


@dataclass
class ResizeOperation:
    """The old and new coordinates of a partition and the size of a sector in bytes."""

    sector_size: int
    old: BlockCoordinates
    new: BlockCoordinates

    def offset(self) -> OffsetCoordinates:
        """The offsets between the old and new coordinates.

        A negative offset means the partition moves backwards. Both coordinates
        must span the same number of sectors.
        """
        _log.info(
            "calculating offsets: %d - %d -> %d - %d",
            self.old.start,
            self.old.end,
            self.new.start,
            self.new.end,
        )
        if self.old.end - self.old.start != self.new.end - self.new.start:
            raise ValueError("offsets were not adjusted before or after resize operations")
        return OffsetCoordinates(
            skip=self.old.start,
            offset=self.new.start - self.old.start,
            length=self.old.end - self.old.start,
        )

    def is_shrinking(self) -> bool:
        """True if the partition gets smaller."""
        return self.relative_sectors() < 0

    def is_growing(self) -> bool:
        """True if the partition gets larger."""
        return self.relative_sectors() > 0

    def is_moving(self) -> bool:
        """True if the partition starts at a different sector."""
        return self.old.start != self.new.start

    def absolute_sectors(self) -> int:
        """The number of sectors the partition spans afterwards."""
        return self.new.end - self.new.start

    def relative_sectors(self) -> int:
        """By how many sectors the partition grows (positive) or shrinks (negative)."""
        diff_start = self.new.start - self.old.start
        diff_end = self.new.end - self.old.end
        if diff_start == 0:
            return diff_end
        if diff_start == diff_end:
            return 0
        return diff_end - diff_start

    def _absolute_units(self, unit: int) -> int:
        whole = self.absolute_sectors() * self.sector_size // unit
        if whole < 1:
            raise ValueError("partition is smaller than one unit of its resize size")
        return whole - 1

    def as_absolute_mebibyte(self) -> int:
        """The new size in whole mebibytes, less one."""
        return self._absolute_units(MEBIBYTE)

    def as_absolute_megabyte(self) -> int:
        """The new size in whole megabytes, less one."""
        return self._absolute_units(MEGABYTE)


@dataclass(frozen=True)
class ResizeTool:
    """The external program that resizes a file system, and how it is called."""

    command: str
    args: tuple[str, ...]
    unit: ResizeUnit
    options: int
    mount_type: str


@dataclass
class PartitionChange:
    """The move and resize a numbered partition is to undergo.

    A different `start` moves the partition; a different length resizes it.
    """

    device_path: Path
    path: Path
    num: int
    kind: PartitionType
    start: int
    end: int
    filesystem: FileSystem | None = None
    flags: list[PartitionFlag] = field(default_factory=list)
    new_flags: list[PartitionFlag] = field(default_factory=list)
    label: str | None = None


def resize_tool(fs: FileSystem | None, shrinking: bool) -> ResizeTool:
    """The tool that resizes `fs`.

    Raises ShrinkNotSupportedError when shrinking XFS, ValueError for swap,
    which is recreated rather than resized, and ResizeError for file systems
    without a resizing tool.
    """
    if fs is FileSystem.BTRFS:
        command, args, unit, options = (
            "btrfs",
            ("filesystem", "resize"),
            ResizeUnit.ABSOLUTE_MEBIBYTE,
            BTRFS | SIZE_BEFORE_PATH,
        )
    elif fs in (FileSystem.EXT2, FileSystem.EXT3, FileSystem.EXT4):
        command, args, unit, options = (
            "resize2fs",
            (),
            ResizeUnit.ABSOLUTE_SECTORS_WITH_UNIT,
            0,
        )
    elif fs in (FileSystem.FAT16, FileSystem.FAT32):
        command, args, unit, options = (
            "fatresize",
            ("-s",),
            ResizeUnit.ABSOLUTE_KIBIS,
            SIZE_BEFORE_PATH,
        )
    elif fs is FileSystem.NTFS:
        command, args, unit, options = (
            "ntfsresize",
            ("--force", "--force", "-s"),
            ResizeUnit.ABSOLUTE_BYTES,
            SIZE_BEFORE_PATH | NTFS,
        )
    elif fs is FileSystem.SWAP:
        raise ValueError("swap partitions are recreated, not resized")
    elif fs is FileSystem.XFS:
        if shrinking:
            raise ShrinkNotSupportedError(fs)
        command, args, unit, options = (
            "xfs_growfs",
            ("-d",),
            ResizeUnit.ABSOLUTE_MEGABYTE,
            NO_SIZE | XFS,
        )
    else:
        raise ResizeError(f"resizing is not supported for {fs if fs is not None else 'none'}")

    mount_type = fs.mount_type() if fs is not None else "none"
    return ResizeTool(command, args, unit, options, mount_type)


def format_size(unit: ResizeUnit, resize: ResizeOperation) -> str:
    """The new size of `resize`, written the way tools taking `unit` expect it."""
    sectors = resize.absolute_sectors()
    if unit is ResizeUnit.ABSOLUTE_BYTES:
        return str(sectors * 512)
    if unit is ResizeUnit.ABSOLUTE_KIBIS:
        return f"{sectors // 2}ki"
    if unit is ResizeUnit.ABSOLUTE_SECTORS_WITH_UNIT:
        return f"{sectors}s"
    if unit is ResizeUnit.ABSOLUTE_MEBIBYTE:
        return f"{resize.as_absolute_mebibyte()}M"
    if unit is ResizeUnit.ABSOLUTE_MEGABYTE:
        return f"{resize.as_absolute_megabyte()}M"
    return str(sectors)