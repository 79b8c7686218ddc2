"""Partitions: their types, flags and sector arithmetic."""

from __future__ import annotations

import errno
from abc import abstractmethod
from collections.abc import Sequence
from enum import Enum

from .fs import FileSystem
from .sector import SectorDevice
from .usage import UsageError
from .usage import sectors_used as _fs_sectors_used

_LINUX_FILE_SYSTEMS = frozenset(
    {
        FileSystem.BTRFS,
        FileSystem.XFS,
        FileSystem.EXT2,
        FileSystem.EXT3,
        FileSystem.EXT4,
        FileSystem.F2FS,
    }
)


class PartitionType(Enum):
    """Whether a partition is primary, logical or extended.

    Only meaningful on MSDOS tables; GPT partitions are always primary.
    """

    PRIMARY = "primary"
    LOGICAL = "logical"
    EXTENDED = "extended"


class PartitionFlag(Enum):
    """Flags that may be set on a partition."""

    BOOT = "boot"
    ROOT = "root"
    SWAP = "swap"
    HIDDEN = "hidden"
    RAID = "raid"
    LVM = "lvm"
    LBA = "lba"
    HPSERVICE = "hpservice"
    PALO = "palo"
    PREP = "prep"
    MSFT_RESERVED = "msft_reserved"
    BIOS_GRUB = "bios_grub"
    APPLE_TV_RECOVERY = "apple_tv_recovery"
    DIAG = "diag"
    LEGACY_BOOT = "legacy_boot"
    MSFT_DATA = "msft_data"
    IRST = "irst"
    ESP = "esp"


class PartitionDevice(SectorDevice):
    """A block device that is a partition on a parent device."""

    @abstractmethod
    def file_system(self) -> FileSystem | None:
        """The file system the partition is formatted with, if any."""

    @abstractmethod
    def partition_flags(self) -> Sequence[PartitionFlag]:
        """The flags assigned to the partition."""

    @abstractmethod
    def partition_label(self) -> str | None:
        """The label of the partition, if it has one."""

    @abstractmethod
    def partition_type(self) -> PartitionType:
        """Whether the partition is primary, logical or extended."""

    @abstractmethod
    def sector_start(self) -> int:
        """The sector where the partition begins on its parent device."""

    @abstractmethod
    def sector_end(self) -> int:
        """The sector where the partition ends on its parent device."""

    def sectors(self) -> int:
        """The number of sectors the partition spans."""
        return self.sector_end() - self.sector_start()

    def is_esp_partition(self) -> bool:
        """True for a FAT partition carrying the ESP flag."""
        fs = self.file_system()
        return fs in (FileSystem.FAT16, FileSystem.FAT32) and (
            PartitionFlag.ESP in self.partition_flags()
        )

    def is_linux_compatible(self) -> bool:
        """True if Linux can be installed onto this partition's file system."""
        return self.file_system() in _LINUX_FILE_SYSTEMS

    def is_luks(self) -> bool:
        """True for a LUKS partition."""
        return self.file_system() is FileSystem.LUKS

    def is_swap(self) -> bool:
        """True for a swap partition."""
        return self.file_system() is FileSystem.SWAP

    def sectors_differ_from(self, other: PartitionDevice) -> bool:
        """True if `other` starts or ends at a different sector."""
        return (
            self.sector_start() != other.sector_start()
            or self.sector_end() != other.sector_end()
        )

    def sector_lies_within(self, sector: int) -> bool:
        """True if `sector` lies within this partition, bounds included."""
        return self.sector_start() <= sector <= self.sector_end()

    def sectors_overlap(self, start: int, end: int) -> bool:
        """True if the range from `start` to `end` shares a sector with this partition."""
        pstart = self.sector_start()
        pend = self.sector_end()
        return not ((start < pstart and end < pstart) or (start > pend and end > pend))

    def sectors_used(self) -> int:
        """Sectors in use on the file system, in units of this partition's logical sector.

        Raises UsageError with errno ENOENT if there is no file system or it is unsupported.
        """
        block_size = self.logical_block_size()
        fs = self.file_system()
        if fs is None:
            raise UsageError(errno.ENOENT, "no file system")
        used = _fs_sectors_used(self.device_path(), fs)
        return used // (block_size // 512)