"""File system formats and their size limits."""

from __future__ import annotations

from enum import Enum

_MIB = 1024 * 1024
_GIB = _MIB * 1024
_TIB = _GIB * 1024

_FAT16_MIN = 16 * _MIB
_FAT16_MAX = (4096 - 1) * _MIB
_FAT32_MIN = 33 * _MIB
_FAT32_MAX = 2 * _TIB
_EXT4_MAX = 16 * _TIB
_BTRFS_MIN = 250 * _MIB


class PartitionSizeError(ValueError):
    """A partition size falls outside what a file system supports."""

    def __init__(self, size: int, limit: int, message: str) -> None:
        super().__init__(message)
        self.size = size
        self.limit = limit


class PartitionTooSmallError(PartitionSizeError):
    """The partition is smaller than the file system's minimum."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(size, limit, f"partition of {size} bytes is smaller than {limit} bytes")


class PartitionTooLargeError(PartitionSizeError):
    """The partition is larger than the file system's maximum."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(size, limit, f"partition of {size} bytes is larger than {limit} bytes")


class FileSystem(Enum):
    """A file system format, such as ext4 or fat32."""

    BTRFS = "btrfs"
    EXFAT = "exfat"
    EXT2 = "ext2"
    EXT3 = "ext3"
    EXT4 = "ext4"
    F2FS = "f2fs"
    FAT16 = "fat16"
    FAT32 = "fat32"
    NTFS = "ntfs"
    SWAP = "linux-swap(v1)"
    XFS = "xfs"
    LUKS = "luks"
    LVM = "lvm"

    def validate_size(self, size: int) -> None:
        """Raise a PartitionSizeError if `size` bytes is not valid for this file system."""
        if self is FileSystem.BTRFS and size < _BTRFS_MIN:
            raise PartitionTooSmallError(size, _BTRFS_MIN)
        if self is FileSystem.FAT16:
            if size < _FAT16_MIN:
                raise PartitionTooSmallError(size, _FAT16_MIN)
            if size > _FAT16_MAX:
                raise PartitionTooLargeError(size, _FAT16_MAX)
        if self is FileSystem.FAT32:
            if size < _FAT32_MIN:
                raise PartitionTooSmallError(size, _FAT32_MIN)
            if size > _FAT32_MAX:
                raise PartitionTooLargeError(size, _FAT32_MAX)
        if self is FileSystem.EXT4 and size > _EXT4_MAX:
            raise PartitionTooLargeError(size, _EXT4_MAX)

    def mount_type(self) -> str:
        """The type name to hand to mount for this file system."""
        if self in (FileSystem.FAT16, FileSystem.FAT32):
            return "vfat"
        return self.value

    def __str__(self) -> str:
        return self.value


_NAMES = {
    "btrfs": FileSystem.BTRFS,
    "exfat": FileSystem.EXFAT,
    "ext2": FileSystem.EXT2,
    "ext3": FileSystem.EXT3,
    "ext4": FileSystem.EXT4,
    "f2fs": FileSystem.F2FS,
    "fat16": FileSystem.FAT16,
    "fat32": FileSystem.FAT32,
    "swap": FileSystem.SWAP,
    "linux-swap(v1)": FileSystem.SWAP,
    "ntfs": FileSystem.NTFS,
    "xfs": FileSystem.XFS,
    "lvm": FileSystem.LVM,
    "lvm2_member": FileSystem.LVM,
    "luks": FileSystem.LUKS,
    "crypto_luks": FileSystem.LUKS,
}


def parse_file_system(text: str) -> FileSystem:
    """Parse a file system name, case-insensitively."""
    try:
        return _NAMES[text.lower()]
    except KeyError:
        raise ValueError("invalid file system name") from None