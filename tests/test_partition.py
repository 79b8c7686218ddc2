import errno
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from unittest import mock

import pytest

from diskkit.fs import FileSystem
from diskkit.partition import PartitionDevice, PartitionFlag, PartitionType
from diskkit.usage import UsageError

EXT_OUTPUT = b"""dumpe2fs 1.43.9 (8-Feb-2018)
Filesystem volume name:   <none>
Inode count:              1310720
Block count:              5242880
Reserved block count:     262144
Free blocks:              5116591
Free inodes:              1310709
First block:              0
Block size:               4096
Fragment size:            4096
"""


@dataclass
class Fake(PartitionDevice):
    start_sector: int = 0
    end_sector: int = 1
    filesystem: FileSystem | None = None
    name: str | None = None
    part_type: PartitionType = PartitionType.PRIMARY
    flags: list = field(default_factory=list)

    def device_path(self) -> Path:
        return Path("/dev/fictional")

    def logical_block_size(self) -> int:
        return 512

    def file_system(self):
        return self.filesystem

    def partition_flags(self):
        return self.flags

    def partition_label(self):
        return self.name

    def partition_type(self):
        return self.part_type

    def sector_start(self):
        return self.start_sector

    def sector_end(self):
        return self.end_sector


def test_sector_lies_within():
    part = Fake(start_sector=100_000, end_sector=10_000_000)
    assert PartitionDevice.sector_lies_within(part, 100_000)
    assert PartitionDevice.sector_lies_within(part, 10_000_000)
    assert PartitionDevice.sector_lies_within(part, 5_000_000)
    assert not PartitionDevice.sector_lies_within(part, 99_999)
    assert not PartitionDevice.sector_lies_within(part, 10_000_001)


def test_sectors_overlap():
    part = Fake(start_sector=100_000, end_sector=10_000_000)
    overlap = PartitionDevice.sectors_overlap
    assert not overlap(part, 0, 99999)
    assert overlap(part, 0, 100_000)
    assert overlap(part, 0, 100_001)
    assert overlap(part, 200_000, 1_000_000)
    assert overlap(part, 9_999_999, 11_000_000)
    assert overlap(part, 10_000_000, 11_000_000)
    assert not overlap(part, 10_000_001, 11_000_000)
    assert overlap(part, 0, 20_000_000)


def test_sectors_is_length():
    part = Fake(start_sector=2048, end_sector=4096)
    assert PartitionDevice.sectors(part) == 4096 - 2048


def test_sectors_differ_from():
    a = Fake(start_sector=10, end_sector=20)
    differ = PartitionDevice.sectors_differ_from
    assert not differ(a, Fake(start_sector=10, end_sector=20))
    assert differ(a, Fake(start_sector=11, end_sector=20))
    assert differ(a, Fake(start_sector=10, end_sector=21))


@pytest.mark.parametrize("fs", [FileSystem.FAT16, FileSystem.FAT32])
def test_esp_requires_fat_and_flag(fs):
    assert PartitionDevice.is_esp_partition(Fake(filesystem=fs, flags=[PartitionFlag.ESP]))
    assert not PartitionDevice.is_esp_partition(Fake(filesystem=fs, flags=[PartitionFlag.BOOT]))


def test_esp_rejects_other_file_systems():
    ext4 = Fake(filesystem=FileSystem.EXT4, flags=[PartitionFlag.ESP])
    assert not PartitionDevice.is_esp_partition(ext4)
    assert not PartitionDevice.is_esp_partition(Fake(flags=[PartitionFlag.ESP]))


@pytest.mark.parametrize(
    "fs,expected",
    [
        (FileSystem.BTRFS, True),
        (FileSystem.XFS, True),
        (FileSystem.EXT2, True),
        (FileSystem.EXT3, True),
        (FileSystem.EXT4, True),
        (FileSystem.F2FS, True),
        (FileSystem.EXFAT, False),
        (FileSystem.NTFS, False),
        (FileSystem.FAT16, False),
        (FileSystem.FAT32, False),
        (FileSystem.LVM, False),
        (FileSystem.LUKS, False),
        (FileSystem.SWAP, False),
        (None, False),
    ],
)
def test_is_linux_compatible(fs, expected):
    assert PartitionDevice.is_linux_compatible(Fake(filesystem=fs)) is expected


def test_luks_and_swap():
    assert PartitionDevice.is_luks(Fake(filesystem=FileSystem.LUKS))
    assert not PartitionDevice.is_luks(Fake(filesystem=FileSystem.SWAP))
    assert PartitionDevice.is_swap(Fake(filesystem=FileSystem.SWAP))
    assert not PartitionDevice.is_swap(Fake())


def test_sectors_used_without_file_system():
    with pytest.raises(UsageError) as info:
        PartitionDevice.sectors_used(Fake())
    assert info.value.errno == errno.ENOENT


def test_sectors_used_unsupported_file_system():
    with pytest.raises(UsageError) as info:
        PartitionDevice.sectors_used(Fake(filesystem=FileSystem.XFS))
    assert info.value.errno == errno.ENOENT


def test_sectors_used_ext4():
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout=EXT_OUTPUT)
    with mock.patch("diskkit.usage.subprocess.run", return_value=completed) as run:
        assert PartitionDevice.sectors_used(Fake(filesystem=FileSystem.EXT4)) == 1010312
    assert run.call_args.args[0] == ["dumpe2fs", "-h", "/dev/fictional"]