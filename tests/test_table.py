from pathlib import Path

import pytest

from diskkit.partition import PartitionType
from diskkit.table import (
    PartitionTable,
    PartitionTableDevice,
    PartitionTableError,
    PartitionTableNotFoundError,
    PrimaryPartitionsExceededError,
)

P, L, E = PartitionType.PRIMARY, PartitionType.LOGICAL, PartitionType.EXTENDED

supports = PartitionTableDevice.supports_additional_partition_type


class FictionalBlock(PartitionTableDevice):
    def __init__(self, partitions, table=PartitionTable.MSDOS):
        self.partitions = partitions
        self.table = table

    def device_path(self):
        return Path("/dev/fictional")

    def partition_table(self):
        return self.table

    def partition_type_count(self):
        primary = sum(1 for part in self.partitions if part is P)
        logical = sum(1 for part in self.partitions if part is L)
        return primary, logical, E in self.partitions


def test_maxed_msdos():
    maxed = FictionalBlock([P, P, P, P])
    with pytest.raises(PrimaryPartitionsExceededError):
        PartitionTableDevice.supports_additional_partition_type(maxed, P)
    with pytest.raises(PrimaryPartitionsExceededError):
        PartitionTableDevice.supports_additional_partition_type(maxed, L)


def test_max_extended_msdos():
    block = FictionalBlock([P, P, P, E, L, L])
    with pytest.raises(PrimaryPartitionsExceededError):
        PartitionTableDevice.supports_additional_partition_type(block, P)
    assert PartitionTableDevice.supports_additional_partition_type(block, L) is None


def test_free_msdos():
    block = FictionalBlock([P, P, E, L, L])
    assert PartitionTableDevice.supports_additional_partition_type(block, P) is None
    assert PartitionTableDevice.supports_additional_partition_type(block, L) is None


def test_three_primaries_and_logical_without_extended():
    block = FictionalBlock([P, P, P, L])
    with pytest.raises(PrimaryPartitionsExceededError):
        PartitionTableDevice.supports_additional_partition_type(block, P)


def test_gpt_has_no_limit():
    block = FictionalBlock([P] * 10, table=PartitionTable.GPT)
    assert PartitionTableDevice.supports_additional_partition_type(block, P) is None


def test_missing_table():
    block = FictionalBlock([], table=None)
    with pytest.raises(PartitionTableNotFoundError) as info:
        PartitionTableDevice.supports_additional_partition_type(block, P)
    assert str(info.value) == "partition table not found"
    assert isinstance(info.value, PartitionTableError)


def test_exceeded_message():
    with pytest.raises(PartitionTableError) as info:
        PartitionTableDevice.supports_additional_partition_type(FictionalBlock([P, P, P, P]), P)
    assert str(info.value) == "primary partitions exceeded on partition table"