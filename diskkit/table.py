"""Partition tables and their limits on partition counts."""

from __future__ import annotations

from abc import abstractmethod
from enum import Enum

from .device import BlockDevice
from .partition import PartitionType


class PartitionTable(Enum):
    """The kind of partition table on a disk."""

    MSDOS = "msdos"
    GPT = "gpt"


class PartitionTableError(Exception):
    """A partition table cannot accept what was asked of it."""


class PrimaryPartitionsExceededError(PartitionTableError):
    """The table has no room for another primary partition."""

    def __init__(self) -> None:
        super().__init__("primary partitions exceeded on partition table")


class PartitionTableNotFoundError(PartitionTableError):
    """The device has no partition table."""

    def __init__(self) -> None:
        super().__init__("partition table not found")


class PartitionTableDevice(BlockDevice):
    """A block device that may carry a partition table."""

    @abstractmethod
    def partition_table(self) -> PartitionTable | None:
        """The partition table on the device, if there is one."""

    @abstractmethod
    def partition_type_count(self) -> tuple[int, int, bool]:
        """The counts of primary and logical partitions, and whether an extended one exists."""

    def supports_additional_partition_type(self, new_type: PartitionType) -> None:
        """Raise a PartitionTableError if a partition of `new_type` cannot be added."""
        table = self.partition_table()
        if table is None:
            raise PartitionTableNotFoundError()
        if table is PartitionTable.GPT:
            return
        primary, logical, extended = self.partition_type_count()
        if new_type is PartitionType.PRIMARY:
            if primary >= 4 or (primary >= 3 and (extended or logical != 0)):
                raise PrimaryPartitionsExceededError()
        elif primary >= 4:
            raise PrimaryPartitionsExceededError()