"""Errors raised while checking, partitioning and resizing, and partition requests."""

from __future__ import annotations

from dataclasses import dataclass, field

from .fs import FileSystem
from .partition import PartitionFlag, PartitionType


class FsckError(Exception):
    """A file system check failed."""


class FsckIoError(FsckError):
    """An I/O error occurred while checking a file system."""

    def __init__(self, cause: OSError) -> None:
        super().__init__(f"fsck I/O error: {cause!r}")
        self.cause = cause


class FsckBadStatusError(FsckError):
    """The check command exited unsuccessfully."""

    def __init__(self, status: int) -> None:
        super().__init__(f"command failed with exit status: {status}")
        self.status = status


@dataclass
class NewPartition:
    """A partition to be created on a device."""

    start: int
    end: int
    fs: FileSystem | None = None
    label: str | None = None
    flags: list[PartitionFlag] = field(default_factory=list)
    kind: PartitionType = PartitionType.PRIMARY


_PARTITION_STAGES = {
    "open_disk": "failed to open disk",
    "remove_partition": "failed to remove partition",
    "commit_to_disk": "failed to commit to disk",
    "create_partition": "failed to create partition",
    "get_new_data": "failed to retrieve new partition info",
}


class PartitionError(Exception):
    """A partitioning step failed.

    `stage` is one of open_disk, remove_partition, commit_to_disk,
    create_partition or get_new_data.
    """

    def __init__(self, stage: str, cause: OSError) -> None:
        try:
            prefix = _PARTITION_STAGES[stage]
        except KeyError:
            raise ValueError(f"unknown partitioning stage: {stage}") from None
        super().__init__(f"{prefix}: {cause}")
        self.stage = stage
        self.cause = cause


class ResizeError(Exception):
    """A partition could not be resized."""


class ShrinkNotSupportedError(ResizeError):
    """The file system cannot be shrunk."""

    def __init__(self, fs: FileSystem) -> None:
        super().__init__(f"shrinking not supported for {fs}")
        self.fs = fs


class GrowNotSupportedError(ResizeError):
    """The file system cannot be grown."""

    def __init__(self, fs: FileSystem) -> None:
        super().__init__(f"growing not supported for {fs}")
        self.fs = fs


class ResizeIoError(ResizeError):
    """An I/O error occurred while resizing."""

    def __init__(self, cause: OSError) -> None:
        super().__init__(f"I/O error occurred while shrinking: {cause}")
        self.cause = cause


class ResizeBadStatusError(ResizeError):
    """The resize command exited unsuccessfully."""

    def __init__(self, status: int) -> None:
        super().__init__(f"command failed with exit status: {status}")
        self.status = status