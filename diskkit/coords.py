"""Sector coordinates of partitions, and raw moves and wipes of device sectors."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_log = logging.getLogger(__name__)

MEBIBYTE = 1_048_576
MEGABYTE = 1_000_000

_SECTOR = 512


@dataclass
class BlockCoordinates:
    """The start and end sectors of a partition on a disk."""

    start: int
    end: int

    def resize_to(self, new_len: int) -> None:
        """Move the end so that the partition spans `new_len` sectors."""
        offset = (self.end - self.start) - new_len
        self.end -= offset


@dataclass(frozen=True)
class OffsetCoordinates:
    """Where a partition lies, by how far it moves, and how long it is, in sectors."""

    skip: int
    offset: int
    length: int


def move_partition(path: str | os.PathLike[str], coords: OffsetCoordinates, bs: int) -> None:
    """Shift `coords.length` sectors of `bs` bytes by `coords.offset` sectors on the device.

    Sectors are copied in the order that never overwrites a sector still to be read.
    """
    _log.info(
        "moving partition on %s with %d sector size: { skip: %d; offset: %d; length: %d }",
        os.fspath(path),
        bs,
        coords.skip,
        coords.offset,
        coords.length,
    )
    target_skip = coords.skip + coords.offset
    if target_skip < 0:
        raise ValueError("partition cannot be moved before the start of the device")

    order = range(coords.length)
    if coords.offset > 0:
        order = reversed(order)

    with open(path, "r+b") as disk:
        for sector in order:
            disk.seek((coords.skip + sector) * bs)
            buffer = disk.read(bs)
            if len(buffer) != bs:
                raise OSError(f"unexpected end of {os.fspath(path)} at sector {coords.skip + sector}")
            disk.seek((target_skip + sector) * bs)
            disk.write(buffer)
        disk.flush()
        os.fsync(disk.fileno())


def zero(device: str | os.PathLike[str], sectors: int, offset: int) -> None:
    """Write `sectors` 512-byte sectors of zeroes, starting at sector `offset`."""
    zeroed = bytes(_SECTOR)
    with open(device, "r+b") as file:
        if offset:
            file.seek(_SECTOR * offset)
        for _ in range(sectors):
            file.write(zeroed)