"""Sector positions expressed in human-friendly units."""

from __future__ import annotations

import re
from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum

from .device import BlockDevice, read_file

_U64_MAX = 2**64 - 1
_U16_MAX = 2**16 - 1
_MIB2 = 2 * 1024 * 1024
_DIGITS = re.compile(r"\+?[0-9]+")


class SectorKind(Enum):
    """How a Sector value is to be interpreted."""

    START = "start"
    END = "end"
    UNIT = "unit"
    UNIT_FROM_END = "unit_from_end"
    MEGABYTE = "megabyte"
    MEGABYTE_FROM_END = "megabyte_from_end"
    PERCENT = "percent"


@dataclass(frozen=True)
class Sector:
    """A position on a disk, converted to a sector by SectorDevice.get_sector.

    A PERCENT value runs from 0 to 65535, where 65535 is the whole disk.
    """

    kind: SectorKind
    value: int = 0

    def __post_init__(self) -> None:
        limit = _U16_MAX if self.kind is SectorKind.PERCENT else _U64_MAX
        if not 0 <= self.value <= limit:
            raise ValueError(f"sector value {self.value} out of range for {self.kind.value}")

    @classmethod
    def start(cls) -> Sector:
        return cls(SectorKind.START)

    @classmethod
    def end(cls) -> Sector:
        return cls(SectorKind.END)

    @classmethod
    def unit(cls, value: int) -> Sector:
        return cls(SectorKind.UNIT, value)

    @classmethod
    def unit_from_end(cls, value: int) -> Sector:
        return cls(SectorKind.UNIT_FROM_END, value)

    @classmethod
    def megabyte(cls, value: int) -> Sector:
        return cls(SectorKind.MEGABYTE, value)

    @classmethod
    def megabyte_from_end(cls, value: int) -> Sector:
        return cls(SectorKind.MEGABYTE_FROM_END, value)

    @classmethod
    def percent(cls, value: int) -> Sector:
        return cls(SectorKind.PERCENT, value)


def _parse_unsigned(text: str, limit: int) -> int | None:
    if not _DIGITS.fullmatch(text):
        return None
    value = int(text)
    return value if value <= limit else None


def parse_sector(text: str) -> Sector:
    """Parse forms such as 'start', 'end', '1024', '-1024', '500M', '-500M' and '50%'."""
    if text.endswith("M"):
        if text.startswith("-"):
            value = _parse_unsigned(text[1:-1], _U64_MAX)
            if value is not None:
                return Sector.megabyte_from_end(value)
        else:
            value = _parse_unsigned(text[:-1], _U64_MAX)
            if value is not None:
                return Sector.megabyte(value)
    elif text.endswith("%"):
        value = _parse_unsigned(text[:-1], _U16_MAX)
        if value is not None and value <= 100:
            return Sector.percent(value)
    elif text == "start":
        return Sector.start()
    elif text == "end":
        return Sector.end()
    elif text.startswith("-"):
        value = _parse_unsigned(text[1:], _U64_MAX)
        if value is not None:
            return Sector.unit_from_end(value)
    else:
        value = _parse_unsigned(text, _U64_MAX)
        if value is not None:
            return Sector.unit(value)
    raise ValueError("invalid sector value")


class SectorDevice(BlockDevice):
    """A block device whose size is measured in sectors."""

    @abstractmethod
    def sectors(self) -> int:
        """The total number of sectors on the device."""

    def logical_block_size(self) -> int:
        """The size of each logical sector, in bytes."""
        block = self.sys_block_path()
        if not block.exists():
            return 512
        try:
            return read_file(block / "queue" / "logical_block_size")
        except (OSError, ValueError):
            parent = self.parent_device()
            if parent is None:
                raise OSError(f"partition {block} lacks parent block device") from None
            return read_file(parent / "queue" / "logical_block_size")

    def physical_block_size(self) -> int:
        """The size of each physical sector, in bytes."""
        return read_file(self.sys_block_path() / "queue" / "physical_block_size")

    def get_sector(self, sector: Sector) -> int:
        """Convert a Sector into an absolute sector number on this device."""
        block_size = self.logical_block_size()

        def end() -> int:
            return self.sectors() - _MIB2 // block_size

        def megabyte(size: int) -> int:
            return (size * 1_000_000) // block_size

        kind, value = sector.kind, sector.value
        if kind is SectorKind.START:
            result = _MIB2 // block_size
        elif kind is SectorKind.END:
            result = end()
        elif kind is SectorKind.MEGABYTE:
            result = megabyte(value)
        elif kind is SectorKind.MEGABYTE_FROM_END:
            result = end() - megabyte(value)
        elif kind is SectorKind.UNIT:
            result = value
        elif kind is SectorKind.UNIT_FROM_END:
            result = end() - value
        elif value == _U16_MAX:
            result = self.sectors()
        else:
            result = (self.sectors() * block_size) // _U16_MAX * value // block_size

        if result < 0:
            raise ValueError(f"{sector} lies before the start of the device")
        return result