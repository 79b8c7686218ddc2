"""Detect whether the system booted in EFI or BIOS mode."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Bootloader(Enum):
    """Firmware boot mode."""

    BIOS = "bios"
    EFI = "efi"


@dataclass
class _Override:
    mode: Bootloader | None = None


_override = _Override()


def force_bootloader(mode: Bootloader | None) -> Bootloader | None:
    """Force detection to report `mode`, or clear the override with None.

    Returns the previous override.
    """
    if mode is not None and not isinstance(mode, Bootloader):
        raise TypeError(f"expected a Bootloader or None, got {mode!r}")
    previous, _override.mode = _override.mode, mode
    return previous


def detect_bootloader(efi_dir: str | Path = "/sys/firmware/efi") -> Bootloader:
    """Report EFI when `efi_dir` is a directory, otherwise BIOS, unless forced."""
    if _override.mode is not None:
        return _override.mode
    return Bootloader.EFI if Path(efi_dir).is_dir() else Bootloader.BIOS