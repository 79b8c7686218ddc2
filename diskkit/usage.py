"""Measure how much of a file system is in use, via its dump tools."""

from __future__ import annotations

import errno
import math
import re
import subprocess
from collections.abc import Iterable, Iterator
from pathlib import Path

from .fs import FileSystem

_U64_MAX = 2**64 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")
_UNIT_FACTORS = {
    "KiB": 1024.0,
    "MiB": 1024.0 * 1024.0,
    "GiB": 1024.0 * 1024.0 * 1024.0,
    "TiB": 1024.0 * 1024.0 * 1024.0 * 1024.0,
}


class UsageError(OSError):
    """The usage of a file system could not be determined."""


def _parse_u64(text: str) -> int | None:
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _U64_MAX else None


def _run(*args: str | Path) -> subprocess.CompletedProcess[bytes]:
    return subprocess.run(
        [str(arg) for arg in args],
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        check=False,
    )


def _output_lines(output: bytes) -> Iterator[str]:
    try:
        text = output.decode("utf-8")
    except UnicodeDecodeError as why:
        raise UsageError(f"command output has invalid UTF-8: {why}") from why
    lines = iter(text.splitlines())
    next(lines, None)
    return lines


def sectors_used(part: str | Path, fs: FileSystem) -> int:
    """Run the dump command for `fs` on `part` and return the 512-byte sectors in use.

    Raises UsageError with errno ENOENT for file systems that are not supported.
    """
    if fs in (FileSystem.EXT2, FileSystem.EXT3, FileSystem.EXT4):
        return get_ext4_usage(_output_lines(_run("dumpe2fs", "-h", part).stdout))

    if fs in (FileSystem.FAT16, FileSystem.FAT32):
        result = _run("fsck.fat", "-nv", part)
        if result.returncode != 0:
            # Correct any fixable errors, then check again.
            _run("fsck.fat", "-fy", part)
            result = _run("fsck.fat", "-nv", part)
        return get_fat_usage(_output_lines(result.stdout))

    if fs is FileSystem.NTFS:
        result = _run("ntfsresize", "--info", "--force", "--no-progress-bar", part)
        lines = _output_lines(result.stdout)
        if result.returncode == 0:
            return get_ntfs_usage(lines)
        return get_ntfs_size(lines)

    if fs is FileSystem.BTRFS:
        result = _run("btrfs", "filesystem", "show", part)
        return get_btrfs_usage(_output_lines(result.stdout))

    raise UsageError(errno.ENOENT, "unsupported file system")


def get_btrfs_usage(lines: Iterable[str]) -> int:
    """Sectors used according to `btrfs filesystem show` output."""
    return parse_field_as_unit(iter(lines), "Total devices", 6) // 512


def get_ext4_usage(lines: Iterable[str]) -> int:
    """Sectors used according to `dumpe2fs -h` output."""
    reader = iter(lines)
    total_blocks = parse_field(reader, "Block count:", 2)
    free_blocks = parse_field(reader, "Free blocks:", 2)
    block_size = parse_field(reader, "Block size:", 2)
    if free_blocks > total_blocks:
        raise UsageError("free blocks exceed the block count")
    return ((total_blocks - free_blocks) * block_size) // 512


def get_ntfs_usage(lines: Iterable[str]) -> int:
    """Sectors used according to `ntfsresize --info` output, plus 2 MiB of slack."""
    used = parse_field(iter(lines), "You might resize at", 4)
    return (used + 2 * 1024 * 1024) // 512


def get_ntfs_size(lines: Iterable[str]) -> int:
    """Sectors of the whole NTFS volume according to `ntfsresize --info` output."""
    return parse_field(iter(lines), "Current volume size", 3) // 512


def get_fat_usage(lines: Iterable[str]) -> int:
    """Sectors used according to `fsck.fat -nv` output."""
    reader = iter(lines)
    cluster_size = parse_fsck_field(reader, "bytes per cluster")
    used, _total = parse_fsck_cluster_summary(reader)
    return (used * cluster_size) // 512


def parse_fsck_field(lines: Iterator[str], end: str) -> int:
    """Return the leading number of the first line ending with `end`."""
    for line in lines:
        line = line.strip()
        if line.endswith(end):
            words = line.split()
            value = _parse_u64(words[0]) if words else None
            if value is None:
                raise UsageError("invalid dump output")
            return value
    raise UsageError("invalid dump output: EOF")


def parse_fsck_cluster_summary(lines: Iterator[str]) -> tuple[int, int]:
    """Return the (used, total) clusters from the summary line of fsck.fat."""
    for line in lines:
        words = line.split()
        if not words or not words[0].endswith(":"):
            continue
        if len(words) > 3:
            used_text, slash, total_text = words[3].partition("/")
            if slash and total_text:
                used = _parse_u64(used_text)
                total = _parse_u64(total_text)
                if used is not None and total is not None:
                    return used, total
        raise UsageError("invalid dump output")
    raise UsageError("invalid dump output: EOF")


def parse_field(lines: Iterator[str], field: str, index: int) -> int:
    """Return the number in word `index` of the first line starting with `field`."""
    for line in lines:
        if line.startswith(field):
            words = line.split()
            value = _parse_u64(words[index]) if index < len(words) else None
            if value is None:
                raise UsageError("invalid usage field")
            return value
    raise UsageError("invalid usage output")


def parse_unit(unit: str) -> int:
    """Convert a size such as '112.00KiB' into bytes."""
    if len(unit) < 3:
        raise UsageError(f"invalid unit type: {unit}")
    value_text, suffix = unit[:-3], unit[-3:]
    try:
        value = float(value_text)
    except ValueError as why:
        raise UsageError(f"invalid unit value: {why}") from why
    factor = _UNIT_FACTORS.get(suffix)
    if factor is None:
        raise UsageError(f"invalid unit type: {suffix}")
    size = value * factor
    if math.isnan(size) or size <= 0:
        return 0
    if math.isinf(size) or size >= _U64_MAX:
        return _U64_MAX
    return int(size)


def parse_field_as_unit(lines: Iterator[str], field: str, index: int) -> int:
    """Return word `index`, read as a size with a unit, of the first line starting with `field`."""
    for line in lines:
        line = line.lstrip()
        if line.startswith(field):
            words = line.split()
            if index >= len(words):
                raise UsageError("invalid usage field")
            return parse_unit(words[index])
    raise UsageError("invalid usage output")