"""Block device queries backed by sysfs."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, TypeVar

T = TypeVar("T")

_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


def read_file(path: str | Path, parse: Callable[[str], T] = int) -> T:
    """Read a file, strip surrounding whitespace and parse its contents.

    Raises OSError if the file cannot be read, ValueError if it cannot be parsed.
    """
    text = Path(path).read_text().strip()
    try:
        return parse(text)
    except (ValueError, TypeError) as why:
        raise ValueError(f"cannot parse {text!r} from {path}: {why}") from why


def _unescape_mount_field(field: str) -> str:
    return _OCTAL_ESCAPE.sub(lambda match: chr(int(match.group(1), 8)), field)


def _same_path(first: Path, second: Path) -> bool:
    if first == second:
        return True
    try:
        return first.resolve() == second.resolve()
    except OSError:
        return False


class BlockDevice(ABC):
    """Shared behaviour of block devices, whether disks or partitions."""

    sys_class_block: Path = Path("/sys/class/block")
    mounts_file: Path = Path("/proc/self/mounts")

    @abstractmethod
    def device_path(self) -> Path:
        """The path to the device, such as /dev/sda1."""

    def mount_point(self) -> Path | None:
        """Where the device is mounted, if it is, according to the mount table."""
        try:
            table = Path(self.mounts_file).read_text()
        except OSError:
            return None
        device = Path(self.device_path())
        for line in table.splitlines():
            fields = line.split()
            if len(fields) < 2:
                continue
            source = Path(_unescape_mount_field(fields[0]))
            if _same_path(source, device):
                return Path(_unescape_mount_field(fields[1]))
        return None

    def device_name(self) -> str:
        """The kernel name of the device, such as sda1."""
        path = Path(self.device_path())
        try:
            name = path.readlink().name
        except OSError:
            name = path.name
        if not name:
            raise ValueError(f"device path {path} has no file name")
        return name

    def sys_block_path(self) -> Path:
        """The sysfs directory of this device."""
        return Path(self.sys_class_block) / self.device_name()

    def _sys_flag(self, relative: str) -> bool:
        block = self.sys_block_path()
        if not block.exists():
            return False
        try:
            return read_file(block / relative) == 1
        except (OSError, ValueError):
            return False

    def is_partition(self) -> bool:
        """True if sysfs marks the device as a partition."""
        return (self.sys_block_path() / "partition").exists()

    def is_read_only(self) -> bool:
        """True if the device is read-only."""
        return self._sys_flag("ro")

    def is_removable(self) -> bool:
        """True if the device is removable; meaningful for disks only."""
        return self._sys_flag("removable")

    def is_rotational(self) -> bool:
        """True if the device is rotational; meaningful for disks only."""
        return self._sys_flag("queue/rotational")

    def parent_device(self) -> Path | None:
        """The sysfs directory of the parent device, if there is one."""
        try:
            canonical = self.sys_block_path().resolve(strict=True)
        except OSError:
            return None
        parent_name = canonical.parent.name
        if not parent_name:
            return None
        parent = Path(self.sys_class_block) / parent_name
        return parent if parent.exists() else None