"""Run commands inside a directory tree with systemd-nspawn."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from .command import Command

_BINDS = (
    "--bind",
    "/dev",
    "--bind",
    "/sys",
    "--bind",
    "/proc",
    "--bind",
    "/dev/mapper/control",
    "--property=DeviceAllow=block-sd rw",
    "--property=DeviceAllow=block-devices-mapper rw",
)


class SystemdNspawn:
    """A directory in which commands are run by systemd-nspawn."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path).resolve(strict=True)
        self._envs: list[tuple[str, str]] = []

    def env(self, key: str, value: str) -> None:
        """Define an environment variable for commands run in the container."""
        self._envs.append((key, value))

    def command(
        self, cmd: str | os.PathLike[str], args: Iterable[str | os.PathLike[str]]
    ) -> Command:
        """Build a command that runs `cmd` with `args` in the container."""
        command = Command("systemd-nspawn").args(_BINDS).arg("-D").arg(self.path)
        command.arg(cmd).args(args)
        command.capture_output = True
        for key, value in self._envs:
            command.arg(f"--setenv={key}={value}")
        return command