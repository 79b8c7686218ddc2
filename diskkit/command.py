"""Run external programs, forwarding their output line by line."""

from __future__ import annotations

import errno
import logging
import os
import shlex
import subprocess
import threading
from collections.abc import Callable, Iterable
from typing import IO

_log = logging.getLogger(__name__)

StrPath = "str | os.PathLike[str]"


class CommandNotFoundError(FileNotFoundError):
    """The program could not be found, or the shell reported exit status 127."""


class CommandFailedError(OSError):
    """The program exited unsuccessfully."""

    def __init__(self, returncode: int, command: str) -> None:
        super().__init__(f"command failed with exit status: {returncode}")
        self.returncode = returncode
        self.command = command


def _check_status(returncode: int, command: str) -> None:
    if returncode == 0:
        return
    if returncode == 127:
        raise CommandNotFoundError(errno.ENOENT, f"command {command} was not found")
    raise CommandFailedError(returncode, command)


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


class Command:
    """A program and its arguments, environment and standard input.

    Set `capture_output` to pipe the program's stdout and stderr to the
    callbacks of run_with_callbacks instead of inheriting them.
    """

    def __init__(self, program: str | os.PathLike[str]) -> None:
        self._argv: list[str] = [os.fspath(program)]
        self._env: dict[str, str] = {}
        self._clear_env = False
        self._stdin: str | None = None
        self.capture_output = False

    @property
    def argv(self) -> list[str]:
        """The program followed by its arguments."""
        return list(self._argv)

    def __str__(self) -> str:
        return shlex.join(self._argv)

    def __repr__(self) -> str:
        return f"Command({self._argv!r})"

    def arg(self, arg: str | os.PathLike[str]) -> Command:
        """Append one argument."""
        self._argv.append(os.fspath(arg))
        return self

    def args(self, args: Iterable[str | os.PathLike[str]]) -> Command:
        """Append several arguments."""
        self._argv.extend(os.fspath(arg) for arg in args)
        return self

    def env(self, key: str, value: str) -> Command:
        """Set an environment variable for the program."""
        self._env[key] = value
        return self

    def env_clear(self) -> Command:
        """Start the program without inheriting this process's environment."""
        self._clear_env = True
        return self

    def stdin_input(self, text: str) -> Command:
        """Feed `text` to the program's standard input."""
        self._stdin = text
        return self

    def _environment(self) -> dict[str, str] | None:
        if not self._clear_env and not self._env:
            return None
        base = {} if self._clear_env else dict(os.environ)
        base.update(self._env)
        return base

    def _spawn(self, stdout: int | None, stderr: int | None) -> subprocess.Popen[bytes]:
        try:
            return subprocess.Popen(
                self._argv,
                stdin=subprocess.PIPE if self._stdin is not None else None,
                stdout=stdout,
                stderr=stderr,
                env=self._environment(),
            )
        except FileNotFoundError as why:
            raise CommandNotFoundError(
                errno.ENOENT, f"failed to spawn process {self}: {why}"
            ) from why
        except OSError as why:
            raise OSError(why.errno, f"failed to spawn process {self}: {why}") from why

    def run_with_stdout(self) -> str:
        """Run the program and return what it wrote to stdout.

        The exit status is not checked.
        """
        _log.info("running %s", self)
        stderr = subprocess.PIPE if self.capture_output else None
        stdin = self._stdin.encode() if self._stdin is not None else None
        with self._spawn(subprocess.PIPE, stderr) as child:
            try:
                output, _ = child.communicate(stdin)
            except OSError as why:
                raise OSError(why.errno, f"failed to get output of {self}: {why}") from why
        try:
            return output.decode("utf-8")
        except UnicodeDecodeError as why:
            raise OSError(f"command output has invalid UTF-8: {why}") from why

    def run(self) -> None:
        """Run the program, logging its output, and check its exit status."""
        self.run_with_callbacks(_log.info, _log.warning)

    def run_with_callbacks(
        self, info: Callable[[str], object], error: Callable[[str], object]
    ) -> None:
        """Run the program, passing each stdout line to `info` and stderr line to `error`.

        Raises CommandNotFoundError or CommandFailedError on an unsuccessful exit.
        """
        command = str(self)
        _log.info("running %s", command)
        pipe = subprocess.PIPE if self.capture_output else None
        child = self._spawn(pipe, pipe)

        failures: list[BaseException] = []

        def forward(stream: IO[bytes], callback: Callable[[str], object]) -> None:
            try:
                for raw in stream:
                    callback(_strip_line_ending(raw.decode("utf-8", "replace")))
            except BaseException as why:  # re-raised on the calling thread
                failures.append(why)
            finally:
                stream.close()

        readers = [
            threading.Thread(target=forward, args=(stream, callback), daemon=True)
            for stream, callback in ((child.stdout, info), (child.stderr, error))
            if stream is not None
        ]
        for reader in readers:
            reader.start()

        if self._stdin is not None and child.stdin is not None:
            try:
                child.stdin.write(self._stdin.encode())
                child.stdin.close()
            except OSError:
                child.kill()
                child.wait()
                for reader in readers:
                    reader.join()
                raise

        returncode = child.wait()
        for reader in readers:
            reader.join()
        if failures:
            raise failures[0]
        _check_status(returncode, command)