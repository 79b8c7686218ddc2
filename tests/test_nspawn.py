import pytest

from diskkit.nspawn import SystemdNspawn


def test_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        SystemdNspawn(tmp_path / "missing")


def test_path_is_canonical(tmp_path):
    (tmp_path / "root").mkdir()
    container = SystemdNspawn(tmp_path / "root" / ".." / "root")
    assert container.path == (tmp_path / "root").resolve()


def test_command_arguments(tmp_path):
    container = SystemdNspawn(tmp_path)
    command = container.command("ls", ["-la", "/"])
    argv = command.argv
    assert argv[0] == "systemd-nspawn"
    assert argv[1:11] == [
        "--bind", "/dev",
        "--bind", "/sys",
        "--bind", "/proc",
        "--bind", "/dev/mapper/control",
        "--property=DeviceAllow=block-sd rw",
        "--property=DeviceAllow=block-devices-mapper rw",
    ]
    assert argv[11:] == ["-D", str(tmp_path.resolve()), "ls", "-la", "/"]
    assert command.capture_output is True


def test_env_appended_as_setenv(tmp_path):
    container = SystemdNspawn(tmp_path)
    container.env("LANG", "C")
    container.env("HOME", "/root")
    argv = container.command("true", []).argv
    assert argv[-2:] == ["--setenv=LANG=C", "--setenv=HOME=/root"]
    assert argv[-3] == "true"