from pathlib import Path

import pytest

from diskkit.device import BlockDevice, read_file


class FakeDevice(BlockDevice):
    def __init__(self, path, sys_root):
        self._path = Path(path)
        self.sys_class_block = sys_root

    def device_path(self):
        return self._path


@pytest.fixture
def sysfs(tmp_path):
    devices = tmp_path / "devices" / "sda"
    (devices / "sda1").mkdir(parents=True)
    (devices / "queue").mkdir()
    block = tmp_path / "class" / "block"
    block.mkdir(parents=True)
    (block / "sda").symlink_to(devices)
    (block / "sda1").symlink_to(devices / "sda1")
    return tmp_path, block, devices


def test_read_file_strips_and_parses(tmp_path):
    target = tmp_path / "value"
    target.write_text("  42\n")
    assert read_file(target) == 42


def test_read_file_custom_parser(tmp_path):
    target = tmp_path / "value"
    target.write_text("hello\n")
    assert read_file(target, str.upper) == "HELLO"


def test_read_file_invalid(tmp_path):
    target = tmp_path / "value"
    target.write_text("abc")
    with pytest.raises(ValueError):
        read_file(target)


def test_read_file_missing(tmp_path):
    with pytest.raises(OSError):
        read_file(tmp_path / "missing")


def test_device_name_plain(tmp_path):
    device = FakeDevice(tmp_path / "sdb2", tmp_path)
    assert BlockDevice.device_name(device) == "sdb2"


def test_device_name_follows_symlink(tmp_path):
    target = tmp_path / "dm-3"
    target.write_text("")
    link = tmp_path / "root"
    link.symlink_to(target)
    assert BlockDevice.device_name(FakeDevice(link, tmp_path)) == "dm-3"


def test_sys_block_path(sysfs):
    _, block, _ = sysfs
    device = FakeDevice("/dev/sda1", block)
    assert BlockDevice.sys_block_path(device) == block / "sda1"


def test_mount_point_default(sysfs):
    _, block, _ = sysfs
    assert BlockDevice.mount_point(FakeDevice("/dev/sda", block)) is None


def test_is_partition(sysfs):
    _, block, devices = sysfs
    (devices / "sda1" / "partition").write_text("1\n")
    assert BlockDevice.is_partition(FakeDevice("/dev/sda1", block)) is True
    assert BlockDevice.is_partition(FakeDevice("/dev/sda", block)) is False


def test_read_only_flag(sysfs):
    _, block, devices = sysfs
    (devices / "ro").write_text("1\n")
    (devices / "sda1" / "ro").write_text("0\n")
    assert BlockDevice.is_read_only(FakeDevice("/dev/sda", block)) is True
    assert BlockDevice.is_read_only(FakeDevice("/dev/sda1", block)) is False


def test_removable_and_rotational(sysfs):
    _, block, devices = sysfs
    (devices / "removable").write_text("1\n")
    (devices / "queue" / "rotational").write_text("1\n")
    disk = FakeDevice("/dev/sda", block)
    assert BlockDevice.is_removable(disk) is True
    assert BlockDevice.is_rotational(disk) is True
    assert BlockDevice.is_rotational(FakeDevice("/dev/sda1", block)) is False


def test_flags_false_without_sysfs_entry(sysfs):
    _, block, _ = sysfs
    device = FakeDevice("/dev/nvme0n1", block)
    assert BlockDevice.is_read_only(device) is False
    assert BlockDevice.is_removable(device) is False


def test_parent_device(sysfs):
    _, block, _ = sysfs
    assert BlockDevice.parent_device(FakeDevice("/dev/sda1", block)) == block / "sda"


def test_parent_device_missing(sysfs):
    _, block, _ = sysfs
    assert BlockDevice.parent_device(FakeDevice("/dev/sdz", block)) is None