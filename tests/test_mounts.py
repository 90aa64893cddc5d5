import pytest

from dodo_config.extract import ExtractError, either, list_or_dict
from dodo_config.models import BindMount, DeviceMount, ImageMount, TmpfsMount, VolumeMount
from dodo_config.mounts import (
    bind_mount_from_struct,
    device_mount_from_struct,
    image_mount_from_struct,
    tmpfs_mount_from_struct,
    volume_mount_from_struct,
)


def test_bind_mount_full():
    value = {"type": "bind", "source": "/from/path", "target": "/to/path", "readonly": True}
    assert bind_mount_from_struct("ignored", value) == BindMount("/from/path", "/to/path", True)


def test_bind_mount_name_is_default_host_path():
    mount = bind_mount_from_struct("/some/mount", {"type": "bind"})
    assert mount == BindMount(host_path="/some/mount")


def test_bind_mount_missing_type():
    with pytest.raises(ExtractError, match="missing required type"):
        bind_mount_from_struct("m", {"source": "/a"})


def test_bind_mount_wrong_type():
    with pytest.raises(ExtractError, match="not a bind mount config, but volume"):
        bind_mount_from_struct("m", {"type": "volume"})


def test_bind_mount_bad_readonly():
    with pytest.raises(ExtractError, match="invalid config for readonly"):
        bind_mount_from_struct("m", {"type": "bind", "readonly": "yes"})


def test_volume_mount_full():
    value = {"type": "volume", "source": "foo", "target": "bar", "path": "sub", "readonly": True}
    assert volume_mount_from_struct("x", value) == VolumeMount("foo", "bar", "sub", True)


def test_volume_mount_wrong_type():
    with pytest.raises(ExtractError, match="is not a volume mount config"):
        volume_mount_from_struct("x", {"type": "bind"})


def test_tmpfs_mount_mode_is_octal():
    value = {"type": "tmpfs", "target": "/tmp/t", "size": 1024, "mode": "755"}
    mount = tmpfs_mount_from_struct("x", value)
    assert mount == TmpfsMount(container_path="/tmp/t", size=1024, mode=0o755)


@pytest.mark.parametrize("mode", ["8", "0o755", "-1", "abc"])
def test_tmpfs_mount_invalid_mode(mode):
    with pytest.raises(ExtractError, match="invalid file mode for x"):
        tmpfs_mount_from_struct("x", {"type": "tmpfs", "mode": mode})


def test_tmpfs_mount_bad_size():
    with pytest.raises(ExtractError, match="invalid config for"):
        tmpfs_mount_from_struct("x", {"type": "tmpfs", "size": "big"})


def test_image_mount_full():
    value = {"type": "image", "source": "alpine", "target": "/img", "path": "/etc", "readonly": False}
    assert image_mount_from_struct("x", value) == ImageMount("alpine", "/img", "/etc", False)


def test_image_mount_wrong_type():
    with pytest.raises(ExtractError, match="is not an image mount config"):
        image_mount_from_struct("x", {"type": "device"})


def test_device_mount_full():
    value = {"type": "device", "source": "/dev/snd", "target": "/foo/bar", "permissions": "rw"}
    assert device_mount_from_struct("x", value) == DeviceMount(
        container_path="/foo/bar", host_path="/dev/snd", permissions="rw"
    )


def test_device_mount_name_is_default_target():
    mount = device_mount_from_struct("rule", {"type": "device", "cgroup_rule": "c *:* rmw"})
    assert mount == DeviceMount(container_path="rule", cgroup_rule="c *:* rmw")


def test_non_struct_value_is_rejected():
    with pytest.raises(ExtractError):
        device_mount_from_struct("x", "/dev/snd")


def test_mounts_combined_with_either():
    read = list_or_dict(
        either(
            bind_mount_from_struct,
            volume_mount_from_struct,
            tmpfs_mount_from_struct,
            image_mount_from_struct,
            device_mount_from_struct,
        )
    )
    mounts = read(
        "mounts",
        [
            {"type": "volume", "source": "foo", "target": "bar", "readonly": True},
            {"type": "device", "source": "/dev/snd", "target": "/dev/snd"},
        ],
    )
    assert mounts == [
        VolumeMount(volume_name="foo", container_path="bar", readonly=True),
        DeviceMount(container_path="/dev/snd", host_path="/dev/snd"),
    ]


def test_either_fails_when_no_type_matches():
    read = either(bind_mount_from_struct, volume_mount_from_struct)
    with pytest.raises(ExtractError):
        read("x", {"type": "unknown"})