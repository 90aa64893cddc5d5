"""Reading mount definitions from configuration structs."""

from __future__ import annotations

import re
from typing import Any

from .extract import ExtractError, Extractor, as_bool, as_int, as_string, extract
from .models import BindMount, DeviceMount, ImageMount, TmpfsMount, VolumeMount

_OCTAL = re.compile(r"[0-7]+")


def _field(value: Any, key: str, extractor: Extractor, label: str | None = None) -> Any:
    try:
        return extract(value, key, extractor)
    except ValueError as err:
        raise ExtractError(f"invalid config for {label or key}: {err}") from err


def _require_type(name: str, value: Any, expected: str, article: str = "a") -> None:
    kind = _field(value, "type", as_string)
    if kind != expected:
        raise ExtractError(f"{name} is not {article} {expected} mount config")


def bind_mount_from_struct(name: str, value: Any) -> BindMount:
    """Read a mount of type ``bind``; ``name`` is the default host path."""
    out = BindMount(host_path=name)

    kind = _field(value, "type", as_string)
    if kind is None:
        raise ExtractError(f"{name} is missing required type on value {value!r}")
    if kind != "bind":
        raise ExtractError(f"{name} is not a bind mount config, but {kind}")

    if (p := _field(value, "source", as_string)) is not None:
        out.host_path = p
    if (p := _field(value, "target", as_string)) is not None:
        out.container_path = p
    if (p := _field(value, "readonly", as_bool)) is not None:
        out.readonly = p
    return out


def volume_mount_from_struct(name: str, value: Any) -> VolumeMount:
    """Read a mount of type ``volume``; ``name`` is the default volume name."""
    out = VolumeMount(volume_name=name)
    _require_type(name, value, "volume")

    if (p := _field(value, "source", as_string)) is not None:
        out.volume_name = p
    if (p := _field(value, "target", as_string)) is not None:
        out.container_path = p
    if (p := _field(value, "path", as_string)) is not None:
        out.subpath = p
    if (p := _field(value, "readonly", as_bool)) is not None:
        out.readonly = p
    return out


def tmpfs_mount_from_struct(name: str, value: Any) -> TmpfsMount:
    """Read a mount of type ``tmpfs``; ``name`` is the default target path."""
    out = TmpfsMount(container_path=name)
    _require_type(name, value, "tmpfs")

    if (p := _field(value, "target", as_string)) is not None:
        out.container_path = p
    if (p := _field(value, "size", as_int, "path")) is not None:
        out.size = p
    if (p := _field(value, "mode", as_string, "readonly")) is not None:
        if not _OCTAL.fullmatch(p) or int(p, 8) >= 2**32:
            raise ExtractError(f"invalid file mode for {name}: {p!r}")
        out.mode = int(p, 8)
    return out


def image_mount_from_struct(name: str, value: Any) -> ImageMount:
    """Read a mount of type ``image``; ``name`` is the default image."""
    out = ImageMount(image=name)
    _require_type(name, value, "image", "an")

    if (p := _field(value, "source", as_string)) is not None:
        out.image = p
    if (p := _field(value, "target", as_string)) is not None:
        out.container_path = p
    if (p := _field(value, "path", as_string)) is not None:
        out.subpath = p
    if (p := _field(value, "readonly", as_bool)) is not None:
        out.readonly = p
    return out


def device_mount_from_struct(name: str, value: Any) -> DeviceMount:
    """Read a mount of type ``device``; ``name`` is the default target path."""
    out = DeviceMount(container_path=name)
    _require_type(name, value, "device")

    if (p := _field(value, "target", as_string)) is not None:
        out.container_path = p
    if (p := _field(value, "source", as_string)) is not None:
        out.host_path = p
    if (p := _field(value, "permissions", as_string)) is not None:
        out.permissions = p
    if (p := _field(value, "cgroup_rule", as_string)) is not None:
        out.cgroup_rule = p
    return out