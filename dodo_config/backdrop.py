"""Reading backdrop definitions from parsed configuration data."""

from __future__ import annotations

import posixpath
from secrets import token_hex
from typing import Any

from .extract import (
    ExtractError,
    Extractor,
    as_int,
    as_string,
    either,
    extract,
    list_or_dict,
    one_or_more,
    parse_string,
)
from .models import (
    Backdrop,
    BuildArgument,
    BuildConfig,
    BuildSecret,
    ContainerConfig,
    EnvironmentVariable,
    File,
    PortBinding,
    Process,
    SSHAgent,
    bind_mount_from_spec,
    device_mount_from_spec,
    environment_variable_from_spec,
    port_binding_from_spec,
)
from .mounts import (
    bind_mount_from_struct,
    device_mount_from_struct,
    image_mount_from_struct,
    tmpfs_mount_from_struct,
    volume_mount_from_struct,
)


def _field(value: Any, key: str, extractor: Extractor, label: str | None = None) -> Any:
    try:
        return extract(value, key, extractor)
    except ValueError as err:
        raise ExtractError(f"invalid config for {label or key}: {err}") from err


def _image_or_build(out: Backdrop, value: Any, key: str) -> None:
    try:
        image = extract(value, key, as_string)
    except ValueError:
        build = _field(value, key, build_config_from_struct)
        if build is not None:
            out.build_config = build
    else:
        if image is not None:
            out.container_config.image = image


def backdrop_from_struct(name: str, value: Any) -> Backdrop:
    """Read a whole backdrop; ``name`` is its default name."""
    out = Backdrop(name=name)

    if (p := _field(value, "name", as_string)) is not None:
        out.name = p
    if (p := _field(value, "aliases", one_or_more(as_string))) is not None:
        out.aliases = p
    if (p := _field(value, "runtime", as_string)) is not None:
        out.runtime = p
    if (p := _field(value, "build.builder", as_string, "builder")) is not None:
        out.builder = p

    out.container_config = container_config_from_struct(name, value)

    _image_or_build(out, value, "image")
    _image_or_build(out, value, "build")

    if (script := _field(value, "script", as_string)) is not None:
        tmp_path = f"/tmp/dodo-{token_hex(32)[:20]}/"
        entrypoint = posixpath.join(tmp_path, "entrypoint")
        out.required_files.append(File(file_path=entrypoint, contents=script.encode()))
        out.container_config.process.entrypoint.append(entrypoint)

    return out


def container_config_from_struct(name: str, value: Any) -> ContainerConfig:
    """Read the container part of a backdrop."""
    out = ContainerConfig(mounts=[])

    if (p := _field(value, "container_name", as_string)) is not None:
        out.name = p

    out.process = process_from_struct(name, value)

    if (p := _field(value, "capabilities", one_or_more(as_string))) is not None:
        out.capabilities = p

    environment = list_or_dict(
        either(parse_string(environment_variable_from_spec), environment_variable_from_struct)
    )
    if (p := _field(value, "environment", environment)) is not None:
        out.environment = p

    ports = list_or_dict(either(parse_string(port_binding_from_spec), port_binding_from_struct))
    if (p := _field(value, "ports", ports)) is not None:
        out.ports = p

    mounts = list_or_dict(
        either(
            bind_mount_from_struct,
            volume_mount_from_struct,
            tmpfs_mount_from_struct,
            image_mount_from_struct,
            device_mount_from_struct,
        )
    )
    if (p := _field(value, "mounts", mounts, "volumes")) is not None:
        out.mounts.extend(p)

    # Deprecated in favour of "mounts".
    volumes = list_or_dict(
        either(parse_string(bind_mount_from_spec), volume_mount_from_struct, bind_mount_from_struct)
    )
    if (p := _field(value, "volumes", volumes)) is not None:
        out.mounts.extend(p)

    # Deprecated in favour of "mounts".
    devices = list_or_dict(either(parse_string(device_mount_from_spec), device_mount_from_struct))
    if (p := _field(value, "devices", devices)) is not None:
        out.mounts.extend(p)

    return out


def process_from_struct(name: str, value: Any) -> Process:
    """Read how the container process is started."""
    out = Process()

    interpreter = _field(value, "interpreter", one_or_more(as_string), "interepreter")
    out.entrypoint = interpreter if interpreter is not None else ["/bin/sh"]

    if (p := _field(value, "user", as_string, "uesr")) is not None:
        out.user = p
    if (p := _field(value, "working_dir", as_string)) is not None:
        out.working_dir = p
    return out


def environment_variable_from_struct(name: str, value: Any) -> EnvironmentVariable:
    """Read an environment variable; ``name`` is its default key."""
    out = EnvironmentVariable(key=name)
    if (p := _field(value, "name", as_string)) is not None:
        out.key = p
    if (p := _field(value, "value", as_string)) is not None:
        out.value = p
    return out


def port_binding_from_struct(name: str, value: Any) -> PortBinding:
    """Read a port binding; ``name`` is the default host port."""
    out = PortBinding(host_port=name)

    try:
        target = extract(value, "target", as_string)
    except ValueError:
        port = _field(value, "target", as_int)
        if port is not None:
            out.container_port = str(port)
    else:
        if target is not None:
            out.host_port = target

    try:
        publish = extract(value, "publish", as_string)
    except ValueError:
        port = _field(value, "publish", as_int)
        if port is not None:
            out.host_port = str(port)
    else:
        if publish is not None:
            out.container_port = publish

    if (p := _field(value, "protocol", as_string)) is not None:
        out.protocol = p
    if (p := _field(value, "host_ip", as_string)) is not None:
        out.host_ip = p
    return out


def build_config_from_struct(name: str, value: Any) -> BuildConfig:
    """Read how the backdrop's image is built."""
    out = BuildConfig()

    if (p := _field(value, "name", as_string)) is not None:
        out.image_name = p
    if (p := _field(value, "context", as_string)) is not None:
        out.context = p
    if (p := _field(value, "dockerfile", as_string)) is not None:
        out.dockerfile = p
    if (p := _field(value, "steps", as_string)) is not None:
        out.inline_dockerfile = [p]
    if (p := _field(value, "dependencies", one_or_more(as_string))) is not None:
        out.dependencies = p
    if (p := _field(value, "arguments", list_or_dict(build_argument_from_struct))) is not None:
        out.arguments = p
    if (p := _field(value, "secrets", list_or_dict(build_secret_from_struct))) is not None:
        out.secrets = p
    if (p := _field(value, "ssh_agents", list_or_dict(build_ssh_agent_from_struct))) is not None:
        out.ssh_agents = p
    return out


def build_argument_from_struct(name: str, value: Any) -> BuildArgument:
    """Read a build argument; ``name`` is its default key."""
    out = BuildArgument(key=name)
    if (p := _field(value, "name", as_string)) is not None:
        out.key = p
    if (p := _field(value, "value", as_string)) is not None:
        out.value = p
    return out


def build_secret_from_struct(name: str, value: Any) -> BuildSecret:
    """Read a build secret; ``name`` is its default id."""
    out = BuildSecret(id=name)
    if (p := _field(value, "id", as_string)) is not None:
        out.id = p
    if (p := _field(value, "path", as_string)) is not None:
        out.path = p
    return out


def build_ssh_agent_from_struct(name: str, value: Any) -> SSHAgent:
    """Read an SSH agent for the build; ``name`` is its default id."""
    out = SSHAgent(id=name)
    if (p := _field(value, "path", as_string)) is not None:
        out.id = p
    if (p := _field(value, "identity_file", as_string)) is not None:
        out.identity_file = p
    return out