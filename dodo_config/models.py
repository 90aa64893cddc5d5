"""Data types describing backdrops, containers, mounts and builds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass
class EnvironmentVariable:
    """A single environment variable for the container process."""

    key: str = ""
    value: str = ""


@dataclass
class PortBinding:
    """A container port published on the host."""

    container_port: str = ""
    host_port: str = ""
    protocol: str = ""
    host_ip: str = ""


@dataclass
class BindMount:
    """A host path mounted into the container."""

    host_path: str = ""
    container_path: str = ""
    readonly: bool = False


@dataclass
class VolumeMount:
    """A named volume mounted into the container."""

    volume_name: str = ""
    container_path: str = ""
    subpath: str = ""
    readonly: bool = False


@dataclass
class TmpfsMount:
    """An in-memory filesystem mounted into the container."""

    container_path: str = ""
    size: int = 0
    mode: int = 0


@dataclass
class ImageMount:
    """The contents of an image mounted into the container."""

    image: str = ""
    container_path: str = ""
    subpath: str = ""
    readonly: bool = False


@dataclass
class DeviceMount:
    """A host device made available inside the container."""

    container_path: str = ""
    host_path: str = ""
    permissions: str = ""
    cgroup_rule: str = ""


Mount = Union[BindMount, VolumeMount, TmpfsMount, ImageMount, DeviceMount]


@dataclass
class Process:
    """How the container's main process is started."""

    entrypoint: list[str] = field(default_factory=list)
    user: str = ""
    working_dir: str = ""


@dataclass
class ContainerConfig:
    """Everything needed to create the container."""

    name: str = ""
    image: str = ""
    process: Process = field(default_factory=Process)
    capabilities: list[str] = field(default_factory=list)
    environment: list[EnvironmentVariable] = field(default_factory=list)
    ports: list[PortBinding] = field(default_factory=list)
    mounts: list[Mount] = field(default_factory=list)


@dataclass
class File:
    """A file that must exist inside the container before it starts."""

    file_path: str = ""
    contents: bytes = b""


@dataclass
class BuildArgument:
    """A build-time argument."""

    key: str = ""
    value: str = ""


@dataclass
class BuildSecret:
    """A secret made available during the build."""

    id: str = ""
    path: str = ""


@dataclass
class SSHAgent:
    """An SSH agent forwarded into the build."""

    id: str = ""
    identity_file: str = ""


@dataclass
class BuildConfig:
    """How to build the image for a backdrop."""

    image_name: str = ""
    context: str = ""
    dockerfile: str = ""
    inline_dockerfile: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    arguments: list[BuildArgument] = field(default_factory=list)
    secrets: list[BuildSecret] = field(default_factory=list)
    ssh_agents: list[SSHAgent] = field(default_factory=list)


@dataclass
class Backdrop:
    """A named, runnable container configuration."""

    name: str = ""
    aliases: list[str] = field(default_factory=list)
    runtime: str = ""
    builder: str = ""
    container_config: ContainerConfig = field(default_factory=ContainerConfig)
    build_config: Optional[BuildConfig] = None
    required_files: list[File] = field(default_factory=list)


def environment_variable_from_spec(spec: str) -> EnvironmentVariable:
    """Parse ``KEY=VALUE`` or a bare ``KEY`` (empty value)."""
    key, _, value = spec.partition("=")
    if not key:
        raise ValueError(f"invalid environment variable spec: {spec!r}")
    return EnvironmentVariable(key=key, value=value)


def port_binding_from_spec(spec: str) -> PortBinding:
    """Parse ``[[host_ip:]host_port:]container_port[/protocol]``."""
    ports, slash, protocol = spec.partition("/")
    if slash and not protocol:
        raise ValueError(f"invalid port binding spec: {spec!r}")
    parts = ports.split(":")
    if any(not part for part in parts) or len(parts) > 3:
        raise ValueError(f"invalid port binding spec: {spec!r}")

    binding = PortBinding(container_port=parts[-1], protocol=protocol)
    if len(parts) >= 2:
        binding.host_port = parts[-2]
    if len(parts) == 3:
        binding.host_ip = parts[0]
    return binding


def bind_mount_from_spec(spec: str) -> BindMount:
    """Parse ``host_path[:container_path[:ro|rw]]``."""
    parts = spec.split(":")
    if not parts[0] or len(parts) > 3:
        raise ValueError(f"invalid bind mount spec: {spec!r}")

    mount = BindMount(host_path=parts[0])
    if len(parts) >= 2:
        mount.container_path = parts[1]
    if len(parts) == 3:
        if parts[2] == "ro":
            mount.readonly = True
        elif parts[2] != "rw":
            raise ValueError(f"invalid bind mount mode in spec: {spec!r}")
    return mount


def device_mount_from_spec(spec: str) -> DeviceMount:
    """Parse ``host_path[:container_path[:permissions]]``."""
    parts = spec.split(":")
    if not parts[0] or len(parts) > 3:
        raise ValueError(f"invalid device spec: {spec!r}")

    mount = DeviceMount(host_path=parts[0], container_path=parts[0])
    if len(parts) >= 2 and parts[1]:
        mount.container_path = parts[1]
    if len(parts) == 3:
        mount.permissions = parts[2]
    return mount