from enum import Enum
from typing import Tuple
from dataclasses import dataclass, field


class ContainerState(str, Enum):
    ABSENT = "absent"
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass(frozen=True)
class MountSpec:
    """A resolved host directory bound to a path inside the container."""
    host_path: str
    container_path: str

    def as_bind(self) -> str:
        return f"{self.host_path}:{self.container_path}"


@dataclass(frozen=True)
class EnvConfig:
    image_name: str
    container_name: str
    username: str
    dockerfile: str
    mounts: Tuple[str, ...] = field(default_factory=tuple)
    platform: str = "linux/arm64"
    shell: str = "/bin/bash"
    build_context: str = "."
