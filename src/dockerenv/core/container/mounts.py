# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""
Bind mount normalization.

Turns raw ``HOSTPATH[:CONTAINERPATH]`` strings into MountSpec values whose
host side exists on disk and is an absolute, symlink-resolved path.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from dockerenv.core.errors import ConfigurationError, PreconditionError
from .types import MountSpec

logger = logging.getLogger(__name__)

MOUNT_SEPARATOR = ":"
DEFAULT_CONTAINER_PATH = "/app/workspace"
DEFAULT_HOST_DIR = "workspace"


def parse_mount_spec(raw: str) -> Tuple[str, str]:
    """
    Split a raw mount spec into (host_path, container_path) without touching disk.

    Raises:
        ConfigurationError: If the spec has more than one separator, an empty
            side, or a relative container path.
    """
    if MOUNT_SEPARATOR not in raw:
        if not raw:
            raise ConfigurationError("Mount spec must not be empty")
        return raw, DEFAULT_CONTAINER_PATH

    parts = raw.split(MOUNT_SEPARATOR)
    if len(parts) != 2:
        raise ConfigurationError(
            f"Invalid mount spec '{raw}': expected HOSTPATH[:CONTAINERPATH] with at most one '{MOUNT_SEPARATOR}'"
        )

    host_path, container_path = parts
    if not host_path or not container_path:
        raise ConfigurationError(f"Invalid mount spec '{raw}': host and container paths must both be set")
    if not container_path.startswith("/"):
        raise ConfigurationError(f"Invalid mount spec '{raw}': container path must be absolute")

    return host_path, container_path


def _prepare_host_dir(host_path: Path) -> str:
    try:
        host_path.mkdir(parents=True, exist_ok=True)
    except FileExistsError:
        raise PreconditionError(f"Mount source '{host_path}' exists but is not a directory")
    except OSError as e:
        raise PreconditionError(f"Cannot create mount source '{host_path}': {e}")
    return str(host_path.resolve())


def normalize_mounts(raw_specs: Sequence[str], cwd: Optional[Path] = None) -> List[MountSpec]:
    """
    Build MountSpecs from raw specs, creating host directories as needed.

    Args:
        raw_specs: Raw ``HOSTPATH[:CONTAINERPATH]`` strings, in bind order.
        cwd: Base for relative host paths. Defaults to the current directory.

    Returns:
        One MountSpec per raw spec in the same order, or a single
        ``<cwd>/workspace -> /app/workspace`` mount when raw_specs is empty.
    """
    base = Path(cwd) if cwd is not None else Path.cwd()

    if not raw_specs:
        host = _prepare_host_dir(base / DEFAULT_HOST_DIR)
        logger.debug("No mounts given, using default %s", host)
        return [MountSpec(host, DEFAULT_CONTAINER_PATH)]

    # A malformed spec anywhere in the list means no directory is created.
    parsed = [parse_mount_spec(raw) for raw in raw_specs]

    mounts = []
    for host_path, container_path in parsed:
        host = Path(host_path).expanduser()
        if not host.is_absolute():
            host = base / host
        mounts.append(MountSpec(_prepare_host_dir(host), container_path))
        logger.debug("Mount %s -> %s", mounts[-1].host_path, container_path)

    return mounts
