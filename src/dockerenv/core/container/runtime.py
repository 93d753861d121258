# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""
Thin wrapper around the Docker runtime.

This module provides DockerRuntime which:
- Probes container and image state through the Docker SDK (exact names only)
- Starts, stops and removes containers and images through the SDK
- Runs the interactive and build commands through the docker CLI, since
  they need the caller's TTY or stream their log to the terminal
"""

import logging
import subprocess
from contextlib import contextmanager
from typing import List, Optional, Sequence

import docker
from docker.errors import APIError, DockerException, ImageNotFound
from requests.exceptions import RequestException

from dockerenv.core.errors import DockerUnavailableError, RuntimeOperationError
from .types import ContainerState, MountSpec

logger = logging.getLogger(__name__)

# Statuses that ``docker ps`` (without -a) lists.
RUNNING_STATUSES = {"running", "paused", "restarting"}


class DockerRuntime:
    """
    Collaborator for every call dockerenv makes into Docker.

    SDK failures are converted into RuntimeOperationError (daemon refused the
    call) or DockerUnavailableError (daemon unreachable) so callers only deal
    with the dockerenv error taxonomy.
    """

    def __init__(self, client, docker_bin: str = "docker"):
        self.client = client
        self.docker_bin = docker_bin

    @classmethod
    def from_env(cls, docker_bin: str = "docker") -> "DockerRuntime":
        """
        Connect to the daemon configured in the environment.

        Raises:
            DockerUnavailableError: If Docker is not found or not running.
        """
        try:
            client = docker.from_env()
            client.ping()
        except (DockerException, RequestException) as e:
            raise DockerUnavailableError(
                f"Cannot connect to Docker. Make sure the daemon is running and you can access its socket. ({e})"
            )
        return cls(client, docker_bin=docker_bin)

    @contextmanager
    def _sdk_errors(self, action: str, target: str):
        """Convert Docker SDK failures into the dockerenv error taxonomy."""
        try:
            yield
        except APIError as e:
            raise RuntimeOperationError(action, target, str(e))
        except (DockerException, RequestException) as e:
            raise DockerUnavailableError(f"Lost connection to Docker during {action} of '{target}': {e}")

    # --- State probing ---

    def find_container(self, name: str):
        """Return the container whose name is exactly ``name``, or None."""
        with self._sdk_errors("inspect", name):
            # The name filter is a server-side regex match, so compare exactly afterwards.
            candidates = self.client.containers.list(all=True, filters={"name": name})
        return next((c for c in candidates if c.name == name), None)

    def container_state(self, name: str) -> ContainerState:
        container = self.find_container(name)
        if container is None:
            return ContainerState.ABSENT
        if container.status in RUNNING_STATUSES:
            return ContainerState.RUNNING
        return ContainerState.STOPPED

    def image_exists(self, name: str) -> bool:
        with self._sdk_errors("inspect image", name):
            try:
                self.client.images.get(name)
            except ImageNotFound:
                return False
        return True

    # --- Lifecycle through the SDK ---

    def _require_container(self, action: str, name: str):
        container = self.find_container(name)
        if container is None:
            raise RuntimeOperationError(action, name, "no such container")
        return container

    def start_container(self, name: str) -> None:
        container = self._require_container("start", name)
        with self._sdk_errors("start", name):
            container.start()

    def unpause_container(self, name: str) -> bool:
        """Unpause ``name`` if it is paused. Returns True when it was paused."""
        container = self._require_container("unpause", name)
        if container.status != "paused":
            return False
        with self._sdk_errors("unpause", name):
            container.unpause()
        return True

    def stop_container(self, name: str) -> None:
        container = self._require_container("stop", name)
        with self._sdk_errors("stop", name):
            container.stop()

    def remove_container(self, name: str) -> None:
        container = self._require_container("remove", name)
        with self._sdk_errors("remove", name):
            container.remove(force=True)

    def remove_image(self, name: str) -> None:
        with self._sdk_errors("remove image", name):
            try:
                self.client.images.remove(image=name, force=True)
            except ImageNotFound:
                raise RuntimeOperationError("remove image", name, "no such image")

    # --- docker CLI commands ---

    def get_exec_args(self, name: str, shell: str) -> List[str]:
        return [self.docker_bin, "exec", "-it", name, shell]

    def get_run_args(self, name: str, image: str, username: str, mounts: Sequence[MountSpec], shell: str) -> List[str]:
        """
        Convert a create request into docker run command arguments.

        Bind flags keep the order of ``mounts``.
        """
        args = [self.docker_bin, "run", "-it", "--name", name, "--user", username]
        for mount in mounts:
            args.extend(["-v", mount.as_bind()])
        args.extend([image, shell])
        return args

    def get_build_command(
        self,
        image: str,
        dockerfile: str,
        username: str,
        platform: str,
        context: str = ".",
        no_cache: bool = False
    ) -> List[str]:
        """Construct docker build command."""
        args = [self.docker_bin, "build"]
        if no_cache:
            args.append("--no-cache")
        args.extend([
            "--platform", platform,
            "--build-arg", f"USERNAME={username}",
            "-t", image,
            "-f", dockerfile,
            context
        ])
        return args

    def _run_cli(self, args: List[str], cwd: Optional[str] = None) -> int:
        logger.debug("Executing: %s", " ".join(args))
        try:
            returncode = subprocess.run(args, cwd=cwd).returncode
        except FileNotFoundError:
            raise DockerUnavailableError(
                "Docker command not found. Please ensure Docker is installed and available in your system PATH."
            )
        # subprocess reports death by signal N as -N.
        return 128 - returncode if returncode < 0 else returncode

    def exec_shell(self, name: str, shell: str) -> int:
        """Open an interactive shell in a running container; returns the shell's exit code."""
        return self._run_cli(self.get_exec_args(name, shell))

    def run_container(self, name: str, image: str, username: str, mounts: Sequence[MountSpec], shell: str) -> int:
        """Create a container and attach to it; returns docker run's exit code."""
        return self._run_cli(self.get_run_args(name, image, username, mounts, shell))

    def build_image(
        self,
        image: str,
        dockerfile: str,
        username: str,
        platform: str,
        context: str = ".",
        no_cache: bool = False
    ) -> int:
        return self._run_cli(self.get_build_command(image, dockerfile, username, platform, context, no_cache))
