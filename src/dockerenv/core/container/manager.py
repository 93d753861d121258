# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""
Environment manager for the development container.

This module provides EnvironmentManager which:
- Reconciles the container's current state into a single action
  (enter, start and enter, or create)
- Builds, stops, cleans and rebuilds the image/container pair
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from dockerenv.core.errors import DockerEnvError, PreconditionError, RuntimeOperationError
from .mounts import normalize_mounts
from .runtime import DockerRuntime
from .types import ContainerState, EnvConfig

logger = logging.getLogger(__name__)


class EnvironmentManager:
    """
    Drives one container/image pair through the Docker runtime.

    The container state is probed fresh on every call; nothing is cached
    between actions.
    """

    def __init__(self, config: EnvConfig, runtime: DockerRuntime, cwd: Optional[Path] = None):
        self.config = config
        self.runtime = runtime
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()

    # --- run (reconciler) ---

    def run(self) -> int:
        """
        Enter the container, starting or creating it first when needed.

        Returns:
            Exit code of the interactive session.
        """
        name = self.config.container_name
        state = self.runtime.container_state(name)
        logger.debug("Container '%s' state: %s", name, state.value)

        if state is ContainerState.RUNNING:
            return self._attach()
        if state is ContainerState.STOPPED:
            return self._resume_and_attach()
        return self._create()

    def _attach(self) -> int:
        name = self.config.container_name
        if self.runtime.unpause_container(name):
            print(f"Container '{name}' was paused, resuming...")
        print(f"Entering container '{name}'...")
        return self.runtime.exec_shell(name, self.config.shell)

    def _resume_and_attach(self) -> int:
        name = self.config.container_name
        try:
            self.runtime.start_container(name)
        except RuntimeOperationError:
            print(f"Container '{name}' start failed")
            raise
        print("Container started successfully, entering...")
        return self.runtime.exec_shell(name, self.config.shell)

    def _create(self) -> int:
        cfg = self.config
        if not self.runtime.image_exists(cfg.image_name):
            raise PreconditionError(f"Image '{cfg.image_name}' does not exist, please build image first")

        mounts = normalize_mounts(cfg.mounts, cwd=self.cwd)
        print(f"Creating container '{cfg.container_name}' from image '{cfg.image_name}'...")
        for mount in mounts:
            print(f"  mount {mount.as_bind()}")

        returncode = self.runtime.run_container(cfg.container_name, cfg.image_name, cfg.username, mounts, cfg.shell)
        if returncode == 0:
            return 0

        # docker run -it also returns the session's exit code; only a missing container means create failed.
        if self.runtime.container_state(cfg.container_name) is ContainerState.ABSENT:
            print(f"Container '{cfg.container_name}' creation failed")
            raise RuntimeOperationError("create", cfg.container_name, f"docker run exited with {returncode}", exit_code=returncode)
        logger.info("Session in '%s' ended with exit code %d", cfg.container_name, returncode)
        return returncode

    # --- image and teardown commands ---

    def build(self, no_cache: bool = False) -> int:
        cfg = self.config
        if not no_cache and self.runtime.image_exists(cfg.image_name):
            raise PreconditionError(f"Image '{cfg.image_name}' already exists (use 'rebuild' to build it again)")

        print(f"Building image '{cfg.image_name}'...")
        print(f"Using Dockerfile: {cfg.dockerfile}")

        dockerfile = self.cwd / cfg.dockerfile
        if not dockerfile.is_file():
            raise PreconditionError(f"{cfg.dockerfile} not found in {self.cwd}")

        if no_cache:
            print("Rebuild (no cache)")

        returncode = self.runtime.build_image(
            cfg.image_name,
            str(dockerfile),
            cfg.username,
            cfg.platform,
            context=str(self.cwd / cfg.build_context),
            no_cache=no_cache
        )
        if returncode != 0:
            print(f"Image '{cfg.image_name}' build failed")
            raise RuntimeOperationError("build", cfg.image_name, f"docker build exited with {returncode}", exit_code=returncode)

        print(f"Image '{cfg.image_name}' built successfully!")
        return 0

    def stop(self) -> int:
        name = self.config.container_name
        print(f"Stopping container '{name}'...")
        if self.runtime.container_state(name) is not ContainerState.RUNNING:
            print(f"Container '{name}' is not running")
            return 0

        try:
            self.runtime.stop_container(name)
        except RuntimeOperationError:
            print(f"Container '{name}' stop failed")
            raise
        print(f"Container '{name}' stopped")
        return 0

    def _best_effort(self, step: str, func: Callable[[str], None], target: str) -> None:
        try:
            func(target)
        except DockerEnvError as e:
            logger.warning("Cleanup step '%s' skipped: %s", step, e)

    def clean(self) -> int:
        """Stop and remove the container, then remove the image. Each step may fail."""
        cfg = self.config
        print("Cleaning container and image...")
        self._best_effort("stop", self.runtime.stop_container, cfg.container_name)
        self._best_effort("remove container", self.runtime.remove_container, cfg.container_name)
        self._best_effort("remove image", self.runtime.remove_image, cfg.image_name)
        print("Cleanup completed")
        return 0

    def rebuild(self) -> int:
        print("Rebuilding image...")
        self.clean()
        return self.build(no_cache=True)
