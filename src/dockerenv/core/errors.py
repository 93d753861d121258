# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""
Error taxonomy for dockerenv.

Every failure that ends an invocation is one of these. The CLI prints the
message and exits with ``exit_code``.
"""

from typing import Optional


class DockerEnvError(Exception):
    """Base class for all dockerenv errors."""
    exit_code = 1


class ConfigurationError(DockerEnvError):
    """Raised for a malformed option, action, mount spec or config file."""
    pass


class PreconditionError(DockerEnvError):
    """Raised when a required artifact (Dockerfile, image) is missing or in the way."""
    pass


class DockerUnavailableError(DockerEnvError):
    """Raised when Docker daemon is not reachable."""
    pass


class RuntimeOperationError(DockerEnvError):
    """Raised when a runtime call (build, start, create, stop, ...) fails."""

    def __init__(self, action: str, target: str, detail: Optional[str] = None, exit_code: Optional[int] = None):
        self.action = action
        self.target = target
        self.detail = detail
        if exit_code is not None and exit_code < 0:
            # Killed by a signal; use the shell convention 128 + signum.
            exit_code = 128 - exit_code
        if exit_code:
            self.exit_code = exit_code
        message = f"{action} failed for '{target}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)
