import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / 'src'))

import pytest
from unittest.mock import MagicMock

from dockerenv.core.container.runtime import DockerRuntime
from dockerenv.core.container.types import EnvConfig


@pytest.fixture
def config():
    return EnvConfig(
        image_name="aoc2026-env",
        container_name="aoc2026-container",
        username="appuser",
        dockerfile="dockerfile",
    )


@pytest.fixture
def runtime():
    """DockerRuntime double; every call is recorded on the same mock."""
    return MagicMock(spec=DockerRuntime)
