import logging
from typing import Dict
from pathlib import Path
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from dockerenv.core.errors import ConfigurationError, PreconditionError
from .types import EnvConfig

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "env.Dockerfile.j2"

# Docker platform architecture -> Miniconda installer suffix
CONDA_ARCHES = {
    "arm64": "aarch64",
    "aarch64": "aarch64",
    "amd64": "x86_64",
    "x86_64": "x86_64",
}

COMMON_PACKAGES = [
    "vim", "git", "curl", "wget", "ca-certificates", "build-essential",
    "python3", "python3-pip", "python3-dev", "python3-venv", "bzip2",
]

VERILATOR_PACKAGES = [
    "perl", "autoconf", "flex", "bison", "ccache", "libgoogle-perftools-dev",
    "numactl", "perl-doc", "help2man",
]


def conda_arch_for(platform: str) -> str:
    """Map a docker platform such as ``linux/arm64`` to the Miniconda architecture."""
    arch = platform.split("/")[-1]
    if arch not in CONDA_ARCHES:
        raise ConfigurationError(f"Unsupported platform '{platform}' (known architectures: {', '.join(sorted(CONDA_ARCHES))})")
    return CONDA_ARCHES[arch]


def build_context(config: EnvConfig) -> Dict:
    """Template context for an EnvConfig, filled with the image defaults."""
    return {
        "base_image": "ubuntu:24.04",
        "timezone": "Asia/Taipei",
        "conda_arch": conda_arch_for(config.platform),
        "common_packages": COMMON_PACKAGES,
        "verilator_packages": VERILATOR_PACKAGES,
        "verilator_ref": "stable",
        "systemc_version": "2.3.4",
        "user_uid": 1001,
        "user_gid": 1001,
        "username": config.username,
        "shell": config.shell,
    }


def render_dockerfile(context: Dict) -> str:
    """Render Dockerfile content from a template context dictionary."""
    env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)), undefined=StrictUndefined, keep_trailing_newline=True)
    template = env.get_template(TEMPLATE_NAME)
    return template.render(context)


def generate_dockerfile(config: EnvConfig, output_path: Path, force: bool = False) -> Path:
    """
    Write the bundled image definition for ``config`` to ``output_path``.

    Raises:
        PreconditionError: If the file exists and ``force`` is False.
    """
    output_path = Path(output_path)
    if output_path.exists() and not force:
        raise PreconditionError(f"{output_path} already exists (use --force to overwrite)")

    rendered = render_dockerfile(build_context(config))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(rendered)

    logger.info("Generated %s for user '%s'", output_path, config.username)
    return output_path
