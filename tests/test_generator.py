import pytest

from dockerenv.core.container.generator import (
    build_context,
    conda_arch_for,
    generate_dockerfile,
    render_dockerfile,
)
from dockerenv.core.container.types import EnvConfig
from dockerenv.core.errors import ConfigurationError, PreconditionError


def make_config(**kwargs):
    values = dict(image_name="img", container_name="box", username="dev", dockerfile="dockerfile")
    values.update(kwargs)
    return EnvConfig(**values)


@pytest.mark.parametrize("platform, arch", [
    ("linux/arm64", "aarch64"),
    ("linux/amd64", "x86_64"),
])
def test_conda_arch_for_platform(platform, arch):
    assert conda_arch_for(platform) == arch


def test_unknown_platform_is_rejected():
    with pytest.raises(ConfigurationError):
        conda_arch_for("linux/s390x")


def test_render_contains_stages_and_user():
    content = render_dockerfile(build_context(make_config(platform="linux/amd64")))

    for stage in ("AS base", "AS common_pkg_provider", "AS verilator_provider", "AS systemc_provider", "AS final"):
        assert stage in content
    assert "Miniconda3-latest-Linux-x86_64.sh" in content
    assert "ARG USERNAME=dev" in content
    assert "systemc-2.3.4.tar.gz" in content
    assert "    build-essential \\\n" in content
    assert 'CMD ["/bin/bash"]' in content


def test_generate_refuses_to_overwrite(tmp_path):
    target = tmp_path / "dockerfile"
    target.write_text("FROM scratch\n")

    with pytest.raises(PreconditionError):
        generate_dockerfile(make_config(), target)

    assert target.read_text() == "FROM scratch\n"
    generate_dockerfile(make_config(), target, force=True)
    assert "ARG USERNAME=dev" in target.read_text()


def test_generate_creates_parent_dirs(tmp_path):
    target = tmp_path / "docker" / "Dockerfile"

    assert generate_dockerfile(make_config(), target) == target
    assert target.is_file()
