import os
import pytest
from unittest.mock import MagicMock, patch

from dockerenv.toolchain import eman


@pytest.fixture
def examples(tmp_path, monkeypatch):
    monkeypatch.setenv("EMAN_EXAMPLE_ROOT", str(tmp_path))
    (tmp_path / "c_cpp").mkdir()
    (tmp_path / "verilog").mkdir()
    return tmp_path


def test_help_is_default(capsys):
    assert eman.main([]) == 0
    assert "change-verilator" in capsys.readouterr().out


def test_unknown_command(capsys):
    assert eman.main(["frobnicate"]) == 1
    assert "Unknown command: frobnicate" in capsys.readouterr().out


def test_c_compiler_example_runs_targets_in_order(examples):
    with patch("dockerenv.toolchain.eman.subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=0)
        assert eman.main(["c-compiler-example"]) == 0

    targets = [c.args[0] for c in mock_run.call_args_list]
    assert targets == [["make", "clean"], ["make", "all"], ["make", "run"]]
    assert all(c.kwargs["cwd"] == examples / "c_cpp" for c in mock_run.call_args_list)


def test_make_stops_at_first_failure(examples):
    with patch("dockerenv.toolchain.eman.subprocess.run") as mock_run:
        mock_run.side_effect = [MagicMock(returncode=0), MagicMock(returncode=2)]
        assert eman.main(["c-compiler-example"]) == 2

    assert mock_run.call_count == 2


def test_verilator_example_missing_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("EMAN_EXAMPLE_ROOT", str(tmp_path / "nowhere"))

    assert eman.verilator_example() == 1


def test_check_verilator_not_found(capsys):
    with patch("dockerenv.toolchain.eman.shutil.which", return_value=None):
        assert eman.main(["check-verilator"]) == 1

    assert "Verilator not found" in capsys.readouterr().out


def test_c_compiler_version_prints_first_lines(capsys):
    with patch("dockerenv.toolchain.eman.subprocess.run") as mock_run:
        mock_run.side_effect = [
            MagicMock(stdout="gcc (Ubuntu 13.2.0) 13.2.0\nCopyright\n"),
            MagicMock(stdout="GNU Make 4.3\nBuilt for aarch64\n"),
        ]
        assert eman.c_compiler_version() == 0

    out = capsys.readouterr().out
    assert "gcc (Ubuntu 13.2.0) 13.2.0" in out
    assert "GNU Make 4.3" in out
    assert "Copyright" not in out


def test_change_verilator_requires_version(capsys):
    assert eman.main(["change-verilator"]) == 1
    assert "Usage: eman change-verilator <VERSION>" in capsys.readouterr().out


def test_change_verilator_unknown_version(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("EMAN_VERILATOR_PREFIX", str(tmp_path))

    assert eman.change_verilator("5.020") == 1
    assert "Version 5.020 not found" in capsys.readouterr().out


def test_change_verilator_prints_alias(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("EMAN_VERILATOR_PREFIX", str(tmp_path))
    binary = tmp_path / "verilator-5.020" / "bin" / "verilator"
    binary.parent.mkdir(parents=True)
    binary.write_text("#!/bin/sh\n")
    os.chmod(binary, 0o755)

    with patch("dockerenv.toolchain.eman.subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=0)
        assert eman.change_verilator("5.020") == 0

    mock_run.assert_called_once_with([str(binary), "--version"])
    assert f'alias verilator="{binary}"' in capsys.readouterr().out
