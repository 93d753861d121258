# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""
eman - toolchain helper for use inside the development container.

Reports compiler/Verilator versions, runs the bundled examples and locates
alternative Verilator installs.
"""

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

HELP_TEXT = """\
    eman check-verilator            : print the version of the first found Verilator (if there are multiple version of Verilator installed)
    eman verilator-example          : compile and run the Verilator example(s)
    eman change-verilator <VERSION> : print the alias that switches the default Verilator to an installed version

    eman c-compiler-version         : print the version of default C compiler and the version of GNU Make
    eman c-compiler-example         : compile and run the C/C++ example(s)
"""


def example_root() -> Path:
    return Path(os.environ.get("EMAN_EXAMPLE_ROOT", "/ubuntu-base/example"))


def verilator_prefix() -> Path:
    return Path(os.environ.get("EMAN_VERILATOR_PREFIX", "/opt"))


def show_help() -> int:
    print(HELP_TEXT)
    return 0


def _first_line(args: List[str]) -> Optional[str]:
    try:
        result = subprocess.run(args, capture_output=True, text=True)
    except FileNotFoundError:
        return None
    lines = result.stdout.splitlines()
    return lines[0] if lines else None


def c_compiler_version() -> int:
    status = 0
    for label, args in (("C compiler version:", ["gcc", "--version"]), ("Make version:", ["make", "--version"])):
        print(label)
        line = _first_line(args)
        if line is None:
            print(f"{args[0]} not found")
            status = 1
        else:
            print(line)
    return status


def run_make_targets(ex_dir: Path, targets: Sequence[str]) -> int:
    """Run ``make <target>`` for each target in ``ex_dir``, stopping at the first failure."""
    if not ex_dir.is_dir():
        print(f"Example directory not found: {ex_dir}")
        return 1

    for target in targets:
        logger.debug("make %s (in %s)", target, ex_dir)
        try:
            returncode = subprocess.run(["make", target], cwd=ex_dir).returncode
        except FileNotFoundError:
            print("make not found")
            return 1
        if returncode != 0:
            print(f"make {target} failed (exit code: {returncode})")
            return returncode
    return 0


def c_compiler_example() -> int:
    return run_make_targets(example_root() / "c_cpp", ["clean", "all", "run"])


def verilator_example() -> int:
    return run_make_targets(example_root() / "verilog", ["clean", "run"])


def check_verilator() -> int:
    verilator = shutil.which("verilator")
    if verilator is None:
        print("Verilator not found")
        return 1
    return subprocess.run([verilator, "--version"]).returncode


def change_verilator(version: Optional[str]) -> int:
    """
    Locate an alternative Verilator install and print the alias that selects it.

    A child process cannot change its parent shell's aliases, so the alias
    line is printed for the user to ``eval``.
    """
    if not version:
        print("Usage: eman change-verilator <VERSION>")
        return 1

    ver_path = verilator_prefix() / f"verilator-{version}" / "bin" / "verilator"
    if not (ver_path.is_file() and os.access(ver_path, os.X_OK)):
        print(f"Version {version} not found")
        return 1

    print(f"Switched to Verilator {version}. Apply it to your shell with:")
    print(f"alias verilator=\"{ver_path}\"")
    return subprocess.run([str(ver_path), "--version"]).returncode


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=getattr(logging, os.environ.get("EMAN_LOG_LEVEL", "WARNING").upper(), logging.WARNING))

    command = args[0] if args else "help"
    if command == "help":
        return show_help()
    if command == "c-compiler-version":
        return c_compiler_version()
    if command == "c-compiler-example":
        return c_compiler_example()
    if command == "check-verilator":
        return check_verilator()
    if command == "verilator-example":
        return verilator_example()
    if command == "change-verilator":
        return change_verilator(args[1] if len(args) > 1 else None)

    print(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
