# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""
Command line entry point for dockerenv.

Usage:
    dockerenv [COMMAND] [OPTIONS]
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dockerenv.core.container.generator import generate_dockerfile
from dockerenv.core.container.manager import EnvironmentManager
from dockerenv.core.container.runtime import DockerRuntime
from dockerenv.core.errors import ConfigurationError, DockerEnvError
from dockerenv.utils.config import DEFAULTS, build_config

logger = logging.getLogger(__name__)

ACTIONS = ["run", "build", "stop", "clean", "rebuild", "init", "help"]

COMMANDS_HELP = """\
COMMANDS:
    run              Run container (default action)
    build            Build Docker image
    stop             Stop container
    clean            Clean container and image
    rebuild          Rebuild Docker image (clean and rebuild)
    init             Write the bundled Dockerfile to --dockerfile
    help             Show this help message
"""


class DockerEnvArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ConfigurationError instead of exiting."""

    def error(self, message):
        raise ConfigurationError(message)


def _option_value(value: str) -> str:
    if not value or value.startswith("--"):
        raise argparse.ArgumentTypeError("requires a value")
    return value


def build_parser() -> DockerEnvArgumentParser:
    parser = DockerEnvArgumentParser(
        prog="dockerenv",
        description="Docker Environment Management Script",
        epilog=COMMANDS_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("action", nargs="?", default="run", choices=ACTIONS, metavar="COMMAND",
                        help="One of: " + ", ".join(ACTIONS))
    parser.add_argument("--image-name", type=_option_value, metavar="NAME",
                        help=f"Specify image name (default: {DEFAULTS['image_name']})")
    parser.add_argument("--container-name", type=_option_value, metavar="NAME",
                        help=f"Specify container name (default: {DEFAULTS['container_name']})")
    parser.add_argument("--username", type=_option_value, metavar="NAME",
                        help=f"Specify username (default: {DEFAULTS['username']})")
    parser.add_argument("--dockerfile", type=_option_value, metavar="PATH",
                        help=f"Specify Dockerfile path (default: {DEFAULTS['dockerfile']})")
    parser.add_argument("--mount", type=_option_value, action="append", dest="mounts", metavar="MOUNT",
                        help="Mount directory as HOSTPATH[:CONTAINERPATH] (can be used multiple times)")
    parser.add_argument("--platform", type=_option_value, metavar="PLATFORM",
                        help=f"Target platform for build (default: {DEFAULTS['platform']})")
    parser.add_argument("--config", type=_option_value, metavar="PATH",
                        help="Settings file (default: ./dockerenv.json if present)")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing Dockerfile (init)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    parser.add_argument("-h", "--help", action="store_true", dest="show_help", help="Show this help message")
    return parser


def configure_logging(verbose: bool = False) -> None:
    level_name = "DEBUG" if verbose else os.environ.get("DOCKERENV_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def run_action(action: str, manager: EnvironmentManager) -> int:
    if action == "run":
        return manager.run()
    if action == "build":
        return manager.build()
    if action == "stop":
        return manager.stop()
    if action == "clean":
        return manager.clean()
    if action == "rebuild":
        return manager.rebuild()
    raise ConfigurationError(f"Unknown action {action}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_help()
        return 1

    configure_logging(args.verbose)

    if args.show_help or args.action == "help":
        parser.print_help()
        return 0

    try:
        config = build_config(
            {
                "image_name": args.image_name,
                "container_name": args.container_name,
                "username": args.username,
                "dockerfile": args.dockerfile,
                "platform": args.platform,
                "mounts": args.mounts,
            },
            config_path=args.config,
        )
        logger.debug("Resolved configuration: %s", config)

        if args.action == "init":
            path = generate_dockerfile(config, Path.cwd() / config.dockerfile, force=args.force)
            print(f"Wrote {path}")
            return 0

        manager = EnvironmentManager(config, DockerRuntime.from_env())
        return run_action(args.action, manager)

    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_help()
        return 1
    except DockerEnvError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        print("\n[Interrupted by user]", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
