"""Argument parsing functionality for openupm-py."""

import argparse
from typing import Optional, Sequence


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-r", "--registry",
                        dest="REGISTRY",
                        help="Primary registry url (default: https://package.openupm.com)",
                        action="store", type=str)
    parser.add_argument("--no-upstream",
                        dest="UPSTREAM",
                        help="Don't fall back to the Unity registry",
                        action="store_false")
    parser.add_argument("-c", "--chdir",
                        dest="CHDIR",
                        help="Change the working directory to the Unity project",
                        action="store", type=str)
    parser.add_argument("--system-user",
                        dest="SYSTEM_USER",
                        help="Authenticate with the system user's .upmconfig.toml",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openupm",
        description="Manage UPM packages of a Unity project",
        add_help=True,
    )
    _add_global_options(parser)
    subparsers = parser.add_subparsers(dest="COMMAND", required=True)

    add = subparsers.add_parser("add", help="Add packages to the project manifest")
    add.add_argument("PACKAGES",
                     help="Package references: name, name@version, name@tag or name@url",
                     nargs="+")
    add.add_argument("-t", "--test",
                     dest="TEST",
                     help="Add the packages to testables",
                     action="store_true")
    add.add_argument("-f", "--force",
                     dest="FORCE",
                     help="Ignore editor and dependency warnings",
                     action="store_true")

    remove = subparsers.add_parser("remove", aliases=["rm"],
                                   help="Remove packages from the project manifest")
    remove.add_argument("PACKAGES", help="Package names", nargs="+")

    return parser


def parse_args(argv: Optional[Sequence[str]] = None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
