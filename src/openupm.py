"""openupm-py - add and remove UPM packages in a Unity project manifest.

    Returns:
        int: Exit code
"""
import logging
import sys
from typing import Any, Optional, Sequence

from args import parse_args
from constants import ExitCodes
from common.errors import (
    EditorIncompatibleError,
    EnvParseError,
    InvalidPackageReferenceError,
    InvalidPackumentDataError,
    ManifestLoadError,
    ManifestSaveError,
    OpenUpmError,
    PackumentNotFoundError,
    RegistryAuthLoadError,
    RegistryFetchError,
    UnresolvedDependencyError,
    VersionNotFoundError,
)
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from env import parse_env

logger = logging.getLogger(__name__)

_EXIT_CODES = (
    ((ManifestLoadError, ManifestSaveError), ExitCodes.FILE_ERROR),
    ((RegistryFetchError,), ExitCodes.CONNECTION_ERROR),
    ((EnvParseError, RegistryAuthLoadError), ExitCodes.ENV_ERROR),
    ((PackumentNotFoundError, VersionNotFoundError, InvalidPackumentDataError,
      EditorIncompatibleError, UnresolvedDependencyError, InvalidPackageReferenceError),
     ExitCodes.PACKAGE_ERROR),
)


def exit_code_for(error: OpenUpmError) -> int:
    for types, code in _EXIT_CODES:
        if isinstance(error, types):
            return code.value
    return ExitCodes.PACKAGE_ERROR.value


def _setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        ))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def run(args: Any) -> int:
    """Run the parsed command and return the exit code."""
    # Deferred so --help stays light.
    from cli_add import add_packages  # pylint: disable=import-outside-toplevel
    from cli_remove import remove_packages  # pylint: disable=import-outside-toplevel

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND)
        )
    try:
        env = parse_env(args)
        if args.COMMAND == "add":
            add_packages(args.PACKAGES, env, test=args.TEST, force=args.FORCE)
        else:
            remove_packages(args.PACKAGES, env)
    except ManifestLoadError as exc:
        logger.error("%s", exc)
        logger.info("suggest: run the command from the root of a Unity project, or use --chdir")
        return exit_code_for(exc)
    except OpenUpmError as exc:
        # Resolution failures were already explained by the command.
        logger.debug("Command failed: %r", exc)
        if isinstance(exc, (ManifestSaveError, EnvParseError, RegistryAuthLoadError)):
            logger.error("%s", exc)
        return exit_code_for(exc)
    return ExitCodes.SUCCESS.value


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
