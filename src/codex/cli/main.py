"""
CLI Interface Module

Provides the command-line interface for codex:

    codex init <directory>
    codex run <directory> [--output PATH] [--config PATH]

`init` detects the project type and writes a codex.yml with the matching
default exclusions. `run` loads codex.yml (or synthesizes the defaults when
it is missing) and concatenates the project into a single text file.
"""

import argparse
import logging
import os
import sys
from typing import List, NoReturn, Optional

from codex import __version__
from codex.aggregation.aggregator import Aggregator
from codex.detection.project_detector import (
    detect_project_type,
    generate_default_config,
)
from codex.utils.config_loader import CONFIG_FILENAME, ConfigCodec, ExclusionConfig
from codex.utils.error_handlers import (
    CodexError,
    UsageError,
    log_error_with_context,
)


logger = logging.getLogger(__name__)

# Constants
DEFAULT_OUTPUT_PATH = "code.txt"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class CodexArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors on stdout with exit code 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stdout)
        raise UsageError(f"{self.prog}: error: {message}")


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for the CLI application.

    Progress lines go to stdout as ``<timestamp> [LEVEL] <message>``. The
    handler is attached to the package logger so repeated calls replace it
    instead of stacking handlers.

    Args:
        log_level: Logging level as string (DEBUG, INFO, WARNING, ERROR).
            Defaults to "INFO".
    """
    package_logger = logging.getLogger("codex")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, log_level.upper()))


def handle_error(context: str, error: Exception) -> int:
    """Centralized error handling for commands.

    Args:
        context: Description of the operation that failed.
        error: Exception that was raised.

    Returns:
        Exit code 1.
    """
    if isinstance(error, CodexError):
        log_error_with_context(error, logger, context)
    else:
        logger.error(f"{context}: {error}", exc_info=True)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Execute the main CLI entry point.

    Parses command-line arguments, configures logging, and routes to the
    appropriate command handler.

    Args:
        argv: Argument list; defaults to sys.argv[1:].

    Returns:
        Exit code: 0 for success, non-zero for errors.

    Example:
        $ codex init ./proj
        $ codex run ./proj --output proj.txt
    """
    parser = setup_argument_parser()

    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        setup_logging()
        return handle_error("Invalid arguments", e)

    if args.version:
        print(f"codex v{__version__}")
        return 0

    setup_logging(args.log_level)

    command_map = {
        "init": command_init,
        "run": command_run,
    }

    handler = command_map.get(args.command)
    if handler is None:
        parser.print_help(sys.stdout)
        return 1

    try:
        return handler(args)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 130
    except Exception as e:
        return handle_error("Command execution failed", e)


def command_init(args: argparse.Namespace) -> int:
    """Generate codex.yml for a project directory.

    Args:
        args: Parsed command-line arguments containing:
            - directory: Project directory to inspect and write into

    Returns:
        Exit code: 0 for success, 1 for failure.
    """
    project_type = detect_project_type(args.directory)
    config = generate_default_config(project_type)
    config_path = os.path.join(args.directory, CONFIG_FILENAME)

    try:
        ConfigCodec.write(config_path, config)
    except CodexError as e:
        return handle_error("Init failed", e)

    logger.info(
        f"Generated {CONFIG_FILENAME} for {project_type.value} project in {config_path}"
    )
    return 0


def command_run(args: argparse.Namespace) -> int:
    """Concatenate a project's files into a single output file.

    Args:
        args: Parsed command-line arguments containing:
            - directory: Project directory to walk
            - output: Destination file
            - config: Optional explicit config path

    Returns:
        Exit code: 0 for success, 1 for failure.
    """
    try:
        config = load_run_config(args.directory, args.config)
        result = Aggregator(config).aggregate(args.directory, args.output)
    except CodexError as e:
        return handle_error("Run failed", e)

    logger.info(
        f"Processed {result.files_processed} files, "
        f"skipped {result.files_skipped} files and "
        f"{result.folders_skipped} folders ({result.bytes_written} bytes written)"
    )
    logger.info(f"All code has been extracted to {args.output}")
    return 0


def load_run_config(directory: str, config_path: Optional[str] = None) -> ExclusionConfig:
    """Resolve the exclusion config used by `run`.

    An explicit config path must exist. Without one, <directory>/codex.yml is
    used when present; otherwise the defaults for the detected project type
    are used directly without being written anywhere.

    Args:
        directory: Project directory.
        config_path: Optional explicit config file.

    Returns:
        ExclusionConfig for the run.

    Raises:
        ConfigReadError: If the config file cannot be read or parsed.
    """
    if config_path is not None:
        return ConfigCodec.read(config_path)

    default_path = os.path.join(directory, CONFIG_FILENAME)
    if not os.path.exists(default_path):
        logger.info(f"{CONFIG_FILENAME} not found in {directory}, using default settings")
        project_type = detect_project_type(directory)
        logger.debug(f"Using {project_type.value} exclusions")
        return generate_default_config(project_type)

    return ConfigCodec.read(default_path)


def setup_argument_parser() -> argparse.ArgumentParser:
    """Configure the argument parser with all CLI commands and options.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = CodexArgumentParser(
        prog="codex",
        description="codex - concatenate a project's source files into one file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Write codex.yml with exclusions for the detected project type
  %(prog)s init ./my-project

  # Concatenate the project into code.txt
  %(prog)s run ./my-project

  # Write to a custom output file
  %(prog)s run ./my-project --output my-project.txt
        """,
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: %(default)s)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Init command
    init_parser = subparsers.add_parser(
        "init",
        help="Generate codex.yml for a project",
        description="Detect the project type and write codex.yml with default exclusions.",
    )
    init_parser.add_argument(
        "directory",
        help="Project directory",
    )

    # Run command
    run_parser = subparsers.add_parser(
        "run",
        help="Concatenate a project into one file",
        description="Concatenate every non-excluded file under a directory.",
    )
    run_parser.add_argument(
        "directory",
        help="Project directory",
    )
    run_parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_PATH,
        help="Path to the output file (default: %(default)s)",
    )
    run_parser.add_argument(
        "--config",
        default=None,
        help=f"Path to the config file (default: <directory>/{CONFIG_FILENAME})",
    )

    return parser


if __name__ == "__main__":
    sys.exit(main())
