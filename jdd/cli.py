#!/usr/bin/env python3
"""Command-line interface for the Johnny Decimal daemon.

This module provides the `jdd` command:
- Argument parsing and validation
- Configuration layering (defaults, .jd.yaml, JDD_* environment, flags)
- Logging setup (console, or log file when daemonized)
- Daemonization with a PID file

Example:
    >>> from jdd.cli import parse_arguments
    >>> args = parse_arguments(["--root", "~/Documents", "--dry-run"])
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from jdd.core.constants import DEFAULT_CONFIG_FILE, JDD_VERSION, ConfigKey
from jdd.core.exceptions import JDDError
from jdd.core.validators import split_patterns
from jdd.engine.config import DaemonConfig
from jdd.infrastructure.config_manager import ConfigManager
from jdd.infrastructure.daemon import daemonize
from jdd.infrastructure.logger import Logger

DESCRIPTION = "jdd - Johnny Decimal Daemon"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Options left out on the command line are None, so that lower
    precedence sources (environment, config file) still apply.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
    """
    parser = argparse.ArgumentParser(
        prog="jdd",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Watch the current directory using ./.jd.yaml if present
  jdd

  # Watch a directory, ignoring archives
  jdd --root ~/Documents --exclude "**/Archive/**"

  # Show what would move without touching anything
  jdd --root ~/Documents --dry-run --log-level debug

  # Run in the background with desktop notifications
  jdd --config ~/.jd.yaml --daemonize --notifications

Every option can also be set in the YAML config file (root, exclude,
dry_run, delay, log_level, daemonize, notifications) or through the
environment (JDD_ROOT, JDD_EXCLUDE, JDD_DRY_RUN, JDD_DELAY, ...).
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {JDD_VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help=f"Configuration file path (YAML, default: ./{DEFAULT_CONFIG_FILE} if present)",
    )

    parser.add_argument(
        "--root",
        metavar="DIR",
        type=str,
        help="Root directory to watch (default: .)",
    )

    # Filing options
    filing_group = parser.add_argument_group("filing options")

    filing_group.add_argument(
        "--exclude",
        metavar="PATTERN",
        action="append",
        help="Glob pattern to exclude, relative to the root (repeat or comma-separate)",
    )

    filing_group.add_argument(
        "--delay",
        metavar="DURATION",
        type=str,
        help="Settle delay before filing a new file, e.g. 500ms or 2s (default: 0)",
    )

    filing_group.add_argument(
        "--dry-run",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Report moves without performing them",
    )

    # Process options
    process_group = parser.add_argument_group("process options")

    process_group.add_argument(
        "--daemonize",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run in the background (writes jdd.pid and jdd.log)",
    )

    process_group.add_argument(
        "--notifications",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Send a desktop notification for every move or failure",
    )

    process_group.add_argument(
        "--log-level",
        metavar="LEVEL",
        type=str,
        help="Logging level: debug, info, warn, error (default: info)",
    )

    return parser.parse_args(args)


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build the command-line configuration layer.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration dictionary; unset options are None
    """
    root = args.root
    if root and not root.startswith("~"):
        root = os.path.abspath(root)

    return {
        ConfigKey.ROOT: root,
        ConfigKey.EXCLUDE: split_patterns(args.exclude) if args.exclude else None,
        ConfigKey.DELAY: args.delay,
        ConfigKey.DRY_RUN: args.dry_run,
        ConfigKey.DAEMONIZE: args.daemonize,
        ConfigKey.NOTIFICATIONS: args.notifications,
        ConfigKey.LOG_LEVEL: args.log_level.lower() if args.log_level else None,
    }


def find_config_file(args: argparse.Namespace) -> Optional[str]:
    """
    Return the config file to load.

    Raises:
        CLIError: If an explicitly given file does not exist
    """
    if args.config:
        config_path = Path(args.config).expanduser()
        if not config_path.exists():
            raise CLIError(f"Configuration file does not exist: {args.config}")
        if not config_path.is_file():
            raise CLIError(f"Configuration path is not a file: {args.config}")
        return str(config_path)

    default_path = Path(DEFAULT_CONFIG_FILE)
    if default_path.is_file():
        return str(default_path)

    return None


def load_config(args: argparse.Namespace, environ: Optional[Dict[str, str]] = None) -> DaemonConfig:
    """
    Merge defaults, config file, environment and flags.

    Raises:
        CLIError: If the config file is missing
        ConfigError: If the file or any value is invalid
    """
    manager = ConfigManager(environ=environ)

    config_file = find_config_file(args)
    if config_file:
        manager.load_file(config_file)

    manager.load_args(build_config_from_args(args))
    return manager.to_daemon_config()


def setup_logging(config: DaemonConfig) -> Logger:
    """
    Setup logging based on configuration.

    Args:
        config: Validated configuration

    Returns:
        Configured logger instance
    """
    return Logger("jdd", level=config.log_level)


def print_banner(logger: Logger) -> None:
    """
    Log startup banner with version information.

    Args:
        logger: Logger instance
    """
    logger.info("=" * 60)
    logger.info(f"jdd v{JDD_VERSION}")
    logger.info(DESCRIPTION)
    logger.info("=" * 60)


def main(argv: Optional[List[str]] = None):
    """
    Main CLI entry point.

    Handles argument parsing and configuration, optionally daemonizes, and
    passes control to jdd.main for the watch loop.
    """
    try:
        args = parse_arguments(argv)
        config = load_config(args)
        logger = setup_logging(config)

        logger.debug(f"Config set as: {config}")

        pid_file = None
        if config.daemonize:
            if not daemonize(config.pid_file):
                # Parent process exits; the daemon carries on
                return 0
            pid_file = config.pid_file
            logger.log_to_file(config.log_file)
            logger.info("Daemon started", pid=os.getpid())
        else:
            print_banner(logger)
            logger.info("Running in foreground (not daemonized)")

        from jdd.main import run_jdd

        return run_jdd(config, logger, pid_file=pid_file)

    except (CLIError, JDDError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
