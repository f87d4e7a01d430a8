"""CLI commands for updating and verifying checksum databases."""

import logging
import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from pydantic import ValidationError

from .config import ChecksumVerifierConfig, VerifierSettings
from .console import ConsoleReporter
from .discovery import MatchType, has_wildcards
from .engine import Engine
from .errors import DatabaseLoadError
from .paths import PathStoragePolicy
from checksum_verifier.common import (
    ChecksumAlgorithm,
    ConfigLoader,
    ConfigurationError,
    LogContext,
    dir_exists_long,
    exists_long,
    setup_logging,
)

# Application name derived from package name
_package = __package__ or "checksum_verifier.verifier"
APP_NAME = _package.split('.')[0].replace('_', '-')

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_BAD_FILES = 2

# Use __package__ to avoid __main__ when run as module
logger = logging.getLogger(__package__ or __name__)


def infer_match(match_pattern: str, base_path: str, recurse: bool) -> Tuple[MatchType, str, str]:
    """Work out how the match pattern is meant.

    A pattern with wildcards is a file name glob; a directory part in
    it becomes the base path. Otherwise the pattern names an existing
    file or directory. Recursion always means a directory match.

    Args:
        match_pattern: Value of --match
        base_path: Base path, empty if none was given
        recurse: Value of --recurse

    Returns:
        (match type, match pattern, base path); the base path defaults to
        the current directory

    Raises:
        ConfigurationError: If the pattern has no wildcards and names
            neither a file nor a directory
    """
    if has_wildcards(match_pattern):
        directory, name = os.path.split(match_pattern)
        if directory:
            base_path = directory
            match_pattern = name
        match_type = MatchType.WILDCARD
    elif exists_long(match_pattern):
        # Relative to the working directory here, the engine resolves against base_path
        match_pattern = os.path.abspath(match_pattern)
        match_type = MatchType.SINGLE_FILE
    elif dir_exists_long(match_pattern):
        if not base_path:
            base_path = match_pattern
        match_type = MatchType.DIRECTORY
    else:
        raise ConfigurationError(
            f"File or directory does not exist: {match_pattern}",
            match_pattern=match_pattern,
        )

    if recurse:
        match_type = MatchType.DIRECTORY

    return match_type, match_pattern, os.path.abspath(base_path or os.getcwd())


def check_database(command: str, database_path: str) -> None:
    """Check the database document can be used for command.

    verify needs a readable document. update only needs one that is
    readable if it exists.

    Raises:
        ConfigurationError: If the document cannot be used
    """
    if not database_path:
        raise ConfigurationError("Must specify the XML database file (--db)")

    if command == "update" and not exists_long(database_path):
        return

    try:
        with open(database_path, "rb"):
            pass
    except OSError as e:
        raise ConfigurationError(
            f"Cannot open XML database: {database_path}",
            database_path=database_path,
            error=str(e),
        ) from e


def print_settings(settings: VerifierSettings, match_type: MatchType) -> None:
    """Print what the user selected."""
    print(f"Base path:   {settings.base_path}")
    print(f"Match:       {settings.match_pattern} ({match_type.value})")
    print(f"Checksum:    {settings.checksum.upper()}")
    if settings.exclude_pattern:
        print(f"Exclude:     {settings.exclude_pattern}")
    print()


def run_command(args: argparse.Namespace, settings: VerifierSettings) -> int:
    """Run update or verify with resolved settings.
    
    Args:
        args: Parsed command line arguments
        settings: Settings with command line overrides applied
    
    Returns:
        Exit code
    """
    try:
        match_type, match_pattern, base_path = infer_match(
            settings.match_pattern, settings.base_path, settings.recurse
        )
        check_database(args.command, settings.database_path)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    if not dir_exists_long(base_path):
        print(f"Error: Base path {base_path} does not exist", file=sys.stderr)
        return EXIT_ERROR

    settings = settings.model_copy(update={'match_pattern': match_pattern, 'base_path': base_path})
    logger.info(f"Configuration: {{'command': {args.command!r}, 'database_path': {settings.database_path!r}, 'base_path': {base_path!r}, 'match': {match_pattern!r}, 'match_type': {match_type.value!r}, 'exclude': {settings.exclude_pattern!r}, 'path_storage': {settings.path_storage!r}, 'checksum': {settings.checksum!r}, 'recurse': {settings.recurse}}}")

    print_settings(settings, match_type)

    try:
        engine = Engine(
            database_path=settings.database_path,
            base_path=base_path,
            reporter=ConsoleReporter(),
            exclude_pattern=settings.exclude_pattern,
            match_pattern=match_pattern,
            match_type=match_type,
            path_policy=PathStoragePolicy(settings.path_storage),
            algorithm=ChecksumAlgorithm(settings.checksum),
        )
    except DatabaseLoadError as e:
        logger.error(f"Could not open database: {{'path': {settings.database_path!r}, 'error': {e.message!r}}}")
        print(f"Error: Could not open database {settings.database_path}", file=sys.stderr)
        return EXIT_ERROR

    engine.scan_files(settings.recurse)

    if args.command == "update":
        result = engine.update_checksums(
            ignore_new=args.ignore_new,
            remove_missing=args.remove_missing,
            pretend=args.pretend,
            update_existing=args.update_existing,
        )
        return EXIT_SUCCESS if result.success else EXIT_ERROR

    verify_result = engine.verify_checksums(
        ignore_checksum=args.ignore_checksum,
        ignore_missing=args.ignore_missing,
        show_new=args.show_new,
    )
    if not verify_result.success and not verify_result.bad_files:
        return EXIT_ERROR
    return EXIT_BAD_FILES if verify_result.bad_files else EXIT_SUCCESS


def apply_overrides(settings: VerifierSettings, args: argparse.Namespace) -> VerifierSettings:
    """Return settings with the values given on the command line, validated like config values."""
    overrides = {
        'database_path': args.db,
        'base_path': args.base_path,
        'match_pattern': args.match,
        'exclude_pattern': args.exclude,
        'path_storage': args.path_storage,
        'checksum': args.checksum,
    }
    update = {key: str(value) for key, value in overrides.items() if value is not None}
    if args.recurse:
        update['recurse'] = True
    return VerifierSettings.model_validate({**settings.model_dump(), **update})


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--db",
        type=Path,
        help="XML database file (overrides config)"
    )
    common.add_argument(
        "--match",
        help="Files to match: glob such as * or *.jpg or ??.foo, a file or a directory (default: *)"
    )
    common.add_argument(
        "--exclude",
        help="Paths to exclude, glob such as *.tmp (default: none)"
    )
    common.add_argument(
        "--base-path",
        type=Path,
        help="Base path for matching (default: current directory)"
    )
    common.add_argument(
        "-r", "--recurse",
        action="store_true",
        help="Recurse into subdirectories (directory match only)"
    )

    storage = common.add_mutually_exclusive_group()
    storage.add_argument(
        "--relative-path",
        dest="path_storage",
        action="store_const",
        const=PathStoragePolicy.RELATIVE_PATH.value,
        help="Store paths relative to the base path (default)"
    )
    storage.add_argument(
        "--full-path",
        dest="path_storage",
        action="store_const",
        const=PathStoragePolicy.FULL_PATH.value,
        help="Store full paths"
    )
    storage.add_argument(
        "--full-path-no-drive",
        dest="path_storage",
        action="store_const",
        const=PathStoragePolicy.FULL_PATH_NO_DRIVE.value,
        help="Store full paths without the drive"
    )

    checksum = common.add_mutually_exclusive_group()
    for algorithm in ChecksumAlgorithm:
        checksum.add_argument(
            f"--{algorithm.value}",
            dest="checksum",
            action="store_const",
            const=algorithm.value,
            help=f"Use {algorithm.value.upper()}" + (" (default)" if algorithm == ChecksumAlgorithm.MD5 else "")
        )

    common.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )

    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Create and verify file checksum databases"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    verify = subparsers.add_parser("verify", parents=[common], help="Verify checksum database")
    verify.add_argument(
        "--ignore-missing",
        action="store_true",
        help="Ignore missing files"
    )
    verify.add_argument(
        "--show-new",
        action="store_true",
        help="Show files not in the database"
    )
    verify.add_argument(
        "--ignore-checksum",
        action="store_true",
        help="Only check that files exist"
    )

    update = subparsers.add_parser("update", parents=[common], help="Update checksum database")
    update.add_argument(
        "--remove-missing",
        action="store_true",
        help="Remove missing files from the database"
    )
    update.add_argument(
        "--ignore-new",
        action="store_true",
        help="Don't add new files"
    )
    update.add_argument(
        "--pretend",
        action="store_true",
        help="Show what would happen without writing the database"
    )
    update.add_argument(
        "--update-existing",
        action="store_true",
        help="Recompute checksums of existing files and store changes"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the checksum-verifier command."""
    args = build_parser().parse_args(argv)

    loader = ConfigLoader(
        app_name=APP_NAME,
        config_class=ChecksumVerifierConfig
    )

    try:
        config = loader.load(defaults_path=args.config)
    except ValidationError as e:
        print(f"Error: Invalid configuration:\n{e}", file=sys.stderr)
        return EXIT_ERROR
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    setup_logging(
        level=config.logging.level,
        format=config.logging.format,
        log_file=Path(config.logging.file) if config.logging.file else None,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
    )

    settings = apply_overrides(config.verifier, args)

    with LogContext(logger, operation=args.command, database=settings.database_path):
        return run_command(args, settings)


if __name__ == "__main__":
    sys.exit(main())
