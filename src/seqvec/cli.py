"""Command line entry point: ``seqvec import`` and ``seqvec dump``."""

import argparse
import logging
import sys
from typing import Optional, List

from seqvec.config.loader import configure_from_cli
from seqvec.config.settings import (
    Settings, Command, set_settings, get_settings, WRITABLE_CHOICES,
)
from seqvec.config.integration import ImportConfig, DumpConfig
from seqvec.config.resolvers import _resolve_log_dir
from seqvec.container.sequence_file import CompressionType
from seqvec.domain.exceptions import ConfigurationError

from seqvec.utils.logging import setup_logging
from seqvec.runners.importer import run_import
from seqvec.runners.dumper import run_dump


def _add_common_options(p: argparse.ArgumentParser) -> None:
    debug_group = p.add_argument_group("Debug Options")
    debug_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with verbose logging.",
    )
    debug_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the configuration and exit without touching any container.",
    )
    debug_group.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Write the run log to PATH.",
    )
    debug_group.add_argument(
        "--log-dir",
        type=str,
        metavar="DIR",
        help="Directory for per-run log files (default: per-user log directory).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the seqvec CLI."""
    parser = argparse.ArgumentParser(
        prog="seqvec",
        description=(
            "Convert CSV vectors to Hadoop SequenceFiles and print "
            "SequenceFile contents."
        ),
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    imp = sub.add_parser("import", help="Write a CSV of named vectors into a SequenceFile")
    imp.add_argument(
        "-i",
        "--input",
        help="CSV file with name,f1,...,fN lines.",
    )
    imp.add_argument(
        "-o",
        "--output",
        help="SequenceFile to create (overwritten if it exists).",
    )
    imp.add_argument(
        "-c",
        "--columns",
        type=int,
        metavar="N",
        help="Fields per line, name included (default: 4).",
    )
    imp.add_argument(
        "--no-verify",
        action="store_true",
        help="Do not read the container back after writing it.",
    )
    imp.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar.",
    )

    container_group = imp.add_argument_group("Container Options")
    container_group.add_argument(
        "--compression",
        choices=[CompressionType.NONE.value, CompressionType.RECORD.value, CompressionType.BLOCK.value],
        help="SequenceFile compression (default: none).",
    )
    container_group.add_argument(
        "--lax-precision",
        action="store_true",
        help="Store vector values as 32-bit floats.",
    )
    container_group.add_argument(
        "--sync-marker",
        metavar="HEX",
        help="Fixed 16-byte sync marker (32 hex digits) for reproducible output.",
    )
    container_group.add_argument(
        "--sync-interval",
        type=int,
        metavar="BYTES",
        help="Bytes between sync markers (default: 2000).",
    )
    _add_common_options(imp)

    dump = sub.add_parser("dump", help="Print every entry of a SequenceFile")
    dump.add_argument(
        "-i",
        "--input",
        help="SequenceFile to read.",
    )
    dump.add_argument(
        "--key-type",
        choices=WRITABLE_CHOICES,
        help="Expected key type (default: int).",
    )
    dump.add_argument(
        "--value-type",
        choices=WRITABLE_CHOICES,
        help="Expected value type (default: cluster).",
    )
    _add_common_options(dump)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the seqvec CLI."""
    args = build_parser().parse_args(argv)

    if args.cmd not in (Command.IMPORT.value, Command.DUMP.value):
        logging.error("Unknown command: %s", args.cmd)
        sys.exit(2)

    try:
        settings = configure_from_cli(args)
        set_settings(settings)

        logger, _ = setup_logging(
            log_dir=_resolve_log_dir(
                log_dir=getattr(args, "log_dir", None),
                log_file=getattr(args, "log_file", None),
            ),
            log_file=settings.logging.file_path,
            console=settings.logging.console_output,
            level=settings.logging.level.value,
            console_level="DEBUG" if settings.debug_mode else "WARNING",
        )

        if settings.debug_mode:
            logger.debug("Configuration details:")
            for section, values in settings.to_dict().items():
                logger.debug("  %s: %s", section, values)

        if settings.dry_run:
            logger.info("DRY RUN MODE - configuration validated successfully")
            _print_dry_run_summary(settings)
            sys.exit(0)

        if settings.command is Command.IMPORT:
            res = run_import(ImportConfig.from_settings(settings))
            logger.info("Import completed: %s records -> %s", res.n_records, res.output_path)
        else:
            res = run_dump(DumpConfig.from_settings(settings))
            logger.info("Dump completed: %s entries", res.n_entries)

        sys.exit(0)

    except ConfigurationError as e:
        logging.error("Configuration error: %s", e.message)
        if e.suggestions:
            logging.error("Suggestions:")
            for suggestion in e.suggestions:
                logging.error("  - %s", suggestion)
        sys.exit(1)

    except KeyboardInterrupt:
        logging.info("Run interrupted by user")
        sys.exit(130)

    except Exception as e:
        logging.error("%s failed: %s", args.cmd, e)
        if _debug_enabled():
            logging.exception("Full traceback:")
        sys.exit(1)


def _debug_enabled() -> bool:
    try:
        return get_settings().debug_mode
    except ConfigurationError:
        return False


def _print_dry_run_summary(settings: Settings) -> None:
    """Print a summary for dry run mode."""
    print("\n" + "=" * 60)
    print("DRY RUN SUMMARY")
    print("=" * 60)
    print(f"Command:            {settings.command.value}")
    if settings.command is Command.IMPORT:
        print(f"Input CSV:          {settings.importing.input_path}")
        print(f"Output container:   {settings.importing.output_path}")
        print(f"Columns:            {settings.importing.column_count}")
        print(f"Verify:             {settings.importing.verify}")
        print(f"Compression:        {settings.container.compression.value}")
        print(f"Lax precision:      {settings.container.lax_precision}")
    else:
        print(f"Input container:    {settings.dumping.input_path}")
        print(f"Key type:           {settings.dumping.key_type}")
        print(f"Value type:         {settings.dumping.value_type}")
    print(f"Debug mode:         {settings.debug_mode}")
    print("=" * 60)
    print()


if __name__ == "__main__":
    main()
