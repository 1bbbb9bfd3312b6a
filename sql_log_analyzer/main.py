#!/usr/bin/env python3
"""sql-log-analyzer — table usage and caller latency reports from SQL logs."""

import logging
import sys
from argparse import ArgumentParser

from sql_log_analyzer.analyzer import run_analysis
from sql_log_analyzer.config import LOG_LEVELS, ConfigError, load_config, load_yaml_config
from sql_log_analyzer.reader import NoInputFilesError, expand_paths

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_NO_INPUT = 2
EXIT_WRITE_ERROR = 3


class _ArgumentParser(ArgumentParser):
    """Turns usage errors into ConfigError so they share one exit status."""

    def error(self, message):
        raise ConfigError(message)


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = _ArgumentParser(
        prog="sql-log-analyzer",
        description="Summarize table usage and caller latency from p6spy-style SQL logs.",
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        help="Log files, directories (searched recursively) or glob patterns",
    )
    parser.add_argument(
        "--workbook",
        help="Write the Summary/PerTable workbook (.xlsx) to this path",
    )
    parser.add_argument(
        "--mode",
        choices=["stats", "where"],
        help="Legacy CSV report: per-caller stats or WHERE clauses",
    )
    parser.add_argument(
        "--out",
        help="Output CSV path for --mode",
    )
    parser.add_argument(
        "--threads",
        help="Worker threads (default: number of CPUs)",
    )
    parser.add_argument(
        "--sheet-per-table",
        action="store_true",
        help="Write one worksheet per table instead of a single PerTable sheet",
    )
    parser.add_argument(
        "--config",
        help="Optional YAML config file",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging verbosity (default: INFO)",
    )
    return parser


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [ANALYZER] %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def run(argv: list[str] | None = None) -> int:
    """Parse args, validate config, scan and write. Returns the exit status."""
    setup_logging()
    try:
        args = build_parser().parse_args(argv)
        yaml_data = load_yaml_config(args.config)
        config = load_config(args, yaml_data)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR

    logging.getLogger().setLevel(config.log_level)

    try:
        files = expand_paths(config.inputs)
    except NoInputFilesError as exc:
        logger.error("%s", exc)
        return EXIT_NO_INPUT

    try:
        run_analysis(config, files)
    except OSError as exc:
        logger.error("Cannot write report to %s: %s", config.output, exc)
        return EXIT_WRITE_ERROR
    logger.info("Done => %s", config.output)
    return EXIT_OK


def main():
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
