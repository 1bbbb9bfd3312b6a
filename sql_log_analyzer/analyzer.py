"""Mode orchestration: scan files into the right aggregator, build the report."""

import logging

from sql_log_analyzer.aggregator import CallerStatsAggregator, WhereAggregator, WorkbookAggregator
from sql_log_analyzer.config import MODE_STATS, MODE_WHERE, MODE_WORKBOOK, Config
from sql_log_analyzer.report import (
    Report,
    build_stats_report,
    build_where_report,
    build_workbook_report,
)
from sql_log_analyzer.scanner import ScanSummary, scan_files
from sql_log_analyzer.writers import write_csv, write_workbook

logger = logging.getLogger(__name__)


def analyze_workbook(files: list[str], workers: int | None = None) -> tuple[Report, ScanSummary]:
    aggregator = WorkbookAggregator()
    summary = scan_files(files, aggregator, workers)
    return build_workbook_report(aggregator.usage(), aggregator.latency()), summary


def analyze_stats(files: list[str], workers: int | None = None) -> tuple[Report, ScanSummary]:
    aggregator = CallerStatsAggregator()
    summary = scan_files(files, aggregator, workers)
    return build_stats_report(aggregator.totals()), summary


def analyze_where(files: list[str], workers: int | None = None) -> tuple[Report, ScanSummary]:
    aggregator = WhereAggregator()
    summary = scan_files(files, aggregator, workers)
    return build_where_report(aggregator.rows()), summary


ANALYZERS = {
    MODE_WORKBOOK: analyze_workbook,
    MODE_STATS: analyze_stats,
    MODE_WHERE: analyze_where,
}


def run_analysis(config: Config, files: list[str]) -> ScanSummary:
    """Scan *files* according to *config.mode* and write the report."""
    logger.info("Processing %d file(s) with %d worker(s), mode=%s", len(files), config.workers, config.mode)
    report, summary = ANALYZERS[config.mode](files, config.workers)

    if config.mode == MODE_WORKBOOK:
        write_workbook(report, config.output, sheet_per_table=config.sheet_per_table)
    else:
        write_csv(report, config.output)

    if summary.files_failed:
        logger.warning("%d file(s) could not be read; their lines are not in the report", summary.files_failed)
    return summary
