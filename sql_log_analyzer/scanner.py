"""Parallel file scanning.

Each file is read by exactly one worker of a fixed-size thread pool. Workers
parse lines into LogRecords and hand them to a shared sink (any object with an
``add(record)`` method, normally one of the aggregators). A file that cannot
be read is logged and skipped; the other files are unaffected.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Protocol

from sql_log_analyzer.extractor import LogRecord, parse_line
from sql_log_analyzer.reader import read_lines

logger = logging.getLogger(__name__)

# gzip.BadGzipFile is an OSError; truncated gzip streams raise EOFError.
READ_ERRORS = (OSError, EOFError)


class RecordSink(Protocol):
    def add(self, record: LogRecord) -> None: ...


@dataclass
class FileResult:
    path: str
    lines: int = 0
    records: int = 0
    error: str | None = None


@dataclass
class ScanSummary:
    files_scanned: int = 0
    files_failed: int = 0
    lines: int = 0
    records: int = 0
    failures: dict[str, str] = field(default_factory=dict)


def default_workers() -> int:
    """Number of workers when none is configured: one per CPU."""
    return max(1, os.cpu_count() or 1)


def scan_file(path: str, sink: RecordSink) -> FileResult:
    """Scan a single file into *sink*. Read errors are captured, not raised.

    Records are held back until the whole file has been read, so a file that
    fails partway through contributes nothing.
    """
    result = FileResult(path=path)
    records: list[LogRecord] = []
    try:
        for line_no, line in read_lines(path):
            result.lines += 1
            record = parse_line(line, source_file=path, line_no=line_no)
            if record is not None:
                records.append(record)
    except READ_ERRORS as exc:
        result.error = f"{type(exc).__name__}: {exc}"
        logger.error("Failed to read %s: %s", path, result.error)
        return result

    for record in records:
        sink.add(record)
    result.records = len(records)
    logger.debug("Scanned %s: %d lines, %d records", path, result.lines, result.records)
    return result


def scan_files(paths: list[str], sink: RecordSink, workers: int | None = None) -> ScanSummary:
    """Scan *paths* in parallel into *sink* and block until all are done."""
    workers = workers or default_workers()
    summary = ScanSummary()

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="scan") as executor:
        futures = {executor.submit(scan_file, path, sink): path for path in paths}
        for future in as_completed(futures):
            result = future.result()
            if result.error is None:
                summary.files_scanned += 1
                summary.lines += result.lines
                summary.records += result.records
            else:
                summary.files_failed += 1
                summary.failures[result.path] = result.error

    logger.info(
        "Scan finished: %d file(s) ok, %d failed, %d lines, %d SQL records",
        summary.files_scanned, summary.files_failed, summary.lines, summary.records,
    )
    return summary
