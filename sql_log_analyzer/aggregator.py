"""Thread-safe aggregators fed by the scanning workers.

Every aggregator exposes ``add(record)`` so the scanner can drive any of them.
Updates to one key are serialized by a striped lock picked from the key's
hash; updates to keys on different stripes run in parallel.
"""

import threading
from dataclasses import dataclass

from sql_log_analyzer.classifier import StatementKind, classify
from sql_log_analyzer.extractor import LogRecord
from sql_log_analyzer.tables import extract_tables
from sql_log_analyzer.where import extract_where

DEFAULT_STRIPES = 64


@dataclass
class LatencyStats:
    count: int = 0
    sum_ms: int = 0
    min_ms: int = 0
    max_ms: int = 0

    def add(self, elapsed_ms: int):
        if self.count == 0:
            self.min_ms = elapsed_ms
            self.max_ms = elapsed_ms
        else:
            self.min_ms = min(self.min_ms, elapsed_ms)
            self.max_ms = max(self.max_ms, elapsed_ms)
        self.count += 1
        self.sum_ms += elapsed_ms

    @property
    def avg_ms(self) -> float:
        return self.sum_ms / self.count if self.count else 0.0


@dataclass
class CallerTotals:
    count: int = 0
    sum_ms: int = 0

    @property
    def avg_ms(self) -> float:
        return self.sum_ms / self.count if self.count else 0.0


class StripedLocks:
    """A fixed pool of locks; equal keys always map to the same lock."""

    def __init__(self, stripes: int = DEFAULT_STRIPES):
        self._locks = [threading.Lock() for _ in range(max(1, stripes))]

    def for_key(self, key) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]


class WorkbookAggregator:
    """Usage by kind and table, plus latency by table and caller.

    Usage counts every record. Latency only takes samples with
    ``elapsed_ms > 0``; a table/caller pair never sampled has no entry.
    """

    def __init__(self, stripes: int = DEFAULT_STRIPES):
        self._usage: dict[StatementKind, dict[str, int]] = {kind: {} for kind in StatementKind}
        self._latency: dict[str, dict[str, LatencyStats]] = {}
        self._locks = StripedLocks(stripes)

    def add(self, record: LogRecord):
        kind = classify(record.sql)
        if kind is None:
            return
        tables = extract_tables(record.sql, kind)
        if not tables:
            return

        bucket = self._usage[kind]
        for table in tables:
            with self._locks.for_key((kind, table)):
                bucket[table] = bucket.get(table, 0) + 1

        if record.elapsed_ms <= 0:
            return
        for table in tables:
            with self._locks.for_key((table, record.caller)):
                callers = self._latency.setdefault(table, {})
                stats = callers.setdefault(record.caller, LatencyStats())
                stats.add(record.elapsed_ms)

    def usage(self) -> dict[StatementKind, dict[str, int]]:
        """Copy of the usage counters. Call after scanning has finished."""
        return {kind: dict(tables) for kind, tables in self._usage.items()}

    def latency(self) -> dict[str, dict[str, LatencyStats]]:
        """Copy of the per-table, per-caller latency stats."""
        return {
            table: {
                caller: LatencyStats(s.count, s.sum_ms, s.min_ms, s.max_ms)
                for caller, s in callers.items()
            }
            for table, callers in self._latency.items()
        }


class CallerStatsAggregator:
    """Legacy per-caller totals: every record counts, zero-time included."""

    def __init__(self, stripes: int = DEFAULT_STRIPES):
        self._totals: dict[str, CallerTotals] = {}
        self._locks = StripedLocks(stripes)

    def add(self, record: LogRecord):
        with self._locks.for_key(record.caller):
            totals = self._totals.setdefault(record.caller, CallerTotals())
            totals.count += 1
            totals.sum_ms += record.elapsed_ms

    def totals(self) -> dict[str, CallerTotals]:
        return {caller: CallerTotals(t.count, t.sum_ms) for caller, t in self._totals.items()}


@dataclass(frozen=True)
class WhereRow:
    caller: str
    where_clause: str
    source_file: str
    line_no: int


class WhereAggregator:
    """Legacy collector of (caller, where clause) rows."""

    def __init__(self):
        self._lock = threading.Lock()
        self._rows: list[WhereRow] = []

    def add(self, record: LogRecord):
        clause = extract_where(record.sql)
        if clause is None:
            return
        row = WhereRow(record.caller, clause, record.source_file, record.line_no)
        with self._lock:
            self._rows.append(row)

    def rows(self) -> list[WhereRow]:
        with self._lock:
            return list(self._rows)
