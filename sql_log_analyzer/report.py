"""Report builder — turns finished aggregates into sorted, sectioned rows.

The report is a plain data structure; writers decide how it is serialized.
"""

from dataclasses import dataclass, field

from sql_log_analyzer.aggregator import CallerTotals, LatencyStats, WhereRow
from sql_log_analyzer.classifier import StatementKind

SUMMARY_SECTION = "Summary"
PER_TABLE_SECTION = "PerTable"

SUMMARY_COLUMNS = ("table", "usage_count")
PER_TABLE_COLUMNS = ("caller", "count", "avg_ms", "max_ms", "min_ms")
STATS_COLUMNS = ("caller", "count", "avg_ms")
WHERE_COLUMNS = ("caller", "where_clause")


@dataclass(frozen=True)
class Block:
    name: str = ""
    title: tuple = ()
    columns: tuple = ()
    rows: list[tuple] = field(default_factory=list)


@dataclass(frozen=True)
class Section:
    name: str
    blocks: list[Block] = field(default_factory=list)


@dataclass(frozen=True)
class Report:
    sections: list[Section] = field(default_factory=list)

    def section(self, name: str) -> Section:
        for section in self.sections:
            if section.name == name:
                return section
        raise KeyError(name)


def _by_count_then_name(item: tuple) -> tuple:
    name, count = item
    return (-count, name)


def summary_title(kind: StatementKind) -> str:
    return f"{kind.label} table usage (desc)"


def per_table_title(table: str) -> str:
    return f"Table: {table}"


def build_summary(usage: dict[StatementKind, dict[str, int]]) -> Section:
    """One block per statement kind, tables by usage desc then name asc."""
    blocks = []
    for kind in StatementKind:
        counts = usage.get(kind, {})
        rows = sorted(counts.items(), key=_by_count_then_name)
        blocks.append(
            Block(name=kind.name, title=(summary_title(kind),), columns=SUMMARY_COLUMNS, rows=rows)
        )
    return Section(SUMMARY_SECTION, blocks)


def build_per_table(latency: dict[str, dict[str, LatencyStats]]) -> Section:
    """One block per table with sampled callers, tables in name order.

    Callers are sorted by sample count desc then name asc. Tables whose
    callers have no samples are left out.
    """
    blocks = []
    for table in sorted(latency):
        sampled = [(caller, s) for caller, s in latency[table].items() if s.count > 0]
        if not sampled:
            continue
        sampled.sort(key=lambda item: (-item[1].count, item[0]))
        rows = [
            (caller, s.count, round(s.avg_ms, 3), s.max_ms, s.min_ms)
            for caller, s in sampled
        ]
        blocks.append(
            Block(name=table, title=(per_table_title(table),), columns=PER_TABLE_COLUMNS, rows=rows)
        )
    return Section(PER_TABLE_SECTION, blocks)


def build_workbook_report(
    usage: dict[StatementKind, dict[str, int]],
    latency: dict[str, dict[str, LatencyStats]],
) -> Report:
    return Report([build_summary(usage), build_per_table(latency)])


def build_stats_report(totals: dict[str, CallerTotals]) -> Report:
    """Legacy flat report: count and average per caller, zero-time included."""
    ordered = sorted(totals.items(), key=lambda item: (-item[1].count, item[0]))
    rows = [(caller, t.count, round(t.avg_ms, 3)) for caller, t in ordered]
    return Report([Section("stats", [Block(columns=STATS_COLUMNS, rows=rows)])])


def build_where_report(where_rows: list[WhereRow]) -> Report:
    """Legacy flat report: one row per record with a WHERE clause."""
    ordered = sorted(where_rows, key=lambda r: (r.source_file, r.line_no))
    rows = [(r.caller, r.where_clause) for r in ordered]
    return Report([Section("where", [Block(columns=WHERE_COLUMNS, rows=rows)])])
