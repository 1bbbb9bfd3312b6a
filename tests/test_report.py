"""Tests for sql_log_analyzer/report.py"""

import pytest

from sql_log_analyzer.aggregator import CallerTotals, LatencyStats, WhereRow
from sql_log_analyzer.classifier import StatementKind
from sql_log_analyzer.report import (
    PER_TABLE_COLUMNS,
    PER_TABLE_SECTION,
    STATS_COLUMNS,
    SUMMARY_COLUMNS,
    SUMMARY_SECTION,
    WHERE_COLUMNS,
    build_per_table,
    build_stats_report,
    build_summary,
    build_where_report,
    build_workbook_report,
)

READ = StatementKind.READ


def _stats(*samples: int) -> LatencyStats:
    stats = LatencyStats()
    for ms in samples:
        stats.add(ms)
    return stats


class TestBuildSummary:
    def test_four_blocks_in_fixed_order(self):
        section = build_summary({})
        assert section.name == SUMMARY_SECTION
        assert [b.title for b in section.blocks] == [
            ("SELECT table usage (desc)",),
            ("INSERT table usage (desc)",),
            ("UPDATE table usage (desc)",),
            ("DELETE table usage (desc)",),
        ]
        assert all(b.columns == SUMMARY_COLUMNS and b.rows == [] for b in section.blocks)

    def test_sorted_by_usage_desc(self):
        section = build_summary({READ: {"orders": 5, "users": 9}})
        assert section.blocks[0].rows == [("users", 9), ("orders", 5)]

    def test_ties_broken_by_name(self):
        section = build_summary({StatementKind.DELETE: {"b": 2, "c": 2, "a": 2, "z": 3}})
        assert section.blocks[3].rows == [("z", 3), ("a", 2), ("b", 2), ("c", 2)]


class TestBuildPerTable:
    def test_rows_and_ordering(self):
        latency = {
            "users": {"B": _stats(4), "A": _stats(4)},
            "orders": {"A": _stats(1, 2), "B": _stats(7)},
        }
        section = build_per_table(latency)
        assert section.name == PER_TABLE_SECTION
        assert [b.title for b in section.blocks] == [("Table: orders",), ("Table: users",)]
        orders = section.blocks[0]
        assert orders.columns == PER_TABLE_COLUMNS
        assert orders.rows == [("A", 2, 1.5, 2, 1), ("B", 1, 7.0, 7, 7)]
        assert [r[0] for r in section.blocks[1].rows] == ["A", "B"]

    def test_average_rounded_to_three_places(self):
        section = build_per_table({"t": {"A": _stats(1, 1, 2)}})
        assert section.blocks[0].rows[0][2] == pytest.approx(1.333)

    def test_tables_without_samples_omitted(self):
        section = build_per_table({"t": {"A": LatencyStats()}, "u": {"A": _stats(3)}})
        assert [b.name for b in section.blocks] == ["u"]


class TestBuildWorkbookReport:
    def test_sections(self):
        report = build_workbook_report({READ: {"t": 1}}, {"t": {"A": _stats(2)}})
        assert [s.name for s in report.sections] == [SUMMARY_SECTION, PER_TABLE_SECTION]
        assert report.section(PER_TABLE_SECTION).blocks[0].rows == [("A", 1, 2.0, 2, 2)]

    def test_unknown_section(self):
        with pytest.raises(KeyError):
            build_workbook_report({}, {}).section("nope")


class TestLegacyReports:
    def test_stats_report(self):
        report = build_stats_report({"B": CallerTotals(2, 10), "A": CallerTotals(2, 0), "C": CallerTotals(5, 1)})
        block = report.sections[0].blocks[0]
        assert block.columns == STATS_COLUMNS
        assert block.rows == [("C", 5, 0.2), ("A", 2, 0.0), ("B", 2, 5.0)]

    def test_where_report_ordered_by_source(self):
        rows = [
            WhereRow("A", "x=1", "b.log", 1),
            WhereRow("B", "y=2", "a.log", 9),
            WhereRow("C", "z=3", "a.log", 2),
        ]
        block = build_where_report(rows).sections[0].blocks[0]
        assert block.columns == WHERE_COLUMNS
        assert block.rows == [("C", "z=3"), ("B", "y=2"), ("A", "x=1")]
