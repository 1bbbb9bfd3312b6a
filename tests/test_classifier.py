"""Tests for sql_log_analyzer/classifier.py"""

import pytest

from sql_log_analyzer.classifier import StatementKind, classify


class TestClassify:
    @pytest.mark.parametrize(
        "sql, kind",
        [
            ("select * from t", StatementKind.READ),
            ("SELECT * FROM t", StatementKind.READ),
            ("insert into t values (1)", StatementKind.INSERT),
            ("UPDATE t1 SET x=1", StatementKind.UPDATE),
            ("update t1 set x=1", StatementKind.UPDATE),
            ("Delete From t where id=1", StatementKind.DELETE),
        ],
    )
    def test_kinds(self, sql, kind):
        assert classify(sql) is kind

    def test_first_keyword_wins(self):
        assert classify("insert into t select * from s") is StatementKind.INSERT
        assert classify("select * from t where x in (delete)") is StatementKind.READ

    def test_leading_noise_is_skipped(self):
        assert classify("/* batch */ update t set a=1") is StatementKind.UPDATE

    def test_whole_word_only(self):
        assert classify("call selector_proc()") is None
        assert classify("updated_at = now()") is None

    def test_unrecognized(self):
        assert classify("commit") is None
        assert classify("") is None


class TestStatementKind:
    def test_fixed_order(self):
        assert list(StatementKind) == [
            StatementKind.READ,
            StatementKind.INSERT,
            StatementKind.UPDATE,
            StatementKind.DELETE,
        ]

    def test_labels(self):
        assert [k.label for k in StatementKind] == ["SELECT", "INSERT", "UPDATE", "DELETE"]
