"""Shared pytest fixtures for the sql-log-analyzer test suite."""

import gzip

import pytest

from sql_log_analyzer.extractor import LogRecord


def log_line(sql: str, elapsed_ms: int | None = 0, caller: str | None = "com.a.B#c:10") -> str:
    """Build a p6spy-style line; pass None to leave a marker out."""
    parts = []
    if elapsed_ms is not None:
        parts.append(f"[Time: {elapsed_ms} ms]")
    if caller is not None:
        parts.append(f"[Caller: {caller}]")
    parts.append(f"[SQL: {sql}]")
    return "".join(parts)


def record(sql: str, elapsed_ms: int = 0, caller: str = "com.a.B#c:10") -> LogRecord:
    return LogRecord(caller=caller, elapsed_ms=elapsed_ms, sql=sql)


@pytest.fixture()
def write_log(tmp_path):
    """Write lines to a (optionally gzipped) file under tmp_path, return its path."""

    def _write(name: str, lines: list[str]) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        content = "".join(line + "\n" for line in lines)
        if name.endswith(".gz"):
            with gzip.open(path, "wt", encoding="utf-8") as f:
                f.write(content)
        else:
            path.write_text(content, encoding="utf-8")
        return str(path)

    return _write
