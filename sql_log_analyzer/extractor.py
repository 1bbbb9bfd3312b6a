"""Log line parser — frozen dataclass + compiled regex for p6spy-style lines."""

import re
from dataclasses import dataclass

SQL_MARKER = "[SQL:"
UNKNOWN_CALLER = "<unknown>"

TIME_PATTERN = re.compile(r"\[Time:\s*(\d+)\s*ms\]")
CALLER_PATTERN = re.compile(r"\[Caller:\s*([^\]]+)\]")
SQL_PATTERN = re.compile(r"\[SQL:\s*(.+?)\]\s*$")


@dataclass(frozen=True)
class LogRecord:
    caller: str
    elapsed_ms: int
    sql: str
    source_file: str = ""
    line_no: int = 0


def _first_group(pattern: re.Pattern, text: str) -> str | None:
    match = pattern.search(text)
    return match.group(1) if match else None


def parse_line(line: str, source_file: str = "", line_no: int = 0) -> LogRecord | None:
    """Parse a single log line into a LogRecord. Returns None for lines without SQL.

    Lines look like ``[Time: 15 ms][Caller: com.a.B#c:10][SQL: select ...]``.
    Missing time defaults to 0 ms, a missing caller to ``<unknown>``.
    """
    stripped = line.rstrip("\r\n")
    if SQL_MARKER not in stripped:
        return None

    sql = _first_group(SQL_PATTERN, stripped)
    if sql is None:
        return None

    caller = _first_group(CALLER_PATTERN, stripped)
    elapsed = _first_group(TIME_PATTERN, stripped)

    return LogRecord(
        caller=caller if caller is not None else UNKNOWN_CALLER,
        elapsed_ms=int(elapsed) if elapsed is not None else 0,
        sql=sql,
        source_file=source_file,
        line_no=line_no,
    )
