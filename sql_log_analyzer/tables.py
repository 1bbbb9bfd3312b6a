"""Table name extraction and normalization.

Surface pattern matching only: identifiers are picked up after the keywords
that introduce a table for each statement kind, then normalized to a bare,
lowercase name. Parenthesized derived tables (``from (select ...)``) are
skipped at their own position; the tables they read from are still found by
their inner ``from``.
"""

import re

from sql_log_analyzer.classifier import StatementKind

IDENTIFIER = r"([\w`\".$#]+)"

FROM_PATTERN = re.compile(r"\bfrom\s+(?!\()" + IDENTIFIER, re.IGNORECASE | re.DOTALL)
JOIN_PATTERN = re.compile(r"\bjoin\s+(?!\()" + IDENTIFIER, re.IGNORECASE | re.DOTALL)
INSERT_PATTERN = re.compile(r"\binsert\s+into\s+" + IDENTIFIER, re.IGNORECASE | re.DOTALL)
UPDATE_PATTERN = re.compile(r"\bupdate\s+" + IDENTIFIER, re.IGNORECASE | re.DOTALL)
DELETE_PATTERN = re.compile(r"\bdelete\s+(?:\w+\s+)?from\s+" + IDENTIFIER, re.IGNORECASE | re.DOTALL)

PATTERNS_BY_KIND = {
    StatementKind.READ: (FROM_PATTERN, JOIN_PATTERN),
    StatementKind.INSERT: (INSERT_PATTERN,),
    StatementKind.UPDATE: (UPDATE_PATTERN,),
    StatementKind.DELETE: (DELETE_PATTERN,),
}

_LIST_TAIL = re.compile(r"[,;].*$", re.DOTALL)
_QUOTES = re.compile(r"^[`\"]|[`\"]$")
_ALIAS_TAIL = re.compile(r"\s+.*$", re.DOTALL)


def normalize_table(raw: str) -> str:
    """Reduce a raw identifier to a bare lowercase table name.

    ``schema1.orders`` -> ``orders``, ``"Orders"`` -> ``orders``,
    ``orders o`` -> ``orders``. Lists keep their first entry only
    (``a,b`` -> ``a``). Returns an empty string when nothing is left.
    """
    name = raw.strip()
    name = _LIST_TAIL.sub("", name)
    name = _QUOTES.sub("", name)
    dot = name.rfind(".")
    if 0 <= dot < len(name) - 1:
        name = name[dot + 1:]
    name = _ALIAS_TAIL.sub("", name)
    return name.lower()


def _raw_identifiers(sql: str, kind: StatementKind) -> list[str]:
    seen: dict[str, None] = {}
    for pattern in PATTERNS_BY_KIND[kind]:
        for match in pattern.finditer(sql):
            raw = match.group(1).strip()
            if raw.startswith("("):
                continue
            seen.setdefault(raw, None)
    return list(seen)


def extract_tables(sql: str, kind: StatementKind) -> list[str]:
    """Return the distinct normalized table names referenced by *sql*.

    Order is first appearance; for reads all ``from`` targets come before
    ``join`` targets.
    """
    tables: dict[str, None] = {}
    for raw in _raw_identifiers(sql, kind):
        name = normalize_table(raw)
        if name:
            tables.setdefault(name, None)
    return list(tables)
