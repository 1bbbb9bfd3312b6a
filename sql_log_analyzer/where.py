"""WHERE clause extraction for the legacy ``where`` report."""

import re

WHERE_PATTERN = re.compile(
    r"\bwhere\b(.*?)(?=\b(?:group\s+by|order\s+by|having|limit|offset|fetch|for\s+update)\b|$)",
    re.IGNORECASE | re.DOTALL,
)
_WHITESPACE = re.compile(r"\s+")


def normalize_space(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def extract_where(sql: str) -> str | None:
    """Return the whitespace-normalized WHERE condition of *sql*, or None."""
    match = WHERE_PATTERN.search(sql)
    if not match:
        return None
    clause = normalize_space(match.group(1))
    return clause or None
