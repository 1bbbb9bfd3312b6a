"""Statement classification — first read/write keyword decides the kind."""

import re
from enum import Enum

KEYWORD_PATTERN = re.compile(r"\b(select|insert|update|delete)\b", re.IGNORECASE | re.DOTALL)


class StatementKind(Enum):
    READ = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def label(self) -> str:
        """Upper-case SQL keyword shown in report titles."""
        return self.value.upper()


def classify(sql: str) -> StatementKind | None:
    """Return the kind of the first keyword found in *sql*, or None.

    Only the first occurrence matters, so ``insert into t select ...`` is an
    INSERT and ``select ... where id in (delete ...)`` stays a READ.
    """
    match = KEYWORD_PATTERN.search(sql)
    if not match:
        return None
    return StatementKind(match.group(1).lower())
