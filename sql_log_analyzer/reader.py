"""Input discovery and gzip-transparent line reading."""

import glob
import gzip
import os
from typing import Generator

LOG_SUFFIXES = (".log", ".log.gz", ".gz")


class NoInputFilesError(FileNotFoundError):
    """Raised when path expansion leaves nothing to scan."""


def is_log_file(path: str) -> bool:
    """True if the file name ends in .log, .log.gz or .gz (case-insensitive)."""
    return os.path.basename(path).lower().endswith(LOG_SUFFIXES)


def open_log(filepath: str):
    """Open *filepath* for UTF-8 text reading, decompressing ``.gz`` files.

    Malformed bytes are replaced, so one bad line never drops the file.
    """
    if filepath.lower().endswith(".gz"):
        return gzip.open(filepath, "rt", encoding="utf-8", errors="replace")
    return open(filepath, "r", encoding="utf-8", errors="replace")


def read_lines(filepath: str) -> Generator[tuple[int, str], None, None]:
    """Yield (line_no, line) for each line in a single file, 1-based."""
    with open_log(filepath) as f:
        for line_no, line in enumerate(f, start=1):
            yield line_no, line


def _walk(directory: str) -> list[str]:
    found = []
    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for name in sorted(files):
            path = os.path.join(root, name)
            if is_log_file(path):
                found.append(path)
    return found


def expand_paths(raw_paths: list[str]) -> list[str]:
    """Expand directories and globs into a deduplicated list of log files.

    Directories are walked recursively. Explicit files and glob matches are
    kept only when they look like log files; missing paths are ignored.
    Raises NoInputFilesError if expansion produces zero files.
    """
    expanded = []
    seen = set()

    def _add(path: str):
        if path not in seen:
            seen.add(path)
            expanded.append(path)

    for raw in raw_paths:
        if any(c in raw for c in ("*", "?", "[")):
            candidates = sorted(glob.glob(raw, recursive=True))
        else:
            candidates = [raw]

        for candidate in candidates:
            if os.path.isdir(candidate):
                for path in _walk(candidate):
                    _add(path)
            elif os.path.isfile(candidate) and is_log_file(candidate):
                _add(candidate)

    if not expanded:
        raise NoInputFilesError("No .log / .log.gz / .gz files found in the given paths")

    return expanded
