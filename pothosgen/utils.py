# File: pothosgen/utils.py
"""
pothosgen - Utility Functions & Helpers
=======================================
String transformation, literal scanning, file I/O, and code-formatting
helpers used throughout the generation pipeline.

Performance strategy:
- The casing and pluralisation functions are decorated with
  ``@lru_cache(maxsize=None)``; the emitters call them for every model many
  times over.
- File writes go through a temporary file and an atomic rename.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import List, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_UNDERSCORE_LETTER_RE: re.Pattern[str] = re.compile(r"_([A-Za-z])")


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def lower_first(name: str) -> str:
    """
    Lowercase the first character, keep the rest unchanged.

    Examples:
        >>> lower_first("BlogPost")
        'blogPost'
        >>> lower_first("User_Profile")
        'user_Profile'
    """
    if not name:
        return ""
    return name[0].lower() + name[1:]


@functools.lru_cache(maxsize=None)
def snake_to_camel(name: str) -> str:
    """
    Collapse every underscore-letter pair into the uppercased letter.

    Examples:
        >>> snake_to_camel("user_profile")
        'userProfile'
        >>> snake_to_camel("order_Item")
        'orderItem'
        >>> snake_to_camel("trailing_")
        'trailing_'
    """
    return _UNDERSCORE_LETTER_RE.sub(lambda m: m.group(1).upper(), name)


@functools.lru_cache(maxsize=None)
def pluralize(name: str) -> str:
    """
    Pluralise a query name: ``...y`` → ``...ies``, anything else gets ``s``.

    Examples:
        >>> pluralize("category")
        'categories'
        >>> pluralize("post")
        'posts'
        >>> pluralize("address")
        'addresss'
    """
    if not name:
        return ""
    if name.endswith("y"):
        return name[:-1] + "ies"
    return name + "s"


@functools.lru_cache(maxsize=None)
def pluralize_collapsed(name: str) -> str:
    """
    ``pluralize`` followed by collapsing a trailing ``ss`` into ``s``.

    Examples:
        >>> pluralize_collapsed("address")
        'address'
        >>> pluralize_collapsed("bus")
        'bus'
        >>> pluralize_collapsed("post")
        'posts'
    """
    plural: str = pluralize(name)
    if plural.endswith("ss"):
        return plural[:-1]
    return plural


# ---------------------------------------------------------------------------
# Literal scanning helpers (used by the schema parser)
# ---------------------------------------------------------------------------


def find_balanced(text: str, open_index: int) -> int:
    """
    Return the index of the ``)`` closing the ``(`` at *open_index*.

    Parentheses inside double-quoted strings are ignored.  Returns ``-1``
    when the group never closes.
    """
    depth: int = 0
    in_string: bool = False
    escaped: bool = False
    for i in range(open_index, len(text)):
        ch: str = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def extract_call_args(line: str, marker: str) -> Optional[str]:
    """
    Return the raw text between the parentheses of ``marker(...)``.

    *marker* includes the opening parenthesis, e.g. ``"@default("``.
    An unclosed group yields everything up to the end of the line.

    Examples:
        >>> extract_call_args('id Int @default(autoincrement())', "@default(")
        'autoincrement()'
        >>> extract_call_args('name String', "@default(") is None
        True
    """
    start: int = line.find(marker)
    if start < 0:
        return None
    open_index: int = start + len(marker) - 1
    close_index: int = find_balanced(line, open_index)
    if close_index < 0:
        return line[open_index + 1:]
    return line[open_index + 1:close_index]


def split_list_literal(text: str) -> List[str]:
    """Split the inside of ``[a, b]`` into trimmed, non-empty tokens."""
    return [part.strip() for part in text.split(",") if part.strip()]


# ---------------------------------------------------------------------------
# Code formatting helpers
# ---------------------------------------------------------------------------


def build_ts_import(names: Sequence[str], module: str) -> str:
    """
    Build one TypeScript named-import line, names sorted and de-duplicated.

    Example:
        >>> build_ts_import(["b", "a", "a"], "../enums")
        'import { a, b } from "../enums";'
    """
    unique: List[str] = sorted(set(names))
    return f'import {{ {", ".join(unique)} }} from "{module}";'


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path*.

    When *atomic* is True, writes to a temporary file first then renames —
    a crash never leaves a half-written file behind.

    Returns the number of bytes written.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")
    byte_count: int = len(encoded)

    if atomic:
        fd: int
        tmp_path: str
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(encoded)
            os.replace(tmp_path, str(path))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    else:
        path.write_bytes(encoded)

    logger.debug("Wrote %d bytes to %s", byte_count, path)
    return byte_count


def read_file(path: Path) -> str:
    """Read a UTF-8 file fully and return its content."""
    return path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string. O(n)."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string. O(n)."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling pipeline steps.

    Usage:
        with Timer("parse schema") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug(
            "Timer [%s]: %.4f seconds",
            self.label,
            self.elapsed,
        )

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "lower_first",
    "snake_to_camel",
    "pluralize",
    "pluralize_collapsed",
    "find_balanced",
    "extract_call_args",
    "split_list_literal",
    "build_ts_import",
    "ensure_directory",
    "write_file",
    "read_file",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("pothosgen.utils loaded — %d public symbols.", len(__all__))
