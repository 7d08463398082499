# File: pothosgen/scanner.py
"""
pothosgen - Manual Resolver Scanner
===================================
Finds hand-written Pothos query and mutation fields in a project's
TypeScript sources, so the generator does not emit a resolver that would
collide with one.

A field counts as hand-written when a ``.ts`` file under one of the scan
directories contains ``builder.queryField("name", ...)`` or
``builder.mutationField("name", ...)`` (any quote style, flexible spacing).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Set, Union

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.scanner")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns
# ---------------------------------------------------------------------------

_QUERY_FIELD_RE: re.Pattern[str] = re.compile(
    r"""builder\s*\.\s*queryField\s*\(\s*["'`]([^"'`]+)["'`]"""
)
_MUTATION_FIELD_RE: re.Pattern[str] = re.compile(
    r"""builder\s*\.\s*mutationField\s*\(\s*["'`]([^"'`]+)["'`]"""
)


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ManualResolvers:
    """Names of hand-written query and mutation fields."""

    queries: Set[str] = field(default_factory=set)
    mutations: Set[str] = field(default_factory=set)
    files_scanned: int = 0

    def contains_query(self, name: str) -> bool:
        return name in self.queries

    def contains_mutation(self, name: str) -> bool:
        return name in self.mutations

    def scan_text(self, content: str) -> None:
        """Record every query/mutation field declared in *content*."""
        self.queries.update(_QUERY_FIELD_RE.findall(content))
        self.mutations.update(_MUTATION_FIELD_RE.findall(content))

    def __repr__(self) -> str:
        return (
            f"<ManualResolvers {len(self.queries)} queries, "
            f"{len(self.mutations)} mutations>"
        )


# ---------------------------------------------------------------------------
# Directory walk
# ---------------------------------------------------------------------------


def scan_for_manual_resolvers(
    scan_dirs: Iterable[Union[str, Path]],
) -> ManualResolvers:
    """
    Recursively scan *scan_dirs* for hand-written resolvers.

    Missing directories and unreadable files are skipped with a log message.
    Files not mentioning ``builder`` are not searched.
    """
    resolvers = ManualResolvers()
    dirs: List[Path] = [Path(d) for d in scan_dirs]

    if not dirs:
        logger.info("No scan directories specified; skipping manual resolver detection.")
        return resolvers

    for directory in dirs:
        if not directory.is_dir():
            logger.warning("Scan directory not found: %s", directory)
            continue

        logger.info("Scanning directory: %s", directory)
        scanned_here: int = 0
        for path in sorted(directory.rglob("*.ts")):
            if not path.is_file():
                continue
            try:
                content: str = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.debug("Skipping unreadable file %s: %s", path, exc)
                continue
            if "builder" not in content:
                continue

            before_q: int = len(resolvers.queries)
            before_m: int = len(resolvers.mutations)
            resolvers.scan_text(content)
            if len(resolvers.queries) != before_q or len(resolvers.mutations) != before_m:
                logger.debug("Found manual resolvers in %s", path)
            scanned_here += 1

        resolvers.files_scanned += scanned_here
        logger.info("Scanned %d TypeScript files in %s", scanned_here, directory)

    logger.info(
        "Found %d manual queries and %d manual mutations.",
        len(resolvers.queries),
        len(resolvers.mutations),
    )
    return resolvers


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ManualResolvers",
    "scan_for_manual_resolvers",
]

logger.debug("pothosgen.scanner loaded — %d public symbols.", len(__all__))
