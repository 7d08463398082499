# File: pothosgen/parser.py
"""
pothosgen - Textual Schema Parser
=================================
Recovers a ``ParsedSchema`` from Prisma schema text without a grammar front
end.

Pipeline:
    1. ``split_blocks``      — one forward scan, yields ``enum``/``model`` blocks
    2. name pre-pass         — every enum and model name, so forward references
                               resolve regardless of declaration order
    3. ``parse_field_line``  — one declaration line → ``FieldInfo`` (or ``None``)
    4. ``parse_relation``    — the optional ``@relation(...)`` clause

The parser is permissive: a line it cannot recognise is skipped, an unknown
type name becomes ``String`` and an unterminated block is truncated at end of
input.  None of these raise; they are logged at DEBUG level.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Collection, List, Optional, Set, Tuple

from pothosgen.dmmf import canonical_default
from pothosgen.models import (
    SCALAR_NAMES,
    EnumInfo,
    EnumValueInfo,
    FieldInfo,
    FieldType,
    ModelInfo,
    ParsedSchema,
    PrimaryKeyInfo,
    RelationInfo,
    ScalarType,
)
from pothosgen.utils import extract_call_args, read_file, split_list_literal

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.parser")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns
# ---------------------------------------------------------------------------

_RELATION_NAME_KW_RE: re.Pattern[str] = re.compile(r'\bname\s*:\s*"([^"]*)"')
_LEADING_STRING_RE: re.Pattern[str] = re.compile(r'^\s*"([^"]*)"')
_FIELDS_RE: re.Pattern[str] = re.compile(r"\bfields\s*:\s*\[([^\]]*)\]")
_REFERENCES_RE: re.Pattern[str] = re.compile(r"\breferences\s*:\s*\[([^\]]*)\]")
_ON_DELETE_RE: re.Pattern[str] = re.compile(r"\bonDelete\s*:\s*(\w+)")
_ON_UPDATE_RE: re.Pattern[str] = re.compile(r"\bonUpdate\s*:\s*(\w+)")
_MAP_RE: re.Pattern[str] = re.compile(r'(?<!@)@map\(\s*"([^"]*)"\s*\)')
_BLOCK_MAP_RE: re.Pattern[str] = re.compile(r'^@@map\(\s*"([^"]*)"\s*\)')

_BLOCK_KEYWORDS: Tuple[str, ...] = ("enum", "model")


# ---------------------------------------------------------------------------
# Block splitting
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class SchemaBlock:
    """One ``enum`` or ``model`` block: its header name and raw body lines."""

    kind: str
    name: str
    lines: List[str] = field(default_factory=list)
    closed: bool = False


def _header_name(trimmed: str, keyword: str) -> str:
    rest: str = trimmed[len(keyword) + 1:]
    if rest.endswith(" {"):
        rest = rest[:-2]
    else:
        rest = rest.rstrip("{")
    return rest.strip()


def split_blocks(text: str) -> List[SchemaBlock]:
    """
    Split schema text into ``enum`` and ``model`` blocks.

    A trimmed line starting with ``enum `` or ``model `` opens a block; the
    first later line whose trimmed form starts with ``}`` closes it.  Body lines
    are kept verbatim.  When the header carries no ``{``, a following line made
    only of ``{`` is consumed as the opening delimiter; blank and comment
    lines before it are passed through.  Everything outside
    those blocks (datasource, generator, comments) is ignored.
    """
    blocks: List[SchemaBlock] = []
    current: Optional[SchemaBlock] = None
    awaiting_brace: bool = False

    for raw in text.splitlines():
        trimmed: str = raw.strip()

        if current is not None:
            if awaiting_brace:
                if _is_skippable(trimmed):
                    current.lines.append(raw)
                    continue
                awaiting_brace = False
                if trimmed == "{":
                    continue
            if trimmed.startswith("}"):
                current.closed = True
                blocks.append(current)
                current = None
                continue
            current.lines.append(raw)
            continue

        for keyword in _BLOCK_KEYWORDS:
            if trimmed.startswith(keyword + " "):
                current = SchemaBlock(kind=keyword, name=_header_name(trimmed, keyword))
                awaiting_brace = "{" not in trimmed
                break

    if current is not None:
        logger.debug(
            "Unterminated %s block '%s' truncated at end of input (%d lines).",
            current.kind,
            current.name,
            len(current.lines),
        )
        blocks.append(current)

    return blocks


# ---------------------------------------------------------------------------
# Relation clause
# ---------------------------------------------------------------------------


def parse_relation(line: str, related_model: str) -> RelationInfo:
    """
    Read the optional ``@relation(...)`` clause of a declaration line.

    Each part is independent and optional: the name (``name: "X"`` or a
    leading string literal), ``fields: [...]``, ``references: [...]``,
    ``onDelete: X`` and ``onUpdate: X``.  Without a clause the result is the
    non-owning side: no name and empty lists.

    Examples:
        >>> r = parse_relation(
        ...     'author User @relation(fields: [authorId], references: [id])', "User"
        ... )
        >>> r.fields, r.references
        (['authorId'], ['id'])
        >>> parse_relation('posts Post[]', "Post").fields
        []
    """
    args: Optional[str] = extract_call_args(line, "@relation(")
    if args is None:
        return RelationInfo(related_model=related_model)

    name: Optional[str] = None
    match = _RELATION_NAME_KW_RE.search(args)
    if match:
        name = match.group(1)
    else:
        match = _LEADING_STRING_RE.match(args)
        if match:
            name = match.group(1)

    fields_match = _FIELDS_RE.search(args)
    references_match = _REFERENCES_RE.search(args)
    on_delete = _ON_DELETE_RE.search(args)
    on_update = _ON_UPDATE_RE.search(args)

    return RelationInfo(
        name=name,
        fields=split_list_literal(fields_match.group(1)) if fields_match else [],
        references=(
            split_list_literal(references_match.group(1)) if references_match else []
        ),
        related_model=related_model,
        on_delete=on_delete.group(1) if on_delete else None,
        on_update=on_update.group(1) if on_update else None,
    )


# ---------------------------------------------------------------------------
# Field declarations
# ---------------------------------------------------------------------------


def _resolve_type(
    base: str,
    enum_names: Collection[str],
    model_names: Collection[str],
) -> FieldType:
    if base in SCALAR_NAMES:
        return FieldType.scalar(ScalarType(base))
    if base in enum_names:
        return FieldType.enum(base)
    if base in model_names:
        return FieldType.model(base)
    logger.debug("Unknown type '%s' — falling back to String.", base)
    return FieldType.scalar(ScalarType.STRING)


def parse_field_line(
    line: str,
    enum_names: Collection[str],
    model_names: Collection[str],
) -> Optional[FieldInfo]:
    """
    Parse one trimmed model body line into a ``FieldInfo``.

    Returns ``None`` for lines with fewer than two whitespace-separated
    tokens.  Unknown type names fall back to ``String``.
    The ``@default(...)`` text is kept in the spelling ``canonical_default``
    gives, so the same value always reads the same.

    Examples:
        >>> f = parse_field_line("title String?", [], [])
        >>> f.field_type.name, f.is_required, f.is_list
        ('String', False, False)
        >>> parse_field_line("orphan", [], []) is None
        True
    """
    parts: List[str] = line.split()
    if len(parts) < 2:
        logger.debug("Skipping malformed field line: %r", line)
        return None

    name: str = parts[0]
    type_token: str = parts[1]

    is_list: bool = False
    is_optional: bool = False
    base: str = type_token
    if type_token.endswith("[]"):
        is_list = True
        base = type_token[:-2]
    elif type_token.endswith("?"):
        is_optional = True
        base = type_token[:-1]

    field_type: FieldType = _resolve_type(base, enum_names, model_names)
    relation: Optional[RelationInfo] = (
        parse_relation(line, base) if field_type.is_model else None
    )

    default_value: Optional[str] = extract_call_args(line, "@default(")
    if default_value is not None:
        default_value = canonical_default(default_value)

    return FieldInfo(
        name=name,
        field_type=field_type,
        is_required=not is_optional and not is_list,
        is_list=is_list,
        is_id="@id" in line,
        is_unique="@unique" in line,
        is_updated_at="@updatedAt" in line,
        default_value=default_value,
        relation=relation,
    )


# ---------------------------------------------------------------------------
# Block assembly
# ---------------------------------------------------------------------------


def _is_skippable(trimmed: str) -> bool:
    return not trimmed or trimmed.startswith("//")


def _build_enum(block: SchemaBlock) -> EnumInfo:
    values: List[EnumValueInfo] = []
    for raw in block.lines:
        trimmed: str = raw.strip()
        if _is_skippable(trimmed) or trimmed.startswith("@@"):
            continue
        map_match = _MAP_RE.search(trimmed)
        values.append(
            EnumValueInfo(
                name=trimmed.split()[0],
                db_name=map_match.group(1) if map_match else None,
            )
        )
    return EnumInfo(name=block.name, values=values)


def _build_model(
    block: SchemaBlock,
    enum_names: Collection[str],
    model_names: Collection[str],
) -> ModelInfo:
    fields: List[FieldInfo] = []
    primary_key: Optional[PrimaryKeyInfo] = None
    db_name: Optional[str] = None

    for raw in block.lines:
        trimmed: str = raw.strip()
        if _is_skippable(trimmed):
            continue
        if trimmed.startswith("@@"):
            map_match = _BLOCK_MAP_RE.match(trimmed)
            if map_match:
                db_name = map_match.group(1)
            continue

        parsed: Optional[FieldInfo] = parse_field_line(trimmed, enum_names, model_names)
        if parsed is None:
            continue
        if parsed.is_id and primary_key is None:
            primary_key = PrimaryKeyInfo(fields=[parsed.name])
        fields.append(parsed)

    return ModelInfo(
        name=block.name,
        db_name=db_name,
        fields=fields,
        primary_key=primary_key,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_schema(text: str) -> ParsedSchema:
    """
    Parse Prisma schema text into a ``ParsedSchema``.

    Pass 1 collects every enum and model name; pass 2 builds the entities in
    declaration order.  The primary key is the first ``@id`` field; composite
    keys and unique groups are not recovered from text.
    """
    blocks: List[SchemaBlock] = [b for b in split_blocks(text) if b.name]

    enum_names: Set[str] = {b.name for b in blocks if b.kind == "enum"}
    model_names: Set[str] = {b.name for b in blocks if b.kind == "model"}
    logger.debug(
        "Name pre-pass: %d enums, %d models.", len(enum_names), len(model_names)
    )

    enums: List[EnumInfo] = []
    models: List[ModelInfo] = []
    for block in blocks:
        if block.kind == "enum":
            enums.append(_build_enum(block))
        else:
            models.append(_build_model(block, enum_names, model_names))

    schema = ParsedSchema(models=models, enums=enums)
    logger.info("Parsed schema text: %r", schema)
    return schema


def parse_schema_file(path: Path) -> ParsedSchema:
    """
    Read a schema file fully and parse it.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not valid UTF-8.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    try:
        text: str = read_file(path)
    except UnicodeDecodeError as exc:
        raise ValueError(f"Schema file is not valid UTF-8: {path}: {exc}") from exc
    return parse_schema(text)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "SchemaBlock",
    "split_blocks",
    "parse_relation",
    "parse_field_line",
    "parse_schema",
    "parse_schema_file",
]

logger.debug("pothosgen.parser loaded — %d public symbols.", len(__all__))
