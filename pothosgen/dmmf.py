# File: pothosgen/dmmf.py
"""
pothosgen - DMMF Document Importer / Exporter
=============================================
Decodes Prisma introspection metadata (the DMMF document a Prisma generator
receives) into the same ``ParsedSchema`` the textual parser produces, and
encodes a ``ParsedSchema`` back into that document shape.

Decoding is lenient: missing or mistyped optional values default to
``False`` / ``[]`` / ``None``; entities missing a required name, kind or type
are dropped; unknown scalar names and kinds fall back to ``String``.

Invariant:
    ``import_document(export_document(schema)) == schema`` for every schema
    produced by either ingestion path whose default literals are function
    calls with JSON arguments, JSON literals or bare enum identifiers.  The
    textual parser stores those in the spelling ``canonical_default`` gives.
    Any other literal on a scalar field comes back as a quoted string.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

import yaml

from pothosgen.models import (
    SCALAR_NAMES,
    EnumInfo,
    EnumValueInfo,
    FieldInfo,
    FieldKind,
    FieldType,
    ModelInfo,
    ParsedSchema,
    PrimaryKeyInfo,
    RelationInfo,
    ScalarType,
)
from pothosgen.utils import read_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.dmmf")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_KIND_SCALAR: str = "scalar"
_KIND_ENUM: str = "enum"
_KIND_OBJECT: str = "object"

_FUNCTION_CALL_RE: re.Pattern[str] = re.compile(r"^([A-Za-z_]\w*)\((.*)\)$", re.DOTALL)

_YAML_SUFFIXES: FrozenSet[str] = frozenset({".yaml", ".yml"})


# ---------------------------------------------------------------------------
# Lenient accessors
# ---------------------------------------------------------------------------


def _get_str(obj: Dict[str, Any], key: str) -> Optional[str]:
    value = obj.get(key)
    return value if isinstance(value, str) else None


def _get_bool(obj: Dict[str, Any], key: str) -> bool:
    value = obj.get(key)
    return value if isinstance(value, bool) else False


def _get_str_list(obj: Dict[str, Any], key: str) -> List[str]:
    value = obj.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _get_dicts(obj: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = obj.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


# ---------------------------------------------------------------------------
# Default-value rendering
# ---------------------------------------------------------------------------


def _render_argument(value: Any) -> str:
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return render_default(value, quote_strings=True)


def render_default(value: Any, quote_strings: bool) -> str:
    """
    Render a DMMF ``default`` JSON value in schema literal form.

    - ``{"name": f, "args": [...]}`` → ``f(arg, ...)``
    - strings → JSON-quoted when *quote_strings*, else bare
    - booleans → ``true`` / ``false``; numbers → decimal text
    - lists → ``[a, b]``

    Examples:
        >>> render_default({"name": "now", "args": []}, quote_strings=False)
        'now()'
        >>> render_default("hello", quote_strings=True)
        '"hello"'
        >>> render_default("ADMIN", quote_strings=False)
        'ADMIN'
    """
    if isinstance(value, dict):
        name: str = str(value.get("name", ""))
        args = value.get("args")
        if not isinstance(args, list):
            args = []
        return f"{name}({', '.join(_render_argument(a) for a in args)})"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False) if quote_strings else value
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, list):
        return "[" + ", ".join(render_default(v, quote_strings) for v in value) + "]"
    if value is None:
        return "null"
    return str(value)


def _quotes_strings(field_type: FieldType) -> bool:
    """String defaults are quoted literals on every scalar; enum values are bare."""
    return field_type.kind == FieldKind.SCALAR


def _decode_call_args(inner: str) -> Optional[List[Any]]:
    inner = inner.strip()
    if not inner:
        return []
    try:
        return json.loads(f"[{inner}]")
    except ValueError:
        return None


def canonical_default(text: str) -> str:
    """
    Re-spell a default literal the way ``render_default`` writes it.

    Function calls whose arguments are JSON values and plain JSON literals
    are normalised; the value never changes, only its spelling.  Anything
    else (bare identifiers, unclosed groups) is returned as-is.

    Examples:
        >>> canonical_default('"caf\\\\u00e9"')
        '"café"'
        >>> canonical_default('sequence(1,2)')
        'sequence(1, 2)'
        >>> canonical_default('USER')
        'USER'
    """
    stripped: str = text.strip()

    call = _FUNCTION_CALL_RE.match(stripped)
    if call:
        args = _decode_call_args(call.group(2))
        if args is None or any(isinstance(a, dict) for a in args):
            return text
        return render_default({"name": call.group(1), "args": args}, quote_strings=True)

    try:
        value: Any = json.loads(stripped)
    except ValueError:
        return text
    if isinstance(value, dict):
        return text
    return render_default(value, quote_strings=True)


def _encode_default(text: str, quote_strings: bool) -> Any:
    """
    Pick the DMMF value that renders back to exactly *text*.

    Candidates are tried in order: a function call, a JSON literal, the bare
    string.  The bare string is used when no candidate round-trips.
    """
    candidates: List[Any] = []

    call = _FUNCTION_CALL_RE.match(text)
    if call:
        args = _decode_call_args(call.group(2))
        if args is not None:
            candidates.append({"name": call.group(1), "args": args})

    try:
        candidates.append(json.loads(text))
    except ValueError:
        pass

    for candidate in candidates:
        if render_default(candidate, quote_strings) == text:
            return candidate

    logger.debug("Default %r has no exact DMMF encoding; kept as a string.", text)
    return text


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def _decode_field_type(kind: str, type_name: str) -> FieldType:
    if kind == _KIND_OBJECT:
        return FieldType.model(type_name)
    if kind == _KIND_ENUM:
        return FieldType.enum(type_name)
    if kind == _KIND_SCALAR and type_name in SCALAR_NAMES:
        return FieldType.scalar(ScalarType(type_name))
    logger.debug(
        "Unknown field kind/type '%s'/'%s' — falling back to String.", kind, type_name
    )
    return FieldType.scalar(ScalarType.STRING)


def _decode_field(raw: Dict[str, Any]) -> Optional[FieldInfo]:
    name = _get_str(raw, "name")
    kind = _get_str(raw, "kind")
    type_name = _get_str(raw, "type")
    if not name or kind is None or not type_name:
        logger.debug("Dropping DMMF field without name/kind/type: %r", raw)
        return None

    field_type: FieldType = _decode_field_type(kind, type_name)

    relation: Optional[RelationInfo] = None
    if field_type.is_model:
        relation = RelationInfo(
            name=_get_str(raw, "relationName"),
            fields=_get_str_list(raw, "relationFromFields"),
            references=_get_str_list(raw, "relationToFields"),
            related_model=type_name,
            on_delete=_get_str(raw, "relationOnDelete"),
            on_update=_get_str(raw, "relationOnUpdate"),
        )

    default_value: Optional[str] = None
    if raw.get("default") is not None:
        default_value = render_default(raw["default"], _quotes_strings(field_type))

    is_list: bool = _get_bool(raw, "isList")
    return FieldInfo(
        name=name,
        field_type=field_type,
        is_required=_get_bool(raw, "isRequired") and not is_list,
        is_list=is_list,
        is_id=_get_bool(raw, "isId"),
        is_unique=_get_bool(raw, "isUnique"),
        is_updated_at=_get_bool(raw, "isUpdatedAt"),
        default_value=default_value,
        relation=relation,
    )


def _decode_primary_key(
    raw: Dict[str, Any], fields: List[FieldInfo]
) -> Optional[PrimaryKeyInfo]:
    pk = raw.get("primaryKey")
    if isinstance(pk, dict):
        return PrimaryKeyInfo(fields=_get_str_list(pk, "fields"), name=_get_str(pk, "name"))
    for f in fields:
        if f.is_id:
            return PrimaryKeyInfo(fields=[f.name])
    return None


def _decode_unique_fields(raw: Dict[str, Any]) -> FrozenSet[Tuple[str, ...]]:
    groups = raw.get("uniqueFields")
    if not isinstance(groups, list):
        return frozenset()
    return frozenset(
        tuple(item for item in group if isinstance(item, str))
        for group in groups
        if isinstance(group, list)
    )


def _decode_model(raw: Dict[str, Any]) -> Optional[ModelInfo]:
    name = _get_str(raw, "name")
    if not name:
        logger.debug("Dropping DMMF model without name.")
        return None

    fields: List[FieldInfo] = []
    for raw_field in _get_dicts(raw, "fields"):
        decoded = _decode_field(raw_field)
        if decoded is not None:
            fields.append(decoded)

    return ModelInfo(
        name=name,
        db_name=_get_str(raw, "dbName"),
        fields=fields,
        primary_key=_decode_primary_key(raw, fields),
        unique_fields=_decode_unique_fields(raw),
    )


def _decode_enum(raw: Dict[str, Any]) -> Optional[EnumInfo]:
    name = _get_str(raw, "name")
    if not name:
        logger.debug("Dropping DMMF enum without name.")
        return None

    values: List[EnumValueInfo] = []
    for raw_value in _get_dicts(raw, "values"):
        value_name = _get_str(raw_value, "name")
        if not value_name:
            continue
        values.append(EnumValueInfo(name=value_name, db_name=_get_str(raw_value, "dbName")))
    return EnumInfo(name=name, values=values)


def import_document(document: Dict[str, Any]) -> ParsedSchema:
    """
    Decode a DMMF document (``{"datamodel": {"enums": [...], "models": [...]}}``)
    into a ``ParsedSchema``.

    Raises:
        ValueError: If *document* is not a JSON object.
    """
    if not isinstance(document, dict):
        raise ValueError(
            f"DMMF document must be an object, got {type(document).__name__}."
        )

    datamodel = document.get("datamodel")
    if not isinstance(datamodel, dict):
        logger.debug("DMMF document has no datamodel object; treating as empty.")
        datamodel = {}

    enums: List[EnumInfo] = [
        e for e in (_decode_enum(raw) for raw in _get_dicts(datamodel, "enums")) if e
    ]
    models: List[ModelInfo] = [
        m for m in (_decode_model(raw) for raw in _get_dicts(datamodel, "models")) if m
    ]

    schema = ParsedSchema(models=models, enums=enums)
    logger.info("Imported DMMF document: %r", schema)
    return schema


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def _encode_kind(field_type: FieldType) -> str:
    if field_type.is_model:
        return _KIND_OBJECT
    if field_type.is_enum:
        return _KIND_ENUM
    return _KIND_SCALAR


def _encode_field(f: FieldInfo) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "name": f.name,
        "kind": _encode_kind(f.field_type),
        "type": f.field_type.name,
        "isRequired": f.is_required or f.is_list,
        "isList": f.is_list,
        "isId": f.is_id,
        "isUnique": f.is_unique,
        "isUpdatedAt": f.is_updated_at,
        "hasDefaultValue": f.default_value is not None,
    }
    if f.default_value is not None:
        out["default"] = _encode_default(f.default_value, _quotes_strings(f.field_type))
    if f.relation is not None:
        out["relationName"] = f.relation.name
        out["relationFromFields"] = list(f.relation.fields)
        out["relationToFields"] = list(f.relation.references)
        if f.relation.on_delete is not None:
            out["relationOnDelete"] = f.relation.on_delete
        if f.relation.on_update is not None:
            out["relationOnUpdate"] = f.relation.on_update
    return out


def _encode_primary_key(model: ModelInfo) -> Optional[Dict[str, Any]]:
    pk = model.primary_key
    if pk is None:
        return None
    first_id: Optional[str] = next((f.name for f in model.fields if f.is_id), None)
    if pk.name is None and pk.fields == [first_id]:
        # Implied by the @id flag, as Prisma emits it.
        return None
    return {"name": pk.name, "fields": list(pk.fields)}


def export_document(schema: ParsedSchema) -> Dict[str, Any]:
    """Encode *schema* as a DMMF document."""
    return {
        "datamodel": {
            "enums": [
                {
                    "name": e.name,
                    "values": [{"name": v.name, "dbName": v.db_name} for v in e.values],
                    "dbName": None,
                }
                for e in schema.enums
            ],
            "models": [
                {
                    "name": m.name,
                    "dbName": m.db_name,
                    "fields": [_encode_field(f) for f in m.fields],
                    "primaryKey": _encode_primary_key(m),
                    "uniqueFields": sorted(list(group) for group in m.unique_fields),
                    "uniqueIndexes": [],
                }
                for m in schema.models
            ],
            "types": [],
        }
    }


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


def load_document(path: Path) -> Dict[str, Any]:
    """
    Load a DMMF document from a ``.json`` (or ``.yaml`` / ``.yml``) file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the content cannot be decoded into an object.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"DMMF document not found: {path}")

    try:
        raw_text: str = read_file(path)
    except UnicodeDecodeError as exc:
        raise ValueError(f"DMMF document is not valid UTF-8: {path}: {exc}") from exc

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(raw_text)
        else:
            data = json.loads(raw_text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"Failed to decode DMMF document {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(
            f"DMMF document root must be an object, got {type(data).__name__}."
        )

    logger.info("Loaded DMMF document from %s", path)
    return data


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "canonical_default",
    "render_default",
    "import_document",
    "export_document",
    "load_document",
]

logger.debug("pothosgen.dmmf loaded — %d public symbols.", len(__all__))
