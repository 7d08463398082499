# File: pothosgen/models.py
"""
pothosgen - Core Data Models
============================
Pydantic V2 models for the parsed data model and the generator settings.
These models are the single contract between the pipeline phases:
Ingestion (textual schema or DMMF document) → Validation → Emission → Export.

Every schema entity is frozen once built.  Both ingestion paths
(``pothosgen.parser`` and ``pothosgen.dmmf``) produce exactly these shapes.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.models")

# ---------------------------------------------------------------------------
# Enums — fixed sets used across the entire project
# ---------------------------------------------------------------------------


class ScalarType(str, Enum):
    """Scalar types of the schema language."""

    STRING = "String"
    INT = "Int"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"
    JSON = "Json"
    DECIMAL = "Decimal"
    BIGINT = "BigInt"
    BYTES = "Bytes"


class FieldKind(str, Enum):
    """Which branch of the closed field-type variant a type belongs to."""

    SCALAR = "scalar"
    ENUM = "enum"
    MODEL = "model"


SCALAR_NAMES: FrozenSet[str] = frozenset(s.value for s in ScalarType)

# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Field type variant
# ---------------------------------------------------------------------------


class FieldType(BaseModel):
    """
    Closed variant: one of the nine scalars, ``Enum(name)`` or ``Model(name)``.

    For scalars ``name`` is the scalar keyword (``"Int"``, ``"Json"`` ...).
    """

    model_config = _FROZEN_CONFIG

    kind: FieldKind = Field(..., description="Variant branch.")
    name: str = Field(..., min_length=1, description="Scalar, enum or model name.")

    @classmethod
    def scalar(cls, scalar_type: ScalarType) -> "FieldType":
        return cls(kind=FieldKind.SCALAR, name=scalar_type.value)

    @classmethod
    def enum(cls, name: str) -> "FieldType":
        return cls(kind=FieldKind.ENUM, name=name)

    @classmethod
    def model(cls, name: str) -> "FieldType":
        return cls(kind=FieldKind.MODEL, name=name)

    @model_validator(mode="after")
    def _validate_scalar_name(self) -> "FieldType":
        if self.kind == FieldKind.SCALAR and self.name not in SCALAR_NAMES:
            raise ValueError(
                f"'{self.name}' is not a scalar type. "
                f"Expected one of: {sorted(SCALAR_NAMES)}"
            )
        return self

    @property
    def is_scalar(self) -> bool:
        """True for everything except model references (enums count as scalar)."""
        return self.kind != FieldKind.MODEL

    @property
    def is_enum(self) -> bool:
        return self.kind == FieldKind.ENUM

    @property
    def is_model(self) -> bool:
        return self.kind == FieldKind.MODEL

    def __repr__(self) -> str:
        if self.kind == FieldKind.SCALAR:
            return f"<FieldType {self.name}>"
        return f"<FieldType {self.kind.value.capitalize()}({self.name})>"


# ---------------------------------------------------------------------------
# Schema primitives
# ---------------------------------------------------------------------------


class EnumValueInfo(BaseModel):
    """A single enum member."""

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Value name.")
    db_name: Optional[str] = Field(
        default=None, description="Storage alias (@map)."
    )


class EnumInfo(BaseModel):
    """An enum declaration.  Value order is preserved in emitted output."""

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Enum name.")
    values: List[EnumValueInfo] = Field(
        default_factory=list, description="Members in declaration order."
    )

    @property
    def value_names(self) -> List[str]:
        return [v.name for v in self.values]

    def __repr__(self) -> str:
        return f"<Enum {self.name} ({len(self.values)} values)>"


class RelationInfo(BaseModel):
    """
    Relation metadata carried by a model-typed field.

    ``fields`` is empty on the non-owning (back-reference) side.
    """

    model_config = _FROZEN_CONFIG

    name: Optional[str] = Field(
        default=None, description="Relation name disambiguating parallel relations."
    )
    fields: List[str] = Field(
        default_factory=list, description="Owning local field names."
    )
    references: List[str] = Field(
        default_factory=list, description="Referenced field names on the target."
    )
    related_model: str = Field(..., min_length=1, description="Target model name.")
    on_delete: Optional[str] = Field(default=None, description="onDelete action.")
    on_update: Optional[str] = Field(default=None, description="onUpdate action.")

    @property
    def is_owning_side(self) -> bool:
        return bool(self.fields)

    def __repr__(self) -> str:
        side: str = "owning" if self.is_owning_side else "back"
        return f"<Relation {self.name or '-'} → {self.related_model} ({side})>"


class PrimaryKeyInfo(BaseModel):
    """Single- or multi-field primary key."""

    model_config = _FROZEN_CONFIG

    fields: List[str] = Field(default_factory=list, description="Key field names.")
    name: Optional[str] = Field(default=None, description="Constraint name.")

    @property
    def is_composite(self) -> bool:
        return len(self.fields) > 1


class FieldInfo(BaseModel):
    """
    Complete description of a single model field.

    Every declaration line the parser accepts (or every field entry of a
    DMMF document) becomes exactly one ``FieldInfo``.
    """

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Field name.")
    field_type: FieldType = Field(..., description="Scalar, enum or model type.")
    is_required: bool = Field(default=True, description="Not optional and not a list.")
    is_list: bool = Field(default=False, description="List cardinality.")
    is_id: bool = Field(default=False, description="Marked @id.")
    is_unique: bool = Field(default=False, description="Marked @unique.")
    is_updated_at: bool = Field(default=False, description="Marked @updatedAt.")
    default_value: Optional[str] = Field(
        default=None, description="Raw @default(...) literal text."
    )
    relation: Optional[RelationInfo] = Field(
        default=None, description="Present iff field_type is a model."
    )

    @model_validator(mode="after")
    def _validate_relation_matches_type(self) -> "FieldInfo":
        if self.field_type.is_model and self.relation is None:
            raise ValueError(
                f"Field '{self.name}' references model '{self.field_type.name}' "
                f"but carries no relation."
            )
        if not self.field_type.is_model and self.relation is not None:
            raise ValueError(
                f"Field '{self.name}' of type '{self.field_type.name}' "
                f"must not carry a relation."
            )
        return self

    def __repr__(self) -> str:
        suffix: str = "[]" if self.is_list else ("" if self.is_required else "?")
        flags: str = "".join(
            flag
            for flag, on in ((" @id", self.is_id), (" @unique", self.is_unique))
            if on
        )
        return f"<Field {self.name} {self.field_type.name}{suffix}{flags}>"


class ModelInfo(BaseModel):
    """
    A model declaration.

    This is the central entity consumed by the emitters.  One ``ModelInfo``
    drives the object type, the input types and the CRUD resolvers.
    """

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Model name.")
    db_name: Optional[str] = Field(default=None, description="Storage alias (@@map).")
    fields: List[FieldInfo] = Field(
        default_factory=list, description="Fields in declaration order."
    )
    primary_key: Optional[PrimaryKeyInfo] = Field(
        default=None, description="Primary key, never inferred."
    )
    unique_fields: FrozenSet[Tuple[str, ...]] = Field(
        default_factory=frozenset, description="Unique field groups."
    )

    @property
    def scalar_fields(self) -> List[FieldInfo]:
        return [f for f in self.fields if f.relation is None]

    @property
    def relation_fields(self) -> List[FieldInfo]:
        return [f for f in self.fields if f.relation is not None]

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldInfo]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def __repr__(self) -> str:
        return (
            f"<Model {self.name} "
            f"({len(self.fields)} fields, {len(self.relation_fields)} relations)>"
        )


class ParsedSchema(BaseModel):
    """
    The root model: every model and enum of one ingested schema.

    Sole output of ingestion and sole input of emission.
    """

    model_config = _FROZEN_CONFIG

    models: List[ModelInfo] = Field(default_factory=list, description="Models.")
    enums: List[EnumInfo] = Field(default_factory=list, description="Enums.")

    def get_model(self, name: str) -> Optional[ModelInfo]:
        for m in self.models:
            if m.name == name:
                return m
        return None

    def get_enum(self, name: str) -> Optional[EnumInfo]:
        for e in self.enums:
            if e.name == name:
                return e
        return None

    @property
    def model_names(self) -> List[str]:
        return [m.name for m in self.models]

    @property
    def enum_names(self) -> List[str]:
        return [e.name for e in self.enums]

    def __repr__(self) -> str:
        return f"<ParsedSchema {len(self.models)} models, {len(self.enums)} enums>"


# ---------------------------------------------------------------------------
# Generator configuration (.gpothosrc.json)
# ---------------------------------------------------------------------------


class GeneratorConfig(BaseModel):
    """
    Settings read from ``.gpothosrc.json``.

    Keys are camelCase in the file; snake_case names are accepted too.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    auto_scan: bool = Field(
        default=True,
        alias="autoScan",
        description="Scan directories for hand-written resolvers.",
    )
    scan_dirs: List[str] = Field(
        default_factory=list,
        alias="scanDirs",
        description="Directories to scan (relative to the project root).",
    )
    verbose: bool = Field(default=False, description="Verbose diagnostics.")


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ScalarType",
    "FieldKind",
    "SCALAR_NAMES",
    "FieldType",
    "EnumValueInfo",
    "EnumInfo",
    "RelationInfo",
    "PrimaryKeyInfo",
    "FieldInfo",
    "ModelInfo",
    "ParsedSchema",
    "GeneratorConfig",
]

logger.debug("pothosgen.models loaded — %d public symbols.", len(__all__))
