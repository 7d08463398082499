# File: pothosgen/validators.py
"""
pothosgen - Schema Validators
=============================
A **pure-function validation pipeline** over the models defined in
``pothosgen.models``.

Pydantic handles per-entity structural correctness.  This module adds
cross-entity semantic checks: name clashes, relation target resolution,
relation field consistency, and models whose generated inputs would be
empty.

Validation is soft: the generator only refuses to emit when strict mode is
requested and the result carries errors.

Usage by downstream modules:
    from pothosgen.validators import validate_schema
    result = validate_schema(schema)
    if not result.is_valid:
        print(result.format_report())
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Set

from pothosgen.models import ParsedSchema

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight diagnostic descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationError`` instances produced by the pipeline."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def is_valid(self) -> bool:
        return not any(e.is_error for e in self._items)

    def summary(self) -> str:
        return (
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            prefix: str = {"error": "❌", "warning": "⚠️"}.get(item.level, "•")
            lines.append(f"  {prefix} [{item.code}] {item.message}")
            for k, v in item.context.items():
                lines.append(f"       {k}: {v}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Individual validation functions
# ---------------------------------------------------------------------------


def validate_names(schema: ParsedSchema) -> ValidationResult:
    """
    Duplicate model, enum and field names.

    Complexity: O(M + E + F).
    """
    result = ValidationResult()
    seen_models: Set[str] = set()
    seen_enums: Set[str] = set()

    for model in schema.models:
        if model.name in seen_models:
            result.add_error(
                "DUPLICATE_MODEL_NAME",
                f"Model '{model.name}' is defined more than once.",
                {"model": model.name},
            )
        seen_models.add(model.name)

        seen_fields: Set[str] = set()
        for f in model.fields:
            if f.name in seen_fields:
                result.add_error(
                    "DUPLICATE_FIELD_NAME",
                    f"Field '{f.name}' is defined more than once on '{model.name}'.",
                    {"model": model.name, "field": f.name},
                )
            seen_fields.add(f.name)

    for enum in schema.enums:
        if enum.name in seen_enums:
            result.add_error(
                "DUPLICATE_ENUM_NAME",
                f"Enum '{enum.name}' is defined more than once.",
                {"enum": enum.name},
            )
        seen_enums.add(enum.name)

    for name in sorted(seen_models & seen_enums):
        result.add_error(
            "MODEL_ENUM_NAME_CLASH",
            f"'{name}' is declared both as a model and as an enum.",
            {"name": name},
        )

    return result


def validate_relations(schema: ParsedSchema) -> ValidationResult:
    """
    Relation targets exist; owning-side fields are declared and line up
    with their references.

    Complexity: O(R) where R = total relation fields.
    """
    result = ValidationResult()
    model_names: Set[str] = set(schema.model_names)

    for model in schema.models:
        declared: Set[str] = set(model.field_names)
        for f in model.relation_fields:
            relation = f.relation
            assert relation is not None
            ctx: Dict[str, Any] = {"model": model.name, "field": f.name}

            if relation.related_model not in model_names:
                result.add_error(
                    "RELATION_TARGET_UNKNOWN",
                    f"'{model.name}.{f.name}' references unknown model "
                    f"'{relation.related_model}'.",
                    ctx,
                )

            for local in relation.fields:
                if local not in declared:
                    result.add_warning(
                        "RELATION_FIELD_UNDECLARED",
                        f"Relation '{model.name}.{f.name}' uses field '{local}' "
                        f"which is not declared on '{model.name}'.",
                        ctx,
                    )

            if len(relation.fields) != len(relation.references):
                result.add_warning(
                    "RELATION_ARITY_MISMATCH",
                    f"Relation '{model.name}.{f.name}' has {len(relation.fields)} "
                    f"field(s) but {len(relation.references)} reference(s).",
                    ctx,
                )

    return result


def validate_enum_references(schema: ParsedSchema) -> ValidationResult:
    """Enum-typed fields point at a declared enum."""
    result = ValidationResult()
    enum_names: Set[str] = set(schema.enum_names)

    for model in schema.models:
        for f in model.scalar_fields:
            if f.field_type.is_enum and f.field_type.name not in enum_names:
                result.add_error(
                    "ENUM_TARGET_UNKNOWN",
                    f"'{model.name}.{f.name}' references unknown enum "
                    f"'{f.field_type.name}'.",
                    {"model": model.name, "field": f.name},
                )
    return result


def validate_models(schema: ParsedSchema) -> ValidationResult:
    """Models without fields, or without any id / unique field."""
    result = ValidationResult()

    for model in schema.models:
        ctx: Dict[str, Any] = {"model": model.name}
        if not model.fields:
            result.add_warning(
                "MODEL_WITHOUT_FIELDS",
                f"Model '{model.name}' declares no fields.",
                ctx,
            )
            continue

        has_unique: bool = any(f.is_id or f.is_unique for f in model.scalar_fields)
        if model.primary_key is None and not has_unique:
            result.add_warning(
                "MODEL_WITHOUT_UNIQUE",
                f"Model '{model.name}' has no primary key or unique field; "
                f"its WhereUniqueInput will be empty.",
                ctx,
            )

    return result


def validate_enums(schema: ParsedSchema) -> ValidationResult:
    """Enums without values."""
    result = ValidationResult()
    for enum in schema.enums:
        if not enum.values:
            result.add_warning(
                "ENUM_WITHOUT_VALUES",
                f"Enum '{enum.name}' declares no values.",
                {"enum": enum.name},
            )
    return result


def validate_schema(schema: ParsedSchema) -> ValidationResult:
    """
    Run all schema validators.  Returns a merged ``ValidationResult``.

    Complexity: linear in total schema entities.
    """
    result = ValidationResult()

    validators: List[Callable[[ParsedSchema], ValidationResult]] = [
        validate_names,
        validate_relations,
        validate_enum_references,
        validate_models,
        validate_enums,
    ]

    for validator_fn in validators:
        logger.debug("Running validator: %s", validator_fn.__name__)
        result.merge(validator_fn(schema))

    if result.is_valid:
        logger.info("Validation PASSED. %s", result.summary())
    else:
        logger.warning("Validation found errors. %s", result.summary())
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_names",
    "validate_relations",
    "validate_enum_references",
    "validate_models",
    "validate_enums",
    "validate_schema",
]

logger.debug("pothosgen.validators loaded — %d public symbols.", len(__all__))
