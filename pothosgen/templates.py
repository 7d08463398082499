# File: pothosgen/templates.py
"""
pothosgen - Code Template Engine
================================
Pure-Python code generation engine.

This module turns a ``ParsedSchema`` (plus the ``DerivedNames`` of each model)
into TypeScript source strings for a Pothos GraphQL layer on top of the
Prisma client:
    1. ``builder.ts``         — SchemaBuilder, scalars, root types
    2. ``enums/index.ts``     — base enums and every schema enum
    3. ``inputs/filters.ts``  — scalar filter inputs
    4. ``models/<M>.ts``      — ``builder.prismaObject`` per model
    5. ``inputs/<M>*.ts``     — create / update / where / order-by inputs
    6. ``inputs/relations.ts``— nested relation inputs
    7. ``resolvers/*.ts``     — CRUD query and mutation fields
    8. ``index.ts``           — re-exports and ``builder.toSchema()``

**Performance contract:**
    - All string assembly uses ``List[str]`` + ``"\\n".join()`` pattern.
    - Template methods read only the schema given at construction.

**Naming contract:**
    - Every query, mutation and input-type name comes from
      ``pothosgen.naming.derive_names``; Prisma client calls use the
      ``query_new2`` accessor.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set, Tuple

from pothosgen.models import FieldInfo, FieldType, ModelInfo, ParsedSchema
from pothosgen.naming import DerivedNames, derive_names
from pothosgen.scanner import ManualResolvers
from pothosgen.utils import build_ts_import, count_lines

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_HEADER: str = "// Auto-generated by pothosgen. DO NOT EDIT MANUALLY."

# Scalars with a dedicated ``t.expose<X>`` helper on object types
_EXPOSE_HELPERS: Dict[str, str] = {
    "String": "String",
    "Int": "Int",
    "Float": "Float",
    "Boolean": "Boolean",
}

# Scalars emitted through a custom scalar type on object types
_CUSTOM_SCALAR_OUTPUT: Dict[str, str] = {
    "DateTime": '"DateTime"',
    "Json": '"JSON"',
}

# Scalars serialised to strings: scalar → conversion call
_STRING_CONVERSIONS: Dict[str, str] = {
    "Decimal": "toString()",
    "BigInt": "toString()",
    "Bytes": "toString('base64')",
}

# Input builder method per scalar: (single method, list method or None)
_INPUT_METHODS: Dict[str, Tuple[str, Optional[str]]] = {
    "String": ("string", "stringList"),
    "Int": ("int", "intList"),
    "Float": ("float", None),
    "Boolean": ("boolean", "booleanList"),
    "Decimal": ("float", None),
    "BigInt": ("string", "stringList"),
    "Bytes": ("string", "stringList"),
}

# Input scalars without a builder shortcut: scalar → GraphQL type name
_INPUT_TYPE_REFS: Dict[str, str] = {
    "Float": '"Float"',
    "Decimal": '"Float"',
    "DateTime": '"DateTime"',
    "Json": '"JSON"',
}

_FILTER_TYPES: Dict[str, str] = {
    "String": "StringFilter",
    "Int": "IntFilter",
    "Float": "FloatFilter",
    "Boolean": "BoolFilter",
    "DateTime": "DateTimeFilter",
    "Decimal": "FloatFilter",
    "BigInt": "StringFilter",
    "Bytes": "StringFilter",
}

# Fields a create input never carries
_AUTO_MANAGED_FIELD_NAMES: Set[str] = {"created_at", "updated_at"}

_BASE_ENUMS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("SortOrder", ("asc", "desc")),
    ("NullsOrder", ("first", "last")),
    ("QueryMode", ("default", "insensitive")),
)

# (filter name, fields) — each also gets a ``Nested<name>`` variant for ``not``
_FILTER_SPECS: Tuple[Tuple[str, Tuple[Tuple[str, str], ...]], ...] = (
    (
        "StringFilter",
        (
            ("equals", "t.string()"),
            ("in", "t.stringList()"),
            ("notIn", "t.stringList()"),
            ("lt", "t.string()"),
            ("lte", "t.string()"),
            ("gt", "t.string()"),
            ("gte", "t.string()"),
            ("contains", "t.string()"),
            ("startsWith", "t.string()"),
            ("endsWith", "t.string()"),
            ("mode", "t.field({ type: QueryMode })"),
        ),
    ),
    (
        "IntFilter",
        (
            ("equals", "t.int()"),
            ("in", "t.intList()"),
            ("notIn", "t.intList()"),
            ("lt", "t.int()"),
            ("lte", "t.int()"),
            ("gt", "t.int()"),
            ("gte", "t.int()"),
        ),
    ),
    (
        "FloatFilter",
        (
            ("equals", "t.float()"),
            ("in", 't.field({ type: ["Float"] })'),
            ("notIn", 't.field({ type: ["Float"] })'),
            ("lt", "t.float()"),
            ("lte", "t.float()"),
            ("gt", "t.float()"),
            ("gte", "t.float()"),
        ),
    ),
    (
        "BoolFilter",
        (("equals", "t.boolean()"),),
    ),
    (
        "DateTimeFilter",
        (
            ("equals", 't.field({ type: "DateTime" })'),
            ("in", 't.field({ type: ["DateTime"] })'),
            ("notIn", 't.field({ type: ["DateTime"] })'),
            ("lt", 't.field({ type: "DateTime" })'),
            ("lte", 't.field({ type: "DateTime" })'),
            ("gt", 't.field({ type: "DateTime" })'),
            ("gte", 't.field({ type: "DateTime" })'),
        ),
    ),
)

# Resolver kinds: (file prefix, operation type)
RESOLVER_KINDS: Tuple[Tuple[str, str], ...] = (
    ("createOne", "mutation"),
    ("createMany", "mutation"),
    ("findMany", "query"),
    ("findUnique", "query"),
    ("aggregate", "query"),
    ("updateOne", "mutation"),
)


# ---------------------------------------------------------------------------
# Field-level helpers
# ---------------------------------------------------------------------------


def _ts_bool(value: bool) -> str:
    return "true" if value else "false"


def _wrap_list(type_ref: str, is_list: bool) -> str:
    return f"[{type_ref}]" if is_list else type_ref


def build_object_field(field: FieldInfo) -> str:
    """
    Build one scalar entry of a ``builder.prismaObject`` ``fields`` block.

    Examples:
        >>> from pothosgen.models import ScalarType
        >>> f = FieldInfo(name="title", field_type=FieldType.scalar(ScalarType.STRING))
        >>> build_object_field(f)
        'title: t.exposeString("title", { nullable: false })'
    """
    ft: FieldType = field.field_type
    name: str = field.name
    nullable: str = _ts_bool(not field.is_required)

    if ft.is_enum:
        return (
            f"{name}: t.field({{ type: {_wrap_list(ft.name, field.is_list)}, "
            f"resolve: (parent) => parent.{name}, nullable: {nullable} }})"
        )

    helper: Optional[str] = _EXPOSE_HELPERS.get(ft.name)
    if helper is not None:
        suffix: str = "List" if field.is_list else ""
        return f'{name}: t.expose{helper}{suffix}("{name}", {{ nullable: {nullable} }})'

    custom: Optional[str] = _CUSTOM_SCALAR_OUTPUT.get(ft.name)
    if custom is not None:
        return (
            f'{name}: t.field({{ type: {_wrap_list(custom, field.is_list)}, '
            f"resolve: (parent) => parent.{name}, nullable: {nullable} }})"
        )

    conversion: str = _STRING_CONVERSIONS.get(ft.name, "toString()")
    if field.is_list:
        resolve: str = f"parent.{name}?.map((v) => v.{conversion})"
    else:
        resolve = f"parent.{name}?.{conversion}"
    string_ref: str = _wrap_list('"String"', field.is_list)
    return (
        f"{name}: t.field({{ type: {string_ref}, "
        f"resolve: (parent) => {resolve}, nullable: {nullable} }})"
    )


def build_input_field(field: FieldInfo, required: bool) -> str:
    """
    Build one entry of a ``builder.inputType`` ``fields`` block.

    Examples:
        >>> from pothosgen.models import ScalarType
        >>> f = FieldInfo(name="age", field_type=FieldType.scalar(ScalarType.INT))
        >>> build_input_field(f, required=True)
        'age: t.int({ required: true })'
        >>> build_input_field(f, required=False)
        'age: t.int()'
    """
    ft: FieldType = field.field_type
    name: str = field.name
    options: str = "{ required: true }" if required else ""
    type_suffix: str = ", required: true" if required else ""

    if ft.is_enum:
        return f"{name}: t.field({{ type: {_wrap_list(ft.name, field.is_list)}{type_suffix} }})"

    methods: Optional[Tuple[str, Optional[str]]] = _INPUT_METHODS.get(ft.name)
    if methods is not None:
        single, many = methods
        if not field.is_list:
            return f"{name}: t.{single}({options})"
        if many is not None:
            return f"{name}: t.{many}({options})"

    type_ref: str = _INPUT_TYPE_REFS.get(ft.name, '"String"')
    return f"{name}: t.field({{ type: {_wrap_list(type_ref, field.is_list)}{type_suffix} }})"


def filter_type_for(field_type: FieldType) -> str:
    """Filter input used for a scalar field in a ``WhereInput``."""
    if field_type.is_enum:
        return "StringFilter"
    if field_type.name == "Json":
        return '"JSON"'
    return _FILTER_TYPES.get(field_type.name, "StringFilter")


def is_create_input_field(field: FieldInfo) -> bool:
    """True if *field* belongs in a model's create inputs."""
    return (
        field.relation is None
        and not field.is_updated_at
        and field.name not in _AUTO_MANAGED_FIELD_NAMES
    )


def is_create_required(field: FieldInfo) -> bool:
    """Required in create inputs: required, not an id, no default."""
    return field.is_required and not field.is_id and field.default_value is None


def _enum_names(fields: List[FieldInfo]) -> List[str]:
    return sorted({f.field_type.name for f in fields if f.field_type.is_enum})


# ---------------------------------------------------------------------------
# Template Generator
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Code-generation engine for one ``ParsedSchema``.

    Each ``generate_*`` method returns a complete file content string;
    ``generate_all`` returns every file keyed by its path relative to the
    output directory.
    """

    def __init__(self, schema: ParsedSchema) -> None:
        self._schema: ParsedSchema = schema
        self._model_names: Set[str] = set(schema.model_names)
        logger.debug(
            "TemplateGenerator initialised (%d models, %d enums).",
            len(schema.models),
            len(schema.enums),
        )

    # ===================================================================
    # Relation helpers
    # ===================================================================

    def _emittable_relations(self, model: ModelInfo) -> List[FieldInfo]:
        """Relation fields whose target model exists in the schema."""
        result: List[FieldInfo] = []
        for f in model.relation_fields:
            if f.field_type.name in self._model_names:
                result.append(f)
            else:
                logger.warning(
                    "Relation '%s.%s' targets unknown model '%s'; not emitted.",
                    model.name,
                    f.name,
                    f.field_type.name,
                )
        return result

    def relation_input_types(self) -> List[Tuple[str, str, bool]]:
        """
        Distinct nested relation inputs: ``(input name, related model, is_list)``.

        One ``<M><R>RelationInput`` or ``<M><R>ListRelationInput`` per
        model/target/cardinality, in declaration order.
        """
        seen: Set[str] = set()
        result: List[Tuple[str, str, bool]] = []
        for model in self._schema.models:
            for f in model.relation_fields:
                related: str = f.field_type.name
                if related not in self._model_names:
                    continue
                suffix: str = "ListRelationInput" if f.is_list else "RelationInput"
                input_name: str = f"{model.name}{related}{suffix}"
                if input_name in seen:
                    continue
                seen.add(input_name)
                result.append((input_name, related, f.is_list))
        return result

    # ===================================================================
    # 1. Builder
    # ===================================================================

    def generate_builder(self) -> str:
        """Generate ``builder.ts``."""
        lines: List[str] = [
            'import SchemaBuilder from "@pothos/core";',
            'import PrismaPlugin from "@pothos/plugin-prisma";',
            'import SimpleObjectsPlugin from "@pothos/plugin-simple-objects";',
            'import type PrismaTypes from "@pothos/plugin-prisma/generated";',
            'import { PrismaClient } from "@prisma/client";',
            "",
            _HEADER,
            "",
            "export const prisma = new PrismaClient();",
            "",
            "export interface Context {",
            "  prisma: PrismaClient;",
            "}",
            "",
            "export const builder = new SchemaBuilder<{",
            "  PrismaTypes: PrismaTypes;",
            "  Context: Context;",
            "  Scalars: {",
            "    DateTime: { Input: Date; Output: Date };",
            "    JSON: { Input: unknown; Output: unknown };",
            "  };",
            "}>({",
            "  plugins: [PrismaPlugin, SimpleObjectsPlugin],",
            "  prisma: {",
            "    client: prisma,",
            "    exposeDescriptions: true,",
            "    filterConnectionTotalCount: true,",
            "  },",
            "});",
            "",
            'builder.scalarType("DateTime", {',
            "  serialize: (value) => value.toISOString(),",
            "  parseValue: (value) => new Date(value as string),",
            "});",
            "",
            'builder.scalarType("JSON", {',
            "  serialize: (value) => value,",
            "  parseValue: (value) => value,",
            "});",
            "",
            "builder.queryType({});",
            "builder.mutationType({});",
            "",
            'export const AffectedRowsOutput = builder.simpleObject("AffectedRowsOutput", {',
            "  fields: (t) => ({",
            "    count: t.int(),",
            "  }),",
            "});",
            "",
        ]
        return "\n".join(lines)

    # ===================================================================
    # 2. Enums
    # ===================================================================

    def generate_enums(self) -> str:
        """Generate ``enums/index.ts``: base enums, then schema enums in order."""
        lines: List[str] = ['import { builder } from "../builder";', ""]
        entries: List[Tuple[str, List[str]]] = [
            (name, list(values)) for name, values in _BASE_ENUMS
        ]
        entries.extend((e.name, e.value_names) for e in self._schema.enums)

        for name, values in entries:
            quoted: str = ", ".join(f'"{v}"' for v in values)
            lines.append(f'export const {name} = builder.enumType("{name}", {{')
            lines.append(f"  values: [{quoted}] as const,")
            lines.append("});")
            lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # 3. Filters
    # ===================================================================

    def generate_filters(self) -> str:
        """Generate ``inputs/filters.ts`` with every filter and its nested variant."""
        lines: List[str] = [
            'import { builder } from "../builder";',
            'import { QueryMode } from "../enums";',
            "",
        ]
        for filter_name, fields in _FILTER_SPECS:
            nested: str = f"Nested{filter_name}"
            for input_name in (nested, filter_name):
                lines.append(
                    f'export const {input_name}: any = builder.inputType("{input_name}", {{'
                )
                lines.append("  fields: (t) => ({")
                for field_name, expr in fields:
                    lines.append(f"    {field_name}: {expr},")
                lines.append(f"    not: t.field({{ type: {nested} }}),")
                lines.append("  }),")
                lines.append("});")
                lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # 4. Object types
    # ===================================================================

    def generate_model(self, model: ModelInfo) -> str:
        """Generate ``models/<Model>.ts``: one ``builder.prismaObject``."""
        relations: List[FieldInfo] = self._emittable_relations(model)
        lines: List[str] = ['import { builder } from "../builder";']

        enum_names: List[str] = _enum_names(model.scalar_fields)
        if enum_names:
            lines.append(build_ts_import(enum_names, "../enums"))

        related_names: List[str] = sorted({f.field_type.name for f in relations})
        for related in related_names:
            rn: DerivedNames = derive_names(related)
            lines.append(build_ts_import([rn.where_input], f"../inputs/{rn.where_input}"))
            lines.append(
                build_ts_import([rn.order_by_input], f"../inputs/{rn.order_by_input}")
            )
        lines.append("")

        lines.append(f'export const {model.name} = builder.prismaObject("{model.name}", {{')
        lines.append("  fields: (t) => ({")

        for f in model.scalar_fields:
            lines.append(f"    {build_object_field(f)},")

        for f in relations:
            rn = derive_names(f.field_type.name)
            lines.append(f'    {f.name}: t.relation("{f.name}", {{')
            if not f.is_list and not f.is_required:
                lines.append("      nullable: true,")
            lines.append("      args: {")
            lines.append(f"        where: t.arg({{ type: {rn.where_input} }}),")
            if f.is_list:
                lines.append(f"        orderBy: t.arg({{ type: [{rn.order_by_input}] }}),")
                lines.append("        first: t.arg.int(),")
                lines.append("        last: t.arg.int(),")
            lines.append("      },")
            lines.append("      query: (args) => ({")
            lines.append("        where: args.where ?? undefined,")
            if f.is_list:
                lines.append("        orderBy: args.orderBy ?? undefined,")
                lines.append("        take: args.first ?? undefined,")
                lines.append("        skip: args.last ? -args.last : undefined,")
            lines.append("      }),")
            lines.append("    }),")

        lines.append("  }),")
        lines.append("});")
        lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # 5. Input types
    # ===================================================================

    def _input_type(
        self,
        input_name: str,
        entries: List[str],
        imports: List[str],
    ) -> str:
        lines: List[str] = ['import { builder } from "../builder";']
        lines.extend(imports)
        lines.append("")
        lines.append(f'export const {input_name}: any = builder.inputType("{input_name}", {{')
        lines.append("  fields: (t) => ({")
        for entry in entries:
            lines.append(f"    {entry},")
        lines.append("  }),")
        lines.append("});")
        lines.append("")
        return "\n".join(lines)

    def _enum_import(self, fields: List[FieldInfo]) -> List[str]:
        names: List[str] = _enum_names(fields)
        return [build_ts_import(names, "../enums")] if names else []

    def generate_create_input(self, model: ModelInfo, many: bool = False) -> str:
        """
        Generate ``<M>CreateInput`` (or ``<M>CreateManyInput`` when *many*).

        Relation fields, ``@updatedAt`` fields and ``created_at`` /
        ``updated_at`` are left out; a field is required only when it is
        required, not an id and has no default.
        """
        names: DerivedNames = derive_names(model.name)
        input_name: str = names.create_many_input if many else names.create_input
        fields: List[FieldInfo] = [f for f in model.fields if is_create_input_field(f)]
        entries: List[str] = [build_input_field(f, is_create_required(f)) for f in fields]
        return self._input_type(input_name, entries, self._enum_import(fields))

    def generate_update_input(self, model: ModelInfo) -> str:
        """Generate ``<M>UpdateInput``: every non-id scalar field, all optional."""
        names: DerivedNames = derive_names(model.name)
        fields: List[FieldInfo] = [f for f in model.scalar_fields if not f.is_id]
        entries: List[str] = [build_input_field(f, False) for f in fields]
        return self._input_type(names.update_input, entries, self._enum_import(fields))

    def generate_where_input(self, model: ModelInfo) -> str:
        """Generate ``<M>WhereInput``: AND / OR / NOT plus one filter per scalar."""
        names: DerivedNames = derive_names(model.name)
        entries: List[str] = [
            f"{op}: t.field({{ type: [{names.where_input}] }})"
            for op in ("AND", "OR", "NOT")
        ]
        filters: Set[str] = set()
        for f in model.scalar_fields:
            filter_type: str = filter_type_for(f.field_type)
            if not filter_type.startswith('"'):
                filters.add(filter_type)
            entries.append(f"{f.name}: t.field({{ type: {filter_type} }})")

        imports: List[str] = [build_ts_import(sorted(filters), "./filters")] if filters else []
        return self._input_type(names.where_input, entries, imports)

    def generate_where_unique_input(self, model: ModelInfo) -> str:
        """Generate ``<M>WhereUniqueInput``: id and unique fields, required."""
        names: DerivedNames = derive_names(model.name)
        fields: List[FieldInfo] = [
            f for f in model.scalar_fields if f.is_id or f.is_unique
        ]
        entries: List[str] = [
            build_input_field(f.model_copy(update={"is_list": False}), True) for f in fields
        ]
        return self._input_type(
            names.where_unique_input, entries, self._enum_import(fields)
        )

    def generate_order_by_input(self, model: ModelInfo) -> str:
        """Generate ``<M>OrderByInput``: ``SortOrder`` per scalar field."""
        names: DerivedNames = derive_names(model.name)
        entries: List[str] = [
            f"{f.name}: t.field({{ type: SortOrder }})" for f in model.scalar_fields
        ]
        return self._input_type(
            names.order_by_input,
            entries,
            [build_ts_import(["SortOrder"], "../enums")],
        )

    def generate_inputs(self, model: ModelInfo) -> Dict[str, str]:
        """All input-type files of one model, keyed by relative path."""
        names: DerivedNames = derive_names(model.name)
        return {
            f"inputs/{names.create_input}.ts": self.generate_create_input(model),
            f"inputs/{names.create_many_input}.ts": self.generate_create_input(
                model, many=True
            ),
            f"inputs/{names.update_input}.ts": self.generate_update_input(model),
            f"inputs/{names.where_input}.ts": self.generate_where_input(model),
            f"inputs/{names.where_unique_input}.ts": self.generate_where_unique_input(
                model
            ),
            f"inputs/{names.order_by_input}.ts": self.generate_order_by_input(model),
        }

    # ===================================================================
    # 6. Relation inputs
    # ===================================================================

    def generate_relation_inputs(self) -> str:
        """
        Generate ``inputs/relations.ts``.

        For each related model a ``<R>WhereUniqueRelationInput`` (its id and
        unique fields, all optional) and a ``<R>RelationCreateInput`` (its
        create fields), then the connect / create / disconnect inputs.
        """
        relation_types: List[Tuple[str, str, bool]] = self.relation_input_types()
        related_models: List[str] = []
        for _, related, _ in relation_types:
            if related not in related_models:
                related_models.append(related)

        body: List[str] = []
        used_enums: Set[str] = set()

        for related in related_models:
            target: Optional[ModelInfo] = self._schema.get_model(related)
            if target is None:
                continue
            unique_fields: List[FieldInfo] = [
                f for f in target.scalar_fields if f.is_id or f.is_unique
            ]
            create_fields: List[FieldInfo] = [
                f for f in target.fields if is_create_input_field(f)
            ]
            used_enums.update(_enum_names(unique_fields + create_fields))

            for input_name, entries in (
                (
                    f"{related}WhereUniqueRelationInput",
                    [
                        build_input_field(f.model_copy(update={"is_list": False}), False)
                        for f in unique_fields
                    ],
                ),
                (
                    f"{related}RelationCreateInput",
                    [build_input_field(f, is_create_required(f)) for f in create_fields],
                ),
            ):
                body.append(
                    f'export const {input_name}: any = builder.inputType("{input_name}", {{'
                )
                body.append("  fields: (t) => ({")
                body.extend(f"    {entry}," for entry in entries)
                body.append("  }),")
                body.append("});")
                body.append("")

        for input_name, related, is_list in relation_types:
            unique_ref: str = _wrap_list(f"{related}WhereUniqueRelationInput", is_list)
            create_ref: str = _wrap_list(f"{related}RelationCreateInput", is_list)
            body.append(
                f'export const {input_name}: any = builder.inputType("{input_name}", {{'
            )
            body.append("  fields: (t) => ({")
            body.append(f"    connect: t.field({{ type: {unique_ref} }}),")
            body.append(f"    create: t.field({{ type: {create_ref} }}),")
            body.append(f"    disconnect: t.field({{ type: {unique_ref} }}),")
            body.append("  }),")
            body.append("});")
            body.append("")

        lines: List[str] = ['import { builder } from "../builder";']
        if used_enums:
            lines.append(build_ts_import(sorted(used_enums), "../enums"))
        lines.append("")
        lines.extend(body)
        return "\n".join(lines)

    # ===================================================================
    # 7. Resolvers
    # ===================================================================

    def generate_create_one_resolver(self, model: ModelInfo) -> str:
        names: DerivedNames = derive_names(model.name)
        lines: List[str] = [
            'import { builder } from "../builder";',
            build_ts_import([names.create_input], f"../inputs/{names.create_input}"),
            "",
            f'builder.mutationField("{names.create}", (t) =>',
            "  t.prismaField({",
            f'    type: "{model.name}",',
            "    nullable: false,",
            "    args: {",
            f"      data: t.arg({{ type: {names.create_input}, required: true }}),",
            "    },",
            "    resolve: async (query, _root, args, ctx) =>",
            f"      ctx.prisma.{names.query_new2}.create({{",
            "        ...query,",
            "        data: args.data,",
            "      }),",
            "  })",
            ");",
            "",
        ]
        return "\n".join(lines)

    def generate_create_many_resolver(self, model: ModelInfo) -> str:
        names: DerivedNames = derive_names(model.name)
        lines: List[str] = [
            'import { builder, AffectedRowsOutput } from "../builder";',
            build_ts_import(
                [names.create_many_input], f"../inputs/{names.create_many_input}"
            ),
            "",
            f'builder.mutationField("{names.create_many}", (t) =>',
            "  t.field({",
            "    type: AffectedRowsOutput,",
            "    nullable: false,",
            "    args: {",
            f"      data: t.arg({{ type: [{names.create_many_input}], required: true }}),",
            "      skipDuplicates: t.arg.boolean(),",
            "    },",
            "    resolve: async (_root, args, ctx) =>",
            f"      ctx.prisma.{names.query_new2}.createMany({{",
            "        data: args.data,",
            "        skipDuplicates: args.skipDuplicates ?? undefined,",
            "      }),",
            "  })",
            ");",
            "",
        ]
        return "\n".join(lines)

    def generate_find_many_resolver(self, model: ModelInfo) -> str:
        names: DerivedNames = derive_names(model.name)
        lines: List[str] = [
            'import { builder } from "../builder";',
            build_ts_import([names.where_input], f"../inputs/{names.where_input}"),
            build_ts_import([names.order_by_input], f"../inputs/{names.order_by_input}"),
            "",
            f'builder.queryField("{names.find_many}", (t) =>',
            "  t.prismaField({",
            f'    type: ["{model.name}"],',
            "    args: {",
            f"      where: t.arg({{ type: {names.where_input} }}),",
            f"      orderBy: t.arg({{ type: [{names.order_by_input}] }}),",
            "      first: t.arg.int(),",
            "      last: t.arg.int(),",
            "    },",
            "    resolve: async (query, _root, args, ctx) =>",
            f"      ctx.prisma.{names.query_new2}.findMany({{",
            "        ...query,",
            "        where: args.where ?? undefined,",
            "        orderBy: args.orderBy ?? undefined,",
            "        take: args.first ?? undefined,",
            "        skip: args.last ?? undefined,",
            "      }),",
            "  })",
            ");",
            "",
        ]
        return "\n".join(lines)

    def generate_find_unique_resolver(self, model: ModelInfo) -> str:
        names: DerivedNames = derive_names(model.name)
        lines: List[str] = [
            'import { builder } from "../builder";',
            build_ts_import(
                [names.where_unique_input], f"../inputs/{names.where_unique_input}"
            ),
            "",
            f'builder.queryField("{names.find}", (t) =>',
            "  t.prismaField({",
            f'    type: "{model.name}",',
            "    nullable: true,",
            "    args: {",
            f"      where: t.arg({{ type: {names.where_unique_input}, required: true }}),",
            "    },",
            "    resolve: async (query, _root, args, ctx) =>",
            f"      ctx.prisma.{names.query_new2}.findUnique({{",
            "        ...query,",
            "        where: args.where,",
            "      }),",
            "  })",
            ");",
            "",
        ]
        return "\n".join(lines)

    def generate_aggregate_resolver(self, model: ModelInfo) -> str:
        names: DerivedNames = derive_names(model.name)
        result_type: str = f"{model.name}AggregateResult"
        lines: List[str] = [
            'import { builder } from "../builder";',
            build_ts_import([names.where_input], f"../inputs/{names.where_input}"),
            "",
            f'const {result_type} = builder.simpleObject("{result_type}", {{',
            "  fields: (t) => ({",
            "    _count: t.int(),",
            "  }),",
            "});",
            "",
            f'builder.queryField("{names.aggregate}", (t) =>',
            "  t.field({",
            f"    type: {result_type},",
            "    nullable: false,",
            "    args: {",
            f"      where: t.arg({{ type: {names.where_input} }}),",
            "    },",
            "    resolve: async (_root, args, ctx) => {",
            f"      const result = await ctx.prisma.{names.query_new2}.aggregate({{",
            "        where: args.where ?? undefined,",
            "        _count: true,",
            "      });",
            "      return { _count: result._count };",
            "    },",
            "  })",
            ");",
            "",
        ]
        return "\n".join(lines)

    def generate_update_one_resolver(self, model: ModelInfo) -> str:
        names: DerivedNames = derive_names(model.name)
        lines: List[str] = [
            'import { builder } from "../builder";',
            build_ts_import([names.update_input], f"../inputs/{names.update_input}"),
            build_ts_import(
                [names.where_unique_input], f"../inputs/{names.where_unique_input}"
            ),
            "",
            f'builder.mutationField("{names.update}", (t) =>',
            "  t.prismaField({",
            f'    type: "{model.name}",',
            "    nullable: true,",
            "    args: {",
            f"      where: t.arg({{ type: {names.where_unique_input}, required: true }}),",
            f"      data: t.arg({{ type: {names.update_input}, required: true }}),",
            "    },",
            "    resolve: async (query, _root, args, ctx) =>",
            f"      ctx.prisma.{names.query_new2}.update({{",
            "        ...query,",
            "        where: args.where,",
            "        data: args.data,",
            "      }),",
            "  })",
            ");",
            "",
        ]
        return "\n".join(lines)

    def is_resolver_skipped(
        self,
        kind: str,
        names: DerivedNames,
        manual: ManualResolvers,
    ) -> bool:
        """True when a hand-written field already provides resolver *kind*."""
        if kind == "createOne":
            return manual.contains_mutation(names.create)
        if kind == "createMany":
            return manual.contains_mutation(names.create_many)
        if kind == "updateOne":
            return manual.contains_mutation(names.update)
        if kind == "findMany":
            return any(manual.contains_query(n) for n in names.list_query_names)
        if kind == "findUnique":
            return manual.contains_query(names.find)
        if kind == "aggregate":
            return manual.contains_query(names.aggregate)
        raise ValueError(f"Unknown resolver kind: {kind!r}")

    def generate_resolvers(
        self,
        model: ModelInfo,
        manual: ManualResolvers,
    ) -> Dict[str, str]:
        """Generated (non-skipped) resolver files of one model."""
        builders = {
            "createOne": self.generate_create_one_resolver,
            "createMany": self.generate_create_many_resolver,
            "findMany": self.generate_find_many_resolver,
            "findUnique": self.generate_find_unique_resolver,
            "aggregate": self.generate_aggregate_resolver,
            "updateOne": self.generate_update_one_resolver,
        }
        names: DerivedNames = derive_names(model.name)
        result: Dict[str, str] = {}
        for kind, operation in RESOLVER_KINDS:
            if self.is_resolver_skipped(kind, names, manual):
                logger.info(
                    "Skipping %s%s (manual %s found).", kind, model.name, operation
                )
                continue
            result[f"resolvers/{kind}{model.name}.ts"] = builders[kind](model)
        return result

    # ===================================================================
    # 8. Index
    # ===================================================================

    def generate_index(self, manual: ManualResolvers) -> str:
        """Generate ``index.ts``: re-exports and the final schema."""
        lines: List[str] = [
            _HEADER,
            "",
            'import { builder, prisma, AffectedRowsOutput } from "./builder";',
            "export { builder, prisma, AffectedRowsOutput };",
            "",
            'export * from "./enums";',
            'export * from "./inputs/filters";',
            "",
        ]
        for model in self._schema.models:
            lines.append(f'export * from "./models/{model.name}";')

        lines.append("")
        for model in self._schema.models:
            names: DerivedNames = derive_names(model.name)
            for input_name in (
                names.create_input,
                names.create_many_input,
                names.update_input,
                names.where_input,
                names.where_unique_input,
                names.order_by_input,
            ):
                lines.append(f'export * from "./inputs/{input_name}";')
        if self.relation_input_types():
            lines.append('export * from "./inputs/relations";')

        lines.append("")
        for model in self._schema.models:
            names = derive_names(model.name)
            for kind, _ in RESOLVER_KINDS:
                if not self.is_resolver_skipped(kind, names, manual):
                    lines.append(f'export * from "./resolvers/{kind}{model.name}";')

        lines.append("")
        lines.append("export const schema = builder.toSchema();")
        lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # Aggregate generation
    # ===================================================================

    def generate_all(
        self, manual_resolvers: Optional[ManualResolvers] = None
    ) -> Dict[str, str]:
        """
        Generate the complete output tree.

        Returns a dict of relative_path → file_content.

        Complexity: O(M × F) — linear in total schema entities.
        """
        manual: ManualResolvers = manual_resolvers or ManualResolvers()
        result: Dict[str, str] = {
            "builder.ts": self.generate_builder(),
            "enums/index.ts": self.generate_enums(),
            "inputs/filters.ts": self.generate_filters(),
        }

        for model in self._schema.models:
            result[f"models/{model.name}.ts"] = self.generate_model(model)
            result.update(self.generate_inputs(model))
            result.update(self.generate_resolvers(model, manual))
            logger.debug("Generated files for model '%s'.", model.name)

        if self.relation_input_types():
            result["inputs/relations.ts"] = self.generate_relation_inputs()

        result["index.ts"] = self.generate_index(manual)

        total_lines: int = sum(count_lines(content) for content in result.values())
        logger.info(
            "Full generation complete: %d files, ~%d lines.",
            len(result),
            total_lines,
        )
        return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "RESOLVER_KINDS",
    "TemplateGenerator",
    "build_object_field",
    "build_input_field",
    "filter_type_for",
    "is_create_input_field",
    "is_create_required",
]

logger.debug("pothosgen.templates loaded.")
