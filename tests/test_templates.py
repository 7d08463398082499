"""
tests/test_templates.py
Unit tests for pothosgen.templates (TypeScript emission).

Tests cover:
- Object-type and input field builders for every scalar kind
- File layout produced by generate_all()
- Create / update / where / order-by input contents
- Relation inputs
- Resolver naming and manual-resolver skipping
- index.ts re-exports
"""

from __future__ import annotations

from typing import Dict

import pytest

from pothosgen.models import (
    FieldInfo,
    FieldType,
    ModelInfo,
    ParsedSchema,
    RelationInfo,
    ScalarType,
)
from pothosgen.naming import derive_names
from pothosgen.scanner import ManualResolvers
from pothosgen.templates import (
    RESOLVER_KINDS,
    TemplateGenerator,
    build_input_field,
    build_object_field,
    filter_type_for,
    is_create_input_field,
    is_create_required,
)


def _scalar(name: str, scalar: ScalarType, **kwargs) -> FieldInfo:
    return FieldInfo(name=name, field_type=FieldType.scalar(scalar), **kwargs)


@pytest.fixture()
def blog_files(blog_schema: ParsedSchema) -> Dict[str, str]:
    return TemplateGenerator(blog_schema).generate_all()


# ===========================================================================
# Field builders
# ===========================================================================


class TestBuildObjectField:
    """Tests for build_object_field()."""

    def test_expose_helpers(self) -> None:
        assert (
            build_object_field(_scalar("title", ScalarType.STRING))
            == 'title: t.exposeString("title", { nullable: false })'
        )
        assert (
            build_object_field(_scalar("n", ScalarType.INT, is_required=False))
            == 'n: t.exposeInt("n", { nullable: true })'
        )

    def test_expose_list(self) -> None:
        field = _scalar("tags", ScalarType.STRING, is_list=True, is_required=False)
        assert build_object_field(field) == 'tags: t.exposeStringList("tags", { nullable: true })'

    def test_custom_scalars(self) -> None:
        assert build_object_field(_scalar("at", ScalarType.DATETIME)) == (
            'at: t.field({ type: "DateTime", resolve: (parent) => parent.at, nullable: false })'
        )
        assert build_object_field(_scalar("meta", ScalarType.JSON, is_required=False)) == (
            'meta: t.field({ type: "JSON", resolve: (parent) => parent.meta, nullable: true })'
        )

    def test_string_conversions(self) -> None:
        assert build_object_field(_scalar("views", ScalarType.BIGINT)) == (
            'views: t.field({ type: "String", resolve: (parent) => '
            "parent.views?.toString(), nullable: false })"
        )
        assert build_object_field(_scalar("blob", ScalarType.BYTES)) == (
            'blob: t.field({ type: "String", resolve: (parent) => '
            "parent.blob?.toString('base64'), nullable: false })"
        )

    def test_string_conversion_list(self) -> None:
        field = _scalar("prices", ScalarType.DECIMAL, is_list=True, is_required=False)
        assert build_object_field(field) == (
            'prices: t.field({ type: ["String"], resolve: (parent) => '
            "parent.prices?.map((v) => v.toString()), nullable: true })"
        )

    def test_enum(self) -> None:
        field = FieldInfo(name="role", field_type=FieldType.enum("Role"))
        assert build_object_field(field) == (
            "role: t.field({ type: Role, resolve: (parent) => parent.role, nullable: false })"
        )


class TestBuildInputField:
    """Tests for build_input_field()."""

    @pytest.mark.parametrize(
        "scalar, required, expected",
        [
            (ScalarType.STRING, True, "f: t.string({ required: true })"),
            (ScalarType.STRING, False, "f: t.string()"),
            (ScalarType.INT, True, "f: t.int({ required: true })"),
            (ScalarType.FLOAT, False, "f: t.float()"),
            (ScalarType.BOOLEAN, False, "f: t.boolean()"),
            (ScalarType.DECIMAL, False, "f: t.float()"),
            (ScalarType.BIGINT, False, "f: t.string()"),
            (ScalarType.DATETIME, False, 'f: t.field({ type: "DateTime" })'),
            (ScalarType.DATETIME, True, 'f: t.field({ type: "DateTime", required: true })'),
            (ScalarType.JSON, False, 'f: t.field({ type: "JSON" })'),
        ],
    )
    def test_single(self, scalar: ScalarType, required: bool, expected: str) -> None:
        assert build_input_field(_scalar("f", scalar), required) == expected

    def test_lists(self) -> None:
        assert build_input_field(_scalar("f", ScalarType.INT, is_list=True), False) == "f: t.intList()"
        assert build_input_field(_scalar("f", ScalarType.FLOAT, is_list=True), False) == (
            'f: t.field({ type: ["Float"] })'
        )

    def test_enum(self) -> None:
        field = FieldInfo(name="role", field_type=FieldType.enum("Role"))
        assert build_input_field(field, True) == "role: t.field({ type: Role, required: true })"
        assert build_input_field(field, False) == "role: t.field({ type: Role })"


class TestFieldPredicates:
    """Tests for filter_type_for() and the create-input predicates."""

    def test_filter_types(self) -> None:
        assert filter_type_for(FieldType.scalar(ScalarType.STRING)) == "StringFilter"
        assert filter_type_for(FieldType.scalar(ScalarType.BOOLEAN)) == "BoolFilter"
        assert filter_type_for(FieldType.scalar(ScalarType.DECIMAL)) == "FloatFilter"
        assert filter_type_for(FieldType.scalar(ScalarType.JSON)) == '"JSON"'
        assert filter_type_for(FieldType.enum("Role")) == "StringFilter"

    def test_create_input_excludes_managed_fields(self) -> None:
        assert is_create_input_field(_scalar("title", ScalarType.STRING))
        assert not is_create_input_field(_scalar("updatedAt", ScalarType.DATETIME, is_updated_at=True))
        assert not is_create_input_field(_scalar("created_at", ScalarType.DATETIME))
        assert not is_create_input_field(_scalar("updated_at", ScalarType.DATETIME))
        relation = FieldInfo(
            name="author",
            field_type=FieldType.model("User"),
            relation=RelationInfo(related_model="User"),
        )
        assert not is_create_input_field(relation)

    def test_create_required(self) -> None:
        assert is_create_required(_scalar("title", ScalarType.STRING))
        assert not is_create_required(_scalar("id", ScalarType.INT, is_id=True))
        assert not is_create_required(_scalar("n", ScalarType.INT, default_value="0"))
        assert not is_create_required(_scalar("n", ScalarType.INT, is_required=False))


# ===========================================================================
# File layout
# ===========================================================================


class TestGenerateAll:
    """Tests for TemplateGenerator.generate_all()."""

    def test_file_set(self, blog_files: Dict[str, str], blog_schema: ParsedSchema) -> None:
        expected = {"builder.ts", "enums/index.ts", "inputs/filters.ts", "inputs/relations.ts", "index.ts"}
        for model in blog_schema.models:
            names = derive_names(model.name)
            expected.add(f"models/{model.name}.ts")
            for input_name in (
                names.create_input,
                names.create_many_input,
                names.update_input,
                names.where_input,
                names.where_unique_input,
                names.order_by_input,
            ):
                expected.add(f"inputs/{input_name}.ts")
            for kind, _ in RESOLVER_KINDS:
                expected.add(f"resolvers/{kind}{model.name}.ts")
        assert set(blog_files) == expected

    def test_no_relations_file_without_relations(self) -> None:
        schema = ParsedSchema(
            models=[ModelInfo(name="Tag", fields=[_scalar("id", ScalarType.INT, is_id=True)])]
        )
        files = TemplateGenerator(schema).generate_all()
        assert "inputs/relations.ts" not in files
        assert 'export * from "./inputs/relations";' not in files["index.ts"]

    def test_empty_schema_still_has_skeleton(self) -> None:
        files = TemplateGenerator(ParsedSchema()).generate_all()
        assert set(files) == {"builder.ts", "enums/index.ts", "inputs/filters.ts", "index.ts"}

    def test_builder(self, blog_files: Dict[str, str]) -> None:
        builder = blog_files["builder.ts"]
        assert "plugins: [PrismaPlugin, SimpleObjectsPlugin]" in builder
        assert 'builder.scalarType("DateTime"' in builder
        assert 'builder.scalarType("JSON"' in builder
        assert "builder.queryType({});" in builder
        assert "builder.mutationType({});" in builder
        assert 'builder.simpleObject("AffectedRowsOutput"' in builder

    def test_enums_order(self, blog_files: Dict[str, str]) -> None:
        enums = blog_files["enums/index.ts"]
        order = [enums.index(f'builder.enumType("{n}"') for n in ("SortOrder", "NullsOrder", "QueryMode", "Role")]
        assert order == sorted(order)
        assert 'values: ["USER", "ADMIN"] as const,' in enums

    def test_filters(self, blog_files: Dict[str, str]) -> None:
        filters = blog_files["inputs/filters.ts"]
        for name in ("StringFilter", "IntFilter", "FloatFilter", "BoolFilter", "DateTimeFilter"):
            assert f'builder.inputType("{name}"' in filters
            assert f'builder.inputType("Nested{name}"' in filters
        assert "mode: t.field({ type: QueryMode })," in filters


# ===========================================================================
# Object types
# ===========================================================================


class TestGenerateModel:
    """Tests for models/<Model>.ts."""

    def test_scalar_fields(self, blog_files: Dict[str, str]) -> None:
        post = blog_files["models/Post.ts"]
        assert 'export const Post = builder.prismaObject("Post", {' in post
        assert 'title: t.exposeString("title", { nullable: false }),' in post
        assert 'rating: t.exposeFloat("rating", { nullable: true }),' in post
        assert 'meta: t.field({ type: "JSON", resolve: (parent) => parent.meta, nullable: true }),' in post

    def test_single_relation(self, blog_files: Dict[str, str]) -> None:
        post = blog_files["models/Post.ts"]
        assert 'author: t.relation("author", {' in post
        assert 'import { UserWhereInput } from "../inputs/UserWhereInput";' in post

    def test_list_relation_has_paging_args(self, blog_files: Dict[str, str]) -> None:
        user = blog_files["models/User.ts"]
        assert 'posts: t.relation("posts", {' in user
        assert "orderBy: t.arg({ type: [PostOrderByInput] })," in user
        assert "first: t.arg.int()," in user
        assert "last: t.arg.int()," in user

    def test_optional_relation_nullable(self, blog_files: Dict[str, str]) -> None:
        user = blog_files["models/User.ts"]
        start = user.index('profile: t.relation("profile", {')
        assert "nullable: true," in user[start:start + 80]

    def test_enum_import(self, blog_files: Dict[str, str]) -> None:
        assert 'import { Role } from "../enums";' in blog_files["models/User.ts"]

    def test_relation_to_unknown_model_not_emitted(self) -> None:
        ghost = FieldInfo(
            name="ghost",
            field_type=FieldType.model("Ghost"),
            relation=RelationInfo(related_model="Ghost"),
        )
        schema = ParsedSchema(
            models=[ModelInfo(name="A", fields=[_scalar("id", ScalarType.INT, is_id=True), ghost])]
        )
        generator = TemplateGenerator(schema)
        assert "ghost" not in generator.generate_model(schema.models[0])
        assert generator.relation_input_types() == []


# ===========================================================================
# Input types
# ===========================================================================


class TestGenerateInputs:
    """Tests for the per-model input files."""

    def test_create_input(self, blog_files: Dict[str, str]) -> None:
        create = blog_files["inputs/UserCreateInput.ts"]
        assert 'export const UserCreateInput: any = builder.inputType("UserCreateInput", {' in create
        assert "    id: t.int()," in create
        assert "    email: t.string({ required: true })," in create
        assert "    name: t.string()," in create
        assert "    role: t.field({ type: Role })," in create
        assert '    createdAt: t.field({ type: "DateTime" }),' in create
        assert "updatedAt" not in create
        assert "posts" not in create
        assert "profile" not in create

    def test_create_many_input_same_fields(self, blog_files: Dict[str, str]) -> None:
        single = blog_files["inputs/PostCreateInput.ts"]
        many = blog_files["inputs/PostCreateManyInput.ts"]
        assert many == single.replace("PostCreateInput", "PostCreateManyInput")
        assert "    tags: t.stringList()," in many
        assert "    authorId: t.int({ required: true })," in many

    def test_update_input(self, blog_files: Dict[str, str]) -> None:
        update = blog_files["inputs/UserUpdateInput.ts"]
        assert "required: true" not in update
        assert "    id:" not in update
        assert "    email: t.string()," in update
        assert '    updatedAt: t.field({ type: "DateTime" }),' in update

    def test_where_input(self, blog_files: Dict[str, str]) -> None:
        where = blog_files["inputs/PostWhereInput.ts"]
        assert "    AND: t.field({ type: [PostWhereInput] })," in where
        assert "    OR: t.field({ type: [PostWhereInput] })," in where
        assert "    NOT: t.field({ type: [PostWhereInput] })," in where
        assert "    title: t.field({ type: StringFilter })," in where
        assert "    published: t.field({ type: BoolFilter })," in where
        assert '    meta: t.field({ type: "JSON" }),' in where
        assert "author:" not in where

    def test_where_unique_input(self, blog_files: Dict[str, str]) -> None:
        unique = blog_files["inputs/UserWhereUniqueInput.ts"]
        assert "    id: t.int({ required: true })," in unique
        assert "    email: t.string({ required: true })," in unique
        assert "name" not in unique

    def test_order_by_input(self, blog_files: Dict[str, str]) -> None:
        order = blog_files["inputs/CategoryOrderByInput.ts"]
        assert 'import { SortOrder } from "../enums";' in order
        assert "    id: t.field({ type: SortOrder })," in order
        assert "    name: t.field({ type: SortOrder })," in order
        assert "posts" not in order


class TestRelationInputs:
    """Tests for inputs/relations.ts."""

    def test_relation_input_types(self, blog_schema: ParsedSchema) -> None:
        assert TemplateGenerator(blog_schema).relation_input_types() == [
            ("UserPostListRelationInput", "Post", True),
            ("UserProfileRelationInput", "Profile", False),
            ("PostUserRelationInput", "User", False),
            ("PostCategoryListRelationInput", "Category", True),
            ("ProfileUserRelationInput", "User", False),
            ("CategoryPostListRelationInput", "Post", True),
        ]

    def test_content(self, blog_files: Dict[str, str]) -> None:
        relations = blog_files["inputs/relations.ts"]
        assert 'builder.inputType("PostWhereUniqueRelationInput"' in relations
        assert 'builder.inputType("PostRelationCreateInput"' in relations
        assert "    connect: t.field({ type: [PostWhereUniqueRelationInput] })," in relations
        assert "    create: t.field({ type: UserRelationCreateInput })," in relations
        assert "    disconnect: t.field({ type: ProfileWhereUniqueRelationInput })," in relations
        assert relations.count('builder.inputType("PostWhereUniqueRelationInput"') == 1


# ===========================================================================
# Resolvers
# ===========================================================================


class TestResolvers:
    """Tests for the CRUD resolver files."""

    def test_find_many_uses_derived_names(self, blog_files: Dict[str, str]) -> None:
        resolver = blog_files["resolvers/findManyCategory.ts"]
        assert 'builder.queryField("categories", (t) =>' in resolver
        assert "ctx.prisma.category.findMany({" in resolver

    def test_find_unique(self, blog_files: Dict[str, str]) -> None:
        resolver = blog_files["resolvers/findUniquePost.ts"]
        assert 'builder.queryField("post", (t) =>' in resolver
        assert "where: t.arg({ type: PostWhereUniqueInput, required: true })," in resolver

    def test_mutations(self, blog_files: Dict[str, str]) -> None:
        assert 'builder.mutationField("createOnePost"' in blog_files["resolvers/createOnePost.ts"]
        assert 'builder.mutationField("updateOnePost"' in blog_files["resolvers/updateOnePost.ts"]
        create_many = blog_files["resolvers/createManyPost.ts"]
        assert 'builder.mutationField("createManyPost"' in create_many
        assert "type: AffectedRowsOutput," in create_many
        assert "ctx.prisma.post.createMany({" in create_many

    def test_aggregate(self, blog_files: Dict[str, str]) -> None:
        resolver = blog_files["resolvers/aggregateUser.ts"]
        assert 'builder.queryField("aggregateUser", (t) =>' in resolver
        assert "_count: true," in resolver

    def test_prisma_accessor_keeps_underscore(self) -> None:
        schema = ParsedSchema(
            models=[ModelInfo(name="User_Profile", fields=[_scalar("id", ScalarType.INT, is_id=True)])]
        )
        files = TemplateGenerator(schema).generate_all()
        resolver = files["resolvers/findManyUser_Profile.ts"]
        assert 'builder.queryField("userProfiles", (t) =>' in resolver
        assert "ctx.prisma.user_Profile.findMany({" in resolver

    def test_manual_resolvers_skipped(self, blog_schema: ParsedSchema) -> None:
        manual = ManualResolvers(queries={"posts"}, mutations={"createOneUser"})
        files = TemplateGenerator(blog_schema).generate_all(manual)
        assert "resolvers/findManyPost.ts" not in files
        assert "resolvers/createOneUser.ts" not in files
        assert "resolvers/findUniquePost.ts" in files
        assert 'export * from "./resolvers/findManyPost";' not in files["index.ts"]
        assert 'export * from "./resolvers/createOneUser";' not in files["index.ts"]
        assert 'export * from "./resolvers/findUniquePost";' in files["index.ts"]

    def test_collapsed_plural_counts_as_list_query(self) -> None:
        schema = ParsedSchema(
            models=[ModelInfo(name="Address", fields=[_scalar("id", ScalarType.INT, is_id=True)])]
        )
        generator = TemplateGenerator(schema)
        names = derive_names("Address")
        manual = ManualResolvers(queries={"address"})
        assert generator.is_resolver_skipped("findMany", names, manual)
        assert not generator.is_resolver_skipped("aggregate", names, manual)

    def test_unknown_kind(self, blog_schema: ParsedSchema) -> None:
        with pytest.raises(ValueError):
            TemplateGenerator(blog_schema).is_resolver_skipped(
                "deleteOne", derive_names("Post"), ManualResolvers()
            )


class TestIndex:
    """Tests for index.ts."""

    def test_header_and_schema(self, blog_files: Dict[str, str]) -> None:
        index = blog_files["index.ts"]
        assert index.startswith("// Auto-generated by pothosgen. DO NOT EDIT MANUALLY.")
        assert index.rstrip().endswith("export const schema = builder.toSchema();")

    def test_re_exports(self, blog_files: Dict[str, str]) -> None:
        index = blog_files["index.ts"]
        assert 'export * from "./enums";' in index
        assert 'export * from "./inputs/filters";' in index
        assert 'export * from "./models/Category";' in index
        assert 'export * from "./inputs/PostWhereUniqueInput";' in index
        assert 'export * from "./inputs/relations";' in index
        assert 'export * from "./resolvers/aggregateProfile";' in index

    def test_every_file_is_reachable(self, blog_files: Dict[str, str]) -> None:
        index = blog_files["index.ts"]
        for path in blog_files:
            if path in ("index.ts", "builder.ts", "enums/index.ts"):
                continue
            module = "./" + path[: -len(".ts")]
            assert f'export * from "{module}";' in index, path
