"""
tests/conftest.py
Shared fixtures for the pothosgen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import json
import pathlib
import textwrap
from typing import Any, Dict

import pytest
import yaml

from pothosgen.models import ParsedSchema
from pothosgen.parser import parse_schema


# ---------------------------------------------------------------------------
# Schema text fixtures
# ---------------------------------------------------------------------------

BLOG_SCHEMA: str = textwrap.dedent(
    """\
    datasource db {
      provider = "postgresql"
      url      = env("DATABASE_URL")
    }

    generator client {
      provider = "prisma-client-js"
    }

    // Access level of a user
    enum Role {
      USER
      ADMIN @map("admin")
    }

    model User {
      id        Int      @id @default(autoincrement())
      email     String   @unique
      name      String?
      role      Role     @default(USER)
      posts     Post[]
      profile   Profile?
      createdAt DateTime @default(now())
      updatedAt DateTime @updatedAt
    }

    model Post {
      id         Int        @id @default(autoincrement())
      title      String     @default("Untitled")
      published  Boolean    @default(false)
      rating     Float?
      views      BigInt     @default(0)
      price      Decimal?
      meta       Json?
      cover      Bytes?
      tags       String[]
      author     User       @relation(fields: [authorId], references: [id], onDelete: Cascade)
      authorId   Int
      categories Category[]

      @@map("posts")
    }

    model Profile {
      id     String  @id @default(uuid())
      bio    String?
      user   User    @relation(fields: [userId], references: [id])
      userId Int     @unique
    }

    model Category {
      id    Int    @id @default(autoincrement())
      name  String @unique
      posts Post[]
    }
    """
)

SHOP_SCHEMA: str = textwrap.dedent(
    """\
    enum Status {
      ACTIVE
      ARCHIVED
    }

    model Customer {
      id     Int     @id @default(autoincrement())
      email  String  @unique
      status Status  @default(ACTIVE)
      orders Order[]
    }

    model Order {
      id         String   @id @default(uuid())
      total      Float
      note       String?
      placedAt   DateTime @default(now())
      shipBy     DateTime @default("2024-01-01T00:00:00Z")
      meta       Json     @default("{}")
      customer   Customer @relation(fields: [customerId], references: [id])
      customerId Int
    }
    """
)


def _scalar(name: str, type_name: str, **flags: Any) -> Dict[str, Any]:
    field: Dict[str, Any] = {
        "name": name,
        "kind": "scalar",
        "type": type_name,
        "isRequired": True,
        "isList": False,
        "isId": False,
        "isUnique": False,
        "isUpdatedAt": False,
        "hasDefaultValue": "default" in flags,
    }
    field.update(flags)
    return field


# Hand-written DMMF document declaring the same entities as SHOP_SCHEMA
SHOP_DMMF: Dict[str, Any] = {
    "datamodel": {
        "enums": [
            {
                "name": "Status",
                "values": [
                    {"name": "ACTIVE", "dbName": None},
                    {"name": "ARCHIVED", "dbName": None},
                ],
                "dbName": None,
            }
        ],
        "models": [
            {
                "name": "Customer",
                "dbName": None,
                "fields": [
                    _scalar(
                        "id",
                        "Int",
                        isId=True,
                        default={"name": "autoincrement", "args": []},
                    ),
                    _scalar("email", "String", isUnique=True),
                    {
                        "name": "status",
                        "kind": "enum",
                        "type": "Status",
                        "isRequired": True,
                        "isList": False,
                        "hasDefaultValue": True,
                        "default": "ACTIVE",
                    },
                    {
                        "name": "orders",
                        "kind": "object",
                        "type": "Order",
                        "isRequired": True,
                        "isList": True,
                        "relationFromFields": [],
                        "relationToFields": [],
                    },
                ],
                "primaryKey": None,
                "uniqueFields": [],
            },
            {
                "name": "Order",
                "dbName": None,
                "fields": [
                    _scalar("id", "String", isId=True, default={"name": "uuid", "args": []}),
                    _scalar("total", "Float"),
                    _scalar("note", "String", isRequired=False),
                    _scalar("placedAt", "DateTime", default={"name": "now", "args": []}),
                    _scalar("shipBy", "DateTime", default="2024-01-01T00:00:00Z"),
                    _scalar("meta", "Json", default="{}"),
                    {
                        "name": "customer",
                        "kind": "object",
                        "type": "Customer",
                        "isRequired": True,
                        "isList": False,
                        "relationFromFields": ["customerId"],
                        "relationToFields": ["id"],
                    },
                    _scalar("customerId", "Int"),
                ],
            },
        ],
        "types": [],
    }
}


# ---------------------------------------------------------------------------
# Parsed schema fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def blog_schema_text() -> str:
    return BLOG_SCHEMA


@pytest.fixture()
def blog_schema() -> ParsedSchema:
    return parse_schema(BLOG_SCHEMA)


@pytest.fixture()
def shop_schema() -> ParsedSchema:
    return parse_schema(SHOP_SCHEMA)


@pytest.fixture()
def shop_dmmf() -> Dict[str, Any]:
    """Return a deep copy so each test can mutate freely."""
    return copy.deepcopy(SHOP_DMMF)


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def blog_schema_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the blog schema to ``prisma/schema.prisma`` under tmp_path."""
    path = tmp_path / "prisma" / "schema.prisma"
    path.parent.mkdir(parents=True)
    path.write_text(BLOG_SCHEMA, encoding="utf-8")
    return path


@pytest.fixture()
def shop_dmmf_json_path(shop_dmmf: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "dmmf.json"
    path.write_text(json.dumps(shop_dmmf, indent=2), encoding="utf-8")
    return path


@pytest.fixture()
def shop_dmmf_yaml_path(shop_dmmf: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "dmmf.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(shop_dmmf, fh, default_flow_style=False, allow_unicode=True)
    return path


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "src" / "generated"
