"""Tests for schema reflection and the schema registry."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from sample_models import Account, Base, User, seeded_engine, tags
from sqlalchemy import MetaData, func, select
from sqlalchemy import types as sqltypes

from FuzzyCast import SchemaResolutionError, build, compose
from FuzzyCast.schema import MappedSchema, SchemaMetadata, SchemaRegistry, resolve_schema, schema_from_query


class _LabelOnlySchema(SchemaMetadata):
    """Exposes only the ``label`` column of the tags table."""

    name = "labels"

    @property
    def source(self):
        return tags

    def fields(self) -> tuple[str, ...]:
        return ("label",)

    def type_of(self, field: str):
        return tags.c.label.type if field == "label" else None

    def column(self, field: str):
        return tags.c[field]


class TestMappedSchema(unittest.TestCase):
    def test_mapped_class_fields_in_declaration_order(self) -> None:
        self.assertEqual(MappedSchema(User).fields(), ("id", "email", "password"))

    def test_mapped_class_types(self) -> None:
        schema = MappedSchema(Account)
        self.assertIsInstance(schema.type_of("active"), sqltypes.Boolean)
        self.assertIsInstance(schema.type_of("name"), sqltypes.Text)
        self.assertIsNone(schema.type_of("nickname"))

    def test_table_fields_and_types(self) -> None:
        schema = MappedSchema(tags)
        self.assertEqual(schema.fields(), ("id", "label"))
        self.assertIsInstance(schema.type_of("label"), sqltypes.String)
        self.assertIsNone(schema.type_of("color"))
        self.assertEqual(schema.name, "tags")

    def test_unmapped_object_raises(self) -> None:
        with self.assertRaises(SchemaResolutionError):
            MappedSchema(object())
        with self.assertRaises(SchemaResolutionError):
            resolve_schema("users")

    def test_resolve_schema_keeps_metadata_objects(self) -> None:
        schema = _LabelOnlySchema()
        self.assertIs(resolve_schema(schema), schema)

    def test_schemas_compare_by_source(self) -> None:
        self.assertEqual(MappedSchema(User), MappedSchema(User))
        self.assertNotEqual(MappedSchema(User), MappedSchema(tags))


class TestSchemaFromQuery(unittest.TestCase):
    def test_orm_entity(self) -> None:
        self.assertEqual(schema_from_query(select(User).where(User.id > 1)), MappedSchema(User))

    def test_orm_columns(self) -> None:
        self.assertEqual(schema_from_query(select(User.id, User.email)), MappedSchema(User))

    def test_core_table(self) -> None:
        self.assertEqual(schema_from_query(select(tags)), MappedSchema(tags))

    def test_no_source(self) -> None:
        with self.assertRaises(SchemaResolutionError):
            schema_from_query(select(func.now()))


class TestCustomSchemaMetadata(unittest.TestCase):
    def test_compose_with_custom_metadata(self) -> None:
        engine = seeded_engine()
        try:
            fuzzycast = build(_LabelOnlySchema(), ["red", "1"])
            self.assertEqual(fuzzycast.fields, ("label",))
            with engine.connect() as conn:
                ids = {row.id for row in conn.execute(fuzzycast.search_query)}
            self.assertEqual(ids, {1, 3})
        finally:
            engine.dispose()


class TestSchemaRegistry(unittest.TestCase):
    def test_register_and_resolve(self) -> None:
        registry = SchemaRegistry()
        registry.register("people", User)
        self.assertEqual(registry.resolve("people"), MappedSchema(User))
        self.assertIn("people", registry)
        self.assertEqual(registry.names(), ("people",))

    def test_duplicate_name_raises(self) -> None:
        registry = SchemaRegistry()
        registry.register("people", User)
        with self.assertRaisesRegex(ValueError, "people"):
            registry.register("people", Account)

    def test_unknown_name_raises(self) -> None:
        with self.assertRaisesRegex(ValueError, "ghosts"):
            SchemaRegistry().resolve("ghosts")

    def test_empty_name_raises(self) -> None:
        with self.assertRaises(ValueError):
            SchemaRegistry().register("  ", User)

    def test_from_base(self) -> None:
        registry = SchemaRegistry.from_base(Base)
        self.assertEqual(registry.names(), ("accounts", "users"))
        self.assertEqual(registry.resolve("users"), MappedSchema(User))

    def test_from_metadata(self) -> None:
        registry = SchemaRegistry.from_metadata(Base.metadata)
        self.assertEqual(set(registry.names()), {"accounts", "tags", "users"})
        self.assertEqual(registry.resolve("tags").fields(), ("id", "label"))

    def test_from_empty_metadata(self) -> None:
        self.assertEqual(SchemaRegistry.from_metadata(MetaData()).names(), ())

    def test_registered_schema_composes(self) -> None:
        registry = SchemaRegistry.from_base(Base)
        query = compose(registry.resolve("users"), "gmail")
        self.assertIsNotNone(query.whereclause)


if __name__ == "__main__":
    unittest.main()
