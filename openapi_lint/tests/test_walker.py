"""
Tests for the schema graph walker.
"""

import unittest

from openapi_lint.analyzer import ReferenceResolver, SchemaWalker
from openapi_lint.document import AnySchema, DocumentParser
from openapi_lint.errors import ReferenceCycleError, UnresolvedReferenceError, UnsupportedSchemaError

PET_SCHEMAS = {
    "Pet": {
        "type": "object",
        "properties": {
            "name": {"type": "string"},
            "tags": {"type": "array", "items": {"$ref": "#/components/schemas/Tag"}},
            "owner": {"$ref": "#/components/schemas/Owner"},
        },
    },
    "Tag": {"type": "string", "enum": ["cat", "dog"]},
    "Owner": {"type": "object", "properties": {"pet": {"$ref": "#/components/schemas/Pet"}}},
}


def make_walker(raw, report_unsupported=False):
    document = DocumentParser().parse(raw)
    return document, SchemaWalker(ReferenceResolver(document), report_unsupported=report_unsupported)


def visited(walked):
    return [(name, schema.source_path) for name, schema in walked]


class TestSchemaWalker(unittest.TestCase):
    def test_components_post_order(self):
        document, walker = make_walker({"components": {"schemas": PET_SCHEMAS}})
        pet = "#/components/schemas/Pet"
        self.assertEqual(
            visited(walker.walk(document)),
            [
                (None, f"{pet}/properties/name"),
                (None, f"{pet}/properties/tags"),
                ("Pet", pet),
                ("Tag", "#/components/schemas/Tag"),
                ("Owner", "#/components/schemas/Owner"),
            ],
        )

    def test_shared_schema_walked_once(self):
        raw_schemas = {"Leaf": {"type": "object", "properties": {"value": {"type": "string"}}}}
        # Each level references the one below twice
        for level in range(1, 6):
            below = f"Level{level - 1}" if level > 1 else "Leaf"
            shared = {"$ref": f"#/components/schemas/{below}"}
            raw_schemas[f"Level{level}"] = {"type": "object", "properties": {"left": shared, "right": shared}}

        document, walker = make_walker({"components": {"schemas": raw_schemas}})
        walked = list(walker.walk(document))
        names = [name for name, _ in walked if name]
        self.assertEqual(names, ["Leaf", "Level1", "Level2", "Level3", "Level4", "Level5"])
        self.assertEqual(len(walked), 7)
        self.assertIn("#/components/schemas/Level4", walker.visited)

    def test_self_reference_terminates(self):
        document, walker = make_walker(
            {
                "components": {
                    "schemas": {
                        "Node": {
                            "type": "object",
                            "properties": {
                                "children": {"type": "array", "items": {"$ref": "#/components/schemas/Node"}}
                            },
                        }
                    }
                }
            }
        )
        self.assertEqual(
            visited(walker.walk(document)),
            [
                (None, "#/components/schemas/Node/properties/children"),
                ("Node", "#/components/schemas/Node"),
            ],
        )

    def test_paths_before_components(self):
        document, walker = make_walker(
            {
                "paths": {
                    "/pets/{id}": {
                        "parameters": [{"name": "id", "in": "path", "schema": {"type": "string"}}],
                        "post": {
                            "requestBody": {
                                "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Tag"}}}
                            },
                            "responses": {},
                        },
                        "get": {
                            "parameters": [{"name": "limit", "in": "query", "schema": {"type": "integer"}}],
                            "responses": {
                                "200": {
                                    "description": "ok",
                                    "content": {"application/json": {"schema": {"type": "boolean"}}},
                                }
                            },
                        },
                    }
                },
                "components": {"schemas": {"Tag": PET_SCHEMAS["Tag"]}},
            }
        )
        path = "#/paths/~1pets~1{id}"
        self.assertEqual(
            visited(walker.walk(document)),
            [
                (None, f"{path}/get/parameters/0/schema"),
                (None, f"{path}/get/responses/200/content/application~1json/schema"),
                (None, f"{path}/parameters/0/schema"),
                ("Tag", "#/components/schemas/Tag"),
            ],
        )

    def test_compositions_walk_members_first(self):
        document, walker = make_walker(
            {
                "components": {
                    "schemas": {
                        "Either": {"oneOf": [{"type": "string"}, {"type": "integer"}]},
                        "Map": {"type": "object", "additionalProperties": {"type": "number"}},
                    }
                }
            }
        )
        self.assertEqual(
            visited(walker.walk(document)),
            [
                (None, "#/components/schemas/Either/oneOf/0"),
                (None, "#/components/schemas/Either/oneOf/1"),
                ("Either", "#/components/schemas/Either"),
                (None, "#/components/schemas/Map/additionalProperties"),
                ("Map", "#/components/schemas/Map"),
            ],
        )

    def test_walk_is_repeatable(self):
        document, walker = make_walker({"components": {"schemas": PET_SCHEMAS}})
        self.assertEqual(visited(walker.walk(document)), visited(walker.walk(document)))

    def test_dangling_reference(self):
        document, walker = make_walker(
            {
                "components": {
                    "schemas": {
                        "Pet": {"type": "object", "properties": {"owner": {"$ref": "#/components/schemas/Nobody"}}}
                    }
                }
            }
        )
        with self.assertRaises(UnresolvedReferenceError):
            list(walker.walk(document))

    def test_reference_only_cycle(self):
        document, walker = make_walker(
            {
                "components": {
                    "schemas": {
                        "Ping": {"$ref": "#/components/schemas/Pong"},
                        "Pong": {"$ref": "#/components/schemas/Ping"},
                        "Game": {"type": "array", "items": {"$ref": "#/components/schemas/Ping"}},
                    }
                }
            }
        )
        with self.assertRaises(ReferenceCycleError):
            list(walker.walk(document))

    def test_constrained_free_form_schema(self):
        raw = {"components": {"schemas": {"Odd": {"type": "object", "allOf": [{"type": "object"}]}}}}

        document, walker = make_walker(raw)
        with self.assertRaises(UnsupportedSchemaError) as cm:
            list(walker.walk(document))
        self.assertEqual(cm.exception.location, "#/components/schemas/Odd")

        document, walker = make_walker(raw, report_unsupported=True)
        walked = list(walker.walk(document))
        self.assertEqual(len(walked), 1)
        self.assertEqual(walked[0].name, "Odd")
        self.assertIsInstance(walked[0].schema.kind, AnySchema)

    def test_unconstrained_free_form_schema(self):
        document, walker = make_walker({"components": {"schemas": {"Value": {"description": "any JSON value"}}}})
        self.assertEqual(visited(walker.walk(document)), [("Value", "#/components/schemas/Value")])


if __name__ == "__main__":
    unittest.main()
