from __future__ import annotations

import re
from functools import reduce
from typing import Optional, Dict, List, Any

import schema_nodes as s
from schema_nodes import SchemaNode
from type import JSON, SchemaLoadError

# "#/definitions/Issue", "#/$defs/Issue" and "#/components/schemas/Issue"
_REF = re.compile(
    r"^#/(?:definitions|\$defs|components/schemas)/(?P<name>.+)$"
)

_STRING_FORMATS = {
    "email": "email",
    "uri": "url",
    "url": "url",
    "uuid": "uuid",
    "date-time": "datetime",
}

class SchemaDocument:
    """
    Turns a JSON-Schema flavoured document into SchemaNodes.

    `$ref`s become lazy nodes looked up in the document's definitions on
    first use, so self-referencing definitions never recurse at load time.
    """

    def __init__(
            self,
            root: JSON,
            definitions: Optional[Dict[str, JSON]] = None,
    ) -> None:
        self.raw = root
        self.definitions = definitions or {}
        self._built: Dict[str, SchemaNode] = {}

    @staticmethod
    def from_dict(document: JSON) -> "SchemaDocument":

        if not isinstance(document, dict):
            raise SchemaLoadError("Schema document must be a JSON object")

        definitions: Dict[str, JSON] = {}
        definitions.update(
            (document.get("components") or {}).get("schemas") or {}
        )
        definitions.update(document.get("definitions") or {})
        definitions.update(document.get("$defs") or {})

        return SchemaDocument(
            root=document,
            definitions=definitions
        )

    def root(self) -> SchemaNode:
        return self.build(self.raw)

    def names(self) -> List[str]:
        return sorted(self.definitions.keys())

    def definition(self, name: str) -> SchemaNode:

        if name not in self.definitions:
            raise SchemaLoadError(f"Unknown definition: {name}")

        if name not in self._built:
            self._built[name] = self.build(self.definitions[name])

        return self._built[name]

    def _ref(self, ref: str) -> SchemaNode:

        m = _REF.match(ref)
        if not m:
            raise SchemaLoadError(f"Unsupported $ref: {ref}")

        name = m.group("name")
        if name not in self.definitions:
            raise SchemaLoadError(f"Unresolved $ref: {ref}")

        return s.lazy(lambda: self.definition(name))

    def build(self, schema: Any) -> SchemaNode:

        if schema is True or schema == {}:
            return s.any_()

        if not isinstance(schema, dict):
            raise SchemaLoadError(f"Expected a schema object, got {schema!r}")

        node = self._build_bare(schema)

        if "default" in schema:
            node = node.default(schema["default"])

        if schema.get("description"):
            node = node.describe(schema["description"])

        return node

    def _build_bare(self, schema: JSON) -> SchemaNode:

        if "$ref" in schema:
            return self._ref(schema["$ref"])

        if "const" in schema:
            return s.literal(schema["const"])

        if "enum" in schema:
            values = schema["enum"]
            if not isinstance(values, list) or not values:
                raise SchemaLoadError("enum must be a non-empty list")
            return s.enum(values)

        for keyword in ("oneOf", "anyOf"):
            if keyword in schema:
                return s.union([self.build(part) for part in schema[keyword]])

        if "allOf" in schema:
            parts = [self.build(part) for part in schema["allOf"]]
            if not parts:
                raise SchemaLoadError("allOf must not be empty")
            return reduce(s.intersection, parts)

        t = schema.get("type")
        if isinstance(t, list):
            non_null = [x for x in t if x != "null"]
            if not non_null:
                return s.null()
            node = self._build_typed(non_null[0], schema)
            return node.nullable() if "null" in t else node

        if t is None:
            if "properties" in schema or "additionalProperties" in schema:
                t = "object"
            elif "items" in schema or "prefixItems" in schema:
                t = "array"
            else:
                return s.any_()

        return self._build_typed(t, schema)

    def _build_typed(self, t: str, schema: JSON) -> SchemaNode:

        if t == "object":
            return self._object(schema)
        if t == "array":
            return self._array(schema)
        if t == "string":
            return self._string(schema)
        if t in ("integer", "number"):
            return self._number(t, schema)
        if t == "boolean":
            return s.boolean()
        if t == "null":
            return s.null()

        raise SchemaLoadError(f"Unsupported type: {t}")

    def _object(self, schema: JSON) -> SchemaNode:

        properties = schema.get("properties") or {}
        additional = schema.get("additionalProperties")

        if not properties and isinstance(additional, dict):
            return s.record(s.string(), self.build(additional))

        required = set(schema.get("required") or [])
        shape: Dict[str, SchemaNode] = {}
        for name, sub_schema in properties.items():
            child = self.build(sub_schema)
            shape[name] = child if name in required else child.optional()

        return s.obj(shape)

    def _array(self, schema: JSON) -> SchemaNode:

        items = schema.get("items", {"type": "string"})
        prefix = schema.get("prefixItems")

        if prefix:
            rest = self.build(items) if isinstance(items, dict) else None
            return s.tuple_of([self.build(p) for p in prefix], rest=rest)

        element = self.build(items)
        node = s.set_of(element) if schema.get("uniqueItems") else s.array(element)

        if "minItems" in schema:
            node = node.min(int(schema["minItems"]))
        if "maxItems" in schema:
            node = node.max(int(schema["maxItems"]))

        return node

    def _string(self, schema: JSON) -> SchemaNode:

        node = s.string()

        if "minLength" in schema:
            node = node.min(int(schema["minLength"]))
        if "maxLength" in schema:
            node = node.max(int(schema["maxLength"]))
        if schema.get("pattern"):
            node = node.regex(schema["pattern"])

        fmt = _STRING_FORMATS.get(schema.get("format") or "")
        if fmt:
            node = getattr(node, fmt)()

        return node

    def _number(self, t: str, schema: JSON) -> SchemaNode:

        node = s.number().int() if t == "integer" else s.number()

        if "minimum" in schema:
            node = node.gte(schema["minimum"])
        if "maximum" in schema:
            node = node.lte(schema["maximum"])

        # draft-06+ numeric form; draft-04 booleans modify minimum/maximum
        exclusive_min = schema.get("exclusiveMinimum")
        exclusive_max = schema.get("exclusiveMaximum")
        if exclusive_min is True and "minimum" in schema:
            node = node.gt(schema["minimum"])
        elif isinstance(exclusive_min, (int, float)) and not isinstance(exclusive_min, bool):
            node = node.gt(exclusive_min)
        if exclusive_max is True and "maximum" in schema:
            node = node.lt(schema["maximum"])
        elif isinstance(exclusive_max, (int, float)) and not isinstance(exclusive_max, bool):
            node = node.lt(exclusive_max)

        return node

def load_schema(
        document: JSON,
        definition: Optional[str] = None,
) -> SchemaNode:

    doc = SchemaDocument.from_dict(document)
    if definition:
        return doc.definition(definition)
    return doc.root()
