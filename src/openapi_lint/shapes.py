"""Classify the JSON value shapes a schema can produce."""

from enum import Enum

from openapi_lint.errors import UnresolvedReference
from openapi_lint.parser.base import (
    AnySchema,
    ArraySchema,
    Combinator,
    CompositeSchema,
    ObjectSchema,
    PrimitiveSchema,
    PrimitiveType,
    ReferenceSchema,
    Schema,
)
from openapi_lint.resolver import ReferenceResolver


class ShapeKind(str, Enum):
    NULL = "Null"
    BOOLEAN = "Boolean"
    NUMBER = "Number"
    STRING = "String"
    OBJECT = "Object"
    ARRAY = "Array"


PRIMITIVE_SHAPES = {
    PrimitiveType.NULL: ShapeKind.NULL,
    PrimitiveType.BOOLEAN: ShapeKind.BOOLEAN,
    PrimitiveType.INTEGER: ShapeKind.NUMBER,
    PrimitiveType.NUMBER: ShapeKind.NUMBER,
    PrimitiveType.STRING: ShapeKind.STRING,
}

Shapes = frozenset[ShapeKind]

NO_SHAPES: Shapes = frozenset()


def describe(shapes: Shapes) -> str:
    """'Object or String' style listing, in a stable order."""
    names = sorted(s.value for s in shapes)
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + " or " + names[-1]


class ShapeClassifier:
    """Computes shape sets, memoised per node for the lifetime of one run.

    Schemas that reference each other form strongly connected components.
    Each component is settled as a whole (Tarjan's algorithm): its members
    start from the empty set and are re-evaluated until nothing changes, so
    every node is classified once no matter how many paths reach it.
    """

    def __init__(self, resolver: ReferenceResolver):
        self.resolver = resolver
        self._memo: dict[int, Shapes] = {}
        self._index: dict[int, int] = {}
        self._lowlink: dict[int, int] = {}
        self._stack: list[Schema] = []
        self._on_stack: set[int] = set()

    def classify(self, schema: Schema) -> Shapes:
        if id(schema) not in self._memo:
            self._connect(schema)
        return self._memo[id(schema)]

    def _edges(self, schema: Schema) -> list[Schema]:
        if isinstance(schema, ReferenceSchema):
            try:
                _, target = self.resolver.lookup(schema)
            except UnresolvedReference:
                # reported by the traversal
                return []
            return [target]
        if isinstance(schema, CompositeSchema):
            return schema.subschemas
        return []

    def _connect(self, schema: Schema) -> None:
        key = id(schema)
        self._index[key] = self._lowlink[key] = len(self._index)
        self._stack.append(schema)
        self._on_stack.add(key)

        for child in self._edges(schema):
            child_key = id(child)
            if child_key in self._memo:
                continue
            if child_key not in self._index:
                self._connect(child)
                self._lowlink[key] = min(self._lowlink[key], self._lowlink[child_key])
            elif child_key in self._on_stack:
                self._lowlink[key] = min(self._lowlink[key], self._index[child_key])

        if self._lowlink[key] != self._index[key]:
            return

        component = []
        while True:
            node = self._stack.pop()
            self._on_stack.discard(id(node))
            component.append(node)
            if node is schema:
                break
        self._settle(component)

    def _settle(self, component: list[Schema]) -> None:
        values = {id(node): NO_SHAPES for node in component}
        # unions only grow; the bound covers allOf intersections, which need not
        for _ in range(len(component) * len(ShapeKind) + 1):
            changed = False
            for node in component:
                shapes = self._evaluate(node, values)
                if shapes != values[id(node)]:
                    values[id(node)] = shapes
                    changed = True
            if not changed:
                break
        self._memo.update(values)

    def _evaluate(self, schema: Schema, values: dict[int, Shapes]) -> Shapes:
        def current(node: Schema) -> Shapes:
            return values.get(id(node), self._memo.get(id(node), NO_SHAPES))

        if isinstance(schema, PrimitiveSchema):
            return frozenset({PRIMITIVE_SHAPES[schema.type]})
        if isinstance(schema, ObjectSchema):
            return frozenset({ShapeKind.OBJECT})
        if isinstance(schema, ArraySchema):
            return frozenset({ShapeKind.ARRAY})
        if isinstance(schema, ReferenceSchema):
            targets = self._edges(schema)
            return current(targets[0]) if targets else NO_SHAPES
        if isinstance(schema, CompositeSchema):
            parts = [current(sub) for sub in schema.subschemas]
            if schema.combinator is Combinator.ALL_OF:
                return _intersect(parts)
            return frozenset().union(*parts)
        if isinstance(schema, AnySchema):
            return NO_SHAPES
        raise TypeError(f"unhandled schema kind {schema.kind!r}")

    def all_of_compatible(self, schema: CompositeSchema) -> bool:
        """True when every pair of sub-schema shape sets is equal or nested."""
        parts = [p for p in (self.classify(sub) for sub in schema.subschemas) if p]
        return all(a <= b or b <= a for i, a in enumerate(parts) for b in parts[i + 1:])


def _intersect(parts: list[Shapes]) -> Shapes:
    concrete = [p for p in parts if p]
    if not concrete:
        return NO_SHAPES
    result = concrete[0]
    for p in concrete[1:]:
        result = result & p
    return result
