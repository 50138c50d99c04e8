"""Schema reference resolution and cycle-safe traversal.

The registry (`components/schemas`) is the only place a reference can point
to. Resolution is a dictionary lookup, so a schema reached through any number
of references is always the same node object, and traversal can key its
bookkeeping on node identity.
"""

from typing import Callable, Iterator

from openapi_lint.errors import UnresolvedReference
from openapi_lint.parser.base import (
    ArraySchema,
    CompositeSchema,
    ObjectSchema,
    ReferenceSchema,
    Schema,
)

Visitor = Callable[[Schema, str], None]


def registry_location(name: str) -> str:
    return f"components.schemas.{name}"


class ReferenceResolver:
    """Looks references up in a document's schema registry."""

    def __init__(self, registry: dict[str, Schema]):
        self.registry = registry

    def lookup(self, ref: ReferenceSchema) -> tuple[str, Schema]:
        """Resolve one hop. The target may itself be a reference."""
        name = ref.target_name
        if name is None or name not in self.registry:
            raise UnresolvedReference(ref.ref)
        return name, self.registry[name]

    def resolve(self, schema: Schema) -> Schema:
        """Follow references until a non-reference schema is reached.

        Raises UnresolvedReference for a missing target or an alias chain
        that only ever points back into itself.
        """
        seen: set[str] = set()
        while isinstance(schema, ReferenceSchema):
            if schema.ref in seen:
                raise UnresolvedReference(schema.ref)
            seen.add(schema.ref)
            _, schema = self.lookup(schema)
        return schema

    def traversal(self) -> "SchemaTraversal":
        return SchemaTraversal(self)

    def visit(self, root: Schema, visitor: Visitor, location: str = "") -> "SchemaTraversal":
        """Visit every node reachable from `root` exactly once."""
        traversal = self.traversal()
        traversal.visit(root, visitor, location)
        return traversal


class SchemaTraversal:
    """Visited-state for one pass over the schema graph.

    A single traversal may be fed several roots; nodes shared between roots
    are visited only the first time they are reached.
    """

    def __init__(self, resolver: ReferenceResolver):
        self.resolver = resolver
        self.unresolved: list[tuple[str, str]] = []  # (location, ref)
        self._in_progress: set[int] = set()
        self._done: set[int] = set()

    def visit(self, root: Schema, visitor: Visitor, location: str = "") -> None:
        key = id(root)
        if key in self._done or key in self._in_progress:
            return

        self._in_progress.add(key)
        visitor(root, location)
        for child, child_location in self._children(root, location):
            self.visit(child, visitor, child_location)
        self._in_progress.discard(key)
        self._done.add(key)

    def _children(self, node: Schema, location: str) -> Iterator[tuple[Schema, str]]:
        if isinstance(node, ReferenceSchema):
            try:
                name, target = self.resolver.lookup(node)
                if isinstance(target, ReferenceSchema):
                    # alias chains must end at a concrete schema
                    self.resolver.resolve(node)
            except UnresolvedReference as e:
                self.unresolved.append((location, e.ref))
                return
            yield target, registry_location(name)
        elif isinstance(node, ObjectSchema):
            for name, prop in node.properties.items():
                yield prop, f"{location}.properties.{name}"
            if node.additional_properties is not None:
                yield node.additional_properties, f"{location}.additionalProperties"
        elif isinstance(node, ArraySchema):
            if node.items is not None:
                yield node.items, f"{location}.items"
        elif isinstance(node, CompositeSchema):
            for i, sub in enumerate(node.subschemas):
                yield sub, f"{location}.{node.combinator.value}[{i}]"
