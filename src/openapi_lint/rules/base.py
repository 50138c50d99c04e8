"""Shared rule plumbing: the per-run context handed to every rule."""

from typing import Iterator, NamedTuple

from openapi_lint.diagnostics import Diagnostic, RuleId, Severity
from openapi_lint.parser.base import Document, Operation, Schema
from openapi_lint.resolver import ReferenceResolver
from openapi_lint.shapes import ShapeClassifier


class SchemaSite(NamedTuple):
    """A schema node together with the location it was first reached at."""

    location: str
    schema: Schema


class LintContext:
    """Read-only services for one lint run."""

    def __init__(self, resolver: ReferenceResolver, classifier: ShapeClassifier, sites: list[SchemaSite]):
        self.resolver = resolver
        self.classifier = classifier
        self.sites = sites


class Rule:
    """A single independent check. Subclasses implement `check`."""

    rule_id: RuleId
    default_severity = Severity.ERROR
    summary = ""

    def __init__(self, severity: Severity | None = None):
        self.severity = severity or self.default_severity

    def check(self, document: Document, context: LintContext) -> list[Diagnostic]:
        raise NotImplementedError

    def diagnostic(self, location: str, message: str) -> Diagnostic:
        return Diagnostic(rule_id=self.rule_id, severity=self.severity, location=location, message=message)


def iter_operations(document: Document) -> Iterator[tuple[str, Operation]]:
    """Yield (location, operation) pairs in document order."""
    for path, item in document.paths.items():
        for method, operation in item.operations.items():
            yield f"paths.{path}.{method}", operation
