"""Rule engine — walks a document once and runs every enabled rule over it."""

import logging

from openapi_lint.diagnostics import Diagnostic, LintOptions, RuleId, Severity
from openapi_lint.errors import LintError
from openapi_lint.parser.base import Document, MediaType, Parameter
from openapi_lint.resolver import ReferenceResolver, SchemaTraversal, registry_location
from openapi_lint.rules.base import LintContext, Rule, SchemaSite, iter_operations
from openapi_lint.rules.doc_leak import DocumentationLeakRule
from openapi_lint.rules.naming import NamingConventionRule
from openapi_lint.rules.null_response import TrivialNullResponseRule
from openapi_lint.rules.path_casing import PathCasingRule
from openapi_lint.rules.type_mismatch import TypeMismatchRule
from openapi_lint.shapes import ShapeClassifier

logger = logging.getLogger(__name__)

RULES: tuple[type[Rule], ...] = (
    TypeMismatchRule,
    NamingConventionRule,
    PathCasingRule,
    TrivialNullResponseRule,
    DocumentationLeakRule,
)


def lint(document: Document, options: LintOptions | None = None) -> list[Diagnostic]:
    """Lint a document and return its diagnostics sorted by location."""
    return RuleEngine(options).run(document)


class RuleEngine:
    """Runs the rule catalogue over one document at a time.

    The engine keeps no state between runs; resolver, classifier and
    traversal bookkeeping are created fresh for every document.
    """

    def __init__(self, options: LintOptions | None = None):
        self.options = options or LintOptions()
        self.rules = [
            rule_cls(self._severity_for(rule_cls.rule_id))
            for rule_cls in RULES
            if rule_cls.rule_id not in self.options.disabled_rules
        ]

    def _severity_for(self, rule_id: RuleId) -> Severity | None:
        if rule_id is RuleId.DOCUMENTATION_LEAK:
            return self.options.doc_leak_severity
        return None

    def run(self, document: Document) -> list[Diagnostic]:
        if document is None:
            raise LintError("no document to lint")
        if not isinstance(document, Document):
            raise LintError(f"expected a Document, got {type(document).__name__}")

        logger.debug("linting %d paths and %d schemas", len(document.paths), len(document.schemas))
        resolver = ReferenceResolver(document.schemas)
        traversal = resolver.traversal()
        sites = self._collect_sites(document, traversal)

        diagnostics = self._structural(document, traversal)
        context = LintContext(resolver, ShapeClassifier(resolver), sites)
        for rule in self.rules:
            found = rule.check(document, context)
            logger.debug("rule %s produced %d diagnostics", rule.rule_id.value, len(found))
            diagnostics.extend(found)

        return _finalize(diagnostics)

    # -- traversal ------------------------------------------------------------

    def _collect_sites(self, document: Document, traversal: SchemaTraversal) -> list[SchemaSite]:
        """Visit every schema once: registry entries first, then inline operation schemas.

        Registry entries go first so that shared schemas are reported at their
        `components.schemas` location rather than at whichever operation
        happened to reach them first.
        """
        sites: list[SchemaSite] = []

        def visitor(schema, location):
            sites.append(SchemaSite(location, schema))

        for name, schema in document.schemas.items():
            traversal.visit(schema, visitor, registry_location(name))

        for path, item in document.paths.items():
            self._visit_parameters(traversal, visitor, item.parameters, f"paths.{path}.parameters")
        for loc, operation in iter_operations(document):
            self._visit_parameters(traversal, visitor, operation.parameters, f"{loc}.parameters")
            if operation.request_body is not None:
                self._visit_content(traversal, visitor, operation.request_body.content, f"{loc}.requestBody.content")
            for status, response in operation.responses.items():
                self._visit_content(traversal, visitor, response.content or [], f"{loc}.responses.{status}.content")

        logger.debug("visited %d distinct schema nodes", len(sites))
        return sites

    def _visit_parameters(self, traversal, visitor, params: list[Parameter], loc: str) -> None:
        for param in params:
            if param.schema_ is not None:
                traversal.visit(param.schema_, visitor, f"{loc}.{param.name}.schema")
            self._visit_content(traversal, visitor, param.content, f"{loc}.{param.name}.content")

    def _visit_content(self, traversal, visitor, content: list[MediaType], loc: str) -> None:
        for media in content:
            if media.schema_ is not None:
                traversal.visit(media.schema_, visitor, f"{loc}.{media.media_type}.schema")

    # -- structural problems --------------------------------------------------

    def _structural(self, document: Document, traversal: SchemaTraversal) -> list[Diagnostic]:
        result = [_malformed(d.location, d.message) for d in document.defects]

        for path, item in document.paths.items():
            if not item.operations:
                result.append(_malformed(f"paths.{path}", "path item has no operations"))

        for loc, operation in iter_operations(document):
            for status, response in operation.responses.items():
                for media in response.content or []:
                    if media.schema_ is None:
                        result.append(
                            _malformed(
                                f"{loc}.responses.{status}.content.{media.media_type}",
                                f"response content '{media.media_type}' has no schema",
                            )
                        )

        for location, ref in traversal.unresolved:
            result.append(
                Diagnostic(
                    rule_id=RuleId.UNRESOLVED_REFERENCE,
                    severity=Severity.ERROR,
                    location=location,
                    message=f"reference '{ref}' does not name a schema in components.schemas",
                )
            )
        return result


def _malformed(location: str, message: str) -> Diagnostic:
    return Diagnostic(
        rule_id=RuleId.MALFORMED_DOCUMENT,
        severity=Severity.ERROR,
        location=location,
        message=message,
    )


def _finalize(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    """Drop exact duplicates, then stable-sort by location."""
    seen: set[tuple[str, str, str]] = set()
    unique = []
    for d in diagnostics:
        if d.key in seen:
            continue
        seen.add(d.key)
        unique.append(d)
    return sorted(unique, key=lambda d: d.location)
