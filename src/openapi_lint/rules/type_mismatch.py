"""oneOf/anyOf schemas whose variants serialize as different JSON types."""

from openapi_lint.diagnostics import Diagnostic, RuleId
from openapi_lint.parser.base import Combinator, CompositeSchema, Document
from openapi_lint.rules.base import LintContext, Rule
from openapi_lint.shapes import describe


class TypeMismatchRule(Rule):
    rule_id = RuleId.TYPE_MISMATCH
    summary = "oneOf/anyOf variants must all share one JSON type"

    def check(self, document: Document, context: LintContext) -> list[Diagnostic]:
        result = []
        for site in context.sites:
            schema = site.schema
            if not isinstance(schema, CompositeSchema) or schema.combinator is Combinator.ALL_OF:
                continue

            shapes = context.classifier.classify(schema)
            if len(shapes) > 1:
                result.append(
                    self.diagnostic(
                        site.location,
                        f"schema may resolve to {describe(shapes)} depending on variant; "
                        "this is often due to enums with different data payloads and can "
                        "be resolved using an adjacently tagged representation "
                        f"(see `openapi-lint rules` for {self.rule_id.value})",
                    )
                )
        return result
