"""Response bodies that can only ever serialize as JSON null."""

from openapi_lint.diagnostics import Diagnostic, RuleId
from openapi_lint.errors import UnresolvedReference
from openapi_lint.parser.base import Document, PrimitiveSchema, PrimitiveType, Schema
from openapi_lint.resolver import ReferenceResolver
from openapi_lint.rules.base import LintContext, Rule, iter_operations


def is_null_only(schema: Schema, resolver: ReferenceResolver) -> bool:
    """`{"type": "string", "enum": [null]}` and references to it."""
    try:
        schema = resolver.resolve(schema)
    except UnresolvedReference:
        return False
    return (
        isinstance(schema, PrimitiveSchema)
        and schema.type is PrimitiveType.STRING
        and bool(schema.enum)
        and all(value is None for value in schema.enum)
    )


class TrivialNullResponseRule(Rule):
    rule_id = RuleId.TRIVIAL_NULL_RESPONSE
    summary = "responses that are always null should be 'no content' responses"

    def check(self, document: Document, context: LintContext) -> list[Diagnostic]:
        result = []
        for loc, operation in iter_operations(document):
            for status, response in operation.responses.items():
                for media in response.content or []:
                    if media.schema_ is None or not is_null_only(media.schema_, context.resolver):
                        continue
                    result.append(
                        self.diagnostic(
                            f"{loc}.responses.{status}.content.{media.media_type}.schema",
                            "response body can only ever be null; use an explicit "
                            "no-content response (e.g. 204) instead of a null-only body",
                        )
                    )
        return result
