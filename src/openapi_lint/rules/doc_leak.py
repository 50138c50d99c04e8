"""Heuristic check for internal documentation leaking into API descriptions.

Doc comments copied from source code tend to carry namespace paths
(`crate::module::Type`) and intra-doc links (`[Type]`) that mean nothing to
API consumers. Either indicator alone is enough to flag the text; false
positives are acceptable.
"""

import re

from openapi_lint.diagnostics import Diagnostic, RuleId, Severity
from openapi_lint.parser.base import Document
from openapi_lint.rules.base import LintContext, Rule, iter_operations

NAMESPACE_SEPARATOR = "::"
# [text] not followed by a (destination)
UNLINKED_BRACKET = re.compile(r"\[[^\[\]]*\](?!\()")


def leak_indicators(text: str) -> list[str]:
    found = []
    if NAMESPACE_SEPARATOR in text:
        found.append(f"namespace separator '{NAMESPACE_SEPARATOR}'")
    match = UNLINKED_BRACKET.search(text)
    if match:
        found.append(f"bracketed span '{match.group(0)}' with no link destination")
    return found


class DocumentationLeakRule(Rule):
    rule_id = RuleId.DOCUMENTATION_LEAK
    default_severity = Severity.WARNING
    summary = "descriptions should not contain source-code doc syntax"

    def check(self, document: Document, context: LintContext) -> list[Diagnostic]:
        result = []
        for site in context.sites:
            self._scan(result, site.schema.title, f"{site.location}.title")
            self._scan(result, site.schema.description, f"{site.location}.description")
        for loc, operation in iter_operations(document):
            self._scan(result, operation.summary, f"{loc}.summary")
            self._scan(result, operation.description, f"{loc}.description")
        return result

    def _scan(self, result: list, text: str | None, location: str) -> None:
        if not text:
            return
        found = leak_indicators(text)
        if found:
            result.append(
                self.diagnostic(location, "possible internal documentation leak: " + "; ".join(found))
            )
