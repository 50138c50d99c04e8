"""Literal path segments must be kebab-case."""

import re

from openapi_lint.casing import CaseStyle, classify_case, conforms, convert_case
from openapi_lint.diagnostics import Diagnostic, RuleId
from openapi_lint.parser.base import Document
from openapi_lint.rules.base import LintContext, Rule
from openapi_lint.rules.naming import PLACEHOLDER

PATH_STYLE = CaseStyle.KEBAB

# file extensions and custom-method suffixes ("openapi.json", "{id}:cancel") are checked piecewise
PIECE_SEPARATORS = re.compile(r"([.:])")


class PathCasingRule(Rule):
    rule_id = RuleId.PATH_CASING
    summary = "literal path segments are kebab-case"

    def check(self, document: Document, context: LintContext) -> list[Diagnostic]:
        result = []
        for path in document.paths:
            for segment in path.split("/"):
                if not segment or PLACEHOLDER.fullmatch(segment):
                    continue
                suggestion = self._respell(segment)
                if suggestion is None:
                    continue
                literal = PLACEHOLDER.sub("", segment)
                result.append(
                    self.diagnostic(
                        f"paths.{path}",
                        f"path segment '{segment}' is {classify_case(literal).value}; "
                        f"expected {PATH_STYLE.value} (e.g. '{suggestion}')",
                    )
                )
        return result

    def _respell(self, segment: str) -> str | None:
        """Kebab-case spelling of `segment`, or None when it already conforms."""
        changed = False
        parts = []
        for text in _split_placeholders(segment):
            if PLACEHOLDER.fullmatch(text):
                parts.append(text)
                continue
            for piece in PIECE_SEPARATORS.split(text):
                if not piece or PIECE_SEPARATORS.fullmatch(piece) or conforms(piece, PATH_STYLE):
                    parts.append(piece)
                else:
                    parts.append(convert_case(piece, PATH_STYLE))
                    changed = True
        return "".join(parts) if changed else None


def _split_placeholders(segment: str) -> list[str]:
    parts = []
    pos = 0
    for m in PLACEHOLDER.finditer(segment):
        parts.append(segment[pos:m.start()])
        parts.append(m.group(0))
        pos = m.end()
    parts.append(segment[pos:])
    return [p for p in parts if p]
