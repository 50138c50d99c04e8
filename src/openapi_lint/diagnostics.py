"""Diagnostic records and lint options."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class RuleId(str, Enum):
    """Canonical rule identifiers."""

    TYPE_MISMATCH = "type-mismatch"
    NAMING_CONVENTION = "naming-convention"
    PATH_CASING = "path-casing"
    TRIVIAL_NULL_RESPONSE = "trivial-null-response"
    DOCUMENTATION_LEAK = "documentation-leak"
    UNRESOLVED_REFERENCE = "unresolved-reference"
    MALFORMED_DOCUMENT = "malformed-document"


class Diagnostic(BaseModel):
    """A single finding, pinned to a document location like `paths./x.get.operationId`."""

    model_config = ConfigDict(frozen=True)

    rule_id: RuleId
    severity: Severity
    location: str
    message: str

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.rule_id.value, self.location, self.message)


class LintOptions(BaseModel):
    """Engine configuration."""

    disabled_rules: set[RuleId] = set()
    doc_leak_severity: Severity = Severity.WARNING
