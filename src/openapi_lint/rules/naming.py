"""Naming conventions for types, operations, parameters, properties and enum values."""

import re

from openapi_lint.casing import CaseStyle, classify_case, conforms, convert_case
from openapi_lint.diagnostics import Diagnostic, RuleId
from openapi_lint.parser.base import Document, ObjectSchema, Parameter, PrimitiveSchema
from openapi_lint.resolver import registry_location
from openapi_lint.rules.base import LintContext, Rule

PLACEHOLDER = re.compile(r"\{([^{}]*)\}")

TYPE_STYLE = CaseStyle.PASCAL
OPERATION_STYLE = CaseStyle.SNAKE
PARAMETER_STYLE = CaseStyle.SNAKE
PROPERTY_STYLE = CaseStyle.SNAKE
ENUM_STYLE = CaseStyle.SNAKE


def path_placeholders(path: str) -> list[str]:
    return PLACEHOLDER.findall(path)


class NamingConventionRule(Rule):
    rule_id = RuleId.NAMING_CONVENTION
    summary = "types are PascalCase; operations, parameters, properties and enum values are snake_case"

    def check(self, document: Document, context: LintContext) -> list[Diagnostic]:
        result = []

        for name in document.schemas:
            self._check(result, "type name", name, TYPE_STYLE, registry_location(name))

        for path, item in document.paths.items():
            placeholders = path_placeholders(path)
            for name in placeholders:
                self._check(result, "path parameter", name, PARAMETER_STYLE, f"paths.{path}")
            self._check_parameters(result, item.parameters, placeholders, f"paths.{path}.parameters")

            for method, operation in item.operations.items():
                loc = f"paths.{path}.{method}"
                if operation.operation_id is not None:
                    self._check(result, "operation id", operation.operation_id, OPERATION_STYLE, f"{loc}.operationId")
                self._check_parameters(result, operation.parameters, placeholders, f"{loc}.parameters")

        for site in context.sites:
            schema = site.schema
            if isinstance(schema, ObjectSchema):
                for name in schema.properties:
                    self._check(result, "property", name, PROPERTY_STYLE, f"{site.location}.properties.{name}")
            elif isinstance(schema, PrimitiveSchema) and schema.enum:
                for i, value in enumerate(schema.enum):
                    if isinstance(value, str):
                        self._check(result, "enum value", value, ENUM_STYLE, f"{site.location}.enum[{i}]")

        return result

    def _check_parameters(self, result: list, params: list[Parameter], placeholders: list[str], loc: str) -> None:
        for param in params:
            # path parameters named in the template were already checked there
            if param.location == "path" and param.name in placeholders:
                continue
            self._check(result, "parameter", param.name, PARAMETER_STYLE, f"{loc}.{param.name}")

    def _check(self, result: list, what: str, name: str, style: CaseStyle, location: str) -> None:
        if conforms(name, style):
            return
        message = f"{what} '{name}' is {classify_case(name).value}; expected {style.value}"
        suggestion = convert_case(name, style)
        if suggestion and suggestion != name:
            message += f" (e.g. '{suggestion}')"
        result.append(self.diagnostic(location, message))
