"""Exceptions raised by the loader, resolver and engine."""


class LintError(Exception):
    """Base error; raised directly when a document cannot be linted at all."""


class DocumentLoadError(LintError):
    """The input file is not a JSON or YAML mapping."""


class UnresolvedReference(LintError):
    """A `$ref` names a schema that is not in the registry."""

    def __init__(self, ref: str):
        super().__init__(f"unresolved reference {ref!r}")
        self.ref = ref


class MalformedDocumentShape(LintError):
    """Part of the document violates the basic OpenAPI object model."""

    def __init__(self, location: str, message: str):
        super().__init__(f"{location}: {message}")
        self.location = location
        self.message = message
