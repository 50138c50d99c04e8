"""CLI entry point for openapi-lint."""

import json
import logging
import sys
from pathlib import Path

import click

from openapi_lint.diagnostics import Diagnostic, LintOptions, RuleId, Severity
from openapi_lint.engine import RULES, RuleEngine
from openapi_lint.errors import LintError
from openapi_lint.parser.base import Document
from openapi_lint.parser.detect import detect_format, load_raw
from openapi_lint.parser.openapi import build_document

RULE_CHOICES = [rule_cls.rule_id.value for rule_cls in RULES]

EXIT_CLEAN = 0
EXIT_PROBLEMS = 1
EXIT_LOAD_ERROR = 2


def _load_doc(doc_path: Path) -> Document:
    """Load and build a document, rejecting non-OpenAPI-3 input."""
    data = load_raw(doc_path)
    fmt = detect_format(data)
    if fmt == "swagger2":
        raise LintError(f"{doc_path}: Swagger 2.0 documents are not supported; convert to OpenAPI 3 first")
    if fmt != "openapi3":
        raise LintError(f"{doc_path}: not an OpenAPI 3 document (missing 'openapi: 3.x')")
    return build_document(data)


def _render_text(diagnostics: list[Diagnostic]) -> None:
    for d in diagnostics:
        color = "red" if d.severity is Severity.ERROR else "yellow"
        click.secho(f"{d.severity.value}[{d.rule_id.value}]", fg=color, nl=False)
        click.echo(f" {d.location}: {d.message}")

    errors = sum(1 for d in diagnostics if d.severity is Severity.ERROR)
    warnings = len(diagnostics) - errors
    click.echo(f"Found {errors} errors and {warnings} warnings.")


def _render_json(diagnostics: list[Diagnostic]) -> None:
    click.echo(json.dumps([d.model_dump(mode="json") for d in diagnostics], indent=2))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """openapi-lint — flag OpenAPI constructs that generate awkward SDKs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", default="text", type=click.Choice(["text", "json"]), help="Output format.")
@click.option("--skip", multiple=True, type=click.Choice(RULE_CHOICES), help="Disable a rule (repeatable).")
@click.option("--doc-leak-as-error", is_flag=True, help="Report documentation leaks as errors instead of warnings.")
@click.option("--strict", is_flag=True, help="Exit non-zero on warnings too.")
def check(doc_path: Path, fmt: str, skip: tuple[str, ...], doc_leak_as_error: bool, strict: bool):
    """Lint an OpenAPI 3 document (JSON or YAML)."""
    try:
        document = _load_doc(doc_path)
    except LintError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(EXIT_LOAD_ERROR)

    options = LintOptions(
        disabled_rules={RuleId(r) for r in skip},
        doc_leak_severity=Severity.ERROR if doc_leak_as_error else Severity.WARNING,
    )
    diagnostics = RuleEngine(options).run(document)

    if fmt == "json":
        _render_json(diagnostics)
    else:
        _render_text(diagnostics)

    failing = [d for d in diagnostics if strict or d.severity is Severity.ERROR]
    sys.exit(EXIT_PROBLEMS if failing else EXIT_CLEAN)


@main.command()
def rules():
    """List the rule catalogue."""
    for rule_cls in RULES:
        click.echo(f"{rule_cls.rule_id.value:<24} {rule_cls.default_severity.value:<8} {rule_cls.summary}")
