import json
from pathlib import Path

from click.testing import CliRunner

from openapi_lint.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliCheck:
    def test_clean_document_exits_zero(self):
        runner = CliRunner()
        result = runner.invoke(main, ["check", str(FIXTURES / "petstore.yaml")])

        assert result.exit_code == 0
        assert "Found 0 errors and 0 warnings." in result.output

    def test_problems_exit_one(self):
        runner = CliRunner()
        result = runner.invoke(main, ["check", str(FIXTURES / "errors.json")])

        assert result.exit_code == 1
        assert "error[type-mismatch] components.schemas.ImageSource" in result.output
        assert "warning[documentation-leak]" in result.output
        assert "Found 10 errors and 1 warnings." in result.output

    def test_json_output(self):
        runner = CliRunner()
        result = runner.invoke(main, ["check", str(FIXTURES / "errors.json"), "--format", "json"])

        data = json.loads(result.output)
        assert len(data) == 11
        assert data[0] == {
            "rule_id": "type-mismatch",
            "severity": "error",
            "location": "components.schemas.ImageSource",
            "message": data[0]["message"],
        }

    def test_skip_rules(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "check", str(FIXTURES / "errors.json"),
            "--skip", "naming-convention",
            "--skip", "path-casing",
        ])

        assert result.exit_code == 1
        assert "naming-convention" not in result.output
        assert "path-casing" not in result.output

    def test_warnings_only_pass_unless_strict(self, tmp_path):
        doc = tmp_path / "leaky.yaml"
        doc.write_text(
            "openapi: 3.0.3\n"
            "info: {title: leaky, version: '1'}\n"
            "paths: {}\n"
            "components:\n"
            "  schemas:\n"
            "    Disk:\n"
            "      type: object\n"
            "      description: See db::model::Disk\n",
            encoding="utf-8",
        )
        runner = CliRunner()

        assert runner.invoke(main, ["check", str(doc)]).exit_code == 0
        assert runner.invoke(main, ["check", str(doc), "--strict"]).exit_code == 1
        assert runner.invoke(main, ["check", str(doc), "--doc-leak-as-error"]).exit_code == 1

    def test_swagger_document_rejected(self, tmp_path):
        doc = tmp_path / "old.json"
        doc.write_text('{"swagger": "2.0", "paths": {}}', encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(main, ["check", str(doc)])

        assert result.exit_code == 2
        assert "Swagger 2.0" in result.output

    def test_unparseable_document_rejected(self, tmp_path):
        doc = tmp_path / "broken.yaml"
        doc.write_text("key: [invalid\n", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(main, ["check", str(doc)])

        assert result.exit_code == 2


class TestCliRules:
    def test_lists_catalogue(self):
        runner = CliRunner()
        result = runner.invoke(main, ["rules"])

        assert result.exit_code == 0
        for rule_id in ("type-mismatch", "naming-convention", "path-casing", "trivial-null-response", "documentation-leak"):
            assert rule_id in result.output
