"""
Tests for the openapi_lint command.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from openapi_lint.openapi_lint import EXIT_CLEAN, EXIT_ERROR, EXIT_PROBLEMS, openapi_lint

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def runner():
    return CliRunner()


def write_document(tmp_path, raw):
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(raw))
    return str(path)


class TestOpenapiLintCommand:
    """Test cases for the command line driver"""

    def test_clean(self, runner):
        result = runner.invoke(openapi_lint, [str(TEST_DATA / "clean.json")])
        assert result.exit_code == EXIT_CLEAN
        assert result.output == ""

    def test_problems(self, runner):
        result = runner.invoke(openapi_lint, [str(TEST_DATA / "problems.yaml")])
        assert result.exit_code == EXIT_PROBLEMS
        assert "problem with path /hardware_racks/{rackId}" in result.output
        assert "rename rack_uuid to rack_id" in result.output

    def test_convention_flag(self, runner):
        result = runner.invoke(openapi_lint, ["--convention", "camel", str(TEST_DATA / "clean.json")])
        assert result.exit_code == EXIT_PROBLEMS
        assert "rename rack_view to rackView" in result.output

    def test_config_file(self, runner, tmp_path):
        config = tmp_path / "lint.json"
        config.write_text(json.dumps({"naming_convention": "camel"}))
        result = runner.invoke(openapi_lint, ["--config", str(config), str(TEST_DATA / "clean.json")])
        assert result.exit_code == EXIT_PROBLEMS

    def test_external_docs_flag(self, runner, tmp_path):
        path = write_document(
            tmp_path,
            {"components": {"schemas": {"Thing": {"type": "string", "description": "Wraps [`Thing`]."}}}},
        )
        assert runner.invoke(openapi_lint, [path]).exit_code == EXIT_CLEAN

        result = runner.invoke(openapi_lint, ["--external-docs", path])
        assert result.exit_code == EXIT_PROBLEMS
        assert "[`Thing`]" in result.output

    def test_unresolved_reference(self, runner, tmp_path):
        path = write_document(
            tmp_path,
            {"components": {"schemas": {"Thing": {"type": "array", "items": {"$ref": "#/components/schemas/Gone"}}}}},
        )
        result = runner.invoke(openapi_lint, [path])
        assert result.exit_code == EXIT_ERROR
        assert "error: " in result.output
        assert "#/components/schemas/Gone" in result.output

    def test_report_unsupported_flag(self, runner, tmp_path):
        path = write_document(
            tmp_path,
            {"components": {"schemas": {"Odd": {"type": "object", "allOf": [{"type": "object"}]}}}},
        )
        result = runner.invoke(openapi_lint, [path])
        assert result.exit_code == EXIT_ERROR
        assert "unimplemented construct at #/components/schemas/Odd" in result.output

        result = runner.invoke(openapi_lint, ["--report-unsupported", path])
        assert result.exit_code == EXIT_PROBLEMS

    def test_not_utf8(self, runner):
        result = runner.invoke(openapi_lint, [str(TEST_DATA / "latin1.yaml")])
        assert result.exit_code == EXIT_ERROR
        assert "not UTF-8" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(openapi_lint, [str(tmp_path / "absent.json")])
        assert result.exit_code == 2


if __name__ == "__main__":
    pytest.main([__file__])
