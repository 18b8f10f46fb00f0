"""Tests for CLI commands."""
import json

import pytest
from click.testing import CliRunner

from skillflow.cli import cli
from skillflow.config import reset_settings
from skillflow.workflow import export_workflow, get_template


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def usage_file(tmp_path, monkeypatch):
    path = tmp_path / "usage.json"
    monkeypatch.setenv("SKILLFLOW_USAGE_FILE", str(path))
    reset_settings()
    return path


@pytest.fixture
def workflow_file(tmp_path):
    path = tmp_path / "workflow.json"
    path.write_text(export_workflow(get_template("research-report")))
    return path


class TestWorkflowCommands:

    def test_validate_valid(self, runner, workflow_file):
        result = runner.invoke(cli, ["validate", str(workflow_file)])

        assert result.exit_code == 0
        assert "is valid (3 skills)" in result.output

    def test_validate_invalid(self, runner, tmp_path):
        workflow = get_template("research-report")
        workflow.name = ""
        path = tmp_path / "bad.json"
        path.write_text(export_workflow(workflow))

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Workflow name is required" in result.output

    def test_validate_unreadable_file(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{")

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 1

    def test_arrange_writes_output(self, runner, workflow_file, tmp_path):
        out = tmp_path / "arranged.json"

        result = runner.invoke(cli, ["arrange", str(workflow_file), "-o", str(out)])

        assert result.exit_code == 0
        data = json.loads(out.read_text())
        xs = [node["position"]["x"] for node in data["nodes"]]
        assert xs == sorted(xs)
        assert xs[0] == 80

    def test_prompt(self, runner, workflow_file):
        result = runner.invoke(cli, ["prompt", str(workflow_file)])

        assert result.exit_code == 0
        assert "# Workflow: Research Report Generator" in result.output

    def test_inputs(self, runner, workflow_file):
        result = runner.invoke(cli, ["inputs", str(workflow_file)])

        assert result.exit_code == 0
        assert "node-1.topic" in result.output


class TestRunCommand:

    def test_simulated_run(self, runner, workflow_file, usage_file):
        result = runner.invoke(
            cli,
            ["run", str(workflow_file), "--simulate", "-i", "node-1.topic=Vector databases"],
        )

        assert result.exit_code == 0, result.output
        assert "-> node-1 (Research Assistant)" in result.output
        assert "Result: completed" in result.output
        assert "[Simulated]" in result.output

    def test_missing_inputs(self, runner, workflow_file, usage_file):
        result = runner.invoke(cli, ["run", str(workflow_file), "--simulate"])

        assert result.exit_code == 1
        assert "node-1.topic" in result.output

    def test_bad_input_syntax(self, runner, workflow_file, usage_file):
        result = runner.invoke(cli, ["run", str(workflow_file), "--simulate", "-i", "topic"])

        assert result.exit_code == 2

    def test_quota_exhausted_run(self, runner, workflow_file, usage_file):
        from skillflow.usage import FileUsageStore, UsageGate

        gate = UsageGate(FileUsageStore(usage_file), limit=3)
        for _ in range(3):
            gate.record_run()

        result = runner.invoke(
            cli,
            ["run", str(workflow_file), "-i", "node-1.topic=x", "--backend-url", "http://127.0.0.1:9"],
        )

        assert result.exit_code == 2
        assert "Free run limit of 3 reached" in result.output


class TestUsageCommands:

    def test_show_fresh_usage(self, runner, usage_file):
        result = runner.invoke(cli, ["usage", "show"])

        assert result.exit_code == 0
        assert "Used: 0/3" in result.output
        assert "API key: not set" in result.output

    def test_set_and_clear_key(self, runner, usage_file):
        assert runner.invoke(cli, ["usage", "set-key", "my-key"]).exit_code == 0
        assert "API key: set" in runner.invoke(cli, ["usage", "show"]).output

        assert runner.invoke(cli, ["usage", "clear-key"]).exit_code == 0
        assert "API key: not set" in runner.invoke(cli, ["usage", "show"]).output


class TestCatalogCommands:

    def test_skills(self, runner):
        result = runner.invoke(cli, ["skills"])

        assert result.exit_code == 0
        assert "research-assistant  Research Assistant" in result.output

    def test_templates_list(self, runner):
        result = runner.invoke(cli, ["templates", "list"])

        assert "research-report: Research Report Generator (3 skills)" in result.output

    def test_templates_export(self, runner):
        result = runner.invoke(cli, ["templates", "export", "business-presentation"])

        assert result.exit_code == 0
        assert json.loads(result.output)["id"] == "business-presentation"

    def test_templates_export_unknown(self, runner):
        result = runner.invoke(cli, ["templates", "export", "nope"])

        assert result.exit_code == 1

    def test_custom_catalog_option(self, runner, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"skills": [], "schemas": [{"skillId": "echo"}]}))

        result = runner.invoke(cli, ["--catalog", str(path), "skills"])

        assert result.exit_code == 0
        assert result.output.strip() == "echo  echo  in[-] out[-]"

    def test_malformed_catalog_option(self, runner, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("skills: [unclosed")

        result = runner.invoke(cli, ["--catalog", str(path), "skills"])

        assert result.exit_code == 1
        assert "Cannot load catalog" in result.output
        assert "Traceback" not in result.output
