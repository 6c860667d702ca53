"""Tests for the consultation-engine command line."""

import json

import pytest
from click.testing import CliRunner

from consultation_engine.cli import main
from consultation_engine.config import reset_config


GROWTH_ANSWERS = {
    "business_type": "SaaS",
    "company_size": "medium",
    "industry": "technology",
    "budget_range": "15k-50k",
    "timeline": "1-3 months",
    "primary_goals": ["Increase revenue", "Customer acquisition"],
    "complexity_level": "moderate",
}

VALID_PACKAGE = {
    "title": "Test Package",
    "description": "A test engagement",
    "category": "strategy",
    "tier": "foundation",
    "price_band": "$5k - $10k",
    "timeline": "2-4 weeks",
    "includes": ["One", "Two", "Three"],
}


@pytest.fixture(autouse=True)
def clean_config(monkeypatch, tmp_path):
    monkeypatch.delenv("CONSULTATION_ENGINE_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def answers_file(tmp_path):
    path = tmp_path / "answers.json"
    path.write_text(json.dumps(GROWTH_ANSWERS), encoding="utf-8")
    return path


@pytest.fixture
def empty_answers_file(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("{}", encoding="utf-8")
    return path


class TestAnalyzeCommand:
    def test_json_output(self, runner, answers_file):
        result = runner.invoke(main, ["analyze", "-a", str(answers_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["qualification_score"] == 68
        assert data["readiness"]["completeness"] == 100

    def test_text_output(self, runner, answers_file):
        result = runner.invoke(main, ["analyze", "-a", str(answers_file)])
        assert result.exit_code == 0
        assert "Response Analysis" in result.output
        assert "Qualification score" in result.output

    def test_yaml_answers(self, runner, tmp_path):
        path = tmp_path / "answers.yaml"
        path.write_text("budget_range: 100k+\n", encoding="utf-8")
        result = runner.invoke(main, ["analyze", "-a", str(path), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["qualification_score"] == 100

    def test_non_object_answers(self, runner, tmp_path):
        path = tmp_path / "answers.json"
        path.write_text("[1, 2]", encoding="utf-8")
        result = runner.invoke(main, ["analyze", "-a", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestMatchCommand:
    def test_json_output(self, runner, answers_file):
        result = runner.invoke(main, ["match", "-a", str(answers_file), "-j"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_services_evaluated"] == 6
        assert data["primary_matches"][0]["service"]["id"] == "growth-acceleration-program"

    def test_max_results(self, runner, answers_file):
        result = runner.invoke(main, ["match", "-a", str(answers_file), "-n", "1", "-j"])
        data = json.loads(result.output)
        assert len(data["primary_matches"]) == 1
        assert data["alternative_matches"] == []

    def test_custom_catalog(self, runner, answers_file, tmp_path):
        catalog = tmp_path / "catalog.json"
        catalog.write_text(json.dumps({"packages": [VALID_PACKAGE]}), encoding="utf-8")
        result = runner.invoke(main, ["match", "-a", str(answers_file), "-c", str(catalog), "-j"])
        assert result.exit_code == 0
        assert json.loads(result.output)["total_services_evaluated"] == 1

    def test_text_output(self, runner, answers_file):
        result = runner.invoke(main, ["match", "-a", str(answers_file), "-v"])
        assert result.exit_code == 0
        assert "Service Matching" in result.output
        assert "Primary Matches" in result.output

    def test_invalid_catalog(self, runner, answers_file, tmp_path):
        catalog = tmp_path / "catalog.json"
        catalog.write_text(json.dumps({"version": "1.0.0"}), encoding="utf-8")
        result = runner.invoke(main, ["match", "-a", str(answers_file), "-c", str(catalog)])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestRouteCommand:
    def test_from_scores(self, runner):
        result = runner.invoke(main, ["route", "-q", "85", "-p", "75", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["recommendation"] == "fast-track"
        assert data["score"] == 95
        assert "nextSteps" in data

    def test_from_answers(self, runner, answers_file):
        result = runner.invoke(main, ["route", "-a", str(answers_file), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["recommendation"] == "continue"

    def test_text_output(self, runner):
        result = runner.invoke(main, ["route", "-q", "20", "-p", "10"])
        assert result.exit_code == 0
        assert "redirect-to-resources" in result.output

    def test_missing_inputs(self, runner):
        result = runner.invoke(main, ["route", "-q", "85"])
        assert result.exit_code == 1

    def test_out_of_range(self, runner):
        result = runner.invoke(main, ["route", "-q", "150", "-p", "50"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestReportCommand:
    def test_writes_report(self, runner, answers_file, tmp_path):
        out = tmp_path / "report.json"
        result = runner.invoke(main, [
            "report",
            "-a", str(answers_file),
            "--client-name", "Jane Doe",
            "--company", "Acme",
            "-o", str(out),
        ])
        assert result.exit_code == 0
        assert "Report saved" in result.output
        report = json.loads(out.read_text(encoding="utf-8"))
        assert report["title"] == "Business Consultation Report for Acme"
        assert report["recommendations"]["primary"]["id"] == "growth-acceleration-program"
        assert len(report["implementation_roadmap"]["phases"]) == 3

    def test_stdout(self, runner, answers_file):
        result = runner.invoke(main, ["report", "-a", str(answers_file)])
        assert result.exit_code == 0
        assert json.loads(result.output)["metadata"]["generator"] == "consultation-engine"

    def test_no_primary_match(self, runner, empty_answers_file):
        result = runner.invoke(main, ["report", "-a", str(empty_answers_file)])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestCatalogCommands:
    def test_list(self, runner):
        result = runner.invoke(main, ["catalog", "list"])
        assert result.exit_code == 0
        assert "Service Packages (6 of 6)" in result.output

    def test_list_filtered(self, runner):
        result = runner.invoke(main, ["catalog", "list", "-t", "enterprise"])
        assert result.exit_code == 0
        assert "Service Packages (2 of 6)" in result.output

    def test_show(self, runner):
        result = runner.invoke(main, ["catalog", "show", "growth-acceleration-program"])
        assert result.exit_code == 0
        assert "Growth Acceleration Program" in result.output

    def test_show_unknown(self, runner):
        result = runner.invoke(main, ["catalog", "show", "nope"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_validate_valid(self, runner, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([VALID_PACKAGE]), encoding="utf-8")
        result = runner.invoke(main, ["catalog", "validate", str(path)])
        assert result.exit_code == 0
        assert "Catalog valid" in result.output

    def test_validate_invalid(self, runner, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([{**VALID_PACKAGE, "tier": "platinum"}]), encoding="utf-8")
        result = runner.invoke(main, ["catalog", "validate", str(path)])
        assert result.exit_code == 1
        assert "Catalog invalid" in result.output


class TestConfigHandling:
    def test_init_config(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["init-config"])
            assert result.exit_code == 0
            assert "Config file created" in result.output

            result = runner.invoke(main, ["init-config"])
            assert result.exit_code == 1
            assert "already exists" in result.output

            result = runner.invoke(main, ["init-config", "--force"])
            assert result.exit_code == 0

    def test_config_option(self, runner, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("routing_thresholds:\n  fast_track_score: 99\n", encoding="utf-8")
        result = runner.invoke(main, ["--config", str(path), "route", "-q", "85", "-p", "75", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["score"] == 99

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ["analyze", "match", "route", "report", "catalog", "init-config"]:
            assert command in result.output
