"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from ci_status.cli import cli

PROJECTS_YAML = """
projects:
  - title: PHPCI
  - title: Docs
    default_branch: main
"""

BUILDS_YAML = """
builds:
  - project: PHPCI
    branch: master
    status: failed
    finished_at: 2024-01-05T09:00:00+00:00
  - project: PHPCI
    branch: master
    status: success
    finished_at: 2024-01-05T10:00:00+00:00
  - project: PHPCI
    branch: master
    status: new
  - project: PHPCI
    branch: master
    status: new
"""


@pytest.fixture
def runner(settings_env, monkeypatch):
    """Create CLI runner with seed files and a quiet log."""
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    config_dir = settings_env / "config"
    config_dir.mkdir()
    (config_dir / "projects.yaml").write_text(PROJECTS_YAML, encoding="utf-8")
    (config_dir / "builds.yaml").write_text(BUILDS_YAML, encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["init-db"])
    assert result.exit_code == 0, result.output
    return runner


class TestCli:

    def test_status(self, runner):
        result = runner.invoke(cli, ["status", "1"])

        assert result.exit_code == 0, result.output
        records = json.loads(result.output)
        assert records == [
            {
                "name": "PHPCI / master",
                "activity": "Pending",
                "lastBuildLabel": "2",
                "lastBuildStatus": "Success",
                "lastBuildTime": "2024-01-05T10:00:00+0000",
                "webUrl": "https://ci.example.com/build/view/4",
            }
        ]

    def test_status_of_project_without_builds(self, runner):
        result = runner.invoke(cli, ["status", "2"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == []

    def test_status_of_branch_without_builds(self, runner):
        result = runner.invoke(cli, ["status", "1", "--branch", "nope"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {}

    def test_status_of_unknown_project(self, runner):
        result = runner.invoke(cli, ["status", "9"])

        assert result.exit_code == 1
        assert "Project 9 not found" in result.output

    def test_skip_intermediate(self, runner):
        result = runner.invoke(cli, ["skip-intermediate", "3", "4"])

        assert result.exit_code == 0, result.output
        assert "master: build 4" in result.output
        assert "skipped build 3 (master)" in result.output

        status = json.loads(runner.invoke(cli, ["status", "1"]).output)
        assert status[0]["webUrl"].endswith("/build/view/4")

    def test_skip_intermediate_unknown_build(self, runner):
        result = runner.invoke(cli, ["skip-intermediate", "3", "40"])

        assert result.exit_code == 1
        assert "Build 40 not found" in result.output

    def test_check_db(self, runner):
        result = runner.invoke(cli, ["check-db"])

        assert result.exit_code == 0, result.output
        assert "projects: 2 records" in result.output
        assert "builds: 4 records" in result.output

    def test_load_yaml_skips_populated_database(self, runner):
        result = runner.invoke(cli, ["load-yaml"])

        assert result.exit_code == 0, result.output
        assert "Loaded 0 builds." in result.output

    def test_show_config(self, runner):
        result = runner.invoke(cli, ["show-config"])

        assert result.exit_code == 0
        assert "App URL: https://ci.example.com/" in result.output
