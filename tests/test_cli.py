"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from jetton_tools.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("JETTON_TOOLS_CONFIG", raising=False)
    monkeypatch.delenv("JETTON_TOOLS_NETWORK", raising=False)


class TestMetadataCommands:
    """Tests for metadata encode and dry-run."""

    def test_encode_uri(self):
        result = runner.invoke(app, ["metadata", "encode", "--uri", "https://example.com/m.json"])
        assert result.exit_code == 0
        assert "https://example.com/m.json" in result.output
        assert "Hash:" in result.output

    def test_encode_configured_uri(self):
        result = runner.invoke(app, ["metadata", "encode"])
        assert result.exit_code == 0
        assert "https://kiwi.eu.com/kwt/metadata.json" in result.output

    def test_encode_file(self, metadata_json_file):
        result = runner.invoke(app, ["metadata", "encode", "--file", str(metadata_json_file)])
        assert result.exit_code == 0
        assert "onchain" in result.output

    def test_encode_both_sources(self, metadata_json_file):
        result = runner.invoke(
            app, ["metadata", "encode", "--uri", "x", "--file", str(metadata_json_file)]
        )
        assert result.exit_code == 1

    def test_encode_missing_file(self, tmp_path):
        result = runner.invoke(app, ["metadata", "encode", "--file", str(tmp_path / "no.json")])
        assert result.exit_code == 1

    def test_dry_run(self, metadata_json_file):
        result = runner.invoke(app, ["metadata", "dry-run", "--file", str(metadata_json_file)])
        assert result.exit_code == 0
        assert "Metadata matches" in result.output


class TestAllocationCommands:
    """Tests for allocation plan."""

    def test_plan_table(self):
        result = runner.invoke(app, ["allocation", "plan"])
        assert result.exit_code == 0
        assert "treasury" in result.output
        assert "UQBRMP2yDQDqoy9TNkx8VDqpx5Xs9N1NjyCkzkNWPEeBNbcT" in result.output

    def test_plan_json(self, config_file):
        result = runner.invoke(
            app, ["allocation", "plan", "--config", str(config_file), "--output", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output[result.output.index("{"):])
        assert data["total"] == 1000 * 10**9
        assert [bucket["label"] for bucket in data["buckets"]] == ["burn_reserve", "ops", "growth"]

    def test_plan_overrides_and_save(self, config_file, tmp_path):
        path = tmp_path / "out" / "plan.txt"
        result = runner.invoke(
            app,
            [
                "allocation", "plan",
                "--config", str(config_file),
                "--total", "10",
                "--reserved", "1",
                "--save", str(path),
            ],
        )
        assert result.exit_code == 0
        assert "10" in path.read_text(encoding="utf-8")

    def test_plan_reserved_too_large(self, config_file):
        result = runner.invoke(
            app, ["allocation", "plan", "--config", str(config_file), "--reserved", "5000"]
        )
        assert result.exit_code == 1

    def test_unknown_network(self):
        result = runner.invoke(app, ["allocation", "plan", "--network", "devnet"])
        assert result.exit_code == 1


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "Jetton Tools v" in result.output
