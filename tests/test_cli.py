"""Tests for the cityreg command line interface."""

import pytest
from click.testing import CliRunner
from rich.console import Console

from cityreg.cli import main

OWNER = "0x" + "cd" * 20

runner = CliRunner()


@pytest.fixture(autouse=True)
def _file_substrate(tmp_path, monkeypatch):
    monkeypatch.delenv("CITYREG_CONFIG", raising=False)
    monkeypatch.setenv("CITYREG_SUBSTRATE", "file")
    monkeypatch.setenv("CITYREG_DATA_PATH", str(tmp_path / "substrate.json"))
    # Wide enough that tables never wrap
    monkeypatch.setattr("cityreg.cli.console", Console(width=200))


def _create(name, population="10000", buildings="10"):
    return runner.invoke(
        main,
        ["create", name, "--population", population, "--buildings", buildings, "--owner", OWNER],
    )


def test_version():
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_list_empty():
    result = runner.invoke(main, ["list"])
    assert result.exit_code == 0
    assert "Registry is empty" in result.output


def test_create_then_list():
    result = _create("Alpha")
    assert result.exit_code == 0, result.output
    assert "Created" in result.output
    assert "satisfaction 10%" in result.output

    _create("Beta", "5000", "5")

    result = runner.invoke(main, ["list"])
    assert result.exit_code == 0
    assert "Alpha" in result.output
    assert "Beta" in result.output
    assert "0xcdcd...cdcd" in result.output


def test_default_substrate_persists_between_runs(tmp_path, monkeypatch):
    monkeypatch.delenv("CITYREG_SUBSTRATE")
    monkeypatch.delenv("CITYREG_DATA_PATH")
    monkeypatch.setenv("HOME", str(tmp_path))

    assert _create("Alpha").exit_code == 0

    result = runner.invoke(main, ["list"])
    assert result.exit_code == 0
    assert "Alpha" in result.output
    assert (tmp_path / ".cityreg" / "substrate.json").exists()


def test_list_shows_population_share():
    _create("Alpha", "20000", "10")
    _create("Beta", "5000", "5")

    result = runner.invoke(main, ["list"])
    assert result.exit_code == 0
    assert "100%" in result.output
    assert "25%" in result.output


def test_create_invalid_draft():
    result = _create("Ghost", population="0")
    assert result.exit_code == 1
    assert "Population must be greater than zero" in result.output


def test_list_pages():
    for i in range(7):
        _create(f"City{i}")

    result = runner.invoke(main, ["list", "--page", "2", "--page-size", "5"])
    assert result.exit_code == 0
    assert "Page 2 of 2" in result.output

    result = runner.invoke(main, ["list", "--page", "3"])
    assert "out of range" in result.output


def test_show():
    _create("Alpha")

    from cityreg.config import load_config
    from cityreg.registry.store import build_registry

    city = build_registry(load_config()).list_all()[0]

    result = runner.invoke(main, ["show", city.id, "--as", OWNER.upper().replace("0X", "0x")])
    assert result.exit_code == 0
    assert "Alpha" in result.output
    assert "FHE-" in result.output
    assert "You own this city" in result.output


def test_show_missing():
    result = runner.invoke(main, ["show", "nope"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_stats():
    _create("Alpha", "10000", "10")
    _create("Beta", "5000", "5")
    result = runner.invoke(main, ["stats"])
    assert result.exit_code == 0
    assert "15,000" in result.output
    assert "10.0%" in result.output


def test_stats_when_unavailable(tmp_path, monkeypatch):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    monkeypatch.setenv("CITYREG_DATA_PATH", str(blocker / "substrate.json"))

    result = runner.invoke(main, ["stats"])
    assert result.exit_code == 1
    assert "not available" in result.output
    assert "Registry Statistics" not in result.output


def test_score_preview():
    result = runner.invoke(main, ["score", "1000", "20"])
    assert result.exit_code == 0
    assert "100%" in result.output

    result = runner.invoke(main, ["score", "0", "5"])
    assert result.exit_code == 1


def test_check():
    result = runner.invoke(main, ["check"])
    assert result.exit_code == 0
    assert "available" in result.output


def test_bad_config(monkeypatch):
    monkeypatch.setenv("CITYREG_SUBSTRATE", "carrier-pigeon")
    result = runner.invoke(main, ["list"])
    assert result.exit_code != 0
    assert "Invalid configuration" in result.output
