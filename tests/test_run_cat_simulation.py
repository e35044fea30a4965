"""Tests for the run_cat_simulation.py command-line runner."""

import importlib.util
import json
from pathlib import Path

import pytest

from adaptive_cat.config import get_settings

SCRIPT_PATH = Path(__file__).parent.parent / "scripts" / "run_cat_simulation.py"


@pytest.fixture
def runner():
    spec = importlib.util.spec_from_file_location("run_cat_simulation", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    # Leave process logging alone; stdout must carry only the JSON summary
    monkeypatch.setattr("adaptive_cat.logging_config.setup_logging", lambda settings=None: None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_prints_json_summary(runner, capsys):
    exit_code = runner.main(["--examinees", "5", "--max-questions", "8"])
    assert exit_code == 0

    summary = json.loads(capsys.readouterr().out)
    assert summary["n_examinees"] == 5
    assert summary["config"]["maximum_questions"] == 8


def test_standard_error_override(runner, capsys):
    exit_code = runner.main(["--examinees", "3", "--standard-error", "49"])
    assert exit_code == 0

    summary = json.loads(capsys.readouterr().out)
    assert summary["config"]["standard_error_percent"] == pytest.approx(49.0)
    assert summary["stop_reason_counts"] == {"calculated error within limits": 3}


def test_invalid_configuration_exits_with_3(runner, monkeypatch):
    monkeypatch.setenv("CAT_LOWEST_LEVEL", "20")
    assert runner.main(["--examinees", "1"]) == 3


def test_simulation_error_exits_with_2(runner):
    assert runner.main(["--examinees", "0"]) == 2


def test_out_of_bounds_standard_error_exits_with_3(runner):
    assert runner.main(["--examinees", "1", "--standard-error", "60"]) == 3


def test_cap_below_minimum_exits_with_3(runner, monkeypatch):
    monkeypatch.setenv("CAT_MINIMUM_QUESTIONS", "5")
    assert runner.main(["--examinees", "1", "--max-questions", "3"]) == 3
