"""Tests for the simulate_pool.py CLI script."""

import importlib.util
import sys
from pathlib import Path

import pytest
import structlog

SCRIPT = Path(__file__).parent.parent.parent / "scripts" / "simulate_pool.py"


@pytest.fixture
def simulate_pool():
    """Load the script as a module and undo its logging configuration afterwards."""
    spec = importlib.util.spec_from_file_location("simulate_pool", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    yield module
    structlog.reset_defaults()


class TestSimulateScript:
    """Tests for the simulation entry point."""

    def test_runs_swaps(self, simulate_pool, monkeypatch, capsys):
        """A short run executes every swap and reports the pool."""
        monkeypatch.setattr(sys, "argv", ["simulate_pool.py", "--swaps", "20", "--seed", "3"])
        assert simulate_pool.main() == 0

        out = capsys.readouterr().out
        assert "Swaps executed: 20 (rejected: 0)" in out
        assert "Final A:        100" in out

    def test_ramp_midway(self, simulate_pool, monkeypatch, capsys):
        """--ramp-to moves A during the run."""
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "simulate_pool.py",
                "--swaps",
                "10",
                "--ramp-to",
                "200",
                "--step",
                "86400",
                "--ramp-duration",
                "86400",
            ],
        )
        assert simulate_pool.main() == 0
        assert "Final A:        200" in capsys.readouterr().out

    def test_invalid_ramp_fails(self, simulate_pool, monkeypatch, capsys):
        """A ramp beyond the 10x bound is reported as an error."""
        monkeypatch.setattr(
            sys, "argv", ["simulate_pool.py", "--swaps", "4", "--ramp-to", "5000"]
        )
        assert simulate_pool.main() == 1
        assert "Error:" in capsys.readouterr().out
