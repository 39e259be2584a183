"""
Integration tests for the full analysis workflow.

Tests run_friction_sweep, which orchestrates multiple simulations across
tire friction coefficients, and the command-line entry point built on it.
"""

import logging
import sys

import pytest

from swerve import BodyVelocity, SimulationResult, SwerveConfig, run_friction_sweep
from swerve_simulation import main


class TestIntegration:
    """Test suite for integration tests"""

    def test_run_friction_sweep_returns_results(self) -> None:
        """Test that run_friction_sweep returns results for all coefficients"""
        coefficients = [0.5, 1.0, 1.5]
        results = run_friction_sweep(coefficients, duration=0.5)

        assert len(results) == len(coefficients)
        for mu in coefficients:
            assert mu in results

    def test_results_contain_required_keys(self) -> None:
        """Test that results contain all required data"""
        results = run_friction_sweep([1.0], duration=0.5)

        for mu, data in results.items():
            assert isinstance(data["config"], SwerveConfig)
            assert isinstance(data["result"], SimulationResult)
            assert "rise_time" in data["analysis"]
            assert data["config"].friction_coefficient == mu

    def test_base_config_is_preserved(self) -> None:
        """Test that only the friction coefficient differs from the base configuration"""
        base = SwerveConfig(mass=40.0)
        results = run_friction_sweep([0.7], duration=0.2, base_config=base)

        config = results[0.7]["config"]
        assert config.mass == 40.0
        assert config.module_offsets == base.module_offsets

    def test_different_coefficients_produce_different_results(self) -> None:
        """Test that more grip covers more ground in the same time"""
        results = run_friction_sweep([0.4, 1.2], command=BodyVelocity(3.0, 0.0, 0.0), duration=0.5)

        slippery = results[0.4]["analysis"]
        grippy = results[1.2]["analysis"]

        assert grippy["distance"] > slippery["distance"]
        assert grippy["peak_force"] > slippery["peak_force"]

    def test_command_line_summary(self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
        """Test that the command-line entry point logs a summary per coefficient"""
        monkeypatch.setattr(sys, "argv", ["swerve_simulation.py", "--mu", "0.6", "1.1", "--duration", "0.3"])
        caplog.set_level(logging.INFO)

        main()

        assert "Friction Sweep Results:" in caplog.text
        assert "Friction coefficient: 0.6" in caplog.text
        assert "Friction coefficient: 1.1" in caplog.text
