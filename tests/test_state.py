"""
Unit tests for setpoint data objects.
"""

import numpy as np
import pytest

from swerve import (
    BodyVelocity,
    InvalidArgumentError,
    ModuleForce,
    ModuleState,
    Setpoint,
    SwerveConfig,
)


class TestSetpoint:
    """Test suite for Setpoint construction"""

    @pytest.fixture
    def config(self) -> SwerveConfig:
        return SwerveConfig()

    def test_at_rest_has_zero_motion(self, config: SwerveConfig) -> None:
        """Test that a resting seed has zero velocity and zero feedforward"""
        setpoint = Setpoint.at_rest(config)

        assert setpoint.body_velocity == BodyVelocity()
        assert setpoint.module_count == 4
        assert all(state == ModuleState(0.0, 0.0) for state in setpoint.module_states)
        assert all(force == ModuleForce() for force in setpoint.module_forces)

    def test_at_rest_keeps_headings(self, config: SwerveConfig) -> None:
        """Test that a resting seed keeps the measured wheel headings"""
        setpoint = Setpoint.at_rest(config, headings=[0.1, 0.2, 0.3, 0.4])

        assert [state.heading for state in setpoint.module_states] == [0.1, 0.2, 0.3, 0.4]

    def test_from_measured_wrong_module_count(self, config: SwerveConfig) -> None:
        """Test that seeding with the wrong number of modules is rejected"""
        with pytest.raises(InvalidArgumentError):
            Setpoint.from_measured(config, BodyVelocity(), [ModuleState()] * 3)

    def test_from_measured_non_finite_velocity(self, config: SwerveConfig) -> None:
        """Test that a non-finite measured velocity is rejected"""
        with pytest.raises(InvalidArgumentError):
            Setpoint.from_measured(config, BodyVelocity(np.nan, 0.0, 0.0), [ModuleState()] * 4)

    def test_mismatched_sequences_rejected(self) -> None:
        """Test that module states and forces must have the same length"""
        with pytest.raises(InvalidArgumentError):
            Setpoint(BodyVelocity(), (ModuleState(),) * 4, (ModuleForce(),) * 3)

    def test_module_velocity_vector(self) -> None:
        """Test that a module state exposes its velocity vector"""
        state = ModuleState(-2.0, np.pi / 2)

        assert state.velocity == pytest.approx([0.0, -2.0], abs=1e-12)

    def test_body_velocity_interpolation(self) -> None:
        """Test linear interpolation between body velocities"""
        start = BodyVelocity(0.0, 1.0, 2.0)
        end = BodyVelocity(4.0, 3.0, 0.0)

        assert start.interpolate(end, 0.25) == BodyVelocity(1.0, 1.5, 1.5)
