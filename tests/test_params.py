"""
Unit tests for drivetrain parameters.

Tests the motor torque-speed model and the validation of SwerveConfig.
"""

import numpy as np
import pytest

from swerve import ConfigurationError, MotorParams, SwerveConfig
from swerve.params import GRAVITY


class TestMotorParams:
    """Test suite for the MotorParams dataclass"""

    @pytest.fixture
    def motor(self) -> MotorParams:
        """Create default motor parameters for testing"""
        return MotorParams()

    def test_stall_current_at_rest(self, motor: MotorParams) -> None:
        """Test that a stalled motor draws stall current at nominal voltage"""
        assert motor.current(0.0, motor.nominal_voltage) == pytest.approx(motor.stall_current)

    def test_free_current_at_free_speed(self, motor: MotorParams) -> None:
        """Test that a motor at free speed draws free current"""
        assert motor.current(motor.free_speed, motor.nominal_voltage) == pytest.approx(motor.free_current)

    def test_wheel_torque_includes_gearing(self, motor: MotorParams) -> None:
        """Test that wheel torque scales with gearing and motor count"""
        dual = MotorParams(num_motors=2)

        assert motor.wheel_torque(10.0) == pytest.approx(motor.kt * 10.0 * motor.gearing)
        assert dual.wheel_torque(10.0) == pytest.approx(2 * motor.wheel_torque(10.0))

    def test_current_for_wheel_torque_inverts_torque(self, motor: MotorParams) -> None:
        """Test that current_for_wheel_torque is the inverse of wheel_torque"""
        assert motor.current_for_wheel_torque(motor.wheel_torque(42.0)) == pytest.approx(42.0)

    def test_force_limits_at_rest_are_current_limited(self, motor: MotorParams) -> None:
        """Test that the current limit caps the force available from rest"""
        radius = 0.05
        accelerating, braking = motor.drive_force_limits(0.0, radius, motor.nominal_voltage)

        expected = motor.wheel_torque(motor.current_limit) / radius
        assert accelerating == pytest.approx(expected)
        assert braking == pytest.approx(expected)

    def test_accelerating_force_falls_with_speed(self, motor: MotorParams) -> None:
        """Test that less force is available for speeding up at higher speed"""
        radius = 0.05
        free = motor.free_wheel_speed * radius
        slow, _ = motor.drive_force_limits(0.5 * free, radius, motor.nominal_voltage)
        fast, _ = motor.drive_force_limits(0.95 * free, radius, motor.nominal_voltage)
        beyond, _ = motor.drive_force_limits(2.0 * free, radius, motor.nominal_voltage)

        assert fast < slow
        assert beyond == 0.0

    def test_torque_loss_splits_accelerating_and_braking(self) -> None:
        """Test that internal friction hurts acceleration and helps braking"""
        radius = 0.05
        lossless = MotorParams()
        lossy = MotorParams(torque_loss=1.0)

        acc0, brake0 = lossless.drive_force_limits(0.0, radius, 12.0)
        acc1, brake1 = lossy.drive_force_limits(0.0, radius, 12.0)

        assert acc1 == pytest.approx(acc0 - 1.0 / radius)
        assert brake1 == pytest.approx(brake0 + 1.0 / radius)

    def test_lower_voltage_reduces_force(self, motor: MotorParams) -> None:
        """Test that a sagging battery reduces the accelerating force"""
        full, _ = motor.drive_force_limits(0.0, 0.05, 12.0)
        sagging, _ = motor.drive_force_limits(0.0, 0.05, 6.0)

        assert sagging < full

    @pytest.mark.parametrize("field,value", [
        ("stall_torque", 0.0),
        ("stall_current", -1.0),
        ("stall_current", float("inf")),
        ("free_speed", float("nan")),
        ("free_speed", float("inf")),
        ("nominal_voltage", float("inf")),
        ("gearing", 0.0),
        ("current_limit", 0.0),
        ("torque_loss", -0.1),
        ("torque_loss", float("inf")),
        ("num_motors", 0),
        ("num_motors", 1.5),
        ("num_motors", float("inf")),
        ("num_motors", float("nan")),
    ])
    def test_invalid_motor_rejected(self, field: str, value: float) -> None:
        """Test that non-physical motor parameters are rejected"""
        with pytest.raises(ConfigurationError):
            MotorParams(**{field: value})

    def test_free_current_above_stall_rejected(self) -> None:
        """Test that free current must be below stall current"""
        with pytest.raises(ConfigurationError):
            MotorParams(free_current=200.0, stall_current=100.0)


class TestSwerveConfig:
    """Test suite for the SwerveConfig dataclass"""

    @pytest.fixture
    def config(self) -> SwerveConfig:
        """Create default drivetrain configuration for testing"""
        return SwerveConfig()

    def test_default_initialization(self, config: SwerveConfig) -> None:
        """Test that SwerveConfig initializes with four modules"""
        assert config.module_count == 4
        assert config.mass == 50.0
        assert config.friction_coefficient == 1.2

    def test_derived_module_quantities(self, config: SwerveConfig) -> None:
        """Test that module mass, normal force and friction limit are derived"""
        assert config.module_mass == pytest.approx(12.5)
        assert config.normal_force == pytest.approx(12.5 * GRAVITY)
        assert config.friction_force_limit == pytest.approx(1.2 * 12.5 * GRAVITY)

    def test_max_module_speed_defaults_to_free_speed(self, config: SwerveConfig) -> None:
        """Test that the module speed limit comes from the motor when not given"""
        expected = config.motor.free_speed / config.motor.gearing * config.wheel_radius
        assert config.max_module_speed == pytest.approx(expected)

        limited = SwerveConfig(max_drive_velocity=3.0)
        assert limited.max_module_speed == 3.0

    def test_offsets_are_frozen_tuples(self) -> None:
        """Test that module offsets given as lists are stored immutably"""
        config = SwerveConfig(module_offsets=[[0.2, 0.2], [-0.2, -0.2]])

        assert config.module_offsets == ((0.2, 0.2), (-0.2, -0.2))
        assert config.kinematics.module_count == 2

    def test_config_is_immutable(self, config: SwerveConfig) -> None:
        """Test that fields cannot be reassigned after construction"""
        with pytest.raises(Exception):
            config.mass = 10.0  # type: ignore[misc]

    def test_no_modules_rejected(self) -> None:
        """Test that a drivetrain without modules is rejected"""
        with pytest.raises(ConfigurationError):
            SwerveConfig(module_offsets=())

    def test_non_finite_offset_rejected(self) -> None:
        """Test that module offsets must be finite"""
        with pytest.raises(ConfigurationError):
            SwerveConfig(module_offsets=((np.inf, 0.0), (0.0, 0.3)))

    @pytest.mark.parametrize("field,value", [
        ("wheel_radius", 0.0),
        ("mass", -50.0),
        ("moment_of_inertia", 0.0),
        ("friction_coefficient", float("nan")),
        ("max_steer_velocity", 0.0),
        ("max_drive_velocity", -1.0),
        ("brownout_voltage", 0.0),
    ])
    def test_non_positive_parameter_rejected(self, field: str, value: float) -> None:
        """Test that physical parameters must be strictly positive"""
        with pytest.raises(ConfigurationError):
            SwerveConfig(**{field: value})

    def test_brownout_above_nominal_rejected(self) -> None:
        """Test that the brownout voltage cannot exceed the nominal voltage"""
        with pytest.raises(ConfigurationError):
            SwerveConfig(brownout_voltage=13.0)

    def test_configuration_error_is_value_error(self) -> None:
        """Test that configuration errors can be caught as ValueError"""
        with pytest.raises(ValueError):
            SwerveConfig(mass=0.0)
