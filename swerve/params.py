"""
Drivetrain physical parameters
"""

from dataclasses import dataclass, field, fields
from functools import cached_property
from typing import Optional, Tuple
import numpy as np

from swerve.errors import ConfigurationError
from swerve.kinematics import SwerveKinematics

GRAVITY = 9.81  # m/s²


@dataclass(frozen=True)
class MotorParams:
    """Drive motor torque-speed characteristic and module gearing"""

    nominal_voltage: float = 12.0  # V
    stall_torque: float = 2.6  # N·m (per motor)
    stall_current: float = 105.0  # A
    free_current: float = 1.8  # A
    free_speed: float = 594.4  # rad/s (5676 rpm)
    num_motors: int = 1  # motors per module
    gearing: float = 6.75  # motor rotations per wheel rotation
    current_limit: float = 60.0  # A (per motor)
    torque_loss: float = 0.0  # N·m at the wheel, internal module friction

    def __post_init__(self) -> None:
        """Validate motor parameters"""
        for name in ("nominal_voltage", "stall_torque", "stall_current", "free_current",
                     "free_speed", "gearing", "current_limit"):
            value = getattr(self, name)
            if not np.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be positive and finite, got {value}")
        if (
            not np.isfinite(self.num_motors)
            or int(self.num_motors) != self.num_motors
            or self.num_motors < 1
        ):
            raise ConfigurationError(f"num_motors must be a positive integer, got {self.num_motors}")
        if not np.isfinite(self.torque_loss) or self.torque_loss < 0:
            raise ConfigurationError(f"torque_loss must be non-negative, got {self.torque_loss}")
        if self.free_current >= self.stall_current:
            raise ConfigurationError("free_current must be smaller than stall_current")

    @property
    def resistance(self) -> float:
        """Winding resistance (ohm)"""
        return self.nominal_voltage / self.stall_current

    @property
    def kv(self) -> float:
        """Velocity constant (rad/s per V)"""
        return self.free_speed / (self.nominal_voltage - self.resistance * self.free_current)

    @property
    def kt(self) -> float:
        """Torque constant (N·m per A)"""
        return self.stall_torque / self.stall_current

    @property
    def free_wheel_speed(self) -> float:
        """Unloaded wheel speed at nominal voltage (rad/s)"""
        return self.free_speed / self.gearing

    def current(self, motor_speed: float, voltage: float) -> float:
        """
        Current drawn by one motor spinning at motor_speed with voltage applied

        Args:
            motor_speed: Motor shaft speed (rad/s)
            voltage: Applied voltage (V), negative to drive against the rotation

        Returns:
            Current (A), unclamped
        """
        return voltage / self.resistance - motor_speed / (self.kv * self.resistance)

    def wheel_torque(self, current: float) -> float:
        """Torque at the wheel produced by every motor drawing current (N·m)"""
        return self.kt * current * self.num_motors * self.gearing

    def current_for_wheel_torque(self, wheel_torque: float) -> float:
        """Per-motor current needed to produce wheel_torque (A)"""
        return wheel_torque / (self.kt * self.num_motors * self.gearing)

    def drive_force_limits(
        self, wheel_speed: float, wheel_radius: float, voltage: float
    ) -> Tuple[float, float]:
        """
        Available force at the carpet for speeding up and for slowing down

        Internal module friction opposes the motor while accelerating and
        helps it while braking.

        Args:
            wheel_speed: Current linear wheel speed (m/s), sign ignored
            wheel_radius: Wheel radius (m)
            voltage: Supply voltage (V)

        Returns:
            Tuple of (accelerating_force, braking_force) in Newtons
        """
        motor_speed = abs(wheel_speed) / wheel_radius * self.gearing
        forward_current = float(np.clip(self.current(motor_speed, voltage), 0.0, self.current_limit))
        reverse_current = min(abs(self.current(motor_speed, -voltage)), self.current_limit)

        accelerating_torque = max(self.wheel_torque(forward_current) - self.torque_loss, 0.0)
        braking_torque = self.wheel_torque(reverse_current) + self.torque_loss
        return accelerating_torque / wheel_radius, braking_torque / wheel_radius


@dataclass(frozen=True)
class SwerveConfig:
    """Physical parameters of a swerve drivetrain, immutable once built"""

    # Module mounting offsets (x forward, y left) from the robot center (m)
    module_offsets: Tuple[Tuple[float, float], ...] = (
        (0.3, 0.3),
        (0.3, -0.3),
        (-0.3, 0.3),
        (-0.3, -0.3),
    )
    wheel_radius: float = 0.0508  # m (2 inch)
    mass: float = 50.0  # kg
    moment_of_inertia: float = 6.0  # kg·m²
    friction_coefficient: float = 1.2  # wheel to carpet
    motor: MotorParams = field(default_factory=MotorParams)
    max_steer_velocity: float = 10.0  # rad/s
    max_drive_velocity: Optional[float] = None  # m/s, defaults to the motor free speed at the wheel
    brownout_voltage: float = 6.0  # V

    def __post_init__(self) -> None:
        """Validate parameters and freeze the module offsets"""
        try:
            offsets = tuple((float(x), float(y)) for x, y in self.module_offsets)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"module_offsets must be (x, y) pairs: {exc}") from exc
        if len(offsets) < 1:
            raise ConfigurationError("at least one swerve module is required")
        if not np.all(np.isfinite(offsets)):
            raise ConfigurationError("module_offsets must be finite")
        object.__setattr__(self, "module_offsets", offsets)

        if not isinstance(self.motor, MotorParams):
            raise ConfigurationError("motor must be a MotorParams instance")

        for f in fields(self):
            if f.name in ("module_offsets", "motor", "max_drive_velocity"):
                continue
            value = getattr(self, f.name)
            if not np.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{f.name} must be positive and finite, got {value}")

        if self.max_drive_velocity is not None and (
            not np.isfinite(self.max_drive_velocity) or self.max_drive_velocity <= 0
        ):
            raise ConfigurationError(
                f"max_drive_velocity must be positive and finite, got {self.max_drive_velocity}"
            )
        if self.brownout_voltage > self.motor.nominal_voltage:
            raise ConfigurationError("brownout_voltage cannot exceed the motor nominal voltage")

    @property
    def module_count(self) -> int:
        return len(self.module_offsets)

    @property
    def module_mass(self) -> float:
        """Share of the robot mass carried by each module (kg)"""
        return self.mass / self.module_count

    @property
    def normal_force(self) -> float:
        """Weight borne by each module (N)"""
        return self.module_mass * GRAVITY

    @property
    def friction_force_limit(self) -> float:
        """Largest horizontal force a module can exert before slipping (N)"""
        return self.friction_coefficient * self.normal_force

    @property
    def max_module_speed(self) -> float:
        """Fastest a module may be commanded at nominal voltage (m/s)"""
        if self.max_drive_velocity is not None:
            return self.max_drive_velocity
        return self.motor.free_wheel_speed * self.wheel_radius

    @cached_property
    def kinematics(self) -> SwerveKinematics:
        return SwerveKinematics(self.module_offsets)
