"""
Setpoint data objects passed between control cycles
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Tuple
import numpy as np

from swerve.errors import InvalidArgumentError

if TYPE_CHECKING:
    from swerve.params import SwerveConfig


@dataclass(frozen=True)
class BodyVelocity:
    """Chassis velocity in its own reference frame"""

    vx: float = 0.0  # Forward velocity (m/s)
    vy: float = 0.0  # Leftward velocity (m/s)
    omega: float = 0.0  # Counter-clockwise angular rate (rad/s)

    def as_array(self) -> np.ndarray:
        return np.array([self.vx, self.vy, self.omega], dtype=float)

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.as_array())))

    def interpolate(self, other: "BodyVelocity", t: float) -> "BodyVelocity":
        """Point a fraction t of the way from self to other"""
        return BodyVelocity.from_array(self.as_array() + t * (other.as_array() - self.as_array()))

    @classmethod
    def from_array(cls, values: Sequence[float]) -> "BodyVelocity":
        vx, vy, omega = values
        return cls(float(vx), float(vy), float(omega))


@dataclass(frozen=True)
class ModuleState:
    """Commanded speed and steering heading of one wheel module"""

    speed: float = 0.0  # Signed linear speed (m/s)
    heading: float = 0.0  # Steering angle (rad), wrapped to (-pi, pi]

    @property
    def velocity(self) -> np.ndarray:
        """Module velocity vector in the body frame (m/s)"""
        return self.speed * np.array([np.cos(self.heading), np.sin(self.heading)])


@dataclass(frozen=True)
class ModuleForce:
    """Feedforward for one module, derived from the realized acceleration"""

    acceleration: float = 0.0  # Along the module heading (m/s²)
    linear_force: float = 0.0  # Along the module heading (N)
    torque_current: float = 0.0  # Per-motor current for the wheel torque (A)
    force_x: float = 0.0  # Body-frame x component of linear_force (N)
    force_y: float = 0.0  # Body-frame y component of linear_force (N)


@dataclass(frozen=True)
class Setpoint:
    """
    Motion the drivetrain executes for one control cycle

    body_velocity and module_states describe the same motion; the caller
    keeps the most recent Setpoint and passes it back on the next cycle.
    """

    body_velocity: BodyVelocity
    module_states: Tuple[ModuleState, ...]
    module_forces: Tuple[ModuleForce, ...]
    interpolation_factor: float = 1.0  # Fraction of the requested change achieved

    def __post_init__(self) -> None:
        object.__setattr__(self, "module_states", tuple(self.module_states))
        object.__setattr__(self, "module_forces", tuple(self.module_forces))
        if len(self.module_states) != len(self.module_forces):
            raise InvalidArgumentError(
                f"{len(self.module_states)} module states but {len(self.module_forces)} module forces"
            )

    @property
    def module_count(self) -> int:
        return len(self.module_states)

    @classmethod
    def from_measured(
        cls,
        config: "SwerveConfig",
        body_velocity: BodyVelocity,
        module_states: Sequence[ModuleState],
    ) -> "Setpoint":
        """
        Seed a session from measured drivetrain motion

        Args:
            config: Drivetrain configuration
            body_velocity: Measured chassis velocity
            module_states: Measured speed and heading of every module

        Returns:
            Setpoint with zero feedforward
        """
        if len(module_states) != config.module_count:
            raise InvalidArgumentError(
                f"expected {config.module_count} module states, got {len(module_states)}"
            )
        if not body_velocity.is_finite():
            raise InvalidArgumentError(f"measured body velocity must be finite: {body_velocity}")
        return cls(
            body_velocity=body_velocity,
            module_states=tuple(module_states),
            module_forces=tuple(ModuleForce() for _ in module_states),
        )

    @classmethod
    def at_rest(
        cls, config: "SwerveConfig", headings: Optional[Sequence[float]] = None
    ) -> "Setpoint":
        """Seed a session for a stationary robot, wheels pointing at headings (default forward)"""
        if headings is None:
            headings = [0.0] * config.module_count
        states = [ModuleState(0.0, float(heading)) for heading in headings]
        return cls.from_measured(config, BodyVelocity(), states)
