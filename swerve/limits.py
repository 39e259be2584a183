"""
Per-module feasibility bounds on the interpolation factor

Every bound is a pure function of one module's parameters and the start and
end body velocities; the generator combines them with a minimum.
"""

import logging
from typing import TYPE_CHECKING, Callable, Sequence
import numpy as np
from scipy.optimize import brentq

from swerve.geometry import steer_distance
from swerve.kinematics import module_velocity

if TYPE_CHECKING:
    from swerve.params import SwerveConfig

logger = logging.getLogger(__name__)

SPEED_EPSILON = 1e-9  # m/s, below this a module is stationary
FORCE_TOLERANCE = 1e-6  # N
ANGLE_TOLERANCE = 1e-9  # rad
ROOT_XTOL = 1e-9
MAX_ITERATIONS = 64


def largest_feasible_fraction(
    excess: Callable[[float], float],
    tolerance: float,
    xtol: float = ROOT_XTOL,
    max_iterations: int = MAX_ITERATIONS,
) -> float:
    """
    Largest t in [0, 1] with excess(t) <= 0

    When the constraint is already violated at t = 0 (a robot measured while
    slipping), the bound is instead the largest t that does not make the
    violation worse, so the setpoint can still move back toward feasibility.

    Args:
        excess: Constraint violation at interpolation factor t, feasible when <= 0
        tolerance: Violation accepted at t = 1 so boundary cases pass
        xtol: Absolute tolerance on t
        max_iterations: Iteration cap for the bracketing search

    Returns:
        Interpolation factor bound
    """
    start = excess(0.0)
    if start < 0.0:
        if excess(1.0) <= tolerance:
            return 1.0
        return _crossing(excess, 0.0, 1.0, xtol, max_iterations)

    def growth(t: float) -> float:
        return excess(t) - start

    if growth(1.0) <= tolerance:
        return 1.0

    # The start is a root of growth, so bracket the crossing on a grid
    grid = np.linspace(0.0, 1.0, max_iterations + 1)
    lower = 0.0
    upper = 1.0
    for t in grid[1:]:
        if growth(float(t)) > 0.0:
            upper = float(t)
            break
        lower = float(t)

    if lower == 0.0:
        return 0.0
    if growth(lower) == 0.0:
        return lower
    root = _crossing(growth, lower, upper, xtol, max_iterations)
    if growth(root) > 0.0:
        root = max(lower, root - 2 * xtol)
    logger.debug("Constraint violated at start, relaxing to t=%.6f", root)
    return root


def _crossing(
    excess: Callable[[float], float], lower: float, upper: float, xtol: float, max_iterations: int
) -> float:
    root, result = brentq(
        excess, lower, upper, xtol=xtol, maxiter=max_iterations, full_output=True, disp=False
    )
    if not result.converged:
        logger.debug("Root search stopped after %d iterations at t=%.6f", result.iterations, root)
    return float(np.clip(root, lower, upper))


def apportioned_force(
    config: "SwerveConfig", offset: Sequence[float], body_acceleration: np.ndarray
) -> np.ndarray:
    """
    Force one module must exert for its share of a chassis acceleration

    Each module carries 1/N of the mass for the linear part and 1/N of the
    rotational inertia for the angular part.

    Args:
        config: Drivetrain configuration
        offset: (x, y) module position (m)
        body_acceleration: [ax, ay, alpha]

    Returns:
        [fx, fy] in Newtons, body frame
    """
    force = config.module_mass * np.asarray(body_acceleration[:2], dtype=float)
    radius_squared = offset[0] ** 2 + offset[1] ** 2
    if radius_squared > 1e-12:
        tangent = np.array([-offset[1], offset[0]]) / radius_squared
        force = force + config.moment_of_inertia / config.module_count * body_acceleration[2] * tangent
    return force


def centripetal_force(config: "SwerveConfig", offset: Sequence[float], omega: float) -> np.ndarray:
    """Inward force keeping a module on its circle around the robot center (N)"""
    return -config.module_mass * omega**2 * np.asarray(offset, dtype=float)


def _drive_direction(*candidates: np.ndarray) -> np.ndarray:
    """Unit vector of the first non-zero candidate, zero if there is none"""
    for vector in candidates:
        norm = np.hypot(vector[0], vector[1])
        if norm > SPEED_EPSILON:
            return vector / norm
    return np.zeros(2)


def steering_fraction(
    previous_heading: float,
    start_body: np.ndarray,
    end_body: np.ndarray,
    offset: Sequence[float],
    max_step: float,
) -> float:
    """
    Bound from the steering rate limit for a module already rolling

    Args:
        previous_heading: Heading the module points at now (rad)
        start_body: [vx, vy, omega] at t = 0
        end_body: [vx, vy, omega] at t = 1
        offset: (x, y) module position (m)
        max_step: Largest heading change allowed this tick (rad)
    """
    delta = end_body - start_body

    def excess(t: float) -> float:
        vector = module_velocity(start_body + t * delta, offset)
        if np.hypot(vector[0], vector[1]) < SPEED_EPSILON:
            return -max_step
        heading = float(np.arctan2(vector[1], vector[0]))
        return abs(steer_distance(previous_heading, heading)) - max_step

    return largest_feasible_fraction(excess, ANGLE_TOLERANCE)


def torque_fraction(
    config: "SwerveConfig",
    offset: Sequence[float],
    start_body: np.ndarray,
    end_body: np.ndarray,
    dt: float,
    voltage: float,
) -> float:
    """
    Bound from the drive motor torque-speed curve

    The drive motor supplies the component of the module force along the
    direction of travel. The ceiling is evaluated at the module's current
    speed and differs between speeding up and slowing down.
    """
    delta = end_body - start_body
    start_vector = module_velocity(start_body, offset)
    start_speed = float(np.hypot(start_vector[0], start_vector[1]))
    accelerating_limit, braking_limit = config.motor.drive_force_limits(
        start_speed, config.wheel_radius, voltage
    )

    def excess(t: float) -> float:
        force = apportioned_force(config, offset, t * delta / dt)
        vector = module_velocity(start_body + t * delta, offset)
        tangential = float(force @ _drive_direction(vector, start_vector, force))
        if abs(tangential) < FORCE_TOLERANCE:
            return -max(accelerating_limit, braking_limit)
        if tangential > 0:
            return tangential - accelerating_limit
        return -tangential - braking_limit

    return largest_feasible_fraction(excess, FORCE_TOLERANCE)


def friction_fraction(
    config: "SwerveConfig",
    offset: Sequence[float],
    start_body: np.ndarray,
    end_body: np.ndarray,
    dt: float,
) -> float:
    """
    Bound from tire traction

    Traction is isotropic, so the propulsive force and the centripetal force
    are added as vectors and compared against mu times the module's normal
    force.
    """
    delta = end_body - start_body
    limit = config.friction_force_limit

    def excess(t: float) -> float:
        force = apportioned_force(config, offset, t * delta / dt)
        force = force + centripetal_force(config, offset, start_body[2] + t * delta[2])
        return float(np.hypot(force[0], force[1])) - limit

    return largest_feasible_fraction(excess, FORCE_TOLERANCE)
