"""
Swerve setpoint generator

Turns a possibly unreachable velocity command into the closest setpoint the
drivetrain can actually achieve within one control cycle.
"""

import logging
from typing import List, Optional, Sequence
import numpy as np

from swerve.errors import InvalidArgumentError
from swerve.geometry import clamp_heading, discretize, optimize_heading, wrap_angle
from swerve.limits import (
    SPEED_EPSILON,
    apportioned_force,
    friction_fraction,
    steering_fraction,
    torque_fraction,
)
from swerve.params import SwerveConfig
from swerve.state import BodyVelocity, ModuleForce, ModuleState, Setpoint

logger = logging.getLogger(__name__)


def _validate(
    config: SwerveConfig,
    previous: Setpoint,
    desired: BodyVelocity,
    dt: float,
    input_voltage: Optional[float],
) -> None:
    if not isinstance(desired, BodyVelocity) or not desired.is_finite():
        raise InvalidArgumentError(f"desired velocity must be a finite BodyVelocity, got {desired!r}")
    if not np.isfinite(dt) or dt <= 0:
        raise InvalidArgumentError(f"dt must be positive and finite, got {dt}")
    if input_voltage is not None and (not np.isfinite(input_voltage) or input_voltage <= 0):
        raise InvalidArgumentError(f"input_voltage must be positive and finite, got {input_voltage}")
    if previous.module_count != config.module_count:
        raise InvalidArgumentError(
            f"previous setpoint has {previous.module_count} modules, configuration has {config.module_count}"
        )
    if not previous.body_velocity.is_finite():
        raise InvalidArgumentError("previous setpoint body velocity must be finite")


def supply_voltage(config: SwerveConfig, input_voltage: Optional[float]) -> float:
    """Voltage the motors can draw on, nominal when unknown and never below brownout"""
    if input_voltage is None:
        return config.motor.nominal_voltage
    return max(input_voltage, config.brownout_voltage)


def generate(
    config: SwerveConfig,
    previous: Setpoint,
    desired: BodyVelocity,
    dt: float,
    input_voltage: Optional[float] = None,
) -> Setpoint:
    """
    Closest feasible setpoint to desired, one tick after previous

    Args:
        config: Drivetrain configuration
        previous: Setpoint returned by the previous call (or a seed)
        desired: Continuous-time body velocity command, not discretized
        dt: Control cycle duration (s)
        input_voltage: Battery voltage (V), nominal voltage when None

    Returns:
        New setpoint; feed it back as previous on the next cycle

    Raises:
        InvalidArgumentError: For non-finite commands or a non-positive dt
    """
    _validate(config, previous, desired, dt, input_voltage)
    voltage = supply_voltage(config, input_voltage)
    kinematics = config.kinematics

    max_module_speed = config.max_module_speed * min(1.0, voltage / config.motor.nominal_voltage)
    target = kinematics.desaturate(discretize(desired, dt), max_module_speed)

    start_body = previous.body_velocity.as_array()
    end_body = target.as_array()
    start_vectors = kinematics.to_module_vectors(previous.body_velocity)
    end_vectors = kinematics.to_module_vectors(target)
    max_step = config.max_steer_velocity * dt

    bounds = [1.0]
    steering_override: List[Optional[float]] = [None] * config.module_count
    for i, offset in enumerate(config.module_offsets):
        previous_heading = previous.module_states[i].heading
        start_speed = float(np.hypot(*start_vectors[i]))
        end_speed = float(np.hypot(*end_vectors[i]))

        if end_speed < SPEED_EPSILON:
            # Direction is arbitrary for a wheel coming to rest
            steering_override[i] = previous_heading
        elif start_speed < SPEED_EPSILON:
            desired_heading = float(np.arctan2(end_vectors[i][1], end_vectors[i][0]))
            heading, reached = clamp_heading(previous_heading, desired_heading, max_step)
            if not reached:
                # Rotate in place before rolling
                steering_override[i] = heading
                bounds.append(0.0)
                logger.debug("Module %d turning in place to %.3f rad", i, heading)
        else:
            bounds.append(steering_fraction(previous_heading, start_body, end_body, offset, max_step))

        bounds.append(torque_fraction(config, offset, start_body, end_body, dt, voltage))
        bounds.append(friction_fraction(config, offset, start_body, end_body, dt))

    t = float(np.clip(min(bounds), 0.0, 1.0))
    if t < 1.0:
        logger.debug("Command limited to interpolation factor %.4f", t)

    return _materialize(config, previous, start_vectors, end_vectors, t, steering_override, max_step, dt)


def _materialize(
    config: SwerveConfig,
    previous: Setpoint,
    start_vectors: np.ndarray,
    end_vectors: np.ndarray,
    t: float,
    steering_override: Sequence[Optional[float]],
    max_step: float,
    dt: float,
) -> Setpoint:
    """Build the setpoint a fraction t of the way from start to end"""
    vectors = start_vectors + t * (end_vectors - start_vectors)
    body = config.kinematics.to_body_velocity(vectors)
    body_acceleration = (body.as_array() - previous.body_velocity.as_array()) / dt

    states: List[ModuleState] = []
    forces: List[ModuleForce] = []
    for i, offset in enumerate(config.module_offsets):
        previous_heading = previous.module_states[i].heading
        vector = vectors[i]
        speed = float(np.hypot(vector[0], vector[1]))

        if speed < SPEED_EPSILON:
            override = steering_override[i]
            heading = previous_heading if override is None else override
            state = ModuleState(0.0, wrap_angle(heading))
        else:
            signed_speed, heading = optimize_heading(
                speed, float(np.arctan2(vector[1], vector[0])), previous_heading
            )
            turn = wrap_angle(heading - previous_heading)
            if abs(turn) > max_step:
                # Only reachable from a seed whose headings disagree with its body velocity
                heading = wrap_angle(previous_heading + np.sign(turn) * max_step)
                signed_speed = float(vector @ np.array([np.cos(heading), np.sin(heading)]))
                logger.debug("Module %d heading clamped to %.3f rad", i, heading)
            state = ModuleState(signed_speed, heading)

        states.append(state)
        forces.append(_feedforward(config, offset, body_acceleration, state, vector - start_vectors[i], dt))

    return Setpoint(
        body_velocity=body,
        module_states=tuple(states),
        module_forces=tuple(forces),
        interpolation_factor=t,
    )


def _feedforward(
    config: SwerveConfig,
    offset: Sequence[float],
    body_acceleration: np.ndarray,
    state: ModuleState,
    velocity_change: np.ndarray,
    dt: float,
) -> ModuleForce:
    direction = np.array([np.cos(state.heading), np.sin(state.heading)])
    linear_force = float(apportioned_force(config, offset, body_acceleration) @ direction)

    # Internal module friction opposes the wheel's motion, or its push when stopped
    motion = state.speed if abs(state.speed) >= SPEED_EPSILON else linear_force
    wheel_torque = linear_force * config.wheel_radius + np.sign(motion) * config.motor.torque_loss
    return ModuleForce(
        acceleration=float(velocity_change @ direction) / dt,
        linear_force=linear_force,
        torque_current=config.motor.current_for_wheel_torque(float(wheel_torque)),
        force_x=linear_force * float(direction[0]),
        force_y=linear_force * float(direction[1]),
    )


class SetpointGenerator:
    """Binds a drivetrain configuration to the setpoint generator"""

    def __init__(self, config: SwerveConfig) -> None:
        self.config = config

    def generate(
        self,
        previous: Setpoint,
        desired: BodyVelocity,
        dt: float,
        input_voltage: Optional[float] = None,
    ) -> Setpoint:
        return generate(self.config, previous, desired, dt, input_voltage)

    def initial_setpoint(
        self,
        body_velocity: Optional[BodyVelocity] = None,
        module_states: Optional[Sequence[ModuleState]] = None,
    ) -> Setpoint:
        """
        Seed setpoint from measured motion

        With no measurements the robot is assumed at rest with wheels forward;
        with module states only, the body velocity is their best fit.
        """
        if module_states is None:
            if body_velocity is None:
                return Setpoint.at_rest(self.config)
            module_states = self.config.kinematics.to_module_states(body_velocity)
        elif body_velocity is None:
            body_velocity = self.config.kinematics.states_to_body_velocity(module_states)
        return Setpoint.from_measured(self.config, body_velocity, module_states)
