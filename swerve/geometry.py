"""
Angle helpers and twist discretization
"""

import math
from typing import Tuple
import numpy as np

from swerve.state import BodyVelocity


def wrap_angle(angle: float) -> float:
    """
    Wrap an angle to (-pi, pi]

    Args:
        angle: Angle in radians

    Returns:
        Equivalent angle in (-pi, pi]
    """
    wrapped = math.remainder(angle, 2 * np.pi)
    if wrapped <= -np.pi:
        wrapped += 2 * np.pi
    return wrapped


def steer_distance(from_heading: float, to_heading: float) -> float:
    """
    Shortest signed steering move from from_heading to reach to_heading's line

    A module may reverse its drive direction instead of turning past a
    right angle, so headings half a turn apart need no steering at all.

    Returns:
        Signed rotation in (-pi/2, pi/2]
    """
    delta = wrap_angle(to_heading - from_heading)
    if delta > np.pi / 2:
        delta -= np.pi
    elif delta <= -np.pi / 2:
        delta += np.pi
    return delta


def clamp_heading(previous_heading: float, desired_heading: float, max_step: float) -> Tuple[float, bool]:
    """
    Move from previous_heading toward desired_heading by at most max_step

    Returns:
        Tuple of (heading, reached) where reached is False when the step was clamped
    """
    delta = steer_distance(previous_heading, desired_heading)
    if abs(delta) <= max_step:
        return wrap_angle(previous_heading + delta), True
    return wrap_angle(previous_heading + np.sign(delta) * max_step), False


def optimize_heading(speed: float, heading: float, previous_heading: float) -> Tuple[float, float]:
    """
    Pick the speed sign and heading that minimize steering travel

    Reversal is only chosen when strictly shorter; a right-angle tie keeps
    the direct heading.

    Args:
        speed: Non-negative speed along heading (m/s)
        heading: Direction of travel (rad)
        previous_heading: Heading the module currently points at (rad)

    Returns:
        Tuple of (signed_speed, heading)
    """
    delta = wrap_angle(heading - previous_heading)
    if abs(delta) > np.pi / 2:
        return -speed, wrap_angle(heading + np.pi)
    return speed, wrap_angle(heading)


def discretize(velocity: BodyVelocity, dt: float) -> BodyVelocity:
    """
    Twist that reaches, in exactly dt, the pose the continuous command describes

    Holding vx, vy and omega constant for dt moves the robot along an arc;
    commanding the returned twist instead ends the tick at the displacement
    (vx*dt, vy*dt, omega*dt) the caller asked for.

    Args:
        velocity: Desired continuous-time body velocity
        dt: Timestep (s)

    Returns:
        Discretized body velocity
    """
    dx = velocity.vx * dt
    dy = velocity.vy * dt
    dtheta = wrap_angle(velocity.omega * dt)

    half_dtheta = dtheta / 2
    cos_minus_one = np.cos(dtheta) - 1
    if abs(cos_minus_one) < 1e-9:
        half_theta_by_tan = 1.0 - dtheta**2 / 12
    else:
        half_theta_by_tan = -(half_dtheta * np.sin(dtheta)) / cos_minus_one

    # Pose log: rotate the translation by -dtheta/2 and rescale
    twist_dx = dx * half_theta_by_tan + dy * half_dtheta
    twist_dy = dy * half_theta_by_tan - dx * half_dtheta
    return BodyVelocity(float(twist_dx / dt), float(twist_dy / dt), float(dtheta / dt))
