"""
Swerve kinematics: body velocity to module velocities and back
"""

from typing import List, Optional, Sequence, Tuple
import numpy as np

from swerve.geometry import optimize_heading, wrap_angle
from swerve.state import BodyVelocity, ModuleState


def module_velocity(body: np.ndarray, offset: Sequence[float]) -> np.ndarray:
    """
    Velocity of a point mounted at offset on a chassis moving with body

    Args:
        body: [vx, vy, omega]
        offset: (x, y) module position from the robot center (m)

    Returns:
        [vx, vy] of the module (m/s)
    """
    return np.array([body[0] - body[2] * offset[1], body[1] + body[2] * offset[0]])


class SwerveKinematics:
    """Forward and least-squares inverse kinematics for a set of modules"""

    def __init__(self, module_offsets: Sequence[Tuple[float, float]]) -> None:
        """
        Initialize kinematics

        Args:
            module_offsets: (x, y) of every module from the robot center (m)
        """
        self.module_offsets = np.asarray(module_offsets, dtype=float).reshape(-1, 2)
        self.module_count = len(self.module_offsets)

        # Rows 2i and 2i+1 map [vx, vy, omega] to module i's velocity
        self.forward_matrix = np.zeros((2 * self.module_count, 3))
        for i, (x, y) in enumerate(self.module_offsets):
            self.forward_matrix[2 * i] = [1.0, 0.0, -y]
            self.forward_matrix[2 * i + 1] = [0.0, 1.0, x]

    def to_module_vectors(self, body: BodyVelocity) -> np.ndarray:
        """Module velocity vectors, shape (module_count, 2)"""
        return (self.forward_matrix @ body.as_array()).reshape(-1, 2)

    def to_body_velocity(self, module_vectors: np.ndarray) -> BodyVelocity:
        """Best-fit body velocity for the given module velocity vectors"""
        solution, *_ = np.linalg.lstsq(
            self.forward_matrix, np.asarray(module_vectors, dtype=float).reshape(-1), rcond=None
        )
        return BodyVelocity.from_array(solution)

    def to_module_states(
        self, body: BodyVelocity, previous_headings: Optional[Sequence[float]] = None
    ) -> List[ModuleState]:
        """
        Module speeds and headings for a body velocity

        Stationary modules keep their previous heading (or point forward when
        none is given).
        """
        states = []
        for i, vector in enumerate(self.to_module_vectors(body)):
            previous = 0.0 if previous_headings is None else previous_headings[i]
            speed = float(np.hypot(vector[0], vector[1]))
            if speed < 1e-9:
                states.append(ModuleState(0.0, wrap_angle(previous)))
                continue
            heading = float(np.arctan2(vector[1], vector[0]))
            if previous_headings is not None:
                speed, heading = optimize_heading(speed, heading, previous)
            states.append(ModuleState(speed, heading))
        return states

    def states_to_body_velocity(self, states: Sequence[ModuleState]) -> BodyVelocity:
        return self.to_body_velocity(np.array([state.velocity for state in states]))

    def desaturate(self, body: BodyVelocity, max_module_speed: float) -> BodyVelocity:
        """
        Scale body uniformly so no module exceeds max_module_speed

        Args:
            body: Body velocity to limit
            max_module_speed: Fastest allowed module speed (m/s)

        Returns:
            body unchanged when already within the limit, otherwise scaled down
        """
        vectors = self.to_module_vectors(body)
        fastest = float(np.max(np.hypot(vectors[:, 0], vectors[:, 1])))
        if fastest <= max_module_speed:
            return body
        return BodyVelocity.from_array(body.as_array() * (max_module_speed / fastest))
