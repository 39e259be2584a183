"""
Closed-loop replay of a velocity command through the setpoint generator
"""

from dataclasses import dataclass
from typing import Callable, Optional, Union
import numpy as np

from swerve.generator import SetpointGenerator
from swerve.params import SwerveConfig
from swerve.state import BodyVelocity, Setpoint

Command = Union[BodyVelocity, Callable[[float], BodyVelocity]]


@dataclass
class SimulationResult:
    """Per-tick history of a simulated run"""

    time: np.ndarray  # (N,) s
    commands: np.ndarray  # (N, 3) requested [vx, vy, omega]
    body_velocity: np.ndarray  # (N, 3) achieved [vx, vy, omega]
    pose: np.ndarray  # (N, 3) field [x, y, theta]
    module_speeds: np.ndarray  # (N, M) m/s
    module_headings: np.ndarray  # (N, M) rad
    module_forces: np.ndarray  # (N, M) linear feedforward force, N
    interpolation_factor: np.ndarray  # (N,)


def integrate_pose(pose: np.ndarray, twist: BodyVelocity, dt: float) -> np.ndarray:
    """
    Field pose after following twist for dt (pose exponential)

    Args:
        pose: [x, y, theta] in the field frame
        twist: Body velocity held for the tick
        dt: Timestep (s)

    Returns:
        New [x, y, theta]
    """
    dx, dy, dtheta = twist.vx * dt, twist.vy * dt, twist.omega * dt
    if abs(dtheta) < 1e-9:
        s = 1.0 - dtheta**2 / 6.0
        c = 0.5 * dtheta
    else:
        s = np.sin(dtheta) / dtheta
        c = (1.0 - np.cos(dtheta)) / dtheta
    local_x = dx * s - dy * c
    local_y = dx * c + dy * s

    cos_theta, sin_theta = np.cos(pose[2]), np.sin(pose[2])
    return np.array([
        pose[0] + local_x * cos_theta - local_y * sin_theta,
        pose[1] + local_x * sin_theta + local_y * cos_theta,
        pose[2] + dtheta,
    ])


class SwerveSimulator:
    """Feeds every generated setpoint back into the next cycle, like a robot control loop"""

    def __init__(
        self,
        config: SwerveConfig,
        dt: float = 0.02,
        input_voltage: Optional[float] = None,
    ) -> None:
        """
        Initialize simulator

        Args:
            config: Drivetrain configuration
            dt: Control loop period (s)
            input_voltage: Battery voltage (V), nominal when None
        """
        self.config = config
        self.dt = dt
        self.input_voltage = input_voltage
        self.generator = SetpointGenerator(config)

    def simulate(
        self,
        command: Command,
        duration: float = 2.0,
        initial: Optional[Setpoint] = None,
    ) -> SimulationResult:
        """
        Run the generator for duration seconds

        Args:
            command: Constant body velocity, or a function of time returning one
            duration: Simulated time (s)
            initial: Seed setpoint, robot at rest with wheels forward when None

        Returns:
            History of every tick, starting with the seed at t = 0
        """
        setpoint = initial if initial is not None else self.generator.initial_setpoint()
        steps = int(round(duration / self.dt))
        count = steps + 1
        modules = self.config.module_count

        time = np.arange(count) * self.dt
        commands = np.zeros((count, 3))
        body = np.zeros((count, 3))
        pose = np.zeros((count, 3))
        speeds = np.zeros((count, modules))
        headings = np.zeros((count, modules))
        forces = np.zeros((count, modules))
        factors = np.ones(count)

        self._record(0, setpoint, body, speeds, headings, forces, factors)
        for k in range(1, count):
            desired = command(time[k - 1]) if callable(command) else command
            commands[k] = desired.as_array()
            setpoint = self.generator.generate(setpoint, desired, self.dt, self.input_voltage)
            pose[k] = integrate_pose(pose[k - 1], setpoint.body_velocity, self.dt)
            self._record(k, setpoint, body, speeds, headings, forces, factors)
        commands[0] = commands[1] if count > 1 else 0.0

        return SimulationResult(
            time=time,
            commands=commands,
            body_velocity=body,
            pose=pose,
            module_speeds=speeds,
            module_headings=headings,
            module_forces=forces,
            interpolation_factor=factors,
        )

    @staticmethod
    def _record(
        k: int,
        setpoint: Setpoint,
        body: np.ndarray,
        speeds: np.ndarray,
        headings: np.ndarray,
        forces: np.ndarray,
        factors: np.ndarray,
    ) -> None:
        body[k] = setpoint.body_velocity.as_array()
        speeds[k] = [state.speed for state in setpoint.module_states]
        headings[k] = [state.heading for state in setpoint.module_states]
        forces[k] = [force.linear_force for force in setpoint.module_forces]
        factors[k] = setpoint.interpolation_factor
