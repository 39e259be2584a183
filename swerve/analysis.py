"""
Response analysis of simulated runs
"""

from typing import Any, Dict
import numpy as np

from swerve.geometry import wrap_angle
from swerve.params import SwerveConfig
from swerve.simulator import SimulationResult


class ResponseAnalyzer:
    """Summarizes how closely and how hard the drivetrain followed a command"""

    def __init__(self, config: SwerveConfig, settle_fraction: float = 0.9) -> None:
        """
        Initialize response analyzer

        Args:
            config: Drivetrain configuration used for the run
            settle_fraction: Fraction of the commanded speed counted as reached
        """
        self.config = config
        self.settle_fraction = settle_fraction

    def analyze(self, result: SimulationResult) -> Dict[str, Any]:
        """
        Analyze a simulated run

        Args:
            result: History returned by SwerveSimulator.simulate

        Returns:
            Dictionary with response metrics
        """
        t = result.time
        dt = float(t[1] - t[0]) if len(t) > 1 else 0.0

        achieved_speed = np.hypot(result.body_velocity[:, 0], result.body_velocity[:, 1])
        commanded_speed = np.hypot(result.commands[:, 0], result.commands[:, 1])
        final_error = float(np.linalg.norm(result.body_velocity[-1] - result.commands[-1]))

        # First tick at which the chassis reaches the settle fraction of the command
        reached = np.nonzero(
            (commanded_speed > 0) & (achieved_speed >= self.settle_fraction * commanded_speed)
        )[0]
        rise_time = float(t[reached[0]]) if len(reached) > 0 else float("nan")

        factors = result.interpolation_factor[1:]
        limited_fraction = float(np.mean(factors < 1.0)) if len(factors) > 0 else 0.0
        mean_factor = float(np.mean(factors)) if len(factors) > 0 else 1.0

        peak_force = float(np.max(np.abs(result.module_forces))) if result.module_forces.size else 0.0
        friction_utilization = peak_force / self.config.friction_force_limit

        if len(t) > 1 and dt > 0:
            heading_steps = np.vectorize(wrap_angle)(np.diff(result.module_headings, axis=0))
            max_steer_rate = float(np.max(np.abs(heading_steps))) / dt
        else:
            max_steer_rate = 0.0
        steer_rate_ok = max_steer_rate <= self.config.max_steer_velocity * (1 + 1e-6)

        path = np.diff(result.pose[:, :2], axis=0)
        distance = float(np.sum(np.hypot(path[:, 0], path[:, 1]))) if len(path) > 0 else 0.0

        return {
            "final_error": final_error,
            "rise_time": rise_time,
            "mean_interpolation_factor": mean_factor,
            "limited_fraction": limited_fraction,
            "peak_force": peak_force,
            "friction_utilization": friction_utilization,
            "max_steer_rate": max_steer_rate,
            "steer_rate_ok": bool(steer_rate_ok),
            "distance": distance,
        }
