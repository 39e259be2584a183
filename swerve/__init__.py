"""
Swerve Drive Setpoint Generator

This package limits swerve drivetrain velocity commands to what the wheels can
achieve in one control cycle, honoring steering rate, motor torque-speed and
tire friction limits, and simulates the resulting closed-loop response.
"""

from swerve.errors import ConfigurationError, InvalidArgumentError, SwerveError
from swerve.params import MotorParams, SwerveConfig
from swerve.state import BodyVelocity, ModuleForce, ModuleState, Setpoint
from swerve.kinematics import SwerveKinematics
from swerve.generator import SetpointGenerator, generate
from swerve.simulator import SimulationResult, SwerveSimulator
from swerve.analysis import ResponseAnalyzer
from swerve.sweep import run_friction_sweep

__all__ = [
    "ConfigurationError",
    "InvalidArgumentError",
    "SwerveError",
    "MotorParams",
    "SwerveConfig",
    "BodyVelocity",
    "ModuleForce",
    "ModuleState",
    "Setpoint",
    "SwerveKinematics",
    "SetpointGenerator",
    "generate",
    "SimulationResult",
    "SwerveSimulator",
    "ResponseAnalyzer",
    "run_friction_sweep",
]
