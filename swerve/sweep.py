"""
Friction coefficient sweep
"""

from dataclasses import replace
from typing import Any, Dict, Optional

from swerve.analysis import ResponseAnalyzer
from swerve.params import SwerveConfig
from swerve.simulator import Command, SwerveSimulator
from swerve.state import BodyVelocity


def run_friction_sweep(
    coefficients: list[float],
    command: Command = BodyVelocity(3.0, 0.0, 0.0),
    duration: float = 2.0,
    dt: float = 0.02,
    base_config: Optional[SwerveConfig] = None,
    input_voltage: Optional[float] = None,
) -> Dict[float, Dict[str, Any]]:
    """
    Run the same command on drivetrains differing only in tire friction

    Args:
        coefficients: Friction coefficients to simulate
        command: Constant body velocity or function of time
        duration: Simulated time per run (s)
        dt: Control loop period (s)
        base_config: Configuration the coefficients are substituted into
        input_voltage: Battery voltage (V), nominal when None

    Returns:
        Dictionary with results for each coefficient
    """
    base = base_config if base_config is not None else SwerveConfig()
    results: Dict[float, Dict[str, Any]] = {}

    for mu in coefficients:
        config = replace(base, friction_coefficient=mu)
        simulator = SwerveSimulator(config, dt=dt, input_voltage=input_voltage)
        result = simulator.simulate(command, duration=duration)
        analysis = ResponseAnalyzer(config).analyze(result)

        results[mu] = {
            "config": config,
            "result": result,
            "analysis": analysis,
        }

    return results
