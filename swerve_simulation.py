"""
Swerve Drive Setpoint Generator Simulation

Replays a velocity command through the setpoint generator for a range of tire
friction coefficients and prints how each drivetrain responds.
"""

import argparse
import logging

from swerve import BodyVelocity, run_friction_sweep


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show generator debug records with timestamps.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")


def main() -> None:
    parser = argparse.ArgumentParser(description="Swerve setpoint generator friction sweep")
    parser.add_argument("--mu", type=float, nargs="+", default=[0.5, 0.8, 1.2, 1.6],
                        help="Friction coefficients to simulate")
    parser.add_argument("--vx", type=float, default=3.0, help="Commanded forward velocity (m/s)")
    parser.add_argument("--vy", type=float, default=0.0, help="Commanded leftward velocity (m/s)")
    parser.add_argument("--omega", type=float, default=0.0, help="Commanded angular rate (rad/s)")
    parser.add_argument("--duration", type=float, default=2.0, help="Simulated time (s)")
    parser.add_argument("--dt", type=float, default=0.02, help="Control loop period (s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    setup_logging(args.verbose)
    command = BodyVelocity(args.vx, args.vy, args.omega)
    results = run_friction_sweep(args.mu, command=command, duration=args.duration, dt=args.dt)

    logging.info("Friction Sweep Results:")
    logging.info("-" * 80)
    for mu, data in results.items():
        analysis = data["analysis"]
        logging.info(f"\nFriction coefficient: {mu}")
        logging.info(f"  Rise time: {analysis['rise_time']:.3f} s")
        logging.info(f"  Final velocity error: {analysis['final_error']:.4f}")
        logging.info(f"  Limited ticks: {analysis['limited_fraction']*100:.1f}%")
        logging.info(f"  Peak module force: {analysis['peak_force']:.1f} N")
        logging.info(f"  Friction utilization: {analysis['friction_utilization']*100:.1f}%")
        logging.info(f"  Max steer rate: {analysis['max_steer_rate']:.2f} rad/s")
        logging.info(f"  Distance travelled: {analysis['distance']:.3f} m")


if __name__ == "__main__":
    main()
