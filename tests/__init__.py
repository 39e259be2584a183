"""
Test suite for the Swerve Drive Setpoint Generator.

This package contains unit tests organized by component:
- test_params.py: Tests for MotorParams and SwerveConfig
- test_state.py: Tests for Setpoint construction
- test_geometry.py: Tests for angle helpers and discretization
- test_kinematics.py: Tests for forward and inverse kinematics
- test_limits.py: Tests for per-module feasibility bounds
- test_generator.py: Tests for the setpoint generator
- test_simulation.py: Tests for closed-loop simulation
- test_analysis.py: Tests for response analysis
- test_integration.py: Integration tests for friction sweeps
"""
