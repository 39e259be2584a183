"""
Exceptions raised by the swerve setpoint generator
"""


class SwerveError(Exception):
    """Base class for swerve generator errors"""


class ConfigurationError(SwerveError, ValueError):
    """Raised when a drivetrain configuration is physically invalid"""


class InvalidArgumentError(SwerveError, ValueError):
    """Raised when a per-cycle call receives a malformed argument"""
