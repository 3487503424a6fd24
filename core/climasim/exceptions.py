"""
Climasim Custom Exceptions

Simple exception hierarchy for error handling.
"""


class ClimasimError(Exception):
    """Base exception for Climasim."""

    pass


class ConfigurationError(ClimasimError):
    """Configuration is invalid."""

    pass


class ValidationError(ClimasimError):
    """User input was rejected at the control boundary."""

    pass


class InvalidHourError(ValidationError):
    """Hour of day is outside 0-23."""

    def __init__(self, hour):
        super().__init__(f"Hour must be an integer between 0 and 23, got {hour!r}")
        self.hour = hour


class TemperatureOutOfRangeError(ValidationError):
    """Temperature is outside the allowed setpoint range."""

    def __init__(self, value, unit, low, high):
        super().__init__(f"Temperature {value}°{unit} is outside {low}-{high}°{unit}")
        self.value = value
        self.unit = unit
        self.low = low
        self.high = high


class UnknownLocationError(ClimasimError):
    """Location has no configured climate envelope."""

    pass


class PersistenceError(ClimasimError):
    """Key-value store could not be read or written."""

    pass
