"""
WeatherVibe Custom Exceptions

Simple exception hierarchy for error handling.
"""


class WeatherVibeError(Exception):
    """Base exception for WeatherVibe."""

    pass


class ConfigurationError(WeatherVibeError):
    """A configuration value could not be parsed."""

    pass


class CommandError(WeatherVibeError):
    """An administrative command was rejected."""

    pass


class TransportError(WeatherVibeError):
    """The relay could not be reached."""

    pass
