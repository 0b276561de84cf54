"""WeatherVibe zone weather scheduling package."""

# Define public API
__all__ = [
    "Condition",
    "DayPart",
    "Season",
    "ConfigSource",
    "EngineSettings",
    "WeatherVibeEngine",
    "CommandHandler",
]

# Import models
from .models import Condition, DayPart, Season

# Import settings
from .settings import ConfigSource, EngineSettings

# Import engine and command surface
from .engine import WeatherVibeEngine
from .commands import CommandHandler
