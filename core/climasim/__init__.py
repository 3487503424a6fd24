"""Climasim multi-room air-conditioner simulation package."""

# Define public API
__all__ = [
    "ClimateSimulator",
    "SimulationSettings",
    "load_settings",
    "Room",
    "SystemMode",
    "FanSetting",
    "TemperatureUnit",
    "Sample",
    "SimulationContext",
]

# Import settings
from .settings import SimulationSettings, load_settings

# Import models
from .models import FanSetting, Room, Sample, SimulationContext, SystemMode, TemperatureUnit

# Import simulator
from .simulator import ClimateSimulator
