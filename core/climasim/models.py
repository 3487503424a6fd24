"""
Climasim Data Models

Enumerations and value types shared by the simulation engine.
All temperatures are stored in Celsius.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum


class Room(StrEnum):
    """Rooms tracked by the simulator."""

    BEDROOM = "bedroom"
    LIVING_ROOM = "livingroom"
    MASTER_BEDROOM = "masterbedroom"
    DINING_ROOM = "diningroom"


class SystemMode(StrEnum):
    """Operating mode of the appliance."""

    OFF = "off"
    COOL = "cool"
    HEAT = "heat"


class FanSetting(StrEnum):
    """Fan setting (display only, no effect on the simulation)."""

    AUTO = "auto"
    ON = "on"


class TemperatureUnit(StrEnum):
    """Display unit for temperatures."""

    CELSIUS = "C"
    FAHRENHEIT = "F"


@dataclass(frozen=True, slots=True)
class Sample:
    """A single charted reading for one room."""

    timestamp: datetime
    inside_temp_c: float
    outside_temp_c: float
    target_temp_c: float


@dataclass(frozen=True)
class SimulationContext:
    """Global control state of the simulator.

    The inside/outside readings belong to whichever room is selected;
    they are not tracked per room.
    """

    selected_room: Room = Room.BEDROOM
    mode: SystemMode = SystemMode.OFF
    fan: FanSetting = FanSetting.AUTO
    unit: TemperatureUnit = TemperatureUnit.CELSIUS
    location: str = "Digos City, PH"
    desired_temp_c: float = 24.0
    inside_temp_c: float = 24.0
    outside_temp_c: float = 30.0
    dark_mode: bool = False

    def with_changes(self, **changes) -> "SimulationContext":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
