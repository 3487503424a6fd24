"""
Hourly temperature schedule.

Each room maps hour-of-day (0-23) to a setpoint in Celsius. An hour without
an entry falls back to the manually set desired temperature.

Hours are not validated here; callers reject out-of-range values before
they reach the store.
"""

import logging
from typing import Optional

from .models import Room

logger = logging.getLogger(__name__)


class ScheduleStore:
    """Per-room hour -> setpoint mapping."""

    def __init__(self, entries: dict[Room, dict[int, float]] | None = None):
        self._entries: dict[Room, dict[int, float]] = {room: {} for room in Room}
        for room, hours in (entries or {}).items():
            self._entries[Room(room)] = {int(h): float(t) for h, t in hours.items()}

    def get(self, room: Room, hour: int) -> Optional[float]:
        """Scheduled setpoint for `hour`, or None."""
        return self._entries[room].get(hour)

    def set(self, room: Room, hour: int, temp_c: float) -> None:
        """Schedule `temp_c` at `hour`, replacing any existing entry."""
        self._entries[room][hour] = float(temp_c)
        logger.debug(f"Scheduled {room.value} {hour:02d}:00 -> {temp_c}°C")

    def remove(self, room: Room, hour: int) -> None:
        """Drop the entry for `hour`; nothing happens if there is none."""
        if self._entries[room].pop(hour, None) is not None:
            logger.debug(f"Removed schedule for {room.value} {hour:02d}:00")

    def resolve_effective_target(
        self,
        room: Room,
        hour: int,
        manual_desired_temp_c: float
    ) -> float:
        """Setpoint the thermal model should work toward this hour.

        Args:
            room: Room to resolve for
            hour: Hour of day (0-23)
            manual_desired_temp_c: Desired temperature used when nothing is scheduled

        Returns:
            Target temperature (°C)
        """
        scheduled = self._entries[room].get(hour)
        return scheduled if scheduled is not None else manual_desired_temp_c

    def entries(self, room: Room) -> dict[int, float]:
        """Copy of a room's schedule, sorted by hour."""
        return dict(sorted(self._entries[room].items()))

    def to_dict(self) -> dict[str, dict[str, float]]:
        """Serializable form (JSON object keys must be strings)."""
        return {
            room.value: {str(hour): temp for hour, temp in sorted(hours.items())}
            for room, hours in self._entries.items()
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScheduleStore":
        """Create from the serialized form produced by `to_dict`."""
        return cls({Room(room): hours for room, hours in data.items()})
