"""
State Persistence

The simulator persists to an opaque key-value store of strings:

    roomData        JSON: room -> {history: [...], energy_usage_kwh}
    scheduledTemps  JSON: room -> {hour: temp_c}
    darkMode        JSON boolean
    tempUnit        raw string, "C" or "F"
    selectedRoom    raw string, room identifier

Values are validated with pydantic on load. A missing or malformed entry is
reported as None and the caller keeps its default; nothing is raised.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .exceptions import PersistenceError
from .history import DEFAULT_CAPACITY, HistoryBuffer
from .models import Room, Sample, TemperatureUnit
from .rooms import RoomRegistry, RoomState
from .schedule import ScheduleStore
from .units import MAX_TEMP_C, MIN_TEMP_C

logger = logging.getLogger(__name__)

ROOM_DATA_KEY = "roomData"
SCHEDULE_KEY = "scheduledTemps"
DARK_MODE_KEY = "darkMode"
TEMP_UNIT_KEY = "tempUnit"
SELECTED_ROOM_KEY = "selectedRoom"

ALL_KEYS = (ROOM_DATA_KEY, SCHEDULE_KEY, DARK_MODE_KEY, TEMP_UNIT_KEY, SELECTED_ROOM_KEY)


class KeyValueStore(ABC):
    """String key-value storage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Stored value, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`."""


class MemoryStore(KeyValueStore):
    """In-process store; contents are lost on exit."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self.lock:
            return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        with self.lock:
            self.data[key] = value


class JsonFileStore(KeyValueStore):
    """All keys in one JSON object on disk.

    The file is read once on construction. Writes rewrite the whole file via
    a temporary file and os.replace, so a crash never leaves it half written.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = os.fspath(path)
        self.lock = threading.Lock()
        self.data: dict[str, str] = self._read()

    def _read(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.debug(f"Ignoring unreadable state file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.debug(f"Ignoring state file {self.path}: not a JSON object")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        with self.lock:
            return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        with self.lock:
            self.data[key] = value
            snapshot = dict(self.data)
            directory = os.path.dirname(os.path.abspath(self.path))
            try:
                os.makedirs(directory, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            except OSError as e:
                raise PersistenceError(f"Failed to write {self.path}: {e}") from e
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(snapshot, f)
                os.replace(tmp_path, self.path)
            except OSError as e:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise PersistenceError(f"Failed to write {self.path}: {e}") from e


FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]


class SampleRecord(BaseModel):
    timestamp: datetime
    inside_temp_c: FiniteFloat
    outside_temp_c: FiniteFloat
    target_temp_c: FiniteFloat


class RoomRecord(BaseModel):
    history: list[SampleRecord] = []
    energy_usage_kwh: float = Field(default=0.0, ge=0, allow_inf_nan=False)


Hour = Annotated[int, Field(ge=0, le=23)]
# Scheduled setpoints are stored in Celsius and must stay in the setpoint range
Setpoint = Annotated[float, Field(ge=MIN_TEMP_C, le=MAX_TEMP_C, allow_inf_nan=False)]

_room_data_adapter = TypeAdapter(dict[Room, RoomRecord])
_schedule_adapter = TypeAdapter(dict[Room, dict[Hour, Setpoint]])
_bool_adapter = TypeAdapter(bool)


@dataclass
class PersistedState:
    """What was recovered from the store; None means use the default."""

    rooms: RoomRegistry | None = None
    schedule: ScheduleStore | None = None
    dark_mode: bool | None = None
    unit: TemperatureUnit | None = None
    selected_room: Room | None = None


def dump_room_data(rooms: RoomRegistry) -> str:
    return json.dumps({
        room.value: {
            "history": state.history.to_list(),
            "energy_usage_kwh": state.energy_usage_kwh,
        }
        for room, state in rooms.items()
    })


def dump_schedule(schedule: ScheduleStore) -> str:
    return json.dumps(schedule.to_dict())


def dump_dark_mode(dark_mode: bool) -> str:
    return json.dumps(dark_mode)


def load_room_data(raw: str, history_capacity: int = DEFAULT_CAPACITY) -> RoomRegistry:
    """Parse `roomData`; history beyond capacity keeps the newest samples.

    Raises:
        pydantic.ValidationError: If the value is malformed
    """
    records = _room_data_adapter.validate_json(raw)
    states = {
        room: RoomState(
            history=HistoryBuffer(
                (Sample(**s.model_dump()) for s in record.history),
                capacity=history_capacity,
            ),
            energy_usage_kwh=record.energy_usage_kwh,
        )
        for room, record in records.items()
    }
    return RoomRegistry(states, history_capacity)


def load_schedule(raw: str) -> ScheduleStore:
    """Parse `scheduledTemps`.

    Raises:
        pydantic.ValidationError: If the value is malformed
    """
    return ScheduleStore.from_dict(_schedule_adapter.validate_json(raw))


def _recover(store: KeyValueStore, key: str, parse):
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return parse(raw)
    except (ValidationError, ValueError) as e:
        logger.debug(f"Discarding malformed '{key}' entry: {e}")
        return None


def load_state(store: KeyValueStore, history_capacity: int = DEFAULT_CAPACITY) -> PersistedState:
    """Read every persisted key once, substituting None for bad entries."""
    return PersistedState(
        rooms=_recover(store, ROOM_DATA_KEY, lambda raw: load_room_data(raw, history_capacity)),
        schedule=_recover(store, SCHEDULE_KEY, load_schedule),
        dark_mode=_recover(store, DARK_MODE_KEY, _bool_adapter.validate_json),
        unit=_recover(store, TEMP_UNIT_KEY, TemperatureUnit),
        selected_room=_recover(store, SELECTED_ROOM_KEY, Room),
    )
