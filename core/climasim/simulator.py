"""
Climate Simulator Service

Owns the current simulation state and exposes the user-facing controls.
Inputs are validated here, before they reach the schedule or the thermal
model. Every mutation that touches a persisted key queues a write to the
key-value store; writes run on a single background thread in submission
order and never hold up a tick.
"""

import asyncio
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime

import numpy as np

from .clock import SimulationClock
from .energy import EnergyLedger
from .engine import SimulationState, advance, effective_target
from .exceptions import InvalidHourError, TemperatureOutOfRangeError
from .models import (
    FanSetting,
    Room,
    Sample,
    SimulationContext,
    SystemMode,
    TemperatureUnit,
)
from .persistence import (
    DARK_MODE_KEY,
    ROOM_DATA_KEY,
    SCHEDULE_KEY,
    SELECTED_ROOM_KEY,
    TEMP_UNIT_KEY,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    dump_dark_mode,
    dump_room_data,
    dump_schedule,
    load_state,
)
from .rooms import RoomRegistry
from .schedule import ScheduleStore
from .settings import SimulationSettings
from .thermal_model import ThermalModel
from .units import bounds, from_display

logger = logging.getLogger(__name__)


class ClimateSimulator:
    """
    Multi-room air-conditioner simulation.

    Holds:
    - SimulationState (context + per-room registry), replaced whole on each tick
    - ScheduleStore with hourly setpoints per room
    - ThermalModel and EnergyLedger used by the tick
    - SimulationClock driving `tick` in the background
    - KeyValueStore the state is persisted to
    """

    def __init__(
        self,
        settings: SimulationSettings | None = None,
        store: KeyValueStore | None = None,
        rng: np.random.Generator | None = None
    ):
        """Initialize simulator and restore persisted state.

        Args:
            settings: Simulation settings (defaults if None)
            store: Persistence store (JSON file at settings.state_path, else memory)
            rng: Random source for outdoor temperatures
        """
        self.settings = settings or SimulationSettings()
        if store is None:
            store = JsonFileStore(self.settings.state_path) if self.settings.state_path else MemoryStore()
        self.store = store

        self.thermal = ThermalModel(
            self.settings.locations,
            rng if rng is not None else np.random.default_rng(self.settings.random_seed),
        )
        self.ledger = EnergyLedger(
            wattage_w=self.settings.appliance.wattage,
            ticks_per_hour=self.settings.ticks_per_hour,
            tariff_per_kwh=self.settings.tariff_per_kwh,
        )

        persisted = load_state(self.store, self.settings.history_capacity)
        context = SimulationContext(location=self.settings.default_location)
        if persisted.selected_room is not None:
            context = context.with_changes(selected_room=persisted.selected_room)
        if persisted.unit is not None:
            context = context.with_changes(unit=persisted.unit)
        if persisted.dark_mode is not None:
            context = context.with_changes(dark_mode=persisted.dark_mode)

        self.state = SimulationState(
            context=context,
            rooms=persisted.rooms or RoomRegistry(history_capacity=self.settings.history_capacity),
        )
        self.schedule = persisted.schedule or ScheduleStore()

        self.clock = SimulationClock(self.tick, self.settings.tick_interval_seconds)
        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="climasim-persist")

    @property
    def context(self) -> SimulationContext:
        return self.state.context

    @property
    def rooms(self) -> RoomRegistry:
        return self.state.rooms

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self):
        """Start the background clock."""
        await self.clock.start()

    async def stop(self):
        """Stop the clock and wait for queued writes to finish."""
        await self.clock.stop()
        await asyncio.to_thread(self.flush)

    def close(self):
        """Flush pending writes and release the writer thread."""
        self._writer.shutdown(wait=True)

    def flush(self):
        """Block until every queued write has run."""
        self._writer.submit(lambda: None).result()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self, now: datetime | None = None) -> SimulationState:
        """Advance the simulation by one tick."""
        if now is None:
            now = datetime.now().astimezone()
        self.state = advance(self.state, self.schedule, self.thermal, self.ledger, now)
        self._persist(ROOM_DATA_KEY)
        return self.state

    def effective_target(self, now: datetime | None = None) -> float:
        """Target temperature for the selected room at `now` (°C)."""
        if now is None:
            now = datetime.now().astimezone()
        return effective_target(self.context, self.schedule, now)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def select_room(self, room: Room | str) -> None:
        """Make `room` the one that receives subsequent ticks."""
        room = Room(room)
        self._update_context(selected_room=room)
        logger.info(f"Selected room: {room.value}")
        self._persist(SELECTED_ROOM_KEY)

    def select_location(self, location: str) -> None:
        """Switch the climate envelope used for outdoor temperatures."""
        self.thermal.envelope(location)
        self._update_context(location=location)
        logger.info(f"Selected location: {location}")

    def set_mode(self, mode: SystemMode | str) -> None:
        """Change system mode; cool and heat also preset the desired temperature."""
        mode = SystemMode(mode)
        changes = {"mode": mode}
        if mode == SystemMode.COOL:
            changes["desired_temp_c"] = self.settings.cool_preset_c
        elif mode == SystemMode.HEAT:
            changes["desired_temp_c"] = self.settings.heat_preset_c
        self._update_context(**changes)
        logger.info(f"Mode set to {mode.value} (desired {self.context.desired_temp_c}°C)")

    def set_fan(self, fan: FanSetting | str) -> None:
        self._update_context(fan=FanSetting(fan))

    def set_unit(self, unit: TemperatureUnit | str) -> None:
        """Change the display unit; stored temperatures are unaffected."""
        self._update_context(unit=TemperatureUnit(unit))
        self._persist(TEMP_UNIT_KEY)

    def set_desired_temperature(self, value: float, unit: TemperatureUnit | str | None = None) -> float:
        """Set the manual desired temperature.

        Args:
            value: Temperature in `unit`
            unit: Unit of `value` (defaults to the display unit)

        Returns:
            Stored desired temperature (°C)

        Raises:
            TemperatureOutOfRangeError: If `value` is outside the unit's range
        """
        temp_c = self._validated_celsius(value, unit)
        self._update_context(desired_temp_c=temp_c)
        logger.info(f"Desired temperature set to {temp_c}°C")
        return temp_c

    def set_scheduled_temperature(
        self,
        hour: int,
        value: float,
        unit: TemperatureUnit | str | None = None,
        room: Room | str | None = None
    ) -> float:
        """Schedule a setpoint for one hour of the day.

        Args:
            hour: Hour of day (0-23)
            value: Temperature in `unit`
            unit: Unit of `value` (defaults to the display unit)
            room: Room to schedule (defaults to the selected room)

        Returns:
            Stored setpoint (°C)

        Raises:
            InvalidHourError: If `hour` is not an integer in 0-23
            TemperatureOutOfRangeError: If `value` is outside the unit's range
        """
        self._validate_hour(hour)
        temp_c = self._validated_celsius(value, unit)
        room = Room(room) if room is not None else self.context.selected_room
        self.schedule.set(room, hour, temp_c)
        logger.info(f"Scheduled {temp_c}°C at {hour:02d}:00 for {room.value}")
        self._persist(SCHEDULE_KEY)
        return temp_c

    def remove_scheduled_temperature(self, hour: int, room: Room | str | None = None) -> None:
        """Remove the setpoint for one hour; no-op if none is set."""
        self._validate_hour(hour)
        room = Room(room) if room is not None else self.context.selected_room
        self.schedule.remove(room, hour)
        self._persist(SCHEDULE_KEY)

    def toggle_dark_mode(self) -> bool:
        """Flip the dark-mode preference (no effect on the simulation)."""
        self._update_context(dark_mode=not self.context.dark_mode)
        self._persist(DARK_MODE_KEY)
        return self.context.dark_mode

    def reset_room(self, room: Room | str | None = None) -> None:
        """Clear a room's history and energy usage."""
        room = Room(room) if room is not None else self.context.selected_room
        self.state = SimulationState(self.context, self.rooms.reset(room))
        logger.info(f"Reset history and energy for {room.value}")
        self._persist(ROOM_DATA_KEY)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def history(self, room: Room | str | None = None) -> tuple[Sample, ...]:
        """Charted samples for a room (selected room by default)."""
        room = Room(room) if room is not None else self.context.selected_room
        return self.rooms.query(room)

    def energy(self, room: Room | str | None = None) -> dict:
        """Energy usage and derived cost for a room."""
        room = Room(room) if room is not None else self.context.selected_room
        state = self.rooms[room]
        return {
            "room": room.value,
            "energy_usage_kwh": state.energy_usage_kwh,
            "cost": self.ledger.cost(state),
            "currency": self.settings.currency,
        }

    def snapshot(self) -> dict:
        """Current readings for the selected room, all in Celsius."""
        state = self.state
        ctx = state.context
        latest = state.rooms[ctx.selected_room].history.latest()
        return {
            "room": ctx.selected_room.value,
            "mode": ctx.mode.value,
            "fan": ctx.fan.value,
            "unit": ctx.unit.value,
            "location": ctx.location,
            "dark_mode": ctx.dark_mode,
            "desired_temp_c": ctx.desired_temp_c,
            "inside_temp_c": ctx.inside_temp_c,
            "outside_temp_c": ctx.outside_temp_c,
            "target_temp_c": self.effective_target(),
            "timestamp": latest.timestamp.isoformat() if latest else None,
            **{k: v for k, v in self.energy(ctx.selected_room).items() if k != "room"},
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _update_context(self, **changes):
        self.state = SimulationState(self.context.with_changes(**changes), self.rooms)

    @staticmethod
    def _validate_hour(hour) -> None:
        if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour <= 23:
            raise InvalidHourError(hour)

    def _validated_celsius(self, value: float, unit: TemperatureUnit | str | None) -> float:
        unit = TemperatureUnit(unit) if unit is not None else self.context.unit
        low, high = bounds(unit)
        if not low <= value <= high:
            raise TemperatureOutOfRangeError(value, unit.value, low, high)
        return from_display(value, unit)

    def _serialize(self, key: str) -> str:
        ctx = self.context
        if key == ROOM_DATA_KEY:
            return dump_room_data(self.rooms)
        if key == SCHEDULE_KEY:
            return dump_schedule(self.schedule)
        if key == DARK_MODE_KEY:
            return dump_dark_mode(ctx.dark_mode)
        if key == TEMP_UNIT_KEY:
            return ctx.unit.value
        if key == SELECTED_ROOM_KEY:
            return ctx.selected_room.value
        raise KeyError(key)

    def _persist(self, key: str) -> None:
        """Queue a write of `key`; the value is captured now."""
        payload = self._serialize(key)
        future = self._writer.submit(self.store.set, key, payload)
        future.add_done_callback(lambda f, key=key: self._log_write_failure(key, f))

    @staticmethod
    def _log_write_failure(key: str, future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error(f"Failed to persist '{key}': {exc}")
