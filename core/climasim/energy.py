"""
Energy accounting.

While the appliance runs (any mode except off) each tick adds one tick's
worth of its rated draw to the selected room:

    kWh per tick = (wattage / 1000) / ticks_per_hour

ticks_per_hour follows from the tick interval (4 s -> 900), so one
simulated hour of running always adds exactly wattage / 1000 kWh.
Cost is derived from energy on every read and is never stored.
"""

from dataclasses import replace

from .models import SystemMode
from .rooms import RoomState


class EnergyLedger:
    """Accrues energy usage and prices it at a fixed tariff."""

    def __init__(self, wattage_w: float, ticks_per_hour: float, tariff_per_kwh: float):
        """Initialize ledger.

        Args:
            wattage_w: Rated electrical draw of the appliance (W)
            ticks_per_hour: Ticks in one hour for the configured interval
            tariff_per_kwh: Price per kWh
        """
        self.wattage_w = wattage_w
        self.ticks_per_hour = ticks_per_hour
        self.tariff_per_kwh = tariff_per_kwh

    @property
    def hourly_usage_kwh(self) -> float:
        """Energy used by one hour of running (kWh)."""
        return self.wattage_w / 1000.0

    @property
    def kwh_per_tick(self) -> float:
        return self.hourly_usage_kwh / self.ticks_per_hour

    def accrue(self, state: RoomState, mode: SystemMode) -> RoomState:
        """Room state after one tick in `mode`."""
        if mode == SystemMode.OFF:
            return state
        return replace(state, energy_usage_kwh=state.energy_usage_kwh + self.kwh_per_tick)

    def cost(self, state: RoomState) -> float:
        """Cost of the room's accumulated energy."""
        return state.energy_usage_kwh * self.tariff_per_kwh
