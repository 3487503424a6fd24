"""
Simple thermal model for the simulated appliance.

Not a physical model. Each tick:
- cool: indoor temperature drops by the cooling rate until it reaches the
  target, never past it
- heat: indoor temperature rises by the heating rate until it reaches the
  target, never past it
- off: indoor temperature is left alone

Rates are 1.0°C/tick when the mode matches the direction and 0.5°C/tick
otherwise. Outdoor temperature is an independent uniform draw inside the
location's climate envelope every tick (no smoothing).
"""

from dataclasses import dataclass

import numpy as np

from .exceptions import UnknownLocationError
from .models import SystemMode
from .settings import ClimateEnvelope
from .units import round_half_away


@dataclass(frozen=True)
class ThermalRates:
    """Per-tick temperature change (°C)."""

    # Rate when the mode drives in this direction
    active_rate: float = 1.0
    # Rate when it does not
    passive_rate: float = 0.5


class ThermalModel:
    """Indoor convergence and outdoor temperature generation."""

    def __init__(
        self,
        locations: dict[str, ClimateEnvelope],
        rng: np.random.Generator | None = None,
        rates: ThermalRates | None = None
    ):
        """Initialize thermal model.

        Args:
            locations: Climate envelope per location name
            rng: Random source for outdoor draws (seed it for reproducible runs)
            rates: Per-tick rates
        """
        self.locations = locations
        self.rng = rng if rng is not None else np.random.default_rng()
        self.rates = rates or ThermalRates()

    def cooling_rate(self, mode: SystemMode) -> float:
        """Degrees removed per tick."""
        return self.rates.active_rate if mode == SystemMode.COOL else self.rates.passive_rate

    def heating_rate(self, mode: SystemMode) -> float:
        """Degrees added per tick."""
        return self.rates.active_rate if mode == SystemMode.HEAT else self.rates.passive_rate

    def step_indoor(self, inside_temp: float, target_temp: float, mode: SystemMode) -> float:
        """Indoor temperature after one tick.

        Args:
            inside_temp: Current indoor temperature (°C)
            target_temp: Effective target (°C)
            mode: Current system mode

        Returns:
            New indoor temperature (°C)
        """
        if mode == SystemMode.COOL and inside_temp > target_temp:
            return max(inside_temp - self.cooling_rate(mode), target_temp)
        if mode == SystemMode.HEAT and inside_temp < target_temp:
            return min(inside_temp + self.heating_rate(mode), target_temp)
        return inside_temp

    def envelope(self, location: str) -> ClimateEnvelope:
        try:
            return self.locations[location]
        except KeyError:
            raise UnknownLocationError(f"No climate envelope for location: {location}") from None

    def draw_outdoor(self, location: str) -> float:
        """Random outdoor temperature for `location`, one decimal place."""
        env = self.envelope(location)
        value = self.rng.uniform(env.min_temp, env.max_temp)
        return round_half_away(value, 1)
