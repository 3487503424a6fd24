"""
Climasim Configuration Settings

Simulation tunables with the defaults of the reference appliance.
User-facing settings are loaded from options.json (add-on deployment) or
config.yaml (development); anything missing keeps its default.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

OPTIONS_PATH = "/data/options.json"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config.yaml"


def _camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def _snake_keys(data: dict) -> dict:
    return {_camel_to_snake(k): v for k, v in data.items()}


@dataclass(frozen=True)
class ClimateEnvelope:
    """Outdoor temperature bounds for a location (°C)."""

    min_temp: float
    max_temp: float

    def __post_init__(self):
        if self.min_temp > self.max_temp:
            raise ConfigurationError(
                f"Climate envelope min {self.min_temp} exceeds max {self.max_temp}"
            )


def _default_locations() -> dict[str, ClimateEnvelope]:
    return {
        "Manila, PH": ClimateEnvelope(24, 34),
        "Digos City, PH": ClimateEnvelope(23, 32),
        "Cebu, PH": ClimateEnvelope(25, 33),
        "Davao, PH": ClimateEnvelope(24, 32),
    }


@dataclass(frozen=True)
class ApplianceSpec:
    """Nameplate data of the simulated air-conditioner."""

    model: str = "Fujidenzo 1.0 HP WAR-100IGT"
    eer: float = 11.34
    kj_per_hour: float = 9072
    wattage: float = 1080  # W


@dataclass
class SimulationSettings:
    """Configuration for a simulator instance."""

    tick_interval_seconds: float = 4.0
    history_capacity: int = 72
    tariff_per_kwh: float = 11.7882  # PHP/kWh
    currency: str = "PHP"
    cool_preset_c: float = 17.0  # Desired temp applied when switching to cool
    heat_preset_c: float = 29.0  # Desired temp applied when switching to heat
    default_location: str = "Digos City, PH"
    locations: dict[str, ClimateEnvelope] = field(default_factory=_default_locations)
    appliance: ApplianceSpec = field(default_factory=ApplianceSpec)
    state_path: str | None = None  # JSON state file; None keeps state in memory
    random_seed: int | None = None

    def __post_init__(self):
        if self.tick_interval_seconds <= 0:
            raise ConfigurationError("tick_interval_seconds must be positive")
        if self.history_capacity <= 0:
            raise ConfigurationError("history_capacity must be positive")
        if self.tariff_per_kwh < 0:
            raise ConfigurationError("tariff_per_kwh cannot be negative")
        if self.default_location not in self.locations:
            raise ConfigurationError(f"Unknown default location: {self.default_location}")

    @property
    def ticks_per_hour(self) -> float:
        """Number of ticks in one simulated hour."""
        return 3600.0 / self.tick_interval_seconds

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationSettings":
        """Create from dictionary."""
        converted = _snake_keys(data)

        if "locations" in converted:
            converted["locations"] = {
                name: ClimateEnvelope(**_snake_keys(bounds))
                for name, bounds in converted["locations"].items()
            }
        if "appliance" in converted:
            converted["appliance"] = ApplianceSpec(**_snake_keys(converted["appliance"]))

        try:
            return cls(**converted)
        except TypeError as e:
            raise ConfigurationError(f"Invalid simulation settings: {e}") from e


def load_settings(config_path: str | os.PathLike | None = None) -> SimulationSettings:
    """Load settings from add-on options, a YAML file, or defaults.

    Lookup order: /data/options.json, then `config_path`, then
    $CLIMASIM_CONFIG, then config.yaml at the repository root.
    """
    load_dotenv()

    if os.path.exists(OPTIONS_PATH):
        with open(OPTIONS_PATH) as f:
            options = json.load(f)
        logger.info(f"Loaded settings from {OPTIONS_PATH}")
        return SimulationSettings.from_dict(options.get("simulation", {}))

    path = config_path or os.environ.get("CLIMASIM_CONFIG") or DEFAULT_CONFIG_PATH
    if os.path.exists(path):
        with open(path) as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Loaded settings from {path}")
        return SimulationSettings.from_dict(config.get("options", {}).get("simulation", {}))

    logger.warning("No configuration found, using default simulation settings")
    return SimulationSettings()
