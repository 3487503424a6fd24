"""Shared fixtures for Climasim tests."""

from datetime import datetime, timezone

import numpy as np
import pytest

from core.climasim.energy import EnergyLedger
from core.climasim.persistence import MemoryStore
from core.climasim.schedule import ScheduleStore
from core.climasim.settings import SimulationSettings
from core.climasim.simulator import ClimateSimulator
from core.climasim.thermal_model import ThermalModel


@pytest.fixture
def settings():
    return SimulationSettings(random_seed=1234)


@pytest.fixture
def now():
    """A fixed tick time at 14:00."""
    return datetime(2026, 3, 1, 14, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def thermal(settings):
    return ThermalModel(settings.locations, np.random.default_rng(42))


@pytest.fixture
def ledger(settings):
    return EnergyLedger(
        wattage_w=settings.appliance.wattage,
        ticks_per_hour=settings.ticks_per_hour,
        tariff_per_kwh=settings.tariff_per_kwh,
    )


@pytest.fixture
def schedule():
    return ScheduleStore()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def simulator(settings, store):
    sim = ClimateSimulator(settings, store=store, rng=np.random.default_rng(7))
    yield sim
    sim.close()
