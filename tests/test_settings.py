"""Tests for configuration loading."""

import pytest

from core.climasim import settings as settings_module
from core.climasim.exceptions import ConfigurationError
from core.climasim.settings import ClimateEnvelope, SimulationSettings, load_settings


def test_defaults_match_reference_appliance():
    settings = SimulationSettings()

    assert settings.tick_interval_seconds == 4.0
    assert settings.history_capacity == 72
    assert settings.tariff_per_kwh == 11.7882
    assert settings.appliance.wattage == 1080
    assert settings.appliance.model == "Fujidenzo 1.0 HP WAR-100IGT"
    assert settings.locations["Cebu, PH"] == ClimateEnvelope(25, 33)
    assert settings.default_location == "Digos City, PH"


def test_from_dict_accepts_camel_case():
    # Arrange
    data = {
        "tickIntervalSeconds": 5,
        "tariffPerKwh": 10.5,
        "coolPresetC": 18,
        "defaultLocation": "Baguio, PH",
        "locations": {"Baguio, PH": {"minTemp": 12, "maxTemp": 24}},
        "appliance": {"model": "Test Unit", "kjPerHour": 5000, "wattage": 800},
    }

    # Act
    settings = SimulationSettings.from_dict(data)

    # Assert
    assert settings.ticks_per_hour == 720
    assert settings.tariff_per_kwh == 10.5
    assert settings.cool_preset_c == 18
    assert settings.locations == {"Baguio, PH": ClimateEnvelope(12, 24)}
    assert settings.appliance.kj_per_hour == 5000
    assert settings.appliance.eer == 11.34


def test_unknown_key_raises_configuration_error():
    with pytest.raises(ConfigurationError):
        SimulationSettings.from_dict({"warpFactor": 9})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tick_interval_seconds": 0},
        {"history_capacity": 0},
        {"tariff_per_kwh": -1},
        {"default_location": "Nowhere"},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        SimulationSettings(**kwargs)


def test_inverted_envelope_rejected():
    with pytest.raises(ConfigurationError):
        ClimateEnvelope(min_temp=30, max_temp=20)


def test_load_settings_from_yaml(tmp_path, monkeypatch):
    # Arrange
    monkeypatch.setattr(settings_module, "OPTIONS_PATH", str(tmp_path / "missing.json"))
    config = tmp_path / "config.yaml"
    config.write_text(
        "options:\n"
        "  simulation:\n"
        "    tickIntervalSeconds: 2\n"
        "    statePath: /tmp/state.json\n"
    )

    # Act
    settings = load_settings(config)

    # Assert
    assert settings.tick_interval_seconds == 2
    assert settings.state_path == "/tmp/state.json"
    assert settings.history_capacity == 72


def test_load_settings_from_options_json(tmp_path, monkeypatch):
    options = tmp_path / "options.json"
    options.write_text('{"simulation": {"randomSeed": 5}}')
    monkeypatch.setattr(settings_module, "OPTIONS_PATH", str(options))

    settings = load_settings()

    assert settings.random_seed == 5


def test_load_settings_defaults_when_nothing_found(tmp_path, monkeypatch):
    monkeypatch.setattr(settings_module, "OPTIONS_PATH", str(tmp_path / "missing.json"))
    monkeypatch.delenv("CLIMASIM_CONFIG", raising=False)
    monkeypatch.setattr(settings_module, "DEFAULT_CONFIG_PATH", tmp_path / "missing.yaml")

    assert load_settings() == SimulationSettings()
