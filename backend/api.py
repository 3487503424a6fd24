"""
Climasim API Endpoints

Every control goes through ClimateSimulator; this layer only validates
requests, converts to the display unit and shapes chart data.
"""

from dataclasses import asdict
from typing import Annotated

import numpy as np
from fastapi import APIRouter, HTTPException, Path
from loguru import logger
from pydantic import BaseModel

from core.climasim.exceptions import UnknownLocationError, ValidationError
from core.climasim.models import FanSetting, Room, Sample, SystemMode, TemperatureUnit
from core.climasim.simulator import ClimateSimulator
from core.climasim.units import to_display

router = APIRouter()

# Simulator instance (set by app.py during startup)
simulator: ClimateSimulator | None = None

VERSION = "0.1.0"

HourParam = Annotated[int, Path(ge=0, le=23, description="Hour of day (0-23)")]


class RoomRequest(BaseModel):
    """Request body for selecting a room."""
    room: Room


class LocationRequest(BaseModel):
    """Request body for selecting a location."""
    location: str


class ModeRequest(BaseModel):
    """Request body for setting the system mode."""
    mode: SystemMode


class FanRequest(BaseModel):
    """Request body for setting the fan."""
    fan: FanSetting


class UnitRequest(BaseModel):
    """Request body for setting the display unit."""
    unit: TemperatureUnit


class TemperatureRequest(BaseModel):
    """Request body for setting a temperature (display unit unless given)."""
    temperature: float
    unit: TemperatureUnit | None = None


def _get_simulator() -> ClimateSimulator:
    if simulator is None:
        raise HTTPException(status_code=503, detail="Simulator not initialized")
    return simulator


def _sample_to_display(sample: Sample, unit: TemperatureUnit) -> dict:
    return {
        "timestamp": sample.timestamp.isoformat(),
        "inside": to_display(sample.inside_temp_c, unit),
        "outside": to_display(sample.outside_temp_c, unit),
        "target": to_display(sample.target_temp_c, unit),
    }


@router.get("/api/health")
async def health_check():
    """Health check endpoint."""
    sim = simulator
    return {
        "status": "healthy",
        "app": "Climasim",
        "version": VERSION,
        "clock_running": sim.clock.running if sim else False,
    }


@router.get("/api/state")
async def get_state():
    """Current readings for the selected room, in Celsius and the display unit."""
    sim = _get_simulator()
    snapshot = sim.snapshot()
    unit = TemperatureUnit(snapshot["unit"])
    snapshot["display"] = {
        "unit": unit.value,
        "inside": to_display(snapshot["inside_temp_c"], unit),
        "outside": to_display(snapshot["outside_temp_c"], unit),
        "target": to_display(snapshot["target_temp_c"], unit),
        "desired": to_display(snapshot["desired_temp_c"], unit),
    }
    return snapshot


@router.get("/api/appliance")
async def get_appliance():
    """Nameplate data and tariff of the simulated appliance."""
    sim = _get_simulator()
    return {
        **asdict(sim.settings.appliance),
        "tariff_per_kwh": sim.settings.tariff_per_kwh,
        "currency": sim.settings.currency,
    }


@router.get("/api/locations")
async def get_locations():
    """Configured locations and their climate envelopes."""
    sim = _get_simulator()
    return {
        "current": sim.context.location,
        "locations": {
            name: asdict(envelope) for name, envelope in sim.settings.locations.items()
        },
    }


@router.post("/api/room")
async def select_room(request: RoomRequest):
    """Select the room that receives ticks."""
    sim = _get_simulator()
    sim.select_room(request.room)
    return {"room": sim.context.selected_room.value}


@router.post("/api/location")
async def select_location(request: LocationRequest):
    """Select the location used for outdoor temperatures."""
    sim = _get_simulator()
    try:
        sim.select_location(request.location)
    except UnknownLocationError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"location": sim.context.location}


@router.post("/api/mode")
async def set_mode(request: ModeRequest):
    """Set system mode (cool/heat also preset the desired temperature)."""
    sim = _get_simulator()
    sim.set_mode(request.mode)
    return {
        "mode": sim.context.mode.value,
        "desired_temp_c": sim.context.desired_temp_c,
    }


@router.post("/api/fan")
async def set_fan(request: FanRequest):
    sim = _get_simulator()
    sim.set_fan(request.fan)
    return {"fan": sim.context.fan.value}


@router.post("/api/unit")
async def set_unit(request: UnitRequest):
    sim = _get_simulator()
    sim.set_unit(request.unit)
    return {"unit": sim.context.unit.value}


@router.post("/api/desired_temperature")
async def set_desired_temperature(request: TemperatureRequest):
    """Set the manual desired temperature."""
    sim = _get_simulator()
    try:
        temp_c = sim.set_desired_temperature(request.temperature, request.unit)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return {"desired_temp_c": temp_c}


@router.get("/api/schedule")
async def get_schedule(room: Room | None = None):
    """Hourly schedule of a room (selected room by default)."""
    sim = _get_simulator()
    room = room or sim.context.selected_room
    unit = sim.context.unit
    entries = sim.schedule.entries(room)
    return {
        "room": room.value,
        "unit": unit.value,
        "entries": [
            {"hour": hour, "temp_c": temp_c, "temp": to_display(temp_c, unit)}
            for hour, temp_c in entries.items()
        ],
    }


@router.put("/api/schedule/{hour}")
async def set_schedule(hour: HourParam, request: TemperatureRequest, room: Room | None = None):
    """Schedule a temperature for one hour of the day."""
    sim = _get_simulator()
    try:
        temp_c = sim.set_scheduled_temperature(hour, request.temperature, request.unit, room)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return {
        "room": (room or sim.context.selected_room).value,
        "hour": hour,
        "temp_c": temp_c,
    }


@router.delete("/api/schedule/{hour}")
async def delete_schedule(hour: HourParam, room: Room | None = None):
    """Remove the scheduled temperature for one hour."""
    sim = _get_simulator()
    sim.remove_scheduled_temperature(hour, room)
    return {"room": (room or sim.context.selected_room).value, "hour": hour, "removed": True}


@router.post("/api/dark_mode/toggle")
async def toggle_dark_mode():
    sim = _get_simulator()
    return {"dark_mode": sim.toggle_dark_mode()}


@router.get("/api/rooms/{room}/history")
async def get_room_history(room: Room):
    """Temperature history of a room in the display unit."""
    sim = _get_simulator()
    unit = sim.context.unit
    history = [_sample_to_display(s, unit) for s in sim.history(room)]
    return {
        "room": room.value,
        "unit": unit.value,
        "count": len(history),
        "history": history,
        **{k: v for k, v in sim.energy(room).items() if k != "room"},
    }


@router.post("/api/rooms/{room}/reset")
async def reset_room(room: Room):
    """Clear a room's history and energy usage."""
    sim = _get_simulator()
    sim.reset_room(room)
    return {"room": room.value, "reset": True}


# =============================================================================
# CHART DATA
# =============================================================================

def _build_chartjs_datasets(samples: list[dict]) -> list:
    """
    Convert display-unit samples to Chart.js datasets.

    Returns format: [{label, data: [{x, y}], ...}, ...]
    """
    series = (
        ("Inside Temperature", "inside", {"pointStyle": "circle"}),
        ("Outside Temperature", "outside", {"pointStyle": "circle"}),
        ("Target Temperature", "target", {"pointStyle": "triangle", "borderDash": [5, 5]}),
    )
    return [
        {
            "label": label,
            "data": [{"x": s["timestamp"], "y": s[key]} for s in samples],
            "fill": False,
            "tension": 0.4,
            "pointRadius": 3,
            "borderWidth": 2,
            **extra,
        }
        for label, key, extra in series
    ]


def _suggested_bounds(samples: list[dict]) -> tuple[float | None, float | None]:
    """Y-axis range with 2 degrees of padding around all series."""
    if not samples:
        return None, None
    values = np.array([[s["inside"], s["outside"], s["target"]] for s in samples], dtype=float)
    return float(values.min()) - 2, float(values.max()) + 2


@router.get("/api/rooms/{room}/chart_data")
async def get_room_chart_data(room: Room):
    """
    Everything a Chart.js line chart needs for one room.

    Returns:
        datasets, x/y scale configuration and metadata
    """
    sim = _get_simulator()
    unit = sim.context.unit

    try:
        samples = [_sample_to_display(s, unit) for s in sim.history(room)]
        datasets = _build_chartjs_datasets(samples)
        y_min, y_max = _suggested_bounds(samples)

        return {
            "room": room.value,
            "unit": unit.value,
            "dark_mode": sim.context.dark_mode,
            "datasets": datasets,
            "scales": {
                "x": {
                    "type": "time",
                    "time": {
                        "unit": "second",
                        "tooltipFormat": "HH:mm:ss",
                        "displayFormats": {"second": "HH:mm:ss"},
                    },
                },
                "y": {
                    "beginAtZero": False,
                    "suggestedMin": y_min,
                    "suggestedMax": y_max,
                    "title": {"display": True, "text": f"Temperature (°{unit.value})"},
                },
            },
            "metadata": {
                "source": "history_buffer",
                "data_points": len(samples),
                "capacity": sim.rooms.history_capacity,
            },
        }

    except Exception as e:
        logger.error(f"Failed to build chart data for {room.value}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to build chart data: {str(e)}")
