"""
Tick transition.

`advance` takes the complete simulation state and returns the next one
without mutating its input. Only the selected room's history and energy
change; other rooms are carried over untouched, and ticks that happen while
a room is not selected are never replayed for it later.
"""

from dataclasses import dataclass, field
from datetime import datetime

from .energy import EnergyLedger
from .models import Sample, SimulationContext
from .rooms import RoomRegistry
from .schedule import ScheduleStore
from .thermal_model import ThermalModel


@dataclass(frozen=True)
class SimulationState:
    """Everything a tick reads and writes."""

    context: SimulationContext = field(default_factory=SimulationContext)
    rooms: RoomRegistry = field(default_factory=RoomRegistry)


def effective_target(context: SimulationContext, schedule: ScheduleStore, now: datetime) -> float:
    """Target for the selected room at `now` (schedule first, else desired temp)."""
    return schedule.resolve_effective_target(context.selected_room, now.hour, context.desired_temp_c)


def advance(
    state: SimulationState,
    schedule: ScheduleStore,
    thermal: ThermalModel,
    ledger: EnergyLedger,
    now: datetime
) -> SimulationState:
    """Compute the state after one tick at `now`.

    Args:
        state: State before the tick
        schedule: Hourly setpoints (read only)
        thermal: Indoor/outdoor temperature model
        ledger: Energy accrual
        now: Tick timestamp; its hour selects the schedule entry

    Returns:
        State after the tick
    """
    ctx = state.context
    room = ctx.selected_room
    target = effective_target(ctx, schedule, now)

    inside = thermal.step_indoor(ctx.inside_temp_c, target, ctx.mode)
    outside = thermal.draw_outdoor(ctx.location)
    next_ctx = ctx.with_changes(inside_temp_c=inside, outside_temp_c=outside)

    room_state = ledger.accrue(state.rooms[room], ctx.mode)
    rooms = state.rooms.with_state(room, room_state).append(
        room,
        Sample(
            timestamp=now,
            inside_temp_c=inside,
            outside_temp_c=outside,
            target_temp_c=target,
        ),
    )

    return SimulationState(context=next_ctx, rooms=rooms)
