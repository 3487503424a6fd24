"""
Per-room state.

RoomRegistry holds exactly one RoomState per Room. Both are immutable:
every change produces a new registry, which keeps rooms isolated and lets
a tick be committed with a single assignment.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace

from .history import DEFAULT_CAPACITY, HistoryBuffer
from .models import Room, Sample


@dataclass(frozen=True)
class RoomState:
    """History and energy usage of one room."""

    history: HistoryBuffer = field(default_factory=HistoryBuffer)
    energy_usage_kwh: float = 0.0

    def __post_init__(self):
        if self.energy_usage_kwh < 0:
            raise ValueError("energy_usage_kwh cannot be negative")


class RoomRegistry(Mapping):
    """Immutable Room -> RoomState mapping covering every room."""

    def __init__(
        self,
        states: Mapping[Room, RoomState] | None = None,
        history_capacity: int = DEFAULT_CAPACITY
    ):
        self.history_capacity = history_capacity
        empty = RoomState(history=HistoryBuffer(capacity=history_capacity))
        self._states: dict[Room, RoomState] = {room: empty for room in Room}
        for room, state in (states or {}).items():
            self._states[Room(room)] = state

    def __getitem__(self, room: Room) -> RoomState:
        return self._states[room]

    def __iter__(self) -> Iterator[Room]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        return f"RoomRegistry({self._states!r})"

    def with_state(self, room: Room, state: RoomState) -> "RoomRegistry":
        """Registry with `room` replaced by `state`; other rooms are shared."""
        states = dict(self._states)
        states[room] = state
        return RoomRegistry(states, self.history_capacity)

    def append(self, room: Room, sample: Sample) -> "RoomRegistry":
        """Registry with `sample` added to the room's history."""
        state = self._states[room]
        return self.with_state(room, replace(state, history=state.history.append(sample)))

    def query(self, room: Room) -> tuple[Sample, ...]:
        """Charted samples for `room`, oldest first."""
        return self._states[room].history.query()

    def reset(self, room: Room) -> "RoomRegistry":
        """Registry with the room's history and energy cleared."""
        return self.with_state(room, RoomState(history=HistoryBuffer(capacity=self.history_capacity)))
