"""Tests for the hourly schedule store."""

from core.climasim.models import Room
from core.climasim.schedule import ScheduleStore


def test_resolve_uses_schedule_then_reverts_to_manual(schedule):
    # Arrange
    schedule.set(Room.BEDROOM, 14, 18)

    # Act / Assert
    assert schedule.resolve_effective_target(Room.BEDROOM, 14, 22) == 18

    schedule.remove(Room.BEDROOM, 14)
    assert schedule.resolve_effective_target(Room.BEDROOM, 14, 22) == 22


def test_resolve_falls_back_for_other_hours(schedule):
    schedule.set(Room.BEDROOM, 14, 18)

    assert schedule.resolve_effective_target(Room.BEDROOM, 15, 22) == 22


def test_set_overwrites_existing_entry(schedule):
    schedule.set(Room.LIVING_ROOM, 7, 20)
    schedule.set(Room.LIVING_ROOM, 7, 25)

    assert schedule.get(Room.LIVING_ROOM, 7) == 25
    assert schedule.entries(Room.LIVING_ROOM) == {7: 25.0}


def test_remove_missing_hour_is_noop(schedule):
    schedule.set(Room.BEDROOM, 3, 19)

    schedule.remove(Room.BEDROOM, 4)

    assert schedule.entries(Room.BEDROOM) == {3: 19.0}


def test_get_missing_hour_returns_none(schedule):
    assert schedule.get(Room.DINING_ROOM, 0) is None


def test_rooms_are_isolated(schedule):
    schedule.set(Room.BEDROOM, 22, 26)

    assert schedule.get(Room.MASTER_BEDROOM, 22) is None
    assert schedule.resolve_effective_target(Room.MASTER_BEDROOM, 22, 24) == 24


def test_entries_sorted_copy(schedule):
    schedule.set(Room.BEDROOM, 20, 24)
    schedule.set(Room.BEDROOM, 6, 27)

    entries = schedule.entries(Room.BEDROOM)
    entries[12] = 99

    assert list(entries)[:2] == [6, 20]
    assert schedule.get(Room.BEDROOM, 12) is None


def test_dict_round_trip_uses_string_hours(schedule):
    # Arrange
    schedule.set(Room.BEDROOM, 9, 21)
    schedule.set(Room.DINING_ROOM, 18, 23.5)

    # Act
    data = schedule.to_dict()
    restored = ScheduleStore.from_dict(data)

    # Assert
    assert data["bedroom"] == {"9": 21.0}
    assert data["livingroom"] == {}
    assert restored.get(Room.BEDROOM, 9) == 21
    assert restored.get(Room.DINING_ROOM, 18) == 23.5
