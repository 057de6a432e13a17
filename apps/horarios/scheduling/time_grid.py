"""
Weekly time grid: five weekdays, 07:00-16:00, 30-minute slots.

The grid is created fresh for every generation run and owned by that run.
It is addressed as a 2D arena by (day_index, slot_index).
"""

from datetime import time
from typing import Iterator, List

from .records import WEEKDAYS, DaySchedule, TimeSlot, from_minutes, to_minutes

DAY_START = time(7, 0)
DAY_END = time(16, 0)
SLOT_MINUTES = 30
SLOTS_PER_HOUR = 60 // SLOT_MINUTES
SLOTS_PER_DAY = (to_minutes(DAY_END) - to_minutes(DAY_START)) // SLOT_MINUTES


class TimeGrid:
    """Ordered Monday-Friday sequence of DaySchedule"""

    def __init__(self, days: List[DaySchedule]):
        self.days = days

    def __iter__(self) -> Iterator[DaySchedule]:
        return iter(self.days)

    def __len__(self) -> int:
        return len(self.days)

    def __getitem__(self, day_index: int) -> DaySchedule:
        return self.days[day_index]

    def at(self, day_index: int, slot_index: int) -> TimeSlot:
        return self.days[day_index].slots[slot_index]

    @property
    def assigned_count(self) -> int:
        return sum(1 for day in self.days for slot in day.slots if slot.assigned)

    @property
    def free_count(self) -> int:
        return sum(len(day.slots) for day in self.days) - self.assigned_count


def create_grid() -> TimeGrid:
    """Build an empty grid (all slots unassigned)"""
    days = []
    start = to_minutes(DAY_START)
    for day in WEEKDAYS:
        slots = [
            TimeSlot(
                day=day,
                start_time=from_minutes(start + i * SLOT_MINUTES),
                end_time=from_minutes(start + (i + 1) * SLOT_MINUTES),
            )
            for i in range(SLOTS_PER_DAY)
        ]
        days.append(DaySchedule(day=day, slots=slots))
    return TimeGrid(days)
