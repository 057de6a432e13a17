"""
Schedule engine: time grid, availability index, slot allocator and
group building helpers. Pure Python, no Django dependency.
"""

from .allocator import AllocationResult, SlotAllocator, allocate, coalesce_items, required_slot_count
from .availability import AvailabilityIndex
from .classroom import (
    LeastLoadedClassroomStrategy, RoundRobinClassroomStrategy, get_classroom_strategy,
)
from .matching import SubjectResolver, parse_class_list
from .records import (
    AvailabilityWindow, Day, DaySchedule, Group, ScheduleItem, Shortfall, SkippedGroup,
    Subject, TimeSlot, WEEKDAYS, parse_time,
)
from .time_grid import TimeGrid, create_grid

__all__ = [
    'AllocationResult',
    'SlotAllocator',
    'allocate',
    'coalesce_items',
    'required_slot_count',
    'AvailabilityIndex',
    'LeastLoadedClassroomStrategy',
    'RoundRobinClassroomStrategy',
    'get_classroom_strategy',
    'SubjectResolver',
    'parse_class_list',
    'AvailabilityWindow',
    'Day',
    'DaySchedule',
    'Group',
    'ScheduleItem',
    'Shortfall',
    'SkippedGroup',
    'Subject',
    'TimeSlot',
    'WEEKDAYS',
    'parse_time',
    'TimeGrid',
    'create_grid',
]
