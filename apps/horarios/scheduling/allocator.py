"""
Greedy slot allocator.

For every group, in catalog order, walk the grid Monday to Friday and each
day chronologically, claiming free slots the professor is available for
until the group's required slot count is met. No backtracking, no
reordering. A group that runs out of grid gets a Shortfall; a group whose
subject is unknown is skipped.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping

from .availability import AvailabilityIndex
from .records import Group, ScheduleItem, Shortfall, SkippedGroup, Subject
from .time_grid import SLOT_MINUTES, SLOTS_PER_HOUR, TimeGrid, create_grid

logger = logging.getLogger(__name__)


def required_slot_count(weekly_class_hours) -> int:
    """
    Slots needed for the weekly hours, always rounded up.
    1.25 h -> 3 slots. Non-positive hours need no slots.
    """
    if weekly_class_hours is None or weekly_class_hours <= 0:
        return 0
    # round() drops float noise such as 1.5000000001 * 2
    return math.ceil(round(weekly_class_hours * SLOTS_PER_HOUR, 6))


@dataclass
class AllocationResult:
    """Output of one allocation run"""
    items: List[ScheduleItem] = field(default_factory=list)
    shortfalls: List[Shortfall] = field(default_factory=list)
    skipped: List[SkippedGroup] = field(default_factory=list)
    required_slots: Dict[int, int] = field(default_factory=dict)
    assigned_slots: Dict[int, int] = field(default_factory=dict)

    def assigned_minutes(self, group_id: int) -> int:
        return self.assigned_slots.get(group_id, 0) * SLOT_MINUTES

    def required_minutes(self, group_id: int) -> int:
        return self.required_slots.get(group_id, 0) * SLOT_MINUTES

    @property
    def scheduled_group_ids(self) -> List[int]:
        """Groups that received every required slot"""
        return [gid for gid, required in self.required_slots.items()
                if self.assigned_slots.get(gid, 0) >= required]

    @property
    def has_shortfalls(self) -> bool:
        return bool(self.shortfalls)


class SlotAllocator:
    """
    Allocates slots of one grid to groups.

    The grid is owned by the allocator for the duration of one run: every
    group sees the slots claimed by the groups before it, so a slot is
    never handed out twice. Since no two groups ever share a slot, no
    classroom or professor can be double-booked either; there is no
    separate classroom occupancy check.
    """

    def __init__(self, grid: TimeGrid, availability: AvailabilityIndex,
                 schedule_id: int, default_degree_program: str = 'General'):
        self.grid = grid
        self.availability = availability
        self.schedule_id = schedule_id
        self.default_degree_program = default_degree_program

    def allocate(self, groups: Iterable[Group], subjects: Mapping[int, Subject]) -> AllocationResult:
        result = AllocationResult()

        for group in groups:
            subject = subjects.get(group.subject_id)
            if subject is None:
                reason = f"Subject {group.subject_id} not found"
                logger.warning(f"⚠️ Group {group.group_id} skipped: {reason}")
                result.skipped.append(SkippedGroup(group_id=group.group_id, reason=reason))
                continue

            required = required_slot_count(subject.weekly_class_hours)
            items = self._allocate_group(group, subject, required)

            result.items.extend(items)
            result.required_slots[group.group_id] = required
            result.assigned_slots[group.group_id] = len(items)

            if len(items) < required:
                shortfall = Shortfall(
                    group_id=group.group_id,
                    subject_id=group.subject_id,
                    professor_id=group.professor_id,
                    required_slots=required,
                    assigned_slots=len(items),
                )
                result.shortfalls.append(shortfall)
                logger.warning(
                    f"⚠️ Group {group.group_id} (professor {group.professor_id}) "
                    f"under-scheduled: {len(items)}/{required} slots"
                )

        logger.info(
            f"Allocation done: {len(result.items)} slots for {len(result.required_slots)} groups, "
            f"{len(result.shortfalls)} shortfalls, {len(result.skipped)} skipped"
        )
        return result

    def _allocate_group(self, group: Group, subject: Subject, required: int) -> List[ScheduleItem]:
        items = []
        if required == 0:
            return items

        degree_program = subject.degree_program or self.default_degree_program

        for day_schedule in self.grid:
            for slot in day_schedule.slots:
                if slot.assigned:
                    continue
                if not self.availability.is_available(
                        group.professor_id, slot.day, slot.start_time, slot.end_time):
                    continue

                slot.mark_assigned()
                items.append(ScheduleItem(
                    schedule_id=self.schedule_id,
                    degree_program=degree_program,
                    group_id=group.group_id,
                    day=slot.day,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    classroom_id=group.classroom_id,
                    professor_id=group.professor_id,
                    subject_id=group.subject_id,
                ))
                if len(items) == required:
                    return items
        return items


def allocate(groups: Iterable[Group], subjects: Mapping[int, Subject],
             availability: AvailabilityIndex, schedule_id: int,
             default_degree_program: str = 'General') -> AllocationResult:
    """Run the allocator on a fresh grid"""
    allocator = SlotAllocator(create_grid(), availability, schedule_id, default_degree_program)
    return allocator.allocate(groups, subjects)


def coalesce_items(items: Iterable[ScheduleItem]) -> List[ScheduleItem]:
    """
    Merge contiguous items of the same group on the same day.

    Lunes 08:00-08:30 + Lunes 08:30-09:00 -> Lunes 08:00-09:00.
    Total minutes per group are preserved.
    """
    merged: List[ScheduleItem] = []
    for item in items:
        if merged:
            last = merged[-1]
            if (last.group_id == item.group_id and last.day == item.day
                    and last.end_time == item.start_time):
                merged[-1] = replace(last, end_time=item.end_time)
                continue
        merged.append(item)

    logger.debug(f"Coalesced schedule items into {len(merged)} blocks")
    return merged
