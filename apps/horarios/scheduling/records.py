"""
Typed records used by the schedule engine.
Pure Python, no Django dependency: rows coming from the database are
translated into these records by the data access layer before they reach
the allocator.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import Dict, List, Optional, Union

from ..exceptions import SlotAlreadyAssigned


def normalize_text(value: str) -> str:
    """Lowercase, strip accents and collapse whitespace"""
    value = unicodedata.normalize('NFKD', value).encode('ascii', 'ignore').decode('ascii')
    value = value.strip().lower()
    return re.sub(r'\s+', ' ', value)


class Day(str, Enum):
    """Weekdays of the general schedule, Monday to Friday"""
    LUNES = 'Lunes'
    MARTES = 'Martes'
    MIERCOLES = 'Miércoles'
    JUEVES = 'Jueves'
    VIERNES = 'Viernes'

    @property
    def index(self) -> int:
        return WEEKDAYS.index(self)

    @classmethod
    def parse(cls, value) -> 'Day':
        """
        Parse a weekday name.

        Accepts the Spanish names with or without accents and in any case
        ('Miercoles', 'MIÉRCOLES'), and English names or abbreviations
        ('Mon', 'monday'). Raises ValueError for anything else.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            raise ValueError("Day is required")
        key = normalize_text(str(value))
        try:
            return _DAY_ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown weekday: {value!r}") from None


WEEKDAYS: List[Day] = [Day.LUNES, Day.MARTES, Day.MIERCOLES, Day.JUEVES, Day.VIERNES]

_DAY_ALIASES: Dict[str, Day] = {}
for _day, _english in zip(WEEKDAYS, ['monday', 'tuesday', 'wednesday', 'thursday', 'friday']):
    _DAY_ALIASES[normalize_text(_day.value)] = _day
    _DAY_ALIASES[_english] = _day
    _DAY_ALIASES[_english[:3]] = _day


# ======================== TIME HELPERS ========================

_TIME_RE = re.compile(r'^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$')


def parse_time(value: Union[str, time]) -> time:
    """
    Parse 'HH:MM' or 'HH:MM:SS' into a time.
    datetime.time values are returned unchanged.
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid time value: {value!r}")
    match = _TIME_RE.match(value)
    if not match:
        raise ValueError(f"Invalid time format: {value!r} (expected HH:MM[:SS])")
    hours, minutes, seconds = int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)
    # time() validates the ranges
    return time(hours, minutes, seconds)


def format_time(value: time) -> str:
    return value.strftime('%H:%M')


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    return time(minutes // 60, minutes % 60)


# ======================== GRID RECORDS ========================

@dataclass(eq=False)
class TimeSlot:
    """
    One 30-minute bookable unit of the weekly grid.
    Day and times never change; `assigned` flips once, false -> true.
    """
    day: Day
    start_time: time
    end_time: time
    assigned: bool = False

    def mark_assigned(self) -> None:
        if self.assigned:
            raise SlotAlreadyAssigned(
                f"Slot {self.day.value} {format_time(self.start_time)} is already assigned"
            )
        self.assigned = True

    @property
    def duration_minutes(self) -> int:
        return to_minutes(self.end_time) - to_minutes(self.start_time)

    def __repr__(self):
        flag = '*' if self.assigned else ''
        return (f"TimeSlot({self.day.value} {format_time(self.start_time)}-"
                f"{format_time(self.end_time)}{flag})")


@dataclass
class DaySchedule:
    """All slots of one weekday, in chronological order"""
    day: Day
    slots: List[TimeSlot] = field(default_factory=list)


# ======================== INPUT RECORDS ========================

@dataclass(frozen=True)
class AvailabilityWindow:
    """A time range on one weekday during which a professor can teach"""
    professor_id: str
    day: Day
    start_time: time
    end_time: time

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Availability window for {self.professor_id} on {self.day.value} "
                f"ends before it starts ({format_time(self.start_time)}-{format_time(self.end_time)})"
            )

    def contains(self, day: Day, start: time, end: time) -> bool:
        return self.day == day and self.start_time <= start and self.end_time >= end


@dataclass(frozen=True)
class Subject:
    """Materia - a subject with its required weekly class hours"""
    subject_id: int
    name: str
    weekly_class_hours: float
    degree_program: Optional[str] = None
    semester: int = 1


@dataclass(frozen=True)
class Group:
    """Grupo - one subject taught by one professor to one classroom cohort in one cycle"""
    group_id: int
    subject_id: int
    professor_id: str
    classroom_id: Optional[str]
    cycle_id: int
    semester: int = 1


# ======================== OUTPUT RECORDS ========================

@dataclass(frozen=True)
class ScheduleItem:
    """
    One row of the general schedule.

    schedule_id is the cycle id: the general schedule is keyed by cycle.
    classroom_id, professor_id and subject_id are informational and are not
    persisted on the schedule row (they live on the group).
    """
    schedule_id: int
    degree_program: str
    group_id: int
    day: Day
    start_time: time
    end_time: time
    classroom_id: Optional[str] = None
    professor_id: Optional[str] = None
    subject_id: Optional[int] = None

    @property
    def duration_minutes(self) -> int:
        return to_minutes(self.end_time) - to_minutes(self.start_time)

    def overlaps(self, other: 'ScheduleItem') -> bool:
        return (self.day == other.day
                and self.start_time < other.end_time
                and other.start_time < self.end_time)

    def to_dict(self) -> Dict:
        return {
            'schedule_id': self.schedule_id,
            'degree_program': self.degree_program,
            'group_id': self.group_id,
            'day': self.day.value,
            'start_time': format_time(self.start_time),
            'end_time': format_time(self.end_time),
            'classroom_id': self.classroom_id,
            'professor_id': self.professor_id,
            'subject_id': self.subject_id,
        }


@dataclass(frozen=True)
class Shortfall:
    """A group that did not get all of its required slots"""
    group_id: int
    subject_id: int
    professor_id: str
    required_slots: int
    assigned_slots: int

    @property
    def missing_slots(self) -> int:
        return self.required_slots - self.assigned_slots

    def to_dict(self) -> Dict:
        return {
            'group_id': self.group_id,
            'subject_id': self.subject_id,
            'professor_id': self.professor_id,
            'required_slots': self.required_slots,
            'assigned_slots': self.assigned_slots,
            'missing_slots': self.missing_slots,
        }


@dataclass(frozen=True)
class SkippedGroup:
    """A group left out of allocation because of a data error"""
    group_id: int
    reason: str

    def to_dict(self) -> Dict:
        return {'group_id': self.group_id, 'reason': self.reason}
