"""
Hard constraint checks for a generated general schedule.
Run on the allocator output before it is persisted.

HC-01  a professor teaches two items at overlapping times
HC-02  a classroom hosts two items at overlapping times
HC-03  item scheduled outside Monday-Friday
HC-04  item outside 07:00-16:00 or ending before it starts
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..scheduling.records import WEEKDAYS, ScheduleItem, format_time
from ..scheduling.time_grid import DAY_END, DAY_START

logger = logging.getLogger(__name__)


@dataclass
class ConstraintViolation:
    """One broken hard constraint"""
    constraint_code: str
    message: str
    group_id: int
    details: Dict = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'constraint_code': self.constraint_code,
            'message': self.message,
            'group_id': self.group_id,
            'details': self.details,
        }


def _label(item: ScheduleItem) -> str:
    return f"{item.day.value} {format_time(item.start_time)}-{format_time(item.end_time)}"


class ConstraintChecker:
    """Checks hard constraints on a list of ScheduleItem"""

    @staticmethod
    def _check_overlaps(items: Sequence[ScheduleItem], key_attr: str, code: str,
                        resource: str) -> List[ConstraintViolation]:
        violations = []
        buckets = defaultdict(list)
        for item in items:
            key = getattr(item, key_attr)
            if key:
                buckets[(str(key).strip().lower(), item.day)].append(item)

        for (key, _day), bucket in buckets.items():
            bucket.sort(key=lambda i: (i.start_time, i.end_time))
            for idx, item in enumerate(bucket):
                for other in bucket[idx + 1:]:
                    if other.start_time >= item.end_time:
                        break
                    violations.append(ConstraintViolation(
                        constraint_code=code,
                        message=(f"{resource} {getattr(item, key_attr)} double-booked: group "
                                 f"{item.group_id} {_label(item)} overlaps group {other.group_id} {_label(other)}"),
                        group_id=item.group_id,
                        details={resource.lower(): getattr(item, key_attr), 'conflicts': [other.group_id]},
                    ))
        return violations

    @staticmethod
    def check_professor_conflicts(items: Sequence[ScheduleItem]) -> List[ConstraintViolation]:
        """HC-01: professor teaches two items at once"""
        return ConstraintChecker._check_overlaps(items, 'professor_id', 'HC-01', 'Professor')

    @staticmethod
    def check_classroom_conflicts(items: Sequence[ScheduleItem]) -> List[ConstraintViolation]:
        """HC-02: classroom hosts two items at once"""
        return ConstraintChecker._check_overlaps(items, 'classroom_id', 'HC-02', 'Classroom')

    @staticmethod
    def check_bounds(items: Sequence[ScheduleItem]) -> List[ConstraintViolation]:
        """HC-03 / HC-04: weekday and daily window"""
        violations = []
        for item in items:
            if item.day not in WEEKDAYS:
                violations.append(ConstraintViolation(
                    constraint_code='HC-03',
                    message=f"Group {item.group_id} scheduled on {item.day}",
                    group_id=item.group_id,
                    details={'day': str(item.day)},
                ))
            if not (DAY_START <= item.start_time < item.end_time <= DAY_END):
                violations.append(ConstraintViolation(
                    constraint_code='HC-04',
                    message=f"Group {item.group_id} outside the daily window: {_label(item)}",
                    group_id=item.group_id,
                    details={'start_time': format_time(item.start_time),
                             'end_time': format_time(item.end_time)},
                ))
        return violations

    @staticmethod
    def validate(items: Sequence[ScheduleItem]) -> Dict:
        """
        Run every hard constraint check.

        Returns:
            {'feasible': bool, 'errors': [violation dicts],
             'violations_by_type': {'HC-01': n, ...}}
        """
        items = list(items)
        violations = (
            ConstraintChecker.check_professor_conflicts(items)
            + ConstraintChecker.check_classroom_conflicts(items)
            + ConstraintChecker.check_bounds(items)
        )

        by_type = defaultdict(int)
        for violation in violations:
            by_type[violation.constraint_code] += 1

        if violations:
            logger.error(f"❌ Schedule has {len(violations)} hard constraint violations: {dict(by_type)}")
        else:
            logger.debug(f"✅ {len(items)} schedule items pass all hard constraints")

        return {
            'feasible': not violations,
            'errors': [v.to_dict() for v in violations],
            'violations_by_type': dict(by_type),
        }
