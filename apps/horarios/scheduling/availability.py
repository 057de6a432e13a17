"""
Availability index: "is professor P available for [start, end) on day D?"

Windows are kept as recorded, never merged. A slot is available when at
least one window on that day fully contains it. A professor with no
recorded windows is never available.
"""

import logging
from collections import defaultdict
from datetime import time
from typing import Dict, Iterable, List

from .records import AvailabilityWindow, Day

logger = logging.getLogger(__name__)


def professor_key(professor_id) -> str:
    """Professor ids are compared trimmed and case-insensitively"""
    return str(professor_id).strip().lower()


class AvailabilityIndex:
    """Read-only snapshot of professor availability for one generation run"""

    def __init__(self, windows_by_professor: Dict[str, List[AvailabilityWindow]]):
        self._windows = {professor_key(k): list(v) for k, v in windows_by_professor.items()}

    @classmethod
    def build(cls, windows: Iterable[AvailabilityWindow]) -> 'AvailabilityIndex':
        grouped = defaultdict(list)
        for window in windows:
            grouped[professor_key(window.professor_id)].append(window)
        index = cls(grouped)
        logger.debug(f"Availability index built for {len(index)} professors")
        return index

    def __len__(self) -> int:
        return len(self._windows)

    def __contains__(self, professor_id) -> bool:
        return bool(self._windows.get(professor_key(professor_id)))

    def windows_for(self, professor_id) -> List[AvailabilityWindow]:
        return list(self._windows.get(professor_key(professor_id), []))

    def is_available(self, professor_id, day: Day, start: time, end: time) -> bool:
        for window in self._windows.get(professor_key(professor_id), ()):
            if window.contains(day, start, end):
                return True
        return False

    def available_minutes(self, professor_id) -> int:
        """Total recorded minutes (overlapping windows counted twice)"""
        total = 0
        for window in self._windows.get(professor_key(professor_id), ()):
            total += ((window.end_time.hour * 60 + window.end_time.minute)
                      - (window.start_time.hour * 60 + window.start_time.minute))
        return total


def build(availability_records: Iterable[AvailabilityWindow]) -> AvailabilityIndex:
    return AvailabilityIndex.build(availability_records)


def is_available(index: AvailabilityIndex, professor_id, day: Day, start: time, end: time) -> bool:
    return index.is_available(professor_id, day, start, end)
