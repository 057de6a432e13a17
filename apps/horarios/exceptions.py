"""
Exceptions raised by the scheduling engine and its services
"""

from dataclasses import dataclass
from typing import List


class HorariosError(Exception):
    """Base class for scheduling errors"""


class SlotAlreadyAssigned(HorariosError):
    """A grid slot was claimed twice within one generation run"""


class NoCycleError(HorariosError):
    """No school cycle exists (or the requested one is missing)"""


class ScheduleMaterializationError(HorariosError):
    """Persisting the general schedule failed; the previous schedule was kept"""

    def __init__(self, cycle_id, message):
        self.cycle_id = cycle_id
        super().__init__(message)


@dataclass
class GroupValidationError:
    """One invalid field of a group generation request"""
    field: str
    message: str

    def to_dict(self):
        return {'field': self.field, 'message': self.message}


class GroupValidationFailed(HorariosError):
    """A group could not be created because its parameters are invalid"""

    def __init__(self, errors: List[GroupValidationError]):
        self.errors = list(errors)
        detail = '; '.join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(f"Group validation failed: {detail}")
