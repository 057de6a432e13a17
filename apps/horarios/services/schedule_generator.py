"""
Schedule Generator - "generate the general schedule for cycle C".

Loads the group catalog, subjects and availability of a cycle, allocates
slots on a fresh grid, verifies the result and replaces the cycle's
general schedule.
"""

import logging
from typing import Dict, List, Optional

from ..config import Config
from ..exceptions import NoCycleError, ScheduleMaterializationError
from ..scheduling.allocator import AllocationResult, SlotAllocator, coalesce_items
from ..scheduling.availability import AvailabilityIndex
from ..scheduling.time_grid import create_grid
from ..validators.constraint_checker import ConstraintChecker
from .data_access_layer import DataAccessLayer
from .schedule_materializer import ScheduleMaterializer

logger = logging.getLogger(__name__)


class ScheduleGenerator:
    """
    Orchestrates one generation run.

    Every call builds its own grid and availability snapshot, so reruns
    with unchanged data produce the same schedule.
    """

    def __init__(self, coalesce: Optional[bool] = None, default_degree_program: Optional[str] = None):
        self.coalesce = Config.Generation.get_coalesce_items() if coalesce is None else coalesce
        self.default_degree_program = (default_degree_program
                                       or Config.Generation.get_default_degree_program())

    @staticmethod
    def resolve_cycle_id(cycle_id=None) -> int:
        """Requested cycle, or the most recent one when omitted"""
        if cycle_id is None:
            cycle_id = DataAccessLayer.get_latest_cycle_id()
            if cycle_id is None:
                raise NoCycleError("No school cycles found; create a cycle before generating schedules")
            logger.info(f"No cycle given, using latest cycle {cycle_id}")
            return cycle_id
        if not DataAccessLayer.cycle_exists(cycle_id):
            raise NoCycleError(f"Cycle {cycle_id} does not exist")
        return cycle_id

    def generate(self, cycle_id=None) -> Dict:
        result = {
            'success': False,
            'cycle_id': cycle_id,
            'total_groups': 0,
            'scheduled_groups': 0,
            'scheduled_items': 0,
            'shortfalls': [],
            'skipped': [],
            'warnings': [],
            'error': None,
        }

        try:
            cycle_id = self.resolve_cycle_id(cycle_id)
        except NoCycleError as e:
            logger.error(f"❌ {e}")
            result['error'] = str(e)
            return result
        result['cycle_id'] = cycle_id

        logger.info(f"Generating general schedule for cycle {cycle_id}")
        groups = DataAccessLayer.load_groups(cycle_id)
        result['total_groups'] = len(groups)
        if not groups:
            result['error'] = f"Cycle {cycle_id} has no groups to schedule"
            logger.warning(f"⚠️ {result['error']}")
            return result

        allocation = self.allocate(cycle_id, groups)
        items = coalesce_items(allocation.items) if self.coalesce else allocation.items

        validation = ConstraintChecker.validate(items)
        if not validation['feasible']:
            result['error'] = (f"Generated schedule breaks {len(validation['errors'])} hard constraints; "
                               f"nothing was saved")
            result['violations'] = validation['errors']
            return result

        try:
            ScheduleMaterializer.save(cycle_id, items)
        except (ScheduleMaterializationError, NoCycleError) as e:
            result['error'] = str(e)
            return result

        result.update({
            'success': True,
            'scheduled_groups': len(allocation.scheduled_group_ids),
            'scheduled_items': len(items),
            'shortfalls': [s.to_dict() for s in allocation.shortfalls],
            'skipped': [s.to_dict() for s in allocation.skipped],
            'warnings': self._warnings(allocation),
        })
        logger.info(
            f"✅ Cycle {cycle_id}: {result['scheduled_groups']}/{result['total_groups']} groups fully "
            f"scheduled, {len(allocation.shortfalls)} short, {len(allocation.skipped)} skipped"
        )
        return result

    def allocate(self, cycle_id, groups) -> AllocationResult:
        """Allocate the given groups on a fresh grid (no persistence)"""
        subjects = DataAccessLayer.load_subjects({g.subject_id for g in groups})
        windows = DataAccessLayer.load_availability({g.professor_id for g in groups})
        availability = AvailabilityIndex.build(windows)

        for professor_id in sorted({g.professor_id for g in groups}):
            if professor_id not in availability:
                logger.warning(f"⚠️ Professor {professor_id} has no availability recorded")

        allocator = SlotAllocator(create_grid(), availability, cycle_id, self.default_degree_program)
        return allocator.allocate(groups, subjects)

    @staticmethod
    def _warnings(allocation: AllocationResult) -> List[str]:
        warnings = []
        for shortfall in allocation.shortfalls:
            warnings.append(
                f"Group {shortfall.group_id} (professor {shortfall.professor_id}) got "
                f"{shortfall.assigned_slots} of {shortfall.required_slots} slots"
            )
        for skipped in allocation.skipped:
            warnings.append(f"Group {skipped.group_id} skipped: {skipped.reason}")
        return warnings


def generate_schedule(cycle_id=None) -> Dict:
    return ScheduleGenerator().generate(cycle_id)
