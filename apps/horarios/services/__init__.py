"""
Services layer for schedule and group generation
"""

from .data_access_layer import DataAccessLayer
from .group_generator import GroupGenerator, GroupParams
from .schedule_generator import ScheduleGenerator, generate_schedule
from .schedule_materializer import MaterializationResult, ScheduleMaterializer

__all__ = [
    'DataAccessLayer',
    'GroupGenerator',
    'GroupParams',
    'ScheduleGenerator',
    'generate_schedule',
    'MaterializationResult',
    'ScheduleMaterializer',
]
