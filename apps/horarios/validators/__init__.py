"""
Validation of generated schedules
"""

from .constraint_checker import ConstraintChecker, ConstraintViolation

__all__ = ['ConstraintChecker', 'ConstraintViolation']
