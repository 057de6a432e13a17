from datetime import time

from django.test import SimpleTestCase

from apps.horarios.scheduling.records import Day, ScheduleItem
from apps.horarios.validators.constraint_checker import ConstraintChecker


def item(group_id, day, start, end, professor='P001', classroom='A1'):
    return ScheduleItem(1, 'Ingeniería', group_id, day, start, end,
                        classroom_id=classroom, professor_id=professor, subject_id=1)


class ConstraintCheckerTest(SimpleTestCase):

    def test_clean_schedule(self):
        result = ConstraintChecker.validate([
            item(1, Day.LUNES, time(8, 0), time(9, 0)),
            item(2, Day.LUNES, time(9, 0), time(10, 0)),
            item(3, Day.MARTES, time(8, 0), time(9, 0)),
        ])
        self.assertTrue(result['feasible'])
        self.assertEqual(result['errors'], [])

    def test_professor_double_booked(self):
        violations = ConstraintChecker.check_professor_conflicts([
            item(1, Day.LUNES, time(8, 0), time(10, 0), classroom='A1'),
            item(2, Day.LUNES, time(9, 30), time(11, 0), professor=' p001 ', classroom='A2'),
        ])
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].constraint_code, 'HC-01')
        self.assertEqual(violations[0].details['conflicts'], [2])

    def test_classroom_double_booked(self):
        result = ConstraintChecker.validate([
            item(1, Day.JUEVES, time(8, 0), time(9, 0), professor='P001'),
            item(2, Day.JUEVES, time(8, 30), time(9, 30), professor='P002'),
        ])
        self.assertFalse(result['feasible'])
        self.assertEqual(result['violations_by_type'], {'HC-02': 1})

    def test_item_without_classroom_never_conflicts(self):
        violations = ConstraintChecker.check_classroom_conflicts([
            item(1, Day.LUNES, time(8, 0), time(9, 0), professor='P001', classroom=None),
            item(2, Day.LUNES, time(8, 0), time(9, 0), professor='P002', classroom=None),
        ])
        self.assertEqual(violations, [])

    def test_outside_daily_window(self):
        violations = ConstraintChecker.check_bounds([
            item(1, Day.VIERNES, time(15, 30), time(16, 30)),
            item(2, Day.VIERNES, time(10, 0), time(9, 0)),
        ])
        self.assertEqual([v.constraint_code for v in violations], ['HC-04', 'HC-04'])
