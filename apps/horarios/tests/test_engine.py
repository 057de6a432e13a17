"""
Schedule engine tests: time grid, records, availability index, allocator
Pure Python, no database
"""

from datetime import time

from django.test import SimpleTestCase

from apps.horarios.exceptions import SlotAlreadyAssigned
from apps.horarios.scheduling.allocator import (
    SlotAllocator, allocate, coalesce_items, required_slot_count,
)
from apps.horarios.scheduling.availability import AvailabilityIndex
from apps.horarios.scheduling.records import (
    WEEKDAYS, AvailabilityWindow, Day, Group, ScheduleItem, Subject, parse_time,
)
from apps.horarios.scheduling.time_grid import DAY_END, DAY_START, SLOTS_PER_DAY, create_grid
from apps.horarios.validators.constraint_checker import ConstraintChecker


def window(professor_id, day, start, end):
    return AvailabilityWindow(professor_id, day, parse_time(start), parse_time(end))


def group(group_id, subject_id, professor_id, classroom_id='A101', cycle_id=1):
    return Group(group_id=group_id, subject_id=subject_id, professor_id=professor_id,
                 classroom_id=classroom_id, cycle_id=cycle_id)


class TimeGridTest(SimpleTestCase):
    """create_grid() builds the fixed weekly grid"""

    def test_grid_shape(self):
        grid = create_grid()
        self.assertEqual([d.day for d in grid], WEEKDAYS)
        self.assertEqual(SLOTS_PER_DAY, 18)
        for day_schedule in grid:
            self.assertEqual(len(day_schedule.slots), 18)
            self.assertEqual(day_schedule.slots[0].start_time, time(7, 0))
            self.assertEqual(day_schedule.slots[-1].end_time, time(16, 0))
            self.assertFalse(any(slot.assigned for slot in day_schedule.slots))

    def test_slots_are_contiguous_30_minutes(self):
        slots = create_grid()[0].slots
        for previous, current in zip(slots, slots[1:]):
            self.assertEqual(previous.end_time, current.start_time)
            self.assertEqual(current.duration_minutes, 30)

    def test_each_grid_is_fresh(self):
        first = create_grid()
        first.at(0, 0).mark_assigned()
        second = create_grid()
        self.assertFalse(second.at(0, 0).assigned)
        self.assertEqual(first.assigned_count, 1)
        self.assertEqual(second.assigned_count, 0)

    def test_slot_cannot_be_assigned_twice(self):
        slot = create_grid().at(2, 3)
        slot.mark_assigned()
        with self.assertRaises(SlotAlreadyAssigned):
            slot.mark_assigned()


class RecordsTest(SimpleTestCase):

    def test_day_parse_variants(self):
        self.assertEqual(Day.parse('Miércoles'), Day.MIERCOLES)
        self.assertEqual(Day.parse('miercoles'), Day.MIERCOLES)
        self.assertEqual(Day.parse(' LUNES '), Day.LUNES)
        self.assertEqual(Day.parse('Fri'), Day.VIERNES)
        self.assertEqual(Day.parse('tuesday'), Day.MARTES)

    def test_day_parse_rejects_weekend(self):
        for value in ('Sábado', 'Sunday', '', None):
            with self.assertRaises(ValueError):
                Day.parse(value)

    def test_parse_time(self):
        self.assertEqual(parse_time('08:00'), time(8, 0))
        self.assertEqual(parse_time('8:30:00'), time(8, 30))
        self.assertEqual(parse_time(time(9, 15)), time(9, 15))
        for value in ('25:00', '8h', 800):
            with self.assertRaises(ValueError):
                parse_time(value)

    def test_window_must_end_after_start(self):
        with self.assertRaises(ValueError):
            window('P1', Day.LUNES, '11:00', '08:00')
        with self.assertRaises(ValueError):
            window('P1', Day.LUNES, '08:00', '08:00')


class AvailabilityIndexTest(SimpleTestCase):

    def setUp(self):
        self.index = AvailabilityIndex.build([
            window('P1', Day.LUNES, '08:00', '11:00'),
            window('P1', Day.MARTES, '09:00', '12:00'),
            window('P1', Day.MIERCOLES, '10:00', '13:00'),
        ])

    def test_slot_inside_window(self):
        self.assertTrue(self.index.is_available('P1', Day.LUNES, time(8, 0), time(8, 30)))
        self.assertTrue(self.index.is_available('P1', Day.LUNES, time(10, 30), time(11, 0)))

    def test_slot_must_be_fully_contained(self):
        self.assertFalse(self.index.is_available('P1', Day.LUNES, time(7, 30), time(8, 0)))
        self.assertFalse(self.index.is_available('P1', Day.LUNES, time(10, 45), time(11, 15)))

    def test_other_day_not_available(self):
        self.assertFalse(self.index.is_available('P1', Day.JUEVES, time(9, 0), time(9, 30)))
        self.assertTrue(self.index.is_available('P1', Day.MIERCOLES, time(12, 30), time(13, 0)))

    def test_professor_without_windows_is_never_available(self):
        self.assertNotIn('P2', self.index)
        self.assertFalse(self.index.is_available('P2', Day.LUNES, time(8, 0), time(8, 30)))

    def test_professor_id_trimmed_and_case_insensitive(self):
        self.assertTrue(self.index.is_available(' p1 ', Day.LUNES, time(8, 0), time(8, 30)))
        self.assertEqual(len(self.index.windows_for('p1')), 3)

    def test_windows_are_not_merged(self):
        index = AvailabilityIndex.build([
            window('P3', Day.LUNES, '08:00', '09:00'),
            window('P3', Day.LUNES, '09:00', '10:00'),
        ])
        self.assertTrue(index.is_available('P3', Day.LUNES, time(8, 30), time(9, 0)))
        self.assertTrue(index.is_available('P3', Day.LUNES, time(9, 0), time(9, 30)))
        self.assertFalse(index.is_available('P3', Day.LUNES, time(8, 30), time(9, 30)))


class RequiredSlotCountTest(SimpleTestCase):

    def test_ceiling(self):
        self.assertEqual(required_slot_count(3), 6)
        self.assertEqual(required_slot_count(1.25), 3)
        self.assertEqual(required_slot_count(0.1), 1)
        self.assertEqual(required_slot_count(2.5), 5)

    def test_float_noise_is_ignored(self):
        self.assertEqual(required_slot_count(0.1 + 0.2 + 1.2), 3)

    def test_non_positive_hours(self):
        self.assertEqual(required_slot_count(0), 0)
        self.assertEqual(required_slot_count(-1), 0)
        self.assertEqual(required_slot_count(None), 0)


class SlotAllocatorTest(SimpleTestCase):
    """Greedy allocation scenarios"""

    def setUp(self):
        self.subjects = {
            1: Subject(1, 'Cálculo', 3, 'Ingeniería'),
            2: Subject(2, 'Física', 2, 'Ingeniería'),
            3: Subject(3, 'Química', 1, None),
            4: Subject(4, 'Historia', 40, 'Humanidades'),
            6: Subject(6, 'Seminario', 0.5, None),
        }

    def test_window_filled_exactly(self):
        availability = AvailabilityIndex.build([window('P1', Day.LUNES, '08:00', '11:00')])
        result = allocate([group(10, 1, 'P1')], self.subjects, availability, schedule_id=7)

        self.assertEqual(len(result.items), 6)
        self.assertEqual(result.shortfalls, [])
        self.assertEqual([i.start_time for i in result.items],
                         [time(8, 0), time(8, 30), time(9, 0), time(9, 30), time(10, 0), time(10, 30)])
        self.assertTrue(all(i.day == Day.LUNES for i in result.items))
        self.assertTrue(all(i.schedule_id == 7 for i in result.items))
        self.assertEqual(result.assigned_minutes(10), 180)

    def test_no_availability_full_shortfall(self):
        availability = AvailabilityIndex.build([])
        result = allocate([group(11, 2, 'P9')], self.subjects, availability, schedule_id=1)

        self.assertEqual(result.items, [])
        self.assertEqual(len(result.shortfalls), 1)
        shortfall = result.shortfalls[0]
        self.assertEqual(shortfall.required_slots, 4)
        self.assertEqual(shortfall.assigned_slots, 0)
        self.assertEqual(shortfall.missing_slots, 4)

    def test_claimed_slot_is_skipped_by_later_groups(self):
        availability = AvailabilityIndex.build([
            window('P1', Day.LUNES, '08:00', '08:30'),
            window('P2', Day.LUNES, '08:00', '09:00'),
        ])
        # different classrooms: the grid slot itself is taken
        groups = [group(1, 6, 'P1', 'A1'), group(2, 6, 'P2', 'A2')]
        result = allocate(groups, self.subjects, availability, schedule_id=1)

        first = [i for i in result.items if i.group_id == 1]
        second = [i for i in result.items if i.group_id == 2]
        self.assertEqual([i.start_time for i in first], [time(8, 0)])
        self.assertEqual([i.start_time for i in second], [time(8, 30)])
        self.assertEqual(result.shortfalls, [])

    def test_groups_sharing_a_classroom_never_overlap(self):
        availability = AvailabilityIndex.build([
            window(professor, Day.LUNES, '08:00', '10:00') for professor in ('P1', 'P2', 'P3')
        ] + [window('P3', Day.MARTES, '08:00', '10:00')])
        groups = [group(1, 2, 'P1', 'A1'), group(2, 2, 'P2', 'A1'), group(3, 2, 'P3', 'A1')]
        result = allocate(groups, self.subjects, availability, schedule_id=1)

        self.assertEqual(result.assigned_slots, {1: 4, 2: 0, 3: 4})
        self.assertEqual({i.day for i in result.items if i.group_id == 3}, {Day.MARTES})
        self.assertEqual(ConstraintChecker.check_classroom_conflicts(result.items), [])
        self.assertEqual([s.group_id for s in result.shortfalls], [2])

    def test_professor_with_several_subjects(self):
        availability = AvailabilityIndex.build([
            window('P1', Day.LUNES, '08:00', '11:00'),
            window('P1', Day.MARTES, '09:00', '12:00'),
            window('P1', Day.MIERCOLES, '10:00', '13:00'),
        ])
        groups = [group(1, 1, 'P1', 'A1'), group(2, 2, 'P1', 'A2'), group(3, 3, 'P1', 'A3')]
        result = allocate(groups, self.subjects, availability, schedule_id=1)

        self.assertEqual(result.shortfalls, [])
        self.assertEqual(result.assigned_slots, {1: 6, 2: 4, 3: 2})
        # Cálculo fills Lunes, Física and Química continue on Martes
        self.assertTrue(all(i.day == Day.LUNES for i in result.items if i.group_id == 1))
        self.assertTrue(all(i.day == Day.MARTES for i in result.items if i.group_id in (2, 3)))
        self.assertTrue(ConstraintChecker.validate(result.items)['feasible'])

    def test_missing_subject_is_skipped(self):
        availability = AvailabilityIndex.build([window('P1', Day.LUNES, '08:00', '11:00')])
        result = allocate([group(1, 99, 'P1'), group(2, 3, 'P1')], self.subjects, availability, 1)

        self.assertEqual(len(result.skipped), 1)
        self.assertEqual(result.skipped[0].group_id, 1)
        self.assertNotIn(1, result.required_slots)
        self.assertEqual(result.assigned_slots[2], 2)

    def test_zero_hours_need_nothing(self):
        subjects = {5: Subject(5, 'Tutoría', 0)}
        availability = AvailabilityIndex.build([window('P1', Day.LUNES, '08:00', '11:00')])
        result = allocate([group(1, 5, 'P1')], subjects, availability, 1)
        self.assertEqual(result.items, [])
        self.assertEqual(result.shortfalls, [])

    def test_partial_shortfall_when_grid_exhausted(self):
        availability = AvailabilityIndex.build([
            window('P1', Day.LUNES, '07:00', '16:00'),
        ])
        result = allocate([group(1, 4, 'P1')], self.subjects, availability, 1)
        self.assertEqual(len(result.items), 18)
        self.assertEqual(result.shortfalls[0].required_slots, 80)
        self.assertEqual(result.shortfalls[0].assigned_slots, 18)

    def test_degree_program_default(self):
        availability = AvailabilityIndex.build([window('P1', Day.LUNES, '08:00', '09:00')])
        allocator = SlotAllocator(create_grid(), availability, 1, default_degree_program='General')
        result = allocator.allocate([group(1, 3, 'P1')], self.subjects)
        self.assertEqual({i.degree_program for i in result.items}, {'General'})

    def test_allocation_is_deterministic(self):
        availability = AvailabilityIndex.build([
            window('P1', Day.LUNES, '08:00', '12:00'),
            window('P2', Day.LUNES, '09:00', '15:00'),
            window('P2', Day.JUEVES, '07:00', '09:00'),
        ])
        groups = [group(1, 1, 'P1', 'A1'), group(2, 2, 'P2', 'A1'), group(3, 1, 'P2', 'A2')]
        first = allocate(groups, self.subjects, availability, 1)
        second = allocate(groups, self.subjects, availability, 1)
        self.assertEqual(first.items, second.items)
        self.assertEqual(first.assigned_slots, second.assigned_slots)

    def test_output_properties(self):
        availability = AvailabilityIndex.build([
            window('P1', Day.LUNES, '07:00', '16:00'),
            window('P2', Day.LUNES, '07:00', '16:00'),
            window('P2', Day.VIERNES, '12:00', '16:00'),
            window('P3', Day.MARTES, '08:00', '10:00'),
        ])
        groups = [group(1, 1, 'P1', 'A1'), group(2, 2, 'P2', 'A1'), group(3, 1, 'P2', 'A2'),
                  group(4, 4, 'P3', 'A3'), group(5, 2, 'P1', 'A2')]
        result = allocate(groups, self.subjects, availability, 1)

        self.assertTrue(ConstraintChecker.validate(result.items)['feasible'])
        for item in result.items:
            self.assertIn(item.day, WEEKDAYS)
            self.assertTrue(DAY_START <= item.start_time < item.end_time <= DAY_END)
        short = {s.group_id for s in result.shortfalls}
        for gid, required in result.required_slots.items():
            self.assertLessEqual(result.assigned_minutes(gid), required * 30)
            if gid not in short:
                self.assertEqual(result.assigned_minutes(gid), required * 30)


class CoalesceItemsTest(SimpleTestCase):

    def item(self, group_id, day, start, end):
        return ScheduleItem(1, 'General', group_id, day, parse_time(start), parse_time(end))

    def test_contiguous_runs_are_merged(self):
        items = [
            self.item(1, Day.LUNES, '08:00', '08:30'),
            self.item(1, Day.LUNES, '08:30', '09:00'),
            self.item(1, Day.LUNES, '09:30', '10:00'),
            self.item(1, Day.MARTES, '10:00', '10:30'),
            self.item(2, Day.MARTES, '10:30', '11:00'),
        ]
        merged = coalesce_items(items)
        self.assertEqual(
            [(i.group_id, i.day, i.start_time, i.end_time) for i in merged],
            [
                (1, Day.LUNES, time(8, 0), time(9, 0)),
                (1, Day.LUNES, time(9, 30), time(10, 0)),
                (1, Day.MARTES, time(10, 0), time(10, 30)),
                (2, Day.MARTES, time(10, 30), time(11, 0)),
            ]
        )

    def test_minutes_preserved(self):
        availability = AvailabilityIndex.build([
            window('P1', Day.LUNES, '08:00', '09:00'),
            window('P1', Day.MARTES, '08:00', '10:00'),
        ])
        subjects = {1: Subject(1, 'Cálculo', 2.5)}
        result = allocate([group(1, 1, 'P1')], subjects, availability, 1)
        merged = coalesce_items(result.items)
        self.assertEqual(len(merged), 2)
        self.assertEqual(sum(i.duration_minutes for i in merged), 150)
