"""
Group generation tests
"""

from django.test import TestCase

from apps.horarios.exceptions import GroupValidationFailed
from apps.horarios.models import Grupo, Materia, Profesor
from apps.horarios.services.group_generator import GroupGenerator, GroupParams

from .factories import make_catalog, make_groups


class GenerateGroupTest(TestCase):

    def setUp(self):
        self.catalog = make_catalog()
        self.generator = GroupGenerator()

    def test_group_takes_subject_semester_and_next_id(self):
        make_groups(self.catalog)
        grupo = self.generator.generate_group(
            GroupParams(subject_id=2, professor_id='P002', classroom_id='A1', cycle_id=1))
        self.assertEqual(grupo.id_grupo, 4)
        self.assertEqual(grupo.semestre, 2)

    def test_explicit_group_id_zero_is_kept(self):
        make_groups(self.catalog)
        params = GroupParams(subject_id=3, professor_id='P002', classroom_id=None, cycle_id=1, group_id=0)
        grupo = self.generator.generate_group(params)
        self.assertEqual(grupo.id_grupo, 0)
        self.assertFalse(Grupo.objects.filter(id_grupo=4).exists())

        with self.assertRaises(GroupValidationFailed) as ctx:
            self.generator.generate_group(params)
        self.assertEqual([e.field for e in ctx.exception.errors], ['group_id'])

    def test_accepts_store_style_keys(self):
        grupo = self.generator.generate_group(
            {'idGrupo': 50, 'idMateria': 1, 'idProfesor': 'p001', 'idSalon': 'A2', 'idCiclo': 1})
        self.assertEqual(grupo.id_grupo, 50)
        self.assertEqual(grupo.profesor_id, 'P001')

    def test_all_validation_errors_are_collected(self):
        make_groups(self.catalog)
        with self.assertRaises(GroupValidationFailed) as ctx:
            self.generator.generate_group(
                GroupParams(subject_id=99, professor_id='NOPE', classroom_id='Z9', cycle_id=42, group_id=1))
        fields = [e.field for e in ctx.exception.errors]
        self.assertEqual(fields, ['subject_id', 'professor_id', 'classroom_id', 'cycle_id', 'group_id'])
        self.assertEqual(Grupo.objects.count(), 3)

    def test_update_group_follows_new_subject_semester(self):
        make_groups(self.catalog)
        grupo = self.generator.update_group(1, subject_id=2)
        self.assertEqual(grupo.materia_id, 2)
        self.assertEqual(grupo.semestre, 2)

    def test_batch_isolates_failures(self):
        result = self.generator.generate_groups_batch([
            {'subject_id': 1, 'professor_id': 'P001', 'classroom_id': 'A1', 'cycle_id': 1},
            {'subject_id': 77, 'professor_id': 'P001', 'classroom_id': 'A1', 'cycle_id': 1},
            {'subject_id': 3, 'professor_id': 'P002', 'classroom_id': None, 'cycle_id': 1},
        ])
        self.assertEqual(result['created'], [1, 2])
        self.assertEqual(len(result['errors']), 1)
        self.assertEqual(result['errors'][0]['index'], 1)
        self.assertEqual(result['errors'][0]['details'][0]['field'], 'subject_id')


class GenerateForAllProfessorsTest(TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_one_group_per_resolved_subject(self):
        result = GroupGenerator(classroom_strategy='round_robin').generate_for_all_professors(1)
        self.assertTrue(result['success'])
        self.assertEqual(result['created'], [1, 2, 3])
        groups = list(Grupo.objects.order_by('id_grupo').values_list('materia_id', 'profesor_id', 'salon_id'))
        self.assertEqual(groups, [(1, 'P001', 'A1'), (2, 'P001', 'A2'), (3, 'P002', 'A1')])

    def test_existing_groups_are_not_duplicated(self):
        make_groups(self.catalog)
        result = GroupGenerator().generate_for_all_professors(1)
        self.assertEqual(result['created'], [])
        self.assertEqual(Grupo.objects.count(), 3)

    def test_replace_recreates_groups(self):
        make_groups(self.catalog)
        result = GroupGenerator().generate_for_all_professors(1, replace=True)
        self.assertEqual(len(result['created']), 3)
        self.assertEqual(Grupo.objects.count(), 3)

    def test_unresolvable_classes_are_reported(self):
        Profesor.objects.create(id_profesor='P003', nombre='Sin materias', clases='Astronomía')
        Materia.objects.create(id_materia=4, nombre='Biología', horas_clase=2)
        result = GroupGenerator().generate_for_all_professors(1)
        problems = [e for e in result['errors'] if e['professor_id'] == 'P003']
        self.assertEqual(len(problems), 2)
        self.assertFalse(Grupo.objects.filter(profesor_id='P003').exists())

    def test_least_loaded_strategy(self):
        result = GroupGenerator(classroom_strategy='least_loaded').generate_for_all_professors(1)
        salons = list(Grupo.objects.filter(id_grupo__in=result['created'])
                      .order_by('id_grupo').values_list('salon_id', flat=True))
        self.assertEqual(salons, ['A1', 'A2', 'A1'])

    def test_unknown_cycle(self):
        with self.assertRaises(GroupValidationFailed):
            GroupGenerator().generate_for_all_professors(99)
