"""
Group Generator - creates the Grupo rows the schedule generator consumes.

A group's semester always follows its subject's semester. Group ids are
taken from the request or continue from the current maximum.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

from django.db import transaction

from ..config import Config
from ..exceptions import GroupValidationError, GroupValidationFailed
from ..models import Ciclo, Grupo, Materia, Salon
from ..scheduling.classroom import LeastLoadedClassroomStrategy, get_classroom_strategy
from ..scheduling.matching import SubjectResolver
from .data_access_layer import DataAccessLayer

logger = logging.getLogger(__name__)


@dataclass
class GroupParams:
    """Parameters of one group to create"""
    subject_id: int
    professor_id: str
    classroom_id: Optional[str]
    cycle_id: int
    group_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict) -> 'GroupParams':
        """Accepts snake_case keys or the camelCase/PascalCase keys of the store"""
        def pick(*keys):
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        return cls(
            subject_id=pick('subject_id', 'idMateria', 'IdMateria'),
            professor_id=pick('professor_id', 'idProfesor', 'IdProfesor'),
            classroom_id=pick('classroom_id', 'idSalon', 'IdSalon'),
            cycle_id=pick('cycle_id', 'idCiclo', 'IdCiclo'),
            group_id=pick('group_id', 'idGrupo', 'IdGrupo'),
        )


class GroupGenerator:
    """Single, batch and per-professor group creation"""

    def __init__(self, resolver: Optional[SubjectResolver] = None, classroom_strategy: Optional[str] = None):
        self._resolver = resolver
        self.classroom_strategy = classroom_strategy or Config.Generation.get_classroom_strategy()

    @property
    def resolver(self) -> SubjectResolver:
        if self._resolver is None:
            self._resolver = SubjectResolver(
                DataAccessLayer.load_subject_catalog(),
                match_order=Config.Generation.get_subject_match_order(),
                fuzzy_threshold=Config.Generation.get_fuzzy_match_threshold(),
            )
        return self._resolver

    # ======================== SINGLE GROUP ========================

    @staticmethod
    def validate(params: GroupParams) -> List[GroupValidationError]:
        """Collect every problem with the parameters (empty list when valid)"""
        errors = []

        if params.subject_id is None or not Materia.objects.filter(id_materia=params.subject_id).exists():
            errors.append(GroupValidationError('subject_id', f"Subject with ID {params.subject_id} not found"))

        if params.professor_id is None or DataAccessLayer.get_professor(params.professor_id) is None:
            errors.append(GroupValidationError('professor_id', f"Professor with ID {params.professor_id} not found"))

        if params.classroom_id is not None and not Salon.objects.filter(id_salon=params.classroom_id).exists():
            errors.append(GroupValidationError('classroom_id', f"Classroom with ID {params.classroom_id} not found"))

        if params.cycle_id is None or not Ciclo.objects.filter(id_ciclo=params.cycle_id).exists():
            errors.append(GroupValidationError('cycle_id', f"Cycle with ID {params.cycle_id} not found"))

        if params.group_id is not None and Grupo.objects.filter(id_grupo=params.group_id).exists():
            errors.append(GroupValidationError('group_id', f"A group with ID {params.group_id} already exists"))

        return errors

    def generate_group(self, params) -> Grupo:
        """
        Create one group.

        Raises:
            GroupValidationFailed: with every validation error found
        """
        if isinstance(params, dict):
            params = GroupParams.from_dict(params)

        errors = self.validate(params)
        if errors:
            raise GroupValidationFailed(errors)

        subject = Materia.objects.get(id_materia=params.subject_id)
        professor = DataAccessLayer.get_professor(params.professor_id)

        with transaction.atomic():
            group_id = (params.group_id if params.group_id is not None
                        else DataAccessLayer.get_max_group_id() + 1)
            grupo = Grupo.objects.create(
                id_grupo=group_id,
                materia=subject,
                profesor=professor,
                salon_id=params.classroom_id,
                ciclo_id=params.cycle_id,
                semestre=subject.semestre,
            )

        logger.info(f"Group {grupo.id_grupo} created: {subject.nombre} / {professor.id_profesor} "
                    f"(cycle {params.cycle_id}, classroom {params.classroom_id})")
        return grupo

    def update_group(self, group_id: int, **changes) -> Grupo:
        """Update a group; the semester follows the (possibly new) subject"""
        grupo = Grupo.objects.filter(id_grupo=group_id).first()
        if grupo is None:
            raise GroupValidationFailed([GroupValidationError('group_id', f"Group with ID {group_id} not found")])

        params = GroupParams(
            subject_id=changes.get('subject_id', grupo.materia_id),
            professor_id=changes.get('professor_id', grupo.profesor_id),
            classroom_id=changes.get('classroom_id', grupo.salon_id),
            cycle_id=changes.get('cycle_id', grupo.ciclo_id),
        )
        errors = self.validate(params)
        if errors:
            raise GroupValidationFailed(errors)

        subject = Materia.objects.get(id_materia=params.subject_id)
        grupo.materia = subject
        grupo.profesor = DataAccessLayer.get_professor(params.professor_id)
        grupo.salon_id = params.classroom_id
        grupo.ciclo_id = params.cycle_id
        grupo.semestre = subject.semestre
        grupo.save()
        return grupo

    # ======================== BATCH ========================

    def generate_groups_batch(self, params_list) -> Dict:
        """
        Create several groups; a failing item does not stop the others.

        Returns:
            {'created': [group ids], 'errors': [{'index', 'params', 'error', 'details'}]}
        """
        created, errors = [], []
        for index, params in enumerate(params_list):
            if isinstance(params, dict):
                params = GroupParams.from_dict(params)
            try:
                grupo = self.generate_group(params)
            except GroupValidationFailed as e:
                logger.warning(f"⚠️ Batch item {index} rejected: {e}")
                errors.append({
                    'index': index,
                    'params': asdict(params),
                    'error': str(e),
                    'details': [err.to_dict() for err in e.errors],
                })
            else:
                created.append(grupo.id_grupo)

        logger.info(f"Batch group generation: {len(created)} created, {len(errors)} rejected")
        return {'created': created, 'errors': errors}

    # ======================== ALL PROFESSORS ========================

    def generate_for_all_professors(self, cycle_id, replace: bool = False) -> Dict:
        """
        Create one group per subject each professor teaches.

        Each professor's class list is resolved to subjects; subjects that
        already have a group for that professor in the cycle are skipped.
        `replace` deletes the cycle's groups first.
        """
        if not DataAccessLayer.cycle_exists(cycle_id):
            raise GroupValidationFailed([GroupValidationError('cycle_id', f"Cycle with ID {cycle_id} not found")])

        created, errors = [], []

        with transaction.atomic():
            if replace:
                deleted, _ = Grupo.objects.filter(ciclo_id=cycle_id).delete()
                logger.info(f"Deleted {deleted} existing rows of cycle {cycle_id} before regenerating groups")

            existing = DataAccessLayer.get_existing_assignments(cycle_id)
            strategy = self._classroom_strategy(cycle_id)
            next_id = DataAccessLayer.get_max_group_id() + 1

            for professor in DataAccessLayer.get_all_professors():
                resolution = self.resolver.resolve_classes(professor.clases)

                for name in resolution.unresolved:
                    logger.warning(f"⚠️ Professor {professor.id_profesor}: class '{name}' matches no subject")
                    errors.append({'professor_id': professor.id_profesor,
                                   'error': f"Class '{name}' does not match any subject"})
                if not resolution.subject_ids:
                    logger.warning(f"⚠️ Professor {professor.id_profesor} has no resolvable subject")
                    errors.append({'professor_id': professor.id_profesor,
                                   'error': "No resolvable subject"})
                    continue

                for subject_id in resolution.subject_ids:
                    if (professor.id_profesor, subject_id) in existing:
                        continue
                    subject = Materia.objects.get(id_materia=subject_id)
                    grupo = Grupo.objects.create(
                        id_grupo=next_id,
                        materia=subject,
                        profesor=professor,
                        salon_id=strategy.choose(),
                        ciclo_id=cycle_id,
                        semestre=subject.semestre,
                    )
                    next_id += 1
                    existing.add((professor.id_profesor, subject_id))
                    created.append(grupo.id_grupo)

        logger.info(f"✅ Cycle {cycle_id}: {len(created)} groups created, {len(errors)} problems")
        return {'success': True, 'cycle_id': cycle_id, 'created': created, 'errors': errors}

    def _classroom_strategy(self, cycle_id):
        classroom_ids = DataAccessLayer.get_classroom_ids()
        if self.classroom_strategy == LeastLoadedClassroomStrategy.name:
            return get_classroom_strategy(
                self.classroom_strategy, classroom_ids,
                initial_load=DataAccessLayer.get_group_count_by_classroom(cycle_id),
            )
        return get_classroom_strategy(self.classroom_strategy, classroom_ids)
