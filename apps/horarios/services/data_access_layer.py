"""
Data Access Layer (DAL) - loads scheduling inputs from the database
and translates raw rows into the engine's typed records.

Rows may come with PascalCase keys (IdProfesor, HoraInicio), lowercase
keys (idprofesor, horainicio) or English keys (professor_id, start_time).
Malformed rows are rejected and logged, never passed to the allocator.
"""

import logging
from typing import Dict, Iterable, List, Optional

from django.db.models import Count, F

from ..models import Ciclo, Disponibilidad, Grupo, HorarioGeneral, Materia, Profesor, Salon
from ..scheduling.availability import professor_key
from ..scheduling.records import AvailabilityWindow, Day, Group, Subject, parse_time

logger = logging.getLogger(__name__)

_MISSING = object()

AVAILABILITY_KEYS = {
    'professor_id': ('IdProfesor', 'idprofesor', 'professor_id'),
    'day': ('Dia', 'dia', 'day'),
    'start_time': ('HoraInicio', 'horainicio', 'start_time'),
    'end_time': ('HoraFin', 'horafin', 'end_time'),
}

SUBJECT_KEYS = {
    'subject_id': ('IdMateria', 'idmateria', 'subject_id'),
    'name': ('Nombre', 'nombre', 'name'),
    'weekly_class_hours': ('HorasClase', 'horasclase', 'weekly_class_hours'),
    'degree_program': ('Carrera', 'carrera', 'degree_program'),
    'semester': ('Semestre', 'semestre', 'semester'),
}

GROUP_KEYS = {
    'group_id': ('IdGrupo', 'idgrupo', 'group_id'),
    'subject_id': ('IdMateria', 'idmateria', 'subject_id'),
    'professor_id': ('IdProfesor', 'idprofesor', 'professor_id'),
    'classroom_id': ('IdSalon', 'idsalon', 'classroom_id'),
    'cycle_id': ('IdCiclo', 'idciclo', 'cycle_id'),
    'semester': ('Semestre', 'semestre', 'semester'),
}


def _pick(row: Dict, keys, default=_MISSING):
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    if default is _MISSING:
        raise KeyError(keys[0])
    return default


# ======================== ROW TRANSLATION ========================

def translate_availability_row(row: Dict) -> Optional[AvailabilityWindow]:
    """Translate one availability row, or return None (logged) if malformed"""
    try:
        professor_id = str(_pick(row, AVAILABILITY_KEYS['professor_id'])).strip()
        if not professor_id:
            raise ValueError("empty professor id")
        return AvailabilityWindow(
            professor_id=professor_id,
            day=Day.parse(_pick(row, AVAILABILITY_KEYS['day'])),
            start_time=parse_time(_pick(row, AVAILABILITY_KEYS['start_time'])),
            end_time=parse_time(_pick(row, AVAILABILITY_KEYS['end_time'])),
        )
    except KeyError as e:
        logger.warning(f"Availability row rejected, missing {e}: {row}")
    except (TypeError, ValueError) as e:
        logger.warning(f"Availability row rejected ({e}): {row}")
    return None


def translate_subject_row(row: Dict) -> Optional[Subject]:
    """Translate one subject row, or return None (logged) if malformed"""
    try:
        return Subject(
            subject_id=int(_pick(row, SUBJECT_KEYS['subject_id'])),
            name=str(_pick(row, SUBJECT_KEYS['name'])),
            weekly_class_hours=float(_pick(row, SUBJECT_KEYS['weekly_class_hours'])),
            degree_program=_pick(row, SUBJECT_KEYS['degree_program'], None),
            semester=int(_pick(row, SUBJECT_KEYS['semester'], 1)),
        )
    except KeyError as e:
        logger.warning(f"Subject row rejected, missing {e}: {row}")
    except (TypeError, ValueError) as e:
        logger.warning(f"Subject row rejected ({e}): {row}")
    return None


def translate_group_row(row: Dict) -> Optional[Group]:
    """Translate one group row, or return None (logged) if malformed"""
    try:
        classroom_id = _pick(row, GROUP_KEYS['classroom_id'], None)
        return Group(
            group_id=int(_pick(row, GROUP_KEYS['group_id'])),
            subject_id=int(_pick(row, GROUP_KEYS['subject_id'])),
            professor_id=str(_pick(row, GROUP_KEYS['professor_id'])).strip(),
            classroom_id=str(classroom_id).strip() if classroom_id is not None else None,
            cycle_id=int(_pick(row, GROUP_KEYS['cycle_id'])),
            semester=int(_pick(row, GROUP_KEYS['semester'], 1)),
        )
    except KeyError as e:
        logger.warning(f"Group row rejected, missing {e}: {row}")
    except (TypeError, ValueError) as e:
        logger.warning(f"Group row rejected ({e}): {row}")
    return None


def _translate_all(rows: Iterable[Dict], translate) -> List:
    records = []
    for row in rows:
        record = translate(row)
        if record is not None:
            records.append(record)
    return records


class DataAccessLayer:
    """
    Centralized data access for schedule and group generation.
    Every query the generators need lives here.
    """

    # ======================== CICLO ========================

    @staticmethod
    def get_latest_cycle_id() -> Optional[int]:
        """Most recent cycle (highest id), or None when there are no cycles"""
        return Ciclo.objects.order_by('-id_ciclo').values_list('id_ciclo', flat=True).first()

    @staticmethod
    def cycle_exists(cycle_id) -> bool:
        return Ciclo.objects.filter(id_ciclo=cycle_id).exists()

    # ======================== GRUPO ========================

    @staticmethod
    def get_group_rows(cycle_id) -> List[Dict]:
        """Raw group rows of a cycle, in group id order"""
        return list(
            Grupo.objects.filter(ciclo_id=cycle_id)
            .order_by('id_grupo')
            .values(
                IdGrupo=F('id_grupo'),
                IdMateria=F('materia'),
                IdProfesor=F('profesor'),
                IdSalon=F('salon'),
                IdCiclo=F('ciclo'),
                Semestre=F('semestre'),
            )
        )

    @staticmethod
    def load_groups(cycle_id) -> List[Group]:
        """Group catalog of a cycle; untranslatable rows are omitted"""
        groups = _translate_all(DataAccessLayer.get_group_rows(cycle_id), translate_group_row)
        logger.info(f"Loaded {len(groups)} groups for cycle {cycle_id}")
        return groups

    @staticmethod
    def get_groups(cycle_id=None, professor_id=None, subject_id=None, semester=None):
        """Groups with optional filters"""
        queryset = Grupo.objects.select_related('materia', 'profesor', 'salon', 'ciclo')
        if cycle_id is not None:
            queryset = queryset.filter(ciclo_id=cycle_id)
        if professor_id is not None:
            queryset = queryset.filter(profesor_id__iexact=str(professor_id).strip())
        if subject_id is not None:
            queryset = queryset.filter(materia_id=subject_id)
        if semester is not None:
            queryset = queryset.filter(semestre=semester)
        return queryset.order_by('id_grupo')

    @staticmethod
    def get_max_group_id() -> int:
        return Grupo.objects.order_by('-id_grupo').values_list('id_grupo', flat=True).first() or 0

    @staticmethod
    def get_existing_assignments(cycle_id) -> set:
        """(professor_id, subject_id) pairs that already have a group in the cycle"""
        return set(
            Grupo.objects.filter(ciclo_id=cycle_id).values_list('profesor_id', 'materia_id')
        )

    @staticmethod
    def get_group_count_by_classroom(cycle_id) -> Dict[str, int]:
        rows = (Grupo.objects.filter(ciclo_id=cycle_id, salon__isnull=False)
                .values('salon_id').annotate(total=Count('id_grupo')).order_by())
        return {row['salon_id']: row['total'] for row in rows}

    # ======================== MATERIA ========================

    @staticmethod
    def get_subject_rows(subject_ids=None) -> List[Dict]:
        queryset = Materia.objects.order_by('id_materia')
        if subject_ids is not None:
            queryset = queryset.filter(id_materia__in=list(subject_ids))
        return list(queryset.values(
            IdMateria=F('id_materia'),
            Nombre=F('nombre'),
            HorasClase=F('horas_clase'),
            Carrera=F('carrera'),
            Semestre=F('semestre'),
        ))

    @staticmethod
    def load_subject_catalog(subject_ids=None) -> List[Subject]:
        """Subjects in catalog (id) order"""
        return _translate_all(DataAccessLayer.get_subject_rows(subject_ids), translate_subject_row)

    @staticmethod
    def load_subjects(subject_ids=None) -> Dict[int, Subject]:
        """Subjects keyed by subject id"""
        return {s.subject_id: s for s in DataAccessLayer.load_subject_catalog(subject_ids)}

    # ======================== PROFESOR / SALON ========================

    @staticmethod
    def get_all_professors():
        return Profesor.objects.order_by('id_profesor')

    @staticmethod
    def get_professor(professor_id) -> Optional[Profesor]:
        return Profesor.objects.filter(id_profesor__iexact=str(professor_id).strip()).first()

    @staticmethod
    def get_classroom_ids() -> List[str]:
        return list(Salon.objects.order_by('id_salon').values_list('id_salon', flat=True))

    # ======================== DISPONIBILIDAD ========================

    @staticmethod
    def get_availability_rows() -> List[Dict]:
        return list(
            Disponibilidad.objects.order_by('profesor_id', 'id_disponibilidad').values(
                IdProfesor=F('profesor'),
                Dia=F('dia'),
                HoraInicio=F('hora_inicio'),
                HoraFin=F('hora_fin'),
            )
        )

    @staticmethod
    def load_availability(professor_ids=None) -> List[AvailabilityWindow]:
        """
        Availability windows, optionally restricted to some professors.
        Professor ids are matched trimmed and case-insensitively.
        """
        windows = _translate_all(DataAccessLayer.get_availability_rows(), translate_availability_row)
        if professor_ids is not None:
            wanted = {professor_key(pid) for pid in professor_ids}
            windows = [w for w in windows if professor_key(w.professor_id) in wanted]
        return windows

    @staticmethod
    def get_professor_availability(professor_id) -> List[AvailabilityWindow]:
        return DataAccessLayer.load_availability([professor_id])

    # ======================== HORARIO GENERAL ========================

    @staticmethod
    def get_general_schedule_rows(cycle_id):
        return (HorarioGeneral.objects.filter(ciclo_id=cycle_id)
                .select_related('grupo__materia', 'grupo__profesor', 'grupo__salon'))

    @staticmethod
    def get_degree_programs() -> List[str]:
        """Distinct degree programs that appear in any general schedule"""
        return list(
            HorarioGeneral.objects.order_by('nombre_carrera')
            .values_list('nombre_carrera', flat=True).distinct()
        )
