"""
Schedule Materializer - persists a cycle's general schedule.

The previous schedule of the cycle is deleted and the new one inserted in
a single transaction. If anything fails the transaction rolls back and the
previous schedule stays as it was.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from django.db import DatabaseError, transaction

from ..exceptions import NoCycleError, ScheduleMaterializationError
from ..models import Ciclo, HorarioGeneral
from ..scheduling.records import Day, ScheduleItem, parse_time
from .data_access_layer import DataAccessLayer

logger = logging.getLogger(__name__)


@dataclass
class MaterializationResult:
    cycle_id: int
    deleted: int
    inserted: int

    def to_dict(self) -> Dict:
        return {'cycle_id': self.cycle_id, 'deleted': self.deleted, 'inserted': self.inserted}


def _item_from_row(row: HorarioGeneral) -> ScheduleItem:
    grupo = row.grupo
    return ScheduleItem(
        schedule_id=row.ciclo_id,
        degree_program=row.nombre_carrera,
        group_id=row.grupo_id,
        day=Day.parse(row.dia),
        start_time=row.hora_inicio,
        end_time=row.hora_fin,
        classroom_id=grupo.salon_id,
        professor_id=grupo.profesor_id,
        subject_id=grupo.materia_id,
    )


class ScheduleMaterializer:
    """Atomic replace and read-back of the general schedule"""

    @staticmethod
    def save(cycle_id, items: Iterable[ScheduleItem]) -> MaterializationResult:
        """
        Replace the general schedule of a cycle with `items`.

        Raises:
            NoCycleError: the cycle does not exist
            ScheduleMaterializationError: the database rejected the change;
                nothing was committed
        """
        items = list(items)
        try:
            with transaction.atomic():
                # Serializes concurrent runs for the same cycle
                if not Ciclo.objects.select_for_update().filter(id_ciclo=cycle_id).exists():
                    raise NoCycleError(f"Cycle {cycle_id} does not exist")

                deleted, _ = HorarioGeneral.objects.filter(ciclo_id=cycle_id).delete()
                HorarioGeneral.objects.bulk_create([
                    HorarioGeneral(
                        ciclo_id=cycle_id,
                        nombre_carrera=item.degree_program,
                        grupo_id=item.group_id,
                        dia=item.day.value,
                        hora_inicio=item.start_time,
                        hora_fin=item.end_time,
                    )
                    for item in items
                ])
        except DatabaseError as e:
            logger.error(f"❌ Saving general schedule for cycle {cycle_id} failed, rolled back: {e}",
                         exc_info=True)
            raise ScheduleMaterializationError(
                cycle_id, f"Could not save the general schedule for cycle {cycle_id}: {e}"
            ) from e

        logger.info(f"✅ General schedule for cycle {cycle_id} saved: "
                    f"{deleted} rows replaced by {len(items)}")
        return MaterializationResult(cycle_id=cycle_id, deleted=deleted, inserted=len(items))

    @staticmethod
    def load_items(cycle_id) -> List[ScheduleItem]:
        rows = DataAccessLayer.get_general_schedule_rows(cycle_id)
        items = [_item_from_row(row) for row in rows]
        items.sort(key=lambda i: (i.day.index, i.start_time, i.group_id))
        return items

    @staticmethod
    def get_general_schedule(cycle_id=None) -> List[Dict]:
        """
        General schedule of a cycle (latest cycle when omitted) for display,
        joined with subject, professor and classroom names.
        """
        if cycle_id is None:
            cycle_id = DataAccessLayer.get_latest_cycle_id()
            if cycle_id is None:
                return []

        schedule = []
        rows = DataAccessLayer.get_general_schedule_rows(cycle_id)
        for row in sorted(rows, key=lambda r: (Day.parse(r.dia).index, r.hora_inicio, r.grupo_id)):
            entry = _item_from_row(row).to_dict()
            entry.update({
                'subject_name': row.grupo.materia.nombre,
                'professor_name': row.grupo.profesor.nombre,
                'semester': row.grupo.semestre,
            })
            schedule.append(entry)
        return schedule

    @staticmethod
    def get_degree_programs() -> List[str]:
        return DataAccessLayer.get_degree_programs()

    @staticmethod
    def items_from_rows(cycle_id, rows: Iterable[Dict],
                        default_degree_program: Optional[str] = None) -> List[ScheduleItem]:
        """
        Build schedule items from edited rows
        ({'group_id', 'day', 'start_time', 'end_time', 'degree_program'?}).

        Raises ValueError on the first malformed row.
        """
        groups = {g.id_grupo: g for g in DataAccessLayer.get_groups(cycle_id=cycle_id)}
        items = []
        for position, row in enumerate(rows, start=1):
            try:
                group_id = int(row.get('group_id', row.get('IdGrupo')))
                day = Day.parse(row.get('day', row.get('Dia')))
                start = parse_time(row.get('start_time', row.get('HoraInicio')))
                end = parse_time(row.get('end_time', row.get('HoraFin')))
            except (TypeError, ValueError) as e:
                raise ValueError(f"Row {position}: {e}") from e
            if start >= end:
                raise ValueError(f"Row {position}: start time must be before end time")
            grupo = groups.get(group_id)
            if grupo is None:
                raise ValueError(f"Row {position}: group {group_id} does not belong to cycle {cycle_id}")

            degree_program = (row.get('degree_program') or row.get('NombreCarrera')
                              or grupo.materia.carrera or default_degree_program)
            items.append(ScheduleItem(
                schedule_id=int(cycle_id),
                degree_program=degree_program,
                group_id=group_id,
                day=day,
                start_time=start,
                end_time=end,
                classroom_id=grupo.salon_id,
                professor_id=grupo.profesor_id,
                subject_id=grupo.materia_id,
            ))
        return items
