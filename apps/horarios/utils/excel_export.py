"""
Excel export of a cycle's general schedule
Sheet 1: one row per schedule item. Sheet 2: weekly grid (time x day).
"""

import logging
from io import BytesIO

import pandas as pd
from django.http import HttpResponse
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..scheduling.records import WEEKDAYS
from ..services.schedule_materializer import ScheduleMaterializer

logger = logging.getLogger(__name__)

ITEMS_SHEET = 'Horario'
WEEKLY_SHEET = 'Semana'

COLUMNS = [
    ('day', 'Día'),
    ('start_time', 'Hora inicio'),
    ('end_time', 'Hora fin'),
    ('group_id', 'Grupo'),
    ('subject_name', 'Materia'),
    ('professor_name', 'Profesor'),
    ('classroom_id', 'Salón'),
    ('degree_program', 'Carrera'),
    ('semester', 'Semestre'),
]

HEADER_FILL = PatternFill(start_color="0066CC", end_color="0066CC", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF", size=12)
THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)


def schedule_dataframe(schedule) -> pd.DataFrame:
    """General schedule rows (dicts) as a DataFrame with Spanish headers"""
    df = pd.DataFrame(schedule, columns=[key for key, _ in COLUMNS])
    return df.rename(columns=dict(COLUMNS))


def weekly_dataframe(schedule) -> pd.DataFrame:
    """Pivot: one row per time range, one column per weekday"""
    days = [day.value for day in WEEKDAYS]
    if not schedule:
        return pd.DataFrame(columns=['Hora'] + days)

    df = pd.DataFrame(schedule)
    df['Hora'] = df['start_time'] + '-' + df['end_time']
    df['Clase'] = df['subject_name'] + ' (G' + df['group_id'].astype(str) + ')'
    pivot = df.pivot_table(index='Hora', columns='day', values='Clase',
                           aggfunc=lambda values: '\n'.join(values))
    pivot = pivot.reindex(columns=days).fillna('')
    pivot = pivot.sort_index()
    return pivot.reset_index()


def _style_sheet(worksheet):
    for cell in worksheet[1]:
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = Alignment(horizontal='center', vertical='center')
        cell.border = THIN_BORDER

    for col_num, column in enumerate(worksheet.iter_cols(), start=1):
        max_length = max((len(line) for cell in column if cell.value is not None
                          for line in str(cell.value).split('\n')), default=0)
        worksheet.column_dimensions[get_column_letter(col_num)].width = min(max_length + 2, 50)
        for cell in column[1:]:
            cell.border = THIN_BORDER
            cell.alignment = Alignment(vertical='center', wrap_text=True)

    worksheet.freeze_panes = 'A2'


def build_general_schedule_workbook(cycle_id) -> bytes:
    """Workbook bytes for the general schedule of a cycle"""
    schedule = ScheduleMaterializer.get_general_schedule(cycle_id)

    output = BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        schedule_dataframe(schedule).to_excel(writer, sheet_name=ITEMS_SHEET, index=False)
        weekly_dataframe(schedule).to_excel(writer, sheet_name=WEEKLY_SHEET, index=False)

        _style_sheet(writer.book[ITEMS_SHEET])
        _style_sheet(writer.book[WEEKLY_SHEET])

    logger.info(f"Exported {len(schedule)} schedule items of cycle {cycle_id} to Excel")
    return output.getvalue()


def export_general_schedule(cycle_id) -> HttpResponse:
    response = HttpResponse(
        build_general_schedule_workbook(cycle_id),
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
    response['Content-Disposition'] = f'attachment; filename="horario_general_ciclo_{cycle_id}.xlsx"'
    return response
