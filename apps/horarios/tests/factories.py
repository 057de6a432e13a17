"""
Shared fixtures for database-backed tests
"""

from datetime import date, time

from apps.horarios.models import Ciclo, Disponibilidad, Grupo, Materia, Profesor, Salon


def make_catalog():
    """
    Two professors, three subjects, two classrooms and one cycle.

    P001 teaches Cálculo (3 h) and Física (2 h), available
    Lunes 08-11, Martes 09-12, Miércoles 10-13.
    P002 teaches Química (1 h) with no availability.
    """
    ciclo = Ciclo.objects.create(id_ciclo=1, nombre='Primavera 2025',
                                 fecha_inicio=date(2025, 1, 13), fecha_fin=date(2025, 5, 30))
    calculo = Materia.objects.create(id_materia=1, nombre='Cálculo', horas_clase=3,
                                     carrera='Ingeniería', semestre=1)
    fisica = Materia.objects.create(id_materia=2, nombre='Física', horas_clase=2,
                                    carrera='Ingeniería', semestre=2)
    quimica = Materia.objects.create(id_materia=3, nombre='Química', horas_clase=1,
                                     carrera=None, semestre=1)
    a1 = Salon.objects.create(id_salon='A1', cupo=30, tipo='Aula')
    a2 = Salon.objects.create(id_salon='A2', cupo=25, tipo='Aula')
    p1 = Profesor.objects.create(id_profesor='P001', nombre='Ana López', clases='Cálculo, Física')
    p2 = Profesor.objects.create(id_profesor='P002', nombre='Luis Pérez', clases='["Química"]')

    for dia, start, end in (('Lunes', 8, 11), ('Martes', 9, 12), ('Miércoles', 10, 13)):
        Disponibilidad.objects.create(profesor=p1, dia=dia, hora_inicio=time(start, 0), hora_fin=time(end, 0))

    return {
        'ciclo': ciclo, 'calculo': calculo, 'fisica': fisica, 'quimica': quimica,
        'a1': a1, 'a2': a2, 'p1': p1, 'p2': p2,
    }


def make_groups(catalog):
    """Groups 1-3 in cycle 1"""
    return [
        Grupo.objects.create(id_grupo=1, materia=catalog['calculo'], profesor=catalog['p1'],
                             salon=catalog['a1'], ciclo=catalog['ciclo'], semestre=1),
        Grupo.objects.create(id_grupo=2, materia=catalog['fisica'], profesor=catalog['p1'],
                             salon=catalog['a2'], ciclo=catalog['ciclo'], semestre=2),
        Grupo.objects.create(id_grupo=3, materia=catalog['quimica'], profesor=catalog['p2'],
                             salon=catalog['a1'], ciclo=catalog['ciclo'], semestre=1),
    ]
