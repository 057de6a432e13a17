"""
Django Models for the scheduling system
Table and column names follow the existing Via Alta database
"""

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .scheduling.records import WEEKDAYS

DIA_CHOICES = [(day.value, day.value) for day in WEEKDAYS]


class Profesor(models.Model):
    """Profesor - Professor - Profesor"""
    id_profesor = models.CharField(max_length=20, primary_key=True, db_column='IdProfesor', verbose_name="ID profesor")
    nombre = models.CharField(max_length=200, db_column='Nombre', verbose_name="Nombre")
    clases = models.TextField(blank=True, default='', db_column='Clases', verbose_name="Clases",
                              help_text="Materias que imparte: lista separada por comas o arreglo JSON")

    class Meta:
        db_table = 'Profesor'
        verbose_name = "Profesor"
        verbose_name_plural = "Profesores"
        ordering = ['id_profesor']

    def __str__(self):
        return f"{self.id_profesor} - {self.nombre}"


class Materia(models.Model):
    """Materia - Subject - Materia"""
    id_materia = models.AutoField(primary_key=True, db_column='IdMateria', verbose_name="ID materia")
    nombre = models.CharField(max_length=200, db_column='Nombre', verbose_name="Nombre")
    horas_clase = models.FloatField(db_column='HorasClase', validators=[MinValueValidator(0)],
                                    verbose_name="Horas de clase por semana")
    requisitos = models.CharField(max_length=300, blank=True, default='', db_column='Requisitos',
                                  verbose_name="Requisitos")
    carrera = models.CharField(max_length=200, null=True, blank=True, db_column='Carrera', verbose_name="Carrera")
    semestre = models.SmallIntegerField(default=1, db_column='Semestre', validators=[MinValueValidator(1)],
                                        verbose_name="Semestre")

    class Meta:
        db_table = 'Materia'
        verbose_name = "Materia"
        verbose_name_plural = "Materias"
        ordering = ['id_materia']

    def __str__(self):
        return f"{self.id_materia} - {self.nombre}"


class Salon(models.Model):
    """Salón - Classroom - Salon"""
    id_salon = models.CharField(max_length=20, primary_key=True, db_column='IdSalon', verbose_name="ID salón")
    cupo = models.IntegerField(default=0, db_column='Cupo', validators=[MinValueValidator(0)], verbose_name="Cupo")
    tipo = models.CharField(max_length=50, blank=True, default='', db_column='Tipo', verbose_name="Tipo")

    class Meta:
        db_table = 'Salon'
        verbose_name = "Salón"
        verbose_name_plural = "Salones"
        ordering = ['id_salon']

    def __str__(self):
        return f"{self.id_salon} ({self.tipo or 'sin tipo'}, cupo {self.cupo})"


class Ciclo(models.Model):
    """Ciclo escolar - Academic cycle - Ciclo"""
    id_ciclo = models.AutoField(primary_key=True, db_column='IdCiclo', verbose_name="ID ciclo")
    nombre = models.CharField(max_length=100, db_column='Nombre', verbose_name="Nombre")
    fecha_inicio = models.DateField(null=True, blank=True, db_column='FechaInicio', verbose_name="Fecha de inicio")
    fecha_fin = models.DateField(null=True, blank=True, db_column='FechaFin', verbose_name="Fecha de fin")

    class Meta:
        db_table = 'Ciclo'
        verbose_name = "Ciclo"
        verbose_name_plural = "Ciclos"
        ordering = ['-id_ciclo']

    def clean(self):
        if self.fecha_inicio and self.fecha_fin and self.fecha_inicio > self.fecha_fin:
            raise ValidationError("La fecha de inicio debe ser anterior a la fecha de fin")

    def __str__(self):
        return f"{self.id_ciclo} - {self.nombre}"


class Grupo(models.Model):
    """Grupo - one subject taught by one professor in one cycle - Grupo"""
    id_grupo = models.IntegerField(primary_key=True, db_column='IdGrupo', verbose_name="ID grupo")
    materia = models.ForeignKey(Materia, on_delete=models.CASCADE, db_column='IdMateria',
                                related_name='grupos', verbose_name="Materia")
    profesor = models.ForeignKey(Profesor, on_delete=models.CASCADE, db_column='IdProfesor',
                                 related_name='grupos', verbose_name="Profesor")
    salon = models.ForeignKey(Salon, on_delete=models.SET_NULL, null=True, blank=True, db_column='IdSalon',
                              related_name='grupos', verbose_name="Salón")
    ciclo = models.ForeignKey(Ciclo, on_delete=models.CASCADE, db_column='IdCiclo',
                              related_name='grupos', verbose_name="Ciclo")
    semestre = models.SmallIntegerField(default=1, db_column='Semestre', verbose_name="Semestre")

    class Meta:
        db_table = 'Grupo'
        verbose_name = "Grupo"
        verbose_name_plural = "Grupos"
        ordering = ['id_grupo']
        indexes = [
            models.Index(fields=['ciclo'], name='IX_Grupo_IdCiclo'),
        ]

    def __str__(self):
        return f"Grupo {self.id_grupo} - {self.materia_id} / {self.profesor_id}"


class Disponibilidad(models.Model):
    """Disponibilidad - professor availability window - Disponibilidad"""
    id_disponibilidad = models.AutoField(primary_key=True, db_column='IdDisponibilidad',
                                         verbose_name="ID disponibilidad")
    profesor = models.ForeignKey(Profesor, on_delete=models.CASCADE, db_column='IdProfesor',
                                 related_name='disponibilidades', verbose_name="Profesor")
    dia = models.CharField(max_length=10, choices=DIA_CHOICES, db_column='Dia', verbose_name="Día")
    hora_inicio = models.TimeField(db_column='HoraInicio', verbose_name="Hora de inicio")
    hora_fin = models.TimeField(db_column='HoraFin', verbose_name="Hora de fin")

    class Meta:
        db_table = 'Disponibilidad'
        verbose_name = "Disponibilidad"
        verbose_name_plural = "Disponibilidades"
        ordering = ['profesor', 'id_disponibilidad']

    def clean(self):
        if self.hora_inicio and self.hora_fin and self.hora_inicio >= self.hora_fin:
            raise ValidationError("La hora de inicio debe ser anterior a la hora de fin")

    def __str__(self):
        return f"{self.profesor_id} {self.dia} {self.hora_inicio:%H:%M}-{self.hora_fin:%H:%M}"


class HorarioGeneral(models.Model):
    """Horario general - one row of a cycle's general schedule - HorarioGeneral"""
    ciclo = models.ForeignKey(Ciclo, on_delete=models.CASCADE, db_column='IdHorarioGeneral',
                              related_name='horario_general', verbose_name="Ciclo")
    nombre_carrera = models.CharField(max_length=200, db_column='NombreCarrera', verbose_name="Carrera")
    grupo = models.ForeignKey(Grupo, on_delete=models.CASCADE, db_column='IdGrupo',
                              related_name='horario_general', verbose_name="Grupo")
    dia = models.CharField(max_length=10, choices=DIA_CHOICES, db_column='Dia', verbose_name="Día")
    hora_inicio = models.TimeField(db_column='HoraInicio', verbose_name="Hora de inicio")
    hora_fin = models.TimeField(db_column='HoraFin', verbose_name="Hora de fin")

    class Meta:
        db_table = 'HorarioGeneral'
        verbose_name = "Horario general"
        verbose_name_plural = "Horario general"
        ordering = ['ciclo', 'id']
        unique_together = [['ciclo', 'grupo', 'dia', 'hora_inicio']]

    def __str__(self):
        return f"{self.ciclo_id} {self.grupo_id} {self.dia} {self.hora_inicio:%H:%M}-{self.hora_fin:%H:%M}"
