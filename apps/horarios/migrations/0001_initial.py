import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

DIA_CHOICES = [
    ('Lunes', 'Lunes'),
    ('Martes', 'Martes'),
    ('Miércoles', 'Miércoles'),
    ('Jueves', 'Jueves'),
    ('Viernes', 'Viernes'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Ciclo',
            fields=[
                ('id_ciclo', models.AutoField(db_column='IdCiclo', primary_key=True, serialize=False, verbose_name='ID ciclo')),
                ('nombre', models.CharField(db_column='Nombre', max_length=100, verbose_name='Nombre')),
                ('fecha_inicio', models.DateField(blank=True, db_column='FechaInicio', null=True, verbose_name='Fecha de inicio')),
                ('fecha_fin', models.DateField(blank=True, db_column='FechaFin', null=True, verbose_name='Fecha de fin')),
            ],
            options={
                'verbose_name': 'Ciclo',
                'verbose_name_plural': 'Ciclos',
                'db_table': 'Ciclo',
                'ordering': ['-id_ciclo'],
            },
        ),
        migrations.CreateModel(
            name='Materia',
            fields=[
                ('id_materia', models.AutoField(db_column='IdMateria', primary_key=True, serialize=False, verbose_name='ID materia')),
                ('nombre', models.CharField(db_column='Nombre', max_length=200, verbose_name='Nombre')),
                ('horas_clase', models.FloatField(db_column='HorasClase', validators=[django.core.validators.MinValueValidator(0)], verbose_name='Horas de clase por semana')),
                ('requisitos', models.CharField(blank=True, db_column='Requisitos', default='', max_length=300, verbose_name='Requisitos')),
                ('carrera', models.CharField(blank=True, db_column='Carrera', max_length=200, null=True, verbose_name='Carrera')),
                ('semestre', models.SmallIntegerField(db_column='Semestre', default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='Semestre')),
            ],
            options={
                'verbose_name': 'Materia',
                'verbose_name_plural': 'Materias',
                'db_table': 'Materia',
                'ordering': ['id_materia'],
            },
        ),
        migrations.CreateModel(
            name='Profesor',
            fields=[
                ('id_profesor', models.CharField(db_column='IdProfesor', max_length=20, primary_key=True, serialize=False, verbose_name='ID profesor')),
                ('nombre', models.CharField(db_column='Nombre', max_length=200, verbose_name='Nombre')),
                ('clases', models.TextField(blank=True, db_column='Clases', default='', help_text='Materias que imparte: lista separada por comas o arreglo JSON', verbose_name='Clases')),
            ],
            options={
                'verbose_name': 'Profesor',
                'verbose_name_plural': 'Profesores',
                'db_table': 'Profesor',
                'ordering': ['id_profesor'],
            },
        ),
        migrations.CreateModel(
            name='Salon',
            fields=[
                ('id_salon', models.CharField(db_column='IdSalon', max_length=20, primary_key=True, serialize=False, verbose_name='ID salón')),
                ('cupo', models.IntegerField(db_column='Cupo', default=0, validators=[django.core.validators.MinValueValidator(0)], verbose_name='Cupo')),
                ('tipo', models.CharField(blank=True, db_column='Tipo', default='', max_length=50, verbose_name='Tipo')),
            ],
            options={
                'verbose_name': 'Salón',
                'verbose_name_plural': 'Salones',
                'db_table': 'Salon',
                'ordering': ['id_salon'],
            },
        ),
        migrations.CreateModel(
            name='Disponibilidad',
            fields=[
                ('id_disponibilidad', models.AutoField(db_column='IdDisponibilidad', primary_key=True, serialize=False, verbose_name='ID disponibilidad')),
                ('dia', models.CharField(choices=DIA_CHOICES, db_column='Dia', max_length=10, verbose_name='Día')),
                ('hora_inicio', models.TimeField(db_column='HoraInicio', verbose_name='Hora de inicio')),
                ('hora_fin', models.TimeField(db_column='HoraFin', verbose_name='Hora de fin')),
                ('profesor', models.ForeignKey(db_column='IdProfesor', on_delete=django.db.models.deletion.CASCADE, related_name='disponibilidades', to='horarios.profesor', verbose_name='Profesor')),
            ],
            options={
                'verbose_name': 'Disponibilidad',
                'verbose_name_plural': 'Disponibilidades',
                'db_table': 'Disponibilidad',
                'ordering': ['profesor', 'id_disponibilidad'],
            },
        ),
        migrations.CreateModel(
            name='Grupo',
            fields=[
                ('id_grupo', models.IntegerField(db_column='IdGrupo', primary_key=True, serialize=False, verbose_name='ID grupo')),
                ('semestre', models.SmallIntegerField(db_column='Semestre', default=1, verbose_name='Semestre')),
                ('ciclo', models.ForeignKey(db_column='IdCiclo', on_delete=django.db.models.deletion.CASCADE, related_name='grupos', to='horarios.ciclo', verbose_name='Ciclo')),
                ('materia', models.ForeignKey(db_column='IdMateria', on_delete=django.db.models.deletion.CASCADE, related_name='grupos', to='horarios.materia', verbose_name='Materia')),
                ('profesor', models.ForeignKey(db_column='IdProfesor', on_delete=django.db.models.deletion.CASCADE, related_name='grupos', to='horarios.profesor', verbose_name='Profesor')),
                ('salon', models.ForeignKey(blank=True, db_column='IdSalon', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='grupos', to='horarios.salon', verbose_name='Salón')),
            ],
            options={
                'verbose_name': 'Grupo',
                'verbose_name_plural': 'Grupos',
                'db_table': 'Grupo',
                'ordering': ['id_grupo'],
                'indexes': [models.Index(fields=['ciclo'], name='IX_Grupo_IdCiclo')],
            },
        ),
        migrations.CreateModel(
            name='HorarioGeneral',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre_carrera', models.CharField(db_column='NombreCarrera', max_length=200, verbose_name='Carrera')),
                ('dia', models.CharField(choices=DIA_CHOICES, db_column='Dia', max_length=10, verbose_name='Día')),
                ('hora_inicio', models.TimeField(db_column='HoraInicio', verbose_name='Hora de inicio')),
                ('hora_fin', models.TimeField(db_column='HoraFin', verbose_name='Hora de fin')),
                ('ciclo', models.ForeignKey(db_column='IdHorarioGeneral', on_delete=django.db.models.deletion.CASCADE, related_name='horario_general', to='horarios.ciclo', verbose_name='Ciclo')),
                ('grupo', models.ForeignKey(db_column='IdGrupo', on_delete=django.db.models.deletion.CASCADE, related_name='horario_general', to='horarios.grupo', verbose_name='Grupo')),
            ],
            options={
                'verbose_name': 'Horario general',
                'verbose_name_plural': 'Horario general',
                'db_table': 'HorarioGeneral',
                'ordering': ['ciclo', 'id'],
                'unique_together': {('ciclo', 'grupo', 'dia', 'hora_inicio')},
            },
        ),
    ]
