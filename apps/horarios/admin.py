"""
Django Admin for the scheduling models
"""

from django.contrib import admin

from .models import Ciclo, Disponibilidad, Grupo, HorarioGeneral, Materia, Profesor, Salon


class DisponibilidadInline(admin.TabularInline):
    model = Disponibilidad
    extra = 0


@admin.register(Profesor)
class ProfesorAdmin(admin.ModelAdmin):
    list_display = ['id_profesor', 'nombre', 'clases']
    search_fields = ['id_profesor', 'nombre']
    inlines = [DisponibilidadInline]
    list_per_page = 20


@admin.register(Materia)
class MateriaAdmin(admin.ModelAdmin):
    list_display = ['id_materia', 'nombre', 'horas_clase', 'carrera', 'semestre']
    list_filter = ['carrera', 'semestre']
    search_fields = ['nombre']
    list_per_page = 20


@admin.register(Salon)
class SalonAdmin(admin.ModelAdmin):
    list_display = ['id_salon', 'tipo', 'cupo']
    list_filter = ['tipo']


@admin.register(Ciclo)
class CicloAdmin(admin.ModelAdmin):
    list_display = ['id_ciclo', 'nombre', 'fecha_inicio', 'fecha_fin']


@admin.register(Grupo)
class GrupoAdmin(admin.ModelAdmin):
    list_display = ['id_grupo', 'materia', 'profesor', 'salon', 'ciclo', 'semestre']
    list_filter = ['ciclo', 'semestre']
    search_fields = ['materia__nombre', 'profesor__nombre', 'profesor__id_profesor']
    list_select_related = ['materia', 'profesor', 'salon', 'ciclo']


@admin.register(HorarioGeneral)
class HorarioGeneralAdmin(admin.ModelAdmin):
    list_display = ['ciclo', 'nombre_carrera', 'grupo', 'dia', 'hora_inicio', 'hora_fin']
    list_filter = ['ciclo', 'nombre_carrera', 'dia']
    list_select_related = ['ciclo', 'grupo']
