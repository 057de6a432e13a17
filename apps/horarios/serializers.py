"""
Serializers for the Horarios API
"""

from rest_framework import serializers

from .models import Ciclo, Disponibilidad, Grupo, Materia, Profesor, Salon
from .scheduling.classroom import STRATEGIES
from .scheduling.records import Day

TIME_INPUT_FORMATS = ['%H:%M', '%H:%M:%S']


class ProfesorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profesor
        fields = '__all__'


class MateriaSerializer(serializers.ModelSerializer):
    class Meta:
        model = Materia
        fields = '__all__'


class SalonSerializer(serializers.ModelSerializer):
    class Meta:
        model = Salon
        fields = '__all__'


class CicloSerializer(serializers.ModelSerializer):
    class Meta:
        model = Ciclo
        fields = '__all__'


class GrupoSerializer(serializers.ModelSerializer):
    materia_nombre = serializers.CharField(source='materia.nombre', read_only=True)
    profesor_nombre = serializers.CharField(source='profesor.nombre', read_only=True)
    ciclo_nombre = serializers.CharField(source='ciclo.nombre', read_only=True)

    class Meta:
        model = Grupo
        fields = '__all__'


class DisponibilidadSerializer(serializers.ModelSerializer):
    hora_inicio = serializers.TimeField(input_formats=TIME_INPUT_FORMATS)
    hora_fin = serializers.TimeField(input_formats=TIME_INPUT_FORMATS)

    class Meta:
        model = Disponibilidad
        fields = '__all__'

    def validate_dia(self, value):
        try:
            return Day.parse(value).value
        except ValueError as e:
            raise serializers.ValidationError(str(e))

    def validate(self, attrs):
        start = attrs.get('hora_inicio', getattr(self.instance, 'hora_inicio', None))
        end = attrs.get('hora_fin', getattr(self.instance, 'hora_fin', None))
        if start and end and start >= end:
            raise serializers.ValidationError('hora_inicio must be before hora_fin')
        return attrs


class ScheduleGenerationSerializer(serializers.Serializer):
    """Input for schedule generation"""
    cycle_id = serializers.IntegerField(required=False, allow_null=True)


class GroupGenerationSerializer(serializers.Serializer):
    """Input for generating the groups of a cycle"""
    cycle_id = serializers.IntegerField()
    replace = serializers.BooleanField(default=False)
    strategy = serializers.ChoiceField(choices=sorted(STRATEGIES), required=False)


class GroupParamsSerializer(serializers.Serializer):
    subject_id = serializers.IntegerField()
    professor_id = serializers.CharField()
    classroom_id = serializers.CharField(required=False, allow_null=True, default=None)
    cycle_id = serializers.IntegerField()
    group_id = serializers.IntegerField(required=False, allow_null=True, default=None)


class ScheduleItemInputSerializer(serializers.Serializer):
    """One edited row of the general schedule"""
    group_id = serializers.IntegerField()
    day = serializers.CharField()
    start_time = serializers.TimeField(input_formats=TIME_INPUT_FORMATS)
    end_time = serializers.TimeField(input_formats=TIME_INPUT_FORMATS)
    degree_program = serializers.CharField(required=False, allow_blank=True)

    def validate_day(self, value):
        try:
            return Day.parse(value).value
        except ValueError as e:
            raise serializers.ValidationError(str(e))

    def validate(self, attrs):
        if attrs['start_time'] >= attrs['end_time']:
            raise serializers.ValidationError('start_time must be before end_time')
        return attrs


class GeneralScheduleUpdateSerializer(serializers.Serializer):
    cycle_id = serializers.IntegerField()
    schedule = ScheduleItemInputSerializer(many=True)
