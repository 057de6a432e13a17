"""
Views and ViewSets for the Horarios API
"""

import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .config import Config
from .exceptions import GroupValidationFailed, NoCycleError, ScheduleMaterializationError
from .models import Ciclo, Disponibilidad, Materia, Profesor, Salon
from .serializers import (
    CicloSerializer, DisponibilidadSerializer, GeneralScheduleUpdateSerializer,
    GroupGenerationSerializer, GroupParamsSerializer, GrupoSerializer, MateriaSerializer,
    ProfesorSerializer, SalonSerializer, ScheduleGenerationSerializer,
)
from .services.data_access_layer import DataAccessLayer
from .services.group_generator import GroupGenerator, GroupParams
from .services.schedule_generator import ScheduleGenerator
from .services.schedule_materializer import ScheduleMaterializer
from .utils.excel_export import export_general_schedule
from .validators.constraint_checker import ConstraintChecker

logger = logging.getLogger(__name__)


class ProfesorViewSet(viewsets.ModelViewSet):
    """ViewSet for Profesor"""
    queryset = Profesor.objects.all()
    serializer_class = ProfesorSerializer
    permission_classes = [IsAuthenticated]


class MateriaViewSet(viewsets.ModelViewSet):
    """ViewSet for Materia"""
    queryset = Materia.objects.all()
    serializer_class = MateriaSerializer
    permission_classes = [IsAuthenticated]


class SalonViewSet(viewsets.ModelViewSet):
    """ViewSet for Salon"""
    queryset = Salon.objects.all()
    serializer_class = SalonSerializer
    permission_classes = [IsAuthenticated]


class CicloViewSet(viewsets.ModelViewSet):
    """ViewSet for Ciclo"""
    queryset = Ciclo.objects.all()
    serializer_class = CicloSerializer
    permission_classes = [IsAuthenticated]


class DisponibilidadViewSet(viewsets.ModelViewSet):
    """ViewSet for Disponibilidad"""
    queryset = Disponibilidad.objects.select_related('profesor').all()
    serializer_class = DisponibilidadSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = super().get_queryset()
        professor_id = self.request.query_params.get('professor_id')
        if professor_id:
            queryset = queryset.filter(profesor_id__iexact=professor_id.strip())
        return queryset


class GrupoViewSet(viewsets.ModelViewSet):
    """ViewSet for Grupo, filterable by cycle_id, professor_id, subject_id and semester"""
    serializer_class = GrupoSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        filters = {}
        for name in ('cycle_id', 'subject_id', 'semester'):
            try:
                filters[name] = _int_param(self.request, name)
            except ValueError:
                raise ValidationError({name: 'must be an integer'})
        return DataAccessLayer.get_groups(
            professor_id=self.request.query_params.get('professor_id') or None,
            **filters
        )

    @action(detail=False, methods=['post'])
    def batch(self, request):
        """Create several groups; invalid items are reported, valid ones created"""
        params_list = request.data.get('groups')
        if not isinstance(params_list, list):
            return Response(
                {'success': False, 'error': 'groups must be a list'},
                status=status.HTTP_400_BAD_REQUEST
            )

        parsed = []
        for index, item in enumerate(params_list):
            serializer = GroupParamsSerializer(data=item)
            if not serializer.is_valid():
                return Response(
                    {'success': False, 'error': f'Invalid group at index {index}', 'details': serializer.errors},
                    status=status.HTTP_400_BAD_REQUEST
                )
            parsed.append(GroupParams(**serializer.validated_data))

        result = GroupGenerator().generate_groups_batch(parsed)
        return Response({'success': not result['errors'], **result}, status=status.HTTP_200_OK)


class ScheduleGenerationViewSet(viewsets.ViewSet):
    """ViewSet for schedule and group generation"""
    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=['post'])
    def generate(self, request):
        """Generate the general schedule of a cycle (latest cycle when omitted)"""
        serializer = ScheduleGenerationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'success': False, 'error': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        cycle_id = serializer.validated_data.get('cycle_id')
        logger.info(f"Schedule generation requested by {request.user} for cycle {cycle_id}")

        result = ScheduleGenerator().generate(cycle_id)
        code = status.HTTP_200_OK if result['success'] else status.HTTP_500_INTERNAL_SERVER_ERROR
        return Response(result, status=code)

    @action(detail=False, methods=['post'])
    def generate_groups(self, request):
        """Create groups for every professor of a cycle"""
        serializer = GroupGenerationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'success': False, 'error': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        data = serializer.validated_data
        generator = GroupGenerator(classroom_strategy=data.get('strategy'))
        try:
            result = generator.generate_for_all_professors(data['cycle_id'], replace=data['replace'])
        except GroupValidationFailed as e:
            return Response(
                {'success': False, 'error': str(e), 'details': [err.to_dict() for err in e.errors]},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(result, status=status.HTTP_200_OK)


def _int_param(request, name):
    """Integer query parameter (None when absent); raises ValueError"""
    value = request.query_params.get(name)
    if value in (None, ''):
        return None
    return int(value)


class GeneralScheduleView(APIView):
    """Read back (GET) or replace with coordinator edits (PUT) a general schedule"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            cycle_id = _int_param(request, 'cycle_id')
        except ValueError:
            return Response(
                {'success': False, 'error': 'cycle_id must be an integer'},
                status=status.HTTP_400_BAD_REQUEST
            )
        if cycle_id is None:
            cycle_id = DataAccessLayer.get_latest_cycle_id()

        schedule = ScheduleMaterializer.get_general_schedule(cycle_id) if cycle_id is not None else []
        return Response({
            'success': True,
            'cycle_id': cycle_id,
            'degree_programs': sorted({row['degree_program'] for row in schedule}),
            'schedule': schedule,
        })

    def put(self, request):
        serializer = GeneralScheduleUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'success': False, 'error': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        cycle_id = serializer.validated_data['cycle_id']
        if not DataAccessLayer.cycle_exists(cycle_id):
            return Response(
                {'success': False, 'error': f'Cycle {cycle_id} does not exist'},
                status=status.HTTP_404_NOT_FOUND
            )

        try:
            items = ScheduleMaterializer.items_from_rows(
                cycle_id, serializer.validated_data['schedule'],
                default_degree_program=Config.Generation.get_default_degree_program(),
            )
        except ValueError as e:
            return Response({'success': False, 'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        validation = ConstraintChecker.validate(items)
        if not validation['feasible']:
            return Response(
                {'success': False, 'error': 'Schedule breaks hard constraints', 'violations': validation['errors']},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            saved = ScheduleMaterializer.save(cycle_id, items)
        except (ScheduleMaterializationError, NoCycleError) as e:
            return Response({'success': False, 'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({'success': True, **saved.to_dict()}, status=status.HTTP_200_OK)


class GeneralScheduleExportView(APIView):
    """Download a general schedule as .xlsx"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            cycle_id = _int_param(request, 'cycle_id')
        except ValueError:
            return Response(
                {'success': False, 'error': 'cycle_id must be an integer'},
                status=status.HTTP_400_BAD_REQUEST
            )
        if cycle_id is None:
            cycle_id = DataAccessLayer.get_latest_cycle_id()
        if cycle_id is None or not DataAccessLayer.cycle_exists(cycle_id):
            return Response(
                {'success': False, 'error': 'Cycle not found'},
                status=status.HTTP_404_NOT_FOUND
            )
        return export_general_schedule(cycle_id)
