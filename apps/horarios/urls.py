"""
URL routing for the Horarios app
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

router = DefaultRouter()
router.register(r'professors', views.ProfesorViewSet, basename='profesor')
router.register(r'subjects', views.MateriaViewSet, basename='materia')
router.register(r'classrooms', views.SalonViewSet, basename='salon')
router.register(r'cycles', views.CicloViewSet, basename='ciclo')
router.register(r'groups', views.GrupoViewSet, basename='grupo')
router.register(r'availability', views.DisponibilidadViewSet, basename='disponibilidad')
router.register(r'schedule-generation', views.ScheduleGenerationViewSet, basename='schedule-generation')

app_name = 'horarios'

# Plain views first so the router does not capture their paths
urlpatterns = [
    path('general-schedule/', views.GeneralScheduleView.as_view(), name='general-schedule'),
    path('general-schedule/export/', views.GeneralScheduleExportView.as_view(), name='general-schedule-export'),
    path('', include(router.urls)),
]
