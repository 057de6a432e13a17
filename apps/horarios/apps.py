from django.apps import AppConfig


class HorariosConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.horarios'
    verbose_name = 'Horarios'
