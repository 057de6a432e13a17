"""core URL Configuration"""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('api/horarios/', include('apps.horarios.urls')),
    path('admin/', admin.site.urls),
]
