"""
URL Configuration para SupportDesk Tickets.

Estrutura:
- /admin/ - Django Admin (gestão de usuários)
- /tickets/api/ - API JSON de Tickets
- /health/ - Health check
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    path('admin/', admin.site.urls),
    path('tickets/', include('src.adapters.django_app.tickets.urls')),
    path('health/', health, name='health'),
]
