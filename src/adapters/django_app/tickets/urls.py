"""
URL patterns para o domínio de Tickets.

Endpoints API JSON:
- GET /tickets/api/ - Listar tickets (escopo por papel)
- POST /tickets/api/ - Abrir ticket (multipart com anexos)
- GET /tickets/api/mine/ - Tickets do usuário autenticado
- GET /tickets/api/<id>/ - Ticket com thread completa
- POST /tickets/api/<id>/messages/ - Responder na thread
- POST /tickets/api/<id>/assign/ - Atribuir admin (admin)
- PATCH /tickets/api/<id>/status/ - Alterar status (admin)
"""

from django.urls import path
from . import api_views

app_name = 'tickets'

urlpatterns = [
    path('api/', api_views.TicketAPIListView.as_view(), name='api_list'),

    # Antes do <pk> para não conflitar
    path('api/mine/', api_views.TicketAPIMineView.as_view(), name='api_mine'),

    path('api/<str:pk>/', api_views.TicketAPIDetailView.as_view(), name='api_detail'),
    path('api/<str:pk>/messages/', api_views.TicketAPIMessagesView.as_view(), name='api_messages'),
    path('api/<str:pk>/assign/', api_views.TicketAPIAssignView.as_view(), name='api_assign'),
    path('api/<str:pk>/status/', api_views.TicketAPIStatusView.as_view(), name='api_status'),
]
