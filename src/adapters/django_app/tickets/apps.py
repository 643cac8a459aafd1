"""
Configuração do Django App para Tickets.

Conecta os signals do Identity Provider ao domínio.
"""

from django.apps import AppConfig


class TicketsConfig(AppConfig):
    """Configuração do app Tickets."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.tickets'
    label = 'tickets'
    verbose_name = 'Tickets de Suporte'

    def ready(self):
        """Conecta a exclusão de conta à limpeza de tickets."""
        from . import signals  # noqa: F401
