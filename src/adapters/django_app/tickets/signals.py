"""
Signals do Identity Provider.

Quando uma conta de usuário é excluída, todos os tickets que ela
criou são removidos junto.
"""

import logging

from django.conf import settings
from django.db.models.signals import post_delete
from django.dispatch import receiver

from src.config.container import get_container

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=settings.AUTH_USER_MODEL, dispatch_uid='tickets_excluir_por_criador')
def excluir_tickets_do_usuario(sender, instance, **kwargs):
    service = get_container().excluir_tickets_por_criador_service()
    total = service.execute(str(instance.pk))

    logger.info(f"Conta {instance.pk} excluída; {total} ticket(s) removidos")
