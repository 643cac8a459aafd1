"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados. Implementam o Notification Channel:
o criador do ticket recebe e-mail quando um admin é atribuído,
quando o status muda e quando outra pessoa responde na thread.

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # Processar evento

event_data é o dict de DomainEvent.to_dict(); os campos específicos
do evento ficam em event_data["data"].
"""

import logging
from typing import Any, Dict

from celery import shared_task
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


STATUS_LABELS = {
    'open': 'Aberto',
    'in_progress': 'Em Progresso',
    'resolved': 'Resolvido',
    'closed': 'Fechado',
}


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=60, acks_late=True)
def handle_ticket_criado(self, event_data: Dict[str, Any]) -> None:
    """Registra abertura de ticket (sem notificação ao próprio criador)."""
    data = event_data.get('data', {})

    logger.info(
        f"[HANDLER] TicketCriado: {event_data.get('aggregate_id')} | "
        f"Criador: {data.get('criador_id')} | Prioridade: {data.get('prioridade')}"
    )


@shared_task(bind=True, max_retries=3, default_retry_delay=60, acks_late=True)
def handle_mensagem_adicionada(self, event_data: Dict[str, Any]) -> None:
    """
    Notifica o criador quando outra pessoa responde.

    Mensagens do próprio criador não geram e-mail.
    """
    ticket_id = event_data.get('aggregate_id')
    data = event_data.get('data', {})
    criador_id = data.get('criador_id')

    logger.info(
        f"[HANDLER] MensagemAdicionada: {ticket_id} | "
        f"Remetente: {data.get('remetente_id')} | Posição: {data.get('posicao')}"
    )

    if data.get('remetente_id') == criador_id:
        return

    notificar_usuario.delay(
        usuario_id=criador_id,
        assunto=f"Nova resposta no ticket {ticket_id[:8]}",
        mensagem="Seu ticket recebeu uma nova resposta da equipe de suporte.",
    )


@shared_task(bind=True, max_retries=3, default_retry_delay=60, acks_late=True)
def handle_admin_atribuido(self, event_data: Dict[str, Any]) -> None:
    """Notifica o criador de que o ticket está em atendimento."""
    ticket_id = event_data.get('aggregate_id')
    data = event_data.get('data', {})

    logger.info(
        f"[HANDLER] AdminAtribuido: {ticket_id} | Admin: {data.get('admin_id')}"
    )

    notificar_usuario.delay(
        usuario_id=data.get('criador_id'),
        assunto=f"Ticket {ticket_id[:8]} em atendimento",
        mensagem="Um atendente foi designado para o seu ticket.",
    )


@shared_task(bind=True, max_retries=3, default_retry_delay=60, acks_late=True)
def handle_status_alterado(self, event_data: Dict[str, Any]) -> None:
    """Notifica o criador da mudança de status."""
    ticket_id = event_data.get('aggregate_id')
    data = event_data.get('data', {})
    novo = data.get('status_novo')

    logger.info(
        f"[HANDLER] StatusAlterado: {ticket_id} | "
        f"{data.get('status_anterior')} -> {novo}"
    )

    notificar_usuario.delay(
        usuario_id=data.get('criador_id'),
        assunto=f"Ticket {ticket_id[:8]}: {STATUS_LABELS.get(novo, novo)}",
        mensagem=f"O status do seu ticket mudou para {STATUS_LABELS.get(novo, novo)}.",
    )


@shared_task(bind=True, ignore_result=True)
def handle_tickets_excluidos(self, event_data: Dict[str, Any]) -> None:
    logger.info(
        f"[HANDLER] TicketsExcluidos: usuário {event_data.get('aggregate_id')} | "
        f"total={event_data.get('data', {}).get('total')}"
    )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

EVENT_HANDLERS = {
    'TicketCriadoEvent': handle_ticket_criado,
    'MensagemAdicionadaEvent': handle_mensagem_adicionada,
    'AdminAtribuidoEvent': handle_admin_atribuido,
    'StatusAlteradoEvent': handle_status_alterado,
    'TicketsExcluidosEvent': handle_tickets_excluidos,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados.

    Args:
        event_type: Tipo do evento (ex: 'StatusAlteradoEvent')
        event_data: Dados do evento serializado
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


# =============================================================================
# Notification Tasks
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=120,
    autoretry_for=(ConnectionError, OSError),
)
def notificar_usuario(self, usuario_id: str, assunto: str, mensagem: str) -> bool:
    """
    Envia e-mail ao usuário.

    Returns:
        True se o e-mail foi enviado; False se o usuário não existe
        ou não tem e-mail cadastrado
    """
    User = get_user_model()
    usuario = User.objects.filter(pk=usuario_id).first() if str(usuario_id).isdigit() else None

    if usuario is None or not usuario.email:
        logger.info(f"[NOTIFICATION] Usuário {usuario_id} sem e-mail; ignorado")
        return False

    send_mail(
        subject=assunto,
        message=mensagem,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[usuario.email],
    )

    logger.info(f"[NOTIFICATION] EMAIL para {usuario_id}: {assunto}")
    return True
