"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por entregar eventos, já comitados, aos handlers.
Implementações:
- LoggingEventPublisher: Apenas loga (modo "sync", desenvolvimento)
- CeleryEventPublisher: Despacha via Celery (modo "celery", produção)
- InMemoryEventPublisher: Para testes
"""

from typing import List
import json
import logging

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)


class LoggingEventPublisher(EventPublisher):
    """
    Publisher que apenas loga eventos.

    Usado em desenvolvimento para visualizar eventos
    sem necessidade de broker.
    """

    def __init__(self, log_level: int = logging.INFO):
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict()['data'], default=str)}"
        )


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para Celery.

    Notificações rodam nos workers, fora do request.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        """
        Publica evento via Celery.

        Falha no broker não desfaz a operação já comitada; o erro
        é registrado e o evento se perde.
        """
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        try:
            from src.adapters.django_app.events.handlers import dispatch_domain_event
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)


class InMemoryEventPublisher(EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação em testes.
    """

    def __init__(self):
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()


def get_event_publisher(mode: str = "sync") -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        mode: "celery" para processamento assíncrono; qualquer outro
            valor usa o publisher de log

    Returns:
        Publisher configurado
    """
    if mode == "celery":
        return CeleryEventPublisher()
    return LoggingEventPublisher()
