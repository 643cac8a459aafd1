"""
Unit of Work - Implementação Django.

Gerencia transações atômicas, garantindo que eventos de domínio
só sejam publicados depois que o documento do ticket foi gravado.

Responsabilidades:
- Iniciar/finalizar transações
- Commit/Rollback coordenado
- Publicar eventos após commit bem-sucedido
"""

from typing import List, Optional
import logging

from django.db import transaction

from src.core.shared.interfaces import EventPublisher, UnitOfWork
from src.core.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Usa um bloco transaction.atomic() aberto em _begin_transaction e
    fechado em commit/rollback. Dentro de uma transação externa (ex:
    testes com pytest-django) vira um savepoint.

    Example:
        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            repo.save(ticket)
            uow.publish_event(StatusAlteradoEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.save(ticket)
            raise Exception("Erro!")
        # Rollback automático, eventos descartados
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Fecha o bloco atômico e publica eventos.

        Ordem de execução:
        1. Commit da transação no banco
        2. Publicar eventos (após commit)
        3. Limpar fila de eventos

        Raises:
            Exception: Se commit falhar, eventos são descartados
        """
        if self._committed or self._rolled_back:
            logger.warning("Transaction already finalized")
            return

        atomic, self._atomic = self._atomic, None
        try:
            if atomic is not None:
                atomic.__exit__(None, None, None)
                logger.debug("Transaction committed")
        except Exception:
            self._rolled_back = True
            self.clear_events()
            raise

        self._committed = True

        if self._events:
            self._publish_events()

    def rollback(self) -> None:
        """Desfaz todas as mudanças e descarta eventos."""
        if self._committed or self._rolled_back:
            return

        atomic, self._atomic = self._atomic, None
        self._rolled_back = True
        self.clear_events()

        if atomic is not None:
            atomic.__exit__(Exception, Exception("rollback"), None)
            logger.debug("Transaction rolled back")

    def _publish_events(self) -> None:
        """
        Publica eventos após commit bem-sucedido.

        Falha de publicação não desfaz a escrita já confirmada; o erro
        é registrado em log.
        """
        events, self._events = list(self._events), []

        for event in events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event {event.event_id}: {e}")

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada - apenas simula comportamento
    para testes unitários sem banco de dados.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self):
        super().__init__()
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        """Simula início de transação."""
        pass

    def commit(self) -> None:
        self._committed = True
        self._published_events.extend(self._events)
        self.clear_events()

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Retorna eventos que foram 'publicados'."""
        return self._published_events
