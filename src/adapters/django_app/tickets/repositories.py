"""
Repositórios Django para persistência de Tickets.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar TicketRepository protocol
- Mapear entities para models e vice-versa
- Regravar o documento inteiro (thread incluída) a cada save
- Detectar escrita concorrente via coluna `versao`

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
- Trata apenas persistência
"""

from typing import List, Optional
import logging

from django.db import DatabaseError
from django.db.models import F

from src.core.tickets.access import FiltroTickets
from src.core.tickets.entities import TicketEntity
from src.core.shared.exceptions import (
    ConcurrencyError,
    EntityNotFoundError,
    PersistenceError,
)

from .models import TicketModel
from .mappers import TicketMapper

logger = logging.getLogger(__name__)


class DjangoTicketRepository:
    """
    Implementação Django do TicketRepository.

    Implementa a interface definida em src/core/tickets/ports.py,
    usando Django ORM. A thread de mensagens vive no JSONField do
    próprio ticket.

    Example:
        repo = DjangoTicketRepository()

        repo.insert(ticket_entity)
        ticket = repo.get_by_id("uuid-here")
        ticket.adicionar_mensagem("u1", "Olá")
        repo.save(ticket)
    """

    def __init__(self):
        self._mapper = TicketMapper()

    def insert(self, ticket: TicketEntity) -> None:
        """
        Persiste ticket novo com versao=1.

        Raises:
            PersistenceError: Se o banco rejeitar a escrita
        """
        ticket.versao = 1
        model = self._mapper.to_model(ticket)

        try:
            model.save(force_insert=True)
        except DatabaseError as e:
            logger.error(f"Falha ao inserir ticket {ticket.id}: {e}")
            raise PersistenceError(f"Falha ao gravar ticket {ticket.id}") from e

        logger.info(f"Ticket inserted: {ticket.id}")

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        try:
            model = TicketModel.objects.get(id=ticket_id)
        except TicketModel.DoesNotExist:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None

        return self._mapper.to_entity(model)

    def find(self, filtro: FiltroTickets) -> List[TicketEntity]:
        """
        Lista tickets que casam com o filtro, mais recentes primeiro.

        Args:
            filtro: Critérios já com escopo de acesso aplicado
        """
        queryset = TicketModel.objects.all()

        if filtro.criador_id is not None:
            queryset = queryset.filter(criador_id=filtro.criador_id)

        if filtro.status is not None:
            queryset = queryset.filter(status=filtro.status)

        if filtro.prioridade is not None:
            queryset = queryset.filter(prioridade=filtro.prioridade)

        return self._mapper.to_entity_list(queryset.order_by('-criado_em'))

    def save(self, ticket: TicketEntity) -> None:
        """
        Regrava o documento do ticket se a versão não mudou.

        O UPDATE filtra por (id, versao); zero linhas afetadas significa
        ticket inexistente ou modificado por outro processo.

        Raises:
            EntityNotFoundError: Se o ticket não existe
            ConcurrencyError: Se a versão está desatualizada
            PersistenceError: Se o banco rejeitar a escrita
        """
        logger.debug(f"Saving ticket: {ticket.id} (v{ticket.versao})")

        try:
            atualizados = (
                TicketModel.objects
                .filter(id=ticket.id, versao=ticket.versao)
                .update(
                    versao=F('versao') + 1,
                    **self._mapper.campos_documento(ticket),
                )
            )
        except DatabaseError as e:
            logger.error(f"Falha ao salvar ticket {ticket.id}: {e}")
            raise PersistenceError(f"Falha ao gravar ticket {ticket.id}") from e

        if atualizados == 0:
            if not TicketModel.objects.filter(id=ticket.id).exists():
                raise EntityNotFoundError(
                    f"Ticket {ticket.id} não encontrado",
                    entity_type="Ticket",
                    entity_id=ticket.id,
                )
            logger.warning(f"Conflito de versão no ticket {ticket.id}")
            raise ConcurrencyError(
                f"Ticket {ticket.id} foi modificado por outro processo"
            )

        ticket.versao += 1
        logger.info(f"Ticket saved: {ticket.id} (v{ticket.versao})")

    def delete_by_criador(self, criador_id: str) -> int:
        """
        Remove todos os tickets do criador.

        Returns:
            Quantidade removida
        """
        try:
            total, _ = TicketModel.objects.filter(criador_id=criador_id).delete()
        except DatabaseError as e:
            logger.error(f"Falha ao excluir tickets de {criador_id}: {e}")
            raise PersistenceError(
                f"Falha ao excluir tickets do usuário {criador_id}"
            ) from e

        if total:
            logger.info(f"{total} ticket(s) deleted for creator {criador_id}")
        return total

    def count(self) -> int:
        return TicketModel.objects.count()
