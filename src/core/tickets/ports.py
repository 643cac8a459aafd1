"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar.

Tipos de Ports:
- TicketRepository: Store de documentos de ticket (thread embutida)
- AttachmentStore: Serviço externo de arquivos (ex: Cloudinary)
- UsuarioDirectory: Resumos de usuários (Identity Provider)
- PedidoDirectory: Resumos de pedidos (Order Reference)

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core

Também contém as implementações em memória usadas nos testes.
"""

import copy
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from src.core.shared.exceptions import ConcurrencyError, EntityNotFoundError

from .access import FiltroTickets
from .dtos import ArquivoBruto, UsuarioResumoDTO, PedidoResumoDTO
from .entities import TicketEntity


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Cada ticket é um documento único contendo toda a thread de
    mensagens e anexos; não existe store separado de mensagens.

    Implementações:
    - DjangoTicketRepository (ORM, thread em JSONField)
    - InMemoryTicketRepository (para testes)

    Controle de concorrência:
        save() compara ticket.versao com a versão persistida. Se outro
        processo salvou antes, lança ConcurrencyError em vez de
        sobrescrever o documento. Em caso de sucesso incrementa
        ticket.versao.
    """

    def insert(self, ticket: TicketEntity) -> None:
        """
        Persiste ticket novo.

        Raises:
            PersistenceError: Se falha na escrita
        """
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        """Busca ticket por ID; None se não existir."""
        ...

    def find(self, filtro: FiltroTickets) -> List[TicketEntity]:
        """
        Lista tickets que casam com o filtro.

        Returns:
            Tickets ordenados do mais recente para o mais antigo
        """
        ...

    def save(self, ticket: TicketEntity) -> None:
        """
        Regrava o documento inteiro de um ticket existente.

        Raises:
            EntityNotFoundError: Se o ticket não existe
            ConcurrencyError: Se a versão está desatualizada
            PersistenceError: Se falha na escrita
        """
        ...

    def delete_by_criador(self, criador_id: str) -> int:
        """Remove todos os tickets do criador; retorna a quantidade."""
        ...

    def count(self) -> int:
        """Conta total de tickets."""
        ...


@dataclass(frozen=True)
class UploadResult:
    """Resposta do Attachment Store para um arquivo."""

    url: str
    id_externo: str


class AttachmentStore(Protocol):
    """
    Interface para o serviço externo de arquivos.

    Implementações devem ser thread-safe: o orquestrador chama
    upload() em paralelo para os arquivos de um mesmo lote.
    """

    def upload(self, arquivo: ArquivoBruto, pasta: str) -> UploadResult:
        """
        Envia um arquivo para a pasta indicada.

        Raises:
            Exception: Qualquer falha; o orquestrador converte em UploadError
        """
        ...


class UsuarioDirectory(Protocol):
    """Consulta resumos de usuários no Identity Provider."""

    def obter_resumos(self, usuario_ids: Iterable[str]) -> Dict[str, UsuarioResumoDTO]:
        """
        Busca resumos em lote.

        Returns:
            Dict id → resumo; ids desconhecidos ficam ausentes
        """
        ...


class PedidoDirectory(Protocol):
    """Consulta resumos de pedidos (Order Reference)."""

    def obter_resumos(self, pedido_ids: Iterable[str]) -> Dict[str, PedidoResumoDTO]:
        """
        Busca resumos em lote.

        Returns:
            Dict id → resumo; ids desconhecidos ficam ausentes
        """
        ...


# =============================================================================
# Implementações em memória
# =============================================================================

class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Guarda cópias profundas, imitando um store de documentos: alterar
    a entidade retornada não altera o que está "persistido" até save().

    Útil para:
    - Testes unitários
    - Prototipagem

    Não usar em produção!
    """

    def __init__(self):
        self._tickets: Dict[str, TicketEntity] = {}

    def insert(self, ticket: TicketEntity) -> None:
        ticket.versao = 1
        self._tickets[ticket.id] = copy.deepcopy(ticket)

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ticket = self._tickets.get(ticket_id)
        return copy.deepcopy(ticket) if ticket else None

    def find(self, filtro: FiltroTickets) -> List[TicketEntity]:
        tickets = [
            t for t in self._tickets.values()
            if self._casa_com_filtro(t, filtro)
        ]
        tickets.sort(key=lambda t: t.criado_em, reverse=True)
        return [copy.deepcopy(t) for t in tickets]

    def save(self, ticket: TicketEntity) -> None:
        atual = self._tickets.get(ticket.id)

        if atual is None:
            raise EntityNotFoundError(
                f"Ticket {ticket.id} não encontrado",
                entity_type="Ticket",
                entity_id=ticket.id,
            )

        if atual.versao != ticket.versao:
            raise ConcurrencyError(
                f"Ticket {ticket.id} foi modificado por outro processo"
            )

        ticket.versao += 1
        self._tickets[ticket.id] = copy.deepcopy(ticket)

    def delete_by_criador(self, criador_id: str) -> int:
        ids = [t.id for t in self._tickets.values() if t.criador_id == criador_id]
        for ticket_id in ids:
            del self._tickets[ticket_id]
        return len(ids)

    def count(self) -> int:
        return len(self._tickets)

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._tickets.clear()

    @staticmethod
    def _casa_com_filtro(ticket: TicketEntity, filtro: FiltroTickets) -> bool:
        if filtro.criador_id is not None and ticket.criador_id != filtro.criador_id:
            return False
        if filtro.status is not None and ticket.status.value != filtro.status:
            return False
        if filtro.prioridade is not None and ticket.prioridade.value != filtro.prioridade:
            return False
        return True


class InMemoryUsuarioDirectory:
    """Diretório de usuários em memória (testes)."""

    def __init__(self, usuarios: Optional[Iterable[UsuarioResumoDTO]] = None):
        self._usuarios = {u.id: u for u in (usuarios or [])}
        self.consultas: List[List[str]] = []

    def adicionar(self, usuario: UsuarioResumoDTO) -> None:
        self._usuarios[usuario.id] = usuario

    def obter_resumos(self, usuario_ids: Iterable[str]) -> Dict[str, UsuarioResumoDTO]:
        ids = list(usuario_ids)
        self.consultas.append(ids)
        return {i: self._usuarios[i] for i in ids if i in self._usuarios}


class InMemoryPedidoDirectory:
    """Diretório de pedidos em memória (testes)."""

    def __init__(self, pedidos: Optional[Iterable[PedidoResumoDTO]] = None):
        self._pedidos = {p.id: p for p in (pedidos or [])}

    def adicionar(self, pedido: PedidoResumoDTO) -> None:
        self._pedidos[pedido.id] = pedido

    def obter_resumos(self, pedido_ids: Iterable[str]) -> Dict[str, PedidoResumoDTO]:
        return {i: self._pedidos[i] for i in pedido_ids if i in self._pedidos}
