"""
Domain Events do Domínio de Tickets.

Eventos disparados quando algo significativo acontece com tickets.
São publicados pelo UnitOfWork somente após commit; os handlers
(Celery) usam esses eventos para notificar o criador do ticket.

Eventos:
- TicketCriadoEvent: Novo ticket aberto
- MensagemAdicionadaEvent: Nova mensagem na thread
- AdminAtribuidoEvent: Admin atribuído (status forçado a in_progress)
- StatusAlteradoEvent: Status sobrescrito explicitamente
- TicketsExcluidosEvent: Tickets removidos junto com a conta do criador
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional

from src.core.shared.events import DomainEvent


@dataclass
class TicketCriadoEvent(DomainEvent):
    """
    Evento: Ticket foi aberto.

    Attributes:
        criador_id: ID do usuário que abriu
        titulo: Título do ticket
        prioridade: Prioridade (valor de wire)
        compra_id: Pedido relacionado
        total_anexos: Anexos da mensagem inicial
    """

    criador_id: str = ""
    titulo: str = ""
    prioridade: str = ""
    compra_id: str = ""
    total_anexos: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class MensagemAdicionadaEvent(DomainEvent):
    """
    Evento: Mensagem adicionada à thread.

    Handlers típicos:
    - Avisar o criador quando outra pessoa (admin) responde

    Attributes:
        remetente_id: Autor da mensagem
        criador_id: Dono do ticket
        posicao: Índice da mensagem na thread
        total_anexos: Quantidade de anexos da mensagem
    """

    remetente_id: str = ""
    criador_id: str = ""
    posicao: int = 0
    total_anexos: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class AdminAtribuidoEvent(DomainEvent):
    """
    Evento: Ticket atribuído a um admin.

    Attributes:
        admin_id: Admin atribuído
        criador_id: Dono do ticket
        status_anterior: Status antes da atribuição
        atribuido_por_id: Quem executou a atribuição
    """

    admin_id: str = ""
    criador_id: str = ""
    status_anterior: str = ""
    atribuido_por_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        data = {
            "admin_id": self.admin_id,
            "criador_id": self.criador_id,
            "status_anterior": self.status_anterior,
        }
        if self.atribuido_por_id:
            data["atribuido_por_id"] = self.atribuido_por_id
        return data


@dataclass
class StatusAlteradoEvent(DomainEvent):
    """Evento: Status do ticket alterado explicitamente."""

    criador_id: str = ""
    status_anterior: str = ""
    status_novo: str = ""
    alterado_por_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketsExcluidosEvent(DomainEvent):
    """
    Evento: Tickets de um usuário foram excluídos.

    O aggregate_id é o próprio usuário removido.
    """

    total: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Usuario"
