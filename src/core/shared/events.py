"""
Domain Events - Comunicação Assíncrona entre Domínios.

Este módulo define a infraestrutura base para Domain Events,
permitindo que notificações (e-mail ao criador do ticket, por exemplo)
sejam disparadas sem acoplar os use cases ao canal de entrega.

Características:
- Auto-geração de ID e timestamp
- Serializáveis para transporte (Celery/JSON)
- Rastreáveis via aggregate_id

Pattern:
    - Eventos são enfileirados no UoW durante o use case
    - Publicados somente após commit bem-sucedido
    - Handlers assíncronos processam eventos
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
import uuid


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Um Domain Event representa algo significativo que aconteceu
    no domínio e que pode ser relevante para outras partes do sistema.

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu (UTC)
        version: Versão do schema do evento (para evolução)

    Example:
        @dataclass
        class TicketCriadoEvent(DomainEvent):
            criador_id: str = ""

            @property
            def aggregate_type(self) -> str:
                return "Ticket"
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Nome do tipo do agregado (ex: "Ticket")."""
        ...

    @property
    def event_type(self) -> str:
        """Nome da classe do evento, usado para roteamento."""
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Útil para:
        - Envio via message broker
        - Logging estruturado

        Returns:
            Dicionário com dados do evento
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Retorna os campos específicos da subclasse."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
