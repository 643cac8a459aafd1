"""
Domínio de Tickets - Suporte pós-compra.

Este módulo contém a lógica de negócio de tickets de suporte:
- Entidades (TicketEntity, Mensagem, Anexo, TicketStatus, TicketPriority)
- Use Cases (criar, responder, atribuir, alterar status, listar)
- Orquestração de upload de anexos
- Escopo de acesso por papel
- Projeção de referências para resposta
- Domain Events e Ports

Características do Domínio:
- Thread de mensagens embutida no ticket, somente append
- Upload de anexos tudo-ou-nada antes de qualquer escrita
- Atribuição de admin força status in_progress
- Usuário comum só enxerga os próprios tickets
"""

from .entities import TicketEntity, Mensagem, Anexo, TicketStatus, TicketPriority
from .access import Principal, FiltroTickets, escopo_de_listagem
from .events import (
    TicketCriadoEvent,
    MensagemAdicionadaEvent,
    AdminAtribuidoEvent,
    StatusAlteradoEvent,
    TicketsExcluidosEvent,
)
from .dtos import (
    ArquivoBruto,
    CriarTicketInputDTO,
    AdicionarMensagemInputDTO,
    AtribuirAdminInputDTO,
    AtualizarStatusInputDTO,
    TicketOutputDTO,
    TicketExpandidoDTO,
)
from .ports import TicketRepository, AttachmentStore
from .uploads import OrquestradorUploadAnexos
from .projection import TicketProjetor
from .use_cases import (
    CriarTicketService,
    AdicionarMensagemService,
    AtribuirAdminService,
    ObterThreadService,
    ListarTicketsService,
    ListarMeusTicketsService,
    AtualizarStatusService,
    ExcluirTicketsPorCriadorService,
)

__all__ = [
    # Entities
    "TicketEntity",
    "Mensagem",
    "Anexo",
    "TicketStatus",
    "TicketPriority",
    # Access
    "Principal",
    "FiltroTickets",
    "escopo_de_listagem",
    # Events
    "TicketCriadoEvent",
    "MensagemAdicionadaEvent",
    "AdminAtribuidoEvent",
    "StatusAlteradoEvent",
    "TicketsExcluidosEvent",
    # DTOs
    "ArquivoBruto",
    "CriarTicketInputDTO",
    "AdicionarMensagemInputDTO",
    "AtribuirAdminInputDTO",
    "AtualizarStatusInputDTO",
    "TicketOutputDTO",
    "TicketExpandidoDTO",
    # Ports
    "TicketRepository",
    "AttachmentStore",
    # Services
    "OrquestradorUploadAnexos",
    "TicketProjetor",
    "CriarTicketService",
    "AdicionarMensagemService",
    "AtribuirAdminService",
    "ObterThreadService",
    "ListarTicketsService",
    "ListarMeusTicketsService",
    "AtualizarStatusService",
    "ExcluirTicketsPorCriadorService",
]
