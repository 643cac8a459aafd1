"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento de entidades para camadas externas.

Tipos de DTOs:
- Input DTOs: Dados de entrada já extraídos do request
- Output DTOs: Ticket "cru" (ids) ou expandido (resumos de usuário/pedido)
- Resumos: Projeções de entidades externas (usuário, pedido)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Tuple

from .entities import TicketEntity, Mensagem, Anexo


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class ArquivoBruto:
    """
    Arquivo recebido do cliente, ainda não enviado ao Attachment Store.

    Attributes:
        nome_arquivo: Nome original informado pelo cliente
        conteudo: Bytes do arquivo
        content_type: MIME type informado (opcional)
    """

    nome_arquivo: str
    conteudo: bytes
    content_type: Optional[str] = None

    @property
    def tamanho(self) -> int:
        return len(self.conteudo)


@dataclass(frozen=True)
class CriarTicketInputDTO:
    """
    DTO de entrada para abrir ticket.

    O criador vem do Principal, nunca do payload.

    Attributes:
        titulo: Título do ticket
        compra_id: ID do pedido relacionado
        prioridade: Valor de wire ("low", "medium", "high")
        mensagem_inicial: Conteúdo da primeira mensagem
        arquivos: Anexos da primeira mensagem, em ordem
    """

    titulo: str
    compra_id: str
    prioridade: str
    mensagem_inicial: str
    arquivos: Tuple[ArquivoBruto, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AdicionarMensagemInputDTO:
    """DTO de entrada para responder na thread."""

    ticket_id: str
    conteudo: str
    arquivos: Tuple[ArquivoBruto, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AtribuirAdminInputDTO:
    """DTO de entrada para atribuir admin."""

    ticket_id: str
    admin_id: str


@dataclass(frozen=True)
class AtualizarStatusInputDTO:
    """
    DTO de entrada para alterar status.

    Attributes:
        ticket_id: ID do ticket
        status: Valor bruto recebido; validado contra o enum no use case
    """

    ticket_id: str
    status: str


# =============================================================================
# RESUMOS (Projeção de entidades externas)
# =============================================================================

@dataclass(frozen=True)
class UsuarioResumoDTO:
    """
    Resumo público de usuário.

    Contém apenas dados de exibição; senha e OTP nunca saem do
    Identity Provider.
    """

    id: str
    username: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
        }


@dataclass(frozen=True)
class PedidoResumoDTO:
    """Resumo do pedido (Order Reference) ligado ao ticket."""

    id: str
    numero_pedido: str
    itens: Tuple[dict, ...] = field(default_factory=tuple)
    valor_total: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "numero_pedido": self.numero_pedido,
            "itens": list(self.itens),
            "valor_total": self.valor_total,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    DTO de saída sem expansão de referências.

    Usado pela atribuição de admin, que responde com o documento
    como foi salvo (ids em vez de resumos).
    """

    id: str
    titulo: str
    compra_id: str
    criador_id: str
    admin_atribuido_id: Optional[str]
    status: str
    prioridade: str
    mensagens: List[dict]
    criado_em: datetime
    atualizado_em: datetime
    versao: int

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketOutputDTO":
        return cls(
            id=entity.id,
            titulo=entity.titulo,
            compra_id=entity.compra_id,
            criador_id=entity.criador_id,
            admin_atribuido_id=entity.admin_atribuido_id,
            status=entity.status.value,
            prioridade=entity.prioridade.value,
            mensagens=[m.to_dict() for m in entity.mensagens],
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            versao=entity.versao,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "titulo": self.titulo,
            "compra_id": self.compra_id,
            "criador_id": self.criador_id,
            "admin_atribuido_id": self.admin_atribuido_id,
            "status": self.status,
            "prioridade": self.prioridade,
            "mensagens": self.mensagens,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
            "versao": self.versao,
        }


@dataclass
class MensagemExpandidaDTO:
    """Mensagem com o remetente expandido."""

    remetente_id: str
    remetente: Optional[UsuarioResumoDTO]
    conteudo: str
    anexos: List[Anexo]
    criado_em: datetime

    @classmethod
    def from_mensagem(
        cls,
        mensagem: Mensagem,
        remetente: Optional[UsuarioResumoDTO],
    ) -> "MensagemExpandidaDTO":
        return cls(
            remetente_id=mensagem.remetente_id,
            remetente=remetente,
            conteudo=mensagem.conteudo,
            anexos=list(mensagem.anexos),
            criado_em=mensagem.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "remetente_id": self.remetente_id,
            "remetente": self.remetente.to_dict() if self.remetente else None,
            "conteudo": self.conteudo,
            "anexos": [anexo.to_dict() for anexo in self.anexos],
            "criado_em": self.criado_em.isoformat(),
        }


@dataclass
class TicketExpandidoDTO:
    """
    DTO de saída com referências expandidas.

    Criador, admin atribuído, remetentes e pedido são substituídos
    por resumos prontos para exibição. Referências que não puderam
    ser resolvidas ficam None (o id continua disponível).
    """

    id: str
    titulo: str
    status: str
    prioridade: str
    compra_id: str
    compra: Optional[PedidoResumoDTO]
    criador_id: str
    criador: Optional[UsuarioResumoDTO]
    admin_atribuido_id: Optional[str]
    admin_atribuido: Optional[UsuarioResumoDTO]
    mensagens: List[MensagemExpandidaDTO]
    criado_em: datetime
    atualizado_em: datetime

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "titulo": self.titulo,
            "status": self.status,
            "prioridade": self.prioridade,
            "compra_id": self.compra_id,
            "compra": self.compra.to_dict() if self.compra else None,
            "criador_id": self.criador_id,
            "criador": self.criador.to_dict() if self.criador else None,
            "admin_atribuido_id": self.admin_atribuido_id,
            "admin_atribuido": (
                self.admin_atribuido.to_dict() if self.admin_atribuido else None
            ),
            "mensagens": [m.to_dict() for m in self.mensagens],
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }
