"""
Entidades do Domínio de Tickets.

Este módulo define as entidades de domínio que encapsulam
regras de negócio relacionadas a tickets de suporte.

Entidades:
- TicketEntity: Agregado principal (documento com a thread embutida)
- Mensagem: Item da thread, embutido no ticket
- Anexo: Arquivo já enviado ao Attachment Store
- TicketStatus: Estados possíveis de um ticket
- TicketPriority: Níveis de prioridade

Regras de Negócio Encapsuladas:
- Todo ticket nasce "open" com exatamente uma mensagem
- A thread só cresce por append (nunca reordenada ou truncada)
- Atribuição de admin força status "in_progress"
- Criador é definido uma única vez
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List
import uuid

from src.core.shared.exceptions import (
    ValidationError,
    InvalidStatusValueError,
)


def agora() -> datetime:
    """Timestamp UTC usado em todas as entidades."""
    return datetime.now(timezone.utc)


class TicketStatus(Enum):
    """
    Estados possíveis de um ticket.

    Não há restrição de adjacência: qualquer estado é alcançável a
    partir de qualquer outro via atualização explícita. A única regra
    estrutural é que o valor pertença ao enum.

        open ──atribuir_admin──▶ in_progress
        (qualquer) ──alterar_status──▶ (qualquer)
    """

    ABERTO = "open"
    EM_PROGRESSO = "in_progress"
    RESOLVIDO = "resolved"
    FECHADO = "closed"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "TicketStatus":
        """
        Converte o valor de wire ("in_progress") para enum.

        Raises:
            InvalidStatusValueError: Se o valor não pertence ao enum
        """
        for status in cls:
            if status.value == value:
                return status

        raise InvalidStatusValueError(str(value))


class TicketPriority(Enum):
    """Classificação informada pelo usuário na abertura."""

    BAIXA = "low"
    MEDIA = "medium"
    ALTA = "high"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "TicketPriority":
        """
        Converte o valor de wire ("high") para enum.

        Raises:
            ValidationError: Se ausente ou desconhecido
        """
        if not value:
            raise ValidationError("Prioridade é obrigatória", field="prioridade")

        for priority in cls:
            if priority.value == value.strip().lower():
                return priority

        raise ValidationError(f"Prioridade inválida: {value}", field="prioridade")


@dataclass(frozen=True)
class Anexo:
    """
    Arquivo anexado a uma mensagem.

    Attributes:
        url: Endereço público de recuperação
        id_externo: Handle do Attachment Store (gestão/remoção)
        nome_arquivo: Nome original enviado pelo cliente
    """

    url: str
    id_externo: str
    nome_arquivo: str

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "id_externo": self.id_externo,
            "nome_arquivo": self.nome_arquivo,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Anexo":
        return cls(
            url=data["url"],
            id_externo=data["id_externo"],
            nome_arquivo=data["nome_arquivo"],
        )


@dataclass
class Mensagem:
    """
    Mensagem da thread de um ticket.

    Não é uma entidade endereçável: existe apenas embutida no
    documento do ticket e nunca é editada ou removida.
    """

    remetente_id: str
    conteudo: str
    anexos: List[Anexo] = field(default_factory=list)
    criado_em: datetime = field(default_factory=agora)

    CONTEUDO_MAX_LENGTH = 10000

    @classmethod
    def nova(
        cls,
        remetente_id: str,
        conteudo: str,
        anexos: Optional[List[Anexo]] = None,
    ) -> "Mensagem":
        """Cria mensagem validada com timestamp do servidor."""
        cls.validar(remetente_id, conteudo)
        return cls(
            remetente_id=remetente_id,
            conteudo=conteudo.strip(),
            anexos=list(anexos or []),
        )

    @classmethod
    def validar(cls, remetente_id: str, conteudo: str) -> None:
        """Valida remetente e conteúdo sem criar a mensagem."""
        if not remetente_id:
            raise ValidationError("Remetente é obrigatório", field="remetente_id")

        if not conteudo or not conteudo.strip():
            raise ValidationError("Conteúdo da mensagem é obrigatório", field="conteudo")

        if len(conteudo.strip()) > cls.CONTEUDO_MAX_LENGTH:
            raise ValidationError(
                f"Mensagem deve ter no máximo {cls.CONTEUDO_MAX_LENGTH} caracteres",
                field="conteudo",
            )

    def to_dict(self) -> dict:
        return {
            "remetente_id": self.remetente_id,
            "conteudo": self.conteudo,
            "anexos": [anexo.to_dict() for anexo in self.anexos],
            "criado_em": self.criado_em.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Mensagem":
        return cls(
            remetente_id=data["remetente_id"],
            conteudo=data["conteudo"],
            anexos=[Anexo.from_dict(a) for a in data.get("anexos", [])],
            criado_em=datetime.fromisoformat(data["criado_em"]),
        )


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Agregado principal do suporte pós-compra. A thread de mensagens é
    parte do próprio documento; persistir o ticket persiste a thread.

    Invariantes:
    - Título obrigatório (3 a 200 caracteres)
    - Compra e criador obrigatórios
    - Sempre ao menos uma mensagem (a de abertura)
    - Mensagens só são adicionadas ao final
    - Status sempre membro de TicketStatus; "open" na criação

    Attributes:
        id: Identificador único (UUID)
        titulo: Título do ticket
        compra_id: Referência ao pedido externo
        criador_id: ID do usuário que abriu o ticket
        admin_atribuido_id: ID do admin responsável
        status: Estado atual
        prioridade: Classificação do usuário
        mensagens: Thread em ordem cronológica
        criado_em: Data/hora de criação
        atualizado_em: Data/hora da última atualização
        versao: Contador de versão para controle otimista

    Example:
        ticket = TicketEntity.criar(
            titulo="Refund request",
            compra_id="P1",
            criador_id="user-1",
            prioridade=TicketPriority.ALTA,
            mensagem_inicial="Item arrived damaged",
        )
        ticket.atribuir_admin("admin-9")
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    titulo: str = ""
    compra_id: str = ""

    status: TicketStatus = field(default=TicketStatus.ABERTO)
    prioridade: TicketPriority = field(default=TicketPriority.MEDIA)

    criador_id: str = ""
    admin_atribuido_id: Optional[str] = None

    mensagens: List[Mensagem] = field(default_factory=list)

    criado_em: datetime = field(default_factory=agora)
    atualizado_em: datetime = field(default_factory=agora)

    versao: int = 0

    TITULO_MIN_LENGTH = 3
    TITULO_MAX_LENGTH = 200
    COMPRA_ID_MAX_LENGTH = 100

    @classmethod
    def criar(
        cls,
        titulo: str,
        compra_id: str,
        criador_id: str,
        prioridade: TicketPriority,
        mensagem_inicial: str,
        anexos: Optional[List[Anexo]] = None,
    ) -> "TicketEntity":
        """
        Factory method para abrir ticket com a mensagem inicial.

        O status é sempre "open", independente da entrada.

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        cls.validar_abertura(titulo, compra_id, criador_id, mensagem_inicial)

        ticket = cls(
            titulo=titulo.strip(),
            compra_id=compra_id.strip(),
            criador_id=criador_id,
            prioridade=prioridade,
            status=TicketStatus.ABERTO,
        )
        ticket.mensagens.append(
            Mensagem.nova(criador_id, mensagem_inicial, anexos)
        )
        ticket.atualizado_em = ticket.criado_em

        return ticket

    @classmethod
    def validar_abertura(
        cls,
        titulo: str,
        compra_id: str,
        criador_id: str,
        mensagem_inicial: str,
    ) -> None:
        """
        Valida os dados de abertura sem criar o ticket.

        Usado pelo use case para rejeitar entrada inválida antes de
        enviar qualquer anexo.
        """
        cls._validar_titulo(titulo)

        if not compra_id or not compra_id.strip():
            raise ValidationError("Compra é obrigatória", field="compra_id")

        if len(compra_id.strip()) > cls.COMPRA_ID_MAX_LENGTH:
            raise ValidationError(
                f"Compra deve ter no máximo {cls.COMPRA_ID_MAX_LENGTH} caracteres",
                field="compra_id",
            )

        if not criador_id:
            raise ValidationError("Criador é obrigatório", field="criador_id")

        Mensagem.validar(criador_id, mensagem_inicial)

    @classmethod
    def _validar_titulo(cls, titulo: str) -> None:
        if not titulo or not titulo.strip():
            raise ValidationError("Título é obrigatório", field="titulo")

        titulo_limpo = titulo.strip()

        if len(titulo_limpo) < cls.TITULO_MIN_LENGTH:
            raise ValidationError(
                f"Título deve ter pelo menos {cls.TITULO_MIN_LENGTH} caracteres",
                field="titulo",
            )

        if len(titulo_limpo) > cls.TITULO_MAX_LENGTH:
            raise ValidationError(
                f"Título deve ter no máximo {cls.TITULO_MAX_LENGTH} caracteres",
                field="titulo",
            )

    def adicionar_mensagem(
        self,
        remetente_id: str,
        conteudo: str,
        anexos: Optional[List[Anexo]] = None,
    ) -> Mensagem:
        """
        Adiciona mensagem ao final da thread.

        Os anexos já devem ter sido enviados ao Attachment Store.

        Returns:
            A mensagem adicionada
        """
        mensagem = Mensagem.nova(remetente_id, conteudo, anexos)
        self.mensagens.append(mensagem)
        self._atualizar_timestamp()
        return mensagem

    def atribuir_admin(self, admin_id: str) -> None:
        """
        Atribui o ticket a um admin.

        Efeito colateral explícito: o status passa a "in_progress"
        incondicionalmente, mesmo que já esteja resolvido ou fechado.
        Atribuição sempre sinaliza que o atendimento começou.

        Raises:
            ValidationError: Se admin_id vazio
        """
        if not admin_id:
            raise ValidationError("ID do admin é obrigatório", field="admin_id")

        self.admin_atribuido_id = admin_id
        self.status = TicketStatus.EM_PROGRESSO
        self._atualizar_timestamp()

    def alterar_status(self, novo_status: TicketStatus) -> None:
        """
        Sobrescreve o status, sem regra de transição.

        Raises:
            InvalidStatusValueError: Se novo_status não é TicketStatus
        """
        if not isinstance(novo_status, TicketStatus):
            raise InvalidStatusValueError(str(novo_status))

        self.status = novo_status
        self._atualizar_timestamp()

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = agora()

    @property
    def mensagem_inicial(self) -> Mensagem:
        return self.mensagens[0]

    @property
    def esta_atribuido(self) -> bool:
        return self.admin_atribuido_id is not None

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id[:8]}..., "
            f"titulo='{self.titulo[:20]}', "
            f"status={self.status.value}, "
            f"mensagens={len(self.mensagens)}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
