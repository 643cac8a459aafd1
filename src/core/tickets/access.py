"""
Escopo de acesso a tickets por papel do principal.

O Identity Provider entrega um Principal (usuário + papel) por request;
este módulo traduz esse principal em filtros de consulta. Um usuário
comum nunca enxerga tickets de outro usuário, qualquer que seja a
combinação de filtros enviada.
"""

from dataclasses import dataclass
from typing import Optional

from .entities import TicketEntity

PAPEL_ADMIN = "admin"
PAPEL_USUARIO = "user"


@dataclass(frozen=True)
class Principal:
    """Identidade autenticada que executa a operação."""

    usuario_id: str
    papel: str = PAPEL_USUARIO

    @property
    def is_admin(self) -> bool:
        return self.papel == PAPEL_ADMIN


@dataclass(frozen=True)
class FiltroTickets:
    """
    Critérios de busca aceitos pelo TicketRepository.find.

    Campos None não restringem. Status e prioridade são comparados
    pelo valor de wire ("open", "high"); um valor desconhecido
    simplesmente não casa com nenhum ticket.
    """

    criador_id: Optional[str] = None
    status: Optional[str] = None
    prioridade: Optional[str] = None


def escopo_de_listagem(
    principal: Principal,
    status: Optional[str] = None,
    prioridade: Optional[str] = None,
) -> FiltroTickets:
    """
    Monta o filtro de listagem para o principal.

    Admin vê todos os tickets (apenas os filtros informados se aplicam);
    qualquer outro papel recebe criador_id forçado para si mesmo.
    """
    criador_id = None if principal.is_admin else principal.usuario_id
    return FiltroTickets(
        criador_id=criador_id,
        status=status or None,
        prioridade=prioridade or None,
    )


def escopo_do_criador(principal: Principal) -> FiltroTickets:
    """Filtro de "meus tickets": sempre restrito ao criador, inclusive para admin."""
    return FiltroTickets(criador_id=principal.usuario_id)


def pode_ver_ticket(principal: Principal, ticket: TicketEntity) -> bool:
    """Admin vê qualquer ticket; os demais apenas os que criaram."""
    return principal.is_admin or ticket.criador_id == principal.usuario_id
