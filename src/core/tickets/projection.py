"""
Projeção de tickets para resposta.

Substitui referências armazenadas (criador, admin atribuído,
remetentes das mensagens, pedido) por resumos prontos para exibição.
As consultas aos diretórios são feitas em lote: uma chamada ao
diretório de usuários e uma ao de pedidos por operação, qualquer
que seja o número de tickets.
"""

from typing import Dict, Iterable, List, Set
import logging

from .dtos import (
    MensagemExpandidaDTO,
    PedidoResumoDTO,
    TicketExpandidoDTO,
    UsuarioResumoDTO,
)
from .entities import TicketEntity
from .ports import PedidoDirectory, UsuarioDirectory

logger = logging.getLogger(__name__)


class TicketProjetor:
    """
    Expande tickets usando os diretórios de usuários e pedidos.

    Example:
        projetor = TicketProjetor(usuarios, pedidos)
        dto = projetor.projetar(ticket)
        dto.criador.username
    """

    def __init__(self, usuarios: UsuarioDirectory, pedidos: PedidoDirectory):
        self.usuarios = usuarios
        self.pedidos = pedidos

    def projetar(self, ticket: TicketEntity) -> TicketExpandidoDTO:
        """Expande um único ticket."""
        return self.projetar_lista([ticket])[0]

    def projetar_lista(self, tickets: Iterable[TicketEntity]) -> List[TicketExpandidoDTO]:
        """
        Expande vários tickets preservando a ordem recebida.

        Returns:
            Um DTO por ticket, na mesma ordem
        """
        tickets = list(tickets)
        if not tickets:
            return []

        usuarios = self.usuarios.obter_resumos(sorted(self._usuario_ids(tickets)))
        pedidos = self.pedidos.obter_resumos(
            sorted({t.compra_id for t in tickets if t.compra_id})
        )

        logger.debug(
            f"Projetando {len(tickets)} ticket(s): "
            f"{len(usuarios)} usuário(s), {len(pedidos)} pedido(s) resolvidos"
        )

        return [self._expandir(t, usuarios, pedidos) for t in tickets]

    @staticmethod
    def _usuario_ids(tickets: List[TicketEntity]) -> Set[str]:
        ids: Set[str] = set()
        for ticket in tickets:
            ids.add(ticket.criador_id)
            if ticket.admin_atribuido_id:
                ids.add(ticket.admin_atribuido_id)
            ids.update(m.remetente_id for m in ticket.mensagens)
        return ids

    @staticmethod
    def _expandir(
        ticket: TicketEntity,
        usuarios: Dict[str, UsuarioResumoDTO],
        pedidos: Dict[str, PedidoResumoDTO],
    ) -> TicketExpandidoDTO:
        return TicketExpandidoDTO(
            id=ticket.id,
            titulo=ticket.titulo,
            status=ticket.status.value,
            prioridade=ticket.prioridade.value,
            compra_id=ticket.compra_id,
            compra=pedidos.get(ticket.compra_id),
            criador_id=ticket.criador_id,
            criador=usuarios.get(ticket.criador_id),
            admin_atribuido_id=ticket.admin_atribuido_id,
            admin_atribuido=(
                usuarios.get(ticket.admin_atribuido_id)
                if ticket.admin_atribuido_id else None
            ),
            mensagens=[
                MensagemExpandidaDTO.from_mensagem(m, usuarios.get(m.remetente_id))
                for m in ticket.mensagens
            ],
            criado_em=ticket.criado_em,
            atualizado_em=ticket.atualizado_em,
        )
