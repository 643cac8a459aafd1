"""
Testes do escopo de acesso por papel.
"""

from src.core.tickets.access import (
    FiltroTickets,
    Principal,
    escopo_de_listagem,
    escopo_do_criador,
    pode_ver_ticket,
)
from src.core.tickets.entities import TicketEntity, TicketPriority


def ticket_de(criador_id: str) -> TicketEntity:
    return TicketEntity.criar(
        titulo="Produto errado",
        compra_id="P1",
        criador_id=criador_id,
        prioridade=TicketPriority.BAIXA,
        mensagem_inicial="Recebi outro modelo",
    )


class TestEscopoDeListagem:

    def test_admin_sem_filtros(self, admin):
        assert escopo_de_listagem(admin) == FiltroTickets()

    def test_admin_filtros_repassados(self, admin):
        filtro = escopo_de_listagem(admin, status="open", prioridade="high")

        assert filtro == FiltroTickets(status="open", prioridade="high")

    def test_usuario_sempre_restrito_a_si(self, usuario):
        filtro = escopo_de_listagem(usuario, status="closed")

        assert filtro.criador_id == usuario.usuario_id
        assert filtro.status == "closed"

    def test_strings_vazias_nao_filtram(self, admin):
        assert escopo_de_listagem(admin, status="", prioridade="") == FiltroTickets()

    def test_papel_desconhecido_tratado_como_usuario(self):
        principal = Principal(usuario_id="x", papel="support")

        assert escopo_de_listagem(principal).criador_id == "x"


class TestEscopoDoCriador:

    def test_admin_tambem_restrito(self, admin):
        assert escopo_do_criador(admin) == FiltroTickets(criador_id=admin.usuario_id)


class TestPodeVerTicket:

    def test_criador_ve(self, usuario):
        assert pode_ver_ticket(usuario, ticket_de(usuario.usuario_id))

    def test_outro_usuario_nao_ve(self, outro_usuario, usuario):
        assert not pode_ver_ticket(outro_usuario, ticket_de(usuario.usuario_id))

    def test_admin_ve_qualquer(self, admin, usuario):
        assert pode_ver_ticket(admin, ticket_de(usuario.usuario_id))
