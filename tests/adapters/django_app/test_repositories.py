"""
Testes do DjangoTicketRepository e do TicketMapper.

Usam o banco de testes do pytest-django.
"""

from datetime import timedelta

import pytest

from src.adapters.django_app.tickets.models import TicketModel
from src.adapters.django_app.tickets.repositories import DjangoTicketRepository
from src.core.tickets.access import FiltroTickets
from src.core.tickets.entities import Anexo, TicketEntity, TicketPriority, TicketStatus
from src.core.shared.exceptions import ConcurrencyError, EntityNotFoundError

pytestmark = pytest.mark.django_db


def novo_ticket(criador_id="1", prioridade=TicketPriority.MEDIA, **kwargs) -> TicketEntity:
    return TicketEntity.criar(
        titulo=kwargs.pop("titulo", "Refund request"),
        compra_id="P1",
        criador_id=criador_id,
        prioridade=prioridade,
        mensagem_inicial="Item arrived damaged",
        **kwargs,
    )


@pytest.fixture
def repo():
    return DjangoTicketRepository()


class TestInsertEGet:

    def test_insert_define_versao_1(self, repo):
        ticket = novo_ticket()

        repo.insert(ticket)

        assert ticket.versao == 1
        assert TicketModel.objects.get(id=ticket.id).versao == 1

    def test_thread_ida_e_volta(self, repo):
        anexo = Anexo("https://files.test/a.png", "ticket_attachments/a", "a.png")
        ticket = novo_ticket(anexos=[anexo])
        repo.insert(ticket)

        carregado = repo.get_by_id(ticket.id)

        assert carregado.titulo == ticket.titulo
        assert carregado.status == TicketStatus.ABERTO
        assert carregado.mensagens == ticket.mensagens
        assert carregado.mensagens[0].anexos == [anexo]

    def test_get_inexistente(self, repo):
        assert repo.get_by_id("nao-existe") is None

    def test_count(self, repo):
        repo.insert(novo_ticket())
        repo.insert(novo_ticket())

        assert repo.count() == 2


class TestSave:

    def test_save_regrava_documento(self, repo):
        ticket = novo_ticket()
        repo.insert(ticket)

        ticket.adicionar_mensagem("9", "Resposta do suporte")
        ticket.atribuir_admin("9")
        repo.save(ticket)

        carregado = repo.get_by_id(ticket.id)
        assert len(carregado.mensagens) == 2
        assert carregado.admin_atribuido_id == "9"
        assert carregado.status == TicketStatus.EM_PROGRESSO
        assert carregado.versao == 2
        assert ticket.versao == 2

    def test_versao_desatualizada(self, repo):
        ticket = novo_ticket()
        repo.insert(ticket)
        primeira = repo.get_by_id(ticket.id)
        segunda = repo.get_by_id(ticket.id)

        primeira.adicionar_mensagem("1", "primeira")
        repo.save(primeira)

        segunda.adicionar_mensagem("1", "segunda")
        with pytest.raises(ConcurrencyError):
            repo.save(segunda)

        conteudos = [m.conteudo for m in repo.get_by_id(ticket.id).mensagens]
        assert conteudos == ["Item arrived damaged", "primeira"]

    def test_save_inexistente(self, repo):
        with pytest.raises(EntityNotFoundError):
            repo.save(novo_ticket())


class TestFind:

    @pytest.fixture
    def tickets(self, repo):
        criados = []
        for i, (criador, prioridade) in enumerate([
            ("1", TicketPriority.ALTA),
            ("2", TicketPriority.BAIXA),
            ("1", TicketPriority.BAIXA),
        ]):
            ticket = novo_ticket(criador, prioridade, titulo=f"Ticket {i}")
            ticket.criado_em = ticket.criado_em + timedelta(minutes=i)
            repo.insert(ticket)
            criados.append(ticket)
        return criados

    def test_mais_recentes_primeiro(self, repo, tickets):
        assert [t.titulo for t in repo.find(FiltroTickets())] == [
            "Ticket 2", "Ticket 1", "Ticket 0"
        ]

    def test_filtros_combinados(self, repo, tickets):
        encontrados = repo.find(FiltroTickets(criador_id="1", prioridade="low"))

        assert [t.titulo for t in encontrados] == ["Ticket 2"]

    def test_filtro_por_status(self, repo, tickets):
        ticket = repo.get_by_id(tickets[1].id)
        ticket.alterar_status(TicketStatus.FECHADO)
        repo.save(ticket)

        assert [t.titulo for t in repo.find(FiltroTickets(status="closed"))] == ["Ticket 1"]


class TestDeleteByCriador:

    def test_remove_apenas_do_criador(self, repo):
        repo.insert(novo_ticket("1"))
        repo.insert(novo_ticket("1"))
        repo.insert(novo_ticket("2"))

        assert repo.delete_by_criador("1") == 2
        assert repo.count() == 1

    def test_criador_sem_tickets(self, repo):
        assert repo.delete_by_criador("99") == 0
