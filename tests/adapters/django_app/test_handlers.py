"""
Testes dos handlers de eventos, publishers e do signal de exclusão de conta.

Celery roda em modo eager (settings_test); os e-mails caem em
django.core.mail.outbox.
"""

from unittest.mock import patch

import pytest
from django.core import mail

from src.adapters.django_app.events.handlers import (
    dispatch_domain_event,
    handle_mensagem_adicionada,
    notificar_usuario,
)
from src.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork
from src.adapters.django_app.tickets.models import TicketModel
from src.adapters.django_app.tickets.repositories import DjangoTicketRepository
from src.core.tickets.entities import TicketEntity, TicketPriority
from src.core.tickets.events import MensagemAdicionadaEvent, StatusAlteradoEvent


def evento_mensagem(remetente_id: str, criador_id: str) -> dict:
    return MensagemAdicionadaEvent(
        aggregate_id="5b1c2e9a-0000-0000-0000-000000000000",
        remetente_id=remetente_id,
        criador_id=criador_id,
        posicao=1,
    ).to_dict()


@pytest.mark.django_db
class TestNotificarUsuario:

    def test_envia_email(self, ana):
        enviado = notificar_usuario.delay(str(ana.pk), "Assunto", "Corpo").get()

        assert enviado is True
        assert len(mail.outbox) == 1
        assert mail.outbox[0].from_email == "suporte@test.local"

    def test_usuario_sem_email(self, bruno):
        assert notificar_usuario.delay(str(bruno.pk), "Assunto", "Corpo").get() is False
        assert mail.outbox == []

    def test_usuario_inexistente(self):
        assert notificar_usuario.delay("999", "Assunto", "Corpo").get() is False


@pytest.mark.django_db
class TestHandlers:

    def test_resposta_de_outro_notifica_criador(self, ana, carla):
        handle_mensagem_adicionada.delay(evento_mensagem(str(carla.pk), str(ana.pk)))

        assert [m.to for m in mail.outbox] == [["ana@test.local"]]

    def test_resposta_do_proprio_criador_ignorada(self, ana):
        handle_mensagem_adicionada.delay(evento_mensagem(str(ana.pk), str(ana.pk)))

        assert mail.outbox == []

    def test_dispatch_roteia_por_tipo(self, ana):
        evento = StatusAlteradoEvent(
            aggregate_id="5b1c2e9a-0000-0000-0000-000000000000",
            criador_id=str(ana.pk),
            status_anterior="open",
            status_novo="closed",
        )

        dispatch_domain_event.delay(evento.event_type, evento.to_dict())

        assert "Fechado" in mail.outbox[0].subject

    def test_dispatch_tipo_desconhecido(self, ana):
        dispatch_domain_event.delay("EventoInexistente", {"data": {}})

        assert mail.outbox == []


class TestPublishers:

    def test_factory(self):
        assert isinstance(get_event_publisher("celery"), CeleryEventPublisher)
        assert isinstance(get_event_publisher("sync"), LoggingEventPublisher)

    @patch("src.adapters.django_app.events.handlers.dispatch_domain_event.delay")
    def test_celery_publisher_despacha(self, mock_delay):
        CeleryEventPublisher().publish(
            MensagemAdicionadaEvent(aggregate_id="t1", remetente_id="1", criador_id="2")
        )

        args = mock_delay.call_args.args
        assert args[0] == "MensagemAdicionadaEvent"
        assert args[1]["data"]["remetente_id"] == "1"
        assert args[1]["aggregate_type"] == "Ticket"


@pytest.mark.django_db
class TestDjangoUnitOfWork:

    def novo_ticket(self) -> TicketEntity:
        return TicketEntity.criar(
            titulo="Refund request",
            compra_id="P1",
            criador_id="1",
            prioridade=TicketPriority.ALTA,
            mensagem_inicial="Item arrived damaged",
        )

    def test_commit_publica_eventos(self):
        publisher = InMemoryEventPublisher()
        ticket = self.novo_ticket()

        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            DjangoTicketRepository().insert(ticket)
            uow.publish_event(
                StatusAlteradoEvent(aggregate_id=ticket.id, status_novo="closed")
            )

        assert uow.is_committed
        assert TicketModel.objects.filter(id=ticket.id).exists()
        assert [e.event_type for e in publisher.published_events] == ["StatusAlteradoEvent"]

    def test_rollback_desfaz_escrita_e_descarta_eventos(self):
        publisher = InMemoryEventPublisher()
        ticket = self.novo_ticket()

        with pytest.raises(RuntimeError):
            with DjangoUnitOfWork(event_publisher=publisher) as uow:
                DjangoTicketRepository().insert(ticket)
                uow.publish_event(StatusAlteradoEvent(aggregate_id=ticket.id))
                raise RuntimeError("falhou no meio")

        assert uow.is_rolled_back
        assert not TicketModel.objects.filter(id=ticket.id).exists()
        assert publisher.published_events == []


@pytest.mark.django_db
class TestExclusaoDeConta:

    def test_excluir_usuario_remove_tickets(self, ana, bruno, ticket_model_factory):
        ticket_model_factory(criador_id=str(ana.pk))
        ticket_model_factory(criador_id=str(ana.pk))
        ticket_model_factory(criador_id=str(bruno.pk))

        ana.delete()

        assert list(TicketModel.objects.values_list("criador_id", flat=True)) == [str(bruno.pk)]
