"""
Fixtures para testes dos adapters Django.

O Django é configurado pelo pytest-django a partir de
DJANGO_SETTINGS_MODULE (src.config.settings_test): SQLite em
memória, Celery síncrono e e-mail em memória.
"""

import uuid

import pytest
from dependency_injector import providers
from django.test import Client
from django.utils import timezone

from src.config.container import get_container, reset_container

from tests.fakes import FakeAttachmentStore


@pytest.fixture(autouse=True)
def reset_di_container():
    """Reset container entre testes."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def fake_store():
    """Substitui o Cloudinary no container por um store fake."""
    store = FakeAttachmentStore()
    get_container().attachment_store.override(providers.Object(store))
    return store


@pytest.fixture
def ana(django_user_model):
    return django_user_model.objects.create_user(
        username="ana", password="senha-123", first_name="Ana", email="ana@test.local"
    )


@pytest.fixture
def bruno(django_user_model):
    return django_user_model.objects.create_user(username="bruno", password="senha-123")


@pytest.fixture
def carla(django_user_model):
    """Admin (is_staff)."""
    return django_user_model.objects.create_user(
        username="carla", password="senha-123", first_name="Carla", is_staff=True
    )


def _client_logado(usuario) -> Client:
    client = Client()
    client.force_login(usuario)
    return client


@pytest.fixture
def client_ana(ana):
    return _client_logado(ana)


@pytest.fixture
def client_bruno(bruno):
    return _client_logado(bruno)


@pytest.fixture
def client_admin(carla):
    return _client_logado(carla)


@pytest.fixture
def ticket_model_factory(db):
    """Factory para criar TicketModel para testes."""
    from src.adapters.django_app.tickets.models import TicketModel

    def create_ticket(**kwargs):
        agora = timezone.now()
        defaults = {
            'id': str(uuid.uuid4()),
            'titulo': 'Ticket de Teste',
            'compra_id': 'P1',
            'criador_id': '1',
            'status': 'open',
            'prioridade': 'medium',
            'mensagens': [{
                'remetente_id': kwargs.get('criador_id', '1'),
                'conteudo': 'Mensagem inicial',
                'anexos': [],
                'criado_em': agora.isoformat(),
            }],
            'criado_em': agora,
            'atualizado_em': agora,
        }
        defaults.update(kwargs)
        return TicketModel.objects.create(**defaults)

    return create_ticket
