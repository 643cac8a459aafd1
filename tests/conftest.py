"""
Configurações globais do Pytest para SupportDesk Tickets.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures compartilhadas entre as suítes.
"""

from pathlib import Path

import pytest

from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
from src.core.tickets.access import PAPEL_ADMIN, Principal
from src.core.tickets.dtos import PedidoResumoDTO, UsuarioResumoDTO
from src.core.tickets.ports import (
    InMemoryPedidoDirectory,
    InMemoryTicketRepository,
    InMemoryUsuarioDirectory,
)
from src.core.tickets.projection import TicketProjetor
from src.core.tickets.uploads import OrquestradorUploadAnexos

from tests.fakes import FakeAttachmentStore


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture
def ticket_repo():
    """Repositório em memória."""
    return InMemoryTicketRepository()


@pytest.fixture
def uow():
    """Unit of Work em memória."""
    return InMemoryUnitOfWork()


@pytest.fixture
def store():
    return FakeAttachmentStore()


@pytest.fixture
def uploader(store):
    return OrquestradorUploadAnexos(store, max_workers=4)


@pytest.fixture
def usuarios() -> InMemoryUsuarioDirectory:
    return InMemoryUsuarioDirectory([
        UsuarioResumoDTO(id="u1", username="ana", first_name="Ana", email="ana@test.local"),
        UsuarioResumoDTO(id="u2", username="bruno", first_name="Bruno"),
        UsuarioResumoDTO(id="a1", username="admin", first_name="Carla"),
    ])


@pytest.fixture
def pedidos() -> InMemoryPedidoDirectory:
    return InMemoryPedidoDirectory([
        PedidoResumoDTO(id="P1", numero_pedido="ORD-0001", valor_total=199.9),
    ])


@pytest.fixture
def projetor(usuarios, pedidos):
    return TicketProjetor(usuarios, pedidos)


@pytest.fixture
def usuario() -> Principal:
    return Principal(usuario_id="u1")


@pytest.fixture
def outro_usuario() -> Principal:
    return Principal(usuario_id="u2")


@pytest.fixture
def admin() -> Principal:
    return Principal(usuario_id="a1", papel=PAPEL_ADMIN)

