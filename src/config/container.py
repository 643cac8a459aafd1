"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, clients)
- Factory: Nova instância por chamada (services, UoW)
- Configuration: Valores vindos do settings do Django

Os imports dos adapters são tardios: o container pode ser importado
antes de o Django terminar de carregar os apps.
"""

import importlib
from typing import Optional

from dependency_injector import containers, providers


def _lazy(caminho: str):
    """Retorna callable que importa `modulo.Nome` só na primeira chamada."""
    modulo, nome = caminho.rsplit('.', 1)

    def criar(*args, **kwargs):
        return getattr(importlib.import_module(modulo), nome)(*args, **kwargs)

    return criar


USE_CASES = 'src.core.tickets.use_cases'
ADAPTERS = 'src.adapters.django_app'


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings do Django (ver config_from_settings)
    - Infrastructure: Publisher, Attachment Store, diretórios
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        container = get_container()
        service = container.criar_ticket_service()
        result = service.execute(principal, input_dto)
    """

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        _lazy(f'{ADAPTERS}.events.publishers.get_event_publisher'),
        mode=config.events.publisher_mode,
    )

    attachment_store = providers.Singleton(
        _lazy(f'{ADAPTERS}.tickets.storage.CloudinaryAttachmentStore'),
        cloud_name=config.cloudinary.cloud_name,
        api_key=config.cloudinary.api_key,
        api_secret=config.cloudinary.api_secret,
        timeout=config.attachments.upload_timeout,
    )

    usuario_directory = providers.Singleton(
        _lazy(f'{ADAPTERS}.tickets.directories.DjangoUsuarioDirectory'),
    )

    pedido_directory = providers.Singleton(
        _lazy(f'{ADAPTERS}.tickets.directories.HttpPedidoDirectory'),
        base_url=config.orders.api_url,
        timeout=config.orders.timeout,
    )

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    ticket_repository = providers.Singleton(
        _lazy(f'{ADAPTERS}.tickets.repositories.DjangoTicketRepository'),
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy(f'{ADAPTERS}.shared.unit_of_work.DjangoUnitOfWork'),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Colaboradores dos Use Cases
    # =========================================================================

    uploader = providers.Factory(
        _lazy('src.core.tickets.uploads.OrquestradorUploadAnexos'),
        store=attachment_store,
        pasta=config.attachments.folder,
        max_workers=config.attachments.max_workers,
    )

    projetor = providers.Factory(
        _lazy('src.core.tickets.projection.TicketProjetor'),
        usuarios=usuario_directory,
        pedidos=pedido_directory,
    )

    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================

    criar_ticket_service = providers.Factory(
        _lazy(f'{USE_CASES}.CriarTicketService'),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        uploader=uploader,
        projetor=projetor,
    )

    adicionar_mensagem_service = providers.Factory(
        _lazy(f'{USE_CASES}.AdicionarMensagemService'),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        uploader=uploader,
        projetor=projetor,
    )

    atribuir_admin_service = providers.Factory(
        _lazy(f'{USE_CASES}.AtribuirAdminService'),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    atualizar_status_service = providers.Factory(
        _lazy(f'{USE_CASES}.AtualizarStatusService'),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        projetor=projetor,
    )

    # Leitura (sem UoW)
    obter_thread_service = providers.Factory(
        _lazy(f'{USE_CASES}.ObterThreadService'),
        ticket_repo=ticket_repository,
        projetor=projetor,
    )

    listar_tickets_service = providers.Factory(
        _lazy(f'{USE_CASES}.ListarTicketsService'),
        ticket_repo=ticket_repository,
        projetor=projetor,
    )

    listar_meus_tickets_service = providers.Factory(
        _lazy(f'{USE_CASES}.ListarMeusTicketsService'),
        ticket_repo=ticket_repository,
        projetor=projetor,
    )

    excluir_tickets_por_criador_service = providers.Factory(
        _lazy(f'{USE_CASES}.ExcluirTicketsPorCriadorService'),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )


def config_from_settings() -> dict:
    """Monta o dict de configuração do container a partir do settings."""
    from django.conf import settings

    return {
        'events': {
            'publisher_mode': getattr(settings, 'EVENT_PUBLISHER_MODE', 'sync'),
        },
        'cloudinary': {
            'cloud_name': settings.CLOUDINARY_CLOUD_NAME,
            'api_key': settings.CLOUDINARY_API_KEY,
            'api_secret': settings.CLOUDINARY_API_SECRET,
        },
        'attachments': {
            'folder': settings.ATTACHMENT_FOLDER,
            'max_workers': settings.ATTACHMENT_UPLOAD_MAX_WORKERS,
            'upload_timeout': settings.ATTACHMENT_UPLOAD_TIMEOUT,
        },
        'orders': {
            'api_url': settings.ORDERS_API_URL,
            'timeout': settings.ORDERS_API_TIMEOUT,
        },
    }


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria e configura a partir do settings se não existir.
    """
    global _container

    if _container is None:
        _container = Container()
        _container.config.from_dict(config_from_settings())

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None
