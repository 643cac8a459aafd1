"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
a lógica de negócio coordenando entidades, repositórios, upload de
anexos e eventos.

Use Cases implementados:
- CriarTicketService: Abre ticket com mensagem inicial e anexos
- AdicionarMensagemService: Responde na thread (com anexos)
- AtribuirAdminService: Atribui admin (força in_progress)
- ObterThreadService: Ticket completo com thread expandida
- ListarTicketsService: Listagem com escopo por papel
- ListarMeusTicketsService: Tickets criados pelo principal
- AtualizarStatusService: Sobrescreve status validado
- ExcluirTicketsPorCriadorService: Limpeza na exclusão de conta

Ordem garantida nas operações com anexos:
    1. Validar entrada
    2. Enviar TODOS os anexos (fora de transação)
    3. Abrir UoW, mutar entidade, persistir, enfileirar evento
    Se o passo 2 falhar, nada é persistido.
"""

from typing import List, Optional
import logging

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import EntityNotFoundError

from .access import (
    Principal,
    escopo_de_listagem,
    escopo_do_criador,
    pode_ver_ticket,
)
from .dtos import (
    AdicionarMensagemInputDTO,
    AtribuirAdminInputDTO,
    AtualizarStatusInputDTO,
    CriarTicketInputDTO,
    TicketExpandidoDTO,
    TicketOutputDTO,
)
from .entities import Mensagem, TicketEntity, TicketPriority, TicketStatus
from .events import (
    AdminAtribuidoEvent,
    MensagemAdicionadaEvent,
    StatusAlteradoEvent,
    TicketCriadoEvent,
    TicketsExcluidosEvent,
)
from .ports import TicketRepository
from .projection import TicketProjetor
from .uploads import OrquestradorUploadAnexos

logger = logging.getLogger(__name__)


def _buscar_ticket(
    ticket_repo: TicketRepository,
    ticket_id: str,
    principal: Optional[Principal] = None,
) -> TicketEntity:
    """
    Carrega ticket ou lança EntityNotFoundError.

    Com principal informado, tickets fora do escopo dele também
    respondem "não encontrado" (a existência não é revelada).
    """
    ticket = ticket_repo.get_by_id(ticket_id)

    if ticket is None or (principal and not pode_ver_ticket(principal, ticket)):
        raise EntityNotFoundError(
            f"Ticket {ticket_id} não encontrado",
            entity_type="Ticket",
            entity_id=ticket_id,
        )

    return ticket


class CriarTicketService:
    """
    Use Case: Abrir um novo ticket.

    Fluxo:
    1. Validar dados de entrada (antes de qualquer upload)
    2. Enviar anexos da mensagem inicial em paralelo
    3. Criar entidade (status sempre "open", uma mensagem)
    4. Persistir via repositório
    5. Disparar evento TicketCriado
    6. Retornar ticket expandido

    Example:
        service = CriarTicketService(ticket_repo, uow, uploader, projetor)
        output = service.execute(principal, CriarTicketInputDTO(
            titulo="Refund request",
            compra_id="P1",
            prioridade="high",
            mensagem_inicial="Item arrived damaged",
        ))
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        uploader: OrquestradorUploadAnexos,
        projetor: TicketProjetor,
    ):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.uploader = uploader
        self.projetor = projetor

    def execute(
        self,
        principal: Principal,
        input_dto: CriarTicketInputDTO,
    ) -> TicketExpandidoDTO:
        """
        Raises:
            ValidationError: Se dados inválidos
            UploadError: Se algum anexo falhar (nada é persistido)
            PersistenceError: Se a escrita falhar
        """
        prioridade = TicketPriority.from_string(input_dto.prioridade)
        TicketEntity.validar_abertura(
            titulo=input_dto.titulo,
            compra_id=input_dto.compra_id,
            criador_id=principal.usuario_id,
            mensagem_inicial=input_dto.mensagem_inicial,
        )

        anexos = self.uploader.enviar(input_dto.arquivos)

        with self.uow:
            ticket = TicketEntity.criar(
                titulo=input_dto.titulo,
                compra_id=input_dto.compra_id,
                criador_id=principal.usuario_id,
                prioridade=prioridade,
                mensagem_inicial=input_dto.mensagem_inicial,
                anexos=anexos,
            )

            self.ticket_repo.insert(ticket)

            self.uow.publish_event(
                TicketCriadoEvent(
                    aggregate_id=ticket.id,
                    criador_id=ticket.criador_id,
                    titulo=ticket.titulo,
                    prioridade=ticket.prioridade.value,
                    compra_id=ticket.compra_id,
                    total_anexos=len(anexos),
                )
            )

        logger.info(f"Ticket criado: {ticket.id} por {principal.usuario_id}")

        return self.projetor.projetar(ticket)


class AdicionarMensagemService:
    """
    Use Case: Adicionar mensagem à thread.

    Fluxo:
    1. Buscar ticket (NotFound se ausente ou fora do escopo)
    2. Enviar anexos, se houver (falha aborta sem append)
    3. Adicionar mensagem ao final da thread
    4. Salvar o documento inteiro (checagem de versão)
    5. Disparar evento MensagemAdicionada

    A ordem da thread é a ordem em que os saves são concluídos.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        uploader: OrquestradorUploadAnexos,
        projetor: TicketProjetor,
    ):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.uploader = uploader
        self.projetor = projetor

    def execute(
        self,
        principal: Principal,
        input_dto: AdicionarMensagemInputDTO,
    ) -> TicketExpandidoDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe
            ValidationError: Se conteúdo vazio
            UploadError: Se algum anexo falhar
            ConcurrencyError: Se o ticket mudou durante o upload
        """
        ticket = _buscar_ticket(self.ticket_repo, input_dto.ticket_id, principal)
        Mensagem.validar(principal.usuario_id, input_dto.conteudo)

        anexos = self.uploader.enviar(input_dto.arquivos)

        with self.uow:
            mensagem = ticket.adicionar_mensagem(
                remetente_id=principal.usuario_id,
                conteudo=input_dto.conteudo,
                anexos=anexos,
            )

            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                MensagemAdicionadaEvent(
                    aggregate_id=ticket.id,
                    remetente_id=mensagem.remetente_id,
                    criador_id=ticket.criador_id,
                    posicao=len(ticket.mensagens) - 1,
                    total_anexos=len(anexos),
                )
            )

        logger.info(
            f"Mensagem #{len(ticket.mensagens) - 1} adicionada ao ticket {ticket.id}"
        )

        return self.projetor.projetar(ticket)


class AtribuirAdminService:
    """
    Use Case: Atribuir ticket a um admin.

    Efeito colateral documentado: o status passa a "in_progress"
    qualquer que seja o status anterior. Retorna o ticket sem
    expansão de referências.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(
        self,
        principal: Principal,
        input_dto: AtribuirAdminInputDTO,
    ) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe
            ValidationError: Se admin_id vazio
        """
        with self.uow:
            ticket = _buscar_ticket(self.ticket_repo, input_dto.ticket_id)
            status_anterior = ticket.status.value

            ticket.atribuir_admin(input_dto.admin_id)

            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                AdminAtribuidoEvent(
                    aggregate_id=ticket.id,
                    admin_id=input_dto.admin_id,
                    criador_id=ticket.criador_id,
                    status_anterior=status_anterior,
                    atribuido_por_id=principal.usuario_id,
                )
            )

        logger.info(f"Ticket {ticket.id} atribuído a {input_dto.admin_id}")

        return TicketOutputDTO.from_entity(ticket)


class ObterThreadService:
    """
    Use Case: Obter ticket com a thread completa expandida.

    Não usa UoW pois é operação de leitura.
    """

    def __init__(self, ticket_repo: TicketRepository, projetor: TicketProjetor):
        self.ticket_repo = ticket_repo
        self.projetor = projetor

    def execute(self, principal: Principal, ticket_id: str) -> TicketExpandidoDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe ou não é visível
        """
        ticket = _buscar_ticket(self.ticket_repo, ticket_id, principal)
        return self.projetor.projetar(ticket)


class ListarTicketsService:
    """
    Use Case: Listar tickets com escopo por papel.

    Admin vê todos; demais papéis só os próprios, mesmo que os
    filtros não mencionem criador. Sempre do mais novo ao mais antigo.
    """

    def __init__(self, ticket_repo: TicketRepository, projetor: TicketProjetor):
        self.ticket_repo = ticket_repo
        self.projetor = projetor

    def execute(
        self,
        principal: Principal,
        status: Optional[str] = None,
        prioridade: Optional[str] = None,
    ) -> List[TicketExpandidoDTO]:
        filtro = escopo_de_listagem(principal, status=status, prioridade=prioridade)
        tickets = self.ticket_repo.find(filtro)
        return self.projetor.projetar_lista(tickets)


class ListarMeusTicketsService:
    """Use Case: Listar tickets criados pelo próprio principal."""

    def __init__(self, ticket_repo: TicketRepository, projetor: TicketProjetor):
        self.ticket_repo = ticket_repo
        self.projetor = projetor

    def execute(self, principal: Principal) -> List[TicketExpandidoDTO]:
        tickets = self.ticket_repo.find(escopo_do_criador(principal))
        return self.projetor.projetar_lista(tickets)


class AtualizarStatusService:
    """
    Use Case: Alterar status explicitamente.

    Valida o valor contra o enum; não há regra de adjacência entre
    estados. Com valor inválido nada é salvo.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        projetor: TicketProjetor,
    ):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.projetor = projetor

    def execute(
        self,
        principal: Principal,
        input_dto: AtualizarStatusInputDTO,
    ) -> TicketExpandidoDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe
            InvalidStatusValueError: Se status fora do enum
        """
        with self.uow:
            ticket = _buscar_ticket(self.ticket_repo, input_dto.ticket_id)
            novo_status = TicketStatus.from_string(input_dto.status)
            status_anterior = ticket.status.value

            ticket.alterar_status(novo_status)

            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                StatusAlteradoEvent(
                    aggregate_id=ticket.id,
                    criador_id=ticket.criador_id,
                    status_anterior=status_anterior,
                    status_novo=novo_status.value,
                    alterado_por_id=principal.usuario_id,
                )
            )

        logger.info(
            f"Status do ticket {ticket.id}: {status_anterior} -> {novo_status.value}"
        )

        return self.projetor.projetar(ticket)


class ExcluirTicketsPorCriadorService:
    """
    Use Case: Excluir todos os tickets de um usuário.

    Chamado pelo fluxo de exclusão de conta do Identity Provider,
    não por usuários finais.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, usuario_id: str) -> int:
        """
        Returns:
            Quantidade de tickets removidos
        """
        with self.uow:
            total = self.ticket_repo.delete_by_criador(usuario_id)

            if total:
                self.uow.publish_event(
                    TicketsExcluidosEvent(aggregate_id=usuario_id, total=total)
                )

        logger.info(f"{total} ticket(s) do usuário {usuario_id} excluídos")

        return total
