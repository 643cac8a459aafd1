"""
API Views JSON para o domínio de Tickets.

Endpoints:
- GET /tickets/api/ - Listar tickets
- POST /tickets/api/ - Abrir ticket
- GET /tickets/api/mine/ - Meus tickets
- GET /tickets/api/<id>/ - Ticket com thread
- POST /tickets/api/<id>/messages/ - Responder
- POST /tickets/api/<id>/assign/ - Atribuir admin
- PATCH /tickets/api/<id>/status/ - Alterar status

Formato:
- Entrada: JSON, ou multipart quando há anexos (campo `attachments`)
- Saída: JSON com estrutura {success, data/error, meta}

Autenticação:
- Session do Django; `is_staff` define o papel admin
"""

import json
import logging
from typing import Any, Dict, List

from django.views import View
from django.http import JsonResponse, HttpRequest, QueryDict
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt

from src.core.tickets.access import PAPEL_ADMIN, PAPEL_USUARIO, Principal
from src.core.tickets.dtos import (
    AdicionarMensagemInputDTO,
    ArquivoBruto,
    AtribuirAdminInputDTO,
    AtualizarStatusInputDTO,
    CriarTicketInputDTO,
)
from src.core.shared.exceptions import (
    ConcurrencyError,
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    UploadError,
    ValidationError,
)
from src.config.container import get_container

logger = logging.getLogger(__name__)

CAMPO_ANEXOS = 'attachments'


class NaoAutenticadoError(Exception):
    """Request sem usuário autenticado."""


class AcessoNegadoError(Exception):
    """Usuário autenticado sem o papel exigido."""


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValidationError: Se JSON inválido
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValidationError(f"JSON inválido: {e}", field="body")

    if not isinstance(data, dict):
        raise ValidationError("Body deve ser um objeto JSON", field="body")
    return data


def principal_from_request(request: HttpRequest) -> Principal:
    """
    Constrói o Principal a partir do usuário da sessão.

    Raises:
        NaoAutenticadoError: Se não há usuário autenticado
    """
    if not request.user.is_authenticated:
        raise NaoAutenticadoError("Autenticação necessária")

    papel = PAPEL_ADMIN if request.user.is_staff else PAPEL_USUARIO
    return Principal(usuario_id=str(request.user.pk), papel=papel)


def arquivos_do_request(request: HttpRequest) -> List[ArquivoBruto]:
    """Lê os anexos multipart na ordem em que foram enviados."""
    return [
        ArquivoBruto(
            nome_arquivo=f.name,
            conteudo=f.read(),
            content_type=f.content_type,
        )
        for f in request.FILES.getlist(CAMPO_ANEXOS)
    ]


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON / multipart
    - Principal autenticado
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        """
        Dados do form (multipart ou urlencoded) ou, na falta, do body JSON.

        O Django só popula request.POST em POST; em PATCH o form
        urlencoded é lido direto do body.
        """
        content_type = request.content_type or ''
        if content_type.startswith('multipart/'):
            return request.POST.dict()
        if content_type == 'application/x-www-form-urlencoded':
            return QueryDict(request.body).dict()
        return parse_json_body(request)

    def get_principal(self, request: HttpRequest) -> Principal:
        return principal_from_request(request)

    def get_admin(self, request: HttpRequest) -> Principal:
        """
        Raises:
            AcessoNegadoError: Se o usuário não é admin
        """
        principal = self.get_principal(request)
        if not principal.is_admin:
            raise AcessoNegadoError("Operação restrita a administradores")
        return principal

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        Mapeamento:
            ValidationError → 400
            NaoAutenticadoError → 401
            AcessoNegadoError → 403
            EntityNotFoundError → 404
            ConcurrencyError → 409
            UploadError → 502
            PersistenceError → 503
            demais → 500
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=str(e),
                status=400,
                meta={'field': getattr(e, 'field', None)}
            )

        if isinstance(e, NaoAutenticadoError):
            return json_response(success=False, error=str(e), status=401)

        if isinstance(e, AcessoNegadoError):
            return json_response(success=False, error=str(e), status=403)

        if isinstance(e, EntityNotFoundError):
            return json_response(success=False, error=str(e), status=404)

        if isinstance(e, ConcurrencyError):
            return json_response(success=False, error=str(e), status=409)

        if isinstance(e, UploadError):
            logger.warning(f"Falha de upload na API: {e}")
            return json_response(
                success=False,
                error=str(e),
                status=502,
                meta={'filename': e.nome_arquivo}
            )

        if isinstance(e, PersistenceError):
            logger.error(f"Falha de persistência na API: {e}")
            return json_response(success=False, error=str(e), status=503)

        if isinstance(e, DomainException):
            return json_response(success=False, error=str(e), status=400)

        # Erro inesperado
        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )


# =============================================================================
# Ticket API Views
# =============================================================================

class TicketAPIListView(BaseAPIView):
    """
    GET /tickets/api/ - Lista tickets
    POST /tickets/api/ - Abre ticket
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Lista tickets visíveis ao usuário, mais recentes primeiro.

        Query params:
        - status: open|in_progress|resolved|closed
        - priority: low|medium|high
        """
        try:
            principal = self.get_principal(request)

            tickets = self.get_service('listar_tickets_service').execute(
                principal,
                status=request.GET.get('status') or None,
                prioridade=request.GET.get('priority') or None,
            )

            return json_response(
                success=True,
                data=[t.to_dict() for t in tickets],
                meta={'total': len(tickets)}
            )

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Abre novo ticket.

        Campos (JSON ou multipart):
        {
            "title": "string (obrigatório)",
            "purchaseId": "string (obrigatório)",
            "priority": "low|medium|high (obrigatório)",
            "initialMessage": "string (obrigatório)"
        }
        Arquivos multipart: attachments (0..N)
        """
        try:
            principal = self.get_principal(request)
            data = self.parse_body(request)

            input_dto = CriarTicketInputDTO(
                titulo=data.get('title', ''),
                compra_id=data.get('purchaseId', ''),
                prioridade=data.get('priority', ''),
                mensagem_inicial=data.get('initialMessage', ''),
                arquivos=tuple(arquivos_do_request(request)),
            )

            output = self.get_service('criar_ticket_service').execute(principal, input_dto)

            logger.info(f"API: Ticket criado: {output.id}")

            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIMineView(BaseAPIView):
    """GET /tickets/api/mine/ - Tickets criados pelo usuário."""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            principal = self.get_principal(request)
            tickets = self.get_service('listar_meus_tickets_service').execute(principal)

            return json_response(
                success=True,
                data=[t.to_dict() for t in tickets],
                meta={'total': len(tickets)}
            )

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIDetailView(BaseAPIView):
    """GET /tickets/api/<id>/ - Ticket com thread expandida."""

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            principal = self.get_principal(request)
            ticket = self.get_service('obter_thread_service').execute(principal, pk)

            return json_response(success=True, data=ticket.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIMessagesView(BaseAPIView):
    """POST /tickets/api/<id>/messages/ - Adiciona mensagem."""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Campos: content (obrigatório). Arquivos multipart: attachments.
        """
        try:
            principal = self.get_principal(request)
            data = self.parse_body(request)

            input_dto = AdicionarMensagemInputDTO(
                ticket_id=pk,
                conteudo=data.get('content', ''),
                arquivos=tuple(arquivos_do_request(request)),
            )

            output = self.get_service('adicionar_mensagem_service').execute(
                principal, input_dto
            )

            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIAssignView(BaseAPIView):
    """POST /tickets/api/<id>/assign/ - Atribui admin (somente admin)."""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body JSON:
        {
            "adminId": "string (obrigatório)"
        }
        """
        try:
            principal = self.get_admin(request)
            data = self.parse_body(request)

            input_dto = AtribuirAdminInputDTO(
                ticket_id=pk,
                admin_id=str(data.get('adminId') or ''),
            )

            output = self.get_service('atribuir_admin_service').execute(
                principal, input_dto
            )

            logger.info(f"API: Ticket {pk} atribuído a {input_dto.admin_id}")

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIStatusView(BaseAPIView):
    """PATCH /tickets/api/<id>/status/ - Altera status (somente admin)."""

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body JSON (ou form urlencoded com o mesmo campo):
        {
            "status": "open|in_progress|resolved|closed"
        }
        """
        try:
            principal = self.get_admin(request)
            data = self.parse_body(request)

            input_dto = AtualizarStatusInputDTO(
                ticket_id=pk,
                status=data.get('status', ''),
            )

            output = self.get_service('atualizar_status_service').execute(
                principal, input_dto
            )

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)
