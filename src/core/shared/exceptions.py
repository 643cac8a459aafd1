"""
Exceções de Domínio do SupportDesk Tickets.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)
    │   └── InvalidStatusValueError (status fora do enum)
    ├── EntityNotFoundError (entidade não existe)
    ├── UploadError (falha no envio de anexos)
    ├── PersistenceError (falha de escrita no store)
    └── ConcurrencyError (versão do documento desatualizada)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            service.execute(principal, input_dto)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Lançada quando dados fornecidos não atendem aos requisitos
    mínimos para processamento (campo obrigatório ausente,
    valor fora do domínio).

    Example:
        if not titulo:
            raise ValidationError("Título é obrigatório", field="titulo")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class InvalidStatusValueError(ValidationError):
    """
    Status solicitado não pertence ao enum TicketStatus.

    Example:
        TicketStatus.from_string("archived")  # InvalidStatusValueError
    """

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Status inválido: {value}", field="status")


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Lançada quando uma busca por ID não retorna resultado.

    Example:
        ticket = repo.get_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError(f"Ticket {ticket_id} não encontrado")
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class UploadError(DomainException):
    """
    Falha ao enviar anexo para o Attachment Store.

    Aborta toda a operação de criação/resposta antes de qualquer
    escrita no repositório. Uploads concluídos do mesmo lote não
    são removidos do store.
    """

    def __init__(self, message: str, nome_arquivo: str = None):
        self.nome_arquivo = nome_arquivo
        super().__init__(message, "UPLOAD_FAILURE")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.nome_arquivo:
            result["filename"] = self.nome_arquivo
        return result


class PersistenceError(DomainException):
    """
    Falha de escrita no store de documentos.

    Se ocorrer após um lote de uploads bem-sucedido, os anexos
    enviados ficam órfãos no Attachment Store.
    """

    def __init__(self, message: str):
        super().__init__(message, "PERSISTENCE_FAILURE")


class ConcurrencyError(DomainException):
    """
    Erro de concorrência/conflito de versão.

    Lançada quando uma operação falha devido a modificação
    concorrente da entidade.

    Example:
        if entity.versao != versao_persistida:
            raise ConcurrencyError("Entidade foi modificada por outro processo")
    """

    def __init__(self, message: str):
        super().__init__(message, "CONCURRENCY_ERROR")
