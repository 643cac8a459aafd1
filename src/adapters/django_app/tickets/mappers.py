"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter TicketEntity → TicketModel (para persistência)
- Converter TicketModel → TicketEntity (para uso no Core)
- Serializar a thread de mensagens para o campo JSON

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from typing import Iterable, List

from src.core.tickets.entities import (
    Mensagem,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)

from .models import TicketModel


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    Responsável por:
    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    - to_entity_list(): List[Model] → List[Entity]
    - campos_documento(): Entity → dict de colunas regraváveis
    """

    @staticmethod
    def campos_documento(entity: TicketEntity) -> dict:
        """
        Colunas regravadas a cada save (tudo menos id e versao).

        Args:
            entity: Entidade de domínio

        Returns:
            Dict pronto para QuerySet.update()
        """
        return {
            'titulo': entity.titulo,
            'compra_id': entity.compra_id,
            'criador_id': entity.criador_id,
            'admin_atribuido_id': entity.admin_atribuido_id,
            'status': entity.status.value,
            'prioridade': entity.prioridade.value,
            'mensagens': [m.to_dict() for m in entity.mensagens],
            'criado_em': entity.criado_em,
            'atualizado_em': entity.atualizado_em,
        }

    @staticmethod
    def to_model(entity: TicketEntity) -> TicketModel:
        """
        Converte TicketEntity para TicketModel.

        Note:
            Não chama .save() - deixa isso para o Repository
        """
        return TicketModel(
            id=entity.id,
            versao=entity.versao,
            **TicketMapper.campos_documento(entity),
        )

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa validações do factory method .criar()
            pois dados já foram validados na criação original
        """
        return TicketEntity(
            id=model.id,
            titulo=model.titulo,
            compra_id=model.compra_id,
            status=TicketStatus(model.status),
            prioridade=TicketPriority(model.prioridade),
            criador_id=model.criador_id,
            admin_atribuido_id=model.admin_atribuido_id,
            mensagens=[Mensagem.from_dict(m) for m in (model.mensagens or [])],
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            versao=model.versao,
        )

    @staticmethod
    def to_entity_list(models: Iterable[TicketModel]) -> List[TicketEntity]:
        return [TicketMapper.to_entity(model) for model in models]
