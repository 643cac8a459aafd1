"""
Django Models para o domínio de Tickets.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/tickets/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Modelo de documento:
    Cada ticket é UMA linha. A thread de mensagens (com anexos) fica
    embutida no campo JSON `mensagens`, na ordem de inserção. Não há
    tabela de mensagens separada.
"""

from django.db import models
from django.utils import timezone


class TicketStatusChoices(models.TextChoices):
    """Choices para status de ticket (espelha TicketStatus do Core)."""
    ABERTO = 'open', 'Aberto'
    EM_PROGRESSO = 'in_progress', 'Em Progresso'
    RESOLVIDO = 'resolved', 'Resolvido'
    FECHADO = 'closed', 'Fechado'


class TicketPriorityChoices(models.TextChoices):
    """Choices para prioridade de ticket (espelha TicketPriority do Core)."""
    BAIXA = 'low', 'Baixa'
    MEDIA = 'medium', 'Média'
    ALTA = 'high', 'Alta'


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    Fields:
        id: UUID como primary key (gerado pela Entity)
        titulo: Título do ticket
        compra_id: Referência ao pedido (Order Reference)
        criador_id: ID do usuário que abriu o ticket
        admin_atribuido_id: ID do admin responsável
        status: Estado atual (choices)
        prioridade: Nível de prioridade (choices)
        mensagens: Thread completa, lista de dicts (JSONField)
        criado_em: Timestamp de criação
        atualizado_em: Timestamp de última atualização
        versao: Contador para controle otimista de concorrência
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do ticket"
    )

    titulo = models.CharField(
        max_length=200,
        help_text="Título descritivo do ticket"
    )

    compra_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="ID do pedido relacionado"
    )

    # Referências ao Identity Provider (strings, sem FK)
    criador_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="ID do usuário criador"
    )

    admin_atribuido_id = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID do admin responsável"
    )

    status = models.CharField(
        max_length=20,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.ABERTO,
        db_index=True,
        help_text="Estado atual do ticket"
    )

    prioridade = models.CharField(
        max_length=10,
        choices=TicketPriorityChoices.choices,
        default=TicketPriorityChoices.MEDIA,
        db_index=True,
        help_text="Nível de prioridade"
    )

    mensagens = models.JSONField(
        default=list,
        blank=True,
        help_text="Thread de mensagens com anexos, em ordem de inserção"
    )

    criado_em = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Data/hora de criação"
    )

    # Sem auto_now: o timestamp vem da Entity
    atualizado_em = models.DateTimeField(
        default=timezone.now,
        help_text="Data/hora da última atualização"
    )

    versao = models.PositiveIntegerField(
        default=1,
        help_text="Versão do documento (controle otimista)"
    )

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['status', 'criado_em'], name='tickets_status_criado_idx'),
            models.Index(fields=['prioridade', 'criado_em'], name='tickets_prio_criado_idx'),
            models.Index(fields=['criador_id', 'criado_em'], name='tickets_criador_criado_idx'),
        ]

    def __str__(self):
        return f"[{self.id[:8]}] {self.titulo}"

    def __repr__(self):
        return f"<TicketModel id={self.id[:8]} status={self.status} v{self.versao}>"
