"""
Migration inicial para o domínio de Tickets.

Cria a tabela:
- tickets: Documento do ticket com a thread embutida (JSON)
"""

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do ticket'
                )),
                ('titulo', models.CharField(
                    max_length=200,
                    help_text='Título descritivo do ticket'
                )),
                ('compra_id', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='ID do pedido relacionado'
                )),
                ('criador_id', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='ID do usuário criador'
                )),
                ('admin_atribuido_id', models.CharField(
                    max_length=100,
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='ID do admin responsável'
                )),
                ('status', models.CharField(
                    max_length=20,
                    choices=[
                        ('open', 'Aberto'),
                        ('in_progress', 'Em Progresso'),
                        ('resolved', 'Resolvido'),
                        ('closed', 'Fechado'),
                    ],
                    default='open',
                    db_index=True,
                    help_text='Estado atual do ticket'
                )),
                ('prioridade', models.CharField(
                    max_length=10,
                    choices=[
                        ('low', 'Baixa'),
                        ('medium', 'Média'),
                        ('high', 'Alta'),
                    ],
                    default='medium',
                    db_index=True,
                    help_text='Nível de prioridade'
                )),
                ('mensagens', models.JSONField(
                    default=list,
                    blank=True,
                    help_text='Thread de mensagens com anexos, em ordem de inserção'
                )),
                ('criado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True,
                    help_text='Data/hora de criação'
                )),
                ('atualizado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Data/hora da última atualização'
                )),
                ('versao', models.PositiveIntegerField(
                    default=1,
                    help_text='Versão do documento (controle otimista)'
                )),
            ],
            options={
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'db_table': 'tickets',
                'ordering': ['-criado_em'],
                'indexes': [
                    models.Index(fields=['status', 'criado_em'], name='tickets_status_criado_idx'),
                    models.Index(fields=['prioridade', 'criado_em'], name='tickets_prio_criado_idx'),
                    models.Index(fields=['criador_id', 'criado_em'], name='tickets_criador_criado_idx'),
                ],
            },
        ),
    ]
