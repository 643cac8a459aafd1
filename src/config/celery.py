"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de forma assíncrona
- Notificações por e-mail ao criador do ticket

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    celery -A src.config.celery worker -l INFO -Q default,events,notifications
"""

import os
from celery import Celery
from kombu import Queue, Exchange

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('supportdesk')

# Todas as chaves CELERY_* vêm do settings do Django
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    worker_send_task_events=True,
    task_send_sent_event=True,
)

app.conf.task_default_queue = 'default'

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
)

app.conf.task_routes = {
    'src.adapters.django_app.events.handlers.notificar_usuario': {'queue': 'notifications'},
    'src.adapters.django_app.events.handlers.*': {'queue': 'events'},
}

app.autodiscover_tasks([
    'src.adapters.django_app.events',
], related_name='handlers')
