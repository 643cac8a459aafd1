"""
Core Domain Layer - O Hexágono.

Lógica de negócio pura do SupportDesk Tickets (ciclo de vida de tickets,
thread de mensagens, upload de anexos, escopo de acesso).
Não importa Django nem clientes HTTP: todo I/O passa por ports.
"""
