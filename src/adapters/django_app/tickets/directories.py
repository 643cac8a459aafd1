"""
Diretórios de referência usados na projeção.

- DjangoUsuarioDirectory: Identity Provider = django.contrib.auth
- HttpPedidoDirectory: Order Reference = API remota de pedidos

Ambos respondem em lote; ids desconhecidos simplesmente não
aparecem no resultado e a projeção os expande como None.
"""

from typing import Dict, Iterable
import logging

import requests
from django.contrib.auth import get_user_model

from src.core.tickets.dtos import PedidoResumoDTO, UsuarioResumoDTO

logger = logging.getLogger(__name__)


class DjangoUsuarioDirectory:
    """
    Resumos de usuários a partir do User model do Django.

    Só expõe username, nome e e-mail; nunca senha ou flags internas.
    """

    def obter_resumos(self, usuario_ids: Iterable[str]) -> Dict[str, UsuarioResumoDTO]:
        ids = [i for i in usuario_ids if str(i).isdigit()]
        if not ids:
            return {}

        User = get_user_model()
        usuarios = User.objects.filter(pk__in=ids).only(
            'pk', 'username', 'first_name', 'last_name', 'email'
        )

        return {
            str(u.pk): UsuarioResumoDTO(
                id=str(u.pk),
                username=u.get_username(),
                first_name=u.first_name,
                last_name=u.last_name,
                email=u.email,
            )
            for u in usuarios
        }


class HttpPedidoDirectory:
    """
    Resumos de pedidos consultados na API de pedidos.

    Contrato:
        GET <base_url>/orders/?ids=a,b,c
        200 → [{"id", "orderNumber", "items", "totalAmount"}, ...]

    Indisponibilidade da API não derruba a leitura do ticket: o
    erro é registrado e os pedidos ficam sem expansão.
    """

    def __init__(self, base_url: str, timeout: float = 5):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout

    def obter_resumos(self, pedido_ids: Iterable[str]) -> Dict[str, PedidoResumoDTO]:
        ids = [i for i in pedido_ids if i]
        if not ids or not self.base_url:
            return {}

        try:
            response = requests.get(
                f"{self.base_url}/orders/",
                params={"ids": ",".join(ids)},
                timeout=self.timeout,
            )
            response.raise_for_status()
            pedidos = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"API de pedidos indisponível ({len(ids)} id(s)): {e}")
            return {}

        if not isinstance(pedidos, list):
            logger.warning(
                f"API de pedidos respondeu {type(pedidos).__name__} em vez de lista; "
                f"pedidos não expandidos"
            )
            return {}

        return {
            str(p["id"]): PedidoResumoDTO(
                id=str(p["id"]),
                numero_pedido=p.get("orderNumber", ""),
                itens=tuple(p.get("items") or ()),
                valor_total=p.get("totalAmount"),
            )
            for p in pedidos
            if isinstance(p, dict) and p.get("id") is not None
        }
