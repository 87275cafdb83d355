"""
Async client for the partner (All-In) REST API.

OAuth2 client-credentials token, then bearer-authenticated reads of
distributors, clients and orders. Every method returns a ServiceResult and
never raises: network errors, HTTP errors and malformed bodies all become
`success=False` with a message.

Configuration (environment variables):
- PARTNER_API_URL: Base URL (default: https://allinbrasil.com.br/api/v1)
- PARTNER_CLIENT_ID / PARTNER_CLIENT_SECRET: OAuth2 client credentials
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional

import httpx

from ..models import ServiceResult

logger = logging.getLogger(__name__)

DEFAULT_PARTNER_API_URL = "https://allinbrasil.com.br/api/v1"

ORDER_SELECT_FIELDS = (
    "cliente_nome,cliente_telefone,pagamento_confirmado,itens,"
    "distribuidor_indicador_id,tipo_nome,valor_total,data_adicionado"
)
ORDER_DATE_FILTER = "data_adicionado__maior_igual"

STATUS_PAID = "Pago"
STATUS_UNPAID = "Não pago"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_quantity(item: Dict[str, Any]) -> int:
    raw = item.get("quantidade")
    if raw:
        match = _LEADING_INT.match(str(raw))
        return int(match.group(1)) if match else 0
    fallback = item.get("quantidade_int")
    return fallback if isinstance(fallback, int) and not isinstance(fallback, bool) else 0


def _first_option_sku(item: Dict[str, Any]) -> Optional[str]:
    options = item.get("produto_opcoes")
    if not isinstance(options, list) or not options or not isinstance(options[0], dict):
        return None
    first = options[0]
    sku = first.get("produto_opcao_sku")
    return sku if sku is not None else first.get("sku")


def _coalesce(mapping: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def normalize_item(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "product": _coalesce(item, "produto_descricao", "produto_nome"),
        "model": item.get("produto_modelo"),
        "sku": _first_option_sku(item),
        "quantity": _parse_quantity(item),
        "unit_price": _coalesce(item, "valor_unitario", "valor_unitario_formatado"),
        "total": item.get("valor_total"),
    }


def normalize_order(order: Dict[str, Any]) -> Dict[str, Any]:
    """Reshape a raw partner order into the internal order record"""
    items = order.get("itens")
    return {
        "id": order.get("id"),
        "client": order.get("cliente_nome"),
        "sponsor": order.get("distribuidor_indicador_id"),
        "client_type": _coalesce(order, "tipo_nome", "cliente_tipo_pessoa_id"),
        "phone": order.get("cliente_telefone"),
        "total": order.get("valor_total"),
        "status": STATUS_PAID if order.get("pagamento_confirmado") == "1" else STATUS_UNPAID,
        "items": [normalize_item(it) for it in items if isinstance(it, dict)] if isinstance(items, list) else [],
        "added_at": order.get("data_adicionado"),
    }


class PartnerApiClient:
    """Partner REST API client (httpx, async)"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or os.getenv("PARTNER_API_URL") or DEFAULT_PARTNER_API_URL).rstrip("/")
        self.client_id = client_id if client_id is not None else os.getenv("PARTNER_CLIENT_ID", "")
        self.client_secret = client_secret if client_secret is not None else os.getenv("PARTNER_CLIENT_SECRET", "")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    @staticmethod
    def _auth(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def get_token(self) -> ServiceResult[str]:
        if not self.client_id or not self.client_secret:
            return ServiceResult.fail("Partner API credentials not configured (PARTNER_CLIENT_ID / PARTNER_CLIENT_SECRET)")

        try:
            async with self._client() as client:
                response = await client.post(
                    "/auth/token",
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "grant_type": "client_credentials",
                    },
                )
            if not response.is_success:
                return ServiceResult.fail(f"Failed to get token: {response.status_code} {response.text}")

            token = response.json().get("access_token")
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.error(f"Error getting partner access token: {e}")
            return ServiceResult.fail(f"Error getting access token: {e}")

        if not token:
            return ServiceResult.fail("Token response without access_token")
        return ServiceResult.ok(token)

    async def _get_list(self, path: str, key: str, token: str, label: str) -> ServiceResult[List[Any]]:
        try:
            async with self._client() as client:
                response = await client.get(path, headers=self._auth(token))
            if not response.is_success:
                return ServiceResult.fail(f"Failed to fetch {label}: {response.status_code} {response.text}")
            data = response.json().get(key)
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.error(f"Error fetching {label}: {e}")
            return ServiceResult.fail(f"Error fetching {label}: {e}")

        if not isinstance(data, list):
            return ServiceResult.fail(f"Unexpected data structure for {label}")
        return ServiceResult.ok(data)

    async def get_distributors(self, token: str) -> ServiceResult[List[Any]]:
        return await self._get_list("/distribuidores", "distribuidores", token, "distributors")

    async def get_clients(self, token: str) -> ServiceResult[List[Any]]:
        return await self._get_list("/clientes", "clientes", token, "clients")

    async def get_orders(self, token: str, start_date: Optional[str] = None) -> ServiceResult[List[Dict[str, Any]]]:
        """
        Fetch orders, optionally only those added on or after `start_date`
        ("YYYY-MM-DD HH:MM:SS"), normalized with normalize_order.
        """
        params = {"select": ORDER_SELECT_FIELDS}
        if start_date:
            params[ORDER_DATE_FILTER] = start_date

        try:
            async with self._client() as client:
                response = await client.get("/pedidos", params=params, headers=self._auth(token))
        except httpx.HTTPError as e:
            logger.error(f"Error fetching orders: {e}")
            return ServiceResult.fail(f"Error fetching orders: {e}")

        if response.status_code == 404:
            return ServiceResult.fail(
                f"Pedidos endpoint not accessible (404). Likely missing [pedidos] scope. Details: {response.text}"
            )
        if not response.is_success:
            return ServiceResult.fail(f"Failed to fetch orders: {response.status_code} {response.text}")

        try:
            body = response.json()
        except ValueError as e:
            return ServiceResult.fail(f"Failed to parse orders data: {e}")

        orders = body.get("pedidos") if isinstance(body, dict) else None
        if not isinstance(orders, list):
            return ServiceResult.fail("Unexpected data structure for orders")

        normalized = [normalize_order(order) for order in orders if isinstance(order, dict)]
        logger.info(f"Fetched {len(normalized)} partner orders (since {start_date or 'beginning'})")
        return ServiceResult.ok(normalized)
