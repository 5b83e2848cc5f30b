# online_shop/client/api_client.py
"""
Cliente HTTP de la API de la tienda.

Es la capa de datos que usan los consumidores de la API (interfaz web,
scripts, otros servicios). Encapsula un `httpx.AsyncClient` con la URL base,
el timeout y las cabeceras por defecto, y normaliza cualquier llamada en un
`ApiResult` uniforme mediante `api_call`.

Uso típico:
    async with ShopAPIClient() as client:
        result = await api_call(client.get_product_by_id, 42)
        if result.success:
            print(result.data["data"]["name"])
        else:
            print(result.status, result.error)
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_API_PREFIX = "/api"
DEFAULT_TIMEOUT = 10.0


@dataclass
class ApiResult:
    """Resultado normalizado de una llamada a la API."""
    success: bool
    status: int
    data: Any = None
    error: Optional[str] = None


class ShopAPIClient:
    """
    Cliente asíncrono de la API.

    Los métodos devuelven el `httpx.Response` y lanzan `httpx.HTTPStatusError`
    ante respuestas 4xx/5xx; `api_call` es quien convierte ambos casos en un
    `ApiResult`.

    El token bearer es opcional: si existe se envía en cada petición. El
    servidor actual no lo verifica; un 401 limpia el token guardado.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_prefix: str = DEFAULT_API_PREFIX,
        timeout: float = DEFAULT_TIMEOUT,
        auth_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_prefix = api_prefix
        self.auth_token = auth_token
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
            event_hooks={"request": [self._add_auth_header], "response": [self._handle_unauthorized]},
        )

    async def __aenter__(self) -> "ShopAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ========================================
    # INTERCEPTORES
    # ========================================

    async def _add_auth_header(self, request: httpx.Request) -> None:
        if self.auth_token:
            request.headers["Authorization"] = f"Bearer {self.auth_token}"

    async def _handle_unauthorized(self, response: httpx.Response) -> None:
        if response.status_code == 401 and self.auth_token:
            logger.warning("Token rechazado por el servidor; se descarta")
            self.auth_token = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = await self._client.request(method, path, **kwargs)
        response.raise_for_status()
        return response

    def _api(self, path: str) -> str:
        return f"{self.api_prefix}{path}"

    # ========================================
    # PRODUCTOS
    # ========================================

    async def get_all_products(self) -> httpx.Response:
        return await self._request("GET", self._api("/products"))

    async def get_product_by_id(self, product_id: int) -> httpx.Response:
        return await self._request("GET", self._api(f"/products/{product_id}"))

    async def create_product(self, product_data: Dict[str, Any]) -> httpx.Response:
        return await self._request("POST", self._api("/products"), json=product_data)

    async def update_product(self, product_id: int, product_data: Dict[str, Any]) -> httpx.Response:
        return await self._request("PUT", self._api(f"/products/{product_id}"), json=product_data)

    async def delete_product(self, product_id: int) -> httpx.Response:
        return await self._request("DELETE", self._api(f"/products/{product_id}"))

    async def get_low_stock_products(self, threshold: int = 5) -> httpx.Response:
        return await self._request("GET", self._api("/products/low-stock"), params={"threshold": threshold})

    async def get_products_by_category(self, category_id: int) -> httpx.Response:
        return await self._request("GET", self._api(f"/products/category/{category_id}"))

    async def adjust_stock(self, product_id: int, delta: int) -> httpx.Response:
        return await self._request("PATCH", self._api(f"/products/{product_id}/stock"), json={"delta": delta})

    async def check_stock(self, product_id: int, quantity: int) -> httpx.Response:
        return await self._request(
            "GET", self._api(f"/products/{product_id}/stock-check"), params={"quantity": quantity}
        )

    # ========================================
    # CATEGORÍAS
    # ========================================

    async def get_categories(self) -> httpx.Response:
        return await self._request("GET", self._api("/categories"))

    # ========================================
    # HEALTH CHECKS
    # ========================================

    async def check_health(self) -> httpx.Response:
        return await self._request("GET", "/health")

    async def check_database_health(self) -> httpx.Response:
        return await self._request("GET", "/health/db")


async def api_call(api_function: Callable[..., Awaitable[httpx.Response]], *args: Any, **kwargs: Any) -> ApiResult:
    """
    Ejecuta una llamada del cliente y normaliza el resultado.

    - Éxito: `ApiResult(success=True, data=<JSON>, status=<código>)`
    - Error HTTP: `error` es el `message` del cuerpo (o el texto del error)
    - Error de transporte: `status=500` y el texto de la excepción
    """
    try:
        response = await api_function(*args, **kwargs)
        return ApiResult(success=True, data=response.json(), status=response.status_code)
    except httpx.HTTPStatusError as exc:
        logger.error(f"Error en llamada a la API: {exc}")
        message = None
        try:
            body = exc.response.json()
            if isinstance(body, dict):
                message = body.get("message")
        except ValueError:
            pass
        return ApiResult(success=False, status=exc.response.status_code, error=message or str(exc))
    except httpx.HTTPError as exc:
        logger.error(f"Error en llamada a la API: {exc}")
        return ApiResult(success=False, status=500, error=str(exc) or type(exc).__name__)
